class CatalogError(Exception):
    """Base class for errors raised by the recipe catalog."""

    status_code = 500


class InvalidRecipe(CatalogError):
    status_code = 400


class RecipeNotFound(CatalogError, KeyError):
    """Raised when an identifier does not resolve to a stored recipe."""

    status_code = 404

    def __init__(self, recipe_id: str) -> None:
        super().__init__(f"Recipe '{recipe_id}' does not exist.")
        self.recipe_id = recipe_id

    def __str__(self) -> str:
        # KeyError quotes its argument otherwise.
        return str(self.args[0])


__all__ = ["CatalogError", "InvalidRecipe", "RecipeNotFound"]
