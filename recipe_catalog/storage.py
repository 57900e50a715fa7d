from __future__ import annotations

from typing import Any, Iterable, Mapping, Protocol

from .models import Recipe


class RecipeRepository(Protocol):
    """Protocol describing the behaviour required by the catalog services."""

    def list_recipes(self, *, deleted: bool = False) -> Iterable[Recipe]:
        """Return stored recipes whose soft-delete flag equals ``deleted``."""

    def get_recipe(self, recipe_id: str) -> Recipe:
        """Return a single recipe or raise :class:`RecipeNotFound` if missing."""

    def add_recipe(self, fields: Mapping[str, Any]) -> Recipe:
        """Persist a new, non-deleted and unrated recipe and return it."""

    def update_recipe(self, recipe_id: str, fields: Mapping[str, Any]) -> None:
        """Overwrite ``fields`` on an existing recipe; unknown ids are ignored."""

    def set_deleted(self, recipe_id: str, deleted: bool) -> None:
        """Toggle the soft-delete flag; unknown ids are ignored."""

    def purge_recipe(self, recipe_id: str) -> None:
        """Remove a recipe for good; unknown ids are ignored."""

    def rate_recipe(self, recipe_id: str, score: int) -> Recipe:
        """Atomically add one rating of ``score`` and return the updated recipe.

        Raises :class:`RecipeNotFound` if the recipe does not exist.
        """

    def close(self) -> None:
        """Release the underlying store connection."""


__all__ = ["RecipeRepository"]
