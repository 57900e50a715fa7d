"""Query and mutation operations of the recipe catalog.

:class:`RecipeCatalog` is stateless apart from the repository handed to it.
Raw request data is validated through :mod:`recipe_catalog.schemas` before
any repository call, so invalid input never reaches the store.
"""

from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional

from . import schemas
from .matching import paginate, rank_by_ingredients, title_matches
from .models import Recipe
from .storage import RecipeRepository

logger = logging.getLogger(__name__)


class RecipeCatalog:
    def __init__(self, storage: RecipeRepository) -> None:
        self.storage = storage

    # Queries

    def list_recipes(self, params: Optional[Mapping[str, Any]] = None) -> List[Recipe]:
        """Return one page of non-deleted recipes whose title contains ``search``."""

        query = schemas.parse(schemas.ListQuery, params)
        found = (
            recipe
            for recipe in self.storage.list_recipes(deleted=False)
            if title_matches(recipe.title, query.search)
        )
        return paginate(found, query.page, query.limit)

    def match_ingredients(self, payload: Optional[Mapping[str, Any]]) -> List[Recipe]:
        query = schemas.parse(schemas.IngredientQuery, payload)
        ranked = rank_by_ingredients(self.storage.list_recipes(deleted=False), query.ingredients)
        return [recipe for recipe in ranked if title_matches(recipe.title, query.search)]

    def list_trashed(self) -> List[Recipe]:
        return list(self.storage.list_recipes(deleted=True))

    def get_recipe(self, recipe_id: str) -> Recipe:
        return self.storage.get_recipe(recipe_id)

    # Mutations

    def create_recipe(self, payload: Optional[Mapping[str, Any]]) -> Recipe:
        recipe_in = schemas.parse(schemas.RecipeCreate, payload)
        recipe = self.storage.add_recipe(recipe_in.model_dump())
        logger.info("Created recipe %s (%s)", recipe.id, recipe.title)
        return recipe

    def update_recipe(self, recipe_id: str, payload: Optional[Mapping[str, Any]]) -> None:
        changes = schemas.parse(schemas.RecipeUpdate, payload).changes()
        self.storage.update_recipe(recipe_id, changes)
        logger.info("Updated recipe %s fields: %s", recipe_id, sorted(changes))

    def soft_delete(self, recipe_id: str) -> None:
        self.storage.set_deleted(recipe_id, True)
        logger.info("Moved recipe %s to trash", recipe_id)

    def restore(self, recipe_id: str) -> None:
        self.storage.set_deleted(recipe_id, False)
        logger.info("Restored recipe %s", recipe_id)

    def purge(self, recipe_id: str) -> None:
        self.storage.purge_recipe(recipe_id)
        logger.info("Permanently deleted recipe %s", recipe_id)

    def rate(self, recipe_id: str, payload: Optional[Mapping[str, Any]]) -> Recipe:
        rating = schemas.parse(schemas.RatingRequest, payload)
        recipe = self.storage.rate_recipe(recipe_id, rating.score)
        logger.info(
            "Rated recipe %s with %d (now %d ratings)", recipe_id, rating.score, recipe.num_ratings
        )
        return recipe


__all__ = ["RecipeCatalog"]
