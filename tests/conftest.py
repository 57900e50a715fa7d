from __future__ import annotations

from pathlib import Path
import sys
import uuid
from dataclasses import replace
from datetime import datetime, timezone

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from recipe_catalog import create_app
from recipe_catalog.errors import RecipeNotFound
from recipe_catalog.models import Recipe


class InMemoryRecipeStorage:
    """Simple storage backend used for tests."""

    def __init__(self) -> None:
        self._recipes: dict[str, Recipe] = {}
        self.closed = False

    def list_recipes(self, *, deleted: bool = False):
        return [replace(recipe) for recipe in self._recipes.values() if recipe.deleted == deleted]

    def get_recipe(self, recipe_id: str) -> Recipe:
        try:
            return replace(self._recipes[recipe_id])
        except KeyError:
            raise RecipeNotFound(recipe_id) from None

    def add_recipe(self, fields) -> Recipe:
        recipe = Recipe(
            id=uuid.uuid4().hex,
            title=fields["title"],
            description=fields.get("description") or "",
            ingredients=list(fields["ingredients"]),
            thumbnail=fields.get("thumbnail"),
            source_url=fields.get("source_url"),
            created_at=datetime.now(timezone.utc),
        )
        self._recipes[recipe.id] = recipe
        return replace(recipe)

    def update_recipe(self, recipe_id: str, fields) -> None:
        recipe = self._recipes.get(recipe_id)
        if recipe is not None:
            self._recipes[recipe_id] = replace(recipe, **fields)

    def set_deleted(self, recipe_id: str, deleted: bool) -> None:
        self.update_recipe(recipe_id, {"deleted": deleted})

    def purge_recipe(self, recipe_id: str) -> None:
        self._recipes.pop(recipe_id, None)

    def rate_recipe(self, recipe_id: str, score: int) -> Recipe:
        recipe = self.get_recipe(recipe_id)
        self.update_recipe(
            recipe_id,
            {"num_ratings": recipe.num_ratings + 1, "total_score": recipe.total_score + score},
        )
        return self.get_recipe(recipe_id)

    def close(self) -> None:
        self.closed = True

    def add(self, title: str, ingredients: list[str], **fields) -> Recipe:
        return self.add_recipe({"title": title, "ingredients": ingredients, **fields})


@pytest.fixture
def storage() -> InMemoryRecipeStorage:
    return InMemoryRecipeStorage()


@pytest.fixture
def client(storage):
    app = create_app(storage=storage)
    app.config.update(TESTING=True)
    return app.test_client()
