from __future__ import annotations

import sys
from dataclasses import replace
from itertools import islice
from typing import Iterable, List, Optional

from .models import Recipe


def title_matches(title: str, search: Optional[str]) -> bool:
    """Case-insensitive substring match; an empty search matches everything."""

    if not search:
        return True
    return search.casefold() in (title or "").casefold()


def count_matches(recipe_ingredients: Iterable[str], wanted: Iterable[str]) -> int:
    return len(set(recipe_ingredients) & set(wanted))


def _ranking_key(recipe: Recipe):
    rating = recipe.rating
    return (
        -(recipe.matched_ingredients or 0),
        rating is None,
        -(rating or 0.0),
        (recipe.title or "").casefold(),
        recipe.id,
    )


def rank_by_ingredients(recipes: Iterable[Recipe], wanted: Iterable[str]) -> List[Recipe]:
    """Return recipes sharing at least one ingredient with ``wanted``.

    Each result carries its match count in ``matched_ingredients``. Results
    are ordered by match count, then rating (unrated last), then title.
    """

    wanted_set = set(wanted)
    if not wanted_set:
        return []

    matched = []
    for recipe in recipes:
        count = count_matches(recipe.ingredients, wanted_set)
        if count > 0:
            matched.append(replace(recipe, matched_ingredients=count))

    matched.sort(key=_ranking_key)
    return matched


def paginate(recipes: Iterable[Recipe], page: int, limit: int) -> List[Recipe]:
    start = (page - 1) * limit
    if start >= sys.maxsize:
        return []
    return list(islice(recipes, start, min(start + limit, sys.maxsize)))


__all__ = ["count_matches", "paginate", "rank_by_ingredients", "title_matches"]
