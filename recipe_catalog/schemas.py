"""Request schemas validated at the HTTP boundary.

Every model ignores unknown keys, so system-managed fields such as
``deleted`` or the rating counters never reach the storage layer from a
request body.
"""

from typing import Any, List, Mapping, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import InvalidRecipe

DEFAULT_PAGE_SIZE = 20

Model = TypeVar("Model", bound=BaseModel)


def _strip_title(value: Optional[str]) -> str:
    value = (value or "").strip()
    if not value:
        raise ValueError("title must not be empty")
    return value


class RecipeCreate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    title: str
    ingredients: List[str]
    description: Optional[str] = None
    thumbnail: Optional[str] = None
    source_url: Optional[str] = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v):
        return _strip_title(v)


class RecipeUpdate(BaseModel):
    """Partial update; only these fields may be changed by callers."""

    model_config = ConfigDict(extra="ignore")

    title: Optional[str] = None
    ingredients: Optional[List[str]] = None
    description: Optional[str] = None
    thumbnail: Optional[str] = None
    source_url: Optional[str] = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v):
        # Runs only for values the caller sent, including an explicit null.
        return _strip_title(v)

    @field_validator("ingredients")
    @classmethod
    def ingredients_not_null(cls, v):
        if v is None:
            raise ValueError("ingredients must be a list")
        return v

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


class IngredientQuery(BaseModel):
    model_config = ConfigDict(extra="ignore")

    ingredients: List[str]
    search: Optional[str] = None


class RatingRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    score: int = Field(ge=1, le=5, strict=True)


class ListQuery(BaseModel):
    model_config = ConfigDict(extra="ignore")

    search: str = ""
    page: int = 1
    limit: int = DEFAULT_PAGE_SIZE

    @field_validator("page", mode="before")
    @classmethod
    def default_page(cls, v):
        return _positive_int(v, 1)

    @field_validator("limit", mode="before")
    @classmethod
    def default_limit(cls, v):
        return _positive_int(v, DEFAULT_PAGE_SIZE)


def _positive_int(value: Any, default: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number >= 1 else default


def parse(model: Type[Model], data: Optional[Mapping[str, Any]]) -> Model:
    """Validate ``data`` against ``model`` or raise :class:`InvalidRecipe`."""

    if data is not None and not isinstance(data, Mapping):
        raise InvalidRecipe("Request body must be a JSON object")
    try:
        return model.model_validate(dict(data or {}))
    except ValidationError as exc:
        error = exc.errors()[0]
        location = ".".join(str(part) for part in error["loc"])
        message = error["msg"]
        raise InvalidRecipe(f"{location}: {message}" if location else message) from exc


__all__ = [
    "DEFAULT_PAGE_SIZE",
    "IngredientQuery",
    "ListQuery",
    "RatingRequest",
    "RecipeCreate",
    "RecipeUpdate",
    "parse",
]
