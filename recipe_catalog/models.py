from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional


@dataclass
class Recipe:
    """Domain object representing a stored recipe."""

    id: str
    title: str
    description: str = ""
    ingredients: List[str] = field(default_factory=list)
    thumbnail: Optional[str] = None
    source_url: Optional[str] = None
    deleted: bool = False
    num_ratings: int = 0
    total_score: int = 0
    created_at: Optional[datetime] = None
    matched_ingredients: Optional[int] = None

    @property
    def rating(self) -> Optional[float]:
        """Average score, or ``None`` while the recipe is unrated."""

        if self.num_ratings > 0:
            return self.total_score / self.num_ratings
        return None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "_id": self.id,
            "title": self.title,
            "description": self.description,
            "thumbnail": self.thumbnail,
            "source_url": self.source_url,
            "ingredients": list(self.ingredients),
            "deleted": self.deleted,
            "num_ratings": self.num_ratings,
            "total_score": self.total_score,
        }
        if self.rating is not None:
            data["rating"] = self.rating
        if self.matched_ingredients is not None:
            data["matchedIngredients"] = self.matched_ingredients
        return data


__all__ = ["Recipe"]
