from __future__ import annotations

import logging
import os
from datetime import datetime
from typing import Any, Iterable, List, Mapping, Optional

from google.api_core import exceptions as gcloud_exceptions
from google.cloud import firestore

from .errors import RecipeNotFound
from .models import Recipe
from .storage import RecipeRepository


logger = logging.getLogger(__name__)


def _as_ingredients(value: Any) -> List[str]:
    if isinstance(value, list):
        return [str(item) for item in value]
    if isinstance(value, str):
        return [line.strip() for line in value.splitlines() if line.strip()]
    return []


class FirestoreRecipeStorage(RecipeRepository):
    """Recipe storage backed by a Cloud Firestore collection."""

    def __init__(
        self,
        *,
        project: Optional[str] = None,
        collection_name: str = "recipes",
        client: firestore.Client | None = None,
    ) -> None:
        self._project = project
        self._collection_name = collection_name

        self._firestore_client = firestore.Client(project=project) if client is None else client
        self._collection = self._firestore_client.collection(collection_name)

    @classmethod
    def from_env(cls) -> "FirestoreRecipeStorage":
        """Build a storage instance from environment variables."""

        project = os.environ.get("GCP_PROJECT")
        collection_name = os.environ.get("RECIPES_COLLECTION", "recipes")
        return cls(project=project, collection_name=collection_name)

    def list_recipes(self, *, deleted: bool = False) -> Iterable[Recipe]:
        query = self._collection.where(filter=firestore.FieldFilter("deleted", "==", deleted))
        for doc in query.stream():
            data = doc.to_dict() or {}
            yield self._doc_to_recipe(doc.id, data)

    def get_recipe(self, recipe_id: str) -> Recipe:
        snapshot = self._collection.document(recipe_id).get()

        if not snapshot.exists:
            raise RecipeNotFound(recipe_id)

        data = snapshot.to_dict() or {}
        return self._doc_to_recipe(snapshot.id, data)

    def add_recipe(self, fields: Mapping[str, Any]) -> Recipe:
        doc = {
            "title": fields["title"],
            "description": fields.get("description") or "",
            "thumbnail": fields.get("thumbnail"),
            "source_url": fields.get("source_url"),
            "ingredients": list(fields["ingredients"]),
            "deleted": False,
            "num_ratings": 0,
            "total_score": 0,
            "created_at": firestore.SERVER_TIMESTAMP,
        }

        doc_ref = self._collection.document()
        doc_ref.set(doc)
        logger.info("Stored recipe %s in collection %s", doc_ref.id, self._collection_name)

        snapshot = doc_ref.get()
        data = snapshot.to_dict() or {}
        return self._doc_to_recipe(snapshot.id, data)

    def update_recipe(self, recipe_id: str, fields: Mapping[str, Any]) -> None:
        if not fields:
            return
        self._update_if_exists(recipe_id, dict(fields))

    def set_deleted(self, recipe_id: str, deleted: bool) -> None:
        self._update_if_exists(recipe_id, {"deleted": deleted})

    def purge_recipe(self, recipe_id: str) -> None:
        # Firestore deletes are no-ops for documents that do not exist.
        self._collection.document(recipe_id).delete()

    def rate_recipe(self, recipe_id: str, score: int) -> Recipe:
        doc_ref = self._collection.document(recipe_id)

        try:
            doc_ref.update(
                {
                    "num_ratings": firestore.Increment(1),
                    "total_score": firestore.Increment(score),
                }
            )
        except gcloud_exceptions.NotFound as exc:
            raise RecipeNotFound(recipe_id) from exc

        snapshot = doc_ref.get()
        data = snapshot.to_dict() or {}
        return self._doc_to_recipe(snapshot.id, data)

    def close(self) -> None:
        self._firestore_client.close()

    def _update_if_exists(self, recipe_id: str, fields: dict) -> None:
        try:
            self._collection.document(recipe_id).update(fields)
        except gcloud_exceptions.NotFound:
            # update() never creates documents; a missing id is acknowledged as-is.
            logger.debug("Recipe %s not found; update skipped", recipe_id)

    def _doc_to_recipe(self, doc_id: str, data: dict) -> Recipe:
        created_at = data.get("created_at")
        if isinstance(created_at, datetime):
            timestamp = created_at
        else:
            timestamp = None

        return Recipe(
            id=doc_id,
            title=data.get("title", ""),
            description=data.get("description") or "",
            ingredients=_as_ingredients(data.get("ingredients")),
            thumbnail=data.get("thumbnail"),
            source_url=data.get("source_url"),
            deleted=bool(data.get("deleted", False)),
            num_ratings=int(data.get("num_ratings") or 0),
            total_score=int(data.get("total_score") or 0),
            created_at=timestamp,
        )


__all__ = ["FirestoreRecipeStorage"]
