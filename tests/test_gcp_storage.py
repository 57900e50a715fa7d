from __future__ import annotations

from unittest import mock

import pytest
from google.api_core import exceptions as gcloud_exceptions
from google.cloud import firestore

from recipe_catalog.errors import RecipeNotFound
from recipe_catalog.gcp_storage import FirestoreRecipeStorage


def make_snapshot(doc_id: str, data: dict, exists: bool = True):
    snapshot = mock.Mock()
    snapshot.id = doc_id
    snapshot.exists = exists
    snapshot.to_dict.return_value = data
    return snapshot


@pytest.fixture
def firestore_client():
    return mock.MagicMock()


@pytest.fixture
def collection(firestore_client):
    return firestore_client.collection.return_value


@pytest.fixture
def storage(firestore_client):
    return FirestoreRecipeStorage(collection_name="test-recipes", client=firestore_client)


def test_uses_configured_collection(storage, firestore_client):
    firestore_client.collection.assert_called_once_with("test-recipes")


def test_list_recipes_filters_on_deleted_flag(storage, collection):
    collection.where.return_value.stream.return_value = [
        make_snapshot("a", {"title": "Soup", "ingredients": ["water"], "deleted": True}),
    ]

    recipes = list(storage.list_recipes(deleted=True))

    field_filter = collection.where.call_args.kwargs["filter"]
    assert (field_filter.field_path, field_filter.op_string, field_filter.value) == (
        "deleted",
        "==",
        True,
    )
    assert [(recipe.id, recipe.title, recipe.deleted) for recipe in recipes] == [
        ("a", "Soup", True)
    ]


def test_documents_with_missing_fields_get_defaults(storage, collection):
    collection.document.return_value.get.return_value = make_snapshot(
        "a", {"title": "Soup", "ingredients": "water\n\nsalt\n"}
    )

    recipe = storage.get_recipe("a")

    assert recipe.ingredients == ["water", "salt"]
    assert recipe.description == ""
    assert (recipe.deleted, recipe.num_ratings, recipe.total_score) == (False, 0, 0)
    assert recipe.rating is None


def test_get_missing_recipe_raises(storage, collection):
    collection.document.return_value.get.return_value = make_snapshot("nope", {}, exists=False)

    with pytest.raises(RecipeNotFound):
        storage.get_recipe("nope")


def test_add_recipe_forces_system_fields(storage, collection):
    doc_ref = collection.document.return_value
    doc_ref.id = "new-id"
    doc_ref.get.return_value = make_snapshot(
        "new-id", {"title": "Soup", "ingredients": ["water"], "deleted": False}
    )

    recipe = storage.add_recipe({"title": "Soup", "ingredients": ["water"], "description": None})

    stored = doc_ref.set.call_args.args[0]
    assert stored["deleted"] is False
    assert (stored["num_ratings"], stored["total_score"]) == (0, 0)
    assert stored["description"] == ""
    assert stored["created_at"] is firestore.SERVER_TIMESTAMP
    assert recipe.id == "new-id"


def test_update_of_missing_recipe_is_ignored(storage, collection):
    collection.document.return_value.update.side_effect = gcloud_exceptions.NotFound("gone")

    storage.update_recipe("gone", {"title": "Ghost"})
    storage.set_deleted("gone", True)

    assert collection.document.return_value.update.call_count == 2


def test_empty_update_does_not_touch_the_store(storage, collection):
    storage.update_recipe("a", {})

    collection.document.return_value.update.assert_not_called()


def test_rate_uses_atomic_increments(storage, collection):
    doc_ref = collection.document.return_value
    doc_ref.get.return_value = make_snapshot(
        "a", {"title": "Pie", "ingredients": [], "num_ratings": 2, "total_score": 8}
    )

    recipe = storage.rate_recipe("a", 4)

    increments = doc_ref.update.call_args.args[0]
    assert isinstance(increments["num_ratings"], firestore.Increment)
    assert increments["num_ratings"].value == 1
    assert increments["total_score"].value == 4
    assert recipe.rating == 4.0


def test_rate_missing_recipe_raises(storage, collection):
    collection.document.return_value.update.side_effect = gcloud_exceptions.NotFound("gone")

    with pytest.raises(RecipeNotFound):
        storage.rate_recipe("gone", 3)


def test_purge_deletes_document(storage, collection):
    storage.purge_recipe("a")

    collection.document.assert_called_with("a")
    collection.document.return_value.delete.assert_called_once_with()


def test_close_closes_client(storage, firestore_client):
    storage.close()

    firestore_client.close.assert_called_once_with()


def test_from_env_reads_project_and_collection(monkeypatch):
    monkeypatch.setenv("GCP_PROJECT", "demo-project")
    monkeypatch.setenv("RECIPES_COLLECTION", "cookbook")

    with mock.patch("recipe_catalog.gcp_storage.firestore.Client") as client_cls:
        FirestoreRecipeStorage.from_env()

    client_cls.assert_called_once_with(project="demo-project")
    client_cls.return_value.collection.assert_called_once_with("cookbook")
