import os
from typing import Optional, Tuple

from flask import Flask, Response, current_app, jsonify, request
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from .errors import CatalogError, InvalidRecipe, RecipeNotFound
from .gcp_storage import FirestoreRecipeStorage
from .models import Recipe
from .services import RecipeCatalog
from .storage import RecipeRepository

JsonResponse = Tuple[Response, int]


def create_app(storage: Optional[RecipeRepository] = None) -> Flask:
    """Create and configure the Flask application.

    Parameters
    ----------
    storage:
        Optional recipe repository. When ``None`` the application will use
        :class:`FirestoreRecipeStorage` configured through environment variables.
    """

    app = Flask(__name__)
    app.config.setdefault("MAX_CONTENT_LENGTH", 1 * 1024 * 1024)

    origins = os.environ.get("CORS_ORIGINS", "*")
    if origins != "*":
        origins = [origin.strip() for origin in origins.split(",") if origin.strip()]
    CORS(app, resources={r"/*": {"origins": origins}})

    if storage is None:
        storage = FirestoreRecipeStorage.from_env()
    app.config["RECIPE_STORAGE"] = storage

    @app.get("/health")
    def health() -> JsonResponse:
        return jsonify({"status": "ok"}), 200

    @app.get("/recipes")
    def list_recipes() -> JsonResponse:
        recipes = _catalog().list_recipes(request.args.to_dict())
        return _recipes_json(recipes), 200

    @app.post("/recipes/ingredients")
    def match_ingredients() -> JsonResponse:
        recipes = _catalog().match_ingredients(request.get_json(silent=True))
        return _recipes_json(recipes), 200

    @app.get("/recipes/trashed")
    def list_trashed() -> JsonResponse:
        return _recipes_json(_catalog().list_trashed()), 200

    @app.get("/recipes/<recipe_id>")
    def get_recipe(recipe_id: str) -> JsonResponse:
        return jsonify(_catalog().get_recipe(recipe_id).to_dict()), 200

    @app.post("/recipes")
    def create_recipe() -> JsonResponse:
        recipe = _catalog().create_recipe(request.get_json(silent=True))
        return jsonify({"message": "Recipe added successfully!", "id": recipe.id}), 201

    @app.put("/recipes/<recipe_id>")
    def update_recipe(recipe_id: str) -> JsonResponse:
        _catalog().update_recipe(recipe_id, request.get_json(silent=True))
        return jsonify({"message": "Updated successfully!"}), 200

    @app.delete("/recipes/<recipe_id>")
    def delete_recipe(recipe_id: str) -> JsonResponse:
        _catalog().soft_delete(recipe_id)
        return jsonify({"message": "Deleted successfully!"}), 200

    @app.patch("/recipes/<recipe_id>/restore")
    def restore_recipe(recipe_id: str) -> JsonResponse:
        _catalog().restore(recipe_id)
        return jsonify({"message": "Recipe restored successfully!"}), 200

    @app.delete("/recipes/<recipe_id>/permanent")
    def purge_recipe(recipe_id: str) -> JsonResponse:
        _catalog().purge(recipe_id)
        return jsonify({"message": "Recipe permanently deleted"}), 200

    @app.post("/recipes/<recipe_id>/rate")
    def rate_recipe(recipe_id: str) -> JsonResponse:
        recipe = _catalog().rate(recipe_id, request.get_json(silent=True))
        return jsonify(recipe.to_dict()), 200

    @app.errorhandler(CatalogError)
    def handle_catalog_error(exc: CatalogError) -> JsonResponse:
        if exc.status_code >= 500:
            app.logger.error(
                "Catalog error on %s %s", request.method, request.path, exc_info=exc
            )
        return _error(str(exc), exc.status_code)

    @app.errorhandler(HTTPException)
    def handle_http_error(exc: HTTPException) -> JsonResponse:
        return _error(exc.description or exc.name, exc.code or 500)

    @app.errorhandler(Exception)
    def handle_unexpected_error(exc: Exception) -> JsonResponse:
        app.logger.error("Unhandled error on %s %s", request.method, request.path, exc_info=exc)
        return _error(str(exc) or "Server error", 500)

    return app


def _catalog() -> RecipeCatalog:
    return RecipeCatalog(current_app.config["RECIPE_STORAGE"])


def _recipes_json(recipes) -> Response:
    return jsonify([recipe.to_dict() for recipe in recipes])


def _error(message: str, status: int) -> JsonResponse:
    return jsonify({"error": message}), status


__all__ = ["create_app", "Recipe", "RecipeCatalog", "InvalidRecipe", "RecipeNotFound"]
