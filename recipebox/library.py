"""Local recipe library storage and retrieval."""

import json
import logging
import uuid
from datetime import datetime
from typing import Any

from . import config
from .config import LIBRARY_FILE
from .recipe import Recipe

logger = logging.getLogger(__name__)


class LibraryError(Exception):
    """Exception raised for library-related errors."""

    pass


def _load_library() -> dict[str, Any]:
    """Load the library from disk."""
    if not LIBRARY_FILE.exists():
        return {}

    try:
        with open(LIBRARY_FILE, encoding="utf-8") as f:
            return json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise LibraryError(f"Failed to load library: {e}") from e


def _save_library(library: dict[str, Any]) -> None:
    """Save the library to disk."""
    try:
        LIBRARY_FILE.parent.mkdir(parents=True, exist_ok=True)
        with open(LIBRARY_FILE, "w", encoding="utf-8") as f:
            json.dump(library, f, indent=2, ensure_ascii=False)
    except OSError as e:
        raise LibraryError(f"Failed to save library: {e}") from e


def list_recipes() -> list[dict[str, Any]]:
    """
    List all saved recipes.

    Returns:
        Recipe summaries with id, title, ingredient count, etc., newest first
    """
    library = _load_library()

    result = [
        {
            "id": recipe_id,
            "title": data.get("title", "Unknown"),
            "ingredient_count": len(data.get("ingredients", [])),
            "step_count": len(data.get("instructions", [])),
            "servings": data.get("servings"),
            "source_url": data.get("sourceUrl"),
            "updated_at": data.get("updatedAt"),
        }
        for recipe_id, data in library.items()
    ]

    return sorted(result, key=lambda x: x["updated_at"] or "", reverse=True)


def get_recipe(recipe_id: str) -> Recipe:
    """
    Get a recipe by id.

    Raises:
        LibraryError: If the recipe is not found or cannot be read
    """
    library = _load_library()

    if recipe_id not in library:
        raise LibraryError(f"Recipe '{recipe_id}' not found")

    try:
        return Recipe.from_dict(library[recipe_id])
    except (TypeError, ValueError) as e:
        raise LibraryError(f"Recipe '{recipe_id}' is corrupt: {e}") from e


def recipe_exists(recipe_id: str) -> bool:
    """Check if a recipe with the given id exists."""
    return recipe_id in _load_library()


def save_recipe(recipe: Recipe, overwrite: bool = False) -> Recipe:
    """
    Save a recipe to the library.

    Recipes without an id get a new one. Ingredients without an id are
    numbered so custom adjustments can refer to them.

    Args:
        recipe: The recipe to save
        overwrite: Whether to replace an existing recipe with the same id

    Returns:
        The recipe as stored, with ids and timestamps filled in

    Raises:
        LibraryError: If the id exists and overwrite is False
    """
    library = _load_library()

    recipe_id = recipe.id or uuid.uuid4().hex[:8]
    if recipe_id in library and not overwrite:
        raise LibraryError(f"Recipe '{recipe_id}' already exists. Use --overwrite to replace.")

    now = datetime.now().isoformat()
    recipe.id = recipe_id
    recipe.created_at = recipe.created_at or now
    recipe.updated_at = now
    for index, ingredient in enumerate(recipe.ingredients, 1):
        if ingredient.id is None:
            ingredient.id = str(index)

    library[recipe_id] = recipe.to_dict()
    _save_library(library)
    logger.debug("Saved recipe %s (%s)", recipe_id, recipe.title)

    return recipe


def delete_recipe(recipe_id: str) -> None:
    """
    Delete a recipe.

    Raises:
        LibraryError: If the recipe is not found
    """
    library = _load_library()

    if recipe_id not in library:
        raise LibraryError(f"Recipe '{recipe_id}' not found")

    del library[recipe_id]
    _save_library(library)


def load_all_recipes(limit: int | None = None) -> list[Recipe]:
    """
    Load stored recipes as candidates for comparison.

    Args:
        limit: Maximum number of recipes, defaults to MAX_CANDIDATES

    Raises:
        LibraryError: If the library cannot be read
    """
    limit = config.MAX_CANDIDATES if limit is None else limit
    library = _load_library()

    recipes = []
    for recipe_id, data in list(library.items())[:limit]:
        try:
            recipes.append(Recipe.from_dict(data))
        except (TypeError, ValueError) as e:
            logger.warning("Skipping unreadable recipe %s: %s", recipe_id, e)

    return recipes
