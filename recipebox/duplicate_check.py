"""Duplicate check for a recipe about to be saved.

Validates the incoming payload, compares it against the caller's existing
recipes and shapes the response.
"""

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from . import config
from .recipe import Recipe
from .similarity import RecipeMatch, check_for_duplicates

logger = logging.getLogger(__name__)


class DuplicateCheckError(Exception):
    """Exception raised for an invalid duplicate-check request."""

    pass


def build_candidate(payload: Mapping[str, Any]) -> Recipe:
    """
    Build the recipe to check from a request payload.

    Raises:
        DuplicateCheckError: If the title is missing or a number is not finite
    """
    title = payload.get("title")
    if not title or not str(title).strip():
        raise DuplicateCheckError("Recipe title is required for duplicate checking")

    try:
        return Recipe.from_dict({**payload, "id": "temp"})
    except (TypeError, ValueError) as e:
        raise DuplicateCheckError(f"Invalid recipe data: {e}") from e


def format_match(match: RecipeMatch) -> dict[str, Any]:
    """Summary of a match as returned to the caller."""
    recipe = match.recipe
    return {
        "recipe": {
            "id": recipe.id,
            "title": recipe.title,
            "description": recipe.description,
            "createdAt": recipe.created_at,
            "updatedAt": recipe.updated_at,
        },
        "score": match.score.to_dict(),
        "isDuplicate": match.is_duplicate,
    }


def check_duplicates_request(
    payload: Mapping[str, Any],
    existing_recipes: Sequence[Recipe],
    limit: int | None = None,
) -> dict[str, Any]:
    """
    Check a recipe payload for duplicates among existing recipes.

    Args:
        payload: Recipe fields (title required, everything else optional)
        existing_recipes: The caller's recipes
        limit: Maximum number of existing recipes to compare against,
            defaults to MAX_CANDIDATES

    Returns:
        {"duplicates": [...], "totalChecked": n}

    Raises:
        DuplicateCheckError: If the payload is invalid
    """
    candidate = build_candidate(payload)

    limit = config.MAX_CANDIDATES if limit is None else limit
    candidates = list(existing_recipes[:limit])
    if len(existing_recipes) > limit:
        logger.info(
            "Comparing against the first %d of %d recipes", limit, len(existing_recipes)
        )

    try:
        matches = check_for_duplicates(candidate, candidates)
    except Exception:
        # A failed check must not block saving: report no duplicates
        logger.exception("Duplicate check failed for %r", candidate.title)
        matches = []

    logger.debug(
        "Duplicate check for %r: %d match(es) among %d recipes",
        candidate.title,
        len(matches),
        len(candidates),
    )

    return {
        "duplicates": [format_match(match) for match in matches],
        "totalChecked": len(candidates),
    }
