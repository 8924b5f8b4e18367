"""Custom ingredient amounts chosen by the user for a given multiplier."""

import json
from typing import Any

from .amounts import parse_amount
from .config import ADJUSTMENTS_FILE
from .scaler import adjustment_key


class AdjustmentsError(Exception):
    """Exception raised for adjustment storage errors."""

    pass


def _load_adjustments() -> dict[str, Any]:
    if not ADJUSTMENTS_FILE.exists():
        return {}

    try:
        with open(ADJUSTMENTS_FILE, encoding="utf-8") as f:
            return json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise AdjustmentsError(f"Failed to load adjustments: {e}") from e


def _save_adjustments(adjustments: dict[str, Any]) -> None:
    try:
        ADJUSTMENTS_FILE.parent.mkdir(parents=True, exist_ok=True)
        with open(ADJUSTMENTS_FILE, "w", encoding="utf-8") as f:
            json.dump(adjustments, f, indent=2)
    except OSError as e:
        raise AdjustmentsError(f"Failed to save adjustments: {e}") from e


def get_adjustments(recipe_id: str) -> dict[str, float]:
    """Custom amounts for a recipe, keyed by "<ingredientId>-<multiplier>"."""
    return dict(_load_adjustments().get(recipe_id, {}))


def set_adjustment(
    recipe_id: str, ingredient_id: str, scale_factor: float, amount: float | str
) -> float:
    """
    Store a custom amount for one ingredient at one multiplier.

    Args:
        recipe_id: Library id of the recipe
        ingredient_id: Id of the ingredient within the recipe
        scale_factor: Multiplier the amount applies to
        amount: Number or amount text such as "1 1/2"

    Returns:
        The amount as stored

    Raises:
        InvalidAmountError: If the amount is not a finite number
        AdjustmentsError: If the amount is negative or cannot be saved
    """
    value = parse_amount(amount)
    if value < 0:
        raise AdjustmentsError(f"Custom amount cannot be negative, got {amount!r}")

    adjustments = _load_adjustments()
    adjustments.setdefault(recipe_id, {})[adjustment_key(ingredient_id, scale_factor)] = value
    _save_adjustments(adjustments)
    return value


def remove_adjustment(recipe_id: str, ingredient_id: str, scale_factor: float) -> bool:
    """Remove one custom amount. Returns False if there was none."""
    adjustments = _load_adjustments()
    key = adjustment_key(ingredient_id, scale_factor)

    recipe_adjustments = adjustments.get(recipe_id, {})
    if key not in recipe_adjustments:
        return False

    del recipe_adjustments[key]
    if not recipe_adjustments:
        adjustments.pop(recipe_id, None)
    _save_adjustments(adjustments)
    return True


def clear_adjustments(recipe_id: str) -> int:
    """Remove every custom amount of a recipe and return how many were removed."""
    adjustments = _load_adjustments()
    removed = len(adjustments.pop(recipe_id, {}))
    if removed:
        _save_adjustments(adjustments)
    return removed
