"""Recipe scaling and amount display logic."""

import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass, replace

from .amounts import InvalidAmountError, round_half_up
from .recipe import Ingredient, Recipe
from .scaling_rules import (
    calculate_smart_scaled_amount,
    get_scaling_rule,
    is_adjustable_ingredient,
)

logger = logging.getLogger(__name__)

# Fractional parts (rounded to 3 decimals) shown as vulgar fractions
COMMON_FRACTIONS: dict[float, str] = {
    0.125: "⅛",
    0.25: "¼",
    0.333: "⅓",
    0.375: "⅜",
    0.5: "½",
    0.625: "⅝",
    0.667: "⅔",
    0.75: "¾",
    0.875: "⅞",
}


def format_number(value: float) -> str:
    """Render a number without a trailing ".0" for whole values."""
    if value == int(value):
        return str(int(value))
    return repr(value)


def format_amount(amount: float) -> str:
    """
    Format an amount for display, using unicode fractions where possible.

    Examples:
        4.0 -> "4"
        0.5 -> "½"
        1.5 -> "1 ½"
        3.10 -> "3.1"
        -0.5 -> "-½"
    """
    if amount == int(amount):
        return str(int(amount))

    sign = "-" if amount < 0 else ""
    magnitude = abs(amount)
    whole = math.floor(magnitude)
    fraction = round_half_up(magnitude - whole, 3)

    symbol = COMMON_FRACTIONS.get(fraction)
    if symbol:
        if whole == 0:
            return f"{sign}{symbol}"
        return f"{sign}{whole} {symbol}"

    rounded = round_half_up(magnitude, 2)
    if rounded == 0:
        return "0"
    return sign + f"{rounded:.2f}".rstrip("0").rstrip(".")


def adjustment_key(ingredient_id: str | None, scale_factor: float) -> str:
    """Key of a custom amount for one ingredient at one multiplier, e.g. "7-2"."""
    return f"{ingredient_id}-{format_number(scale_factor)}"


@dataclass
class ScaledIngredient:
    """An ingredient with its scaled amount and optional user override."""

    original: Ingredient
    scaled_amount: float | None
    scale_factor: float
    is_adjustable: bool = False
    reason: str | None = None
    custom_amount: float | None = None

    @property
    def name(self) -> str:
        return self.original.name

    @property
    def unit(self) -> str | None:
        return self.original.unit

    @property
    def has_custom_adjustment(self) -> bool:
        return self.custom_amount is not None

    @property
    def display_amount(self) -> float:
        return get_display_amount(self)

    def __str__(self) -> str:
        parts = []
        if self.original.amount is not None or self.has_custom_adjustment:
            parts.append(format_amount(self.display_amount))
        if self.unit:
            parts.append(self.unit)
        parts.append(self.name)
        if self.original.notes:
            parts.append(f"({self.original.notes})")
        return " ".join(parts)


def get_display_amount(ingredient: ScaledIngredient) -> float:
    """Custom amount, else scaled amount, else the raw amount, else 0."""
    for amount in (ingredient.custom_amount, ingredient.scaled_amount, ingredient.original.amount):
        if amount is not None:
            return amount
    return 0


def calculate_scale_factor(
    original_servings: int | None,
    target_servings: int | None = None,
    multiplier: float | None = None,
) -> float:
    """
    Calculate the scaling factor for a recipe.

    Args:
        original_servings: Original recipe serving size
        target_servings: Desired serving size
        multiplier: Direct multiplier (e.g., 2.0 for double)

    Returns:
        Scale factor to multiply quantities by

    Raises:
        ValueError: If target_servings given without original_servings
    """
    if multiplier is not None:
        return multiplier

    if target_servings is not None:
        if not original_servings:
            raise ValueError(
                "Cannot scale by servings: original serving size unknown. "
                "Use --scale multiplier instead."
            )
        return target_servings / original_servings

    return 1.0


def scale_ingredient(ingredient: Ingredient, scale_factor: float) -> Ingredient:
    """Linearly scale an ingredient's amount. Ingredients without an amount are unchanged."""
    if not ingredient.amount:
        return ingredient
    return replace(ingredient, amount=ingredient.amount * scale_factor)


def scale_ingredient_with_rules(
    ingredient: Ingredient,
    scale_factor: float,
    custom_adjustments: Mapping[str, float] | None = None,
) -> ScaledIngredient:
    """
    Scale a single ingredient with its category rule.

    A custom amount stored under adjustment_key(ingredient.id, scale_factor)
    overrides the computed amount for display, but scaled_amount is always
    the rule-based value.
    """
    if ingredient.amount is None:
        return ScaledIngredient(original=ingredient, scaled_amount=None, scale_factor=scale_factor)

    custom_amount = None
    if custom_adjustments and ingredient.id is not None:
        custom_amount = custom_adjustments.get(adjustment_key(ingredient.id, scale_factor))

    try:
        scaled_amount = calculate_smart_scaled_amount(
            ingredient.amount, scale_factor, ingredient.name
        )
        reason: str | None = get_scaling_rule(ingredient.name).reason
    except InvalidAmountError as e:
        logger.warning("Smart scaling failed for %r, using linear scaling: %s", ingredient.name, e)
        scaled_amount = ingredient.amount * scale_factor
        reason = None

    return ScaledIngredient(
        original=ingredient,
        scaled_amount=scaled_amount,
        scale_factor=scale_factor,
        is_adjustable=is_adjustable_ingredient(True),
        reason=reason,
        custom_amount=custom_amount,
    )


def format_scaled_ingredient(ingredient: Ingredient, scale_factor: float) -> str:
    """Format a linearly scaled ingredient as "amount unit name (notes)"."""
    scaled = scale_ingredient(ingredient, scale_factor)

    parts = []
    if scaled.amount:
        parts.append(format_amount(scaled.amount))
    if scaled.unit:
        parts.append(scaled.unit)
    parts.append(scaled.name)
    if scaled.notes:
        parts.append(f"({scaled.notes})")
    return " ".join(parts)


def scale_recipe(
    recipe: Recipe,
    target_servings: int | None = None,
    multiplier: float | None = None,
    custom_adjustments: Mapping[str, float] | None = None,
) -> tuple[list[ScaledIngredient], float, int | None]:
    """
    Scale all ingredients in a recipe with the category rules.

    Args:
        recipe: The recipe to scale
        target_servings: Desired serving size
        multiplier: Direct multiplier (overrides target_servings)
        custom_adjustments: User overrides keyed by adjustment_key()

    Returns:
        Tuple of (scaled_ingredients, scale_factor, new_servings)
    """
    scale_factor = calculate_scale_factor(recipe.servings, target_servings, multiplier)

    scaled_ingredients = [
        scale_ingredient_with_rules(ing, scale_factor, custom_adjustments)
        for ing in recipe.ingredients
    ]

    new_servings = None
    if recipe.servings is not None:
        new_servings = round(recipe.servings * scale_factor)
    elif target_servings is not None:
        new_servings = target_servings

    return scaled_ingredients, scale_factor, new_servings


def format_scale_info(
    scale_factor: float, original_servings: int | None, new_servings: int | None
) -> str:
    """
    Format scaling information for display.

    Args:
        scale_factor: The scaling factor used
        original_servings: Original serving size
        new_servings: New serving size after scaling

    Returns:
        Human-readable scaling description
    """
    if scale_factor == 1.0:
        if original_servings:
            return f"Original recipe ({original_servings} servings)"
        return "Original recipe"

    if scale_factor == 2.0:
        desc = "Doubled"
    elif scale_factor == 0.5:
        desc = "Halved"
    elif scale_factor == 3.0:
        desc = "Tripled"
    else:
        desc = f"Scaled {scale_factor:.2g}x"

    if original_servings and new_servings:
        return f"{desc} ({original_servings} → {new_servings} servings)"
    elif new_servings:
        return f"{desc} ({new_servings} servings)"

    return desc
