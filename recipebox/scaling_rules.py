"""Category-aware scaling rules for ingredients.

Some ingredients should not grow linearly with batch size: spices, salt and
leavening are scaled conservatively, eggs never drop below one whole egg.
"""

import math
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType

from .amounts import InvalidAmountError, round_half_up


class IngredientCategory(str, Enum):
    SPICE = "spice"
    HERB = "herb"
    SALT = "salt"
    SUGAR = "sugar"
    FAT = "fat"
    LIQUID = "liquid"
    FLOUR = "flour"
    LEAVENING = "leavening"
    ACID = "acid"
    DAIRY = "dairy"
    EGG = "egg"
    VEGETABLE = "vegetable"
    MEAT = "meat"
    OTHER = "other"


@dataclass(frozen=True)
class ScalingRule:
    """How a category of ingredients scales relative to linear."""

    category: IngredientCategory
    scaling_factor: float  # e.g. 0.75 = 75% of linear scaling
    reason: str
    min_amount: float | None = None
    max_amount: float | None = None
    threshold: float | None = None  # Multiplier beyond which scaling is dampened


# Rate applied to the part of the multiplier beyond a rule's threshold
DAMPENED_RATE = 0.5

# Checked in order, first match wins
CATEGORY_KEYWORDS: tuple[tuple[IngredientCategory, tuple[str, ...]], ...] = (
    (
        IngredientCategory.SPICE,
        (
            "pepper",
            "paprika",
            "cumin",
            "coriander",
            "turmeric",
            "cinnamon",
            "nutmeg",
            "clove",
            "cardamom",
            "cayenne",
            "chili",
            "curry",
            "garam masala",
            "five spice",
            "allspice",
        ),
    ),
    (
        IngredientCategory.HERB,
        (
            "basil",
            "oregano",
            "thyme",
            "rosemary",
            "sage",
            "parsley",
            "cilantro",
            "dill",
            "mint",
            "tarragon",
            "chive",
            "bay leaf",
            "marjoram",
        ),
    ),
    (
        IngredientCategory.SALT,
        (
            "salt",
            "kosher salt",
            "sea salt",
            "fleur de sel",
            "himalayan salt",
            "table salt",
            "rock salt",
        ),
    ),
    (
        IngredientCategory.SUGAR,
        (
            "sugar",
            "brown sugar",
            "powdered sugar",
            "confectioner",
            "granulated",
            "caster",
            "demerara",
            "turbinado",
            "honey",
            "maple syrup",
            "molasses",
            "agave",
        ),
    ),
    (
        IngredientCategory.FAT,
        (
            "butter",
            "oil",
            "shortening",
            "lard",
            "ghee",
            "margarine",
            "olive oil",
            "vegetable oil",
            "canola oil",
            "coconut oil",
            "peanut oil",
        ),
    ),
    (
        IngredientCategory.LIQUID,
        (
            "water",
            "milk",
            "cream",
            "broth",
            "stock",
            "wine",
            "beer",
            "juice",
            "vinegar",
            "coffee",
            "tea",
        ),
    ),
    (
        IngredientCategory.FLOUR,
        (
            "flour",
            "all-purpose",
            "bread flour",
            "cake flour",
            "whole wheat",
            "almond flour",
            "coconut flour",
            "rice flour",
            "cornmeal",
            "semolina",
        ),
    ),
    (
        IngredientCategory.LEAVENING,
        (
            "baking soda",
            "baking powder",
            "yeast",
            "cream of tartar",
            "self-rising",
            "active dry yeast",
            "instant yeast",
        ),
    ),
    (
        IngredientCategory.ACID,
        (
            "lemon juice",
            "lime juice",
            "vinegar",
            "citrus",
            "wine vinegar",
            "balsamic",
            "rice vinegar",
            "apple cider vinegar",
        ),
    ),
    (
        IngredientCategory.DAIRY,
        (
            "milk",
            "cream",
            "yogurt",
            "sour cream",
            "cheese",
            "ricotta",
            "mozzarella",
            "parmesan",
            "cheddar",
            "cream cheese",
            "buttermilk",
        ),
    ),
    (
        IngredientCategory.EGG,
        ("egg", "eggs", "egg white", "egg yolk", "beaten egg", "egg wash"),
    ),
    (
        IngredientCategory.VEGETABLE,
        (
            "onion",
            "garlic",
            "carrot",
            "celery",
            "potato",
            "tomato",
            "bell pepper",
            "broccoli",
            "spinach",
            "kale",
            "lettuce",
            "cabbage",
            "zucchini",
            "eggplant",
            "mushroom",
        ),
    ),
    (
        IngredientCategory.MEAT,
        (
            "chicken",
            "beef",
            "pork",
            "lamb",
            "turkey",
            "fish",
            "salmon",
            "shrimp",
            "bacon",
            "sausage",
            "ground beef",
            "steak",
            "roast",
        ),
    ),
)


def _is_sweet_pepper(name: str) -> bool:
    """Peppers that are vegetables even though "pepper" is a spice keyword."""
    return (
        "bell pepper" in name
        or "sweet pepper" in name
        or ("red pepper" in name and "pepper flakes" not in name)
        or ("green pepper" in name and "peppercorn" not in name)
    )


def _keyword_rule(
    category: IngredientCategory, keywords: tuple[str, ...]
) -> tuple[Callable[[str], bool], IngredientCategory]:
    return (lambda name: any(keyword in name for keyword in keywords)), category


# Special cases come before the generic keyword table
CLASSIFICATION_RULES: tuple[tuple[Callable[[str], bool], IngredientCategory], ...] = (
    (_is_sweet_pepper, IngredientCategory.VEGETABLE),
    *(_keyword_rule(category, keywords) for category, keywords in CATEGORY_KEYWORDS),
)


SCALING_RULES: MappingProxyType[IngredientCategory, ScalingRule] = MappingProxyType(
    {
        IngredientCategory.SPICE: ScalingRule(
            IngredientCategory.SPICE,
            scaling_factor=0.75,
            min_amount=0.125,  # 1/8 tsp
            reason="Spices intensify with larger batches - scale conservatively",
        ),
        IngredientCategory.HERB: ScalingRule(
            IngredientCategory.HERB,
            scaling_factor=0.85,
            reason="Herbs can overpower when doubled or tripled linearly",
        ),
        IngredientCategory.SALT: ScalingRule(
            IngredientCategory.SALT,
            scaling_factor=0.8,
            min_amount=0.25,  # 1/4 tsp
            reason="Salt perception increases non-linearly",
        ),
        IngredientCategory.SUGAR: ScalingRule(
            IngredientCategory.SUGAR,
            scaling_factor=0.95,
            reason="Sugar scales mostly linear but slightly less in large batches",
        ),
        IngredientCategory.FAT: ScalingRule(
            IngredientCategory.FAT,
            scaling_factor=0.9,
            reason="Less fat needed for larger batches due to surface area",
        ),
        IngredientCategory.LIQUID: ScalingRule(
            IngredientCategory.LIQUID,
            scaling_factor=1.0,
            reason="Liquids scale linearly",
        ),
        IngredientCategory.FLOUR: ScalingRule(
            IngredientCategory.FLOUR,
            scaling_factor=1.0,
            reason="Flour scales linearly for consistent texture",
        ),
        IngredientCategory.LEAVENING: ScalingRule(
            IngredientCategory.LEAVENING,
            scaling_factor=0.85,
            min_amount=0.25,  # 1/4 tsp
            threshold=2,
            reason="Leavening doesn't need to double for double batches",
        ),
        IngredientCategory.ACID: ScalingRule(
            IngredientCategory.ACID,
            scaling_factor=0.9,
            reason="Acids can become too strong when scaled linearly",
        ),
        IngredientCategory.DAIRY: ScalingRule(
            IngredientCategory.DAIRY,
            scaling_factor=1.0,
            reason="Dairy products scale linearly",
        ),
        IngredientCategory.EGG: ScalingRule(
            IngredientCategory.EGG,
            scaling_factor=1.0,
            min_amount=1,  # Can't have less than 1 egg
            reason="Eggs typically scale linearly, but consider whole eggs",
        ),
        IngredientCategory.VEGETABLE: ScalingRule(
            IngredientCategory.VEGETABLE,
            scaling_factor=1.0,
            reason="Vegetables scale linearly",
        ),
        IngredientCategory.MEAT: ScalingRule(
            IngredientCategory.MEAT,
            scaling_factor=1.0,
            reason="Proteins scale linearly",
        ),
        IngredientCategory.OTHER: ScalingRule(
            IngredientCategory.OTHER,
            scaling_factor=1.0,
            reason="Standard linear scaling",
        ),
    }
)


def detect_ingredient_category(ingredient_name: str) -> IngredientCategory:
    """
    Detect the category of an ingredient from its name.

    Never raises: names that match nothing (or are not strings) are OTHER.
    """
    name = ingredient_name.lower() if isinstance(ingredient_name, str) else ""

    for matches, category in CLASSIFICATION_RULES:
        if matches(name):
            return category

    return IngredientCategory.OTHER


def get_rule(category: IngredientCategory) -> ScalingRule:
    """Look up the scaling rule for a category."""
    return SCALING_RULES.get(category, SCALING_RULES[IngredientCategory.OTHER])


def get_scaling_rule(ingredient_name: str) -> ScalingRule:
    """Classify an ingredient name and return its scaling rule."""
    return get_rule(detect_ingredient_category(ingredient_name))


def is_adjustable_ingredient(has_amount: bool) -> bool:
    """Every ingredient that carries an amount can be adjusted by the user."""
    return bool(has_amount)


def _require_finite(value: object, label: str) -> float:
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise InvalidAmountError(f"{label} must be a number, got {value!r}")
    if not math.isfinite(value):
        raise InvalidAmountError(f"{label} must be finite, got {value!r}")
    return float(value)


def calculate_smart_scaled_amount(
    original_amount: float, scale_factor: float, ingredient_name: str
) -> float:
    """
    Scale an amount using the ingredient's category rule.

    Args:
        original_amount: Amount in the original recipe
        scale_factor: Recipe multiplier (e.g., 2.0 for double)
        ingredient_name: Name used to pick the category rule

    Returns:
        Scaled amount, clamped to the rule's bounds and rounded to 2 decimals

    Raises:
        InvalidAmountError: If the amount or multiplier is not a finite number
    """
    amount = _require_finite(original_amount, "Amount")
    multiplier = _require_finite(scale_factor, "Scale factor")
    rule = get_scaling_rule(ingredient_name)

    scaled = amount * multiplier * rule.scaling_factor

    if rule.threshold is not None and multiplier > rule.threshold:
        # Past the threshold the extra multiplier only counts at a reduced rate
        extra = multiplier - rule.threshold
        scaled = (
            amount * rule.threshold * rule.scaling_factor
            + amount * extra * rule.scaling_factor * DAMPENED_RATE
        )

    if rule.min_amount is not None and scaled < rule.min_amount:
        scaled = rule.min_amount
    if rule.max_amount is not None and scaled > rule.max_amount:
        scaled = rule.max_amount

    return round_half_up(scaled, 2)
