"""Recipebox - recipe library with duplicate detection and smart scaling."""

__version__ = "1.0.0"

from .amounts import InvalidAmountError, parse_amount
from .library import delete_recipe, get_recipe, list_recipes, save_recipe
from .recipe import Ingredient, Instruction, Recipe
from .recipe_parser import parse_recipe_text, parse_recipe_url
from .scaler import ScaledIngredient, scale_recipe
from .scaling_rules import IngredientCategory, calculate_smart_scaled_amount, detect_ingredient_category
from .similarity import (
    RecipeMatch,
    SimilarityScore,
    calculate_recipe_similarity,
    check_for_duplicates,
    find_similar_recipes,
)

__all__ = [
    "Recipe",
    "Ingredient",
    "Instruction",
    "InvalidAmountError",
    "parse_amount",
    "parse_recipe_url",
    "parse_recipe_text",
    "SimilarityScore",
    "RecipeMatch",
    "calculate_recipe_similarity",
    "find_similar_recipes",
    "check_for_duplicates",
    "IngredientCategory",
    "detect_ingredient_category",
    "calculate_smart_scaled_amount",
    "scale_recipe",
    "ScaledIngredient",
    "list_recipes",
    "get_recipe",
    "save_recipe",
    "delete_recipe",
]
