"""Recipe similarity and duplicate detection.

Scores two recipes across title, ingredients, instructions, servings and
total time, and classifies pairs as duplicate, similar or different.
"""

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, replace
from typing import Any

from rapidfuzz.distance import Levenshtein

from .recipe import Ingredient, Instruction, Recipe

DUPLICATE_THRESHOLD = 0.85  # Above this is considered a duplicate
VERY_SIMILAR_THRESHOLD = 0.75
SIMILAR_THRESHOLD = 0.60  # Above this is considered similar
INGREDIENT_MATCH_THRESHOLD = 0.8  # Minimum name similarity for two ingredients to match

# Component weights, must sum to 1.0
TITLE_WEIGHT = 0.40
INGREDIENT_WEIGHT = 0.30
INSTRUCTION_WEIGHT = 0.20
SERVINGS_WEIGHT = 0.05
TIME_WEIGHT = 0.05

NEUTRAL_SCORE = 0.5  # Used when a numeric field is unknown
MIN_WORD_LENGTH = 3


@dataclass(frozen=True)
class SimilarityScore:
    """Similarity score breakdown, every value in [0, 1]."""

    overall: float
    title: float
    ingredient: float
    instruction: float
    servings: float
    time: float

    def to_dict(self) -> dict[str, float]:
        return {
            "overall": self.overall,
            "titleSimilarity": self.title,
            "ingredientSimilarity": self.ingredient,
            "instructionSimilarity": self.instruction,
            "servingsSimilarity": self.servings,
            "timeSimilarity": self.time,
        }


@dataclass(frozen=True)
class RecipeMatch:
    """A candidate recipe with its score against a target."""

    recipe: Recipe
    score: SimilarityScore

    @property
    def is_duplicate(self) -> bool:
        return self.score.overall >= DUPLICATE_THRESHOLD


def string_similarity(str1: str, str2: str) -> float:
    """
    Normalized edit-distance similarity between two strings.

    Returns 0 when either string is empty, 1 for equal strings (ignoring case
    and surrounding whitespace), otherwise 1 - distance / longest length.
    """
    if not str1 or not str2:
        return 0.0

    s1 = str1.lower().strip()
    s2 = str2.lower().strip()

    if s1 == s2:
        return 1.0

    max_len = max(len(s1), len(s2))
    if max_len == 0:
        return 1.0

    return 1 - Levenshtein.distance(s1, s2) / max_len


def normalize_ingredient_name(name: str) -> str:
    """Lowercase, strip everything but letters/digits/spaces, collapse whitespace."""
    name = re.sub(r"[^a-z0-9\s]", "", name.lower())
    return re.sub(r"\s+", " ", name).strip()


def calculate_ingredient_similarity(
    ingredients1: Sequence[Ingredient], ingredients2: Sequence[Ingredient]
) -> float:
    """
    Jaccard similarity of two ingredient lists with fuzzy name matching.

    Each name in the first list is greedily paired, in order, with the most
    similar unconsumed name of the second list, provided the similarity is
    above INGREDIENT_MATCH_THRESHOLD. The matching is intentionally greedy
    and order dependent; the thresholds are calibrated against it.
    """
    if not ingredients1 and not ingredients2:
        return 1.0
    if not ingredients1 or not ingredients2:
        return 0.0

    names1 = [normalize_ingredient_name(ing.name) for ing in ingredients1]
    names2 = [normalize_ingredient_name(ing.name) for ing in ingredients2]
    names1 = [name for name in names1 if name]
    names2 = [name for name in names2 if name]

    if not names1 and not names2:
        return 1.0
    if not names1 or not names2:
        return 0.0

    matches = 0
    consumed: set[int] = set()

    for name1 in names1:
        best_score = 0.0
        best_index = -1

        for index, name2 in enumerate(names2):
            if index in consumed:
                continue
            score = string_similarity(name1, name2)
            if score > best_score and score > INGREDIENT_MATCH_THRESHOLD:
                best_score = score
                best_index = index

        if best_index != -1:
            matches += 1
            consumed.add(best_index)

    union = len(names1) + len(names2) - matches
    return matches / union if union > 0 else 0.0


def calculate_instruction_similarity(
    instructions1: Sequence[Instruction], instructions2: Sequence[Instruction]
) -> float:
    """Word-set Jaccard similarity of the concatenated instruction texts."""
    if not instructions1 and not instructions2:
        return 1.0
    if not instructions1 or not instructions2:
        return 0.0

    text1 = " ".join(step.text for step in instructions1).lower()
    text2 = " ".join(step.text for step in instructions2).lower()

    if not text1.strip() and not text2.strip():
        return 1.0
    if not text1.strip() or not text2.strip():
        return 0.0

    words1 = {word for word in text1.split() if len(word) >= MIN_WORD_LENGTH}
    words2 = {word for word in text2.split() if len(word) >= MIN_WORD_LENGTH}

    if not words1 and not words2:
        return 1.0
    if not words1 or not words2:
        # Only short words on one side: fall back to character similarity
        return string_similarity(text1, text2) * 0.5

    intersection = len(words1 & words2)
    union = len(words1) + len(words2) - intersection
    return intersection / union if union > 0 else 0.0


def numeric_similarity(n1: float | None, n2: float | None) -> float:
    """Relative-difference similarity of two numbers, 0.5 when either is unknown."""
    if n1 is None or n2 is None:
        return NEUTRAL_SCORE
    if n1 == n2:
        return 1.0

    diff = abs(n1 - n2)
    avg = (n1 + n2) / 2
    if avg == 0:
        return 0.0
    return max(0.0, 1 - diff / avg)


def calculate_recipe_similarity(recipe1: Recipe, recipe2: Recipe) -> SimilarityScore:
    """Weighted similarity of two recipes."""
    title = string_similarity(recipe1.title, recipe2.title)
    ingredient = calculate_ingredient_similarity(recipe1.ingredients, recipe2.ingredients)
    instruction = calculate_instruction_similarity(recipe1.instructions, recipe2.instructions)
    servings = numeric_similarity(recipe1.servings, recipe2.servings)

    total1 = recipe1.total_time
    total2 = recipe2.total_time
    time = numeric_similarity(total1, total2) if total1 > 0 and total2 > 0 else NEUTRAL_SCORE

    overall = (
        title * TITLE_WEIGHT
        + ingredient * INGREDIENT_WEIGHT
        + instruction * INSTRUCTION_WEIGHT
        + servings * SERVINGS_WEIGHT
        + time * TIME_WEIGHT
    )

    return SimilarityScore(
        overall=overall,
        title=title,
        ingredient=ingredient,
        instruction=instruction,
        servings=servings,
        time=time,
    )


def find_similar_recipes(
    target: Recipe,
    recipes: Sequence[Recipe],
    include_target: bool = False,
    min_score: float = SIMILAR_THRESHOLD,
) -> list[RecipeMatch]:
    """
    Score every candidate against the target and keep those >= min_score.

    Args:
        target: The recipe to compare against
        recipes: Candidate recipes
        include_target: Whether to score a candidate sharing the target's id
        min_score: Minimum overall score for a candidate to be returned

    Returns:
        Matches sorted by overall score, highest first
    """
    matches = []

    for recipe in recipes:
        if not include_target and recipe.id is not None and recipe.id == target.id:
            continue

        score = calculate_recipe_similarity(target, recipe)
        if score.overall >= min_score:
            matches.append(RecipeMatch(recipe=recipe, score=score))

    return sorted(matches, key=lambda m: m.score.overall, reverse=True)


def check_for_duplicates(
    new_recipe: Recipe | Mapping[str, Any], existing_recipes: Sequence[Recipe]
) -> list[RecipeMatch]:
    """
    Find existing recipes that are likely duplicates of a (partial) new recipe.

    Only candidates at or above DUPLICATE_THRESHOLD are returned. A partial
    recipe without ingredients or instructions scores 0 on those signals and
    will rarely reach the threshold.
    """
    if isinstance(new_recipe, Recipe):
        temp_recipe = replace(new_recipe, id="temp")
    else:
        temp_recipe = Recipe.from_dict({**new_recipe, "id": "temp"})

    return find_similar_recipes(temp_recipe, existing_recipes, min_score=DUPLICATE_THRESHOLD)


def get_similarity_description(score: float) -> str:
    """Human-readable label for an overall score."""
    if score >= DUPLICATE_THRESHOLD:
        return "Likely duplicate"
    if score >= VERY_SIMILAR_THRESHOLD:
        return "Very similar"
    if score >= SIMILAR_THRESHOLD:
        return "Similar"
    return "Different"


def _unique_names(ingredients: Sequence[Ingredient]) -> list[str]:
    names = (normalize_ingredient_name(ing.name) for ing in ingredients)
    return list(dict.fromkeys(name for name in names if name))


def _has_fuzzy_partner(name: str, others: Sequence[str]) -> bool:
    return any(string_similarity(name, other) > INGREDIENT_MATCH_THRESHOLD for other in others)


def get_recipe_differences(recipe1: Recipe, recipe2: Recipe) -> list[str]:
    """List the notable differences between two recipes."""
    differences = []

    if recipe1.title != recipe2.title:
        differences.append(f'Title: "{recipe1.title}" vs "{recipe2.title}"')

    if recipe1.servings != recipe2.servings:
        differences.append(
            f"Servings: {recipe1.servings or 'unspecified'} vs {recipe2.servings or 'unspecified'}"
        )

    if recipe1.total_time != recipe2.total_time:
        differences.append(f"Total time: {recipe1.total_time} min vs {recipe2.total_time} min")

    names1 = _unique_names(recipe1.ingredients)
    names2 = _unique_names(recipe2.ingredients)

    only_in_1 = [name for name in names1 if not _has_fuzzy_partner(name, names2)]
    only_in_2 = [name for name in names2 if not _has_fuzzy_partner(name, names1)]

    if only_in_1:
        differences.append(f"Only in first: {', '.join(only_in_1)}")
    if only_in_2:
        differences.append(f"Only in second: {', '.join(only_in_2)}")

    if len(recipe1.instructions) != len(recipe2.instructions):
        differences.append(
            f"Steps: {len(recipe1.instructions)} vs {len(recipe2.instructions)}"
        )

    return differences
