"""Recipe URL and text parsing module."""

import json
import logging
import re
from typing import Any

import httpx
from bs4 import BeautifulSoup

from .amounts import InvalidAmountError, parse_amount, replace_unicode_fractions
from .config import HTTP_TIMEOUT
from .recipe import Ingredient, Instruction, Recipe, build_instructions

logger = logging.getLogger(__name__)

USER_AGENT = "Mozilla/5.0 (compatible; recipebox/1.0)"


class RecipeParseError(Exception):
    """Exception raised when a recipe cannot be extracted."""

    pass


# Common units for parsing
UNITS = {
    # Volume
    "cup",
    "cups",
    "c",
    "tablespoon",
    "tablespoons",
    "tbsp",
    "tbs",
    "tb",
    "teaspoon",
    "teaspoons",
    "tsp",
    "ts",
    "ml",
    "milliliter",
    "milliliters",
    "l",
    "liter",
    "liters",
    "litre",
    "litres",
    "fl oz",
    "fluid ounce",
    "fluid ounces",
    "quart",
    "quarts",
    "pint",
    "pints",
    "gallon",
    "gallons",
    # Weight
    "g",
    "gram",
    "grams",
    "kg",
    "kilogram",
    "kilograms",
    "mg",
    "oz",
    "ounce",
    "ounces",
    "lb",
    "lbs",
    "pound",
    "pounds",
    # Count and other
    "piece",
    "pieces",
    "pcs",
    "clove",
    "cloves",
    "slice",
    "slices",
    "bunch",
    "bunches",
    "can",
    "cans",
    "package",
    "packages",
    "pkg",
    "stick",
    "sticks",
    "sprig",
    "sprigs",
    "pinch",
    "pinches",
    "dash",
    "dashes",
    "handful",
    "handfuls",
}

_QUANTITY_PATTERN = re.compile(
    r"^(\d+\s+\d+/\d+|\d+/\d+|\d+(?:[\.,]\d+)?(?:\s*[-–]\s*\d+(?:[\.,]\d+)?)?)"
)
_DURATION_PATTERN = re.compile(
    r"^P(?:(?P<days>\d+)D)?(?:T(?:(?P<hours>\d+)H)?(?:(?P<minutes>\d+)M)?(?:(?P<seconds>\d+)S)?)?$",
    re.IGNORECASE,
)


def parse_quantity(text: str) -> tuple[float | None, str]:
    """
    Parse quantity from the beginning of an ingredient string.

    Handles whole numbers, decimals (period or comma), fractions, mixed
    numbers, unicode fractions and ranges (first value).

    Returns:
        Tuple of (quantity, remaining_text)
    """
    text = replace_unicode_fractions(text)

    match = _QUANTITY_PATTERN.match(text)
    if not match:
        return None, text

    remaining = text[match.end() :].strip()
    try:
        return parse_amount(match.group(1)), remaining
    except InvalidAmountError:
        return None, text


def parse_unit(text: str) -> tuple[str | None, str]:
    """
    Parse unit from the beginning of text.

    Returns:
        Tuple of (unit, remaining_text)
    """
    text = text.strip()
    words = text.split()

    if not words:
        return None, text

    # Two-word units first (e.g., "fl oz", "fluid ounce")
    if len(words) >= 2:
        two_word = f"{words[0]} {words[1]}".lower()
        if two_word in UNITS:
            return two_word, " ".join(words[2:])

    first_word = words[0].lower().rstrip(",.")
    if first_word in UNITS and len(words) > 1:
        return first_word, " ".join(words[1:])

    return None, text


def parse_ingredient_text(text: str) -> Ingredient:
    """
    Parse a single ingredient line into structured data.

    Args:
        text: Raw ingredient text (e.g., "2 cups flour, sifted")

    Returns:
        Ingredient object with parsed data
    """
    original = text.strip()

    amount, remaining = parse_quantity(original)
    unit, remaining = parse_unit(remaining) if amount is not None else (None, remaining)

    notes = None
    name = remaining

    paren_match = re.search(r"\(([^)]+)\)", remaining)
    if paren_match:
        notes = paren_match.group(1).strip()
        name = remaining[: paren_match.start()] + remaining[paren_match.end() :]

    if "," in name:
        name, note_part = (part.strip() for part in name.split(",", 1))
        notes = f"{notes}, {note_part}" if notes else note_part

    name = re.sub(r"\s+", " ", name.strip().rstrip(",."))

    return Ingredient(name=name, amount=amount, unit=unit, notes=notes or None)


def parse_ingredients_text(text: str) -> list[Ingredient]:
    """
    Parse multiple ingredients from text (one per line).

    Args:
        text: Multi-line text with ingredients

    Returns:
        List of Ingredient objects
    """
    ingredients = []

    for line in text.strip().split("\n"):
        line = line.strip()
        # Skip empty lines and headers
        if not line or line.lower().startswith(("ingredients", "for the", "---")):
            continue
        line = re.sub(r"^[\-\*•▪→>]+\s*", "", line)
        line = re.sub(r"^\d+[\.\)]\s+", "", line)

        if line:
            ingredients.append(parse_ingredient_text(line))

    return ingredients


def parse_instructions_text(text: str) -> list[Instruction]:
    """Parse one instruction per line, dropping headers and step numbers."""
    steps = []

    for line in text.strip().split("\n"):
        line = line.strip()
        if not line or line.lower().startswith(("instructions", "directions", "method", "---")):
            continue
        line = re.sub(r"^(?:step\s*)?\d+[\.\):]?\s+", "", line, flags=re.IGNORECASE)
        line = re.sub(r"^[\-\*•]\s*", "", line)
        if line:
            steps.append(line)

    return build_instructions(steps)


def parse_recipe_text(
    title: str,
    ingredients_text: str,
    instructions_text: str = "",
    servings: int | None = None,
) -> Recipe:
    """
    Create a recipe from manual text input.

    Args:
        title: Recipe name
        ingredients_text: Multi-line ingredient list
        instructions_text: Multi-line instruction list
        servings: Optional serving size

    Returns:
        Recipe object
    """
    return Recipe(
        title=title,
        ingredients=parse_ingredients_text(ingredients_text),
        instructions=parse_instructions_text(instructions_text) if instructions_text else [],
        servings=servings,
    )


def parse_duration(value: Any) -> int | None:
    """Convert an ISO 8601 duration ("PT1H30M") to whole minutes."""
    if isinstance(value, int | float):
        return int(value)
    if not isinstance(value, str):
        return None

    match = _DURATION_PATTERN.match(value.strip())
    if not match or not any(match.groupdict().values()):
        return None

    parts = {key: int(val) for key, val in match.groupdict().items() if val}
    minutes = (
        parts.get("days", 0) * 24 * 60
        + parts.get("hours", 0) * 60
        + parts.get("minutes", 0)
        + parts.get("seconds", 0) // 60
    )
    return minutes


def _parse_servings(recipe_yield: Any) -> int | None:
    if isinstance(recipe_yield, list):
        recipe_yield = recipe_yield[0] if recipe_yield else None
    if isinstance(recipe_yield, int | float):
        return int(recipe_yield)
    if recipe_yield:
        match = re.search(r"(\d+)", str(recipe_yield))
        if match:
            return int(match.group(1))
    return None


def _instruction_texts(raw: Any) -> list[str]:
    """Flatten schema.org recipeInstructions (strings, HowToStep, HowToSection)."""
    if isinstance(raw, str):
        return [line for line in (part.strip() for part in raw.split("\n")) if line]

    texts: list[str] = []
    for item in raw or []:
        if isinstance(item, str):
            texts.append(item.strip())
        elif isinstance(item, dict):
            if item.get("@type") == "HowToSection":
                texts.extend(_instruction_texts(item.get("itemListElement")))
            elif item.get("text") or item.get("name"):
                texts.append(str(item.get("text") or item.get("name")).strip())
    return [text for text in texts if text]


def _is_recipe_type(item: Any) -> bool:
    if not isinstance(item, dict):
        return False
    item_type = item.get("@type")
    if isinstance(item_type, list):
        return "Recipe" in item_type
    return item_type == "Recipe"


def _extract_json_ld_recipe(soup: BeautifulSoup) -> dict[str, Any] | None:
    """Extract recipe data from JSON-LD script tags."""
    for script in soup.find_all("script", type="application/ld+json"):
        try:
            data = json.loads(script.string or "")
        except (json.JSONDecodeError, TypeError):
            continue

        # Handle single object, array and @graph formats
        if isinstance(data, list):
            candidates = data
        elif isinstance(data, dict) and "@graph" in data:
            candidates = data["@graph"]
        else:
            candidates = [data]

        for item in candidates:
            if _is_recipe_type(item):
                return item

    return None


def _recipe_from_json_ld(data: dict[str, Any], url: str) -> Recipe:
    raw_ingredients = data.get("recipeIngredient") or []
    if isinstance(raw_ingredients, str):
        raw_ingredients = [raw_ingredients]

    return Recipe(
        title=str(data.get("name") or "Unknown Recipe").strip(),
        description=data.get("description"),
        ingredients=[parse_ingredient_text(ing) for ing in raw_ingredients if ing.strip()],
        instructions=build_instructions(_instruction_texts(data.get("recipeInstructions"))),
        servings=_parse_servings(data.get("recipeYield")),
        prep_time=parse_duration(data.get("prepTime")),
        cook_time=parse_duration(data.get("cookTime")),
        source_url=url,
    )


def _first_text(soup: BeautifulSoup, selectors: list[str]) -> str | None:
    for selector in selectors:
        elem = soup.select_one(selector)
        if elem and elem.get_text(strip=True):
            return elem.get_text(strip=True)
    return None


def _list_texts(soup: BeautifulSoup, selectors: list[str]) -> list[str]:
    for selector in selectors:
        texts = [elem.get_text(" ", strip=True) for elem in soup.select(selector)]
        texts = [text for text in texts if text]
        if texts:
            return texts
    return []


def _recipe_from_html(soup: BeautifulSoup, url: str) -> Recipe:
    """Fallback extraction from microdata and common HTML patterns."""
    title = _first_text(soup, ["[itemprop='name']", ".recipe-title", "h1", ".entry-title"])

    servings_text = _first_text(
        soup, ["[itemprop='recipeYield']", ".servings", ".yield", ".recipe-servings"]
    )

    raw_ingredients = _list_texts(
        soup,
        [
            "[itemprop='recipeIngredient']",
            "[itemprop='ingredients']",
            ".ingredients li",
            ".recipe-ingredients li",
            ".ingredient-list li",
            ".wprm-recipe-ingredient",
        ],
    )

    raw_instructions = _list_texts(
        soup,
        [
            "[itemprop='recipeInstructions'] li",
            "[itemprop='recipeInstructions']",
            ".instructions li",
            ".recipe-instructions li",
            ".directions li",
            ".wprm-recipe-instruction",
        ],
    )

    return Recipe(
        title=title or "Unknown Recipe",
        ingredients=[parse_ingredient_text(ing) for ing in raw_ingredients],
        instructions=build_instructions(raw_instructions),
        servings=_parse_servings(servings_text),
        source_url=url,
    )


def parse_recipe_html(html: str, url: str) -> Recipe:
    """
    Extract a recipe from an HTML page.

    JSON-LD structured data is preferred; microdata and common HTML patterns
    are used as a fallback.

    Raises:
        RecipeParseError: If the page contains no usable recipe
    """
    soup = BeautifulSoup(html, "html.parser")

    json_ld = _extract_json_ld_recipe(soup)
    if json_ld:
        recipe = _recipe_from_json_ld(json_ld, url)
    else:
        recipe = _recipe_from_html(soup, url)

    # A page without ingredients or instructions is not a recipe
    if not recipe.ingredients and not recipe.instructions:
        raise RecipeParseError(f"No valid recipe data found on {url}")

    return recipe


def parse_recipe_url(url: str) -> Recipe:
    """
    Parse a recipe from a URL.

    Args:
        url: URL to a recipe page

    Returns:
        Recipe object with parsed data

    Raises:
        RecipeParseError: If the page cannot be fetched or holds no recipe
    """
    logger.debug("Fetching recipe page %s", url)
    try:
        response = httpx.get(
            url,
            follow_redirects=True,
            timeout=HTTP_TIMEOUT,
            headers={"User-Agent": USER_AGENT},
        )
        response.raise_for_status()
    except httpx.HTTPError as e:
        raise RecipeParseError(f"Failed to fetch {url}: {e}") from e

    return parse_recipe_html(response.text, url)
