"""CLI entry point for recipebox."""

import json
from pathlib import Path
from typing import Any

import click

from .adjustments import (
    AdjustmentsError,
    clear_adjustments,
    get_adjustments,
    remove_adjustment,
    set_adjustment,
)
from .amounts import InvalidAmountError
from .duplicate_check import DuplicateCheckError, check_duplicates_request
from .library import (
    LibraryError,
    delete_recipe,
    get_recipe,
    list_recipes,
    load_all_recipes,
    recipe_exists,
    save_recipe,
)
from .logging_utils import setup_logging
from .recipe import Recipe
from .recipe_parser import RecipeParseError, parse_recipe_text, parse_recipe_url
from .scaler import format_amount, format_scale_info, format_scaled_ingredient, scale_recipe
from .scaling_rules import detect_ingredient_category, get_rule
from .similarity import (
    calculate_recipe_similarity,
    check_for_duplicates,
    find_similar_recipes,
    get_recipe_differences,
    get_similarity_description,
)


def load_recipe_file(path: str) -> dict[str, Any]:
    """Read a recipe JSON file."""
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        click.echo(f"✗ Could not read {path}: {e}", err=True)
        raise SystemExit(1) from None

    if not isinstance(data, dict):
        click.echo(f"✗ {path} does not contain a recipe object", err=True)
        raise SystemExit(1)
    return data


def resolve_recipe(ref: str) -> Recipe:
    """Load a recipe from a JSON file path or a library id."""
    if Path(ref).is_file():
        try:
            return Recipe.from_dict(load_recipe_file(ref))
        except (TypeError, ValueError) as e:
            click.echo(f"✗ Invalid recipe in {ref}: {e}", err=True)
            raise SystemExit(1) from None

    try:
        return get_recipe(ref)
    except LibraryError as e:
        click.echo(f"✗ {e}", err=True)
        raise SystemExit(1) from None


def display_recipe(recipe: Recipe) -> None:
    """Display a stored or parsed recipe."""
    click.echo()
    click.echo("=" * 60)
    click.echo(f"RECIPE: {recipe.title}")
    click.echo("=" * 60)

    if recipe.id:
        click.echo(f"ID: {recipe.id}")
    if recipe.source_url:
        click.echo(f"Source: {recipe.source_url}")
    if recipe.description:
        click.echo(recipe.description)
    if recipe.servings:
        click.echo(f"Servings: {recipe.servings}")
    if recipe.total_time:
        click.echo(f"Time: {recipe.prep_time or 0} min prep, {recipe.cook_time or 0} min cook")

    click.echo("\nIngredients:")
    for ing in recipe.ingredients:
        prefix = f"[{ing.id}] " if ing.id else ""
        click.echo(f"  {prefix}{ing}")

    if recipe.instructions:
        click.echo("\nInstructions:")
        for step in recipe.instructions:
            click.echo(f"  {step.step_number}. {step.text}")

    click.echo()


def display_score(score) -> None:
    """Display the component scores of a comparison."""
    click.echo(f"  Overall:      {score.overall:.0%} ({get_similarity_description(score.overall)})")
    click.echo(f"  Title:        {score.title:.0%}")
    click.echo(f"  Ingredients:  {score.ingredient:.0%}")
    click.echo(f"  Instructions: {score.instruction:.0%}")
    click.echo(f"  Servings:     {score.servings:.0%}")
    click.echo(f"  Time:         {score.time:.0%}")


# ============================================================================
# Main CLI Group
# ============================================================================


@click.group()
@click.version_option(version="1.0.0", prog_name="recipebox")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool):
    """Recipe library with duplicate detection and smart scaling.

    Store recipes, find near-duplicates and similar recipes, and scale
    ingredient amounts with per-category rules.
    """
    setup_logging("DEBUG" if verbose else None)


# ============================================================================
# Library Commands
# ============================================================================


@cli.group()
def library():
    """Manage your recipe library."""
    pass


@library.command("add")
@click.argument("file", required=False, type=click.Path(exists=True, dir_okay=False))
@click.option("--url", "-u", help="Import a recipe from a web page")
@click.option("--text", "-t", "input_text", help="Ingredients as text (one per line or comma separated)")
@click.option("--title", help="Recipe title (for text input)")
@click.option("--instructions", "-i", help="Instructions as text (for text input)")
@click.option("--servings", "-S", type=int, help="Serving size (for text input)")
@click.option("--yes", "-y", is_flag=True, help="Save even if likely duplicates exist")
def library_add(
    file: str | None,
    url: str | None,
    input_text: str | None,
    title: str | None,
    instructions: str | None,
    servings: int | None,
    yes: bool,
):
    """Add a recipe from a JSON file, a URL or text.

    Examples:

    \b
        recipebox library add cookies.json
        recipebox library add --url https://recipe.com/pasta
        recipebox library add --text "2 eggs, 100g flour" --title "Pancakes"
    """
    sources = [source for source in (file, url, input_text) if source]
    if len(sources) != 1:
        click.echo("✗ Provide exactly one of FILE, --url or --text.", err=True)
        raise SystemExit(1)

    try:
        if file:
            recipe = Recipe.from_dict(load_recipe_file(file))
        elif url:
            click.echo(f"Parsing recipe from: {url}")
            recipe = parse_recipe_url(url)
        else:
            assert input_text is not None  # Validated above
            if "," in input_text and "\n" not in input_text:
                input_text = input_text.replace(",", "\n")
            recipe = parse_recipe_text(
                title or "Manual Recipe", input_text, instructions or "", servings
            )
    except RecipeParseError as e:
        click.echo(f"✗ Failed to parse recipe: {e}", err=True)
        raise SystemExit(1) from None
    except (TypeError, ValueError) as e:
        click.echo(f"✗ Invalid recipe: {e}", err=True)
        raise SystemExit(1) from None

    try:
        duplicates = check_for_duplicates(recipe, load_all_recipes())
        if duplicates:
            click.echo("⚠️  Possible duplicates already in your library:")
            for match in duplicates:
                click.echo(f"  • {match.recipe.title} [{match.recipe.id}] ({match.score.overall:.0%})")
            if not yes and not click.confirm("Save anyway?"):
                click.echo("Cancelled.")
                return

        saved = save_recipe(recipe)
    except LibraryError as e:
        click.echo(f"✗ {e}", err=True)
        raise SystemExit(1) from None

    click.echo(f"✓ Saved '{saved.title}' as {saved.id}")


@library.command("list")
def library_list():
    """List saved recipes."""
    try:
        recipes = list_recipes()
    except LibraryError as e:
        click.echo(f"✗ {e}", err=True)
        raise SystemExit(1) from None

    click.echo()
    click.echo("YOUR RECIPES")
    click.echo("=" * 50)

    if not recipes:
        click.echo("  (empty)")
        click.echo()
        return

    for summary in recipes:
        servings = f", serves {summary['servings']}" if summary["servings"] else ""
        click.echo(
            f"  {summary['id']}  {summary['title']} "
            f"({summary['ingredient_count']} ingredients{servings})"
        )

    click.echo()
    click.echo(f"Total: {len(recipes)} recipes")
    click.echo()


@library.command("show")
@click.argument("recipe_id")
def library_show(recipe_id: str):
    """Show a saved recipe."""
    display_recipe(resolve_recipe(recipe_id))


@library.command("remove")
@click.argument("recipe_id")
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
def library_remove(recipe_id: str, yes: bool):
    """Remove a recipe and its custom adjustments."""
    try:
        exists = recipe_exists(recipe_id)
    except LibraryError as e:
        click.echo(f"✗ {e}", err=True)
        raise SystemExit(1) from None

    if not exists:
        click.echo(f"✗ Recipe '{recipe_id}' not found", err=True)
        raise SystemExit(1)

    if not yes:
        if not click.confirm(f"Remove recipe {recipe_id}?"):
            click.echo("Cancelled.")
            return

    try:
        delete_recipe(recipe_id)
        clear_adjustments(recipe_id)
    except (LibraryError, AdjustmentsError) as e:
        click.echo(f"✗ {e}", err=True)
        raise SystemExit(1) from None

    click.echo(f"✓ Removed {recipe_id}")


# ============================================================================
# Similarity Commands
# ============================================================================


@cli.command()
@click.argument("first")
@click.argument("second")
def compare(first: str, second: str):
    """Compare two recipes (library ids or JSON files).

    Examples:

    \b
        recipebox compare 1a2b3c4d 5e6f7a8b
        recipebox compare cookies.json 1a2b3c4d
    """
    recipe1 = resolve_recipe(first)
    recipe2 = resolve_recipe(second)

    score = calculate_recipe_similarity(recipe1, recipe2)

    click.echo()
    click.echo(f"{recipe1.title}  vs  {recipe2.title}")
    click.echo("-" * 60)
    display_score(score)

    differences = get_recipe_differences(recipe1, recipe2)
    if differences:
        click.echo("\nDifferences:")
        for difference in differences:
            click.echo(f"  • {difference}")
    click.echo()


@cli.command()
@click.argument("recipe_id")
@click.option("--min-score", "-m", default=0.6, type=click.FloatRange(0, 1), help="Minimum overall score")
def similar(recipe_id: str, min_score: float):
    """List library recipes similar to a recipe."""
    target = resolve_recipe(recipe_id)

    try:
        matches = find_similar_recipes(target, load_all_recipes(), min_score=min_score)
    except LibraryError as e:
        click.echo(f"✗ {e}", err=True)
        raise SystemExit(1) from None

    if not matches:
        click.echo(f"No recipes similar to '{target.title}'.")
        return

    click.echo(f"Recipes similar to '{target.title}':")
    for match in matches:
        label = get_similarity_description(match.score.overall)
        click.echo(
            f"  {match.recipe.id}  {match.recipe.title} ({match.score.overall:.0%}, {label})"
        )


@cli.command()
@click.argument("file", required=False, type=click.Path(exists=True, dir_okay=False))
@click.option("--url", "-u", help="Check a recipe from a web page")
def check(file: str | None, url: str | None):
    """Check a recipe against the library for duplicates before saving it."""
    if bool(file) == bool(url):
        click.echo("✗ Provide either FILE or --url.", err=True)
        raise SystemExit(1)

    try:
        if file:
            payload = load_recipe_file(file)
        else:
            assert url is not None  # Validated above
            payload = parse_recipe_url(url).to_dict()
        result = check_duplicates_request(payload, load_all_recipes())
    except (RecipeParseError, DuplicateCheckError, LibraryError) as e:
        click.echo(f"✗ {e}", err=True)
        raise SystemExit(1) from None

    duplicates = result["duplicates"]
    if not duplicates:
        click.echo(f"✓ No duplicates found ({result['totalChecked']} recipes checked)")
        return

    click.echo(f"⚠️  {len(duplicates)} likely duplicate(s) ({result['totalChecked']} recipes checked):")
    for duplicate in duplicates:
        recipe = duplicate["recipe"]
        click.echo(f"  • {recipe['title']} [{recipe['id']}] ({duplicate['score']['overall']:.0%})")


# ============================================================================
# Scaling Commands
# ============================================================================


@cli.command()
@click.argument("recipe_id")
@click.option("--scale", "-s", type=float, help="Scale recipe by multiplier (e.g., 2 for double)")
@click.option("--servings", "-S", type=int, help="Scale to target servings")
@click.option("--linear", is_flag=True, help="Scale every ingredient linearly")
def scale(recipe_id: str, scale: float | None, servings: int | None, linear: bool):
    """Scale a recipe's ingredients.

    Spices, leaveners and similar ingredients scale less than linearly.
    Custom amounts saved with 'recipebox adjust' take precedence.

    Examples:

    \b
        recipebox scale 1a2b3c4d --scale 2
        recipebox scale 1a2b3c4d --servings 8 --linear
    """
    if scale is None and servings is None:
        click.echo("✗ Provide --scale or --servings.", err=True)
        raise SystemExit(1)

    recipe = resolve_recipe(recipe_id)

    try:
        custom = {} if linear else get_adjustments(recipe.id or recipe_id)
        scaled_ings, factor, new_servings = scale_recipe(
            recipe, target_servings=servings, multiplier=scale, custom_adjustments=custom
        )
    except (ValueError, AdjustmentsError) as e:
        click.echo(f"✗ {e}", err=True)
        raise SystemExit(1) from None

    click.echo()
    click.echo(f"{recipe.title}: {format_scale_info(factor, recipe.servings, new_servings)}")
    click.echo("-" * 60)

    if linear:
        for ing in recipe.ingredients:
            click.echo(f"  {format_scaled_ingredient(ing, factor)}")
        click.echo()
        return

    for scaled in scaled_ings:
        line = f"  {scaled}"
        if scaled.has_custom_adjustment:
            line += "  (custom)"
        elif scaled.reason:
            line += f"  ({scaled.reason})"
        click.echo(line)
    click.echo()


@cli.command()
@click.argument("recipe_id")
@click.argument("ingredient_id", required=False)
@click.argument("amount", required=False)
@click.option("--scale", "-s", type=float, help="Multiplier the custom amount applies to")
@click.option("--remove", is_flag=True, help="Remove the custom amount for one ingredient")
@click.option("--clear", is_flag=True, help="Remove all custom amounts for the recipe")
def adjust(
    recipe_id: str,
    ingredient_id: str | None,
    amount: str | None,
    scale: float | None,
    remove: bool,
    clear: bool,
):
    """Save a custom amount for one ingredient at a given multiplier.

    Examples:

    \b
        recipebox adjust 1a2b3c4d 3 "1 1/2" --scale 2
        recipebox adjust 1a2b3c4d 3 --scale 2 --remove
        recipebox adjust 1a2b3c4d --clear
    """
    if clear:
        try:
            removed = clear_adjustments(recipe_id)
        except AdjustmentsError as e:
            click.echo(f"✗ {e}", err=True)
            raise SystemExit(1) from None
        click.echo(f"✓ Cleared {removed} custom amount(s)")
        return

    if ingredient_id is None or scale is None or (amount is None and not remove):
        click.echo("✗ Provide INGREDIENT_ID, AMOUNT and --scale, or use --clear.", err=True)
        raise SystemExit(1)

    recipe = resolve_recipe(recipe_id)
    ingredient = next((ing for ing in recipe.ingredients if ing.id == ingredient_id), None)
    if ingredient is None:
        click.echo(f"✗ Ingredient '{ingredient_id}' not found in {recipe.title}", err=True)
        raise SystemExit(1)

    try:
        if remove:
            if remove_adjustment(recipe_id, ingredient_id, scale):
                click.echo(f"✓ Removed custom amount for {ingredient.name} at x{scale:g}")
            else:
                click.echo(f"No custom amount for {ingredient.name} at x{scale:g}")
            return

        value = set_adjustment(recipe_id, ingredient_id, scale, amount)
    except (InvalidAmountError, AdjustmentsError) as e:
        click.echo(f"✗ {e}", err=True)
        raise SystemExit(1) from None

    click.echo(f"✓ {ingredient.name} at x{scale:g}: {format_amount(value)}")


@cli.command()
@click.argument("names", nargs=-1, required=True)
def classify(names: tuple[str, ...]):
    """Show the scaling category and rule for ingredient names.

    Examples:

        recipebox classify "black pepper" "baking soda" eggs
    """
    for name in names:
        category = detect_ingredient_category(name)
        rule = get_rule(category)
        click.echo(f"{name}: {category.value} (x{rule.scaling_factor:g}) {rule.reason}")


# ============================================================================
# Entry Point
# ============================================================================


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
