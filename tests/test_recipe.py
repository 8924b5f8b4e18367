"""Unit tests for the recipe data model."""

import pytest

from recipebox.amounts import InvalidAmountError
from recipebox.recipe import Ingredient, Instruction, Recipe, build_instructions


class TestIngredient:
    """Tests for Ingredient dataclass."""

    def test_str(self):
        ing = Ingredient(name="flour", amount=2.0, unit="cups", notes="sifted")
        assert str(ing) == "2 cups flour (sifted)"

    def test_str_fractional_amount(self):
        assert str(Ingredient(name="sugar", amount=0.75, unit="cup")) == "0.75 cup sugar"

    def test_str_name_only(self):
        assert str(Ingredient(name="salt")) == "salt"

    def test_from_dict_field_contract(self):
        ing = Ingredient.from_dict(
            {"id": 3, "ingredient": "butter", "amount": "1 1/2", "unit": "cup", "notes": ""}
        )

        assert ing.id == "3"
        assert ing.name == "butter"
        assert ing.amount == 1.5
        assert ing.unit == "cup"
        assert ing.notes is None

    def test_from_dict_accepts_name_key(self):
        assert Ingredient.from_dict({"name": "salt"}).name == "salt"

    def test_from_dict_missing_name(self):
        ing = Ingredient.from_dict({"amount": 2})
        assert ing.name == ""
        assert ing.amount == 2.0

    def test_from_dict_invalid_amount(self):
        with pytest.raises(InvalidAmountError):
            Ingredient.from_dict({"ingredient": "flour", "amount": "heaps"})

    def test_to_dict(self):
        ing = Ingredient(name="eggs", amount=2.0, id="4")
        assert ing.to_dict() == {
            "id": "4",
            "ingredient": "eggs",
            "amount": 2.0,
            "unit": None,
            "notes": None,
        }


class TestBuildInstructions:
    """Tests for build_instructions function."""

    def test_plain_strings_numbered_from_one(self):
        steps = build_instructions(["Mix", "Bake"])
        assert steps == [Instruction(1, "Mix"), Instruction(2, "Bake")]

    def test_mappings(self):
        steps = build_instructions(
            [{"stepNumber": 5, "instruction": "Mix"}, {"stepNumber": 9, "instruction": "Bake"}]
        )
        assert [(s.step_number, s.text) for s in steps] == [(1, "Mix"), (2, "Bake")]

    def test_none_text(self):
        assert build_instructions([None])[0].text == ""


class TestRecipe:
    """Tests for Recipe dataclass."""

    def test_total_time(self):
        assert Recipe(title="T", prep_time=15, cook_time=12).total_time == 27
        assert Recipe(title="T", cook_time=12).total_time == 12
        assert Recipe(title="T").total_time == 0

    def test_from_dict_camel_case(self):
        recipe = Recipe.from_dict(
            {
                "id": "abc",
                "title": "Cookies",
                "servings": "24",
                "prepTime": 15,
                "cookTime": 12,
                "sourceUrl": "https://example.com",
                "ingredients": [{"ingredient": "flour", "amount": 2}],
                "instructions": ["Mix", {"instruction": "Bake"}],
            }
        )

        assert recipe.id == "abc"
        assert recipe.servings == 24
        assert recipe.total_time == 27
        assert recipe.source_url == "https://example.com"
        assert recipe.ingredients[0].amount == 2.0
        assert [s.text for s in recipe.instructions] == ["Mix", "Bake"]

    def test_from_dict_snake_case(self):
        recipe = Recipe.from_dict({"title": "Cookies", "prep_time": 5, "source_url": "x"})
        assert recipe.prep_time == 5
        assert recipe.source_url == "x"

    def test_from_dict_missing_fields(self):
        recipe = Recipe.from_dict({"title": "Cookies"})

        assert recipe.ingredients == []
        assert recipe.instructions == []
        assert recipe.servings is None
        assert recipe.id is None

    @pytest.mark.parametrize(
        "key,label",
        [("servings", "servings"), ("prepTime", "prep time"), ("cookTime", "cook time")],
    )
    def test_from_dict_rejects_non_finite_numbers(self, key, label):
        with pytest.raises(InvalidAmountError, match=f"Invalid {label}"):
            Recipe.from_dict({"title": "Cookies", key: float("inf")})

    @pytest.mark.parametrize("key", ["servings", "prepTime", "cookTime"])
    def test_from_dict_rejects_non_numeric(self, key):
        with pytest.raises(InvalidAmountError):
            Recipe.from_dict({"title": "Cookies", key: "several"})

    def test_from_dict_keeps_fractional_numbers(self):
        recipe = Recipe.from_dict(
            {"title": "Cookies", "servings": 4.5, "prepTime": "7.5", "cookTime": 10.0}
        )

        assert recipe.servings == 4.5
        assert recipe.prep_time == 7.5
        assert recipe.cook_time == 10
        assert isinstance(recipe.cook_time, int)

    def test_round_trip(self, cookie_recipe):
        assert Recipe.from_dict(cookie_recipe.to_dict()) == cookie_recipe
