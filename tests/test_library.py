"""Tests for the recipe library persistence module."""

import json

import pytest

from recipebox.library import (
    LibraryError,
    delete_recipe,
    get_recipe,
    list_recipes,
    load_all_recipes,
    recipe_exists,
    save_recipe,
)
from recipebox.recipe import Ingredient, Recipe


@pytest.fixture
def library_file(storage):
    return storage / "library.json"


class TestSaveRecipe:
    """Tests for save_recipe function."""

    def test_assigns_id_and_timestamps(self, library_file, make_recipe):
        saved = save_recipe(make_recipe(id=None, created_at=None, updated_at=None))

        assert saved.id
        assert saved.created_at
        assert saved.updated_at
        assert recipe_exists(saved.id)

        data = json.loads(library_file.read_text())
        assert data[saved.id]["title"] == "Chocolate Chip Cookies"

    def test_numbers_ingredients(self, library_file):
        recipe = Recipe(
            title="Pancakes",
            ingredients=[Ingredient(name="flour", amount=2), Ingredient(name="eggs", amount=2)],
        )
        saved = save_recipe(recipe)
        assert [ing.id for ing in saved.ingredients] == ["1", "2"]

    def test_keeps_existing_ingredient_ids(self, library_file, make_recipe):
        saved = save_recipe(make_recipe(id="cookies"))
        assert saved.ingredients[6].id == "7"

    def test_duplicate_id_raises(self, library_file, make_recipe):
        save_recipe(make_recipe(id="cookies"))

        with pytest.raises(LibraryError, match="already exists"):
            save_recipe(make_recipe(id="cookies"))

    def test_overwrite(self, library_file, make_recipe):
        save_recipe(make_recipe(id="cookies"))
        save_recipe(make_recipe(id="cookies", title="Better Cookies"), overwrite=True)

        assert get_recipe("cookies").title == "Better Cookies"

    def test_creates_parent_directory(self, tmp_path, monkeypatch, make_recipe):
        nested = tmp_path / "nested" / "library.json"
        monkeypatch.setattr("recipebox.library.LIBRARY_FILE", nested)

        save_recipe(make_recipe(id="cookies"))

        assert nested.exists()


class TestGetRecipe:
    """Tests for get_recipe function."""

    def test_round_trip(self, library_file, make_recipe):
        original = make_recipe(id="cookies")
        save_recipe(original)

        loaded = get_recipe("cookies")

        assert loaded.title == original.title
        assert loaded.servings == 24
        assert len(loaded.ingredients) == 9
        assert loaded.ingredients[5].amount == 2.25
        assert len(loaded.instructions) == 6

    def test_missing_raises(self, library_file):
        with pytest.raises(LibraryError, match="not found"):
            get_recipe("nope")

    def test_corrupt_file_raises(self, library_file):
        library_file.write_text("{not json")

        with pytest.raises(LibraryError, match="Failed to load"):
            get_recipe("cookies")


class TestListRecipes:
    """Tests for list_recipes function."""

    def test_empty(self, library_file):
        assert list_recipes() == []

    def test_summaries_newest_first(self, library_file, make_recipe):
        library_file.write_text(
            json.dumps(
                {
                    "old": {**make_recipe(id="old").to_dict(), "updatedAt": "2024-01-01T00:00:00"},
                    "new": {
                        **make_recipe(id="new", title="Brownies").to_dict(),
                        "updatedAt": "2024-06-01T00:00:00",
                    },
                }
            )
        )

        summaries = list_recipes()

        assert [s["id"] for s in summaries] == ["new", "old"]
        assert summaries[0]["title"] == "Brownies"
        assert summaries[0]["ingredient_count"] == 9
        assert summaries[0]["step_count"] == 6
        assert summaries[0]["servings"] == 24


class TestDeleteRecipe:
    """Tests for delete_recipe function."""

    def test_delete(self, library_file, make_recipe):
        save_recipe(make_recipe(id="cookies"))
        delete_recipe("cookies")
        assert not recipe_exists("cookies")

    def test_delete_missing_raises(self, library_file):
        with pytest.raises(LibraryError):
            delete_recipe("nope")


class TestLoadAllRecipes:
    """Tests for load_all_recipes function."""

    def test_loads_recipes(self, library_file, make_recipe):
        save_recipe(make_recipe(id="a"))
        save_recipe(make_recipe(id="b"))

        assert {r.id for r in load_all_recipes()} == {"a", "b"}

    def test_limit(self, library_file, make_recipe):
        for recipe_id in ("a", "b", "c"):
            save_recipe(make_recipe(id=recipe_id))

        assert len(load_all_recipes(limit=2)) == 2

    def test_default_limit_from_config(self, library_file, monkeypatch, make_recipe):
        monkeypatch.setattr("recipebox.config.MAX_CANDIDATES", 1)
        save_recipe(make_recipe(id="a"))
        save_recipe(make_recipe(id="b"))

        assert len(load_all_recipes()) == 1

    def test_skips_unreadable_entries(self, library_file, caplog, make_recipe):
        library_file.write_text(
            json.dumps(
                {
                    "good": make_recipe(id="good").to_dict(),
                    "bad": {"title": "Bad", "ingredients": [{"ingredient": "x", "amount": "lots"}]},
                }
            )
        )

        recipes = load_all_recipes()

        assert [r.id for r in recipes] == ["good"]
        assert "Skipping unreadable recipe bad" in caplog.text

    def test_missing_file(self, library_file):
        assert load_all_recipes() == []
