"""Shared fixtures for recipebox tests."""

import pytest
import respx

from recipebox.recipe import Ingredient, Recipe, build_instructions

COOKIE_INGREDIENTS = [
    ("butter", 1, "cup"),
    ("sugar", 0.75, "cup"),
    ("brown sugar", 0.75, "cup"),
    ("eggs", 2, None),
    ("vanilla extract", 2, "tsp"),
    ("flour", 2.25, "cups"),
    ("baking soda", 1, "tsp"),
    ("salt", 1, "tsp"),
    ("chocolate chips", 2, "cups"),
]

COOKIE_STEPS = [
    "Preheat oven to 375°F",
    "Cream butter and sugars",
    "Add eggs and vanilla",
    "Mix in dry ingredients",
    "Fold in chocolate chips",
    "Drop by spoonfuls and bake 10-12 minutes",
]


def build_cookie_recipe(**overrides) -> Recipe:
    """Build a chocolate chip cookie recipe, overriding any field."""
    fields = {
        "id": "test-1",
        "title": "Chocolate Chip Cookies",
        "description": "Classic chocolate chip cookies",
        "prep_time": 15,
        "cook_time": 12,
        "servings": 24,
        "ingredients": [
            Ingredient(name=name, amount=amount, unit=unit, id=str(i))
            for i, (name, amount, unit) in enumerate(COOKIE_INGREDIENTS, 1)
        ],
        "instructions": build_instructions(COOKIE_STEPS),
        "created_at": "2024-01-01T00:00:00",
        "updated_at": "2024-01-01T00:00:00",
    }
    fields.update(overrides)
    return Recipe(**fields)


def build_ingredients(*names: str) -> list[Ingredient]:
    """Ingredients with just a name."""
    return [Ingredient(name=name) for name in names]


@pytest.fixture
def make_recipe():
    """Factory for cookie recipes with any field overridden."""
    return build_cookie_recipe


@pytest.fixture
def ingredients():
    """Factory for name-only ingredient lists."""
    return build_ingredients


@pytest.fixture
def cookie_recipe(make_recipe) -> Recipe:
    return make_recipe()


@pytest.fixture
def cookie_payload(make_recipe) -> dict:
    """A cookie recipe in the external field contract, without an id."""
    data = make_recipe().to_dict()
    del data["id"]
    return data


@pytest.fixture
def storage(tmp_path, monkeypatch):
    """Redirect the library and adjustment files to a temp directory."""
    library_file = tmp_path / "library.json"
    adjustments_file = tmp_path / "adjustments.json"
    monkeypatch.setattr("recipebox.library.LIBRARY_FILE", library_file)
    monkeypatch.setattr("recipebox.adjustments.ADJUSTMENTS_FILE", adjustments_file)
    return tmp_path


@pytest.fixture
def mock_httpx():
    """Activate respx mock for HTTP requests."""
    with respx.mock(assert_all_called=False) as respx_mock:
        yield respx_mock
