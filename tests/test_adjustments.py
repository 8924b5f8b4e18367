"""Tests for the custom adjustments store."""

import json

import pytest

from recipebox.adjustments import (
    AdjustmentsError,
    clear_adjustments,
    get_adjustments,
    remove_adjustment,
    set_adjustment,
)
from recipebox.amounts import InvalidAmountError


@pytest.fixture
def adjustments_file(storage):
    return storage / "adjustments.json"


class TestSetAdjustment:
    """Tests for set_adjustment function."""

    def test_stores_under_key(self, adjustments_file):
        value = set_adjustment("cookies", "8", 2.0, 1.25)

        assert value == 1.25
        assert get_adjustments("cookies") == {"8-2": 1.25}
        assert json.loads(adjustments_file.read_text()) == {"cookies": {"8-2": 1.25}}

    def test_parses_amount_text(self, adjustments_file):
        assert set_adjustment("cookies", "6", 1.5, "3 1/2") == 3.5
        assert get_adjustments("cookies") == {"6-1.5": 3.5}

    def test_overwrites_same_key(self, adjustments_file):
        set_adjustment("cookies", "8", 2, 1)
        set_adjustment("cookies", "8", 2, 2)
        assert get_adjustments("cookies") == {"8-2": 2.0}

    def test_recipes_are_separate(self, adjustments_file):
        set_adjustment("cookies", "1", 2, 1)
        set_adjustment("brownies", "1", 2, 5)

        assert get_adjustments("cookies") == {"1-2": 1.0}
        assert get_adjustments("brownies") == {"1-2": 5.0}

    def test_invalid_amount_raises(self, adjustments_file):
        with pytest.raises(InvalidAmountError):
            set_adjustment("cookies", "1", 2, "plenty")

    def test_negative_amount_raises(self, adjustments_file):
        with pytest.raises(AdjustmentsError, match="negative"):
            set_adjustment("cookies", "1", 2, -1)


class TestGetAdjustments:
    """Tests for get_adjustments function."""

    def test_missing_file(self, adjustments_file):
        assert get_adjustments("cookies") == {}

    def test_corrupt_file_raises(self, adjustments_file):
        adjustments_file.write_text("[")

        with pytest.raises(AdjustmentsError):
            get_adjustments("cookies")


class TestRemoveAndClear:
    """Tests for remove_adjustment and clear_adjustments functions."""

    def test_remove_one(self, adjustments_file):
        set_adjustment("cookies", "1", 2, 1)
        set_adjustment("cookies", "2", 2, 1)

        assert remove_adjustment("cookies", "1", 2) is True
        assert get_adjustments("cookies") == {"2-2": 1.0}

    def test_remove_missing(self, adjustments_file):
        assert remove_adjustment("cookies", "1", 2) is False

    def test_remove_last_drops_recipe(self, adjustments_file):
        set_adjustment("cookies", "1", 2, 1)
        remove_adjustment("cookies", "1", 2)

        assert json.loads(adjustments_file.read_text()) == {}

    def test_clear(self, adjustments_file):
        set_adjustment("cookies", "1", 2, 1)
        set_adjustment("cookies", "1", 3, 1)

        assert clear_adjustments("cookies") == 2
        assert get_adjustments("cookies") == {}

    def test_clear_nothing(self, adjustments_file):
        assert clear_adjustments("cookies") == 0
        assert not adjustments_file.exists()
