"""Unit tests for the amounts module."""

from decimal import Decimal

import pytest

from recipebox.amounts import (
    InvalidAmountError,
    parse_amount,
    parse_optional_amount,
    replace_unicode_fractions,
    round_half_up,
)


class TestParseAmount:
    """Tests for parse_amount function."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            (2, 2.0),
            (1.5, 1.5),
            (Decimal("0.25"), 0.25),
            ("2", 2.0),
            ("1.5", 1.5),
            ("1,5", 1.5),
            (".5", 0.5),
            ("1/2", 0.5),
            ("1 1/2", 1.5),
            ("½", 0.5),
            ("1½", 1.5),
            ("2-3", 2.0),
            ("  3 ", 3.0),
            ("-2", -2.0),
        ],
    )
    def test_valid(self, value, expected):
        assert parse_amount(value) == pytest.approx(expected)

    @pytest.mark.parametrize(
        "value",
        ["", "lots", "1/0", "abc2", None, True, [], float("nan"), float("inf"), "inf", "nan"],
    )
    def test_invalid(self, value):
        with pytest.raises(InvalidAmountError):
            parse_amount(value)

    def test_error_is_value_error(self):
        with pytest.raises(ValueError):
            parse_amount("a pinch")


class TestParseOptionalAmount:
    """Tests for parse_optional_amount function."""

    def test_none(self):
        assert parse_optional_amount(None) is None

    def test_blank(self):
        assert parse_optional_amount("  ") is None

    def test_value(self):
        assert parse_optional_amount("3/4") == 0.75

    def test_invalid_still_raises(self):
        with pytest.raises(InvalidAmountError):
            parse_optional_amount("some")


class TestReplaceUnicodeFractions:
    """Tests for replace_unicode_fractions function."""

    def test_attached_to_number(self):
        assert replace_unicode_fractions("1½ cups") == "1 1/2 cups"

    def test_standalone(self):
        assert replace_unicode_fractions("¾ cup") == "3/4 cup"

    def test_no_fraction(self):
        assert replace_unicode_fractions(" 2 eggs ") == "2 eggs"


class TestRoundHalfUp:
    """Tests for round_half_up function."""

    @pytest.mark.parametrize(
        "value,expected",
        [(2.125, 2.13), (2.124, 2.12), (1.005, 1.01), (0.5, 0.5), (-2.125, -2.13)],
    )
    def test_two_places(self, value, expected):
        assert round_half_up(value) == expected

    def test_three_places(self):
        assert round_half_up(0.6666666, 3) == 0.667
