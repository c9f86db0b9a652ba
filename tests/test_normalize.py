"""
Tests for name normalization and quantity parsing.
"""

from decimal import Decimal

from mealink.tools.normalize import normalize_name, parse_quantity, same_ingredient


class TestNormalizeName:
    def test_lowercases(self):
        assert normalize_name("Tomato") == "tomato"
        assert normalize_name("MILK") == "milk"

    def test_strips_surrounding_whitespace(self):
        """Should strip spaces, tabs and newlines at both ends."""
        assert normalize_name("  tomato  ") == "tomato"
        assert normalize_name("\ttofu\n") == "tofu"

    def test_keeps_inner_whitespace(self):
        assert normalize_name("Green  Pepper") == "green  pepper"

    def test_keeps_non_latin_text(self):
        assert normalize_name(" にんじん ") == "にんじん"
        assert normalize_name("鶏むね肉") == "鶏むね肉"

    def test_blank_is_empty(self):
        assert normalize_name("   ") == ""
        assert normalize_name("") == ""

    def test_same_ingredient(self):
        assert same_ingredient("Tomato", " tomato ")
        assert not same_ingredient("tomato", "tomatoes")


class TestParseQuantity:
    def test_parses_decimals(self):
        assert parse_quantity("1.5") == Decimal("1.5")
        assert parse_quantity(" 3 ") == Decimal("3")

    def test_non_numeric_is_zero(self):
        """Unparseable text is not an error, it becomes 0."""
        assert parse_quantity("abc") == Decimal(0)
        assert parse_quantity("1,5") == Decimal(0)

    def test_blank_or_missing_is_zero(self):
        assert parse_quantity("") == Decimal(0)
        assert parse_quantity("   ") == Decimal(0)
        assert parse_quantity(None) == Decimal(0)

    def test_negative_and_non_finite_are_zero(self):
        assert parse_quantity("-2") == Decimal(0)
        assert parse_quantity("NaN") == Decimal(0)
        assert parse_quantity("Infinity") == Decimal(0)

    def test_float_overflow_is_zero(self):
        """The store takes a float; values that would become inf are dropped."""
        assert parse_quantity("1e400") == Decimal(0)
        assert parse_quantity("1e300") == Decimal("1e300")
