"""Tests for catalog_sync/common/text_utils.py"""

from decimal import Decimal

import pytest

from catalog_sync.common.text_utils import (
    clean_text,
    parse_flag,
    parse_int,
    parse_price,
    stringify_cell,
)


class TestParsePrice:
    def test_rouble_price_with_spaces_and_comma(self):
        assert parse_price("1 234,56 ₽") == "1234.56"

    def test_letters_only_is_zero(self):
        assert Decimal(parse_price("договорная")) == 0

    def test_none_is_zero(self):
        assert parse_price(None) == "0.00"

    def test_plain_integer_string(self):
        assert parse_price("7450") == "7450.00"

    def test_dot_decimal(self):
        assert parse_price("12.5") == "12.50"

    def test_european_thousands_dot(self):
        assert parse_price("1.234,56") == "1234.56"

    def test_english_thousands_comma(self):
        assert parse_price("1,234.56") == "1234.56"

    def test_repeated_separator_is_thousands(self):
        assert parse_price("1.234.567") == "1234567.00"

    def test_currency_suffix_with_dot(self):
        assert parse_price("990 руб.") == "990.00"

    def test_numeric_cells(self):
        assert parse_price(5990) == "5990.00"
        assert parse_price(9100.5) == "9100.50"
        assert parse_price(Decimal("19.999")) == "20.00"

    def test_nan_is_zero(self):
        assert parse_price(float("nan")) == "0.00"

    def test_only_separators_is_zero(self):
        assert parse_price(",.") == "0.00"

    @pytest.mark.parametrize("value", ["", "   ", "₽", "n/a", [], {}])
    def test_never_raises(self, value):
        assert Decimal(parse_price(value)) == 0


class TestParseInt:
    def test_units_suffix(self):
        assert parse_int("12 шт") == 12

    def test_thousands_space(self):
        assert parse_int("1 200") == 1200

    def test_float_cell(self):
        assert parse_int(15.0) == 15

    def test_default_on_garbage(self):
        assert parse_int("нет", default=7) == 7

    def test_none_gives_default(self):
        assert parse_int(None) == 0


class TestParseFlag:
    def test_russian_yes_no(self):
        assert parse_flag("Да", default=False) is True
        assert parse_flag("нет", default=True) is False

    def test_numbers(self):
        assert parse_flag(1, default=False) is True
        assert parse_flag(0, default=True) is False

    def test_unknown_uses_default(self):
        assert parse_flag("maybe", default=True) is True
        assert parse_flag(None, default=False) is False


class TestStringifyCell:
    def test_integral_float_loses_fraction(self):
        assert stringify_cell(12345.0) == "12345"

    def test_whitespace_collapsed(self):
        assert stringify_cell("  Дрель   ударная ") == "Дрель ударная"

    def test_none_is_empty(self):
        assert stringify_cell(None) == ""

    def test_clean_text_empty(self):
        assert clean_text("") == ""
