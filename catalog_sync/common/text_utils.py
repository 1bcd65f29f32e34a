"""
Text Utilities

Helpers for coercing loosely-typed spreadsheet/scraper cells into clean values.
None of these functions raise on malformed input: bad cells fall back to defaults.
"""

import math
import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

_PRICE_JUNK = re.compile(r'[^\d.,]')
_TWO_PLACES = Decimal("0.01")

_TRUE_VALUES = frozenset({"1", "true", "yes", "y", "да", "+", "on", "вкл"})
_FALSE_VALUES = frozenset({"0", "false", "no", "n", "нет", "-", "off", "выкл"})


def clean_text(text: str) -> str:
    """Collapse internal whitespace (including NBSP) and strip."""
    if not text:
        return ""
    return ' '.join(text.split()).strip()


def stringify_cell(value: Any) -> str:
    """
    Convert a decoded cell to clean text.

    Spreadsheet decoders hand integral numbers back as floats, so
    12345.0 becomes "12345" (SKUs and codes are read from such cells).

    Example:
        >>> stringify_cell(12345.0)
        '12345'
        >>> stringify_cell("  Дрель   ударная ")
        'Дрель ударная'
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return clean_text(str(value))


def parse_price(value: Any) -> str:
    """
    Parse a price-like cell into a two-place decimal string.

    Strips everything except digits and separators. When both ',' and '.'
    are present the last one is the decimal separator; a separator that
    repeats is a thousands separator. Anything unparseable yields "0.00".

    Args:
        value: Raw cell (str, int, float, Decimal or None)

    Returns:
        Decimal string such as "1234.56"

    Example:
        >>> parse_price("1 234,56 ₽")
        '1234.56'
        >>> parse_price("договорная")
        '0.00'
    """
    if value is None or isinstance(value, bool):
        return "0.00"

    if isinstance(value, (int, Decimal)):
        text = str(value)
    elif isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return "0.00"
        text = repr(value)
    else:
        text = _normalize_separators(_PRICE_JUNK.sub('', str(value)))

    if not any(ch.isdigit() for ch in text):
        return "0.00"

    try:
        amount = Decimal(text)
    except InvalidOperation:
        return "0.00"

    if amount < 0 or not amount.is_finite():
        return "0.00"
    return str(amount.quantize(_TWO_PLACES, rounding=ROUND_HALF_UP))


def _normalize_separators(text: str) -> str:
    """Turn a digits-and-separators string into a Decimal-parseable one."""
    if ',' in text and '.' in text:
        decimal_sep = ',' if text.rfind(',') > text.rfind('.') else '.'
        thousands_sep = '.' if decimal_sep == ',' else ','
        text = text.replace(thousands_sep, '')
        return text.replace(',', '.')

    for sep in (',', '.'):
        count = text.count(sep)
        if count > 1:
            return text.replace(sep, '')
        if count == 1:
            return text.replace(sep, '.')

    return text


def parse_int(value: Any, default: int = 0) -> int:
    """
    Parse an integer-like cell ("1 200 шт", 12.0, "15") or return default.

    Example:
        >>> parse_int("1 200 шт")
        1200
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, (float, Decimal)):
        try:
            return int(value)
        except (ValueError, OverflowError):
            return default

    compact = re.sub(r'\s+', '', str(value))
    match = re.search(r'-?\d+', compact)
    if not match:
        return default
    return int(match.group())


def parse_flag(value: Any, default: bool) -> bool:
    """Parse a yes/no cell (bool, number, or ru/en word); unknown values give default."""
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0

    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    return default
