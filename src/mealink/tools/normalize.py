"""
Mealink - Name Normalization.

Utilities for normalizing user input for consistent matching.
"""

import math
from decimal import Decimal, InvalidOperation


def normalize_name(name: str) -> str:
    """
    Normalize an ingredient name into its matching key.

    Operations:
    - Strip leading/trailing whitespace
    - Lowercase

    Inner whitespace and every other character are left as typed, so
    kana/kanji input survives unchanged.

    Examples:
        normalize_name("  Tomato ") -> "tomato"
        normalize_name("Green  Pepper") -> "green  pepper"
        normalize_name("にんじん") -> "にんじん"
    """
    return name.strip().lower()


def same_ingredient(a: str, b: str) -> bool:
    """Two names refer to the same ingredient iff their normalized forms match."""
    return normalize_name(a) == normalize_name(b)


def parse_quantity(raw: str | None) -> Decimal:
    """
    Parse a quantity typed by the user.

    Blank, non-numeric, non-finite or negative input falls back to 0.
    So does anything too large for the store's float column.

    Examples:
        parse_quantity("1.5") -> Decimal("1.5")
        parse_quantity("abc") -> Decimal("0")
        parse_quantity("") -> Decimal("0")
        parse_quantity("1e400") -> Decimal("0")
    """
    text = (raw or "").strip()
    if not text:
        return Decimal(0)

    try:
        quantity = Decimal(text)
    except InvalidOperation:
        return Decimal(0)

    if not quantity.is_finite() or quantity < 0:
        return Decimal(0)
    if math.isinf(float(quantity)):
        return Decimal(0)
    return quantity
