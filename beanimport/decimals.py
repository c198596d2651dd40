"""Parsing of amounts written with currency symbols and thousands separators."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Optional

_KEPT_CHARS = frozenset("0123456789.-+")


def parse_decimal(text: str) -> Optional[Decimal]:
    """Parse a number, dropping currency symbols and thousands separators.

    Returns None when nothing numeric remains or the result is malformed.
    """
    cleaned = "".join(ch for ch in text.strip() if ch in _KEPT_CHARS)
    if not cleaned:
        return None
    try:
        return Decimal(cleaned)
    except InvalidOperation:
        return None


def parse_decimal_with_transform(
    text: str, transform: Optional[str]
) -> Optional[Decimal]:
    """Parse a number and apply `negate` or `abs`; other transforms leave it as is."""
    value = parse_decimal(text)
    if value is None:
        return None
    if transform == "negate":
        return -value
    if transform == "abs":
        return abs(value)
    return value