"""Literal values and character classes of the template language."""

from __future__ import annotations

import math
import re

from .number import Number
from .span import DbgenError, IntegerOverflowError

_U64_MAX = (1 << 64) - 1
_DECIMAL = re.compile(r"\+?[0-9]+")
_HEX_DIGITS = re.compile(r"\+?[0-9A-Fa-f]+")

_INTERVAL_UNITS = {
    "week": 604_800_000_000,
    "day": 86_400_000_000,
    "hour": 3_600_000_000,
    "minute": 60_000_000,
    "second": 1_000_000,
    "millisecond": 1_000,
    "microsecond": 1,
}


def parse_number(text: str) -> Number:
    """Parses an integer or floating-point literal.

    ``0x``-prefixed literals are hexadecimal and must fit in 64 unsigned bits.
    Decimal integers fitting 64 unsigned bits stay integers; anything else is
    read as a float.
    """
    if text[:2] in ("0x", "0X"):
        digits = text[2:]
        if not _HEX_DIGITS.fullmatch(digits):
            raise IntegerOverflowError(text)
        value = int(digits, 16)
        if value > _U64_MAX:
            raise IntegerOverflowError(text)
        return Number(value)

    if _DECIMAL.fullmatch(text):
        value = int(text)
        if value <= _U64_MAX:
            return Number(value)

    if "_" in text:
        raise DbgenError(f"invalid number {text}")
    try:
        result = float(text)
    except ValueError:
        raise DbgenError(f"invalid number {text}") from None
    if not math.isfinite(result):
        raise IntegerOverflowError(text)
    return Number(result)


def is_ident_char(c: str) -> bool:
    """Whether a character may belong to an identifier, quotes included."""
    return c.isalnum() or c in "_`\"[]"


def interval_unit(keyword: str) -> int:
    """The length of an INTERVAL unit keyword (``DAY``, ``SECOND``…) in microseconds."""
    try:
        return _INTERVAL_UNITS[keyword.lower()]
    except KeyError:
        raise ValueError(f"unknown interval unit {keyword}") from None