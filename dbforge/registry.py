"""Lookup of SQL functions by their name or operator."""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from .functions import ops, string
from .functions.array import GenerateSeries
from .functions.base import Function
from .functions.codec import (
    DECODE_BASE64,
    DECODE_HEX,
    ENCODE_BASE64,
    ENCODE_BASE64URL,
    ENCODE_HEX,
)
from .functions.debug import Panic
from .span import UnknownFunctionError

_ROUND = ops.Round()
_DIV = ops.Div()
_MOD = ops.Mod()
_COALESCE = ops.Coalesce()
_CHAR_LENGTH = string.CharLength()
_OCTET_LENGTH = string.OctetLength()
_GENERATE_SERIES = GenerateSeries()
_PANIC = Panic()
_LAST = ops.Last()
_CONCAT = string.Concat()

_FUNCTIONS: Mapping[str, Function] = MappingProxyType(
    {
        "greatest": ops.GREATEST,
        "least": ops.LEAST,
        "round": _ROUND,
        "div": _DIV,
        "mod": _MOD,
        "char_length": _CHAR_LENGTH,
        "character_length": _CHAR_LENGTH,
        "octet_length": _OCTET_LENGTH,
        "coalesce": _COALESCE,
        "generate_series": _GENERATE_SERIES,
        "debug.panic": _PANIC,
        "from_hex": DECODE_HEX,
        "to_hex": ENCODE_HEX,
        "from_base64": DECODE_BASE64,
        "from_base64url": DECODE_BASE64,
        "to_base64": ENCODE_BASE64,
        "to_base64url": ENCODE_BASE64URL,
    }
)

_OPERATORS: Mapping[str, Function] = MappingProxyType(
    {
        "<": ops.LT,
        "=": ops.EQ,
        ">": ops.GT,
        "<=": ops.LE,
        "<>": ops.NE,
        ">=": ops.GE,
        "+": ops.ADD,
        "-": ops.SUB,
        "*": ops.MUL,
        "/": ops.FLOAT_DIV,
        ";": _LAST,
        "||": _CONCAT,
        "is": ops.IS,
        "is not": ops.IS_NOT,
        "and": ops.AND,
        "or": ops.OR,
        "&": ops.BIT_AND,
        "|": ops.BIT_OR,
        "^": ops.BIT_XOR,
    }
)


def function_from_name(name: str) -> Function:
    """Returns the function called by ``name`` (a unique, normalized name).

    Raises :class:`UnknownFunctionError` for names that are not defined.
    """
    try:
        return _FUNCTIONS[name]
    except KeyError:
        raise UnknownFunctionError(name) from None


def function_from_operator(op: str) -> Function:
    """Returns the function implementing a binary operator such as ``+`` or ``IS NOT``."""
    key = " ".join(op.lower().split())
    try:
        return _OPERATORS[key]
    except KeyError:
        raise ValueError(f"unexpected operator {op!r}") from None