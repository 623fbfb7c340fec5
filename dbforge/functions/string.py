"""String functions."""

from __future__ import annotations

from enum import Enum
from typing import Optional, Sequence

from ..number import Number
from ..span import DbgenError, Span, Spanned
from ..value import expect_bytes, expect_int, sql_concat
from .base import CompileContext, Function, unpack_args

ISIZE_MIN = -(1 << 63)
ISIZE_MAX = (1 << 63) - 1


def sql_start_length_to_range(start: int, length: int) -> tuple[int, int]:
    """Converts a 1-based SQL (start, length) into a clamped 0-based (start, end).

    Negative lengths count as zero and negative positions clamp to zero.
    """
    start -= 1
    end = min(start + max(length, 0), ISIZE_MAX)
    first = max(start, 0)
    last = end if end >= 0 else first
    return first, last


def _char_offsets(data: bytes) -> list[int]:
    offsets = [i for i, byte in enumerate(data) if i == 0 or byte & 0xC0 != 0x80]
    offsets.append(len(data))
    return offsets


class Unit(Enum):
    """The unit used to index a (byte) string."""

    CHARACTERS = "characters"
    OCTETS = "octets"

    def parse_sql_range(self, data: bytes, start: int, length: int) -> tuple[int, int]:
        """Returns the byte range selected by an SQL (start, length) pair."""
        first, last = sql_start_length_to_range(start, length)
        if self is Unit.OCTETS:
            size = len(data)
            return min(first, size), min(last, size)
        offsets = _char_offsets(data)
        count = len(offsets) - 1
        return offsets[min(first, count)], offsets[min(last, count)]

    def length_of(self, data: bytes) -> int:
        """The length of ``data`` counted in this unit."""
        if self is Unit.OCTETS:
            return len(data)
        return len(_char_offsets(data)) - 1


def _expect_isize(value) -> int:
    return expect_int(value, ISIZE_MIN, ISIZE_MAX, "signed integer")


def _expect_optional_isize(value) -> Optional[int]:
    if value is None:
        return None
    return expect_int(value, ISIZE_MIN, ISIZE_MAX, "nullable signed integer")


class Substring(Function):
    """The `substring` SQL function."""

    def __init__(self, unit: Unit) -> None:
        self.unit = unit

    def __repr__(self) -> str:
        return f"Substring({self.unit})"

    def compile(self, ctx: CompileContext, span: Span, args: Sequence[Spanned]):
        data, start, length = unpack_args(
            span, args, [expect_bytes, _expect_isize, _expect_optional_isize], [None]
        )
        first, last = self.unit.parse_sql_range(data, start, length or 0)
        if length is not None:
            data = data[:last]
        return data[first:]


class CharLength(Function):
    """The `char_length` SQL function."""

    def compile(self, ctx: CompileContext, span: Span, args: Sequence[Spanned]):
        (data,) = unpack_args(span, args, [expect_bytes])
        return Number(Unit.CHARACTERS.length_of(data))


class OctetLength(Function):
    """The `octet_length` SQL function."""

    def compile(self, ctx: CompileContext, span: Span, args: Sequence[Spanned]):
        (data,) = unpack_args(span, args, [expect_bytes])
        return Number(len(data))


class Overlay(Function):
    """The `overlay` SQL function."""

    def __init__(self, unit: Unit) -> None:
        self.unit = unit

    def __repr__(self) -> str:
        return f"Overlay({self.unit})"

    def compile(self, ctx: CompileContext, span: Span, args: Sequence[Spanned]):
        data, placing, start, length = unpack_args(
            span,
            args,
            [expect_bytes, expect_bytes, _expect_isize, _expect_optional_isize],
            [None],
        )
        if length is None:
            length = self.unit.length_of(placing)
        first, last = self.unit.parse_sql_range(data, start, length)
        return data[:first] + placing + data[last:]


class Concat(Function):
    """The string concatenation (`||`) SQL function."""

    def compile(self, ctx: CompileContext, span: Span, args: Sequence[Spanned]):
        try:
            return sql_concat(arg.inner for arg in args)
        except DbgenError as exc:
            raise exc.with_span(span)