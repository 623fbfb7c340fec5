"""Time functions."""

from __future__ import annotations

import re
from datetime import datetime, timezone, tzinfo
from typing import Sequence

from ..span import DbgenError, InvalidArgumentsError, Span, Spanned
from ..value import Timestamp, expect_str
from .base import CompileContext, Function, unpack_args

_TIMESTAMP = re.compile(
    r"\s*(\d{4})-(\d{1,2})-(\d{1,2}) (\d{1,2}):(\d{1,2}):(\d{1,2})(?:\.(\d{1,9}))?\s*"
)


def _parse_local(text: str) -> datetime:
    match = _TIMESTAMP.fullmatch(text)
    if match is None:
        raise InvalidArgumentsError(f"invalid timestamp {text!r}")
    year, month, day, hour, minute, second = map(int, match.groups()[:6])
    microsecond = int(((match.group(7) or "") + "000000")[:6])
    try:
        return datetime(year, month, day, hour, minute, second, microsecond)
    except ValueError as exc:
        raise InvalidArgumentsError(f"invalid timestamp {text!r}: {exc}") from None


def _to_utc(local: datetime, tz: tzinfo) -> datetime:
    """Converts a naive local time in ``tz`` to naive UTC, rejecting ambiguous times."""
    first = local.replace(tzinfo=tz, fold=0)
    second = local.replace(tzinfo=tz, fold=1)
    if first.utcoffset() != second.utcoffset():
        raise InvalidArgumentsError(f"local time {local} is ambiguous or does not exist")
    try:
        return first.astimezone(timezone.utc).replace(tzinfo=None)
    except (OverflowError, ValueError) as exc:
        raise InvalidArgumentsError(f"timestamp {local} out of range") from exc


def _make_timestamp(text: str, tz: tzinfo) -> Timestamp:
    return Timestamp(_to_utc(_parse_local(text), tz), tz)


class TimestampFunction(Function):
    """The `timestamp` SQL function, interpreting the text in the context's time zone."""

    def compile(self, ctx: CompileContext, span: Span, args: Sequence[Spanned]):
        (text,) = unpack_args(span, args, [expect_str])
        try:
            return _make_timestamp(text, ctx.time_zone)
        except DbgenError as exc:
            raise exc.with_span(span)


class TimestampWithTimeZone(Function):
    """The `timestamp with time zone` SQL function.

    A time zone name may follow the time; it starts at the first ASCII letter.
    """

    def compile(self, ctx: CompileContext, span: Span, args: Sequence[Spanned]):
        (text,) = unpack_args(span, args, [expect_str])
        split = next(
            (i for i, c in enumerate(text) if c.isascii() and c.isalpha()), None
        )
        try:
            if split is None:
                tz = ctx.time_zone
            else:
                tz = ctx.parse_time_zone(text[split:])
                text = text[:split].rstrip()
            return _make_timestamp(text, tz)
        except DbgenError as exc:
            raise exc.with_span(span)