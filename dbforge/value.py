"""SQL scalar values and the operations defined between them.

A value is one of:

* ``None`` for NULL,
* a :class:`~dbforge.number.Number`,
* ``bytes`` for strings and byte strings,
* a :class:`Timestamp`,
* an :class:`Interval`,
* a ``tuple`` of values for arrays.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Callable, Iterable, Optional, Tuple, Union

from .number import I128_MAX, I128_MIN, Number, NumberNaN, NumberOverflow
from .span import IntegerOverflowError, InvalidArgumentsError, UnexpectedValueTypeError

I64_MIN = -(1 << 63)
I64_MAX = (1 << 63) - 1

#: The string format of an SQL timestamp (``%.f`` prints only needed fraction digits).
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S%.f"

_BYTES = (bytes, bytearray)


def _format_datetime(dt: datetime) -> str:
    """Formats a date-time as ``YYYY-MM-DD HH:MM:SS`` plus a minimal fraction."""
    micro = dt.microsecond
    if micro == 0:
        fraction = ""
    elif micro % 1000 == 0:
        fraction = f".{micro // 1000:03d}"
    else:
        fraction = f".{micro:06d}"
    return (
        f"{dt.year:04d}-{dt.month:02d}-{dt.day:02d} "
        f"{dt.hour:02d}:{dt.minute:02d}:{dt.second:02d}{fraction}"
    )


@dataclass(frozen=True)
class Timestamp:
    """A point in time stored in UTC, with the time zone used to display it."""

    utc: datetime
    tz: tzinfo = timezone.utc

    def __post_init__(self) -> None:
        if self.utc.tzinfo is not None:
            naive = self.utc.astimezone(timezone.utc).replace(tzinfo=None)
            object.__setattr__(self, "utc", naive)

    def local(self) -> datetime:
        """The time converted into its own time zone."""
        return self.utc.replace(tzinfo=timezone.utc).astimezone(self.tz)

    def __str__(self) -> str:
        return _format_datetime(self.local())


@dataclass(frozen=True)
class Interval:
    """A time interval measured in microseconds (a signed 64-bit count)."""

    microseconds: int

    def __post_init__(self) -> None:
        if not I64_MIN <= self.microseconds <= I64_MAX:
            raise IntegerOverflowError(f"interval {self.microseconds} microsecond")


Value = Union[None, Number, bytes, Timestamp, Interval, Tuple["Value", ...]]


def format_value(value: Value) -> str:
    """Formats a value as an SQL literal."""
    if value is None:
        return "NULL"
    if isinstance(value, Number):
        return str(value)
    if isinstance(value, _BYTES):
        try:
            text = bytes(value).decode("utf-8")
        except UnicodeDecodeError:
            return "X'" + bytes(value).hex().upper() + "'"
        return "'" + text.replace("'", "''") + "'"
    if isinstance(value, Timestamp):
        return f"'{value}'"
    if isinstance(value, Interval):
        return f"INTERVAL {value.microseconds} MICROSECOND"
    if isinstance(value, tuple):
        return "ARRAY[" + ", ".join(format_value(item) for item in value) + "]"
    raise TypeError(f"not an SQL value: {value!r}")


def _cmp(a, b) -> int:
    return (a > b) - (a < b)


def sql_cmp(a: Value, b: Value) -> Optional[int]:
    """Compares two values, returning -1, 0, 1, or ``None`` when NULL is involved.

    Values of different types cannot be compared and raise
    :class:`InvalidArgumentsError`.
    """
    if a is None or b is None:
        return None
    if isinstance(a, Number) and isinstance(b, Number):
        return _cmp(a, b)
    if isinstance(a, _BYTES) and isinstance(b, _BYTES):
        return _cmp(bytes(a), bytes(b))
    if isinstance(a, Timestamp) and isinstance(b, Timestamp):
        return _cmp(a.utc, b.utc)
    if isinstance(a, Interval) and isinstance(b, Interval):
        return _cmp(a.microseconds, b.microseconds)
    if isinstance(a, tuple) and isinstance(b, tuple):
        for x, y in zip(a, b):
            result = sql_cmp(x, y)
            if result != 0:
                return result
        return _cmp(len(a), len(b))
    raise InvalidArgumentsError(f"cannot compare {format_value(a)} with {format_value(b)}")


def sql_sign(value: Value) -> int:
    """Compares a value with the zero value of its own type."""
    if value is None:
        return 0
    if isinstance(value, Number):
        return value.sql_sign()
    if isinstance(value, (bytes, bytearray, tuple)):
        return 1 if value else 0
    if isinstance(value, Timestamp):
        return 1
    if isinstance(value, Interval):
        return _cmp(value.microseconds, 0)
    raise TypeError(f"not an SQL value: {value!r}")


def _number_result(compute: Callable[[], Number], expression: str) -> Optional[Number]:
    try:
        return compute()
    except NumberNaN:
        return None
    except NumberOverflow:
        raise IntegerOverflowError(expression) from None


def _interval_result(compute: Callable[[], Number], expression: str) -> Optional[Interval]:
    try:
        return Interval(compute().to_int(I64_MIN, I64_MAX))
    except NumberNaN:
        return None
    except NumberOverflow:
        raise IntegerOverflowError(expression) from None


def _checked_interval(micros: int, expression: str) -> Interval:
    if not I64_MIN <= micros <= I64_MAX:
        raise IntegerOverflowError(expression)
    return Interval(micros)


def _shift(ts: Timestamp, micros: int, op: str) -> Timestamp:
    delta = timedelta(microseconds=micros)
    try:
        shifted = ts.utc + delta if op == "+" else ts.utc - delta
    except OverflowError:
        raise IntegerOverflowError(f"{_format_datetime(ts.utc)} {op} {micros}us") from None
    return Timestamp(shifted, ts.tz)


def sql_add(a: Value, b: Value) -> Value:
    """Adds two values."""
    if isinstance(a, Number) and isinstance(b, Number):
        return _number_result(lambda: a.add(b), f"{a} + {b}")
    if isinstance(a, Timestamp) and isinstance(b, Interval):
        return _shift(a, b.microseconds, "+")
    if isinstance(a, Interval) and isinstance(b, Timestamp):
        return _shift(b, a.microseconds, "+")
    if isinstance(a, Interval) and isinstance(b, Interval):
        x, y = a.microseconds, b.microseconds
        return _checked_interval(x + y, f"{x} + {y}")
    raise InvalidArgumentsError(f"cannot add {format_value(a)} to {format_value(b)}")


def sql_sub(a: Value, b: Value) -> Value:
    """Subtracts the second value from the first."""
    if isinstance(a, Number) and isinstance(b, Number):
        return _number_result(lambda: a.sub(b), f"{a} - {b}")
    if isinstance(a, Timestamp) and isinstance(b, Interval):
        return _shift(a, b.microseconds, "-")
    if isinstance(a, Interval) and isinstance(b, Interval):
        x, y = a.microseconds, b.microseconds
        return _checked_interval(x - y, f"{x} + {y}")
    raise InvalidArgumentsError(f"cannot subtract {format_value(a)} from {format_value(b)}")


def sql_mul(a: Value, b: Value) -> Value:
    """Multiplies two values."""
    if isinstance(a, Number) and isinstance(b, Number):
        return _number_result(lambda: a.mul(b), f"{a} * {b}")
    if isinstance(a, Number) and isinstance(b, Interval):
        a, b = b, a
    if isinstance(a, Interval) and isinstance(b, Number):
        dur, m = a.microseconds, b
        return _interval_result(
            lambda: Number(dur).mul(m), f"interval {dur} microsecond * {m}"
        )
    raise InvalidArgumentsError(f"cannot multiply {format_value(a)} with {format_value(b)}")


def sql_float_div(a: Value, b: Value) -> Value:
    """Divides two values using floating point arithmetic."""
    if isinstance(a, Number) and isinstance(b, Number):
        return _number_result(lambda: a.float_div(b), f"{a} / {b}")
    if isinstance(a, Interval) and isinstance(b, Number):
        dur = a.microseconds
        return _interval_result(
            lambda: Number(dur).float_div(b), f"interval {dur} microsecond / {b}"
        )
    raise InvalidArgumentsError(f"cannot divide {format_value(a)} by {format_value(b)}")


def sql_div(a: Value, b: Value) -> Value:
    """Divides two numbers, truncating toward zero."""
    if isinstance(a, Number) and isinstance(b, Number):
        return _number_result(lambda: a.div(b), f"div({a}, {b})")
    raise InvalidArgumentsError(f"cannot divide {format_value(a)} by {format_value(b)}")


def sql_rem(a: Value, b: Value) -> Value:
    """Computes the remainder of dividing two numbers."""
    if isinstance(a, Number) and isinstance(b, Number):
        return _number_result(lambda: a.rem(b), f"mod({a}, {b})")
    raise InvalidArgumentsError(
        f"cannot compute remainder of {format_value(a)} by {format_value(b)}"
    )


def sql_concat(values: Iterable[Value]) -> Optional[bytes]:
    """Concatenates values into a byte string; any NULL makes the result NULL."""
    parts: list[bytes] = []
    for item in values:
        if item is None:
            return None
        if isinstance(item, Number):
            parts.append(str(item).encode("utf-8"))
        elif isinstance(item, _BYTES):
            parts.append(bytes(item))
        elif isinstance(item, Timestamp):
            parts.append(str(item).encode("utf-8"))
        elif isinstance(item, Interval):
            parts.append(f"INTERVAL {item.microseconds} MICROSECOND".encode("utf-8"))
        elif isinstance(item, tuple):
            raise InvalidArgumentsError("cannot concatenate arrays using || operator")
        else:
            raise TypeError(f"not an SQL value: {item!r}")
    return b"".join(parts)


def is_sql_true(value: Value) -> bool:
    """Whether the value is truthy: nonzero numbers are true, NULL and zero false."""
    if value is None:
        return False
    if isinstance(value, Number):
        return value.sql_sign() != 0
    raise InvalidArgumentsError(f"truth value of {format_value(value)} is undefined")


def _unexpected(value: Value, expected: str) -> UnexpectedValueTypeError:
    return UnexpectedValueTypeError(expected, format_value(value))


def expect_number(value: Value) -> Number:
    """Returns the value if it is a number."""
    if isinstance(value, Number):
        return value
    raise _unexpected(value, "number")


def expect_int(
    value: Value,
    lower: int = I128_MIN,
    upper: int = I128_MAX,
    description: str = "signed integer",
) -> int:
    """Converts a number into an integer within ``[lower, upper]``."""
    if isinstance(value, Number):
        try:
            return value.to_int(lower, upper)
        except NumberOverflow:
            pass
    raise _unexpected(value, description)


def expect_float(value: Value) -> float:
    """Converts a number into a float."""
    if isinstance(value, Number):
        return value.to_float()
    raise _unexpected(value, "floating point number")


def expect_bytes(value: Value) -> bytes:
    """Returns the value if it is a byte string."""
    if isinstance(value, _BYTES):
        return bytes(value)
    raise _unexpected(value, "byte string")


def expect_str(value: Value) -> str:
    """Decodes a byte string holding valid UTF-8."""
    if isinstance(value, _BYTES):
        try:
            return bytes(value).decode("utf-8")
        except UnicodeDecodeError:
            pass
    raise _unexpected(value, "string")


def expect_array(value: Value) -> tuple:
    """Returns the value if it is an array."""
    if isinstance(value, tuple):
        return value
    raise _unexpected(value, "array")


def expect_optional_bool(value: Value) -> Optional[bool]:
    """Converts NULL to ``None`` and a number to its truth value."""
    if value is None:
        return None
    if isinstance(value, Number):
        return value.sql_sign() != 0
    raise _unexpected(value, "nullable boolean")