"""SQL numbers: integers, finite floats and booleans."""

from __future__ import annotations

import math
from decimal import Decimal
from typing import Union

I128_MIN = -(1 << 127)
I128_MAX = (1 << 127) - 1

_Raw = Union[bool, int, float]


class NumberError(ArithmeticError):
    """An arithmetic result that cannot be represented."""


class NumberOverflow(NumberError):
    """The result overflows the representable range."""


class NumberNaN(NumberError):
    """The result is not a number."""


def _trunc_div(a: int, b: int) -> int:
    q = abs(a) // abs(b)
    return -q if (a < 0) != (b < 0) else q


def _trunc_rem(a: int, b: int) -> int:
    r = abs(a) % abs(b)
    return -r if a < 0 else r


def _format_float(v: float) -> str:
    """Formats a finite float in shortest round-trip form."""
    if v == 0.0:
        return "-0.0" if math.copysign(1.0, v) < 0 else "0.0"
    sign = "-" if v < 0 else ""
    _, digit_tuple, exponent = Decimal(repr(abs(v))).as_tuple()
    digits = list(digit_tuple)
    while len(digits) > 1 and digits[-1] == 0:
        digits.pop()
        exponent += 1
    while len(digits) > 1 and digits[0] == 0:
        digits.pop(0)
    d = "".join(map(str, digits))
    k = exponent
    length = len(d)
    kk = length + k
    if 0 <= k and kk <= 16:
        body = d + "0" * k + ".0"
    elif 0 < kk <= 16:
        body = d[:kk] + "." + d[kk:]
    elif -5 < kk <= 0:
        body = "0." + "0" * (-kk) + d
    elif length == 1:
        body = f"{d}e{kk - 1}"
    else:
        body = f"{d[0]}.{d[1:]}e{kk - 1}"
    return sign + body


class Number:
    """An SQL number holding a boolean, a 128-bit integer or a finite float.

    Numbers compare by exact numeric value regardless of their kind.
    """

    __slots__ = ("_value",)

    def __init__(self, value: _Raw = 0) -> None:
        if isinstance(value, bool):
            self._value: _Raw = value
        elif isinstance(value, int):
            if not I128_MIN <= value <= I128_MAX:
                raise NumberOverflow(f"integer {value} out of range")
            self._value = value
        elif isinstance(value, float):
            if math.isnan(value):
                raise NumberNaN("not a number")
            if math.isinf(value):
                raise NumberOverflow("infinite value")
            self._value = value
        else:
            raise TypeError(f"cannot make a number from {type(value).__name__}")

    @classmethod
    def from_float(cls, value: float) -> Number:
        """Creates a number from a float, rejecting NaN and infinities."""
        try:
            v = float(value)
        except OverflowError as exc:
            raise NumberOverflow("value out of range") from exc
        return cls(v)

    @property
    def value(self) -> _Raw:
        """The underlying boolean, integer or float."""
        return self._value

    @property
    def is_float(self) -> bool:
        return isinstance(self._value, float)

    def _as_int(self) -> int | None:
        v = self._value
        if isinstance(v, float):
            return None
        return int(v)

    @property
    def _numeric(self) -> int | float:
        v = self._value
        return int(v) if isinstance(v, bool) else v

    def to_float(self) -> float:
        """Converts to a float, possibly losing precision."""
        return float(self._value)

    def to_int(self, lower: int = I128_MIN, upper: int = I128_MAX) -> int:
        """Converts to an integer within ``[lower, upper]``.

        Floats inside the range are truncated toward zero.
        """
        v = self._value
        if isinstance(v, bool):
            return int(v)
        if isinstance(v, int):
            if lower <= v <= upper:
                return v
            raise NumberOverflow(f"{v} out of range")
        if float(lower) <= v <= float(upper):
            return max(lower, min(upper, math.trunc(v)))
        raise NumberOverflow(f"{v} out of range")

    def format(self, true_string: str = "1", false_string: str = "0") -> str:
        """Formats the number, writing booleans with the given strings."""
        v = self._value
        if v is True:
            return true_string
        if v is False:
            return false_string
        if isinstance(v, int):
            return str(v)
        return _format_float(v)

    def __str__(self) -> str:
        return self.format("1", "0")

    def __repr__(self) -> str:
        return f"Number({self._value!r})"

    def sql_sign(self) -> int:
        """Compares with zero, returning -1, 0 or 1."""
        n = self._numeric
        return (n > 0) - (n < 0)

    @staticmethod
    def _from_int_or_none(c: int) -> Number | None:
        if I128_MIN <= c <= I128_MAX:
            return Number(c)
        return None

    def add(self, other: Number) -> Number:
        a, b = self._as_int(), other._as_int()
        if a is not None and b is not None:
            result = self._from_int_or_none(a + b)
            if result is not None:
                return result
        return Number.from_float(self.to_float() + other.to_float())

    def sub(self, other: Number) -> Number:
        a, b = self._as_int(), other._as_int()
        if a is not None and b is not None:
            result = self._from_int_or_none(a - b)
            if result is not None:
                return result
        return Number.from_float(self.to_float() - other.to_float())

    def mul(self, other: Number) -> Number:
        a, b = self._as_int(), other._as_int()
        if a is not None and b is not None:
            result = self._from_int_or_none(a * b)
            if result is not None:
                return result
        return Number.from_float(self.to_float() * other.to_float())

    def neg(self) -> Number:
        a = self._as_int()
        if a is not None:
            result = self._from_int_or_none(-a)
            if result is not None:
                return result
        return Number(-self.to_float())

    def div(self, other: Number) -> Number:
        """Divides, truncating toward zero; division by zero is NaN."""
        a, b = self._as_int(), other._as_int()
        if a is not None and b is not None and b != 0:
            result = self._from_int_or_none(_trunc_div(a, b))
            if result is not None:
                return result
        denominator = other.to_float()
        if denominator == 0.0:
            raise NumberNaN("division by zero")
        quotient = self.to_float() / denominator
        if not math.isfinite(quotient):
            return Number.from_float(quotient)
        return Number(float(math.trunc(quotient)))

    def rem(self, other: Number) -> Number:
        """Computes the remainder, with the sign of the dividend."""
        a, b = self._as_int(), other._as_int()
        if a is not None and b is not None and b != 0:
            if b == -1:
                return Number(0)
            return Number(_trunc_rem(a, b))
        denominator = other.to_float()
        if denominator == 0.0:
            raise NumberNaN("division by zero")
        return Number(math.fmod(self.to_float(), denominator))

    def float_div(self, other: Number) -> Number:
        """Divides using floating point arithmetic."""
        b = other.to_float()
        if b == 0.0:
            raise NumberNaN("division by zero")
        return Number.from_float(self.to_float() / b)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Number):
            return NotImplemented
        return self._numeric == other._numeric

    def __hash__(self) -> int:
        return hash(self._numeric)

    def __lt__(self, other: Number) -> bool:
        if not isinstance(other, Number):
            return NotImplemented
        return self._numeric < other._numeric

    def __le__(self, other: Number) -> bool:
        if not isinstance(other, Number):
            return NotImplemented
        return self._numeric <= other._numeric

    def __gt__(self, other: Number) -> bool:
        if not isinstance(other, Number):
            return NotImplemented
        return self._numeric > other._numeric

    def __ge__(self, other: Number) -> bool:
        if not isinstance(other, Number):
            return NotImplemented
        return self._numeric >= other._numeric