"""Numerical and logical functions."""

from __future__ import annotations

import math
import operator
from typing import Callable, Sequence

from ..number import Number
from ..span import DbgenError, Span, Spanned
from ..value import (
    expect_float,
    expect_int,
    expect_number,
    expect_optional_bool,
    sql_add,
    sql_cmp,
    sql_div,
    sql_float_div,
    sql_mul,
    sql_rem,
    sql_sub,
)
from .base import CompileContext, Function, unpack_args

_I32_MIN = -(1 << 31)
_I32_MAX = (1 << 31) - 1


def _exactly_two(args: Sequence[Spanned]) -> tuple[Spanned, Spanned]:
    if len(args) != 2:
        raise ValueError("should have exactly 2 arguments")
    return args[0], args[1]


def _spanned_call(span: Span, func, *values):
    try:
        return func(*values)
    except DbgenError as exc:
        raise exc.with_span(span)


class Neg(Function):
    """The unary negation SQL function."""

    def compile(self, ctx: CompileContext, span: Span, args: Sequence[Spanned]):
        (inner,) = unpack_args(span, args, [expect_number])
        return inner.neg()


class Compare(Function):
    """The value comparison (`<`, `=`, `>`, `<=`, `<>`, `>=`) SQL functions."""

    def __init__(self, lt: bool, eq: bool, gt: bool) -> None:
        self.lt = lt
        self.eq = eq
        self.gt = gt

    def __repr__(self) -> str:
        return f"Compare(lt={self.lt}, eq={self.eq}, gt={self.gt})"

    def compile(self, ctx: CompileContext, span: Span, args: Sequence[Spanned]):
        lhs, rhs = _exactly_two(args)
        order = _spanned_call(span, sql_cmp, lhs.inner, rhs.inner)
        if order is None:
            return None
        return Number((self.lt, self.eq, self.gt)[order + 1])


LT = Compare(lt=True, eq=False, gt=False)
EQ = Compare(lt=False, eq=True, gt=False)
GT = Compare(lt=False, eq=False, gt=True)
LE = Compare(lt=True, eq=True, gt=False)
NE = Compare(lt=True, eq=False, gt=True)
GE = Compare(lt=False, eq=True, gt=True)


class Identical(Function):
    """The identity comparison (`IS`, `IS NOT`) SQL functions."""

    def __init__(self, eq: bool) -> None:
        self.eq = eq

    def __repr__(self) -> str:
        return f"Identical(eq={self.eq})"

    def compile(self, ctx: CompileContext, span: Span, args: Sequence[Spanned]):
        lhs, rhs = _exactly_two(args)
        return Number((lhs.inner == rhs.inner) == self.eq)


IS = Identical(eq=True)
IS_NOT = Identical(eq=False)


class Not(Function):
    """The logical `NOT` SQL function."""

    def compile(self, ctx: CompileContext, span: Span, args: Sequence[Spanned]):
        (inner,) = unpack_args(span, args, [expect_optional_bool])
        return None if inner is None else Number(not inner)


class BitNot(Function):
    """The bitwise-NOT `~` SQL function."""

    def compile(self, ctx: CompileContext, span: Span, args: Sequence[Spanned]):
        (inner,) = unpack_args(span, args, [expect_int])
        return Number(~inner)


class Logic(Function):
    """The logical `AND`/`OR` SQL functions.

    The identity is true for `AND` and false for `OR`.
    """

    def __init__(self, identity: bool) -> None:
        self.identity = identity

    def __repr__(self) -> str:
        return f"Logic(identity={self.identity})"

    def compile(self, ctx: CompileContext, span: Span, args: Sequence[Spanned]):
        result = self.identity
        for arg in args:
            value = _spanned_call(arg.span, expect_optional_bool, arg.inner)
            if value is None:
                result = None
            elif value != self.identity:
                return Number(value)
        return None if result is None else Number(result)


AND = Logic(identity=True)
OR = Logic(identity=False)


class Arith(Function):
    """The arithmetic (`+`, `-`, `*`, `/`) SQL functions, folded left to right."""

    def __init__(self, operation: Callable, name: str) -> None:
        self.operation = operation
        self.name = name

    def __repr__(self) -> str:
        return f"Arith({self.name})"

    def compile(self, ctx: CompileContext, span: Span, args: Sequence[Spanned]):
        if not args:
            raise ValueError("at least 1 argument")
        first, *rest = args
        result = first.inner
        for arg in rest:
            result = _spanned_call(arg.span, self.operation, result, arg.inner)
        return result


ADD = Arith(sql_add, "+")
SUB = Arith(sql_sub, "-")
MUL = Arith(sql_mul, "*")
FLOAT_DIV = Arith(sql_float_div, "/")


class Bitwise(Function):
    """The bitwise binary (`&`, `|`, `^`) SQL functions."""

    def __init__(self, operation: Callable[[int, int], int], initial: int, name: str) -> None:
        self.operation = operation
        self.initial = initial
        self.name = name

    def __repr__(self) -> str:
        return f"Bitwise({self.name})"

    def compile(self, ctx: CompileContext, span: Span, args: Sequence[Spanned]):
        result = self.initial
        for arg in args:
            result = self.operation(result, _spanned_call(arg.span, expect_int, arg.inner))
        return Number(result)


BIT_AND = Bitwise(operator.and_, -1, "&")
BIT_OR = Bitwise(operator.or_, 0, "|")
BIT_XOR = Bitwise(operator.xor, 0, "^")


class Extremum(Function):
    """The extremum (`least`, `greatest`) SQL functions; NULLs are skipped."""

    def __init__(self, order: int) -> None:
        self.order = order

    def __repr__(self) -> str:
        return f"Extremum(order={self.order})"

    def compile(self, ctx: CompileContext, span: Span, args: Sequence[Spanned]):
        result = None
        for arg in args:
            order = _spanned_call(arg.span, sql_cmp, arg.inner, result)
            if (order == self.order) if order is not None else result is None:
                result = arg.inner
        return result


GREATEST = Extremum(order=1)
LEAST = Extremum(order=-1)


def _round_half_away(x: float) -> float:
    whole = math.trunc(x)
    if abs(x - whole) >= 0.5:
        whole += 1 if x > 0 else -1
    return float(whole)


def _expect_i32(value) -> int:
    return expect_int(value, _I32_MIN, _I32_MAX, "32-bit signed integer")


class Round(Function):
    """The `round` SQL function, rounding halves away from zero."""

    def compile(self, ctx: CompileContext, span: Span, args: Sequence[Spanned]):
        value, digits = unpack_args(span, args, [expect_float, _expect_i32], [0])
        try:
            scale = 10.0**digits
        except OverflowError:
            return Number(value)
        if scale == 0.0:
            return Number(0.0)
        scaled = value * scale
        if not math.isfinite(scaled):
            return Number(value)
        result = _round_half_away(scaled) / scale
        return Number(result if math.isfinite(result) else value)


def _identity(value):
    return value


class Div(Function):
    """The `div` SQL function."""

    def compile(self, ctx: CompileContext, span: Span, args: Sequence[Spanned]):
        n, d = unpack_args(span, args, [_identity, _identity])
        return _spanned_call(span, sql_div, n, d)


class Mod(Function):
    """The `mod` SQL function."""

    def compile(self, ctx: CompileContext, span: Span, args: Sequence[Spanned]):
        n, d = unpack_args(span, args, [_identity, _identity])
        return _spanned_call(span, sql_rem, n, d)


class Coalesce(Function):
    """The `coalesce` SQL function."""

    def compile(self, ctx: CompileContext, span: Span, args: Sequence[Spanned]):
        return next((arg.inner for arg in args if arg.inner is not None), None)


class Last(Function):
    """The statement terminator `;`: yields the last expression."""

    def compile(self, ctx: CompileContext, span: Span, args: Sequence[Spanned]):
        if not args:
            raise ValueError("at least one expression")
        return args[-1].inner