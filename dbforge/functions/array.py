"""Array functions."""

from __future__ import annotations

from typing import Sequence

from ..number import Number
from ..span import DbgenError, InvalidArgumentsError, Span, Spanned
from ..value import expect_array, expect_int, format_value, sql_add, sql_cmp, sql_sign
from .base import CompileContext, Function, unpack_args

_USIZE_MAX = (1 << 64) - 1


def _expect_index(value) -> int:
    return expect_int(value, 0, _USIZE_MAX, "unsigned integer")


class Array(Function):
    """The array constructor ``ARRAY[a, b, c]``."""

    def compile(self, ctx: CompileContext, span: Span, args: Sequence[Spanned]):
        return tuple(arg.inner for arg in args)


class Subscript(Function):
    """The 1-based array subscript operator; out of range gives NULL."""

    def compile(self, ctx: CompileContext, span: Span, args: Sequence[Spanned]):
        base, index = unpack_args(span, args, [expect_array, _expect_index])
        if index == 0 or index > len(base):
            return None
        return base[index - 1]


class GenerateSeries(Function):
    """The `generate_series` SQL function."""

    def compile(self, ctx: CompileContext, span: Span, args: Sequence[Spanned]):
        start, end, step = unpack_args(
            span, args, [None, None, None], [Spanned(Number(1), span)]
        )
        step_sign = sql_sign(step.inner)
        if step_sign == 0:
            raise InvalidArgumentsError(
                f"cannot use zero step {format_value(step.inner)}"
            ).with_span(step.span)

        value = start.inner
        result = []
        while True:
            try:
                order = sql_cmp(value, end.inner)
            except DbgenError as exc:
                raise exc.with_span(end.span)
            if order is None or order == step_sign:
                break
            try:
                following = sql_add(value, step.inner)
            except DbgenError as exc:
                raise exc.with_span(start.span)
            result.append(value)
            value = following
        return tuple(result)