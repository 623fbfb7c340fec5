"""Debug functions."""

from __future__ import annotations

from typing import Sequence

from ..span import PanicError, Span, Spanned
from ..value import format_value
from .base import CompileContext, Function


class Panic(Function):
    """The `debug.panic` function: always fails, listing its arguments."""

    def compile(self, ctx: CompileContext, span: Span, args: Sequence[Spanned]):
        message = "".join(
            f"\n {number}. {format_value(arg.inner)}" for number, arg in enumerate(args, start=1)
        )
        raise PanicError(message).with_span(span)