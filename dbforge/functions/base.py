"""The function interface and helpers for extracting arguments."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import timezone, tzinfo
from typing import Any, Callable, Optional, Sequence, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..span import DbgenError, InvalidArgumentsError, NotEnoughArgumentsError, Span, Spanned

_MISSING = object()


@dataclass
class CompileContext:
    """Settings shared by all function compilations."""

    time_zone: tzinfo = field(default=timezone.utc)

    def parse_time_zone(self, name: str) -> tzinfo:
        """Looks up a time zone by its name."""
        name = name.strip()
        try:
            return ZoneInfo(name)
        except (ZoneInfoNotFoundError, ValueError, OSError) as exc:
            if name.upper() == "UTC":
                return timezone.utc
            raise InvalidArgumentsError(f"unknown time zone {name}") from exc


class Function(ABC):
    """An SQL function."""

    @abstractmethod
    def compile(self, ctx: CompileContext, span: Span, args: Sequence[Spanned]) -> Any:
        """Evaluates the function with the given spanned arguments and returns the value."""


def _convert(convert: Optional[Callable[[Any], Any]], arg: Spanned) -> Any:
    if convert is None:
        return arg
    try:
        return convert(arg.inner)
    except DbgenError as exc:
        raise exc.with_span(arg.span)


def unpack_args(
    span: Span,
    args: Sequence[Spanned],
    converters: Sequence[Optional[Callable[[Any], Any]]],
    defaults: Sequence[Any] = (),
) -> tuple:
    """Extracts and converts positional arguments.

    Each converter receives the bare value; ``None`` as a converter keeps the
    spanned argument as it is. ``defaults`` fill in the trailing parameters,
    as with Python's own default arguments. Conversion errors carry the span
    of the offending argument; a missing required argument raises
    :class:`NotEnoughArgumentsError` with ``span``. Extra arguments are ignored.
    """
    converters = list(converters)
    defaults = list(defaults)
    first_default = len(converters) - len(defaults)
    if first_default < 0:
        raise ValueError("more defaults than parameters")
    remaining = iter(args)
    results = []
    for position, convert in enumerate(converters):
        arg = next(remaining, _MISSING)
        if arg is _MISSING:
            if position < first_default:
                raise NotEnoughArgumentsError().with_span(span)
            results.append(defaults[position - first_default])
        else:
            results.append(_convert(convert, arg))
    return tuple(results)


def require(span: Span, cond: bool, message: Union[str, Callable[[], str]]) -> None:
    """Raises :class:`InvalidArgumentsError` at ``span`` unless ``cond`` holds."""
    if not cond:
        text = message() if callable(message) else message
        raise InvalidArgumentsError(text).with_span(span)