"""Source spans for error reporting, and the error types that carry them."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Span:
    """A handle to a registered region of the template text.

    A span without an index is the null span: it points nowhere.
    """

    index: int | None = None

    @property
    def is_null(self) -> bool:
        return self.index is None


@dataclass
class Spanned(Generic[T]):
    """An object annotated with the span it was parsed from."""

    inner: T
    span: Span = field(default_factory=Span)


class DbgenError(Exception):
    """Base error of the package, optionally associated with a span."""

    def __init__(self, message: str, span: Span | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.span = span if span is not None else Span()

    def with_span(self, span: Span) -> DbgenError:
        """Associates this error with a span and returns it."""
        self.span = span
        return self

    def __str__(self) -> str:
        return self.message


class InvalidArgumentsError(DbgenError):
    """A function received arguments it cannot work with."""

    def __init__(self, detail: str) -> None:
        super().__init__(f"invalid arguments: {detail}")
        self.detail = detail


class IntegerOverflowError(DbgenError):
    """A computation overflowed the representable range."""

    def __init__(self, expression: str) -> None:
        super().__init__(f"integer overflow: {expression}")
        self.expression = expression


class UnexpectedValueTypeError(DbgenError):
    """A value could not be converted into the expected type."""

    def __init__(self, expected: str, value: str) -> None:
        super().__init__(f"cannot convert {value} into {expected}")
        self.expected = expected
        self.value = value


class NotEnoughArgumentsError(DbgenError):
    """A function was called with too few arguments."""

    def __init__(self) -> None:
        super().__init__("not enough arguments")


class PanicError(DbgenError):
    """Raised on purpose by the template through `debug.panic`."""

    def __init__(self, message: str) -> None:
        super().__init__(f"runtime panic:{message}")
        self.panic_message = message


class UnknownFunctionError(DbgenError):
    """The template called a function that does not exist."""

    def __init__(self, name: str | None = None) -> None:
        text = "unknown function" if name is None else f"unknown function {name}"
        super().__init__(text)
        self.name = name


@dataclass(frozen=True)
class _Location:
    text: str
    start: int
    end: int

    def render(self) -> str:
        text = self.text
        line_no = text.count("\n", 0, self.start) + 1
        line_start = text.rfind("\n", 0, self.start) + 1
        line_end = text.find("\n", self.start)
        if line_end < 0:
            line_end = len(text)
        column = self.start - line_start + 1
        line = text[line_start:line_end]
        length = max(min(self.end, line_end) - self.start, 1)
        if length == 1:
            marker = "^"
        else:
            marker = "^" + "-" * (length - 2) + "^"
        pad = " " * len(str(line_no))
        return (
            f"{pad}--> {line_no}:{column}\n"
            f"{pad} |\n"
            f"{line_no} | {line}\n"
            f"{pad} | {' ' * (column - 1)}{marker}\n"
            f"{pad} |"
        )


class SpanRegistry:
    """Records regions of template text and hands out spans referring to them."""

    def __init__(self) -> None:
        self._locations: list[_Location] = []

    def __len__(self) -> int:
        return len(self._locations)

    def register(self, text: str, start: int, end: int) -> Span:
        """Registers the region ``text[start:end]`` and returns its span."""
        if not 0 <= start <= end <= len(text):
            raise ValueError(f"invalid span range {start}..{end} for text of length {len(text)}")
        span = Span(len(self._locations))
        self._locations.append(_Location(text, start, end))
        return span

    def _lookup(self, span: Span) -> _Location | None:
        if span.index is None or not 0 <= span.index < len(self._locations):
            return None
        return self._locations[span.index]

    def describe(self, error: BaseException) -> str:
        """Describes an error, its location and its causes as readable text."""
        parts = [f"Error: {error}\n"]
        location = self._lookup(getattr(error, "span", Span()))
        if location is not None:
            parts.append(location.render() + "\n\n")
        cause = error.__cause__
        while cause is not None:
            parts.append(f"Cause: {cause}\n")
            cause = cause.__cause__
        return "".join(parts)