import pytest
from hypothesis import given, strategies as st

from dbforge.span import (
    DbgenError,
    IntegerOverflowError,
    InvalidArgumentsError,
    NotEnoughArgumentsError,
    PanicError,
    Span,
    SpanRegistry,
    Spanned,
    UnexpectedValueTypeError,
    UnknownFunctionError,
)


def test_default_span_is_null():
    assert Span().is_null
    assert Spanned(5).span == Span()
    assert Spanned(5).inner == 5


def test_register_assigns_sequential_spans():
    registry = SpanRegistry()
    first = registry.register("abc def", 0, 3)
    second = registry.register("abc def", 4, 7)
    assert first.index == 0
    assert second.index == 1
    assert not first.is_null
    assert len(registry) == 2


@pytest.mark.parametrize("start,end", [(-1, 2), (3, 2), (0, 100)])
def test_register_rejects_bad_range(start, end):
    registry = SpanRegistry()
    with pytest.raises(ValueError):
        registry.register("abcdef", start, end)


def test_with_span_returns_same_error():
    err = InvalidArgumentsError("bad")
    span = Span(3)
    assert err.with_span(span) is err
    assert err.span == span


def test_describe_without_location():
    registry = SpanRegistry()
    err = InvalidArgumentsError("cannot compare")
    assert registry.describe(err) == f"Error: {err}\n"


def test_describe_with_location():
    registry = SpanRegistry()
    text = "select\nfoo bar"
    span = registry.register(text, text.index("bar"), len(text))
    err = IntegerOverflowError("1 + 2").with_span(span)
    out = registry.describe(err)
    assert out.startswith(f"Error: {err}\n")
    assert "2:5" in out
    assert "foo bar" in out


def test_describe_lists_causes():
    registry = SpanRegistry()
    try:
        try:
            raise ValueError("deepest")
        except ValueError as inner:
            raise InvalidArgumentsError("outer") from inner
    except DbgenError as err:
        out = registry.describe(err)
    assert out.endswith("Cause: deepest\n")


def test_error_hierarchy_and_fields():
    err = UnexpectedValueTypeError("number", "'abc'")
    assert isinstance(err, DbgenError)
    assert err.expected == "number"
    assert err.value == "'abc'"
    assert "'abc'" in str(err)
    assert "boom" in str(PanicError("boom"))
    assert isinstance(NotEnoughArgumentsError(), DbgenError)
    assert UnknownFunctionError("foo.bar").name == "foo.bar"


@given(st.lists(st.tuples(st.integers(0, 10), st.integers(0, 10)), max_size=20))
def test_register_indices_match_count(ranges):
    registry = SpanRegistry()
    text = "x" * 20
    for i, (a, b) in enumerate(ranges):
        span = registry.register(text, min(a, b), max(a, b))
        assert span.index == i
    assert len(registry) == len(ranges)