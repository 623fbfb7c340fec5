import pytest
from hypothesis import given
from hypothesis import strategies as st

from dbforge.functions import ops
from dbforge.functions.base import CompileContext
from dbforge.number import I128_MAX, I128_MIN, Number
from dbforge.span import InvalidArgumentsError, Span, Spanned, UnexpectedValueTypeError
from dbforge.value import Interval, expect_optional_bool, is_sql_true

CTX = CompileContext()
SPAN = Span(99)

small_ints = st.integers(min_value=-10_000, max_value=10_000)
i128s = st.integers(min_value=I128_MIN, max_value=I128_MAX)


def call(function, *values):
    args = [Spanned(value, Span(index)) for index, value in enumerate(values)]
    return function.compile(CTX, SPAN, args)


@given(i128s)
def test_neg_twice_restores_value(n):
    assert call(ops.Neg(), call(ops.Neg(), Number(n))) == Number(n)


def test_neg_rejects_non_number():
    with pytest.raises(UnexpectedValueTypeError) as info:
        call(ops.Neg(), b"x")
    assert info.value.span == Span(0)


@given(small_ints, small_ints)
def test_comparisons_are_consistent(a, b):
    x, y = Number(a), Number(b)
    lt = is_sql_true(call(ops.LT, x, y))
    eq = is_sql_true(call(ops.EQ, x, y))
    assert lt == (a < b)
    assert eq == (a == b)
    assert is_sql_true(call(ops.GT, y, x)) == lt
    assert is_sql_true(call(ops.LE, x, y)) == (lt or eq)
    assert is_sql_true(call(ops.NE, x, y)) == (not eq)
    assert is_sql_true(call(ops.GE, x, y)) == (not lt)


def test_compare_with_null_is_null():
    assert call(ops.EQ, None, Number(1)) is None
    assert call(ops.LT, Number(1), None) is None


def test_compare_mismatched_types_raises_at_call_span():
    with pytest.raises(InvalidArgumentsError) as info:
        call(ops.EQ, Number(1), b"1")
    assert info.value.span == SPAN


def test_compare_requires_two_arguments():
    with pytest.raises(ValueError):
        call(ops.EQ, Number(1))


def test_identical():
    assert is_sql_true(call(ops.IS, None, None))
    assert not is_sql_true(call(ops.IS_NOT, None, None))
    assert not is_sql_true(call(ops.IS, Number(1), None))
    assert is_sql_true(call(ops.IS, Number(5), Number(5.0)))
    assert is_sql_true(call(ops.IS_NOT, b"a", b"b"))


def test_not():
    assert call(ops.Not(), None) is None
    assert expect_optional_bool(call(ops.Not(), Number(0))) is True
    assert expect_optional_bool(call(ops.Not(), Number(2.5))) is False


def test_not_rejects_string():
    with pytest.raises(UnexpectedValueTypeError):
        call(ops.Not(), b"true")


@given(i128s)
def test_bit_not_twice_restores_value(n):
    assert call(ops.BitNot(), call(ops.BitNot(), Number(n))) == Number(n)


def test_logic_and():
    assert expect_optional_bool(call(ops.AND, None, Number(False))) is False
    assert call(ops.AND, Number(True), None) is None
    assert expect_optional_bool(call(ops.AND, Number(True), Number(True))) is True
    assert expect_optional_bool(call(ops.AND)) is True


def test_logic_or():
    assert expect_optional_bool(call(ops.OR, None, Number(True))) is True
    assert call(ops.OR, Number(False), None) is None
    assert expect_optional_bool(call(ops.OR)) is False


def test_logic_stops_at_deciding_value():
    assert expect_optional_bool(call(ops.AND, Number(False), b"x")) is False


def test_logic_rejects_string_with_its_span():
    with pytest.raises(UnexpectedValueTypeError) as info:
        call(ops.OR, Number(False), b"x")
    assert info.value.span == Span(1)


@given(st.lists(small_ints, min_size=1, max_size=6))
def test_add_folds_all_arguments(values):
    assert call(ops.ADD, *map(Number, values)) == Number(sum(values))


@given(small_ints, small_ints)
def test_sub_intervals(a, b):
    assert call(ops.SUB, Interval(a), Interval(b)) == Interval(a - b)


def test_arith_error_carries_argument_span():
    with pytest.raises(InvalidArgumentsError) as info:
        call(ops.ADD, Number(1), b"x")
    assert info.value.span == Span(1)


def test_arith_requires_an_argument():
    with pytest.raises(ValueError):
        call(ops.MUL)


@given(i128s)
def test_bitwise_identities(n):
    x = Number(n)
    assert call(ops.BIT_XOR, x, x) == Number(0)
    assert call(ops.BIT_AND, x) == x
    assert call(ops.BIT_OR, x) == x
    assert call(ops.BIT_AND, x, call(ops.BitNot(), x)) == call(ops.BIT_OR)


@given(st.lists(st.one_of(st.none(), small_ints), min_size=1, max_size=8))
def test_extremum_skips_nulls(values):
    numbers = [v for v in values if v is not None]
    args = [None if v is None else Number(v) for v in values]
    greatest = call(ops.GREATEST, *args)
    least = call(ops.LEAST, *args)
    if numbers:
        assert greatest == Number(max(numbers))
        assert least == Number(min(numbers))
    else:
        assert greatest is None and least is None


def test_extremum_mixed_types_raise():
    with pytest.raises(InvalidArgumentsError):
        call(ops.GREATEST, Number(1), b"a")


def test_round_halves_away_from_zero():
    assert call(ops.Round(), Number(2.5)) == Number(3.0)
    assert call(ops.Round(), Number(-2.5)) == Number(-3.0)


def test_round_keeps_integers_and_huge_scales():
    assert call(ops.Round(), Number(7)) == Number(7)
    assert call(ops.Round(), Number(1e300), Number(400)) == Number(1e300)


def test_div_and_mod():
    assert call(ops.Div(), Number(13), Number(4)) == Number(3)
    assert call(ops.Mod(), Number(13), Number(4)) == Number(1)
    assert call(ops.Div(), Number(1), Number(0)) is None
    assert call(ops.Mod(), Number(1), Number(0)) is None


def test_div_rejects_strings_at_call_span():
    with pytest.raises(InvalidArgumentsError) as info:
        call(ops.Div(), b"a", Number(1))
    assert info.value.span == SPAN


def test_coalesce():
    assert call(ops.Coalesce(), None, b"a", b"b") == b"a"
    assert call(ops.Coalesce(), None, None) is None


def test_last():
    assert call(ops.Last(), Number(1), b"z") == b"z"
    with pytest.raises(ValueError):
        call(ops.Last())