import sys
from datetime import datetime, timedelta, timezone

import pytest
from hypothesis import given, strategies as st

from dbforge.number import Number
from dbforge.span import IntegerOverflowError, InvalidArgumentsError, UnexpectedValueTypeError
from dbforge.value import (
    I64_MAX,
    Interval,
    Timestamp,
    expect_array,
    expect_bytes,
    expect_float,
    expect_int,
    expect_number,
    expect_optional_bool,
    expect_str,
    format_value,
    is_sql_true,
    sql_add,
    sql_cmp,
    sql_concat,
    sql_div,
    sql_float_div,
    sql_mul,
    sql_rem,
    sql_sign,
    sql_sub,
)


def test_cmp_numbers_by_value():
    assert sql_cmp(Number(1), Number(2)) < 0
    assert sql_cmp(Number(2.5), Number(2)) > 0
    assert sql_cmp(Number(True), Number(1)) == 0


def test_cmp_with_null_is_unknown():
    assert sql_cmp(None, Number(1)) is None
    assert sql_cmp(b"x", None) is None


def test_cmp_bytes_binary_collation():
    assert sql_cmp(b"abc", b"abd") < 0
    assert sql_cmp(b"ab", b"abc") < 0
    assert sql_cmp(b"b", b"abc") > 0


def test_cmp_arrays_lexicographic():
    assert sql_cmp((Number(1), Number(2)), (Number(1), Number(3))) < 0
    assert sql_cmp((Number(1),), (Number(1), Number(0))) < 0
    assert sql_cmp((Number(1), None), (Number(1), Number(2))) is None
    assert sql_cmp((Number(2), None), (Number(1), Number(2))) > 0


def test_cmp_mixed_types_raises():
    with pytest.raises(InvalidArgumentsError, match="cannot compare"):
        sql_cmp(Number(1), b"1")


def test_cmp_timestamps_ignores_zone():
    moment = datetime(2020, 1, 1, 12)
    a = Timestamp(moment, timezone.utc)
    b = Timestamp(moment, timezone(timedelta(hours=5)))
    assert sql_cmp(a, b) == 0
    assert a != b


def test_sql_sign():
    assert sql_sign(None) == 0
    assert sql_sign(b"") == 0
    assert sql_sign(b"x") > 0
    assert sql_sign(()) == 0
    assert sql_sign(Interval(-3)) < 0
    assert sql_sign(Number(-1)) < 0
    assert sql_sign(Timestamp(datetime(2000, 1, 1))) > 0


def test_add_numbers():
    assert sql_add(Number(3), Number(4)) == Number(7)
    assert sql_sub(Number(3), Number(4)) == Number(-1)


def test_add_overflow_raises():
    big = Number(sys.float_info.max)
    with pytest.raises(IntegerOverflowError):
        sql_add(big, big)


def test_float_div_by_zero_is_null():
    assert sql_float_div(Number(1), Number(0)) is None


def test_div_and_rem():
    assert sql_div(Number(13), Number(4)) == Number(3)
    assert sql_rem(Number(13), Number(4)) == Number(1)
    assert sql_div(Number(1), Number(0)) is None
    assert sql_rem(Number(1), Number(0)) is None
    with pytest.raises(InvalidArgumentsError):
        sql_div(b"1", Number(1))
    with pytest.raises(InvalidArgumentsError):
        sql_rem(Number(1), b"1")


def test_timestamp_interval_round_trip():
    ts = Timestamp(datetime(2020, 1, 1))
    iv = Interval(86_400_000_000)
    later = sql_add(ts, iv)
    assert sql_add(iv, ts) == later
    assert sql_sub(later, iv) == ts
    assert later.utc - ts.utc == timedelta(microseconds=iv.microseconds)
    assert sql_cmp(later, ts) > 0


def test_timestamp_overflow_raises():
    ts = Timestamp(datetime(9999, 12, 31))
    with pytest.raises(IntegerOverflowError):
        sql_add(ts, Interval(2 * 86_400_000_000))


def test_interval_overflow_raises():
    with pytest.raises(IntegerOverflowError):
        sql_add(Interval(I64_MAX), Interval(1))


def test_interval_multiplication():
    iv = Interval(1500)
    n = Number(4)
    product = sql_mul(iv, n)
    assert product == sql_mul(n, iv)
    assert sql_float_div(product, n) == iv
    assert sql_float_div(iv, Number(0)) is None


def test_cannot_add_bytes():
    with pytest.raises(InvalidArgumentsError, match="cannot add"):
        sql_add(b"a", Number(1))


def test_concat():
    assert sql_concat([b"ab", Number(1), Number(2.5)]) == b"ab12.5"
    assert sql_concat([b"ab", None, Number(1)]) is None
    assert sql_concat([Interval(5)]) == b"INTERVAL 5 MICROSECOND"


def test_concat_array_raises():
    with pytest.raises(InvalidArgumentsError):
        sql_concat([b"a", (Number(1),)])


def test_concat_timestamp_uses_local_zone():
    ts = Timestamp(datetime(2020, 1, 2, 3, 4, 5), timezone(timedelta(hours=2)))
    assert sql_concat([ts]) == b"2020-01-02 05:04:05"
    fractional = Timestamp(datetime(2020, 1, 2, 3, 4, 5, 250000))
    assert sql_concat([fractional]) == b"2020-01-02 03:04:05.250"


def test_is_sql_true():
    assert is_sql_true(None) is False
    assert is_sql_true(Number(0)) is False
    assert is_sql_true(Number(-2)) is True
    with pytest.raises(InvalidArgumentsError, match="truth value"):
        is_sql_true(b"x")


def test_expect_int():
    assert expect_int(Number(5), 0, 10, "digit") == 5
    with pytest.raises(UnexpectedValueTypeError) as info:
        expect_int(Number(11), 0, 10, "digit")
    assert info.value.expected == "digit"
    with pytest.raises(UnexpectedValueTypeError):
        expect_int(b"5")


def test_expect_str():
    text = "héllo"
    assert expect_str(text.encode()) == text
    with pytest.raises(UnexpectedValueTypeError):
        expect_str(b"\xff")


def test_expect_other_conversions():
    arr = (Number(1), None)
    assert expect_array(arr) is arr
    assert expect_optional_bool(None) is None
    assert expect_optional_bool(Number(3)) is True
    assert expect_float(Number(True)) == 1.0
    assert expect_number(Number(2)) == Number(2)
    assert expect_bytes(b"q") == b"q"
    with pytest.raises(UnexpectedValueTypeError):
        expect_bytes(Number(1))
    with pytest.raises(UnexpectedValueTypeError):
        expect_number(b"")
    with pytest.raises(UnexpectedValueTypeError):
        expect_optional_bool(b"")


def test_format_value():
    assert format_value(None) == "NULL"
    assert format_value(Interval(5)) == "INTERVAL 5 MICROSECOND"
    assert format_value(Number(12)) == str(Number(12))


@given(st.integers(-(10**30), 10**30), st.integers(-(10**30), 10**30))
def test_add_commutes_and_sub_inverts(a, b):
    na, nb = Number(a), Number(b)
    total = sql_add(na, nb)
    assert total == sql_add(nb, na)
    assert sql_sub(total, nb) == na