from __future__ import annotations

import math
from datetime import datetime, timedelta, timezone

import pytest

from sheetbind.errors import ConvertError, InvalidDatetimeFormatError
from sheetbind.models.kinds import Kind
from sheetbind.services.converters import (
    DEFAULT_DATETIME_FORMATS,
    ZERO_TIME,
    converter_for,
    guard_empty,
    parse_datetime,
    zero_value,
)


def convert(kind: Kind, cv: str, formats=DEFAULT_DATETIME_FORMATS):
    return converter_for(kind)(cv, formats)


@pytest.mark.parametrize("cv,expected", [
    ("1", True), ("t", True), ("TRUE", True), ("True", True),
    ("0", False), ("f", False), ("false", False), ("FALSE", False),
])
def test_bool_accepts_standard_literals(cv, expected):
    assert convert(Kind.BOOL, cv) == (expected, True)


@pytest.mark.parametrize("kind,lo,hi", [
    (Kind.INT8, -128, 127),
    (Kind.INT16, -32768, 32767),
    (Kind.INT32, -(2**31), 2**31 - 1),
    (Kind.INT64, -(2**63), 2**63 - 1),
    (Kind.INT, -(2**63), 2**63 - 1),
])
def test_signed_bounds(kind, lo, hi):
    assert convert(kind, str(lo)) == (lo, True)
    assert convert(kind, str(hi)) == (hi, True)
    with pytest.raises(ConvertError):
        convert(kind, str(hi + 1))
    with pytest.raises(ConvertError):
        convert(kind, str(lo - 1))


@pytest.mark.parametrize("kind,hi", [
    (Kind.UINT8, 255),
    (Kind.UINT16, 65535),
    (Kind.UINT32, 2**32 - 1),
    (Kind.UINT64, 2**64 - 1),
    (Kind.UINT, 2**64 - 1),
])
def test_unsigned_bounds(kind, hi):
    assert convert(kind, str(hi)) == (hi, True)
    with pytest.raises(ConvertError):
        convert(kind, str(hi + 1))
    with pytest.raises(ConvertError):
        convert(kind, "-1")


def test_int8_overflow_message():
    with pytest.raises(ConvertError) as exc_info:
        convert(Kind.INT8, "300")
    err = exc_info.value
    assert err.kind is Kind.INT8
    assert err.value == "300"
    assert str(err) == 'conversion error, could not convert value "300" into type "int8"'
    assert isinstance(err.__cause__, ValueError)


@pytest.mark.parametrize("cv", ["1.5", "abc", " 1", "1 ", "0x10", "1_000"])
def test_integer_rejects_non_decimal_text(cv):
    with pytest.raises(ConvertError):
        convert(Kind.INT, cv)


def test_integer_accepts_sign():
    assert convert(Kind.INT16, "+12") == (12, True)
    assert convert(Kind.INT16, "-12") == (-12, True)


def test_zero_is_present():
    assert convert(Kind.INT, "0") == (0, True)
    assert convert(Kind.FLOAT64, "0") == (0.0, True)


def test_float64_parses_literals():
    assert convert(Kind.FLOAT64, "2.5") == (2.5, True)
    assert convert(Kind.FLOAT64, "1e3") == (1000.0, True)
    assert convert(Kind.FLOAT64, "-.5") == (-0.5, True)
    value, present = convert(Kind.FLOAT64, "inf")
    assert math.isinf(value) and present
    assert math.isnan(convert(Kind.FLOAT64, "NaN")[0])


def test_float64_overflow_is_a_fault():
    with pytest.raises(ConvertError):
        convert(Kind.FLOAT64, "1e400")


def test_float32_rounds_to_single_precision():
    value, _ = convert(Kind.FLOAT32, "0.1")
    assert value != 0.1
    assert value == pytest.approx(0.1, rel=1e-7)


def test_float32_overflow_is_a_fault():
    with pytest.raises(ConvertError) as exc_info:
        convert(Kind.FLOAT32, "1e39")
    assert 'into type "float32"' in str(exc_info.value)


@pytest.mark.parametrize("cv", ["abc", "1,5", "1.2.3"])
def test_float_rejects_garbage(cv):
    with pytest.raises(ConvertError):
        convert(Kind.FLOAT64, cv)


def test_string_is_identity():
    assert convert(Kind.STRING, " padded ") == (" padded ", True)


def test_datetime_default_formats():
    assert convert(Kind.TIME, "2024-02-01")[0] == datetime(2024, 2, 1, tzinfo=timezone.utc)
    assert convert(Kind.TIME, "2024-02-01 10:30:00")[0] == datetime(2024, 2, 1, 10, 30, tzinfo=timezone.utc)
    with_offset = convert(Kind.TIME, "2024-02-01 10:30:00 +0200")[0]
    assert with_offset.utcoffset() == timedelta(hours=2)


def test_datetime_first_matching_format_wins():
    # "%d.%m.%Y" and "%m.%d.%Y" both accept 01.02.2024
    parsed = parse_datetime("01.02.2024", ["%d.%m.%Y", "%m.%d.%Y"])
    assert parsed == datetime(2024, 2, 1, tzinfo=timezone.utc)


def test_datetime_no_match_lists_formats():
    with pytest.raises(InvalidDatetimeFormatError) as exc_info:
        convert(Kind.TIME, "invalid", ["%d.%m.%Y", "%Y-%m-%d"])
    err = exc_info.value
    assert err.value == "invalid"
    assert err.formats == ["%d.%m.%Y", "%Y-%m-%d"]
    assert str(err) == (
        'invalid datetime format in value "invalid", recognized formats are: ["%d.%m.%Y", "%Y-%m-%d"]'
    )


def test_guard_empty_skips_conversion():
    calls = []

    def boom(cv, formats):
        calls.append(cv)
        raise AssertionError("must not be called")

    guarded = guard_empty(boom, 0)
    assert guarded("", ()) == (0, False)
    assert calls == []


def test_zero_values():
    assert zero_value(Kind.BOOL, False) is False
    assert zero_value(Kind.INT8, False) == 0
    assert zero_value(Kind.FLOAT32, False) == 0.0
    assert zero_value(Kind.STRING, False) == ""
    assert zero_value(Kind.TIME, False) == ZERO_TIME
    assert zero_value(Kind.INT8, True) is None
    assert zero_value(None, False) is None
