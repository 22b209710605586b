"""
Tests for value kinds and loose-typing coercions.

These tests verify:
    - Runtime shape classification
    - Display string conversion
    - Numeric coercion (NaN for non-numeric input)
    - Truthiness, type-exact equality and membership
    - Date parsing
"""

import math
from datetime import datetime

import pytest
from dateutil import tz

from surveylogic.values import (
    ValueKind,
    includes,
    is_truthy,
    kind_of,
    parse_datetime,
    strictly_equal,
    to_display_string,
    to_number,
)


class TestKindOf:
    """Test runtime shape classification."""

    @pytest.mark.parametrize("value, kind", [
        (None, ValueKind.ABSENT),
        (True, ValueKind.BOOLEAN),
        ("x", ValueKind.STRING),
        (3, ValueKind.NUMBER),
        (2.5, ValueKind.NUMBER),
        (["a"], ValueKind.LIST),
        ({"first": "A"}, ValueKind.MAPPING),
        (object(), ValueKind.OTHER),
    ])
    def test_kinds(self, value, kind):
        assert kind_of(value) is kind

    def test_bool_is_not_a_number(self):
        """Booleans must not be mistaken for numbers."""
        assert kind_of(False) is not ValueKind.NUMBER


class TestDisplayString:
    """Test string conversion used by text operators."""

    @pytest.mark.parametrize("value, text", [
        (None, "undefined"),
        ("abc", "abc"),
        (3.0, "3"),
        (2.5, "2.5"),
        (42, "42"),
        (True, "true"),
        (["a", "b"], "a,b"),
        (["a", None], "a,"),
        ({"a": "b"}, "[object Object]"),
        (math.nan, "NaN"),
        (-math.inf, "-Infinity"),
        (1e-7, "1e-7"),
        (1.5e-7, "1.5e-7"),
        (0.000001, "0.000001"),
        (1e21, "1e+21"),
        (-2.5e22, "-2.5e+22"),
        (1e20, "100000000000000000000"),
        (1e16, "10000000000000000"),
        (0.1, "0.1"),
        (-0.0, "0"),
    ])
    def test_conversion(self, value, text):
        assert to_display_string(value) == text


class TestToNumber:
    """Test numeric coercion."""

    @pytest.mark.parametrize("value, number", [
        ("", 0),
        ("  12 ", 12),
        ("1e3", 1000),
        (".5", 0.5),
        ("0x1F", 31),
        ("0b101", 5),
        ("Infinity", math.inf),
        (True, 1),
        (False, 0),
        (7, 7),
        (["5"], 5),
        ([], 0),
    ])
    def test_numeric(self, value, number):
        assert to_number(value) == number

    @pytest.mark.parametrize("value", ["abc", "inf", "1_000", "-0x1F", "\u0663", "1\u0660", None, {}, ["1", "2"]])
    def test_not_a_number(self, value):
        """Non-numeric input coerces to NaN instead of raising."""
        assert math.isnan(to_number(value))


class TestTruthiness:
    """Test truthiness rules."""

    @pytest.mark.parametrize("value", [[], {}, "a", 1, -1, True])
    def test_truthy(self, value):
        assert is_truthy(value)

    @pytest.mark.parametrize("value", [None, "", 0, 0.0, math.nan, False])
    def test_falsy(self, value):
        assert not is_truthy(value)


class TestStrictEquality:
    """Test type-exact equality."""

    def test_int_and_float_are_equal(self):
        assert strictly_equal(1, 1.0)

    def test_no_string_number_coercion(self):
        assert not strictly_equal(1, "1")

    def test_bool_is_not_one(self):
        assert not strictly_equal(True, 1)

    def test_lists_compare_by_identity(self):
        """Two equal-looking lists are still different values."""
        items = ["a"]
        assert strictly_equal(items, items)
        assert not strictly_equal(["a"], ["a"])

    def test_nan_never_equal(self):
        assert not strictly_equal(math.nan, math.nan)

    def test_includes(self):
        assert includes([1, "a"], "a")
        assert not includes([1], True)
        assert includes([math.nan], math.nan)


class TestParseDatetime:
    """Test date parsing for isAfter / isBefore."""

    def test_iso_date(self):
        assert parse_datetime("2024-01-02") == datetime(2024, 1, 2, tzinfo=tz.UTC)

    def test_offset_is_kept(self):
        parsed = parse_datetime("2024-01-02T10:00:00+02:00")
        assert parsed == datetime(2024, 1, 2, 8, 0, tzinfo=tz.UTC)

    def test_naive_is_utc(self):
        assert parse_datetime("2024-01-02T10:00:00").tzinfo is not None

    @pytest.mark.parametrize("value", ["not a date", None, "", {}, "May", "5"])
    def test_unparseable(self, value):
        assert parse_datetime(value) is None

    def test_month_and_year(self):
        assert parse_datetime("May 2024") == datetime(2024, 5, 1, tzinfo=tz.UTC)

    def test_free_form_full_date(self):
        assert parse_datetime("May 5, 2024") == datetime(2024, 5, 5, tzinfo=tz.UTC)
