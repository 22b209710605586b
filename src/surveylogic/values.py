"""
Response Value Kinds and Loose-Typing Coercions

Response data carries no schema: the same key may hold a string, a number,
a list of strings, a mapping of sub-fields, or nothing at all. Every
operator therefore branches on the runtime shape of its operands.

This module provides:
    - ValueKind / kind_of: the closed set of shapes a value can take
    - to_display_string: string conversion used by text operators
    - to_number: numeric coercion used by comparison operators
    - is_truthy: truthiness used by isBooked and variable defaults
    - strictly_equal / includes: type-exact equality and membership
    - parse_datetime: date parsing used by isAfter / isBefore

ARCHITECTURAL RULE:
    Nothing in this module raises on odd input.
    Unconvertible values become NaN, None or False.
"""

from __future__ import annotations

import math
import re
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from dateutil import parser as date_parser
from dateutil import tz


class ValueKind(Enum):
    """Runtime shape of a response or operand value."""

    ABSENT = "absent"
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    LIST = "list"
    MAPPING = "mapping"
    OTHER = "other"


def kind_of(value: Any) -> ValueKind:
    # bool is checked before number: True is not a number here
    if value is None:
        return ValueKind.ABSENT
    if isinstance(value, bool):
        return ValueKind.BOOLEAN
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, (int, float)):
        return ValueKind.NUMBER
    if isinstance(value, (list, tuple)):
        return ValueKind.LIST
    if isinstance(value, dict):
        return ValueKind.MAPPING
    return ValueKind.OTHER


def _number_to_string(value: float) -> str:
    """
    Shortest round-trip digits, laid out the way String(number) does.

    Plain notation from 1e-6 up to 1e21, otherwise "1e-7" / "1.5e+21".
    """
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        number = Decimal(repr(value))
    else:
        number = Decimal(value)
    if number == 0:
        return "0"

    sign, digit_tuple, exponent = number.normalize().as_tuple()
    digits = "".join(str(d) for d in digit_tuple)
    # number == 0.<digits> * 10 ** point
    point = exponent + len(digits)

    if len(digits) <= point <= 21:
        text = digits + "0" * (point - len(digits))
    elif 0 < point <= 21:
        text = f"{digits[:point]}.{digits[point:]}"
    elif -6 < point <= 0:
        text = "0." + "0" * -point + digits
    else:
        power = point - 1
        mantissa = digits[0] if len(digits) == 1 else f"{digits[0]}.{digits[1:]}"
        text = f"{mantissa}e{'+' if power > 0 else '-'}{abs(power)}"
    return f"-{text}" if sign else text


def to_display_string(value: Any) -> str:
    """
    Convert any value to its display string.

    Lists join their elements with "," (absent elements become ""),
    mappings become "[object Object]" and an absent value is "undefined".

    Examples:
        to_display_string(None)        -> "undefined"
        to_display_string(3.0)         -> "3"
        to_display_string(["a", "b"])  -> "a,b"
    """
    kind = kind_of(value)
    if kind is ValueKind.ABSENT:
        return "undefined"
    if kind is ValueKind.STRING:
        return value
    if kind is ValueKind.BOOLEAN:
        return "true" if value else "false"
    if kind is ValueKind.NUMBER:
        return _number_to_string(value)
    if kind is ValueKind.LIST:
        return ",".join("" if item is None else to_display_string(item) for item in value)
    if kind is ValueKind.MAPPING:
        return "[object Object]"
    return str(value)


_DECIMAL_RE = re.compile(r"^[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?$")
_PREFIXED_RE = re.compile(r"^0([xX][0-9a-fA-F]+|[oO][0-7]+|[bB][01]+)$")
_INFINITY_RE = re.compile(r"^[+-]?Infinity$")


def _string_to_number(text: str) -> float:
    text = text.strip()
    if text == "":
        return 0
    if _DECIMAL_RE.match(text):
        return float(text)
    if _PREFIXED_RE.match(text):
        return int(text, 0)
    if _INFINITY_RE.match(text):
        return -math.inf if text.startswith("-") else math.inf
    return math.nan


def to_number(value: Any) -> float:
    """
    Numeric coercion.

    Absent values and mappings give NaN, booleans give 1/0, strings are
    parsed after trimming (an empty string is 0), lists go through their
    display string, so ["5"] is 5 and ["1", "2"] is NaN.
    """
    kind = kind_of(value)
    if kind is ValueKind.NUMBER:
        return value
    if kind is ValueKind.BOOLEAN:
        return 1 if value else 0
    if kind is ValueKind.STRING:
        return _string_to_number(value)
    if kind is ValueKind.LIST:
        return _string_to_number(to_display_string(value))
    return math.nan


def is_truthy(value: Any) -> bool:
    """Empty lists and mappings are truthy; "", 0, NaN and None are not."""
    kind = kind_of(value)
    if kind is ValueKind.ABSENT:
        return False
    if kind is ValueKind.NUMBER:
        return value != 0 and not math.isnan(value)
    if kind in (ValueKind.STRING, ValueKind.BOOLEAN):
        return bool(value)
    return True


def strictly_equal(left: Any, right: Any) -> bool:
    """
    Type-exact equality without coercion.

    Lists and mappings are only equal to themselves (identity),
    NaN is never equal to anything.
    """
    left_kind = kind_of(left)
    if left_kind is not kind_of(right):
        return False
    if left_kind in (ValueKind.LIST, ValueKind.MAPPING, ValueKind.OTHER):
        return left is right
    return left == right


def _same_value_zero(left: Any, right: Any) -> bool:
    if (
        kind_of(left) is ValueKind.NUMBER
        and kind_of(right) is ValueKind.NUMBER
        and math.isnan(left)
        and math.isnan(right)
    ):
        return True
    return strictly_equal(left, right)


def includes(sequence: Any, item: Any) -> bool:
    """Membership test using type-exact equality (NaN matches NaN)."""
    return any(_same_value_zero(element, item) for element in sequence)


_DEFAULT_DATES = (datetime(2000, 1, 1), datetime(2004, 1, 1))


def _parse_full_date(text: str) -> Optional[datetime]:
    """
    Free-form parse that refuses to invent a year.

    dateutil fills missing parts from its default, so "May" or "5" would
    otherwise become a date in the current year. Parsing against two
    defaults that differ only in the year exposes text without one.
    """
    try:
        first, second = (date_parser.parse(text, default=default) for default in _DEFAULT_DATES)
    except (ValueError, OverflowError):
        return None
    if first != second:
        return None
    return first


def parse_datetime(value: Any) -> Optional[datetime]:
    """
    Parse the display string of a value as a point in time.

    Naive results are pinned to UTC so any two parsed values compare.
    Returns None when the text is not a recognizable date.
    """
    if kind_of(value) is ValueKind.OTHER:
        return None
    text = to_display_string(value).strip()
    if not text:
        return None
    try:
        parsed = date_parser.isoparse(text)
    except (ValueError, OverflowError):
        parsed = _parse_full_date(text)
        if parsed is None:
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=tz.UTC)
    return parsed
