"""
Operator Table

Maps every Operator to a handler taking the resolved (left, right) values
and returning a bool.

Operands arrive already resolved but not necessarily compatible: a list may
be compared with a string, a number with a mapping. Each handler branches on
the value kinds it understands and answers False for the rest.

ARCHITECTURAL RULE:
    Handlers never raise.
    An operator missing from the table evaluates to False.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Union

from surveylogic.conditions import Operator
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

logger = logging.getLogger(__name__)

Handler = Callable[[Any, Any], bool]


# =============================================================================
# Equality
# =============================================================================

def _equals(left: Any, right: Any) -> bool:
    # ["x"] equals "x": single-choice answers may arrive as one-element lists
    if (
        kind_of(left) is ValueKind.LIST
        and len(left) == 1
        and kind_of(right) is ValueKind.STRING
        and includes(left, right)
    ):
        return True
    # An absent left side is not converted, so it only equals an absent right side
    if left is None:
        return right is None
    if kind_of(right) is not ValueKind.STRING:
        return False
    return to_display_string(left) == right


def _does_not_equal(left: Any, right: Any) -> bool:
    # Not the complement of equals: ["x"] vs "x" is both equal and not equal
    return not strictly_equal(left, right)


# =============================================================================
# Text
# =============================================================================

def _contains(left: Any, right: Any) -> bool:
    return to_display_string(right) in to_display_string(left)


def _starts_with(left: Any, right: Any) -> bool:
    return to_display_string(left).startswith(to_display_string(right))


def _ends_with(left: Any, right: Any) -> bool:
    return to_display_string(left).endswith(to_display_string(right))


def _negate(handler: Handler) -> Handler:
    def negated(left: Any, right: Any) -> bool:
        return not handler(left, right)

    return negated


# =============================================================================
# Presence
# =============================================================================

def _is_submitted(left: Any, right: Any) -> bool:
    kind = kind_of(left)
    if kind is ValueKind.STRING:
        return left != ""
    if kind is ValueKind.LIST:
        return len(left) > 0
    # any number counts, 0 included
    return kind is ValueKind.NUMBER


def _is_skipped(left: Any, right: Any) -> bool:
    # numbers are never skipped, not even 0 (see isSubmitted)
    kind = kind_of(left)
    if kind is ValueKind.ABSENT:
        return True
    if kind is ValueKind.STRING:
        return left == ""
    if kind in (ValueKind.LIST, ValueKind.MAPPING):
        return len(left) == 0
    return False


# =============================================================================
# Numeric comparison
# =============================================================================

def _greater_than(left: Any, right: Any) -> bool:
    return to_number(left) > to_number(right)


def _less_than(left: Any, right: Any) -> bool:
    return to_number(left) < to_number(right)


def _greater_than_or_equal(left: Any, right: Any) -> bool:
    return to_number(left) >= to_number(right)


def _less_than_or_equal(left: Any, right: Any) -> bool:
    return to_number(left) <= to_number(right)


# =============================================================================
# Set membership
# =============================================================================

def _equals_one_of(left: Any, right: Any) -> bool:
    return (
        kind_of(right) is ValueKind.LIST
        and kind_of(left) is ValueKind.STRING
        and includes(right, left)
    )


def _includes_all_of(left: Any, right: Any) -> bool:
    if kind_of(left) is not ValueKind.LIST or kind_of(right) is not ValueKind.LIST:
        return False
    return all(includes(left, item) for item in right)


def _includes_one_of(left: Any, right: Any) -> bool:
    if kind_of(left) is not ValueKind.LIST or kind_of(right) is not ValueKind.LIST:
        return False
    return any(includes(left, item) for item in right)


# =============================================================================
# Fixed answers
# =============================================================================

def _is_accepted(left: Any, right: Any) -> bool:
    return strictly_equal(left, "accepted")


def _is_clicked(left: Any, right: Any) -> bool:
    return strictly_equal(left, "clicked")


def _is_booked(left: Any, right: Any) -> bool:
    return strictly_equal(left, "booked") or (is_truthy(left) and left != "")


# =============================================================================
# Dates
# =============================================================================

def _is_after(left: Any, right: Any) -> bool:
    left_date, right_date = parse_datetime(left), parse_datetime(right)
    if left_date is None or right_date is None:
        return False
    return left_date > right_date


def _is_before(left: Any, right: Any) -> bool:
    left_date, right_date = parse_datetime(left), parse_datetime(right)
    if left_date is None or right_date is None:
        return False
    return left_date < right_date


# =============================================================================
# Composite answers (contact info, address)
# =============================================================================

def _field_values(value: Any):
    """Sub-field values of a composite answer, or None for other shapes."""
    kind = kind_of(value)
    if kind is ValueKind.MAPPING:
        return list(value.values())
    if kind is ValueKind.LIST:
        return list(value)
    return None


def _is_partially_submitted(left: Any, right: Any) -> bool:
    values = _field_values(left)
    if values is None:
        return False
    return includes(values, "")


def _is_completely_submitted(left: Any, right: Any) -> bool:
    values = _field_values(left)
    if values is None:
        return False
    return len(values) > 0 and not includes(values, "")


OPERATOR_TABLE: Dict[Operator, Handler] = {
    Operator.EQUALS: _equals,
    Operator.DOES_NOT_EQUAL: _does_not_equal,
    Operator.CONTAINS: _contains,
    Operator.DOES_NOT_CONTAIN: _negate(_contains),
    Operator.STARTS_WITH: _starts_with,
    Operator.DOES_NOT_START_WITH: _negate(_starts_with),
    Operator.ENDS_WITH: _ends_with,
    Operator.DOES_NOT_END_WITH: _negate(_ends_with),
    Operator.IS_SUBMITTED: _is_submitted,
    Operator.IS_SKIPPED: _is_skipped,
    Operator.IS_GREATER_THAN: _greater_than,
    Operator.IS_LESS_THAN: _less_than,
    Operator.IS_GREATER_THAN_OR_EQUAL: _greater_than_or_equal,
    Operator.IS_LESS_THAN_OR_EQUAL: _less_than_or_equal,
    Operator.EQUALS_ONE_OF: _equals_one_of,
    Operator.INCLUDES_ALL_OF: _includes_all_of,
    Operator.INCLUDES_ONE_OF: _includes_one_of,
    Operator.IS_ACCEPTED: _is_accepted,
    Operator.IS_CLICKED: _is_clicked,
    Operator.IS_AFTER: _is_after,
    Operator.IS_BEFORE: _is_before,
    Operator.IS_BOOKED: _is_booked,
    Operator.IS_PARTIALLY_SUBMITTED: _is_partially_submitted,
    Operator.IS_COMPLETELY_SUBMITTED: _is_completely_submitted,
}


def apply_operator(operator: Union[Operator, str], left: Any, right: Any) -> bool:
    """
    Evaluate one operator against resolved operand values.

    Accepts the Operator enum or its wire name ("equals", "isSkipped", ...).
    Unrecognized operators evaluate to False.
    """
    if not isinstance(operator, Operator):
        try:
            operator = Operator(operator)
        except ValueError:
            logger.debug("Unrecognized operator %r evaluated to False", operator)
            return False
    return OPERATOR_TABLE[operator](left, right)
