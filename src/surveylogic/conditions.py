"""
Condition Tree for Survey Logic

All branching conditions (show/skip/jump/end rules) are represented as
trees of immutable nodes, never as strings.

A tree is made of two node kinds:
    - ConditionGroup: an AND/OR combination of child nodes
    - SingleCondition: left operand, operator, optional right operand

ARCHITECTURAL RULE:
    Nodes are structure only.
    Evaluation lives in surveylogic.evaluator,
    diagnostics live in surveylogic.analyzer.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Tuple, Union


class Connector(Enum):
    """How the children of a ConditionGroup are combined."""

    AND = "and"
    OR = "or"


class OperandType(Enum):
    """
    Where an operand takes its value from.

    Left operands use QUESTION, VARIABLE or HIDDEN_FIELD.
    Right operands may additionally be STATIC (a literal).
    """

    QUESTION = "question"
    VARIABLE = "variable"
    HIDDEN_FIELD = "hiddenField"
    STATIC = "static"


class Operator(Enum):
    """
    Operators a SingleCondition can apply.

    The set is fixed, but conditions may carry operator names that are not
    listed here (written by a newer editor). Those are kept as plain strings
    and evaluate to False.
    """

    EQUALS = "equals"
    DOES_NOT_EQUAL = "doesNotEqual"

    CONTAINS = "contains"
    DOES_NOT_CONTAIN = "doesNotContain"
    STARTS_WITH = "startsWith"
    DOES_NOT_START_WITH = "doesNotStartWith"
    ENDS_WITH = "endsWith"
    DOES_NOT_END_WITH = "doesNotEndWith"

    IS_SUBMITTED = "isSubmitted"
    IS_SKIPPED = "isSkipped"

    IS_GREATER_THAN = "isGreaterThan"
    IS_LESS_THAN = "isLessThan"
    IS_GREATER_THAN_OR_EQUAL = "isGreaterThanOrEqual"
    IS_LESS_THAN_OR_EQUAL = "isLessThanOrEqual"

    EQUALS_ONE_OF = "equalsOneOf"
    INCLUDES_ALL_OF = "includesAllOf"
    INCLUDES_ONE_OF = "includesOneOf"

    IS_ACCEPTED = "isAccepted"
    IS_CLICKED = "isClicked"

    IS_AFTER = "isAfter"
    IS_BEFORE = "isBefore"

    IS_BOOKED = "isBooked"

    IS_PARTIALLY_SUBMITTED = "isPartiallySubmitted"
    IS_COMPLETELY_SUBMITTED = "isCompletelySubmitted"


def _coerce(enum_cls, raw):
    """Map a wire name onto its enum member; unknown names are kept as-is."""
    if isinstance(raw, str):
        try:
            return enum_cls(raw)
        except ValueError:
            return raw
    return raw


@dataclass(frozen=True)
class LeftOperand:
    """
    Reference to the value being tested.

    Properties:
        type: OperandType (QUESTION, VARIABLE or HIDDEN_FIELD)
        value: id of the referenced question, variable or hidden field

    IMPORTANT:
        The reference is not validated here.
        A dangling id simply resolves to None at evaluation time.

    Wire names ("hiddenField", ...) are accepted and stored as OperandType.
    """

    type: Union[OperandType, str]
    value: str

    def __post_init__(self):
        object.__setattr__(self, "type", _coerce(OperandType, self.type))


@dataclass(frozen=True)
class RightOperand:
    """
    Value the left operand is tested against.

    Properties:
        type: OperandType (any of the four)
        value: referenced id, or the literal itself when type is STATIC

    Example:
        RightOperand(OperandType.STATIC, "42")
        RightOperand(OperandType.STATIC, ["c1", "c3"])
    """

    type: Union[OperandType, str]
    value: Any

    def __post_init__(self):
        object.__setattr__(self, "type", _coerce(OperandType, self.type))


@dataclass(frozen=True)
class SingleCondition:
    """
    Leaf of a condition tree.

    Example:
        "q1 equals c1"

    Becomes:
        SingleCondition(
            id="cond1",
            left_operand=LeftOperand(OperandType.QUESTION, "q1"),
            operator=Operator.EQUALS,
            right_operand=RightOperand(OperandType.STATIC, "c1"),
        )

    Unary operators (isSubmitted, isSkipped, isClicked, ...) leave
    right_operand as None.
    """

    left_operand: LeftOperand
    operator: Union[Operator, str]
    right_operand: Optional[RightOperand] = None
    id: str = ""

    def __post_init__(self):
        object.__setattr__(self, "operator", _coerce(Operator, self.operator))


@dataclass(frozen=True)
class ConditionGroup:
    """
    AND/OR combination of child nodes.

    Children are either SingleCondition or nested ConditionGroup nodes.

    INVARIANT:
        The tree is finite and acyclic. A group reachable from itself is a
        caller error and is not detected by the evaluator.
    """

    connector: Connector = Connector.AND
    conditions: Tuple["ConditionNode", ...] = ()
    id: str = ""

    def __post_init__(self):
        object.__setattr__(self, "connector", _coerce(Connector, self.connector))
        object.__setattr__(self, "conditions", tuple(self.conditions))


ConditionNode = Union[ConditionGroup, SingleCondition]


def is_condition_group(node: ConditionNode) -> bool:
    return isinstance(node, ConditionGroup)
