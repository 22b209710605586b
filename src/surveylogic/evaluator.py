"""
Logic Evaluator

Entry point of the package: decides whether a condition tree holds for an
in-progress response.

    evaluate_advanced_logic(survey, data, conditions, language) -> bool

IMPORTANT:
    Evaluation is pure. No caching, no mutation, no I/O.
    Response data may change between calls; every call re-evaluates the
    whole tree.
"""

from __future__ import annotations

from typing import Any, Mapping

from surveylogic.conditions import ConditionGroup, ConditionNode, Connector, SingleCondition
from surveylogic.model import Survey
from surveylogic.operands import resolve_left_operand, resolve_right_operand
from surveylogic.operators import apply_operator


def evaluate_single_condition(
    survey: Survey,
    data: Mapping[str, Any],
    condition: SingleCondition,
    language: str,
) -> bool:
    """Resolve both operands of a leaf condition and apply its operator."""
    left = resolve_left_operand(survey, data, condition.left_operand, language)
    right = resolve_right_operand(survey, data, condition.right_operand)
    return apply_operator(condition.operator, left, right)


def _evaluate_node(
    survey: Survey,
    data: Mapping[str, Any],
    node: ConditionNode,
    language: str,
) -> bool:
    if isinstance(node, ConditionGroup):
        return _evaluate_group(survey, data, node, language)
    return evaluate_single_condition(survey, data, node, language)


def _evaluate_group(
    survey: Survey,
    data: Mapping[str, Any],
    group: ConditionGroup,
    language: str,
) -> bool:
    # every child is evaluated, no short-circuit
    results = [_evaluate_node(survey, data, child, language) for child in group.conditions]
    if group.connector is Connector.OR:
        return any(results)
    return all(results)


def evaluate_advanced_logic(
    survey: Survey,
    data: Mapping[str, Any],
    conditions: ConditionGroup,
    language: str,
) -> bool:
    """
    Evaluate a condition tree against response data.

    Args:
        survey: Survey definition (questions, choices, variables)
        data: Response data keyed by question/variable/hidden field id
        conditions: Root ConditionGroup
        language: Selected language code used to localize choice labels

    Returns:
        True when the tree holds. An empty AND group holds,
        an empty OR group does not.
    """
    return _evaluate_group(survey, data, conditions, language)
