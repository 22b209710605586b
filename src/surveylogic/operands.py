"""
Operand Resolution

Turns an operand descriptor into the concrete value an operator compares:
a string, a number, a list of strings, a mapping, or None.

Lookups that miss (unknown question, unknown variable, unanswered
question) resolve to None. Nothing here raises.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Mapping, Optional

from surveylogic.conditions import LeftOperand, OperandType, RightOperand
from surveylogic.i18n import get_localized_value
from surveylogic.model import Question, Survey
from surveylogic.values import ValueKind, is_truthy, kind_of, to_number

logger = logging.getLogger(__name__)


def _resolve_choice_answer(question: Question, raw: Any, language: str) -> Any:
    """
    Map a stored choice label (or labels) back to choice ids.

    A single label gives the matching choice id, or None.
    A list of labels gives the ids of every matching choice in the
    question's choice order, not the order of the response.
    Other shapes are returned unchanged.
    """
    kind = kind_of(raw)
    if kind is ValueKind.STRING:
        for choice in question.choices:
            if get_localized_value(choice.label, language) == raw:
                return choice.id
        return None
    if kind is ValueKind.LIST:
        return [
            choice.id
            for choice in question.choices
            if get_localized_value(choice.label, language) in raw
        ]
    return raw


def _resolve_variable(survey: Survey, variable_id: str, data: Mapping[str, Any]) -> Any:
    variable = survey.get_variable(variable_id)
    if variable is None:
        return None
    raw = data.get(variable_id)
    if variable.is_number:
        number = to_number(raw)
        return 0 if math.isnan(number) or number == 0 else number
    return raw if is_truthy(raw) else ""


def resolve_left_operand(
    survey: Survey,
    data: Mapping[str, Any],
    operand: LeftOperand,
    language: str,
) -> Any:
    """
    Resolve the left side of a condition.

    Answers of choice questions are translated from labels to choice ids
    using the selected language, so conditions can be written against ids.
    """
    if operand.type is OperandType.QUESTION:
        question = survey.get_question(operand.value)
        if question is None:
            return None
        raw = data.get(operand.value)
        if question.is_choice_question:
            return _resolve_choice_answer(question, raw, language)
        return raw

    if operand.type is OperandType.VARIABLE:
        return _resolve_variable(survey, operand.value, data)

    if operand.type is OperandType.HIDDEN_FIELD:
        return data.get(operand.value)

    logger.debug("Unrecognized left operand type %r resolved to None", operand.type)
    return None


def resolve_right_operand(
    survey: Survey,
    data: Mapping[str, Any],
    operand: Optional[RightOperand],
) -> Any:
    """
    Resolve the right side of a condition.

    Question and hidden field references return the raw stored answer;
    no label-to-id translation happens on this side.
    """
    if operand is None:
        return None

    if operand.type is OperandType.STATIC:
        return operand.value

    if operand.type in (OperandType.QUESTION, OperandType.HIDDEN_FIELD):
        return data.get(operand.value)

    if operand.type is OperandType.VARIABLE:
        return _resolve_variable(survey, operand.value, data)

    logger.debug("Unrecognized right operand type %r resolved to None", operand.type)
    return None
