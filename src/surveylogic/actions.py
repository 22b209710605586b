"""
Logic Rules and Actions

Runs the logic rules attached to a question once it has been answered and
collects their effects: where to jump next, which questions become
required, and the new values of calculated variables.

Inputs are never mutated; updated variable values are returned in the
LogicOutcome.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from surveylogic.conditions import OperandType, RightOperand
from surveylogic.evaluator import evaluate_advanced_logic
from surveylogic.model import (
    ActionObjective,
    CalculateOperator,
    LogicAction,
    Survey,
    Variable,
)
from surveylogic.values import to_display_string, to_number

logger = logging.getLogger(__name__)


@dataclass
class LogicOutcome:
    """
    Combined effect of the rules that fired.

    Properties:
        jump_target: First jump target produced, or the question's fallback
        required_question_ids: Questions that must now be answered
        calculations: Variable id -> value after all calculate actions
    """

    jump_target: Optional[str] = None
    required_question_ids: List[str] = field(default_factory=list)
    calculations: Dict[str, Any] = field(default_factory=dict)


def _initial_value(variable: Variable) -> Any:
    if variable.value is not None:
        return variable.value
    return 0 if variable.is_number else ""


def initial_variable_values(survey: Survey) -> Dict[str, Any]:
    """Declared starting value of every variable (0 or "" when unset)."""
    return {variable.id: _initial_value(variable) for variable in survey.variables}


def _calculation_operand(
    survey: Survey,
    operand: Optional[RightOperand],
    data: Mapping[str, Any],
    calculations: Mapping[str, Any],
) -> Any:
    if operand is None:
        return None
    if operand.type is OperandType.STATIC:
        return operand.value
    if operand.type is OperandType.VARIABLE:
        if operand.value in calculations:
            return calculations[operand.value]
        variable = survey.get_variable(operand.value)
        return _initial_value(variable) if variable is not None else None
    if operand.type in (OperandType.QUESTION, OperandType.HIDDEN_FIELD):
        return data.get(operand.value)
    return None


def _perform_calculation(
    survey: Survey,
    action: LogicAction,
    data: Mapping[str, Any],
    calculations: Mapping[str, Any],
) -> Any:
    """
    Compute the new value of the action's target variable.

    Returns None when the calculation must be skipped.
    """
    variable = survey.get_variable(action.target)
    if variable is None:
        logger.warning("Skipping calculate action %r: unknown variable %r", action.id, action.target)
        return None

    current = calculations.get(action.target, _initial_value(variable))
    operand = _calculation_operand(survey, action.value, data, calculations)

    if action.operator is CalculateOperator.ASSIGN:
        return operand
    if action.operator is CalculateOperator.CONCAT:
        return f"{to_display_string(current)}{to_display_string(operand)}"
    if action.operator is CalculateOperator.ADD:
        return to_number(current) + to_number(operand)
    if action.operator is CalculateOperator.SUBTRACT:
        return to_number(current) - to_number(operand)
    if action.operator is CalculateOperator.MULTIPLY:
        return to_number(current) * to_number(operand)
    if action.operator is CalculateOperator.DIVIDE:
        divisor = to_number(operand)
        if divisor == 0:
            logger.warning("Skipping calculate action %r: division by zero", action.id)
            return None
        return to_number(current) / divisor

    logger.warning("Skipping calculate action %r: unsupported operator %r", action.id, action.operator)
    return None


def perform_actions(
    survey: Survey,
    actions: List[LogicAction],
    data: Mapping[str, Any],
    calculations: Mapping[str, Any],
) -> LogicOutcome:
    """
    Apply the actions of one rule.

    The first jump action wins; later jumps in the same list are ignored.
    """
    outcome = LogicOutcome(calculations=dict(calculations))
    for action in actions:
        if action.objective is ActionObjective.CALCULATE:
            result = _perform_calculation(survey, action, data, outcome.calculations)
            if result is not None:
                outcome.calculations[action.target] = result
        elif action.objective is ActionObjective.REQUIRE_ANSWER:
            outcome.required_question_ids.append(action.target)
        elif action.objective is ActionObjective.JUMP_TO_QUESTION:
            if outcome.jump_target is None:
                outcome.jump_target = action.target
    return outcome


def evaluate_question_logic(
    survey: Survey,
    question_id: str,
    data: Mapping[str, Any],
    language: str,
    variable_values: Optional[Mapping[str, Any]] = None,
) -> LogicOutcome:
    """
    Run every logic rule of a question against the current response.

    Rules are evaluated in order. Variables calculated by an earlier rule
    are visible to the conditions of later rules. When no rule produced a
    jump, the question's logic_fallback becomes the jump target.

    Args:
        survey: Survey definition
        question_id: Question whose rules run
        data: Response data so far
        language: Selected language code
        variable_values: Current variable values. Variables missing here
            start from their declared initial values

    Returns:
        LogicOutcome. An unknown question id gives an empty outcome.
    """
    # Variables the caller left out keep their declared starting value
    calculations = initial_variable_values(survey)
    if variable_values is not None:
        calculations.update(variable_values)

    outcome = LogicOutcome(calculations=calculations)
    question = survey.get_question(question_id)
    if question is None:
        return outcome

    for rule in question.logic:
        evaluation_data = {**data, **outcome.calculations}
        if not evaluate_advanced_logic(survey, evaluation_data, rule.conditions, language):
            continue
        rule_outcome = perform_actions(survey, rule.actions, data, outcome.calculations)
        outcome.calculations = rule_outcome.calculations
        outcome.required_question_ids.extend(rule_outcome.required_question_ids)
        if outcome.jump_target is None and rule_outcome.jump_target is not None:
            outcome.jump_target = rule_outcome.jump_target

    if outcome.jump_target is None:
        outcome.jump_target = question.logic_fallback
    return outcome
