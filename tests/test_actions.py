"""
Tests for logic rules and actions.

These tests verify:
    - Jump, require-answer and calculate actions
    - First jump wins, fallback applies when no rule jumps
    - Calculations feed later rules and never mutate inputs
    - Bad calculations are skipped with a warning
"""

import logging

import pytest

from surveylogic.actions import (
    LogicOutcome,
    evaluate_question_logic,
    initial_variable_values,
    perform_actions,
)
from surveylogic.conditions import (
    ConditionGroup,
    LeftOperand,
    OperandType,
    Operator,
    RightOperand,
    SingleCondition,
)
from surveylogic.examples import build_example_feedback_survey
from surveylogic.model import (
    ActionObjective,
    CalculateOperator,
    LogicAction,
    LogicRule,
    Question,
    Survey,
    Variable,
)


@pytest.fixture
def survey():
    return build_example_feedback_survey()


def calculate(target, operator, value, op_type=OperandType.STATIC):
    return LogicAction(
        objective=ActionObjective.CALCULATE,
        target=target,
        operator=operator,
        value=RightOperand(op_type, value),
    )


def jump(target):
    return LogicAction(objective=ActionObjective.JUMP_TO_QUESTION, target=target)


class TestInitialValues:
    """Test declared variable defaults."""

    def test_defaults(self, survey):
        assert initial_variable_values(survey) == {"score": 0, "segment": ""}

    def test_declared_value_kept(self):
        survey = Survey(variables=[Variable(id="v", type="text", value="start")])
        assert initial_variable_values(survey) == {"v": "start"}


class TestQuestionLogic:
    """Test evaluate_question_logic on the example survey."""

    def test_jump_and_require(self, survey):
        outcome = evaluate_question_logic(survey, "satisfied", {"satisfied": "No"}, "default")
        assert outcome.jump_target == "reason"
        assert outcome.required_question_ids == ["reason"]
        assert outcome.calculations == {"score": 0, "segment": ""}

    def test_no_rule_fires(self, survey):
        outcome = evaluate_question_logic(survey, "satisfied", {"satisfied": "Yes"}, "default")
        assert outcome.jump_target is None
        assert outcome.required_question_ids == []

    def test_translated_answer(self, survey):
        outcome = evaluate_question_logic(survey, "satisfied", {"satisfied": "Nein"}, "de")
        assert outcome.jump_target == "reason"

    def test_calculation(self, survey):
        outcome = evaluate_question_logic(survey, "features", {"features": ["Price"]}, "default")
        assert outcome.calculations["score"] == 10

    def test_calculation_not_triggered(self, survey):
        outcome = evaluate_question_logic(survey, "features", {"features": ["Speed"]}, "default")
        assert outcome.calculations["score"] == 0

    def test_skipped_question_jumps_to_ending(self, survey):
        outcome = evaluate_question_logic(survey, "reason", {}, "default")
        assert outcome.jump_target == "end_thanks"

    def test_nested_group_uses_variable_values(self, survey):
        data = {"reason": "Faster pages", "source": "newsletter"}
        outcome = evaluate_question_logic(
            survey, "reason", data, "default", variable_values={"score": 10, "segment": ""}
        )
        assert outcome.jump_target == "end_thanks"

    def test_fallback(self, survey):
        data = {"reason": "Faster pages", "source": "ads"}
        outcome = evaluate_question_logic(survey, "reason", data, "default")
        assert outcome.jump_target == "rating"

    def test_unknown_question(self, survey):
        outcome = evaluate_question_logic(survey, "ghost", {}, "default")
        assert outcome == LogicOutcome(calculations={"score": 0, "segment": ""})

    def test_calculations_visible_to_later_rules(self):
        """A variable set by rule 1 is read by rule 2 of the same question."""
        bump = LogicRule(
            id="r1",
            conditions=ConditionGroup(),
            actions=[calculate("score", CalculateOperator.ADD, 5)],
        )
        check = LogicRule(
            id="r2",
            conditions=ConditionGroup(conditions=(
                SingleCondition(
                    left_operand=LeftOperand(OperandType.VARIABLE, "score"),
                    operator=Operator.IS_GREATER_THAN_OR_EQUAL,
                    right_operand=RightOperand(OperandType.STATIC, 5),
                ),
            )),
            actions=[jump("q2")],
        )
        survey = Survey(
            questions=[Question(id="q1", type="openText", logic=[bump, check]), Question(id="q2", type="openText")],
            variables=[Variable(id="score", type="number", value=0)],
        )
        outcome = evaluate_question_logic(survey, "q1", {}, "default")
        assert outcome.calculations["score"] == 5
        assert outcome.jump_target == "q2"

    def test_first_rule_jump_wins(self):
        rules = [
            LogicRule(id="r1", conditions=ConditionGroup(), actions=[jump("q3")]),
            LogicRule(id="r2", conditions=ConditionGroup(), actions=[jump("q2")]),
        ]
        survey = Survey(questions=[Question(id="q1", type="openText", logic=rules, logic_fallback="q2")])
        assert evaluate_question_logic(survey, "q1", {}, "default").jump_target == "q3"

    def test_partial_variable_values(self, survey):
        """Variables left out of variable_values start from their declared value."""
        outcome = evaluate_question_logic(
            survey, "features", {"features": ["Price"]}, "default", variable_values={"segment": ""}
        )
        assert outcome.calculations == {"score": 10, "segment": ""}

    def test_inputs_not_mutated(self, survey):
        data = {"features": ["Price"]}
        values = {"score": 1, "segment": ""}
        evaluate_question_logic(survey, "features", data, "default", variable_values=values)
        assert data == {"features": ["Price"]}
        assert values == {"score": 1, "segment": ""}


class TestPerformActions:
    """Test individual actions."""

    @pytest.fixture
    def survey(self):
        return Survey(
            variables=[
                Variable(id="n", type="number", value=10),
                Variable(id="t", type="text", value="ab"),
                Variable(id="m", type="number", value=3),
            ],
            hidden_fields=["hf"],
        )

    @pytest.mark.parametrize("operator, value, expected", [
        (CalculateOperator.ADD, 5, 15),
        (CalculateOperator.SUBTRACT, "4", 6),
        (CalculateOperator.MULTIPLY, 2, 20),
        (CalculateOperator.DIVIDE, 4, 2.5),
        (CalculateOperator.ASSIGN, 7, 7),
    ])
    def test_arithmetic(self, survey, operator, value, expected):
        outcome = perform_actions(survey, [calculate("n", operator, value)], {}, {"n": 10})
        assert outcome.calculations["n"] == expected

    def test_concat(self, survey):
        outcome = perform_actions(survey, [calculate("t", CalculateOperator.CONCAT, "cd")], {}, {"t": "ab"})
        assert outcome.calculations["t"] == "abcd"

    def test_operand_from_variable(self, survey):
        action = calculate("n", CalculateOperator.ADD, "m", OperandType.VARIABLE)
        outcome = perform_actions(survey, [action], {}, {"n": 10})
        assert outcome.calculations["n"] == 13

    def test_operand_from_hidden_field(self, survey):
        action = calculate("t", CalculateOperator.ASSIGN, "hf", OperandType.HIDDEN_FIELD)
        outcome = perform_actions(survey, [action], {"hf": "promo"}, {})
        assert outcome.calculations["t"] == "promo"

    def test_current_value_defaults_to_declared(self, survey):
        outcome = perform_actions(survey, [calculate("n", CalculateOperator.ADD, 1)], {}, {})
        assert outcome.calculations["n"] == 11

    def test_division_by_zero_skipped(self, survey, caplog):
        with caplog.at_level(logging.WARNING, logger="surveylogic.actions"):
            outcome = perform_actions(survey, [calculate("n", CalculateOperator.DIVIDE, 0)], {}, {"n": 10})
        assert outcome.calculations["n"] == 10
        assert "division by zero" in caplog.text

    def test_unknown_variable_skipped(self, survey, caplog):
        with caplog.at_level(logging.WARNING, logger="surveylogic.actions"):
            outcome = perform_actions(survey, [calculate("ghost", CalculateOperator.ADD, 1)], {}, {})
        assert "ghost" not in outcome.calculations
        assert "unknown variable" in caplog.text

    def test_first_jump_wins(self, survey):
        outcome = perform_actions(survey, [jump("a"), jump("b")], {}, {})
        assert outcome.jump_target == "a"

    def test_require_answer(self, survey):
        action = LogicAction(objective=ActionObjective.REQUIRE_ANSWER, target="q9")
        assert perform_actions(survey, [action], {}, {}).required_question_ids == ["q9"]

    def test_unset_number_starts_at_zero(self):
        survey = Survey(variables=[Variable(id="n", type="number"), Variable(id="m", type="number")])
        add_m = calculate("n", CalculateOperator.ADD, "m", OperandType.VARIABLE)
        outcome = perform_actions(survey, [calculate("n", CalculateOperator.ADD, 5), add_m], {}, {})
        assert outcome.calculations["n"] == 5

    def test_unset_text_concat(self):
        survey = Survey(variables=[Variable(id="t", type="text")])
        outcome = perform_actions(survey, [calculate("t", CalculateOperator.CONCAT, "x")], {}, {})
        assert outcome.calculations["t"] == "x"
