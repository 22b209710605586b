"""
Example survey builder used by the demo script and the tests.

Builds a small two-language feedback survey with a single-choice and a
multi-choice question, an open text question, a rating, a hidden field,
a number variable and logic rules exercising jumps, required answers,
calculations and nested condition groups.
"""
from surveylogic.conditions import (
    ConditionGroup,
    Connector,
    LeftOperand,
    OperandType,
    Operator,
    RightOperand,
    SingleCondition,
)
from surveylogic.model import (
    ActionObjective,
    CalculateOperator,
    Choice,
    LogicAction,
    LogicRule,
    Question,
    Survey,
    Variable,
)


def build_example_feedback_survey() -> Survey:
    survey = Survey(name="Example Feedback Survey")
    survey.languages = ["default", "de"]
    survey.hidden_fields = ["source"]
    survey.endings = ["end_thanks"]
    survey.variables = [
        Variable(id="score", name="Score", type="number", value=0),
        Variable(id="segment", name="Segment", type="text"),
    ]

    # q1: unhappy respondents jump straight to the reason question
    satisfied = Question(
        id="satisfied",
        type="multipleChoiceSingle",
        headline={"default": "Are you satisfied?", "de": "Sind Sie zufrieden?"},
        choices=[
            Choice(id="c_yes", label={"default": "Yes", "de": "Ja"}),
            Choice(id="c_no", label={"default": "No", "de": "Nein"}),
        ],
        logic=[
            LogicRule(
                id="r_unhappy",
                conditions=ConditionGroup(
                    connector=Connector.AND,
                    conditions=(
                        SingleCondition(
                            id="cond_unhappy",
                            left_operand=LeftOperand(OperandType.QUESTION, "satisfied"),
                            operator=Operator.EQUALS,
                            right_operand=RightOperand(OperandType.STATIC, "c_no"),
                        ),
                    ),
                ),
                actions=[
                    LogicAction(objective=ActionObjective.JUMP_TO_QUESTION, target="reason"),
                    LogicAction(objective=ActionObjective.REQUIRE_ANSWER, target="reason"),
                ],
            ),
        ],
    )

    # q2: picking price or support adds to the score
    features = Question(
        id="features",
        type="multipleChoiceMulti",
        headline={"default": "What do you value?", "de": "Was schätzen Sie?"},
        choices=[
            Choice(id="f_speed", label={"default": "Speed", "de": "Geschwindigkeit"}),
            Choice(id="f_price", label={"default": "Price", "de": "Preis"}),
            Choice(id="f_support", label={"default": "Support", "de": "Support"}),
        ],
        logic=[
            LogicRule(
                id="r_score",
                conditions=ConditionGroup(
                    conditions=(
                        SingleCondition(
                            left_operand=LeftOperand(OperandType.QUESTION, "features"),
                            operator=Operator.INCLUDES_ONE_OF,
                            right_operand=RightOperand(OperandType.STATIC, ["f_price", "f_support"]),
                        ),
                    ),
                ),
                actions=[
                    LogicAction(
                        objective=ActionObjective.CALCULATE,
                        target="score",
                        operator=CalculateOperator.ADD,
                        value=RightOperand(OperandType.STATIC, 10),
                    ),
                ],
            ),
        ],
    )

    # q3: skipped, or newsletter readers with a high score, end the survey
    reason = Question(
        id="reason",
        type="openText",
        headline={"default": "What could we improve?", "de": "Was können wir verbessern?"},
        logic=[
            LogicRule(
                id="r_finish",
                conditions=ConditionGroup(
                    connector=Connector.OR,
                    conditions=(
                        SingleCondition(
                            left_operand=LeftOperand(OperandType.QUESTION, "reason"),
                            operator=Operator.IS_SKIPPED,
                        ),
                        ConditionGroup(
                            connector=Connector.AND,
                            conditions=(
                                SingleCondition(
                                    left_operand=LeftOperand(OperandType.HIDDEN_FIELD, "source"),
                                    operator=Operator.EQUALS,
                                    right_operand=RightOperand(OperandType.STATIC, "newsletter"),
                                ),
                                SingleCondition(
                                    left_operand=LeftOperand(OperandType.VARIABLE, "score"),
                                    operator=Operator.IS_GREATER_THAN,
                                    right_operand=RightOperand(OperandType.STATIC, 5),
                                ),
                            ),
                        ),
                    ),
                ),
                actions=[
                    LogicAction(objective=ActionObjective.JUMP_TO_QUESTION, target="end_thanks"),
                ],
            ),
        ],
        logic_fallback="rating",
    )

    rating = Question(
        id="rating",
        type="rating",
        headline={"default": "How would you rate us?", "de": "Wie bewerten Sie uns?"},
    )

    survey.questions = [satisfied, features, reason, rating]
    return survey
