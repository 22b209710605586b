"""
Core Survey Model Objects

Defines the read-only survey definition the logic evaluator works against.

These are pure data classes representing:
    - Choices (options of choice questions)
    - Questions (with optional logic rules)
    - Variables (computed values)
    - Logic rules and their actions
    - Surveys (root container)

ARCHITECTURAL RULE:
    These objects:
        - Know nothing about rendering or storage
        - Are treated as immutable during an evaluation
        - Are fully serializable
        - Represent structure, not behavior
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Union

from .conditions import ConditionGroup, RightOperand


MULTIPLE_CHOICE_SINGLE = "multipleChoiceSingle"
MULTIPLE_CHOICE_MULTI = "multipleChoiceMulti"

# Question types whose answers are stored as choice labels
CHOICE_QUESTION_TYPES = frozenset({MULTIPLE_CHOICE_SINGLE, MULTIPLE_CHOICE_MULTI})

QUESTION_TYPES = frozenset({
    MULTIPLE_CHOICE_SINGLE,
    MULTIPLE_CHOICE_MULTI,
    "openText",
    "rating",
    "nps",
    "cta",
    "consent",
    "date",
    "cal",
    "contactInfo",
    "address",
    "fileUpload",
    "matrix",
    "ranking",
    "pictureSelection",
})

VARIABLE_TYPE_NUMBER = "number"
VARIABLE_TYPE_TEXT = "text"


@dataclass
class Choice:
    """
    One selectable option of a choice question.

    Properties:
        id: Stable identifier used by logic conditions (e.g., "c1")
        label: Per-language label map (e.g., {"default": "Yes", "de": "Ja"})

    Responses store the localized label, not the id.
    The evaluator maps labels back to ids before comparing.
    """

    id: str
    label: Dict[str, str] = field(default_factory=dict)


class ActionObjective(Enum):
    """What a logic action does when its rule fires."""

    JUMP_TO_QUESTION = "jumpToQuestion"
    REQUIRE_ANSWER = "requireAnswer"
    CALCULATE = "calculate"


class CalculateOperator(Enum):
    """Arithmetic or text operation applied by a calculate action."""

    ASSIGN = "assign"
    CONCAT = "concat"
    ADD = "add"
    SUBTRACT = "subtract"
    MULTIPLY = "multiply"
    DIVIDE = "divide"


@dataclass
class LogicAction:
    """
    Effect of a logic rule.

    Properties:
        objective:
            ActionObjective

        target:
            Question or ending id for JUMP_TO_QUESTION,
            question id for REQUIRE_ANSWER,
            variable id for CALCULATE

        operator:
            CalculateOperator (CALCULATE only)

        value:
            RightOperand supplying the operand of a CALCULATE action

    Example:
        "add 10 to the score variable"

        LogicAction(
            objective=ActionObjective.CALCULATE,
            target="score",
            operator=CalculateOperator.ADD,
            value=RightOperand(OperandType.STATIC, 10),
        )
    """

    objective: ActionObjective
    target: str
    operator: Optional[CalculateOperator] = None
    value: Optional[RightOperand] = None
    id: str = ""


@dataclass
class LogicRule:
    """
    Conditional rule attached to a question.

    When `conditions` holds for the current response, every action runs.
    Rules of a question are evaluated in order.
    """

    id: str
    conditions: ConditionGroup
    actions: List[LogicAction] = field(default_factory=list)


@dataclass
class Question:
    """
    A single survey question.

    Properties:
        id:
            Unique identifier, also the key of its answer in response data

        type:
            Question type tag (e.g., "multipleChoiceSingle", "openText").
            Unknown tags are allowed and handled like any non-choice type.

        headline:
            Per-language question text

        choices:
            Ordered options (choice questions only)

        logic:
            Ordered logic rules evaluated after the question is answered

        logic_fallback:
            Jump target used when no rule produced a jump (optional)

        required:
            Whether an answer is required by default
    """

    id: str
    type: str
    headline: Dict[str, str] = field(default_factory=dict)
    choices: List[Choice] = field(default_factory=list)
    logic: List[LogicRule] = field(default_factory=list)
    logic_fallback: Optional[str] = None
    required: bool = False

    @property
    def is_choice_question(self) -> bool:
        return self.type in CHOICE_QUESTION_TYPES


@dataclass
class Variable:
    """
    Declares a computed survey variable.

    Properties:
        id: Identifier, also its key in response data
        name: Human-readable name
        type: "number" or "text"
        value: Initial value (optional)
    """

    id: str
    name: str = ""
    type: str = VARIABLE_TYPE_TEXT
    value: Optional[Union[int, float, str]] = None

    @property
    def is_number(self) -> bool:
        return self.type == VARIABLE_TYPE_NUMBER


@dataclass
class Survey:
    """
    Root container of a survey definition.

    Properties:
        name:
            Survey identifier

        questions:
            Ordered questions

        variables:
            Declared variables

        hidden_fields:
            Ids of hidden fields (prefilled values, not asked)

        endings:
            Ids of ending cards (valid jump targets besides questions)

        languages:
            Language codes the labels are translated to (metadata)

    INVARIANTS (checked by the analyzer, not enforced here):
        - Question and variable ids are unique
        - Jump targets reference existing questions or endings
    """

    name: str = ""
    questions: List[Question] = field(default_factory=list)
    variables: List[Variable] = field(default_factory=list)
    hidden_fields: List[str] = field(default_factory=list)
    endings: List[str] = field(default_factory=list)
    languages: List[str] = field(default_factory=list)

    def get_question(self, question_id: str) -> Optional[Question]:
        """
        Retrieve a question by ID.

        Returns:
            Question object or None if not found
        """
        for question in self.questions:
            if question.id == question_id:
                return question
        return None

    def get_variable(self, variable_id: str) -> Optional[Variable]:
        """
        Retrieve a variable by ID.

        Returns:
            Variable object or None if not found
        """
        for variable in self.variables:
            if variable.id == variable_id:
                return variable
        return None

    def question_index(self, question_id: str) -> Optional[int]:
        for index, question in enumerate(self.questions):
            if question.id == question_id:
                return index
        return None

    def has_hidden_field(self, field_id: str) -> bool:
        return field_id in self.hidden_fields

    def is_jump_target(self, target: str) -> bool:
        return self.get_question(target) is not None or target in self.endings
