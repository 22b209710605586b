"""
Logic Analyzer: diagnostics for survey logic definitions.

This module provides lightweight analysis of a Survey's logic rules:
    - Reference inventory (questions, variables, hidden fields)
    - Dangling references and unknown operators
    - Jump target checks (missing targets, backward jumps)
    - Condition tree complexity metrics

IMPORTANT: This is read-only. It does NOT modify the survey and never
affects evaluation: the evaluator tolerates everything reported here.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Set

from surveylogic.conditions import (
    ConditionGroup,
    ConditionNode,
    OperandType,
    Operator,
    SingleCondition,
)
from surveylogic.model import QUESTION_TYPES, ActionObjective, Survey


@dataclass
class ConditionMetrics:
    """Metrics about a single condition tree."""
    depth: int = 0
    node_count: int = 0
    question_references: Set[str] = field(default_factory=set)
    variable_references: Set[str] = field(default_factory=set)
    hidden_field_references: Set[str] = field(default_factory=set)
    unknown_operators: Set[str] = field(default_factory=set)

    def add(self, other: ConditionMetrics) -> None:
        self.depth = max(self.depth, other.depth)
        self.node_count += other.node_count
        self.question_references.update(other.question_references)
        self.variable_references.update(other.variable_references)
        self.hidden_field_references.update(other.hidden_field_references)
        self.unknown_operators.update(other.unknown_operators)


def _record_operand(metrics: ConditionMetrics, operand) -> None:
    if operand is None:
        return
    if operand.type is OperandType.QUESTION:
        metrics.question_references.add(operand.value)
    elif operand.type is OperandType.VARIABLE:
        metrics.variable_references.add(operand.value)
    elif operand.type is OperandType.HIDDEN_FIELD:
        metrics.hidden_field_references.add(operand.value)


def _analyze_condition(node: ConditionNode) -> ConditionMetrics:
    """Recursively analyze a condition tree."""
    metrics = ConditionMetrics(node_count=1)

    if isinstance(node, ConditionGroup):
        children = ConditionMetrics()
        for child in node.conditions:
            children.add(_analyze_condition(child))
        metrics.add(children)
        metrics.depth = 1 + children.depth

    elif isinstance(node, SingleCondition):
        metrics.depth = 1
        _record_operand(metrics, node.left_operand)
        _record_operand(metrics, node.right_operand)
        if not isinstance(node.operator, Operator):
            metrics.unknown_operators.add(str(node.operator))

    return metrics


@dataclass
class LogicReport:
    """Analysis report for the logic of a survey."""

    survey_name: str
    total_questions: int = 0
    total_variables: int = 0
    total_hidden_fields: int = 0
    total_rules: int = 0
    total_conditions: int = 0

    # References
    question_usage: Dict[str, int] = field(default_factory=dict)
    undefined_questions: Set[str] = field(default_factory=set)
    undefined_variables: Set[str] = field(default_factory=set)
    undefined_hidden_fields: Set[str] = field(default_factory=set)
    unknown_operators: Set[str] = field(default_factory=set)
    unknown_question_types: Set[str] = field(default_factory=set)

    # Jumps
    invalid_jump_targets: Set[str] = field(default_factory=set)
    backward_jumps: List[str] = field(default_factory=list)

    # Complexity
    max_condition_depth: int = 0
    avg_condition_depth: float = 0.0

    warnings: List[str] = field(default_factory=list)

    def add_warning(self, msg: str) -> None:
        """Add a warning to the report."""
        if msg not in self.warnings:
            self.warnings.append(msg)


def analyze_logic(survey: Survey) -> LogicReport:
    """
    Analyze every logic rule of a Survey.

    Checks for:
    - References to questions, variables and hidden fields that do not exist
    - Operators this version does not know
    - Question types this version does not know
    - Jump targets that are neither questions nor endings
    - Jumps back to an earlier question
    - Condition tree depth

    Returns a LogicReport with metrics and warnings.
    """
    report = LogicReport(survey_name=survey.name)
    report.total_questions = len(survey.questions)
    report.total_variables = len(survey.variables)
    report.total_hidden_fields = len(survey.hidden_fields)

    question_ids = {q.id for q in survey.questions}
    variable_ids = {v.id for v in survey.variables}
    hidden_ids = set(survey.hidden_fields)

    all_metrics = ConditionMetrics()
    depths: List[int] = []
    usage: Dict[str, int] = {}

    for position, question in enumerate(survey.questions):
        if question.type not in QUESTION_TYPES:
            report.unknown_question_types.add(question.type)

        for rule in question.logic:
            report.total_rules += 1
            metrics = _analyze_condition(rule.conditions)
            all_metrics.add(metrics)
            depths.append(metrics.depth)
            for ref in metrics.question_references:
                usage[ref] = usage.get(ref, 0) + 1

            for action in rule.actions:
                if action.objective is ActionObjective.CALCULATE:
                    if action.target not in variable_ids:
                        all_metrics.variable_references.add(action.target)
                    continue
                if not survey.is_jump_target(action.target):
                    report.invalid_jump_targets.add(action.target)
                    continue
                if action.objective is ActionObjective.JUMP_TO_QUESTION:
                    target_index = survey.question_index(action.target)
                    if target_index is not None and target_index <= position:
                        report.backward_jumps.append(f"{question.id} -> {action.target}")

        if question.logic_fallback is not None and not survey.is_jump_target(question.logic_fallback):
            report.invalid_jump_targets.add(question.logic_fallback)

    report.total_conditions = all_metrics.node_count
    report.question_usage = usage
    report.undefined_questions = all_metrics.question_references - question_ids
    report.undefined_variables = all_metrics.variable_references - variable_ids
    report.undefined_hidden_fields = all_metrics.hidden_field_references - hidden_ids
    report.unknown_operators = all_metrics.unknown_operators

    if depths:
        report.max_condition_depth = max(depths)
        report.avg_condition_depth = sum(depths) / len(depths)

    if report.undefined_questions:
        report.add_warning(
            f"Undefined question references: {', '.join(sorted(report.undefined_questions))}"
        )
    if report.undefined_variables:
        report.add_warning(
            f"Undefined variable references: {', '.join(sorted(report.undefined_variables))}"
        )
    if report.undefined_hidden_fields:
        report.add_warning(
            f"Undefined hidden field references: {', '.join(sorted(report.undefined_hidden_fields))}"
        )
    if report.unknown_operators:
        report.add_warning(
            f"Unknown operators (always false): {', '.join(sorted(report.unknown_operators))}"
        )
    if report.unknown_question_types:
        report.add_warning(
            f"Unknown question types: {', '.join(sorted(report.unknown_question_types))}"
        )
    if report.invalid_jump_targets:
        report.add_warning(
            f"Invalid jump targets: {', '.join(sorted(report.invalid_jump_targets))}"
        )
    for jump in report.backward_jumps:
        report.add_warning(f"Backward jump: {jump}")
    if report.max_condition_depth > 5:
        report.add_warning(
            f"High condition complexity: max depth {report.max_condition_depth}"
        )

    return report
