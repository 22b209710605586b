"""
Demo: Analyze the example feedback survey, then walk a few responses
through its logic rules.
"""

import logging

from surveylogic.actions import evaluate_question_logic, initial_variable_values
from surveylogic.analyzer import analyze_logic
from surveylogic.examples import build_example_feedback_survey
from surveylogic.serialization import survey_to_yaml


def print_report(report):
    """Pretty-print a LogicReport."""
    print()
    print("=" * 70)
    print(f"LOGIC ANALYSIS REPORT: {report.survey_name}")
    print("=" * 70)
    print()

    print("📊 BASIC METRICS")
    print(f"  Total Questions:       {report.total_questions}")
    print(f"  Total Variables:       {report.total_variables}")
    print(f"  Total Hidden Fields:   {report.total_hidden_fields}")
    print(f"  Total Rules:           {report.total_rules}")
    print(f"  Total Conditions:      {report.total_conditions}")
    print()

    print("📈 REFERENCES")
    for question_id, count in sorted(report.question_usage.items()):
        print(f"    {question_id}: {count} reference(s)")
    print(f"  Undefined Questions:   {len(report.undefined_questions)}")
    print(f"  Undefined Variables:   {len(report.undefined_variables)}")
    print(f"  Unknown Operators:     {len(report.unknown_operators)}")
    print()

    print("📐 CONDITION COMPLEXITY")
    print(f"  Max Condition Depth:   {report.max_condition_depth}")
    print(f"  Avg Condition Depth:   {report.avg_condition_depth:.2f}")
    print()

    if report.warnings:
        print("⚠️  WARNINGS")
        for i, warning in enumerate(report.warnings, 1):
            print(f"  {i}. {warning}")
    else:
        print("✨ NO WARNINGS - Logic looks clean!")
    print()


def walk(survey, responses, language):
    """Answer questions in order, following jumps, and print each step."""
    variables = initial_variable_values(survey)
    question = survey.questions[0]
    while question is not None:
        outcome = evaluate_question_logic(survey, question.id, responses, language, variables)
        variables = outcome.calculations
        print(f"  {question.id:<10} answer={responses.get(question.id)!r:<20} -> {outcome.jump_target}")

        target = outcome.jump_target
        if target is None:
            index = survey.question_index(question.id) + 1
            question = survey.questions[index] if index < len(survey.questions) else None
        else:
            question = survey.get_question(target)
            if question is None:
                print(f"  reached ending {target}")
    print(f"  variables: {variables}")
    print()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    survey = build_example_feedback_survey()
    print_report(analyze_logic(survey))

    print("🧭 RESPONSE WALKTHROUGHS")
    print(" unhappy respondent (de):")
    walk(survey, {"satisfied": "Nein", "reason": ""}, "de")
    print(" happy newsletter reader:")
    walk(survey, {"satisfied": "Yes", "features": ["Price", "Speed"], "reason": "More themes", "source": "newsletter"}, "default")

    yaml_str = survey_to_yaml(survey)
    with open("example_survey_output.yaml", "w") as f:
        f.write(yaml_str)
    print("✅ Survey exported to example_survey_output.yaml")
