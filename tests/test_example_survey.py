"""
Test the example feedback survey used by the demo script.

Validates that the builder creates the expected questions, choices and
logic wiring.
"""

from surveylogic.examples import build_example_feedback_survey


def test_example_feedback_survey_structure():
    survey = build_example_feedback_survey()

    assert [q.id for q in survey.questions] == ["satisfied", "features", "reason", "rating"]
    assert survey.hidden_fields == ["source"]
    assert survey.endings == ["end_thanks"]

    satisfied = survey.get_question("satisfied")
    assert [c.id for c in satisfied.choices] == ["c_yes", "c_no"]
    assert satisfied.choices[1].label["de"] == "Nein"

    # Every question but the last carries logic
    assert all(q.logic for q in survey.questions[:3])
    assert survey.get_question("rating").logic == []
    assert survey.get_question("reason").logic_fallback == "rating"

    assert survey.get_variable("score").is_number
