"""
Survey Logic Evaluator Package

Decides which branching path (show/skip/jump/end) applies to an in-progress
survey response by evaluating trees of conditions against question answers,
hidden fields, variables and literals.

ARCHITECTURAL GUARANTEE:
------------------------
Evaluation is pure:
    - No I/O
    - No shared mutable state
    - No exceptions for missing or malformed response data

This package does NOT render questions, store responses or move the
respondent between pages. Callers feed it a survey definition and the
response data, and act on the booleans (or LogicOutcome) it returns.
"""

__version__ = "0.1.0"
