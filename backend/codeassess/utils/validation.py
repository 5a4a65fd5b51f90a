"""Validation utilities for AI-generated problems and grading payloads."""

from typing import Any, Dict

REQUIRED_PROBLEM_FIELDS = [
    "title",
    "description",
    "difficulty",
    "expected_time",
    "test_cases",
    "solution",
]


def validate_problem_structure(problem: Dict[str, Any]) -> bool:
    """True when every required field is present (None counts as missing)."""
    return all(problem.get(field) is not None for field in REQUIRED_PROBLEM_FIELDS)


def validate_grading(grading: Any) -> bool:
    """
    Check a grading payload: every score is a number in 0..100 and every
    feedback entry is a list.
    """
    if not isinstance(grading, dict):
        return False
    score = grading.get("score")
    feedback = grading.get("feedback")
    if not score or not feedback or not isinstance(score, dict) or not isinstance(feedback, dict):
        return False

    for value in score.values():
        # bool is an int subclass; reject it explicitly
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return False
        if value < 0 or value > 100:
            return False

    return all(isinstance(entries, list) for entries in feedback.values())
