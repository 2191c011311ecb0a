"""Grade and remark derivation for report card scores."""

import math
from typing import Any

from report_card_data.forms.defaults import SCORE_FIELDS

# Inclusive lower bounds, checked from the top.
GRADE_THRESHOLDS: tuple[tuple[float, str], ...] = (
    (90, "A+"),
    (80, "A"),
    (70, "B+"),
    (60, "B"),
    (50, "C"),
    (40, "D"),
)
FAILING_GRADE = "E"

OVERALL_REMARKS: dict[str, str] = {
    "A+": "Excellent",
    "A": "Excellent",
    "B+": "Very Good",
    "B": "Good",
    "C": "Fair",
    "D": "Pass",
    "E": "Fail",
}


def _as_number(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number):
        return None
    return number


def calculate_grade(score: Any) -> str:
    """Map a score to a letter grade; empty string when there is no score."""
    number = _as_number(score)
    if number is None:
        return ""
    for lower_bound, grade in GRADE_THRESHOLDS:
        if number >= lower_bound:
            return grade
    return FAILING_GRADE


def get_overall_remark(grade: str | None) -> str:
    return OVERALL_REMARKS.get(grade or "", "")


def subject_total(subject: dict[str, Any]) -> float | None:
    """Sum of a subject's component scores, or None if none are filled in."""
    scores = [_as_number(subject.get(field)) for field in SCORE_FIELDS]
    present = [score for score in scores if score is not None]
    if not present:
        return None
    return sum(present)
