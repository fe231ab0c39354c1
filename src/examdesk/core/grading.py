"""Grading module.

Responsibilities:
- Convert points to a percentage
- Map a percentage to the 1-6 school grade scale
- Score submitted answers against the correct options of a test
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any

import structlog

from examdesk.core.errors import ValidationError
from examdesk.db.questions_repository import OPTION_KEYS, QuestionRecord

logger = structlog.get_logger(__name__)

# =============================================================================
# CONSTANTS
# =============================================================================

# (minimum percentage, grade), checked top to bottom
GRADE_THRESHOLDS: tuple[tuple[float, int], ...] = (
    (95.0, 6),
    (85.0, 5),
    (70.0, 4),
    (50.0, 3),
    (30.0, 2),
    (0.0, 1),
)

GRADE_LABELS: dict[int, str] = {
    6: "celujący",
    5: "bardzo dobry",
    4: "dobry",
    3: "dostateczny",
    2: "dopuszczający",
    1: "niedostateczny",
}

# =============================================================================
# DATA CLASSES
# =============================================================================


@dataclass
class ScoreSummary:
    """Outcome of scoring a set of answers."""

    points: float
    max_points: float
    percentage: float
    grade: int
    correct_question_ids: list[int] = field(default_factory=list)

    @property
    def grade_label(self) -> str:
        return GRADE_LABELS[self.grade]


# =============================================================================
# GRADING
# =============================================================================


def percentage(points: float, max_points: float) -> float:
    """Return points as a percentage of max_points, rounded to 2 decimals.

    Raises:
        ValidationError: If either value is not finite, max_points is not
            positive or points is out of range
    """
    if not (math.isfinite(points) and math.isfinite(max_points)):
        raise ValidationError("points and max_points must be finite numbers")
    if max_points <= 0:
        raise ValidationError("max_points must be greater than 0")
    if points < 0 or points > max_points:
        raise ValidationError("points must be between 0 and max_points")
    return round(points / max_points * 100, 2)


def grade_for_percentage(value: float) -> int:
    """Map a percentage to a grade on the 1-6 scale.

    Values outside 0-100 are clamped.
    """
    value = max(0.0, min(100.0, value))
    for threshold, grade in GRADE_THRESHOLDS:
        if value >= threshold:
            return grade
    return 1


def grade_label(grade: int) -> str:
    """Polish name of a grade (e.g. 5 -> 'bardzo dobry')."""
    return GRADE_LABELS.get(grade, "")


def normalize_option(response: Any) -> str | None:
    """Normalize an answer to an option letter or None if invalid/empty.

    Accepts "B", " b ", "b)" and the 0-based index 1 as the same answer.
    """
    if response is None or isinstance(response, bool):
        return None
    if isinstance(response, int):
        if 0 <= response < len(OPTION_KEYS):
            return OPTION_KEYS[response]
        return None
    if isinstance(response, str):
        stripped = response.strip().lower().rstrip(").")
        if stripped in OPTION_KEYS:
            return stripped
    return None


def score_answers(
    questions: list[QuestionRecord],
    answers: dict[int, Any],
) -> ScoreSummary:
    """Score answers against the correct options of the given questions.

    Each correct answer earns the question's points. Unanswered or
    unrecognized answers earn nothing.

    Args:
        questions: Questions of the test
        answers: Mapping of question_id to the student's answer

    Returns:
        ScoreSummary with points, percentage and grade

    Raises:
        ValidationError: If the test has no questions or no points to earn
    """
    if not questions:
        raise ValidationError("Test has no questions")

    max_points = float(sum(q.points for q in questions))
    points = 0.0
    correct: list[int] = []

    for question in questions:
        given = normalize_option(answers.get(question.id))
        if given is not None and given == question.correct_option:
            points += question.points
            correct.append(question.id)

    pct = percentage(points, max_points)
    grade = grade_for_percentage(pct)

    logger.debug(
        "grading.scored",
        questions=len(questions),
        correct=len(correct),
        percentage=pct,
        grade=grade,
    )

    return ScoreSummary(
        points=points,
        max_points=max_points,
        percentage=pct,
        grade=grade,
        correct_question_ids=correct,
    )
