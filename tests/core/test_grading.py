"""Tests for grading: percentages, the 1-6 scale and answer scoring."""

import pytest

from examdesk.core.errors import ValidationError
from examdesk.core.grading import (
    grade_for_percentage,
    grade_label,
    normalize_option,
    percentage,
    score_answers,
)
from examdesk.db.questions_repository import QuestionRecord


def make_question(question_id: int, correct: str = "a", points: int = 1) -> QuestionRecord:
    return QuestionRecord(
        id=question_id,
        bank_id=None,
        category_id=1,
        content=f"Question {question_id}",
        option_a="A",
        option_b="B",
        option_c="C",
        option_d="D",
        correct_option=correct,
        points=points,
    )


class TestPercentage:
    """Tests for percentage()."""

    def test_rounds_to_two_decimals(self):
        assert percentage(1, 3) == 33.33
        assert percentage(2, 2) == 100.0
        assert percentage(0, 5) == 0.0

    def test_rejects_zero_max_points(self):
        with pytest.raises(ValidationError):
            percentage(0, 0)

    @pytest.mark.parametrize("points", [-1, 11])
    def test_rejects_points_out_of_range(self, points):
        with pytest.raises(ValidationError):
            percentage(points, 10)

    @pytest.mark.parametrize(
        "points,max_points",
        [(float("nan"), 10), (5, float("nan")), (float("inf"), 10), (5, float("inf"))],
    )
    def test_rejects_non_finite(self, points, max_points):
        with pytest.raises(ValidationError):
            percentage(points, max_points)


class TestGradeScale:
    """Tests for grade_for_percentage() boundaries."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            (100, 6),
            (95, 6),
            (94.99, 5),
            (85, 5),
            (84.99, 4),
            (70, 4),
            (69.99, 3),
            (50, 3),
            (49.99, 2),
            (30, 2),
            (29.99, 1),
            (0, 1),
        ],
    )
    def test_thresholds(self, value, expected):
        assert grade_for_percentage(value) == expected

    def test_clamps_out_of_range(self):
        assert grade_for_percentage(130) == 6
        assert grade_for_percentage(-5) == 1

    def test_labels(self):
        assert grade_label(6) == "celujący"
        assert grade_label(1) == "niedostateczny"
        assert grade_label(9) == ""


class TestNormalizeOption:
    """Tests for answer normalization."""

    @pytest.mark.parametrize("raw", ["b", "B", " b ", "b)", "B.", 1])
    def test_equivalent_forms(self, raw):
        assert normalize_option(raw) == "b"

    @pytest.mark.parametrize("raw", [None, "", "e", "ab", 4, -1, True, 2.0])
    def test_invalid(self, raw):
        assert normalize_option(raw) is None


class TestScoreAnswers:
    """Tests for score_answers()."""

    def test_all_correct(self):
        questions = [make_question(1, "a"), make_question(2, "c")]

        summary = score_answers(questions, {1: "a", 2: "C"})

        assert summary.points == 2
        assert summary.max_points == 2
        assert summary.percentage == 100.0
        assert summary.grade == 6
        assert summary.grade_label == "celujący"
        assert summary.correct_question_ids == [1, 2]

    def test_weighted_points(self):
        """Questions earn their own point value."""
        questions = [make_question(1, "a", points=3), make_question(2, "b", points=1)]

        summary = score_answers(questions, {1: "a", 2: "d"})

        assert summary.points == 3
        assert summary.max_points == 4
        assert summary.percentage == 75.0
        assert summary.grade == 4

    def test_missing_and_unknown_answers_score_zero(self):
        questions = [make_question(1), make_question(2)]

        summary = score_answers(questions, {2: "zzz", 99: "a"})

        assert summary.points == 0
        assert summary.grade == 1
        assert summary.correct_question_ids == []

    def test_no_questions(self):
        with pytest.raises(ValidationError):
            score_answers([], {})
