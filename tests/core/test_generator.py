"""Tests for randomized test generation."""

import pytest

from examdesk.core.errors import NotFoundError, ValidationError
from examdesk.core.generator import generate_test
from examdesk.db.database import get_db
from examdesk.db.categories_repository import insert_category
from examdesk.db.questions_repository import insert_question
from examdesk.db.tests_repository import get_test_by_id


def count_rows(table: str) -> int:
    with get_db() as conn:
        return conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]


class TestGenerateTest:
    """Tests for generate_test()."""

    def test_draws_distinct_questions_from_category(self, category, questions):
        other = insert_category("Other")
        insert_question(content="Foreign", correct_option="a", category_id=other.id)

        generated = generate_test(category.id, 4)

        category_ids = {q.id for q in questions}
        assert generated.question_count == 4
        assert len(set(generated.question_ids)) == 4
        assert set(generated.question_ids) <= category_ids

    def test_default_name(self, category, questions):
        generated = generate_test(category.id, 1)

        assert generated.name == "Test: Math"
        assert get_test_by_id(generated.test_id).name == "Test: Math"

    def test_custom_name(self, category, questions):
        assert generate_test(category.id, 1, name="Quiz").name == "Quiz"

    def test_positions_follow_draw_order(self, category, questions):
        generated = generate_test(category.id, 5)

        with get_db() as conn:
            rows = conn.execute(
                "SELECT question_id, position FROM test_questions "
                "WHERE test_id = ? ORDER BY position",
                (generated.test_id,),
            ).fetchall()

        assert [row["position"] for row in rows] == [1, 2, 3, 4, 5]
        assert [row["question_id"] for row in rows] == generated.question_ids

    def test_not_enough_questions_rolls_back(self, category, questions):
        """A failed draw leaves no test behind."""
        with pytest.raises(ValidationError) as exc:
            generate_test(category.id, 6)

        assert "5 questions" in str(exc.value)
        assert count_rows("tests") == 0
        assert count_rows("test_questions") == 0

    def test_unknown_category(self, db_path):
        with pytest.raises(NotFoundError):
            generate_test(404, 1)

    @pytest.mark.parametrize("count", [0, -3])
    def test_invalid_count(self, category, questions, count):
        with pytest.raises(ValidationError):
            generate_test(category.id, count)
