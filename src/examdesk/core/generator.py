"""Randomized test generation.

A test is drawn from one category: the Test row, the random question draw
and the join rows are written in a single transaction, so a failed draw
leaves nothing behind.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import structlog

from examdesk.core.errors import NotFoundError, ValidationError
from examdesk.db.database import get_db

logger = structlog.get_logger(__name__)


@dataclass
class GeneratedTest:
    """Result of generating a test."""

    test_id: int
    name: str
    category_id: int
    question_ids: list[int] = field(default_factory=list)

    @property
    def question_count(self) -> int:
        return len(self.question_ids)


def generate_test(
    category_id: int,
    question_count: int,
    name: str | None = None,
) -> GeneratedTest:
    """Create a test with question_count random questions from a category.

    Args:
        category_id: Category to draw questions from
        question_count: Number of distinct questions to draw
        name: Test name; defaults to "Test: <category name>"

    Returns:
        GeneratedTest with the new test id and drawn question ids

    Raises:
        ValidationError: If question_count < 1 or the category has
            fewer questions than requested
        NotFoundError: If the category does not exist
    """
    if question_count < 1:
        raise ValidationError("question_count must be at least 1")

    with get_db() as conn:
        category = conn.execute(
            "SELECT id, name FROM categories WHERE id = ?", (category_id,)
        ).fetchone()
        if category is None:
            raise NotFoundError("Category", category_id)

        test_name = name or f"Test: {category['name']}"
        cursor = conn.execute(
            "INSERT INTO tests (name, category_id) VALUES (?, ?)",
            (test_name, category_id),
        )
        test_id = cursor.lastrowid

        rows = conn.execute(
            "SELECT id FROM questions WHERE category_id = ? ORDER BY RANDOM() LIMIT ?",
            (category_id, question_count),
        ).fetchall()
        question_ids = [row["id"] for row in rows]

        if len(question_ids) < question_count:
            # Raising inside get_db() rolls back the tests insert
            raise ValidationError(
                f"Category {category_id} has {len(question_ids)} questions, "
                f"{question_count} requested"
            )

        conn.executemany(
            "INSERT INTO test_questions (test_id, question_id, position) VALUES (?, ?, ?)",
            [(test_id, qid, position) for position, qid in enumerate(question_ids, 1)],
        )

    logger.info(
        "tests.generated",
        test_id=test_id,
        category_id=category_id,
        question_count=len(question_ids),
    )

    return GeneratedTest(
        test_id=test_id,
        name=test_name,
        category_id=category_id,
        question_ids=question_ids,
    )
