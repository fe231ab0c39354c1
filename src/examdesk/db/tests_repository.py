"""Repository functions for the tests and test_questions tables.

Creating tests is done by examdesk.core.generator, which needs the
insert and the question draw in one transaction. This module covers the
remaining reads, renames and deletes.
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from examdesk.db.database import get_db

logger = structlog.get_logger(__name__)


@dataclass
class TestRecord:
    """Test record from database."""

    id: int
    name: str
    category_id: int | None
    created_at: str
    question_count: int = 0
    category_name: str | None = None


_SELECT = """
    SELECT t.*, c.name AS category_name, (
        SELECT COUNT(*) FROM test_questions tq WHERE tq.test_id = t.id
    ) AS question_count
    FROM tests t
    LEFT JOIN categories c ON c.id = t.category_id
"""


def get_test_by_id(test_id: int) -> TestRecord | None:
    """Get test by ID, or None if not found."""
    with get_db() as conn:
        row = conn.execute(_SELECT + " WHERE t.id = ?", (test_id,)).fetchone()

    if row is None:
        return None

    return _row_to_record(row)


def list_tests(category_id: int | None = None) -> list[TestRecord]:
    """List tests, newest first, optionally filtered by category."""
    with get_db() as conn:
        if category_id is None:
            rows = conn.execute(_SELECT + " ORDER BY t.id DESC").fetchall()
        else:
            rows = conn.execute(
                _SELECT + " WHERE t.category_id = ? ORDER BY t.id DESC",
                (category_id,),
            ).fetchall()

    return [_row_to_record(row) for row in rows]


def rename_test(test_id: int, name: str | None) -> TestRecord | None:
    """Rename a test; None keeps the current name.

    Returns:
        The updated TestRecord, or None if the test does not exist
    """
    with get_db() as conn:
        cursor = conn.execute(
            "UPDATE tests SET name = COALESCE(?, name) WHERE id = ?",
            (name, test_id),
        )
        if cursor.rowcount == 0:
            return None
        row = conn.execute(_SELECT + " WHERE t.id = ?", (test_id,)).fetchone()

    logger.debug("tests.renamed", test_id=test_id)
    return _row_to_record(row)


def delete_test(test_id: int) -> int:
    """Delete a test with its question links and results.

    Returns:
        Number of deleted test rows (0 if not found)
    """
    with get_db() as conn:
        conn.execute("DELETE FROM test_questions WHERE test_id = ?", (test_id,))
        conn.execute("DELETE FROM results WHERE test_id = ?", (test_id,))
        cursor = conn.execute("DELETE FROM tests WHERE id = ?", (test_id,))

    if cursor.rowcount:
        logger.debug("tests.deleted", test_id=test_id)

    return cursor.rowcount


def _row_to_record(row) -> TestRecord:
    """Convert database row to TestRecord."""
    return TestRecord(
        id=row["id"],
        name=row["name"],
        category_id=row["category_id"],
        created_at=row["created_at"],
        question_count=row["question_count"],
        category_name=row["category_name"],
    )
