"""Repository functions for the questions table.

Questions are single-choice with four options (a-d). Each question belongs
to a bank, a category, or both.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import structlog

from examdesk.db.database import build_update, get_db

logger = structlog.get_logger(__name__)

OPTION_KEYS = ("a", "b", "c", "d")

_UPDATABLE = (
    "bank_id",
    "category_id",
    "content",
    "option_a",
    "option_b",
    "option_c",
    "option_d",
    "correct_option",
    "points",
)


@dataclass
class QuestionRecord:
    """Question record from database."""

    id: int
    bank_id: int | None
    category_id: int | None
    content: str
    option_a: str
    option_b: str
    option_c: str
    option_d: str
    correct_option: str
    points: int

    @property
    def options(self) -> dict[str, str]:
        """Options keyed by letter."""
        return {
            "a": self.option_a,
            "b": self.option_b,
            "c": self.option_c,
            "d": self.option_d,
        }


def insert_question(
    content: str,
    correct_option: str,
    option_a: str = "",
    option_b: str = "",
    option_c: str = "",
    option_d: str = "",
    points: int = 1,
    bank_id: int | None = None,
    category_id: int | None = None,
) -> QuestionRecord:
    """Insert a new question and return it."""
    with get_db() as conn:
        cursor = conn.execute(
            """
            INSERT INTO questions (
                bank_id, category_id, content,
                option_a, option_b, option_c, option_d,
                correct_option, points
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                bank_id,
                category_id,
                content,
                option_a,
                option_b,
                option_c,
                option_d,
                correct_option,
                points,
            ),
        )
        row = conn.execute(
            "SELECT * FROM questions WHERE id = ?", (cursor.lastrowid,)
        ).fetchone()

    logger.debug("questions.inserted", question_id=row["id"], category_id=category_id)
    return _row_to_record(row)


def get_question_by_id(question_id: int) -> QuestionRecord | None:
    """Get question by ID, or None if not found."""
    with get_db() as conn:
        row = conn.execute(
            "SELECT * FROM questions WHERE id = ?", (question_id,)
        ).fetchone()

    if row is None:
        return None

    return _row_to_record(row)


def list_questions(
    category_id: int | None = None,
    bank_id: int | None = None,
) -> list[QuestionRecord]:
    """List questions, optionally filtered by category and/or bank."""
    sql = "SELECT * FROM questions"
    clauses: list[str] = []
    params: list[Any] = []

    if category_id is not None:
        clauses.append("category_id = ?")
        params.append(category_id)
    if bank_id is not None:
        clauses.append("bank_id = ?")
        params.append(bank_id)

    if clauses:
        sql += " WHERE " + " AND ".join(clauses)
    sql += " ORDER BY id"

    with get_db() as conn:
        rows = conn.execute(sql, params).fetchall()

    return [_row_to_record(row) for row in rows]


def list_questions_for_test(test_id: int) -> list[QuestionRecord]:
    """List the questions of a test in position order."""
    with get_db() as conn:
        rows = conn.execute(
            """
            SELECT q.* FROM test_questions tq
            JOIN questions q ON q.id = tq.question_id
            WHERE tq.test_id = ?
            ORDER BY tq.position
            """,
            (test_id,),
        ).fetchall()

    return [_row_to_record(row) for row in rows]


def update_question(question_id: int, **values: Any) -> QuestionRecord | None:
    """Partially update a question; returns None if it does not exist."""
    sql, params = build_update("questions", "id", question_id, values, _UPDATABLE)

    with get_db() as conn:
        cursor = conn.execute(sql, params)
        if cursor.rowcount == 0:
            return None
        row = conn.execute(
            "SELECT * FROM questions WHERE id = ?", (question_id,)
        ).fetchone()

    logger.debug("questions.updated", question_id=question_id)
    return _row_to_record(row)


def delete_question(question_id: int) -> int:
    """Delete question by ID; returns the number of deleted rows."""
    with get_db() as conn:
        cursor = conn.execute("DELETE FROM questions WHERE id = ?", (question_id,))

    if cursor.rowcount:
        logger.debug("questions.deleted", question_id=question_id)

    return cursor.rowcount


def _row_to_record(row) -> QuestionRecord:
    """Convert database row to QuestionRecord."""
    return QuestionRecord(
        id=row["id"],
        bank_id=row["bank_id"],
        category_id=row["category_id"],
        content=row["content"],
        option_a=row["option_a"],
        option_b=row["option_b"],
        option_c=row["option_c"],
        option_d=row["option_d"],
        correct_option=row["correct_option"],
        points=row["points"],
    )
