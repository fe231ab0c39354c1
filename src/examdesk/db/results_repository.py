"""Repository functions for the results table.

Stores graded attempts. Percentage and grade are computed by
examdesk.core.grading before they reach this module.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import structlog

from examdesk.db.database import build_update, get_db

logger = structlog.get_logger(__name__)


@dataclass
class ResultRecord:
    """Result record from database, joined with test and student names."""

    id: int
    student_id: int
    test_id: int
    points: float
    max_points: float
    percentage: float
    grade: int
    taken_at: str
    test_name: str | None = None
    student_name: str | None = None


_SELECT = """
    SELECT r.*, t.name AS test_name,
           TRIM(u.name || ' ' || u.surname) AS student_name
    FROM results r
    LEFT JOIN tests t ON t.id = r.test_id
    LEFT JOIN users u ON u.id = r.student_id
"""


def insert_result(
    student_id: int,
    test_id: int,
    points: float,
    max_points: float,
    percentage: float,
    grade: int,
    taken_at: str | None = None,
) -> ResultRecord:
    """Insert a graded result and return it."""
    with get_db() as conn:
        cursor = conn.execute(
            """
            INSERT INTO results (
                student_id, test_id, points, max_points, percentage, grade, taken_at
            ) VALUES (?, ?, ?, ?, ?, ?, COALESCE(?, datetime('now')))
            """,
            (student_id, test_id, points, max_points, percentage, grade, taken_at),
        )
        row = conn.execute(_SELECT + " WHERE r.id = ?", (cursor.lastrowid,)).fetchone()

    logger.debug(
        "results.inserted",
        result_id=row["id"],
        student_id=student_id,
        test_id=test_id,
        grade=grade,
    )
    return _row_to_record(row)


def get_result_by_id(result_id: int) -> ResultRecord | None:
    """Get result by ID, or None if not found."""
    with get_db() as conn:
        row = conn.execute(_SELECT + " WHERE r.id = ?", (result_id,)).fetchone()

    if row is None:
        return None

    return _row_to_record(row)


def list_results(
    student_id: int | None = None,
    test_id: int | None = None,
) -> list[ResultRecord]:
    """List results, newest first, optionally filtered by student and/or test."""
    sql = _SELECT
    clauses: list[str] = []
    params: list[Any] = []

    if student_id is not None:
        clauses.append("r.student_id = ?")
        params.append(student_id)
    if test_id is not None:
        clauses.append("r.test_id = ?")
        params.append(test_id)

    if clauses:
        sql += " WHERE " + " AND ".join(clauses)
    sql += " ORDER BY r.taken_at DESC, r.id DESC"

    with get_db() as conn:
        rows = conn.execute(sql, params).fetchall()

    return [_row_to_record(row) for row in rows]


def update_result(result_id: int, **values: Any) -> ResultRecord | None:
    """Partially update a result; returns None if it does not exist."""
    sql, params = build_update(
        "results",
        "id",
        result_id,
        values,
        ("points", "max_points", "percentage", "grade", "taken_at"),
    )

    with get_db() as conn:
        cursor = conn.execute(sql, params)
        if cursor.rowcount == 0:
            return None
        row = conn.execute(_SELECT + " WHERE r.id = ?", (result_id,)).fetchone()

    logger.debug("results.updated", result_id=result_id)
    return _row_to_record(row)


def delete_result(result_id: int) -> int:
    """Delete result by ID; returns the number of deleted rows."""
    with get_db() as conn:
        cursor = conn.execute("DELETE FROM results WHERE id = ?", (result_id,))

    if cursor.rowcount:
        logger.debug("results.deleted", result_id=result_id)

    return cursor.rowcount


def _row_to_record(row) -> ResultRecord:
    """Convert database row to ResultRecord."""
    return ResultRecord(
        id=row["id"],
        student_id=row["student_id"],
        test_id=row["test_id"],
        points=row["points"],
        max_points=row["max_points"],
        percentage=row["percentage"],
        grade=row["grade"],
        taken_at=row["taken_at"],
        test_name=row["test_name"],
        student_name=row["student_name"],
    )
