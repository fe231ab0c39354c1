"""Repository functions for the subjects table.

A subject is taught by a user whose account_type is 'teacher'. The teacher
check lives in the web layer; this module only stores rows.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import structlog

from examdesk.db.database import build_update, get_db

logger = structlog.get_logger(__name__)


@dataclass
class SubjectRecord:
    """Subject record from database, with the teacher's display name."""

    id: int
    name: str
    description: str
    teacher_id: int | None
    teacher_name: str | None = None


_SELECT = """
    SELECT s.*, TRIM(u.name || ' ' || u.surname) AS teacher_name
    FROM subjects s
    LEFT JOIN users u ON u.id = s.teacher_id
"""


def insert_subject(
    name: str,
    description: str = "",
    teacher_id: int | None = None,
) -> SubjectRecord:
    """Insert a new subject and return it."""
    with get_db() as conn:
        cursor = conn.execute(
            "INSERT INTO subjects (name, description, teacher_id) VALUES (?, ?, ?)",
            (name, description, teacher_id),
        )
        row = conn.execute(_SELECT + " WHERE s.id = ?", (cursor.lastrowid,)).fetchone()

    logger.debug("subjects.inserted", subject_id=row["id"], teacher_id=teacher_id)
    return _row_to_record(row)


def get_subject_by_id(subject_id: int) -> SubjectRecord | None:
    """Get subject by ID, or None if not found."""
    with get_db() as conn:
        row = conn.execute(_SELECT + " WHERE s.id = ?", (subject_id,)).fetchone()

    if row is None:
        return None

    return _row_to_record(row)


def list_subjects(teacher_id: int | None = None) -> list[SubjectRecord]:
    """List subjects, optionally only those of one teacher."""
    with get_db() as conn:
        if teacher_id is None:
            rows = conn.execute(_SELECT + " ORDER BY s.name COLLATE NOCASE").fetchall()
        else:
            rows = conn.execute(
                _SELECT + " WHERE s.teacher_id = ? ORDER BY s.name COLLATE NOCASE",
                (teacher_id,),
            ).fetchall()

    return [_row_to_record(row) for row in rows]


def update_subject(subject_id: int, **values: Any) -> SubjectRecord | None:
    """Partially update a subject; returns None if it does not exist."""
    sql, params = build_update(
        "subjects", "id", subject_id, values, ("name", "description", "teacher_id")
    )

    with get_db() as conn:
        cursor = conn.execute(sql, params)
        if cursor.rowcount == 0:
            return None
        row = conn.execute(_SELECT + " WHERE s.id = ?", (subject_id,)).fetchone()

    logger.debug("subjects.updated", subject_id=subject_id)
    return _row_to_record(row)


def delete_subject(subject_id: int) -> int:
    """Delete subject by ID; returns the number of deleted rows."""
    with get_db() as conn:
        cursor = conn.execute("DELETE FROM subjects WHERE id = ?", (subject_id,))

    if cursor.rowcount:
        logger.debug("subjects.deleted", subject_id=subject_id)

    return cursor.rowcount


def _row_to_record(row) -> SubjectRecord:
    """Convert database row to SubjectRecord."""
    return SubjectRecord(
        id=row["id"],
        name=row["name"],
        description=row["description"] or "",
        teacher_id=row["teacher_id"],
        teacher_name=row["teacher_name"],
    )
