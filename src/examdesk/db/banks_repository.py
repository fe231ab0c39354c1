"""Repository functions for the question_banks table."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import structlog

from examdesk.db.database import build_update, get_db

logger = structlog.get_logger(__name__)


@dataclass
class BankRecord:
    """Question bank record from database."""

    id: int
    name: str
    description: str
    subject_id: int | None
    question_count: int = 0


_SELECT = """
    SELECT b.*, (
        SELECT COUNT(*) FROM questions q WHERE q.bank_id = b.id
    ) AS question_count
    FROM question_banks b
"""


def insert_bank(
    name: str,
    description: str = "",
    subject_id: int | None = None,
) -> BankRecord:
    """Insert a new question bank and return it."""
    with get_db() as conn:
        cursor = conn.execute(
            "INSERT INTO question_banks (name, description, subject_id) VALUES (?, ?, ?)",
            (name, description, subject_id),
        )
        row = conn.execute(_SELECT + " WHERE b.id = ?", (cursor.lastrowid,)).fetchone()

    logger.debug("banks.inserted", bank_id=row["id"])
    return _row_to_record(row)


def get_bank_by_id(bank_id: int) -> BankRecord | None:
    """Get question bank by ID, or None if not found."""
    with get_db() as conn:
        row = conn.execute(_SELECT + " WHERE b.id = ?", (bank_id,)).fetchone()

    if row is None:
        return None

    return _row_to_record(row)


def list_banks(subject_id: int | None = None) -> list[BankRecord]:
    """List question banks, optionally filtered by subject."""
    with get_db() as conn:
        if subject_id is None:
            rows = conn.execute(_SELECT + " ORDER BY b.id DESC").fetchall()
        else:
            rows = conn.execute(
                _SELECT + " WHERE b.subject_id = ? ORDER BY b.id DESC",
                (subject_id,),
            ).fetchall()

    return [_row_to_record(row) for row in rows]


def update_bank(bank_id: int, **values: Any) -> BankRecord | None:
    """Partially update a question bank; returns None if it does not exist."""
    sql, params = build_update(
        "question_banks", "id", bank_id, values, ("name", "description", "subject_id")
    )

    with get_db() as conn:
        cursor = conn.execute(sql, params)
        if cursor.rowcount == 0:
            return None
        row = conn.execute(_SELECT + " WHERE b.id = ?", (bank_id,)).fetchone()

    logger.debug("banks.updated", bank_id=bank_id)
    return _row_to_record(row)


def delete_bank(bank_id: int) -> int:
    """Delete question bank by ID; returns the number of deleted rows.

    Questions of the bank are kept with bank_id set to NULL.
    """
    with get_db() as conn:
        cursor = conn.execute("DELETE FROM question_banks WHERE id = ?", (bank_id,))

    if cursor.rowcount:
        logger.debug("banks.deleted", bank_id=bank_id)

    return cursor.rowcount


def _row_to_record(row) -> BankRecord:
    """Convert database row to BankRecord."""
    return BankRecord(
        id=row["id"],
        name=row["name"],
        description=row["description"] or "",
        subject_id=row["subject_id"],
        question_count=row["question_count"],
    )
