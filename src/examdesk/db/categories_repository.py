"""Repository functions for the categories table."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import structlog

from examdesk.db.database import build_update, get_db

logger = structlog.get_logger(__name__)


@dataclass
class CategoryRecord:
    """Category record from database."""

    id: int
    name: str
    description: str
    question_count: int = 0


_SELECT = """
    SELECT c.*, (
        SELECT COUNT(*) FROM questions q WHERE q.category_id = c.id
    ) AS question_count
    FROM categories c
"""


def insert_category(name: str, description: str = "") -> CategoryRecord:
    """Insert a new category and return it."""
    with get_db() as conn:
        cursor = conn.execute(
            "INSERT INTO categories (name, description) VALUES (?, ?)",
            (name, description),
        )
        row = conn.execute(_SELECT + " WHERE c.id = ?", (cursor.lastrowid,)).fetchone()

    logger.debug("categories.inserted", category_id=row["id"])
    return _row_to_record(row)


def get_category_by_id(category_id: int) -> CategoryRecord | None:
    """Get category by ID, or None if not found."""
    with get_db() as conn:
        row = conn.execute(_SELECT + " WHERE c.id = ?", (category_id,)).fetchone()

    if row is None:
        return None

    return _row_to_record(row)


def list_categories() -> list[CategoryRecord]:
    """List all categories ordered by name."""
    with get_db() as conn:
        rows = conn.execute(_SELECT + " ORDER BY c.name COLLATE NOCASE").fetchall()

    return [_row_to_record(row) for row in rows]


def update_category(category_id: int, **values: Any) -> CategoryRecord | None:
    """Partially update a category; returns None if it does not exist."""
    sql, params = build_update(
        "categories", "id", category_id, values, ("name", "description")
    )

    with get_db() as conn:
        cursor = conn.execute(sql, params)
        if cursor.rowcount == 0:
            return None
        row = conn.execute(_SELECT + " WHERE c.id = ?", (category_id,)).fetchone()

    logger.debug("categories.updated", category_id=category_id)
    return _row_to_record(row)


def delete_category(category_id: int) -> int:
    """Delete category by ID; returns the number of deleted rows."""
    with get_db() as conn:
        cursor = conn.execute("DELETE FROM categories WHERE id = ?", (category_id,))

    if cursor.rowcount:
        logger.debug("categories.deleted", category_id=category_id)

    return cursor.rowcount


def _row_to_record(row) -> CategoryRecord:
    """Convert database row to CategoryRecord."""
    return CategoryRecord(
        id=row["id"],
        name=row["name"],
        description=row["description"] or "",
        question_count=row["question_count"],
    )
