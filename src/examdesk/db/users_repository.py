"""Repository functions for the users table.

Provides CRUD operations for users plus the name search used by the
student lists.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import structlog

from examdesk.db.database import build_update, get_db, translate_integrity_errors

logger = structlog.get_logger(__name__)

ACCOUNT_TYPES = ("student", "teacher", "admin")

_UPDATABLE = (
    "name",
    "surname",
    "email",
    "password",
    "account_type",
    "student_number",
    "joined_at",
    "comment",
)


@dataclass
class UserRecord:
    """User record from database."""

    id: int
    name: str
    surname: str
    email: str
    password: str
    account_type: str
    student_number: str | None
    joined_at: str
    comment: str

    @property
    def full_name(self) -> str:
        """Name and surname joined for display."""
        return f"{self.name} {self.surname}".strip()


def insert_user(
    name: str,
    surname: str,
    email: str,
    password: str = "",
    account_type: str = "student",
    student_number: str | None = None,
    joined_at: str | None = None,
    comment: str = "",
) -> UserRecord:
    """Insert a new user.

    Args:
        name: First name
        surname: Last name
        email: Unique email address
        password: Login password
        account_type: 'student', 'teacher' or 'admin'
        student_number: Index number (students only)
        joined_at: Join date; defaults to today
        comment: Free-text note

    Returns:
        The stored UserRecord

    Raises:
        ConflictError: If the email is already registered
    """
    with translate_integrity_errors("User with this email"), get_db() as conn:
        cursor = conn.execute(
            """
            INSERT INTO users (
                name, surname, email, password, account_type,
                student_number, joined_at, comment
            ) VALUES (?, ?, ?, ?, ?, ?, COALESCE(?, date('now')), ?)
            """,
            (
                name,
                surname,
                email,
                password,
                account_type,
                student_number,
                joined_at,
                comment,
            ),
        )
        user_id = cursor.lastrowid
        row = conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()

    logger.debug("users.inserted", user_id=user_id, account_type=account_type)
    return _row_to_record(row)


def get_user_by_id(user_id: int) -> UserRecord | None:
    """Get user by ID, or None if not found."""
    with get_db() as conn:
        row = conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()

    if row is None:
        return None

    return _row_to_record(row)


def get_user_by_email(email: str) -> UserRecord | None:
    """Get user by email (case-insensitive), or None if not found."""
    with get_db() as conn:
        row = conn.execute(
            "SELECT * FROM users WHERE lower(email) = lower(?)", (email,)
        ).fetchone()

    if row is None:
        return None

    return _row_to_record(row)


def list_users(
    account_type: str | None = None,
    query: str | None = None,
) -> list[UserRecord]:
    """List users, newest first.

    Args:
        account_type: Only users of this type
        query: Substring matched against name or surname

    Returns:
        List of UserRecord instances
    """
    sql = "SELECT * FROM users"
    clauses: list[str] = []
    params: list[Any] = []

    if account_type:
        clauses.append("account_type = ?")
        params.append(account_type)
    if query:
        clauses.append("(name LIKE ? OR surname LIKE ?)")
        params.extend([f"%{query}%", f"%{query}%"])

    if clauses:
        sql += " WHERE " + " AND ".join(clauses)
    sql += " ORDER BY id DESC"

    with get_db() as conn:
        rows = conn.execute(sql, params).fetchall()

    return [_row_to_record(row) for row in rows]


def update_user(user_id: int, **values: Any) -> UserRecord | None:
    """Partially update a user; None values keep the stored ones.

    Returns:
        The updated UserRecord, or None if the user does not exist

    Raises:
        ConflictError: If the new email is taken by another user
    """
    sql, params = build_update("users", "id", user_id, values, _UPDATABLE)

    with translate_integrity_errors("User with this email"), get_db() as conn:
        cursor = conn.execute(sql, params)
        if cursor.rowcount == 0:
            return None
        row = conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()

    logger.debug("users.updated", user_id=user_id)
    return _row_to_record(row)


def delete_user(user_id: int) -> int:
    """Delete user by ID.

    Returns:
        Number of deleted rows (0 if not found)
    """
    with get_db() as conn:
        cursor = conn.execute("DELETE FROM users WHERE id = ?", (user_id,))

    if cursor.rowcount:
        logger.debug("users.deleted", user_id=user_id)

    return cursor.rowcount


def _row_to_record(row) -> UserRecord:
    """Convert database row to UserRecord."""
    return UserRecord(
        id=row["id"],
        name=row["name"],
        surname=row["surname"],
        email=row["email"],
        password=row["password"],
        account_type=row["account_type"],
        student_number=row["student_number"],
        joined_at=row["joined_at"],
        comment=row["comment"] or "",
    )
