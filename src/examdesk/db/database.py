"""The examdesk SQLite store.

One file holds users, the question catalogue, generated tests and graded
results. Every repository module opens its connections through get_db().
"""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Generator, Iterable

import structlog

from examdesk.core.errors import ConflictError

logger = structlog.get_logger(__name__)

# Used when neither the config file nor DB_PATH names a file
DEFAULT_DB_PATH = Path("db/examdesk.db")

# Set by init_db at startup; tests point it at a temporary file
_db_path: Path | None = None


def init_db(db_path: Path | None = None) -> None:
    """Select the examdesk database file and make sure its tables exist.

    Safe to call on every start: tables and indexes that are already there
    are left alone, and existing rows are kept.

    Args:
        db_path: Database file to use from now on. Defaults to db/examdesk.db
    """
    global _db_path
    _db_path = Path(db_path) if db_path else DEFAULT_DB_PATH

    _db_path.parent.mkdir(parents=True, exist_ok=True)

    with get_db() as conn:
        _create_schema(conn)

    logger.info("database.initialized", path=str(_db_path))


def get_db_path() -> Path:
    """Return the path of the active database file."""
    return _db_path or DEFAULT_DB_PATH


@contextmanager
def get_db() -> Generator[sqlite3.Connection, None, None]:
    """Open a connection to the examdesk database for one unit of work.

    Foreign keys are enforced so deleting a test drops its results and
    question links. The block is committed when it finishes and rolled
    back if it raises.

    Yields:
        Connection whose rows are sqlite3.Row
    """
    db_path = get_db_path()
    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")

    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def build_update(
    table: str,
    key_column: str,
    key: int,
    values: dict[str, Any],
    columns: Iterable[str],
) -> tuple[str, tuple[Any, ...]]:
    """Build a partial UPDATE statement using COALESCE.

    Every listed column is written as ``col = COALESCE(?, col)`` so that
    a None value keeps the stored one.

    Args:
        table: Table name
        key_column: Primary key column
        key: Primary key value
        values: Candidate new values (missing keys count as None)
        columns: Updatable columns, in statement order

    Returns:
        (sql, params) tuple ready for ``conn.execute``
    """
    columns = list(columns)
    assignments = ", ".join(f"{col} = COALESCE(?, {col})" for col in columns)
    params = tuple(values.get(col) for col in columns) + (key,)
    sql = f"UPDATE {table} SET {assignments} WHERE {key_column} = ?"
    return sql, params


@contextmanager
def translate_integrity_errors(entity: str) -> Generator[None, None, None]:
    """Turn UNIQUE violations into ConflictError; re-raise everything else."""
    try:
        yield
    except sqlite3.IntegrityError as e:
        if "UNIQUE" in str(e):
            raise ConflictError(f"{entity} already exists") from e
        raise


def _create_schema(conn: sqlite3.Connection) -> None:
    """Create the examdesk tables and indexes that are missing.

    Emails compare case-insensitively, matching how login looks them up.
    """
    conn.executescript(
        """
        CREATE TABLE IF NOT EXISTS users (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            surname TEXT NOT NULL,
            email TEXT NOT NULL UNIQUE COLLATE NOCASE,
            password TEXT NOT NULL DEFAULT '',
            account_type TEXT NOT NULL DEFAULT 'student'
                CHECK(account_type IN ('student', 'teacher', 'admin')),
            student_number TEXT,
            joined_at TEXT NOT NULL DEFAULT (date('now')),
            comment TEXT NOT NULL DEFAULT ''
        );

        CREATE TABLE IF NOT EXISTS categories (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            description TEXT NOT NULL DEFAULT ''
        );

        CREATE TABLE IF NOT EXISTS subjects (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            description TEXT NOT NULL DEFAULT '',
            teacher_id INTEGER REFERENCES users(id) ON DELETE SET NULL
        );

        CREATE TABLE IF NOT EXISTS question_banks (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            description TEXT NOT NULL DEFAULT '',
            subject_id INTEGER REFERENCES subjects(id) ON DELETE SET NULL
        );

        CREATE TABLE IF NOT EXISTS questions (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            bank_id INTEGER REFERENCES question_banks(id) ON DELETE SET NULL,
            category_id INTEGER REFERENCES categories(id) ON DELETE SET NULL,
            content TEXT NOT NULL,
            option_a TEXT NOT NULL DEFAULT '',
            option_b TEXT NOT NULL DEFAULT '',
            option_c TEXT NOT NULL DEFAULT '',
            option_d TEXT NOT NULL DEFAULT '',
            correct_option TEXT NOT NULL CHECK(correct_option IN ('a', 'b', 'c', 'd')),
            points INTEGER NOT NULL DEFAULT 1
        );

        CREATE TABLE IF NOT EXISTS tests (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            category_id INTEGER REFERENCES categories(id) ON DELETE SET NULL,
            created_at TEXT NOT NULL DEFAULT (datetime('now'))
        );

        CREATE TABLE IF NOT EXISTS test_questions (
            test_id INTEGER NOT NULL REFERENCES tests(id) ON DELETE CASCADE,
            question_id INTEGER NOT NULL REFERENCES questions(id) ON DELETE CASCADE,
            position INTEGER NOT NULL,
            PRIMARY KEY (test_id, question_id)
        );

        CREATE TABLE IF NOT EXISTS results (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            student_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            test_id INTEGER NOT NULL REFERENCES tests(id) ON DELETE CASCADE,
            points REAL NOT NULL,
            max_points REAL NOT NULL,
            percentage REAL NOT NULL,
            grade INTEGER NOT NULL CHECK(grade BETWEEN 1 AND 6),
            taken_at TEXT NOT NULL DEFAULT (datetime('now'))
        );

        -- Indexes
        CREATE INDEX IF NOT EXISTS idx_questions_category ON questions(category_id);
        CREATE INDEX IF NOT EXISTS idx_questions_bank ON questions(bank_id);
        CREATE INDEX IF NOT EXISTS idx_results_student ON results(student_id);
        CREATE INDEX IF NOT EXISTS idx_results_test ON results(test_id);
        """
    )
