"""Shared fixtures.

Every test gets its own SQLite file under tmp_path; nothing touches the
working copy's db/ directory.
"""

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from examdesk.config.app_config import clear_config_cache, load_app_config
from examdesk.db.categories_repository import CategoryRecord, insert_category
from examdesk.db.database import init_db
from examdesk.db.questions_repository import QuestionRecord, insert_question
from examdesk.db.users_repository import UserRecord, insert_user


@pytest.fixture
def db_path(tmp_path) -> Path:
    """Initialize an isolated test database."""
    path = tmp_path / "db" / "examdesk.db"
    init_db(path)
    return path


@pytest.fixture
def isolated_env(tmp_path, monkeypatch):
    """Run with a clean working directory and no examdesk env overrides."""
    monkeypatch.chdir(tmp_path)
    for var in (
        "DB_PATH",
        "PORT",
        "CORS_ORIGINS",
        "REPORT_MODE",
        "REPORT_SERVICE_URL",
        "REPORT_TIMEOUT",
    ):
        monkeypatch.delenv(var, raising=False)
    clear_config_cache()
    yield tmp_path
    clear_config_cache()


@pytest.fixture
def make_client(isolated_env, monkeypatch):
    """Build test clients for apps configured from extra env variables."""
    from examdesk.web.api import create_app

    opened = []

    def factory(raise_server_exceptions: bool = True, **env: str) -> TestClient:
        monkeypatch.setenv("DB_PATH", str(isolated_env / "db" / "api.db"))
        for name, value in env.items():
            monkeypatch.setenv(name, value)
        app = create_app(load_app_config(force_reload=True))
        test_client = TestClient(app, raise_server_exceptions=raise_server_exceptions)
        test_client.__enter__()
        opened.append(test_client)
        return test_client

    yield factory

    for test_client in opened:
        test_client.__exit__(None, None, None)


@pytest.fixture
def client(make_client):
    """Test client backed by a fresh database."""
    return make_client()


@pytest.fixture
def student(db_path) -> UserRecord:
    return insert_user(
        name="Jan",
        surname="Kowalski",
        email="jan@example.com",
        account_type="student",
        student_number="S1001",
    )


@pytest.fixture
def teacher(db_path) -> UserRecord:
    return insert_user(
        name="Anna",
        surname="Nowak",
        email="anna@example.com",
        account_type="teacher",
    )


@pytest.fixture
def category(db_path) -> CategoryRecord:
    return insert_category("Math", "Arithmetic basics")


@pytest.fixture
def questions(category) -> list[QuestionRecord]:
    """Five questions in the category; the correct option is always 'b'."""
    return [
        insert_question(
            content=f"{n} + {n} = ?",
            option_a=str(n),
            option_b=str(n * 2),
            option_c=str(n * 3),
            option_d=str(n * 4),
            correct_option="b",
            points=1,
            category_id=category.id,
        )
        for n in range(1, 6)
    ]
