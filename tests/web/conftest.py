"""Fixtures for API tests.

Data is created through the API itself so the app's own database is used.
"""

import pytest

from api_helpers import create_question, create_user


@pytest.fixture
def api_student(client) -> dict:
    return create_user(client, "student@example.com", student_number="S42", password="pupil")


@pytest.fixture
def api_teacher(client) -> dict:
    return create_user(
        client, "teacher@example.com", "teacher", name="Anna", surname="Nowak", password="chalk"
    )


@pytest.fixture
def api_category(client) -> dict:
    response = client.post("/api/categories", json={"name": "Math"})
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def api_questions(client, api_category) -> list[dict]:
    """Four questions in api_category, all answered correctly with 'b'."""
    return [
        create_question(client, api_category["id"], content=f"Question {n}")
        for n in range(1, 5)
    ]


@pytest.fixture
def api_test(client, api_category, api_questions) -> dict:
    response = client.post(
        "/api/tests/generate",
        json={"category_id": api_category["id"], "question_count": 4, "name": "Quiz"},
    )
    assert response.status_code == 201, response.text
    return response.json()
