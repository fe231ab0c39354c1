"""Tests for the /api/tests endpoints."""

from api_helpers import create_question


class TestGenerate:
    """Tests for POST /api/tests/generate."""

    def test_generate(self, client, api_category, api_questions):
        response = client.post(
            "/api/tests/generate",
            json={"category_id": api_category["id"], "question_count": 3},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["name"] == "Test: Math"
        assert data["category_name"] == "Math"
        assert data["question_count"] == 3
        assert len(set(data["question_ids"])) == 3
        assert set(data["question_ids"]) <= {q["id"] for q in api_questions}

    def test_default_question_count_from_config(self, client, api_category):
        """Without question_count the configured default (10) is used."""
        for n in range(10):
            create_question(client, api_category["id"], content=f"Q{n}")

        response = client.post("/api/tests/generate", json={"category_id": api_category["id"]})

        assert response.status_code == 201
        assert response.json()["question_count"] == 10

    def test_not_enough_questions(self, client, api_category, api_questions):
        response = client.post(
            "/api/tests/generate",
            json={"category_id": api_category["id"], "question_count": 5},
        )

        assert response.status_code == 400
        assert client.get("/api/tests").json()["count"] == 0

    def test_unknown_category(self, client):
        response = client.post(
            "/api/tests/generate", json={"category_id": 999, "question_count": 1}
        )

        assert response.status_code == 404
        assert response.json() == {"error": "Category 999 not found"}


class TestReadTests:
    """Tests for listing tests and their questions."""

    def test_list_and_get(self, client, api_test, api_category):
        listed = client.get("/api/tests", params={"category_id": api_category["id"]}).json()

        assert listed["count"] == 1
        assert client.get(f"/api/tests/{api_test['id']}").json()["name"] == "Quiz"

    def test_questions_hide_correct_option(self, client, api_test):
        questions = client.get(f"/api/tests/{api_test['id']}/questions").json()

        assert [q["id"] for q in questions] == api_test["question_ids"]
        assert all("correct_option" not in q for q in questions)

    def test_missing(self, client):
        assert client.get("/api/tests/999").status_code == 404
        assert client.get("/api/tests/999/questions").status_code == 404


class TestSubmit:
    """Tests for POST /api/tests/{id}/submit."""

    def test_scores_and_stores_result(self, client, api_test, api_student):
        ids = api_test["question_ids"]
        answers = {str(ids[0]): "b", str(ids[1]): "B", str(ids[2]): 1, str(ids[3]): "a"}

        response = client.post(
            f"/api/tests/{api_test['id']}/submit",
            json={"student_id": api_student["id"], "answers": answers},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["points"] == 3
        assert data["max_points"] == 4
        assert data["percentage"] == 75.0
        assert data["grade"] == 4
        assert data["grade_label"] == "dobry"
        assert data["correct_question_ids"] == ids[:3]

        stored = client.get(f"/api/results/{data['id']}").json()
        assert stored["test_name"] == "Quiz"

    def test_unknown_student(self, client, api_test):
        response = client.post(
            f"/api/tests/{api_test['id']}/submit", json={"student_id": 999, "answers": {}}
        )

        assert response.status_code == 400

    def test_teacher_cannot_submit(self, client, api_test, api_teacher):
        response = client.post(
            f"/api/tests/{api_test['id']}/submit",
            json={"student_id": api_teacher["id"], "answers": {}},
        )

        assert response.status_code == 400
        assert response.json() == {"error": f"User {api_teacher['id']} is not a student"}
        assert client.get("/api/results").json()["count"] == 0

    def test_unknown_test(self, client, api_student):
        response = client.post(
            "/api/tests/999/submit", json={"student_id": api_student["id"], "answers": {}}
        )

        assert response.status_code == 404


class TestUpdateDeleteTest:
    """Tests for renaming and deleting tests."""

    def test_rename(self, client, api_test):
        response = client.put(f"/api/tests/{api_test['id']}", json={"name": "Final"})

        assert response.json()["name"] == "Final"
        assert response.json()["question_count"] == 4

    def test_delete_cascades(self, client, api_test, api_student):
        result = client.post(
            f"/api/tests/{api_test['id']}/submit",
            json={"student_id": api_student["id"], "answers": {}},
        ).json()

        response = client.delete(f"/api/tests/{api_test['id']}")

        assert response.json() == {"ok": True, "changes": 1}
        assert client.get(f"/api/results/{result['id']}").status_code == 404
        assert client.delete(f"/api/tests/{api_test['id']}").status_code == 404
