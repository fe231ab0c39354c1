"""Tests for the /api/results endpoints."""

import pytest


@pytest.fixture
def api_result(client, api_test, api_student) -> dict:
    response = client.post(
        "/api/results",
        json={
            "student_id": api_student["id"],
            "test_id": api_test["id"],
            "points": 17,
            "max_points": 20,
            "taken_at": "2024-05-10 08:00:00",
        },
    )
    assert response.status_code == 201, response.text
    return response.json()


class TestCreateResult:
    """Tests for POST /api/results."""

    def test_grade_is_computed(self, api_result):
        assert api_result["percentage"] == 85.0
        assert api_result["grade"] == 5
        assert api_result["grade_label"] == "bardzo dobry"
        assert api_result["student_name"] == "Jan Kowalski"

    def test_points_above_max(self, client, api_test, api_student):
        response = client.post(
            "/api/results",
            json={
                "student_id": api_student["id"],
                "test_id": api_test["id"],
                "points": 21,
                "max_points": 20,
            },
        )

        assert response.status_code == 400

    @pytest.mark.parametrize(
        "points,max_points", [("NaN", 10), ("Infinity", 10), (5, "NaN"), (5, "-Infinity")]
    )
    def test_non_finite_numbers_rejected(
        self, client, api_test, api_student, points, max_points
    ):
        response = client.post(
            "/api/results",
            json={
                "student_id": api_student["id"],
                "test_id": api_test["id"],
                "points": points,
                "max_points": max_points,
            },
        )

        assert response.status_code == 400
        assert client.get("/api/results").json()["count"] == 0

    def test_teacher_cannot_receive_result(self, client, api_test, api_teacher):
        response = client.post(
            "/api/results",
            json={
                "student_id": api_teacher["id"],
                "test_id": api_test["id"],
                "points": 1,
                "max_points": 2,
            },
        )

        assert response.status_code == 400
        assert "not a student" in response.json()["error"]

    def test_unknown_test(self, client, api_student):
        response = client.post(
            "/api/results",
            json={"student_id": api_student["id"], "test_id": 999, "points": 1, "max_points": 2},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Test 999 does not exist"}


class TestReadResults:
    """Tests for listing results."""

    def test_student_results_newest_first(self, client, api_result, api_test, api_student):
        newer = client.post(
            "/api/results",
            json={
                "student_id": api_student["id"],
                "test_id": api_test["id"],
                "points": 2,
                "max_points": 20,
                "taken_at": "2024-06-01 08:00:00",
            },
        ).json()

        data = client.get(f"/api/results/student/{api_student['id']}").json()

        assert data["count"] == 2
        assert [r["id"] for r in data["results"]] == [newer["id"], api_result["id"]]
        assert data["results"][0]["grade"] == 1

    def test_filter_by_test(self, client, api_result, api_test):
        data = client.get("/api/results", params={"test_id": api_test["id"]}).json()
        other = client.get("/api/results", params={"test_id": 999}).json()

        assert data["count"] == 1
        assert other["count"] == 0

    def test_get_missing(self, client):
        assert client.get("/api/results/999").status_code == 404


class TestUpdateDeleteResult:
    """Tests for PUT and DELETE /api/results/{id}."""

    def test_update_points_regrades(self, client, api_result):
        response = client.put(f"/api/results/{api_result['id']}", json={"points": 10})

        data = response.json()
        assert data["points"] == 10
        assert data["max_points"] == 20
        assert data["percentage"] == 50.0
        assert data["grade"] == 3

    def test_update_date_keeps_grade(self, client, api_result):
        response = client.put(
            f"/api/results/{api_result['id']}", json={"taken_at": "2024-05-11 08:00:00"}
        )

        data = response.json()
        assert data["taken_at"] == "2024-05-11 08:00:00"
        assert data["grade"] == api_result["grade"]

    def test_update_missing(self, client):
        assert client.put("/api/results/999", json={"points": 1}).status_code == 404

    def test_delete(self, client, api_result):
        assert client.delete(f"/api/results/{api_result['id']}").json()["changes"] == 1
        assert client.delete(f"/api/results/{api_result['id']}").status_code == 404
