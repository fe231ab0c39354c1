"""Tests for POST /api/login."""


class TestLogin:
    """Tests for the login endpoint."""

    def test_success(self, client, api_teacher):
        response = client.post(
            "/api/login", json={"email": "teacher@example.com", "password": "chalk"}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["ok"] is True
        assert data["user"]["id"] == api_teacher["id"]
        assert data["user"]["account_type"] == "teacher"
        assert "password" not in data["user"]

    def test_wrong_password(self, client, api_teacher):
        response = client.post(
            "/api/login", json={"email": "teacher@example.com", "password": "nope"}
        )

        assert response.status_code == 401
        assert response.json() == {"error": "Invalid email or password"}

    def test_unknown_email(self, client):
        response = client.post("/api/login", json={"email": "x@example.com", "password": "p"})

        assert response.status_code == 401

    def test_user_without_password_cannot_log_in(self, client):
        client.post(
            "/api/users", json={"name": "No", "surname": "Pass", "email": "np@example.com"}
        )

        response = client.post("/api/login", json={"email": "np@example.com", "password": ""})

        assert response.status_code == 401

    def test_missing_password_field(self, client):
        response = client.post("/api/login", json={"email": "x@example.com"})

        assert response.status_code == 400
