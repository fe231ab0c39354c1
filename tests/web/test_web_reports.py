"""Tests for the /api/reports endpoints."""

import inspect

import pytest

from examdesk.config.app_config import ReportsConfig
from examdesk.core.errors import ReportServiceError


@pytest.fixture
def api_result(client, api_test, api_student) -> dict:
    return client.post(
        f"/api/tests/{api_test['id']}/submit",
        json={"student_id": api_student["id"], "answers": {}},
    ).json()


class TestLocalReports:
    """Reports rendered in-process."""

    def test_result_report(self, client, api_result):
        response = client.get(f"/api/reports/results/{api_result['id']}")

        assert response.status_code == 200
        assert response.headers["content-type"] == "application/pdf"
        assert response.headers["content-disposition"] == (
            f'attachment; filename="result_{api_result["id"]}.pdf"'
        )
        assert response.content.startswith(b"%PDF")

    def test_student_report(self, client, api_result, api_student):
        response = client.get(f"/api/reports/students/{api_student['id']}")

        assert response.status_code == 200
        assert f"student_{api_student['id']}_results.pdf" in response.headers[
            "content-disposition"
        ]

    def test_test_sheet(self, client, api_test):
        response = client.get(f"/api/reports/tests/{api_test['id']}")

        assert response.status_code == 200
        assert response.content.startswith(b"%PDF")

    @pytest.mark.parametrize("kind", ["results", "students", "tests"])
    def test_missing(self, client, kind):
        response = client.get(f"/api/reports/{kind}/999")

        assert response.status_code == 404
        assert "not found" in response.json()["error"]


class TestRemoteReports:
    """Reports delegated to the report service."""

    @pytest.fixture
    def remote(self, client):
        client.app.state.config.reports = ReportsConfig(
            mode="remote", service_url="http://reports.test", timeout=0.5
        )
        return client

    def test_proxied_pdf(self, remote, api_result, monkeypatch):
        monkeypatch.setattr(
            "examdesk.core.reports.render_remote",
            lambda payload, filename, config: b"%PDF-from-service",
        )

        response = remote.get(f"/api/reports/results/{api_result['id']}")

        assert response.status_code == 200
        assert response.content == b"%PDF-from-service"

    @pytest.mark.parametrize(
        "error,status_code",
        [
            (ReportServiceError("Report service timed out after 0.5s", timed_out=True), 504),
            (ReportServiceError("Report service returned HTTP 500"), 502),
        ],
    )
    def test_service_failures(self, remote, api_result, monkeypatch, error, status_code):
        def failing(payload, filename, config):
            raise error

        monkeypatch.setattr("examdesk.core.reports.render_remote", failing)

        response = remote.get(f"/api/reports/results/{api_result['id']}")

        assert response.status_code == status_code
        assert response.json() == {"error": str(error)}


class TestReportHandlers:
    """Rendering blocks, so report routes must not run on the event loop."""

    def test_handlers_are_synchronous(self, client):
        handlers = [
            route.endpoint
            for route in client.app.routes
            if getattr(route, "path", "").startswith("/api/reports/")
        ]

        assert len(handlers) == 3
        assert not any(inspect.iscoroutinefunction(h) for h in handlers)
