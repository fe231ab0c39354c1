"""Tests for report data collection and in-process PDF rendering."""

import fitz
import pytest

from examdesk.config.app_config import ReportsConfig
from examdesk.core.errors import NotFoundError, ReportServiceError
from examdesk.core.generator import generate_test
from examdesk.core.reports import (
    ReportDocument,
    build_result_report,
    build_student_report,
    build_test_sheet,
    render_html,
    render_pdf,
    render_report,
)
from examdesk.db.results_repository import insert_result


def pdf_text(data: bytes) -> str:
    with fitz.open(stream=data, filetype="pdf") as doc:
        return "\n".join(page.get_text() for page in doc)


@pytest.fixture
def graded(category, questions, student):
    """A generated test with one stored result for the student."""
    generated = generate_test(category.id, 4, name="Quiz 1")
    result = insert_result(
        student.id, generated.test_id, 3, 4, 75.0, 4, taken_at="2024-03-01 09:00:00"
    )
    return generated, result


class TestBuildReports:
    """Tests for report data builders."""

    def test_result_report(self, graded, student):
        _, result = graded

        document = build_result_report(result.id)

        assert document.template == "result"
        assert document.filename == f"result_{result.id}.pdf"
        assert document.data["student"] == "Jan Kowalski"
        assert document.data["student_number"] == "S1001"
        assert document.data["grade"] == 4
        assert document.data["grade_label"] == "dobry"

    def test_student_report_average(self, graded, student):
        generated, _ = graded
        insert_result(student.id, generated.test_id, 4, 4, 100.0, 6)

        document = build_student_report(student.id)

        assert document.filename == f"student_{student.id}_results.pdf"
        assert len(document.data["results"]) == 2
        assert document.data["average_grade"] == 5.0

    def test_student_report_without_results(self, student):
        document = build_student_report(student.id)

        assert document.data["results"] == []
        assert document.data["average_grade"] is None
        assert "No results yet." in render_html(document)

    def test_test_sheet_hides_answers(self, graded):
        generated, _ = graded

        document = build_test_sheet(generated.test_id)

        assert document.title == "Quiz 1"
        assert len(document.data["questions"]) == 4
        assert all("correct_option" not in q for q in document.data["questions"])

    @pytest.mark.parametrize(
        "builder", [build_result_report, build_student_report, build_test_sheet]
    )
    def test_missing_entity(self, db_path, builder):
        with pytest.raises(NotFoundError):
            builder(404)


class TestRenderHtml:
    """Tests for HTML templates."""

    def test_escapes_user_content(self):
        document = ReportDocument(
            template="test",
            title="<Quiz>",
            filename="t.pdf",
            data={
                "test_id": 1,
                "name": "<Quiz>",
                "category": "",
                "questions": [
                    {"content": "Is 1 < 2?", "points": 1, "options": {"a": "yes", "b": "no"}}
                ],
            },
        )

        html = render_html(document)

        assert "<h1>&lt;Quiz&gt;</h1>" in html
        assert "Is 1 &lt; 2?" in html
        assert "a) yes" in html


class TestRenderPdf:
    """Tests for PDF output."""

    def test_result_pdf(self, graded):
        _, result = graded

        data = render_pdf(build_result_report(result.id))

        assert data.startswith(b"%PDF")
        text = pdf_text(data)
        assert "Jan Kowalski" in text
        assert "75.00%" in text

    def test_long_sheet_spans_pages(self):
        """Content that does not fit on one A4 page continues on the next."""
        questions = [
            {"content": f"Question number {n} " * 6, "points": 1, "options": {"a": "x", "b": "y"}}
            for n in range(120)
        ]
        document = ReportDocument(
            template="test",
            title="Long",
            filename="long.pdf",
            data={"test_id": 1, "name": "Long", "category": "Math", "questions": questions},
        )

        with fitz.open(stream=render_pdf(document), filetype="pdf") as doc:
            assert doc.page_count > 1


class TestRenderReport:
    """Tests for local/remote dispatch."""

    def test_local_mode(self, graded):
        _, result = graded

        pdf = render_report(build_result_report(result.id), ReportsConfig(mode="local"))

        assert pdf.startswith(b"%PDF")

    def test_remote_mode_uses_service(self, graded, monkeypatch):
        _, result = graded
        calls = []

        def fake_render_remote(payload, filename, config):
            calls.append((payload["template"], filename, config.service_url))
            return b"%PDF-remote"

        monkeypatch.setattr("examdesk.core.reports.render_remote", fake_render_remote)
        config = ReportsConfig(mode="remote", service_url="http://reports.test")

        pdf = render_report(build_result_report(result.id), config)

        assert pdf == b"%PDF-remote"
        assert calls == [("result", f"result_{result.id}.pdf", "http://reports.test")]

    def test_remote_errors_propagate(self, graded, monkeypatch):
        _, result = graded

        def failing(payload, filename, config):
            raise ReportServiceError("down", timed_out=True)

        monkeypatch.setattr("examdesk.core.reports.render_remote", failing)
        config = ReportsConfig(mode="remote", service_url="http://reports.test")

        with pytest.raises(ReportServiceError):
            render_report(build_result_report(result.id), config)
