"""PDF report generation.

Responsibilities:
- Collect report data for a result, a student's history or a test sheet
- Render reports in-process: HTML template -> PDF via PyMuPDF Story
- Hand the same payload to the external report service in remote mode

Report payloads are plain JSON-serializable dicts so both rendering
paths consume the same data.
"""

from __future__ import annotations

import io
from dataclasses import dataclass, field
from datetime import datetime, timezone
from html import escape
from typing import Any, Literal

import fitz
import structlog

from examdesk.config.app_config import ReportsConfig
from examdesk.core.errors import NotFoundError
from examdesk.core.grading import grade_label
from examdesk.core.report_proxy import render_remote
from examdesk.db.questions_repository import OPTION_KEYS, list_questions_for_test
from examdesk.db.results_repository import get_result_by_id, list_results
from examdesk.db.tests_repository import get_test_by_id
from examdesk.db.users_repository import get_user_by_id

logger = structlog.get_logger(__name__)

# =============================================================================
# TYPES
# =============================================================================

ReportTemplate = Literal["result", "student", "test"]

PAGE_MARGIN = 42  # points

REPORT_CSS = """
body { font-family: sans-serif; font-size: 11px; }
h1 { font-size: 18px; margin-bottom: 4px; }
p.meta { color: #555555; font-size: 9px; }
table { border-collapse: collapse; width: 100%; }
th, td { border: 1px solid #999999; padding: 3px; text-align: left; }
th { background-color: #eeeeee; }
.grade { font-size: 14px; font-weight: bold; }
ol li { margin-bottom: 8px; }
"""

# =============================================================================
# DATA CLASSES
# =============================================================================


@dataclass
class ReportDocument:
    """A report ready to render."""

    template: ReportTemplate
    title: str
    filename: str
    data: dict[str, Any] = field(default_factory=dict)

    def to_payload(self) -> dict[str, Any]:
        """Body sent to the external report service."""
        return {"template": self.template, "title": self.title, "data": self.data}


# =============================================================================
# REPORT BUILDERS
# =============================================================================


def build_result_report(result_id: int) -> ReportDocument:
    """Collect data for a single result report.

    Raises:
        NotFoundError: If the result does not exist
    """
    result = get_result_by_id(result_id)
    if result is None:
        raise NotFoundError("Result", result_id)

    student = get_user_by_id(result.student_id)

    return ReportDocument(
        template="result",
        title=f"Result: {result.test_name or 'Test'}",
        filename=f"result_{result_id}.pdf",
        data={
            "result_id": result.id,
            "student": student.full_name if student else result.student_name or "",
            "student_number": student.student_number if student else None,
            "test": result.test_name or "",
            "points": result.points,
            "max_points": result.max_points,
            "percentage": result.percentage,
            "grade": result.grade,
            "grade_label": grade_label(result.grade),
            "taken_at": result.taken_at,
        },
    )


def build_student_report(student_id: int) -> ReportDocument:
    """Collect all results of a student.

    Raises:
        NotFoundError: If the student does not exist
    """
    student = get_user_by_id(student_id)
    if student is None:
        raise NotFoundError("User", student_id)

    results = list_results(student_id=student_id)
    rows = [
        {
            "test": r.test_name or "",
            "points": r.points,
            "max_points": r.max_points,
            "percentage": r.percentage,
            "grade": r.grade,
            "taken_at": r.taken_at,
        }
        for r in results
    ]
    average = round(sum(r.grade for r in results) / len(results), 2) if results else None

    return ReportDocument(
        template="student",
        title=f"Results: {student.full_name}",
        filename=f"student_{student_id}_results.pdf",
        data={
            "student_id": student.id,
            "student": student.full_name,
            "student_number": student.student_number,
            "email": student.email,
            "results": rows,
            "average_grade": average,
        },
    )


def build_test_sheet(test_id: int) -> ReportDocument:
    """Collect the questions of a test for a printable sheet.

    Raises:
        NotFoundError: If the test does not exist
    """
    test = get_test_by_id(test_id)
    if test is None:
        raise NotFoundError("Test", test_id)

    questions = list_questions_for_test(test_id)

    return ReportDocument(
        template="test",
        title=test.name,
        filename=f"test_{test_id}.pdf",
        data={
            "test_id": test.id,
            "name": test.name,
            "category": test.category_name or "",
            "questions": [
                {
                    "content": q.content,
                    "points": q.points,
                    "options": {k: v for k, v in q.options.items() if v},
                }
                for q in questions
            ],
        },
    )


# =============================================================================
# HTML TEMPLATES
# =============================================================================


def _fmt_points(value: float) -> str:
    """Format points without a trailing .0 for whole numbers."""
    return f"{value:g}"


def _render_result_html(data: dict[str, Any]) -> str:
    student = escape(data["student"])
    if data.get("student_number"):
        student += f" ({escape(data['student_number'])})"
    return (
        f"<p>Student: <b>{student}</b></p>"
        f"<p>Test: {escape(data['test'])}</p>"
        f"<p>Date: {escape(str(data['taken_at']))}</p>"
        f"<p>Points: {_fmt_points(data['points'])} / {_fmt_points(data['max_points'])}"
        f" ({data['percentage']:.2f}%)</p>"
        f'<p class="grade">Grade: {data["grade"]} ({escape(data["grade_label"])})</p>'
    )


def _render_student_html(data: dict[str, Any]) -> str:
    header = f"<p>Student: <b>{escape(data['student'])}</b>"
    if data.get("student_number"):
        header += f" ({escape(data['student_number'])})"
    header += f"<br/>{escape(data.get('email') or '')}</p>"

    if not data["results"]:
        return header + "<p>No results yet.</p>"

    rows = "".join(
        f"<tr><td>{escape(r['test'])}</td>"
        f"<td>{_fmt_points(r['points'])} / {_fmt_points(r['max_points'])}</td>"
        f"<td>{r['percentage']:.2f}%</td>"
        f"<td>{r['grade']}</td>"
        f"<td>{escape(str(r['taken_at']))}</td></tr>"
        for r in data["results"]
    )
    return (
        header
        + "<table><tr><th>Test</th><th>Points</th><th>%</th><th>Grade</th><th>Date</th></tr>"
        + rows
        + "</table>"
        + f"<p>Average grade: {data['average_grade']}</p>"
    )


def _render_test_html(data: dict[str, Any]) -> str:
    header = f"<p>Category: {escape(data['category'])}</p>" if data["category"] else ""
    header += "<p>Name: ______________________ Date: __________</p>"

    items = []
    for q in data["questions"]:
        options = "".join(
            f"<br/>{key}) {escape(text)}"
            for key, text in q["options"].items()
            if key in OPTION_KEYS
        )
        items.append(
            f"<li>{escape(q['content'])} <i>[{q['points']} pt]</i>{options}</li>"
        )
    return header + "<ol>" + "".join(items) + "</ol>"


_TEMPLATES = {
    "result": _render_result_html,
    "student": _render_student_html,
    "test": _render_test_html,
}


def render_html(document: ReportDocument) -> str:
    """Render a report document to an HTML fragment."""
    body = _TEMPLATES[document.template](document.data)
    generated = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M UTC")
    return (
        f"<h1>{escape(document.title)}</h1>"
        f'<p class="meta">Generated {generated}</p>'
        f"{body}"
    )


# =============================================================================
# PDF RENDERING
# =============================================================================


def render_pdf(document: ReportDocument) -> bytes:
    """Render a report document to PDF bytes in-process.

    Content flows over as many A4 pages as needed.
    """
    story = fitz.Story(html=render_html(document), user_css=REPORT_CSS)
    buffer = io.BytesIO()
    writer = fitz.DocumentWriter(buffer)

    mediabox = fitz.paper_rect("a4")
    where = mediabox + (PAGE_MARGIN, PAGE_MARGIN, -PAGE_MARGIN, -PAGE_MARGIN)

    pages = 0
    more = True
    while more:
        device = writer.begin_page(mediabox)
        more, _ = story.place(where)
        story.draw(device)
        writer.end_page()
        pages += 1
    writer.close()

    logger.info(
        "reports.rendered",
        template=document.template,
        filename=document.filename,
        pages=pages,
    )
    return buffer.getvalue()


def render_report(document: ReportDocument, config: ReportsConfig) -> bytes:
    """Render a report locally or through the report service, per config."""
    if config.mode == "remote":
        return render_remote(document.to_payload(), document.filename, config)

    return render_pdf(document)
