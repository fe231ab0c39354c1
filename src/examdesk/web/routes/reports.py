"""PDF report endpoints.

Rendering happens in-process or through the report service, depending on
the reports.mode setting. Both block, so the handlers are plain functions
and run in the threadpool.
"""

from fastapi import APIRouter, Request
from fastapi.responses import Response

from examdesk.core.reports import (
    ReportDocument,
    build_result_report,
    build_student_report,
    build_test_sheet,
    render_report,
)

router = APIRouter(prefix="/api/reports", tags=["reports"])


def _pdf_response(request: Request, document: ReportDocument) -> Response:
    pdf = render_report(document, request.app.state.config.reports)
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{document.filename}"'},
    )


@router.get("/results/{result_id}")
def result_report(request: Request, result_id: int) -> Response:
    """PDF summary of one result."""
    return _pdf_response(request, build_result_report(result_id))


@router.get("/students/{student_id}")
def student_report(request: Request, student_id: int) -> Response:
    """PDF list of all results of a student."""
    return _pdf_response(request, build_student_report(student_id))


@router.get("/tests/{test_id}")
def test_sheet(request: Request, test_id: int) -> Response:
    """Printable PDF sheet with the questions of a test."""
    return _pdf_response(request, build_test_sheet(test_id))
