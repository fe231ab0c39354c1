"""Result endpoints.

Clients send raw points; percentage and grade are always computed here.
"""

import structlog
from fastapi import APIRouter, HTTPException, Query, status

from examdesk.core.grading import grade_for_percentage, grade_label, percentage
from examdesk.db.results_repository import (
    ResultRecord,
    delete_result,
    get_result_by_id,
    insert_result,
    list_results,
    update_result,
)
from examdesk.db.tests_repository import get_test_by_id
from examdesk.utils.validators import require_student
from examdesk.web.schemas import (
    DeleteResponse,
    ResultCreate,
    ResultListResponse,
    ResultResponse,
    ResultUpdate,
)

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/results", tags=["results"])


def result_to_response(record: ResultRecord) -> ResultResponse:
    """Convert ResultRecord to ResultResponse, adding the grade label."""
    response = ResultResponse.model_validate(record)
    response.grade_label = grade_label(record.grade)
    return response


def _not_found(result_id: int) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Result {result_id} not found",
    )


@router.get("", response_model=ResultListResponse)
async def list_all_results(
    student_id: int | None = Query(default=None),
    test_id: int | None = Query(default=None),
) -> ResultListResponse:
    """List results with test names, newest first."""
    results = [
        result_to_response(r) for r in list_results(student_id=student_id, test_id=test_id)
    ]
    return ResultListResponse(results=results, count=len(results))


@router.get("/student/{student_id}", response_model=ResultListResponse)
async def list_student_results(student_id: int) -> ResultListResponse:
    """List one student's results, newest first."""
    results = [result_to_response(r) for r in list_results(student_id=student_id)]
    return ResultListResponse(results=results, count=len(results))


@router.get("/{result_id}", response_model=ResultResponse)
async def get_result(result_id: int) -> ResultResponse:
    result = get_result_by_id(result_id)
    if result is None:
        raise _not_found(result_id)
    return result_to_response(result)


@router.post("", response_model=ResultResponse, status_code=status.HTTP_201_CREATED)
async def create_result(data: ResultCreate) -> ResultResponse:
    """Record a raw score; the percentage and grade are computed."""
    require_student(data.student_id)
    if get_test_by_id(data.test_id) is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Test {data.test_id} does not exist",
        )

    pct = percentage(data.points, data.max_points)
    grade = grade_for_percentage(pct)

    result = insert_result(
        student_id=data.student_id,
        test_id=data.test_id,
        points=data.points,
        max_points=data.max_points,
        percentage=pct,
        grade=grade,
        taken_at=data.taken_at,
    )
    logger.info("results.recorded", result_id=result.id, percentage=pct, grade=grade)
    return result_to_response(result)


@router.put("/{result_id}", response_model=ResultResponse)
async def edit_result(result_id: int, data: ResultUpdate) -> ResultResponse:
    """Update a result; percentage and grade follow changed points."""
    current = get_result_by_id(result_id)
    if current is None:
        raise _not_found(result_id)

    values = data.model_dump()
    if data.points is not None or data.max_points is not None:
        points = data.points if data.points is not None else current.points
        max_points = data.max_points if data.max_points is not None else current.max_points
        pct = percentage(points, max_points)
        values.update(
            points=points,
            max_points=max_points,
            percentage=pct,
            grade=grade_for_percentage(pct),
        )

    result = update_result(result_id, **values)
    if result is None:
        raise _not_found(result_id)
    return result_to_response(result)


@router.delete("/{result_id}", response_model=DeleteResponse)
async def remove_result(result_id: int) -> DeleteResponse:
    changes = delete_result(result_id)
    if changes == 0:
        raise _not_found(result_id)
    return DeleteResponse(changes=changes)
