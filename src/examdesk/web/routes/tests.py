"""Test endpoints: generation, listing, answering."""

import structlog
from fastapi import APIRouter, HTTPException, Query, Request, status

from examdesk.core.generator import generate_test
from examdesk.core.grading import score_answers
from examdesk.db.questions_repository import list_questions_for_test
from examdesk.db.results_repository import insert_result
from examdesk.db.tests_repository import (
    delete_test,
    get_test_by_id,
    list_tests,
    rename_test,
)
from examdesk.utils.validators import require_student
from examdesk.web.routes.results import result_to_response
from examdesk.web.schemas import (
    DeleteResponse,
    SubmitResponse,
    TestGenerateRequest,
    TestGenerateResponse,
    TestListResponse,
    TestQuestionResponse,
    TestResponse,
    TestSubmitRequest,
    TestUpdate,
)

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/tests", tags=["tests"])


def _not_found(test_id: int) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Test {test_id} not found",
    )


@router.post(
    "/generate",
    response_model=TestGenerateResponse,
    status_code=status.HTTP_201_CREATED,
)
async def generate(request: Request, body: TestGenerateRequest) -> TestGenerateResponse:
    """Draw a new test of random questions from a category."""
    count = body.question_count
    if count is None:
        count = request.app.state.config.tests.default_question_count

    generated = generate_test(
        category_id=body.category_id,
        question_count=count,
        name=body.name,
    )
    test = get_test_by_id(generated.test_id)

    return TestGenerateResponse(
        **TestResponse.model_validate(test).model_dump(),
        question_ids=generated.question_ids,
    )


@router.get("", response_model=TestListResponse)
async def list_all_tests(
    category_id: int | None = Query(default=None),
) -> TestListResponse:
    tests = [TestResponse.model_validate(t) for t in list_tests(category_id)]
    return TestListResponse(tests=tests, count=len(tests))


@router.get("/{test_id}", response_model=TestResponse)
async def get_test(test_id: int) -> TestResponse:
    test = get_test_by_id(test_id)
    if test is None:
        raise _not_found(test_id)
    return TestResponse.model_validate(test)


@router.get("/{test_id}/questions", response_model=list[TestQuestionResponse])
async def get_test_questions(test_id: int) -> list[TestQuestionResponse]:
    """Questions of a test in order, without the correct options."""
    if get_test_by_id(test_id) is None:
        raise _not_found(test_id)
    return [TestQuestionResponse.model_validate(q) for q in list_questions_for_test(test_id)]


@router.post(
    "/{test_id}/submit",
    response_model=SubmitResponse,
    status_code=status.HTTP_201_CREATED,
)
async def submit_answers(test_id: int, body: TestSubmitRequest) -> SubmitResponse:
    """Score a student's answers, grade them and store the result."""
    if get_test_by_id(test_id) is None:
        raise _not_found(test_id)
    require_student(body.student_id)

    summary = score_answers(list_questions_for_test(test_id), body.answers)
    result = insert_result(
        student_id=body.student_id,
        test_id=test_id,
        points=summary.points,
        max_points=summary.max_points,
        percentage=summary.percentage,
        grade=summary.grade,
    )

    logger.info(
        "tests.submitted",
        test_id=test_id,
        student_id=body.student_id,
        result_id=result.id,
        grade=summary.grade,
    )

    return SubmitResponse(
        **result_to_response(result).model_dump(),
        correct_question_ids=summary.correct_question_ids,
    )


@router.put("/{test_id}", response_model=TestResponse)
async def edit_test(test_id: int, data: TestUpdate) -> TestResponse:
    test = rename_test(test_id, data.name)
    if test is None:
        raise _not_found(test_id)
    return TestResponse.model_validate(test)


@router.delete("/{test_id}", response_model=DeleteResponse)
async def remove_test(test_id: int) -> DeleteResponse:
    """Delete a test together with its question links and results."""
    changes = delete_test(test_id)
    if changes == 0:
        raise _not_found(test_id)
    return DeleteResponse(changes=changes)
