"""Question endpoints."""

from fastapi import APIRouter, HTTPException, Query, status

from examdesk.db.questions_repository import (
    delete_question,
    get_question_by_id,
    insert_question,
    list_questions,
    update_question,
)
from examdesk.utils.validators import require_bank, require_category
from examdesk.web.schemas import (
    DeleteResponse,
    QuestionCreate,
    QuestionListResponse,
    QuestionResponse,
    QuestionUpdate,
)

router = APIRouter(prefix="/api/questions", tags=["questions"])


def _not_found(question_id: int) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Question {question_id} not found",
    )


def _check_references(bank_id: int | None, category_id: int | None) -> None:
    if bank_id is not None:
        require_bank(bank_id)
    if category_id is not None:
        require_category(category_id)


@router.get("", response_model=QuestionListResponse)
async def list_all_questions(
    category_id: int | None = Query(default=None),
    bank_id: int | None = Query(default=None),
) -> QuestionListResponse:
    """List questions, optionally filtered by category and bank."""
    records = list_questions(category_id=category_id, bank_id=bank_id)
    questions = [QuestionResponse.model_validate(q) for q in records]
    return QuestionListResponse(questions=questions, count=len(questions))


@router.get("/{question_id}", response_model=QuestionResponse)
async def get_question(question_id: int) -> QuestionResponse:
    question = get_question_by_id(question_id)
    if question is None:
        raise _not_found(question_id)
    return QuestionResponse.model_validate(question)


@router.post("", response_model=QuestionResponse, status_code=status.HTTP_201_CREATED)
async def create_question(data: QuestionCreate) -> QuestionResponse:
    _check_references(data.bank_id, data.category_id)
    question = insert_question(**data.model_dump())
    return QuestionResponse.model_validate(question)


@router.put("/{question_id}", response_model=QuestionResponse)
async def edit_question(question_id: int, data: QuestionUpdate) -> QuestionResponse:
    if get_question_by_id(question_id) is None:
        raise _not_found(question_id)
    _check_references(data.bank_id, data.category_id)

    question = update_question(question_id, **data.model_dump())
    if question is None:
        raise _not_found(question_id)
    return QuestionResponse.model_validate(question)


@router.delete("/{question_id}", response_model=DeleteResponse)
async def remove_question(question_id: int) -> DeleteResponse:
    changes = delete_question(question_id)
    if changes == 0:
        raise _not_found(question_id)
    return DeleteResponse(changes=changes)
