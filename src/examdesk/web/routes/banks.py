"""Question bank endpoints."""

from fastapi import APIRouter, HTTPException, Query, status

from examdesk.db.banks_repository import (
    delete_bank,
    get_bank_by_id,
    insert_bank,
    list_banks,
    update_bank,
)
from examdesk.db.questions_repository import list_questions
from examdesk.utils.validators import require_subject
from examdesk.web.schemas import (
    BankCreate,
    BankListResponse,
    BankResponse,
    BankUpdate,
    DeleteResponse,
    QuestionListResponse,
    QuestionResponse,
)

router = APIRouter(prefix="/api/banks", tags=["banks"])


def _not_found(bank_id: int) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Question bank {bank_id} not found",
    )


@router.get("", response_model=BankListResponse)
async def list_all_banks(
    subject_id: int | None = Query(default=None),
) -> BankListResponse:
    """List question banks."""
    banks = [BankResponse.model_validate(b) for b in list_banks(subject_id)]
    return BankListResponse(banks=banks, count=len(banks))


@router.get("/{bank_id}", response_model=BankResponse)
async def get_bank(bank_id: int) -> BankResponse:
    bank = get_bank_by_id(bank_id)
    if bank is None:
        raise _not_found(bank_id)
    return BankResponse.model_validate(bank)


@router.get("/{bank_id}/questions", response_model=QuestionListResponse)
async def list_bank_questions(bank_id: int) -> QuestionListResponse:
    """List the questions stored in a bank."""
    if get_bank_by_id(bank_id) is None:
        raise _not_found(bank_id)
    questions = [QuestionResponse.model_validate(q) for q in list_questions(bank_id=bank_id)]
    return QuestionListResponse(questions=questions, count=len(questions))


@router.post("", response_model=BankResponse, status_code=status.HTTP_201_CREATED)
async def create_bank(data: BankCreate) -> BankResponse:
    if data.subject_id is not None:
        require_subject(data.subject_id)
    bank = insert_bank(
        name=data.name,
        description=data.description,
        subject_id=data.subject_id,
    )
    return BankResponse.model_validate(bank)


@router.put("/{bank_id}", response_model=BankResponse)
async def edit_bank(bank_id: int, data: BankUpdate) -> BankResponse:
    if get_bank_by_id(bank_id) is None:
        raise _not_found(bank_id)
    if data.subject_id is not None:
        require_subject(data.subject_id)

    bank = update_bank(bank_id, **data.model_dump())
    if bank is None:
        raise _not_found(bank_id)
    return BankResponse.model_validate(bank)


@router.delete("/{bank_id}", response_model=DeleteResponse)
async def remove_bank(bank_id: int) -> DeleteResponse:
    changes = delete_bank(bank_id)
    if changes == 0:
        raise _not_found(bank_id)
    return DeleteResponse(changes=changes)
