"""Subject endpoints.

A subject's teacher_id must reference a user with account_type 'teacher'.
"""

from fastapi import APIRouter, HTTPException, Query, status

from examdesk.db.subjects_repository import (
    delete_subject,
    get_subject_by_id,
    insert_subject,
    list_subjects,
    update_subject,
)
from examdesk.utils.validators import require_teacher
from examdesk.web.schemas import (
    DeleteResponse,
    SubjectCreate,
    SubjectListResponse,
    SubjectResponse,
    SubjectUpdate,
)

router = APIRouter(prefix="/api/subjects", tags=["subjects"])


def _not_found(subject_id: int) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Subject {subject_id} not found",
    )


@router.get("", response_model=SubjectListResponse)
async def list_all_subjects(
    teacher_id: int | None = Query(default=None),
) -> SubjectListResponse:
    """List subjects, optionally those of one teacher."""
    subjects = [SubjectResponse.model_validate(s) for s in list_subjects(teacher_id)]
    return SubjectListResponse(subjects=subjects, count=len(subjects))


@router.get("/{subject_id}", response_model=SubjectResponse)
async def get_subject(subject_id: int) -> SubjectResponse:
    subject = get_subject_by_id(subject_id)
    if subject is None:
        raise _not_found(subject_id)
    return SubjectResponse.model_validate(subject)


@router.post("", response_model=SubjectResponse, status_code=status.HTTP_201_CREATED)
async def create_subject(data: SubjectCreate) -> SubjectResponse:
    require_teacher(data.teacher_id)
    subject = insert_subject(
        name=data.name,
        description=data.description,
        teacher_id=data.teacher_id,
    )
    return SubjectResponse.model_validate(subject)


@router.put("/{subject_id}", response_model=SubjectResponse)
async def edit_subject(subject_id: int, data: SubjectUpdate) -> SubjectResponse:
    if get_subject_by_id(subject_id) is None:
        raise _not_found(subject_id)
    if data.teacher_id is not None:
        require_teacher(data.teacher_id)

    subject = update_subject(subject_id, **data.model_dump())
    if subject is None:
        raise _not_found(subject_id)
    return SubjectResponse.model_validate(subject)


@router.delete("/{subject_id}", response_model=DeleteResponse)
async def remove_subject(subject_id: int) -> DeleteResponse:
    changes = delete_subject(subject_id)
    if changes == 0:
        raise _not_found(subject_id)
    return DeleteResponse(changes=changes)
