"""User endpoints."""

from fastapi import APIRouter, HTTPException, Query, status

from examdesk.core.auth import hash_password
from examdesk.core.errors import ValidationError
from examdesk.db.users_repository import (
    ACCOUNT_TYPES,
    delete_user,
    get_user_by_id,
    insert_user,
    list_users,
    update_user,
)
from examdesk.utils.validators import validate_email
from examdesk.web.schemas import (
    DeleteResponse,
    UserCreate,
    UserListResponse,
    UserResponse,
    UserUpdate,
)

router = APIRouter(prefix="/api/users", tags=["users"])


def _not_found(user_id: int) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"User {user_id} not found",
    )


@router.get("", response_model=UserListResponse)
async def list_all_users(
    account_type: str | None = Query(default=None),
    q: str | None = Query(default=None, description="Search by name or surname"),
) -> UserListResponse:
    """List users, newest first."""
    if account_type and account_type not in ACCOUNT_TYPES:
        raise ValidationError(f"Unknown account_type '{account_type}'")

    users = [UserResponse.model_validate(u) for u in list_users(account_type, q)]
    return UserListResponse(users=users, count=len(users))


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: int) -> UserResponse:
    """Get a specific user by ID."""
    user = get_user_by_id(user_id)
    if user is None:
        raise _not_found(user_id)
    return UserResponse.model_validate(user)


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(user_data: UserCreate) -> UserResponse:
    """Create a new user."""
    if not validate_email(user_data.email):
        raise ValidationError("Invalid email format")

    user = insert_user(
        name=user_data.name,
        surname=user_data.surname,
        email=user_data.email,
        password=hash_password(user_data.password) if user_data.password else "",
        account_type=user_data.account_type,
        student_number=user_data.student_number,
        joined_at=user_data.joined_at,
        comment=user_data.comment,
    )
    return UserResponse.model_validate(user)


@router.put("/{user_id}", response_model=UserResponse)
async def edit_user(user_id: int, user_data: UserUpdate) -> UserResponse:
    """Update a user; omitted fields keep their values."""
    if user_data.email is not None and not validate_email(user_data.email):
        raise ValidationError("Invalid email format")

    values = user_data.model_dump()
    if user_data.password:
        values["password"] = hash_password(user_data.password)
    else:
        values["password"] = None

    user = update_user(user_id, **values)
    if user is None:
        raise _not_found(user_id)
    return UserResponse.model_validate(user)


@router.delete("/{user_id}", response_model=DeleteResponse)
async def remove_user(user_id: int) -> DeleteResponse:
    """Delete a user by ID."""
    changes = delete_user(user_id)
    if changes == 0:
        raise _not_found(user_id)
    return DeleteResponse(changes=changes)
