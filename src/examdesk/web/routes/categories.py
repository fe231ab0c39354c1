"""Category endpoints."""

from fastapi import APIRouter, HTTPException, status

from examdesk.db.categories_repository import (
    delete_category,
    get_category_by_id,
    insert_category,
    list_categories,
    update_category,
)
from examdesk.web.schemas import (
    CategoryCreate,
    CategoryListResponse,
    CategoryResponse,
    CategoryUpdate,
    DeleteResponse,
)

router = APIRouter(prefix="/api/categories", tags=["categories"])


def _not_found(category_id: int) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Category {category_id} not found",
    )


@router.get("", response_model=CategoryListResponse)
async def list_all_categories() -> CategoryListResponse:
    """List all categories."""
    categories = [CategoryResponse.model_validate(c) for c in list_categories()]
    return CategoryListResponse(categories=categories, count=len(categories))


@router.get("/{category_id}", response_model=CategoryResponse)
async def get_category(category_id: int) -> CategoryResponse:
    category = get_category_by_id(category_id)
    if category is None:
        raise _not_found(category_id)
    return CategoryResponse.model_validate(category)


@router.post("", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_category(data: CategoryCreate) -> CategoryResponse:
    category = insert_category(name=data.name, description=data.description)
    return CategoryResponse.model_validate(category)


@router.put("/{category_id}", response_model=CategoryResponse)
async def edit_category(category_id: int, data: CategoryUpdate) -> CategoryResponse:
    category = update_category(category_id, **data.model_dump())
    if category is None:
        raise _not_found(category_id)
    return CategoryResponse.model_validate(category)


@router.delete("/{category_id}", response_model=DeleteResponse)
async def remove_category(category_id: int) -> DeleteResponse:
    """Delete a category. Its questions and tests keep existing, unlinked."""
    changes = delete_category(category_id)
    if changes == 0:
        raise _not_found(category_id)
    return DeleteResponse(changes=changes)
