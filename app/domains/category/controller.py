"""Category API controller with FastAPI endpoints."""

import logging
from uuid import UUID

from fastapi import APIRouter, Body, Depends, Path, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.dependencies import get_current_user, get_db, validate_token
from app.domains.category.service import CategoryService
from app.schemas.base import ResponseSchema
from app.schemas.category import (
    CategoryCreate,
    CategoryListResponse,
    CategoryResponse,
    CategoryUpdate,
)
from models.user import User

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/categories",
    tags=["categories"],
    dependencies=[Depends(validate_token)],  # Global token validation for all routes
)


@router.post("/", response_model=ResponseSchema, status_code=201)
async def create_category(
    _request: Request,
    category_data: CategoryCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Create a new category."""
    service = CategoryService(db)
    category = await service.create_category(category_data=category_data, user_id=current_user.id)

    return ResponseSchema(
        status="success",
        message="Category created successfully",
        data=CategoryResponse.model_validate(category).model_dump(mode="json"),
    )


@router.get("/", response_model=CategoryListResponse)
async def get_categories(
    _request: Request,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Get all categories of the current user, ordered by name."""
    service = CategoryService(db)
    categories = await service.get_categories_list(current_user.id)

    return CategoryListResponse(
        categories=[CategoryResponse.model_validate(category) for category in categories],
        total=len(categories),
    )


@router.get("/{category_id}", response_model=ResponseSchema)
async def get_category(
    _request: Request,
    category_id: UUID = Path(..., description="Category ID"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Get a specific category by ID."""
    service = CategoryService(db)
    category = await service.get_category_by_id(category_id, current_user.id)

    return ResponseSchema(
        status="success",
        message="Category retrieved successfully",
        data=CategoryResponse.model_validate(category).model_dump(mode="json"),
    )


@router.put("/{category_id}", response_model=ResponseSchema)
async def update_category(
    _request: Request,
    category_id: UUID = Path(..., description="Category ID"),
    category_data: CategoryUpdate = Body(...),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Update a specific category."""
    service = CategoryService(db)
    category = await service.update_category(category_id, category_data, current_user.id)

    return ResponseSchema(
        status="success",
        message="Category updated successfully",
        data=CategoryResponse.model_validate(category).model_dump(mode="json"),
    )


@router.delete("/{category_id}", response_model=ResponseSchema)
async def delete_category(
    _request: Request,
    category_id: UUID = Path(..., description="Category ID"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Delete a category. Its todos are kept and lose their category."""
    service = CategoryService(db)
    await service.delete_category(category_id, current_user.id)

    return ResponseSchema(status="success", message="Category deleted successfully", data=None)
