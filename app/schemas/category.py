"""Category schemas for request/response serialization."""

from __future__ import annotations

from uuid import UUID

from pydantic import ConfigDict, Field, field_validator

from app.core.config import HEX_COLOR_PATTERN, settings

from .base import BaseModelSchema, BaseSchema


class CategoryBase(BaseSchema):
    """Base category schema with common fields."""

    name: str = Field(..., min_length=1, max_length=255)
    color: str = Field(default=settings.default_category_color, pattern=HEX_COLOR_PATTERN)
    icon: str | None = Field(None, max_length=100)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Validate and clean the category name."""
        if isinstance(v, str):
            v = v.strip()
            if not v:
                raise ValueError("Category name cannot be empty or only whitespace")
        return v


class CategoryCreate(CategoryBase):
    """Schema for creating a new category."""


class CategoryUpdate(BaseSchema):
    """Schema for updating a category."""

    name: str | None = Field(None, min_length=1, max_length=255)
    color: str | None = Field(None, pattern=HEX_COLOR_PATTERN)
    icon: str | None = Field(None, max_length=100)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        """Validate and clean the category name."""
        if v is not None and isinstance(v, str):
            v = v.strip()
            if not v:
                raise ValueError("Category name cannot be empty or only whitespace")
        return v

    @field_validator("name", "color")
    @classmethod
    def reject_null(cls, v: str | None) -> str:
        if v is None:
            raise ValueError("Field cannot be null")
        return v


class CategoryResponse(BaseModelSchema):
    """Schema for category response."""

    user_id: UUID
    name: str
    color: str
    icon: str | None = None

    # Computed fields
    todo_count: int = 0

    model_config = ConfigDict(from_attributes=True)


class CategoryListResponse(BaseSchema):
    """Schema for category list response."""

    categories: list[CategoryResponse]
    total: int
