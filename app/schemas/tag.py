"""Tag schemas for request/response serialization."""

from __future__ import annotations

from pydantic import ConfigDict, Field, field_validator

from app.core.config import HEX_COLOR_PATTERN, settings

from .base import BaseModelSchema, BaseSchema


def _clean_name(v: str | None) -> str | None:
    if v is not None and isinstance(v, str):
        v = v.strip().lower()
        if not v:
            raise ValueError("Tag name cannot be empty or only whitespace")
    return v


class TagCreate(BaseSchema):
    """Schema for creating a tag. The name is stored lower-cased."""

    name: str = Field(..., min_length=1, max_length=100)
    color: str = Field(default=settings.default_tag_color, pattern=HEX_COLOR_PATTERN)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _clean_name(v)


class TagUpdate(BaseSchema):
    """Schema for updating a tag."""

    name: str | None = Field(None, min_length=1, max_length=100)
    color: str | None = Field(None, pattern=HEX_COLOR_PATTERN)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        return _clean_name(v)

    @field_validator("name", "color")
    @classmethod
    def reject_null(cls, v: str | None) -> str:
        if v is None:
            raise ValueError("Field cannot be null")
        return v


class TagResponse(BaseModelSchema):
    """Schema for tag response."""

    name: str
    color: str

    # Computed fields
    todo_count: int = 0

    model_config = ConfigDict(from_attributes=True)


class TagListResponse(BaseSchema):
    """Schema for tag list response."""

    tags: list[TagResponse]
    total: int
