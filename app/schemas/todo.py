"""Todo schemas for request/response serialization."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import ConfigDict, Field, field_validator

from app.core.config import settings
from models.todo import TodoPriority, TodoStatus

from .base import BaseModelSchema, BaseSchema


class TodoSortField(str, Enum):
    created_at = "created_at"
    due_date = "due_date"
    priority = "priority"
    title = "title"


class SortOrder(str, Enum):
    asc = "asc"
    desc = "desc"


def _clean_title(v: str | None) -> str | None:
    if v is not None and isinstance(v, str):
        v = v.strip()
        if not v:
            raise ValueError("Title cannot be empty or only whitespace")
    return v


class TodoCreate(BaseSchema):
    """Schema for creating a new todo. Status is always PENDING on creation."""

    title: str = Field(..., min_length=1, max_length=500)
    description: str | None = None
    priority: TodoPriority = TodoPriority.MEDIUM
    due_date: datetime | None = None
    category_id: UUID | None = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        """Validate and clean the todo title."""
        return _clean_title(v)


class TodoUpdate(BaseSchema):
    """Schema for updating a todo.

    ``tag_ids`` is the complete desired tag set; omit it to leave tags alone.
    """

    title: str | None = Field(None, min_length=1, max_length=500)
    description: str | None = None
    status: TodoStatus | None = None
    priority: TodoPriority | None = None
    due_date: datetime | None = None
    category_id: UUID | None = None
    tag_ids: list[UUID] | None = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str | None) -> str | None:
        """Validate and clean the todo title."""
        return _clean_title(v)

    @field_validator("title", "status", "priority")
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("Field cannot be null")
        return v


class TodoFilter(BaseSchema):
    """Schema for filtering, sorting and paging todos."""

    status: TodoStatus | None = None
    priority: TodoPriority | None = None
    category_id: UUID | None = None
    search: str | None = None
    sort_by: TodoSortField = TodoSortField.created_at
    sort_order: SortOrder = SortOrder.desc
    limit: int = Field(default=settings.default_page_size, ge=1, le=settings.max_page_size)
    cursor: UUID | None = None

    @field_validator("search")
    @classmethod
    def normalize_search(cls, v: str | None) -> str | None:
        if v is not None:
            v = v.strip()
        return v or None


class CategorySummary(BaseSchema):
    """Category as embedded in a todo."""

    id: UUID
    name: str
    color: str
    icon: str | None = None


class TagSummary(BaseSchema):
    """Tag as embedded in a todo."""

    id: UUID
    name: str
    color: str


class TodoResponse(BaseModelSchema):
    """Schema for todo response, with category and tags expanded."""

    user_id: UUID
    category_id: UUID | None = None
    title: str
    description: str | None = None
    status: TodoStatus
    priority: TodoPriority
    due_date: datetime | None = None
    completed_at: datetime | None = None
    category: CategorySummary | None = None
    tags: list[TagSummary] = []

    model_config = ConfigDict(from_attributes=True)


class TodoListResponse(BaseSchema):
    """Schema for one page of todos."""

    todos: list[TodoResponse]
    next_cursor: UUID | None = None


class TodoStats(BaseSchema):
    """Aggregate counts over the caller's todos."""

    total: int
    completed: int
    pending: int
    in_progress: int
    overdue: int
    completion_rate: int = Field(..., ge=0, le=100)
