"""Todo API controller with FastAPI endpoints."""

import logging
from uuid import UUID

from fastapi import APIRouter, Body, Depends, Path, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.dependencies import get_current_user, get_db, validate_token
from app.domains.todo.service import TodoService
from app.schemas.base import ResponseSchema
from app.schemas.todo import (
    SortOrder,
    TodoCreate,
    TodoFilter,
    TodoListResponse,
    TodoResponse,
    TodoSortField,
    TodoStats,
    TodoUpdate,
)
from models.todo import TodoPriority, TodoStatus
from models.user import User

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/todos",
    tags=["todos"],
    dependencies=[Depends(validate_token)],  # Global token validation for all routes
)


@router.post("/", response_model=ResponseSchema, status_code=201)
async def create_todo(
    _request: Request,
    todo_data: TodoCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Create a new todo."""
    service = TodoService(db)
    todo = await service.create_todo(todo_data=todo_data, user_id=current_user.id)

    return ResponseSchema(
        status="success",
        message="Todo created successfully",
        data=TodoResponse.model_validate(todo).model_dump(mode="json"),
    )


@router.get("/", response_model=TodoListResponse)
async def get_todos(
    _request: Request,
    status: TodoStatus | None = Query(None),
    priority: TodoPriority | None = Query(None),
    category_id: UUID | None = Query(None),
    search: str | None = Query(None),
    sort_by: TodoSortField = Query(TodoSortField.created_at),
    sort_order: SortOrder = Query(SortOrder.desc),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    cursor: UUID | None = Query(None, description="Id of the first todo of the page"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Get one page of todos with optional filters and sorting."""
    filters = TodoFilter(
        status=status,
        priority=priority,
        category_id=category_id,
        search=search,
        sort_by=sort_by,
        sort_order=sort_order,
        limit=limit,
        cursor=cursor,
    )

    service = TodoService(db)
    result = await service.get_todos_list(user_id=current_user.id, filters=filters)

    todos = [TodoResponse.model_validate(todo) for todo in result["items"]]

    return TodoListResponse(todos=todos, next_cursor=result["next_cursor"])


@router.get("/stats/summary", response_model=ResponseSchema)
async def get_todo_stats(
    _request: Request,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Get todo statistics for the current user."""
    service = TodoService(db)
    stats = await service.get_user_todo_stats(current_user.id)

    return ResponseSchema(
        status="success",
        message="Todo statistics retrieved successfully",
        data=TodoStats(**stats).model_dump(),
    )


@router.get("/{todo_id}", response_model=ResponseSchema)
async def get_todo(
    _request: Request,
    todo_id: UUID = Path(..., description="Todo ID"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Get a specific todo by ID."""
    service = TodoService(db)
    todo = await service.get_todo_by_id(todo_id, current_user.id)

    return ResponseSchema(
        status="success",
        message="Todo retrieved successfully",
        data=TodoResponse.model_validate(todo).model_dump(mode="json"),
    )


@router.put("/{todo_id}", response_model=ResponseSchema)
async def update_todo(
    _request: Request,
    todo_id: UUID = Path(..., description="Todo ID"),
    todo_data: TodoUpdate = Body(...),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Update a specific todo."""
    service = TodoService(db)
    todo = await service.update_todo(todo_id, todo_data, current_user.id)

    return ResponseSchema(
        status="success",
        message="Todo updated successfully",
        data=TodoResponse.model_validate(todo).model_dump(mode="json"),
    )


@router.delete("/{todo_id}", response_model=ResponseSchema)
async def delete_todo(
    _request: Request,
    todo_id: UUID = Path(..., description="Todo ID"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Delete a specific todo."""
    service = TodoService(db)
    await service.delete_todo(todo_id, current_user.id)

    return ResponseSchema(status="success", message="Todo deleted successfully", data=None)


@router.patch("/{todo_id}/toggle-complete", response_model=ResponseSchema)
async def toggle_todo_complete(
    _request: Request,
    todo_id: UUID = Path(..., description="Todo ID"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Toggle todo status between PENDING and COMPLETED."""
    service = TodoService(db)
    todo = await service.toggle_todo_complete(todo_id, current_user.id)

    return ResponseSchema(
        status="success",
        message="Todo status toggled successfully",
        data=TodoResponse.model_validate(todo).model_dump(mode="json"),
    )
