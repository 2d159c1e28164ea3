"""Todo service layer with business logic."""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import and_, case, delete, func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload

from app.core.config import settings
from app.core.security import require_user
from app.exceptions.category import CategoryNotFoundError
from app.exceptions.tag import TagNotFoundError
from app.exceptions.todo import InvalidTodoOperationError, TodoNotFoundError
from app.schemas.todo import SortOrder, TodoCreate, TodoFilter, TodoSortField, TodoUpdate
from app.shared.pagination import paginate_by_cursor
from models import PRIORITY_RANK, Category, Tag, Todo, TodoStatus, TodoTag, utcnow

logger = logging.getLogger(__name__)

# Category and tags are always returned expanded
TODO_LOAD_OPTIONS = (
    selectinload(Todo.category),
    selectinload(Todo.tag_links).selectinload(TodoTag.tag),
)


class TodoService:
    """Service class for todo business logic."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_todo(self, todo_data: TodoCreate, user_id: UUID) -> Todo:
        """Create a new todo. New todos always start out PENDING."""
        require_user(user_id)

        if todo_data.category_id:
            await self._validate_category_ownership(todo_data.category_id, user_id)

        todo = Todo(
            user_id=user_id,
            category_id=todo_data.category_id,
            title=todo_data.title,
            description=todo_data.description,
            status=TodoStatus.PENDING.value,
            priority=todo_data.priority.value,
            due_date=self._normalize_datetime(todo_data.due_date),
            completed_at=None,
        )

        try:
            self.db.add(todo)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error("Failed to create todo for user %s: %s", user_id, e)
            raise InvalidTodoOperationError(f"Failed to create todo: {str(e)}")

        logger.info("Created todo %s for user %s", todo.id, user_id)
        return await self._load_todo(todo.id)

    async def get_todo_by_id(self, todo_id: UUID, user_id: UUID) -> Todo:
        """Get a todo owned by the user, with category and tags loaded."""
        require_user(user_id)

        todo = await self._get_todo_by_id_and_user(todo_id, user_id, with_relations=True)
        if not todo:
            raise TodoNotFoundError("Todo not found")
        return todo

    async def get_todos_list(self, user_id: UUID, filters: TodoFilter) -> Dict[str, Any]:
        """Get one cursor page of the user's todos with filters and sorting."""
        require_user(user_id)

        query = select(Todo).where(Todo.user_id == user_id)

        # Apply filters
        if filters.status:
            query = query.where(Todo.status == filters.status.value)

        if filters.priority:
            query = query.where(Todo.priority == filters.priority.value)

        if filters.category_id:
            query = query.where(Todo.category_id == filters.category_id)

        if filters.search:
            query = query.where(
                or_(
                    Todo.title.icontains(filters.search, autoescape=True),
                    Todo.description.icontains(filters.search, autoescape=True),
                )
            )

        return await paginate_by_cursor(
            self.db,
            query,
            sort_key=self._sort_key(filters.sort_by),
            id_column=Todo.id,
            limit=filters.limit,
            cursor=filters.cursor,
            descending=filters.sort_order == SortOrder.desc,
            load_options=TODO_LOAD_OPTIONS,
        )

    async def update_todo(self, todo_id: UUID, todo_data: TodoUpdate, user_id: UUID) -> Todo:
        """Update a todo and, when ``tag_ids`` is given, replace its tag set.

        Field changes and tag reconciliation are committed together.
        """
        require_user(user_id)

        todo = await self._get_todo_by_id_and_user(todo_id, user_id)
        if not todo:
            raise TodoNotFoundError("Todo not found")

        # Update fields - include None values to allow unsetting fields
        update_data = todo_data.model_dump(exclude_unset=True, exclude_none=False)
        tag_ids = update_data.pop("tag_ids", None)
        new_status = update_data.pop("status", None)

        if update_data.get("category_id") is not None:
            await self._validate_category_ownership(update_data["category_id"], user_id)

        if tag_ids is not None:
            tag_ids = list(dict.fromkeys(tag_ids))
            await self._ensure_tags_exist(tag_ids)

        for field, value in update_data.items():
            if field == "due_date":
                value = self._normalize_datetime(value)
            elif field == "priority":
                value = value.value
            setattr(todo, field, value)

        if new_status is not None:
            self._apply_status(todo, TodoStatus(new_status))

        try:
            if tag_ids is not None and await self._reconcile_tags(todo.id, tag_ids):
                todo.updated_at = utcnow()
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error("Failed to update todo %s: %s", todo_id, e)
            raise InvalidTodoOperationError(f"Failed to update todo: {str(e)}")

        return await self._load_todo(todo_id)

    async def delete_todo(self, todo_id: UUID, user_id: UUID) -> bool:
        """Delete a todo together with its tag links."""
        require_user(user_id)

        todo = await self._get_todo_by_id_and_user(todo_id, user_id)
        if not todo:
            raise TodoNotFoundError("Todo not found")

        try:
            await self.db.delete(todo)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error("Failed to delete todo %s: %s", todo_id, e)
            raise InvalidTodoOperationError(f"Failed to delete todo: {str(e)}")

        logger.info("Deleted todo %s for user %s", todo_id, user_id)
        return True

    async def toggle_todo_complete(self, todo_id: UUID, user_id: UUID) -> Todo:
        """Toggle between COMPLETED and PENDING.

        Any status other than COMPLETED (including IN_PROGRESS and CANCELLED)
        moves straight to COMPLETED.
        """
        require_user(user_id)

        todo = await self._get_todo_by_id_and_user(todo_id, user_id)
        if not todo:
            raise TodoNotFoundError("Todo not found")

        if todo.status == TodoStatus.COMPLETED.value:
            self._apply_status(todo, TodoStatus.PENDING)
        else:
            self._apply_status(todo, TodoStatus.COMPLETED)

        try:
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error("Failed to toggle todo %s: %s", todo_id, e)
            raise InvalidTodoOperationError(f"Failed to toggle todo status: {str(e)}")

        logger.info("Todo %s is now %s", todo_id, todo.status)
        return await self._load_todo(todo_id)

    async def get_user_todo_stats(self, user_id: UUID) -> Dict[str, Any]:
        """Get todo statistics for a user."""
        require_user(user_id)

        total = await self._count(Todo.user_id == user_id)
        completed = await self._count(
            and_(Todo.user_id == user_id, Todo.status == TodoStatus.COMPLETED.value)
        )
        pending = await self._count(
            and_(Todo.user_id == user_id, Todo.status == TodoStatus.PENDING.value)
        )
        in_progress = await self._count(
            and_(Todo.user_id == user_id, Todo.status == TodoStatus.IN_PROGRESS.value)
        )
        overdue = await self._count(
            and_(
                Todo.user_id == user_id,
                Todo.due_date < utcnow(),
                Todo.status != TodoStatus.COMPLETED.value,
            )
        )

        return {
            "total": total,
            "completed": completed,
            "pending": pending,
            "in_progress": in_progress,
            "overdue": overdue,
            "completion_rate": self._completion_rate(completed, total),
        }

    # Private helper methods

    async def _get_todo_by_id_and_user(
        self, todo_id: UUID, user_id: UUID, with_relations: bool = False
    ) -> Optional[Todo]:
        """Get todo by ID and user ID."""
        query = select(Todo).where(and_(Todo.id == todo_id, Todo.user_id == user_id))
        if with_relations:
            query = query.options(*TODO_LOAD_OPTIONS).execution_options(populate_existing=True)
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def _load_todo(self, todo_id: UUID) -> Todo:
        """Reload a todo with fresh category and tags after a write."""
        query = (
            select(Todo)
            .options(*TODO_LOAD_OPTIONS)
            .where(Todo.id == todo_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(query)
        return result.scalar_one()

    async def _count(self, condition) -> int:
        result = await self.db.execute(select(func.count(Todo.id)).where(condition))
        return result.scalar() or 0

    @staticmethod
    def _completion_rate(completed: int, total: int) -> int:
        """Percentage of completed todos, rounded half up."""
        if total <= 0:
            return 0
        return (completed * 200 + total) // (total * 2)

    @staticmethod
    def _sort_key(sort_by: TodoSortField):
        if sort_by == TodoSortField.priority:
            return case(PRIORITY_RANK, value=Todo.priority, else_=len(PRIORITY_RANK))
        if sort_by == TodoSortField.due_date:
            return Todo.due_date
        if sort_by == TodoSortField.title:
            return Todo.title
        return Todo.created_at

    @staticmethod
    def _apply_status(todo: Todo, new_status: TodoStatus) -> None:
        """Set the status and keep ``completed_at`` in step with it.

        ``completed_at`` is set on entering COMPLETED and cleared on leaving
        it; otherwise it is left as is.
        """
        was_completed = todo.status == TodoStatus.COMPLETED.value
        todo.status = new_status.value

        if new_status == TodoStatus.COMPLETED and not was_completed:
            todo.completed_at = utcnow()
        elif new_status != TodoStatus.COMPLETED and was_completed:
            todo.completed_at = None

    async def _reconcile_tags(self, todo_id: UUID, tag_ids: List[UUID]) -> bool:
        """Make the todo's tag links equal ``tag_ids``.

        Links already present and still wanted are left in place. Returns
        True when anything changed. The caller commits.
        """
        result = await self.db.execute(select(TodoTag.tag_id).where(TodoTag.todo_id == todo_id))
        existing = set(result.scalars().all())
        wanted = set(tag_ids)

        stale = existing - wanted
        if stale:
            await self.db.execute(
                delete(TodoTag).where(
                    and_(TodoTag.todo_id == todo_id, TodoTag.tag_id.in_(list(stale)))
                )
            )

        added = [tag_id for tag_id in tag_ids if tag_id not in existing]
        for tag_id in added:
            self.db.add(TodoTag(todo_id=todo_id, tag_id=tag_id))

        return bool(stale or added)

    async def _ensure_tags_exist(self, tag_ids: List[UUID]) -> None:
        if not tag_ids:
            return
        result = await self.db.execute(select(Tag.id).where(Tag.id.in_(tag_ids)))
        missing = set(tag_ids) - set(result.scalars().all())
        if missing:
            raise TagNotFoundError(
                "One or more tags not found",
                details={"tag_ids": sorted(str(tag_id) for tag_id in missing)},
            )

    def _normalize_datetime(self, dt: Optional[datetime]) -> Optional[datetime]:
        """Normalize a datetime to naive UTC, the form stored in the database."""
        if dt is None:
            return None

        # If datetime is timezone-naive, assume it's UTC
        if dt.tzinfo is None:
            return dt

        return dt.astimezone(timezone.utc).replace(tzinfo=None)

    async def _validate_category_ownership(self, category_id: UUID, user_id: UUID) -> None:
        """Validate that a category belongs to the user, when enforcement is enabled."""
        if not settings.enforce_category_ownership:
            return

        query = select(Category.id).where(
            and_(Category.id == category_id, Category.user_id == user_id)
        )
        result = await self.db.execute(query)
        if result.scalar_one_or_none() is None:
            raise CategoryNotFoundError("Category not found")
