"""Category service layer with business logic."""

import logging
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import and_, func, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from app.core.security import require_user
from app.exceptions.category import (
    CategoryNotFoundError,
    DuplicateCategoryError,
    InvalidCategoryOperationError,
)
from app.schemas.category import CategoryCreate, CategoryUpdate
from models.category import Category
from models.todo import Todo

logger = logging.getLogger(__name__)


class CategoryService:
    """Service class for category business logic."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_category(self, category_data: CategoryCreate, user_id: UUID) -> Dict[str, Any]:
        """Create a new category."""
        require_user(user_id)

        # Check if category name already exists for this user
        existing = await self._get_category_by_name_and_user(category_data.name, user_id)
        if existing:
            raise DuplicateCategoryError()

        category = Category(
            user_id=user_id,
            name=category_data.name,
            color=category_data.color,
            icon=category_data.icon,
        )

        try:
            self.db.add(category)
            await self.db.commit()
            await self.db.refresh(category)
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise InvalidCategoryOperationError(f"Failed to create category: {str(e)}")

        logger.info("Created category %s for user %s", category.id, user_id)
        return self._with_todo_count(category, 0)

    async def get_category_by_id(self, category_id: UUID, user_id: UUID) -> Dict[str, Any]:
        """Get a category owned by the user, with its todo count."""
        require_user(user_id)

        category = await self._get_category_by_id_and_user(category_id, user_id)
        if not category:
            raise CategoryNotFoundError("Category not found")

        todo_count = await self._get_category_todo_count(category_id)
        return self._with_todo_count(category, todo_count)

    async def get_categories_list(self, user_id: UUID) -> List[Dict[str, Any]]:
        """Get all of the user's categories ordered by name, each with its todo count."""
        require_user(user_id)

        stmt = (
            select(Category, func.count(Todo.id).label("todo_count"))
            .outerjoin(Todo, Todo.category_id == Category.id)
            .where(Category.user_id == user_id)
            .group_by(Category.id)
            .order_by(Category.name.asc())
        )

        result = await self.db.execute(stmt)
        return [self._with_todo_count(category, count) for category, count in result.all()]

    async def update_category(
        self, category_id: UUID, category_data: CategoryUpdate, user_id: UUID
    ) -> Dict[str, Any]:
        """Update a category."""
        require_user(user_id)

        category = await self._get_category_by_id_and_user(category_id, user_id)
        if not category:
            raise CategoryNotFoundError("Category not found")

        # Check if new name conflicts with another of the user's categories
        if category_data.name:
            existing = await self._get_category_by_name_and_user(
                category_data.name, user_id, exclude_id=category_id
            )
            if existing:
                raise DuplicateCategoryError()

        update_data = category_data.model_dump(exclude_unset=True)
        for field, value in update_data.items():
            setattr(category, field, value)

        try:
            await self.db.commit()
            await self.db.refresh(category)
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise InvalidCategoryOperationError(f"Failed to update category: {str(e)}")

        todo_count = await self._get_category_todo_count(category_id)
        return self._with_todo_count(category, todo_count)

    async def delete_category(self, category_id: UUID, user_id: UUID) -> bool:
        """Delete a category, detaching its todos instead of deleting them."""
        require_user(user_id)

        category = await self._get_category_by_id_and_user(category_id, user_id)
        if not category:
            raise CategoryNotFoundError("Category not found")

        try:
            todo_count = await self._get_category_todo_count(category_id)
            if todo_count > 0:
                await self._unassign_todos_from_category(category_id)

            await self.db.delete(category)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise InvalidCategoryOperationError(f"Failed to delete category: {str(e)}")

        logger.info(
            "Deleted category %s for user %s, detached %d todos", category_id, user_id, todo_count
        )
        return True

    # Private helper methods
    async def _get_category_by_id_and_user(
        self, category_id: UUID, user_id: UUID
    ) -> Optional[Category]:
        """Get category by ID and user ID."""
        stmt = select(Category).where(
            and_(Category.id == category_id, Category.user_id == user_id)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def _get_category_by_name_and_user(
        self, name: str, user_id: UUID, exclude_id: UUID | None = None
    ) -> Optional[Category]:
        """Get category by exact name and user ID."""
        stmt = select(Category).where(and_(Category.name == name, Category.user_id == user_id))
        if exclude_id is not None:
            stmt = stmt.where(Category.id != exclude_id)
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def _get_category_todo_count(self, category_id: UUID) -> int:
        """Get count of todos in a category."""
        stmt = select(func.count(Todo.id)).where(Todo.category_id == category_id)
        result = await self.db.execute(stmt)
        return result.scalar() or 0

    async def _unassign_todos_from_category(self, category_id: UUID) -> None:
        """Set category_id to None for all todos in the category."""
        await self.db.execute(
            update(Todo).where(Todo.category_id == category_id).values(category_id=None)
        )

    @staticmethod
    def _with_todo_count(category: Category, todo_count: int) -> Dict[str, Any]:
        return {
            "id": category.id,
            "user_id": category.user_id,
            "name": category.name,
            "color": category.color,
            "icon": category.icon,
            "created_at": category.created_at,
            "updated_at": category.updated_at,
            "todo_count": todo_count,
        }
