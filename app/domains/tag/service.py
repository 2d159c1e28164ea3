"""Tag service layer with business logic.

Tags are global: any authenticated user may list, create, rename or delete
them. Names are stored lower-cased and are unique across the whole table.
"""

import logging
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from app.core.config import settings
from app.core.security import require_user
from app.exceptions.base import ValidationError
from app.exceptions.tag import DuplicateTagError, InvalidTagOperationError, TagNotFoundError
from app.schemas.tag import TagCreate, TagUpdate
from models.tag import Tag, TodoTag

logger = logging.getLogger(__name__)

MAX_TAG_LIMIT = 100


class TagService:
    """Service class for tag business logic."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_tags_list(self, user_id: UUID) -> List[Dict[str, Any]]:
        """All tags ordered by name, each with its todo count."""
        require_user(user_id)

        stmt = self._with_counts().order_by(Tag.name.asc())
        result = await self.db.execute(stmt)
        return [self._with_todo_count(tag, count) for tag, count in result.all()]

    async def get_popular_tags(self, user_id: UUID, limit: int | None = None) -> List[Dict[str, Any]]:
        """The ``limit`` most used tags, most used first."""
        require_user(user_id)

        limit = settings.popular_tags_limit if limit is None else limit
        if not 1 <= limit <= MAX_TAG_LIMIT:
            raise ValidationError(
                f"limit must be between 1 and {MAX_TAG_LIMIT}", details={"limit": limit}
            )

        todo_count = func.count(TodoTag.todo_id)
        stmt = self._with_counts(todo_count).order_by(todo_count.desc(), Tag.name.asc()).limit(limit)
        result = await self.db.execute(stmt)
        return [self._with_todo_count(tag, count) for tag, count in result.all()]

    async def search_tags(self, query: str, user_id: UUID) -> List[Dict[str, Any]]:
        """Case-insensitive substring search on tag names."""
        require_user(user_id)

        term = (query or "").strip().lower()
        if not term:
            raise ValidationError("Search query cannot be empty", details={"query": query})

        todo_count = func.count(TodoTag.todo_id)
        stmt = (
            self._with_counts(todo_count)
            .where(Tag.name.contains(term, autoescape=True))
            .order_by(todo_count.desc(), Tag.name.asc())
            .limit(settings.tag_search_limit)
        )
        result = await self.db.execute(stmt)
        return [self._with_todo_count(tag, count) for tag, count in result.all()]

    async def create_tag(self, tag_data: TagCreate, user_id: UUID) -> Dict[str, Any]:
        """Create a tag, or return the existing tag with the same lower-cased name.

        The result carries ``created`` so callers can tell the two cases apart.
        """
        require_user(user_id)

        name = tag_data.name.lower()
        existing = await self._get_tag_by_name(name)
        if existing:
            return {
                **self._with_todo_count(existing, await self._get_tag_todo_count(existing.id)),
                "created": False,
            }

        tag = Tag(name=name, color=tag_data.color)

        try:
            self.db.add(tag)
            await self.db.commit()
            await self.db.refresh(tag)
        except IntegrityError:
            # Another request created the same name first; hand back that row
            await self.db.rollback()
            existing = await self._get_tag_by_name(name)
            if existing is None:
                raise InvalidTagOperationError("Failed to create tag")
            return {
                **self._with_todo_count(existing, await self._get_tag_todo_count(existing.id)),
                "created": False,
            }
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise InvalidTagOperationError(f"Failed to create tag: {str(e)}")

        logger.info("Created tag %s (%s)", tag.id, tag.name)
        return {**self._with_todo_count(tag, 0), "created": True}

    async def update_tag(self, tag_id: UUID, tag_data: TagUpdate, user_id: UUID) -> Dict[str, Any]:
        """Update a tag's name and/or color."""
        require_user(user_id)

        tag = await self._get_tag_by_id(tag_id)
        if not tag:
            raise TagNotFoundError("Tag not found")

        update_data = tag_data.model_dump(exclude_unset=True)
        if update_data.get("name"):
            update_data["name"] = update_data["name"].lower()
            duplicate = await self._get_tag_by_name(update_data["name"], exclude_id=tag_id)
            if duplicate:
                raise DuplicateTagError()

        for field, value in update_data.items():
            setattr(tag, field, value)

        try:
            await self.db.commit()
            await self.db.refresh(tag)
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise InvalidTagOperationError(f"Failed to update tag: {str(e)}")

        return self._with_todo_count(tag, await self._get_tag_todo_count(tag_id))

    async def delete_tag(self, tag_id: UUID, user_id: UUID) -> bool:
        """Delete a tag and every todo link that uses it."""
        require_user(user_id)

        tag = await self._get_tag_by_id(tag_id)
        if not tag:
            raise TagNotFoundError("Tag not found")

        try:
            await self.db.delete(tag)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise InvalidTagOperationError(f"Failed to delete tag: {str(e)}")

        logger.info("Deleted tag %s", tag_id)
        return True

    # Private helper methods
    @staticmethod
    def _with_counts(todo_count=None):
        todo_count = todo_count if todo_count is not None else func.count(TodoTag.todo_id)
        return (
            select(Tag, todo_count.label("todo_count"))
            .outerjoin(TodoTag, TodoTag.tag_id == Tag.id)
            .group_by(Tag.id)
        )

    async def _get_tag_by_id(self, tag_id: UUID) -> Optional[Tag]:
        result = await self.db.execute(select(Tag).where(Tag.id == tag_id))
        return result.scalar_one_or_none()

    async def _get_tag_by_name(self, name: str, exclude_id: UUID | None = None) -> Optional[Tag]:
        stmt = select(Tag).where(Tag.name == name)
        if exclude_id is not None:
            stmt = stmt.where(Tag.id != exclude_id)
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def _get_tag_todo_count(self, tag_id: UUID) -> int:
        result = await self.db.execute(
            select(func.count(TodoTag.todo_id)).where(TodoTag.tag_id == tag_id)
        )
        return result.scalar() or 0

    @staticmethod
    def _with_todo_count(tag: Tag, todo_count: int) -> Dict[str, Any]:
        return {
            "id": tag.id,
            "name": tag.name,
            "color": tag.color,
            "created_at": tag.created_at,
            "updated_at": tag.updated_at,
            "todo_count": todo_count,
        }
