# app/domains/user/service.py
import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from models import User

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_user_by_external_id(self, external_id: str) -> Optional[User]:
        """Get a user by identity-provider subject."""
        result = await self.db.execute(select(User).where(User.external_id == external_id))
        return result.scalar_one_or_none()

    async def create_user(
        self, external_id: str, email: str | None = None, name: str | None = None
    ) -> User:
        """Create a new user."""
        user = User(external_id=external_id, email=email, name=name)

        try:
            self.db.add(user)
            await self.db.commit()
            await self.db.refresh(user)
            logger.info("Created user %s for subject %s", user.id, external_id)
            return user
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise e

    async def get_or_create_user(self, external_id: str, payload: dict) -> User:
        """Get existing user or create new one from a token payload."""
        user = await self.get_user_by_external_id(external_id)
        if not user:
            user = await self.create_user(
                external_id=external_id,
                email=payload.get("email"),
                name=payload.get("name") or payload.get("username"),
            )
        return user

    async def get_user_by_id(self, user_id: UUID) -> Optional[User]:
        """Get a user by ID."""
        result = await self.db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()
