"""User-related Pydantic schemas for response serialization."""

from typing import Optional

from .base import BaseModelSchema


class UserResponse(BaseModelSchema):
    """Schema for user response data."""

    external_id: str
    email: Optional[str] = None
    name: Optional[str] = None
    is_active: bool
