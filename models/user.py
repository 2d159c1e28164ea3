"""
Provides the User model for the application's database schema.

Users are owned by an external identity provider. The local row only records
the provider's subject identifier so that categories and todos can reference
their owner by id.

Attributes
----------
external_id : sqlalchemy.Column
    Subject identifier issued by the identity provider (the token ``sub``).
email : sqlalchemy.Column
    Optional email address reported by the provider.
name : sqlalchemy.Column
    Optional display name reported by the provider.
is_active : sqlalchemy.Column
    A boolean indicating if the user is active. Defaults to `True`.

Relationships
-------------
todos : sqlalchemy.orm.relationship
    One-to-many relationship with the `Todo` model, cascading deletes.
categories : sqlalchemy.orm.relationship
    One-to-many relationship with the `Category` model, cascading deletes.
"""

from sqlalchemy import Boolean, Column, String
from sqlalchemy.orm import relationship

from .base import BaseModel


class User(BaseModel):
    """
    Represents a user entity in the application.

    :ivar external_id: Identifier of the user at the identity provider.
    :type external_id: str
    :ivar email: Email address of the user, if known.
    :type email: str
    :ivar name: Display name of the user, if known.
    :type name: str
    :ivar is_active: Indicates whether the user account is active.
    :type is_active: bool
    """

    __tablename__ = "users"

    external_id = Column(String(255), unique=True, nullable=False)
    email = Column(String(255))
    name = Column(String(255))
    is_active = Column(Boolean, default=True, nullable=False)

    # Relationships
    todos = relationship("Todo", back_populates="user", cascade="all, delete-orphan")
    categories = relationship("Category", back_populates="user", cascade="all, delete-orphan")
