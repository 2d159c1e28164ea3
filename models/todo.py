"""
A module defining the `Todo` ORM model representing a to-do item.

This module includes the SQLAlchemy ORM model `Todo` along with the status and
priority enumerations it stores. A todo belongs to exactly one user, may sit in
one of that user's categories, and carries any number of shared tags through
`TodoTag` association rows.

Classes:
    TodoStatus: Lifecycle states of a todo.
    TodoPriority: Priority levels, declared from lowest to highest.
    Todo: A single task with title, status, priority, due date and links to
    its owner, category and tags.
"""

from enum import Enum

from sqlalchemy import Column, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import relationship

from .base import UUID, BaseModel


class TodoStatus(str, Enum):
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class TodoPriority(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    URGENT = "URGENT"


# Rank used when sorting by priority; follows declaration order
PRIORITY_RANK = {priority.value: rank for rank, priority in enumerate(TodoPriority)}


class Todo(BaseModel):
    __tablename__ = "todos"

    user_id = Column(UUID(), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    category_id = Column(UUID(), ForeignKey("categories.id", ondelete="SET NULL"), index=True)

    title = Column(String(500), nullable=False)
    description = Column(Text)
    status = Column(String(20), default=TodoStatus.PENDING.value, nullable=False)
    priority = Column(String(20), default=TodoPriority.MEDIUM.value, nullable=False)
    due_date = Column(DateTime)
    completed_at = Column(DateTime)

    # Relationships
    user = relationship("User", back_populates="todos")
    category = relationship("Category", back_populates="todos")
    tag_links = relationship(
        "TodoTag",
        back_populates="todo",
        cascade="all, delete-orphan",
    )

    @property
    def tags(self):
        """Tags attached to this todo, expanded from the association rows."""
        return sorted((link.tag for link in self.tag_links), key=lambda tag: tag.name)
