"""
Tag model and the todo/tag association.

Tags are global labels shared by every user. A todo's tags are stored as
``TodoTag`` rows, which are removed together with either of their parents.
"""

from sqlalchemy import Column, ForeignKey, String
from sqlalchemy.orm import relationship

from .base import UUID, Base, BaseModel


class Tag(BaseModel):
    """A shared label. ``name`` is globally unique and stored lower-cased."""

    __tablename__ = "tags"

    name = Column(String(100), nullable=False, unique=True)
    color = Column(String(7), nullable=False, default="#6b7280")

    todo_links = relationship(
        "TodoTag",
        back_populates="tag",
        cascade="all, delete-orphan",
    )


class TodoTag(Base):
    """Association row linking one todo to one tag."""

    __tablename__ = "todo_tags"

    todo_id = Column(UUID(), ForeignKey("todos.id", ondelete="CASCADE"), primary_key=True)
    tag_id = Column(UUID(), ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True, index=True)

    todo = relationship("Todo", back_populates="tag_links")
    tag = relationship("Tag", back_populates="todo_links")
