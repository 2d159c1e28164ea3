"""
Category model for grouping a user's todos.
"""

from sqlalchemy import Column, ForeignKey, String
from sqlalchemy.orm import relationship

from .base import UUID, BaseModel


class Category(BaseModel):
    """
    A user-scoped named grouping with a color and an optional icon.

    Names are unique per user; the service checks this before every write.
    Deleting a category detaches its todos instead of deleting them.
    """

    __tablename__ = "categories"

    user_id = Column(UUID(), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    color = Column(String(7), nullable=False, default="#3b82f6")
    icon = Column(String(100))

    # Relationships
    user = relationship("User", back_populates="categories")
    todos = relationship("Todo", back_populates="category", passive_deletes=True)
