"""
Models package initialization.
"""

from .base import Base, BaseModel, utcnow
from .category import Category
from .tag import Tag, TodoTag
from .todo import PRIORITY_RANK, Todo, TodoPriority, TodoStatus
from .user import User

__all__ = [
    "Base",
    "BaseModel",
    "utcnow",
    "User",
    "Category",
    "Tag",
    "TodoTag",
    "Todo",
    "TodoStatus",
    "TodoPriority",
    "PRIORITY_RANK",
]
