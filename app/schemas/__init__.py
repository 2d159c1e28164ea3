# ruff: noqa: F403, F401
"""Schemas package initialization."""

# Import all schemas to ensure they're registered
from .base import *
from .category import *
from .tag import *
from .todo import *
from .todo import TodoListResponse, TodoResponse
from .user import *

# Rebuild models after all schemas are loaded
TodoResponse.model_rebuild()
TodoListResponse.model_rebuild()
