"""Todo-related exceptions."""

from .base import BaseAppException, NotFoundError


class TodoNotFoundError(NotFoundError):
    """Raised when a todo is not found or belongs to another user."""

    def __init__(self, message: str = "Todo not found"):
        super().__init__(message=message, error_code="TODO_NOT_FOUND")


class InvalidTodoOperationError(BaseAppException):
    """Raised when a todo write fails in the store."""

    def __init__(self, message: str = "Invalid todo operation"):
        super().__init__(message=message, status_code=400, error_code="INVALID_TODO_OPERATION")
