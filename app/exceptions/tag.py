"""Tag-related exceptions."""

from typing import Any

from .base import BaseAppException, ConflictError, NotFoundError


class TagNotFoundError(NotFoundError):
    """Raised when one or more tags do not exist."""

    def __init__(self, message: str = "Tag not found", details: dict[str, Any] | None = None):
        super().__init__(message=message, error_code="TAG_NOT_FOUND", details=details)


class DuplicateTagError(ConflictError):
    """Raised when renaming a tag onto a name another tag already uses."""

    def __init__(self, message: str = "Tag with this name already exists"):
        super().__init__(message=message, error_code="DUPLICATE_TAG")


class InvalidTagOperationError(BaseAppException):
    """Raised when a tag write fails in the store."""

    def __init__(self, message: str = "Invalid tag operation"):
        super().__init__(message=message, status_code=400, error_code="INVALID_TAG_OPERATION")
