"""Category-related exceptions."""

from .base import BaseAppException, ConflictError, NotFoundError


class CategoryNotFoundError(NotFoundError):
    """Raised when a category is not found or belongs to another user."""

    def __init__(self, message: str = "Category not found"):
        super().__init__(message=message, error_code="CATEGORY_NOT_FOUND")


class DuplicateCategoryError(ConflictError):
    """Raised when the user already has a category with the requested name."""

    def __init__(self, message: str = "Category with this name already exists"):
        super().__init__(message=message, error_code="DUPLICATE_CATEGORY")


class InvalidCategoryOperationError(BaseAppException):
    """Raised when a category write fails in the store."""

    def __init__(self, message: str = "Invalid category operation"):
        super().__init__(message=message, status_code=400, error_code="INVALID_CATEGORY_OPERATION")
