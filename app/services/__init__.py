"""Domain services."""

from app.services.category_service import (
    CategoryError,
    CategoryNotFoundError,
    CategoryService,
    CategoryValidationError,
)

__all__ = [
    "CategoryError",
    "CategoryNotFoundError",
    "CategoryService",
    "CategoryValidationError",
]
