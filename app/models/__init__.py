"""SQLAlchemy models for the category store."""

from app.models.base import Base, TimestampMixin, utcnow
from app.models.category import Category, CategoryStatus

__all__ = [
    "Base",
    "TimestampMixin",
    "utcnow",
    "Category",
    "CategoryStatus",
]
