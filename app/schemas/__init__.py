"""Pydantic schemas for request/response validation."""

from app.schemas.category import (
    CategoryCreate,
    CategoryDetail,
    CategoryFilters,
    CategoryRead,
    CategoryUpdate,
)
from app.schemas.common import ApiResponse, HealthResponse, ReadinessResponse, error_body

__all__ = [
    "ApiResponse",
    "HealthResponse",
    "ReadinessResponse",
    "error_body",
    "CategoryCreate",
    "CategoryDetail",
    "CategoryFilters",
    "CategoryRead",
    "CategoryUpdate",
]
