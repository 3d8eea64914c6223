"""Category endpoints.

CRUD over the category store with soft delete. Every answer uses the
ApiResponse envelope; see app.api.errors for the failure shapes.
"""

from typing import Annotated

from fastapi import APIRouter, Query, status

from app.api.deps import Categories
from app.api.errors import store_failure
from app.schemas.category import (
    CategoryCreate,
    CategoryDetail,
    CategoryFilters,
    CategoryRead,
    CategoryUpdate,
)
from app.schemas.common import ApiResponse

router = APIRouter()


@router.get(
    "",
    response_model=ApiResponse[list[CategoryDetail]],
    summary="List active categories",
)
async def list_categories(
    service: Categories,
    business_id: Annotated[str | None, Query(alias="businessId")] = None,
    tenant_id: Annotated[str | None, Query(alias="tenantId")] = None,
    parent_id: Annotated[str | None, Query(alias="parentId")] = None,
) -> ApiResponse[list[CategoryDetail]]:
    """Active categories matching every supplied filter, sorted by name,
    each with its direct children expanded."""
    filters = CategoryFilters(
        business_id=business_id,
        tenant_id=tenant_id,
        parent_id=parent_id,
    )
    with store_failure("Failed to fetch categories", filters=filters.active()):
        rows = await service.list_categories(filters)

    data = [CategoryDetail.from_model(category, children) for category, children in rows]
    return ApiResponse(success=True, data=data, count=len(data))


@router.get(
    "/{category_id}",
    response_model=ApiResponse[CategoryDetail],
    summary="Get a category by id",
)
async def get_category(category_id: str, service: Categories) -> ApiResponse[CategoryDetail]:
    """Inactive categories are returned too."""
    with store_failure("Failed to fetch category", category_id=category_id):
        category, children = await service.get_category(category_id)

    return ApiResponse(success=True, data=CategoryDetail.from_model(category, children))


@router.get(
    "/{category_id}/subcategories",
    response_model=ApiResponse[list[CategoryRead]],
    summary="List active children of a category",
)
async def list_subcategories(
    category_id: str, service: Categories
) -> ApiResponse[list[CategoryRead]]:
    with store_failure("Failed to fetch subcategories", category_id=category_id):
        children = await service.list_subcategories(category_id)

    data = [CategoryRead.model_validate(child) for child in children]
    return ApiResponse(success=True, data=data, count=len(data))


@router.post(
    "",
    response_model=ApiResponse[CategoryDetail],
    status_code=status.HTTP_201_CREATED,
    summary="Create a category",
)
async def create_category(
    payload: CategoryCreate, service: Categories
) -> ApiResponse[CategoryDetail]:
    with store_failure("Failed to create category", name=payload.name):
        category = await service.create_category(payload)

    return ApiResponse(success=True, data=CategoryDetail.from_model(category, []))


@router.put(
    "/{category_id}",
    response_model=ApiResponse[CategoryRead],
    summary="Update a category",
)
async def update_category(
    category_id: str, payload: CategoryUpdate, service: Categories
) -> ApiResponse[CategoryRead]:
    """Only the fields present in the body are changed."""
    with store_failure("Failed to update category", category_id=category_id):
        category = await service.update_category(category_id, payload)

    return ApiResponse(success=True, data=CategoryRead.model_validate(category))


@router.delete(
    "/{category_id}",
    response_model=ApiResponse[None],
    summary="Soft-delete a category",
)
async def delete_category(category_id: str, service: Categories) -> ApiResponse[None]:
    """Marks the category inactive. Its children are not touched."""
    with store_failure("Failed to delete category", category_id=category_id):
        await service.delete_category(category_id)

    return ApiResponse(success=True, message="Category deleted successfully")
