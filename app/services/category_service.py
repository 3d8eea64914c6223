"""Category service - all reads and writes of the category store.

Children are derived from parent_id on every read; nothing is written to the
parent when a subcategory is created, so the parent's child list can never
drift out of sync with its children.
"""

from collections import defaultdict
from typing import Any

from sqlalchemy import ColumnElement, Select, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from app.infra.logging import get_logger
from app.models import Category, CategoryStatus, utcnow
from app.models.category import new_category_id
from app.schemas.category import CategoryCreate, CategoryFilters, CategoryUpdate

logger = get_logger(__name__)


def listed_conditions(
    entity: Any, filters: CategoryFilters | None = None
) -> list[ColumnElement[bool]]:
    """WHERE clauses of the list operation against `entity` (model or alias).

    Filter keys are attribute names of the model.
    """
    conditions: list[ColumnElement[bool]] = [entity.status == CategoryStatus.ACTIVE]
    for key, value in (filters or CategoryFilters()).active().items():
        conditions.append(getattr(entity, key) == value)
    return conditions


def children_of_listed(filters: CategoryFilters | None = None) -> Select[tuple[Category]]:
    """Children of every category the list operation returns.

    Parents are selected by a subquery so the statement size does not grow
    with the number of listed categories.
    """
    parent = aliased(Category)
    parent_ids = select(parent.id).where(*listed_conditions(parent, filters))
    return (
        select(Category)
        .where(Category.parent_id.in_(parent_ids))
        .order_by(Category.name)
    )


class CategoryError(Exception):
    """Base class for category domain errors."""


class CategoryNotFoundError(CategoryError):
    """Raised when an identifier does not resolve to a category."""

    def __init__(self, category_id: str) -> None:
        super().__init__("Category not found")
        self.category_id = category_id


class CategoryValidationError(CategoryError):
    """Raised when caller input fails a precondition."""


def _clean(value: str | None) -> str | None:
    """Treat empty strings as absent."""
    return value if value else None


def _require_name(name: str | None) -> str:
    if name is None or not name.strip():
        raise CategoryValidationError("Category name is required")
    return name


class CategoryService:
    """Category operations bound to one database session."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def list_categories(
        self, filters: CategoryFilters | None = None
    ) -> list[tuple[Category, list[Category]]]:
        """Active categories matching all filters, sorted by name.

        Returns:
            (category, children) pairs; children are all direct children,
            active or not, sorted by name.
        """
        result = await self.session.scalars(
            select(Category)
            .where(*listed_conditions(Category, filters))
            .order_by(Category.name)
        )
        categories = list(result.all())

        children = await self._grouped_children(children_of_listed(filters))
        return [(category, children.get(category.id, [])) for category in categories]

    async def get_category(self, category_id: str) -> tuple[Category, list[Category]]:
        """A category by id, whatever its status, with its direct children.

        Raises:
            CategoryNotFoundError: If the id is unknown
        """
        category = await self._load(category_id)
        children = await self._grouped_children(
            select(Category)
            .where(Category.parent_id == category.id)
            .order_by(Category.name)
        )
        return category, children.get(category.id, [])

    async def list_subcategories(self, category_id: str) -> list[Category]:
        """Active direct children of a category, sorted by name.

        An unknown parent simply has no children.
        """
        result = await self.session.scalars(
            select(Category)
            .where(
                Category.parent_id == category_id,
                Category.status == CategoryStatus.ACTIVE,
            )
            .order_by(Category.name)
        )
        return list(result.all())

    async def create_category(self, data: CategoryCreate) -> Category:
        """Persist a new active category.

        Raises:
            CategoryValidationError: If name is missing or blank
        """
        name = _require_name(data.name)
        now = utcnow()

        category = Category(
            id=new_category_id(),
            name=name,
            description=data.description,
            icon=data.icon,
            color=data.color,
            status=CategoryStatus.ACTIVE,
            parent_id=_clean(data.parent_id),
            business_id=_clean(data.business_id),
            tenant_id=_clean(data.tenant_id),
            created_at=now,
            updated_at=now,
        )
        self.session.add(category)
        await self.session.commit()

        logger.info(
            "Category created",
            category_id=category.id,
            parent_id=category.parent_id,
            tenant_id=category.tenant_id,
        )
        return category

    async def update_category(self, category_id: str, data: CategoryUpdate) -> Category:
        """Apply the fields present in `data`; other fields keep their values.

        Raises:
            CategoryNotFoundError: If the id is unknown
            CategoryValidationError: If name is sent empty or null
        """
        changes: dict[str, Any] = data.changes()
        if "name" in changes:
            changes["name"] = _require_name(changes["name"])

        category = await self._load(category_id)

        for field, value in changes.items():
            if field == "is_active":
                # null leaves the status untouched
                if value is not None:
                    category.is_active = value
            else:
                setattr(category, field, value)
        category.touch()

        await self.session.commit()

        logger.info(
            "Category updated",
            category_id=category.id,
            fields=sorted(changes),
        )
        return category

    async def delete_category(self, category_id: str) -> Category:
        """Soft-delete: mark the category inactive. Children are left alone.

        Raises:
            CategoryNotFoundError: If the id is unknown
        """
        category = await self._load(category_id)
        category.status = CategoryStatus.INACTIVE
        category.touch()

        await self.session.commit()

        logger.info("Category deactivated", category_id=category.id)
        return category

    async def _load(self, category_id: str) -> Category:
        category = await self.session.get(Category, category_id)
        if category is None:
            raise CategoryNotFoundError(category_id)
        return category

    async def _grouped_children(
        self, stmt: Select[tuple[Category]]
    ) -> dict[str, list[Category]]:
        """Run a children query and group the rows by parent id."""
        result = await self.session.scalars(stmt)

        grouped: dict[str, list[Category]] = defaultdict(list)
        for child in result.all():
            grouped[child.parent_id].append(child)
        return grouped
