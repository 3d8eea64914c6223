"""Category request and response schemas.

Fields travel in camelCase on the wire (isActive, parentId, ...) and map
onto the snake_case attributes of the Category model.
"""

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

_camel_config = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    extra="ignore",
)


class CategoryCreate(BaseModel):
    """Body of POST /api/categories.

    `name` is optional here so that its absence surfaces as the service's own
    validation error rather than a schema error.
    """

    model_config = _camel_config

    name: str | None = Field(default=None, description="Unique category name")
    description: str | None = None
    icon: str | None = Field(default=None, description="Glyph identifier or URL")
    color: str | None = Field(default=None, description="Display color token")
    parent_id: str | None = Field(default=None, description="Parent category id, null for top level")
    business_id: str | None = None
    tenant_id: str | None = None


class CategoryUpdate(BaseModel):
    """Body of PUT /api/categories/{id}. Only keys present in the body are applied."""

    model_config = _camel_config

    name: str | None = None
    description: str | None = None
    icon: str | None = None
    color: str | None = None
    is_active: bool | None = None

    def changes(self) -> dict[str, Any]:
        """Fields explicitly sent by the caller, keyed by attribute name."""
        return self.model_dump(include=self.model_fields_set)


class CategoryFilters(BaseModel):
    """Equality filters of the list operation. Empty strings count as absent."""

    business_id: str | None = None
    tenant_id: str | None = None
    parent_id: str | None = None

    def active(self) -> dict[str, str]:
        return {key: value for key, value in self.model_dump().items() if value}


class CategoryRead(BaseModel):
    """A category as returned by the API."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    id: str
    name: str
    description: str | None = None
    icon: str | None = None
    color: str | None = None
    is_active: bool
    parent_id: str | None = None
    business_id: str | None = None
    tenant_id: str | None = None
    created_at: datetime
    updated_at: datetime

    @field_validator("created_at", "updated_at")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        # Stores without timezone support hand back naive UTC values
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class CategoryDetail(CategoryRead):
    """A category with its direct children expanded."""

    subcategories: list[CategoryRead] = Field(default_factory=list)

    @classmethod
    def from_model(cls, category: Any, children: list[Any]) -> "CategoryDetail":
        base = CategoryRead.model_validate(category)
        return cls(
            **base.model_dump(),
            subcategories=[CategoryRead.model_validate(child) for child in children],
        )
