"""Category model - self-referencing category hierarchy."""

import enum
import uuid

from sqlalchemy import Enum, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base, TimestampMixin


def new_category_id() -> str:
    return str(uuid.uuid4())


class CategoryStatus(str, enum.Enum):
    """Lifecycle state of a category. Inactive means soft-deleted."""

    ACTIVE = "active"
    INACTIVE = "inactive"


class Category(Base, TimestampMixin):
    """A category record, optionally nested under a parent category.

    Children are not stored on the parent; they are the categories whose
    parent_id equals this id. parent_id and business_id are opaque references
    with no foreign key.
    """

    __tablename__ = "categories"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_category_id)
    name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    icon: Mapped[str | None] = mapped_column(String(255), nullable=True)
    color: Mapped[str | None] = mapped_column(String(64), nullable=True)
    status: Mapped[CategoryStatus] = mapped_column(
        Enum(
            CategoryStatus,
            name="category_status",
            native_enum=False,
            length=16,
            values_callable=lambda statuses: [s.value for s in statuses],
        ),
        nullable=False,
        default=CategoryStatus.ACTIVE,
        index=True,
    )
    parent_id: Mapped[str | None] = mapped_column(String(36), nullable=True, index=True)
    business_id: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)
    tenant_id: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)

    @property
    def is_active(self) -> bool:
        return self.status == CategoryStatus.ACTIVE

    @is_active.setter
    def is_active(self, value: bool) -> None:
        self.status = CategoryStatus.ACTIVE if value else CategoryStatus.INACTIVE

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, name='{self.name}', status={self.status.value})>"
