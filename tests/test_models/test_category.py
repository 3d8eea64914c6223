"""Tests for Category model."""

from app.models.category import Category, CategoryStatus, new_category_id


def test_category_tablename():
    """Category should map to categories table."""
    assert Category.__tablename__ == "categories"


def test_category_has_columns():
    columns = {c.name for c in Category.__table__.columns}
    assert columns == {
        "id",
        "name",
        "description",
        "icon",
        "color",
        "status",
        "parent_id",
        "business_id",
        "tenant_id",
        "created_at",
        "updated_at",
    }


def test_name_is_unique_and_required():
    name = Category.__table__.columns["name"]
    assert name.unique is True
    assert name.nullable is False


def test_parent_id_has_no_foreign_key():
    assert not Category.__table__.columns["parent_id"].foreign_keys


def test_is_active_reflects_status():
    category = Category(name="Food", status=CategoryStatus.ACTIVE)
    assert category.is_active is True

    category.is_active = False
    assert category.status == CategoryStatus.INACTIVE


def test_new_category_id_is_opaque_and_unique():
    first, second = new_category_id(), new_category_id()
    assert first != second
    assert len(first) == 36
