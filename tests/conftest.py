"""Test fixtures for the category service.

Provides:
- In-memory SQLite store per test, shared by the test and the app under test
- Async HTTP clients with the session dependency overridden
- Factory for category rows
"""
# Environment must be set before the app reads its settings
import os

os.environ["ENVIRONMENT"] = "dev"
os.environ["LOG_JSON"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["DB_CREATE_TABLES"] = "false"

from typing import AsyncGenerator, Awaitable, Callable

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from app.api.deps import get_db
from app.main import app
from app.models import Base, Category, CategoryStatus, utcnow
from app.models.category import new_category_id

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

CategoryFactory = Callable[..., Awaitable[Category]]


@pytest.fixture
async def test_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Fresh in-memory store with the schema created."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest.fixture
async def test_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


def _override_db(session_factory: async_sessionmaker[AsyncSession]) -> None:
    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        # One session per request, like the real dependency
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db


@pytest.fixture
async def client(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client against the app with the test store."""
    _override_db(session_factory)

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
async def lenient_client(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncClient, None]:
    """Client that receives the 500 response instead of re-raising app errors."""
    _override_db(session_factory)

    async with AsyncClient(
        transport=ASGITransport(app=app, raise_app_exceptions=False),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def make_category(test_session: AsyncSession) -> CategoryFactory:
    """Insert a category row directly, bypassing the API."""

    async def _make(
        name: str,
        *,
        parent_id: str | None = None,
        active: bool = True,
        **fields: str | None,
    ) -> Category:
        now = utcnow()
        category = Category(
            id=new_category_id(),
            name=name,
            parent_id=parent_id,
            status=CategoryStatus.ACTIVE if active else CategoryStatus.INACTIVE,
            created_at=now,
            updated_at=now,
            **fields,
        )
        test_session.add(category)
        await test_session.commit()
        return category

    return _make
