"""Async database access for the category store.

Provides:
- Process-wide async SQLAlchemy engine and session factory
- Per-unit-of-work session context manager
- Schema creation, connectivity ping and shutdown helpers
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from app.config import settings
from app.infra.logging import get_logger
from app.models import Base

logger = get_logger(__name__)

# Type alias for dependency injection
DatabaseSession = AsyncSession

# Global engine (initialized lazily, disposed on app shutdown)
_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def get_engine() -> AsyncEngine:
    """Get or create the async database engine."""
    global _engine

    if _engine is None:
        options: dict[str, Any] = {"echo": settings.debug}
        if not settings.database_is_sqlite:
            options.update(
                pool_size=settings.db_pool_size,
                max_overflow=settings.db_pool_max_overflow,
                pool_pre_ping=True,
                pool_recycle=1800,
            )

        logger.info(
            "Creating database engine",
            pool_size=options.get("pool_size"),
            max_overflow=options.get("max_overflow"),
        )
        _engine = create_async_engine(settings.database_url, **options)

    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Get or create the session factory."""
    global _session_factory

    if _session_factory is None:
        _session_factory = async_sessionmaker(
            bind=get_engine(),
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    return _session_factory


@asynccontextmanager
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Get an async database session.

    Commits on clean exit, rolls back and re-raises on error.

    Example:
        async with get_db_session() as session:
            category = await session.get(Category, category_id)
    """
    session = get_session_factory()()

    try:
        yield session
        await session.commit()

    except SQLAlchemyError as e:
        await session.rollback()
        logger.error("Database session error", error=str(e))
        raise

    except Exception:
        await session.rollback()
        raise

    finally:
        await session.close()


async def create_tables(engine: AsyncEngine | None = None) -> None:
    """Create any missing tables for the registered models."""
    engine = engine or get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database schema ensured", tables=sorted(Base.metadata.tables))


async def ping(session: AsyncSession) -> None:
    """Round-trip a trivial statement; raises if the store is unreachable."""
    await session.execute(text("SELECT 1"))


async def verify_db_connection() -> bool:
    """Verify database connectivity.

    Returns:
        True if connection successful, False otherwise
    """
    try:
        async with get_db_session() as session:
            await ping(session)
            logger.info("Database connection verified")
            return True
    except Exception as e:
        logger.error("Database connection failed", error=str(e))
        return False


async def close_db_engine() -> None:
    """Close the database engine and all connections.

    Call this during application shutdown.
    """
    global _engine, _session_factory

    if _engine is not None:
        logger.info("Closing database engine")
        await _engine.dispose()
        _engine = None
        _session_factory = None
