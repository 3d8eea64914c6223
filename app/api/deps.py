"""FastAPI dependencies for dependency injection.

Provides:
- Database session per request
- Category service bound to that session
"""

from typing import Annotated, AsyncGenerator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.infra.database import get_db_session
from app.services.category_service import CategoryService


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Get a database session for the duration of one request."""
    async with get_db_session() as session:
        yield session


# Type aliases for cleaner annotations
DbSession = Annotated[AsyncSession, Depends(get_db)]


async def get_category_service(session: DbSession) -> CategoryService:
    """Get a category service bound to the request session."""
    return CategoryService(session)


Categories = Annotated[CategoryService, Depends(get_category_service)]
