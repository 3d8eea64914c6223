"""Infrastructure - Database, logging."""

from app.infra.database import (
    DatabaseSession,
    close_db_engine,
    create_tables,
    get_db_session,
    verify_db_connection,
)
from app.infra.logging import get_logger, setup_logging

__all__ = [
    "DatabaseSession",
    "close_db_engine",
    "create_tables",
    "get_db_session",
    "verify_db_connection",
    "setup_logging",
    "get_logger",
]
