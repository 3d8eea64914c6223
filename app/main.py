"""FastAPI application entry point.

Category Directory Service: CRUD with soft delete over a hierarchy of
category records.
"""

import time
import uuid
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.datastructures import Headers
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from app import __version__
from app.api.errors import BODY_TOO_LARGE, register_exception_handlers
from app.config import settings
from app.infra.database import close_db_engine, create_tables, verify_db_connection
from app.infra.logging import get_logger, setup_logging
from app.schemas.common import error_body

# Import routers
from app.api.routes.categories import router as categories_router
from app.api.routes.health import router as health_router

# Setup logging first
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler.

    Startup:
    - Create missing tables (when enabled)
    - Verify database connection

    Shutdown:
    - Close database connections
    """
    logger.info(
        "Category service starting",
        environment=settings.environment,
        port=settings.port,
        version=__version__,
    )

    if settings.db_create_tables:
        try:
            await create_tables()
        except Exception as e:
            logger.warning("Failed to create database schema", error=str(e))

    db_ok = await verify_db_connection()
    if not db_ok:
        logger.warning("Database connection failed - /ready will report not ready")

    yield

    logger.info("Category service shutting down")
    await close_db_engine()
    logger.info("Cleanup complete")


app = FastAPI(
    title="Category Directory Service",
    description="Categories and subcategories per business and tenant",
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs" if settings.environment == "dev" else None,
    redoc_url=None,
)

# CORS middleware (mainly for local development)
if settings.environment == "dev":
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


# =============================================================================
# Middleware
# =============================================================================


class BodySizeLimitMiddleware:
    """Answer 413 once a request body exceeds settings.max_body_size.

    A declared Content-Length is checked up front; the bytes actually
    received are counted as well, so chunked bodies are bounded too.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        limit = settings.max_body_size
        content_length = Headers(scope=scope).get("content-length")
        if content_length is not None:
            try:
                length = int(content_length)
            except ValueError:
                response = JSONResponse(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    content=error_body("Invalid Content-Length header"),
                )
                await response(scope, receive, send)
                return
            if length > limit:
                await self._reject(scope, receive, send, length, limit)
                return

        received = 0
        response_started = False

        async def counting_receive() -> Message:
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > limit:
                    # Surfaces through the HTTPException handler as a 413 envelope
                    raise StarletteHTTPException(
                        status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                        detail=BODY_TOO_LARGE,
                    )
            return message

        async def tracking_send(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, counting_receive, tracking_send)
        except StarletteHTTPException as exc:
            # Raised outside of a route, where no handler turns it into a response
            too_large = exc.status_code == status.HTTP_413_REQUEST_ENTITY_TOO_LARGE
            if not too_large or response_started:
                raise
            await self._reject(scope, receive, send, received, limit)

    @staticmethod
    async def _reject(
        scope: Scope, receive: Receive, send: Send, size: int, limit: int
    ) -> None:
        logger.warning(
            "Request body too large",
            received_bytes=size,
            limit=limit,
            path=scope.get("path"),
        )
        response = JSONResponse(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            content=error_body(BODY_TOO_LARGE),
        )
        await response(scope, receive, send)


app.add_middleware(BodySizeLimitMiddleware)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log every request with a request id bound to all logs it produces."""
    request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(request_id=request_id)

    start_time = time.perf_counter()
    response = await call_next(request)
    duration_ms = int((time.perf_counter() - start_time) * 1000)

    logger.info(
        "Request completed",
        method=request.method,
        path=request.url.path,
        status_code=response.status_code,
        duration_ms=duration_ms,
    )
    response.headers["X-Request-ID"] = request_id
    return response


# =============================================================================
# Exception Handlers
# =============================================================================

register_exception_handlers(app)


# =============================================================================
# Include Routers
# =============================================================================

app.include_router(health_router, tags=["Health"])
app.include_router(categories_router, prefix="/api/categories", tags=["Categories"])


def run() -> None:
    """Serve the application with uvicorn.

    uvicorn handles SIGINT/SIGTERM: the lifespan shutdown closes the store
    connection and the process exits with status 0.
    """
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_config=None,
        access_log=False,
    )


if __name__ == "__main__":
    run()
