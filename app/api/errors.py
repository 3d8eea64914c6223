"""Mapping of failures onto the JSON response envelope.

Validation problems answer 400, unknown ids 404, store failures 500 with a
per-operation message, anything unexpected 500 "Internal server error".
Internal details are logged, never returned.
"""

from contextlib import contextmanager
from typing import Any, Iterator

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.infra.logging import get_logger
from app.schemas.common import error_body
from app.services.category_service import CategoryNotFoundError, CategoryValidationError

logger = get_logger(__name__)

ROUTE_NOT_FOUND = "Route not found"
INTERNAL_ERROR = "Internal server error"
BODY_TOO_LARGE = "Request body too large"


class ApiError(Exception):
    """An error answered with a given status code and public message."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message


@contextmanager
def store_failure(message: str, **context: Any) -> Iterator[None]:
    """Turn store exceptions raised inside the block into a 500 ApiError.

    Example:
        with store_failure("Failed to fetch categories"):
            rows = await service.list_categories(filters)
    """
    try:
        yield
    except SQLAlchemyError as e:
        logger.error(
            message,
            error=str(e),
            error_type=type(e).__name__,
            **context,
        )
        raise ApiError(status.HTTP_500_INTERNAL_SERVER_ERROR, message) from e


def _describe_validation(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    if location:
        return f"Invalid request: {location}: {first.get('msg', 'invalid value')}"
    return f"Invalid request: {first.get('msg', 'invalid value')}"


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.message))


async def not_found_handler(request: Request, exc: CategoryNotFoundError) -> JSONResponse:
    logger.info("Category not found", category_id=exc.category_id, path=request.url.path)
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content=error_body(str(exc)))


async def validation_error_handler(request: Request, exc: CategoryValidationError) -> JSONResponse:
    logger.info("Rejected invalid category input", error=str(exc), path=request.url.path)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=error_body(str(exc)))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    message = _describe_validation(exc)
    logger.info("Rejected malformed request", error=message, path=request.url.path)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=error_body(message))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    # Unknown paths and unsupported methods are both "no such route"
    if exc.status_code in (status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED):
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content=error_body(ROUTE_NOT_FOUND),
        )
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unhandled exception",
        error=str(exc),
        error_type=type(exc).__name__,
        path=request.url.path,
        exc_info=True,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(INTERNAL_ERROR),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the envelope handlers on an application."""
    app.add_exception_handler(ApiError, api_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(CategoryNotFoundError, not_found_handler)  # type: ignore[arg-type]
    app.add_exception_handler(CategoryValidationError, validation_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, request_validation_handler)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, unhandled_exception_handler)
