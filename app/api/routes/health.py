"""Health check endpoints.

/health is stateless; /ready round-trips the store.
"""

import time
from datetime import datetime, timezone

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from app import __version__
from app.api.deps import DbSession
from app.config import settings
from app.infra.database import ping
from app.infra.logging import get_logger
from app.schemas.common import HealthResponse, ReadinessResponse

router = APIRouter()
logger = get_logger(__name__)

_started_at = time.monotonic()


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Basic liveness check. Returns 200 while the process is serving."""
    return HealthResponse(
        status="healthy",
        service=settings.service_name,
        version=__version__,
        environment=settings.environment,
        timestamp=datetime.now(timezone.utc).isoformat(),
        uptime=round(time.monotonic() - _started_at, 3),
    )


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    response_model_exclude_none=True,
    responses={503: {"model": ReadinessResponse}},
)
async def ready(session: DbSession) -> ReadinessResponse | JSONResponse:
    """Readiness check.

    Pings the store; 503 while it is unreachable.
    """
    try:
        await ping(session)
    except Exception as e:
        logger.warning("Readiness check failed", error=str(e))
        await session.rollback()
        body = ReadinessResponse(
            status="not ready",
            service=settings.service_name,
            checks={"database": False},
            error=str(e),
        )
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=body.model_dump(exclude_none=True),
        )

    return ReadinessResponse(
        status="ready",
        service=settings.service_name,
        checks={"database": True},
    )
