"""Common schemas for API responses."""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field, SerializerFunctionWrapHandler, model_serializer

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Envelope wrapping every API answer.

    Unset top-level keys are left out of the JSON; fields inside `data`
    are serialized as-is, nulls included.
    """

    success: bool = Field(description="Whether the operation succeeded")
    data: T | None = Field(default=None, description="Operation result")
    error: str | None = Field(default=None, description="Error message if failed")
    count: int | None = Field(default=None, description="Number of items in data for list results")
    message: str | None = Field(default=None, description="Human readable confirmation")

    model_config = {"extra": "forbid"}

    @model_serializer(mode="wrap")
    def _drop_empty_keys(self, handler: SerializerFunctionWrapHandler) -> dict[str, Any]:
        payload = handler(self)
        return {key: value for key, value in payload.items() if value is not None}


def error_body(message: str) -> dict[str, Any]:
    """JSON body for a failed request."""
    return ApiResponse[Any](success=False, error=message).model_dump(mode="json")


class HealthResponse(BaseModel):
    """Liveness probe response."""

    status: str = Field(description="Health status")
    service: str = Field(description="Service name")
    version: str = Field(description="Service version")
    environment: str = Field(description="Environment name")
    timestamp: str = Field(description="Current server time, ISO 8601")
    uptime: float = Field(description="Seconds since the process started serving")

    model_config = {"extra": "forbid"}


class ReadinessResponse(BaseModel):
    """Readiness probe response."""

    status: str = Field(description="ready or not ready")
    service: str = Field(description="Service name")
    checks: dict[str, bool] = Field(default_factory=dict, description="Individual dependency checks")
    error: str | None = Field(default=None, description="Failure detail when not ready")

    model_config = {"extra": "forbid"}
