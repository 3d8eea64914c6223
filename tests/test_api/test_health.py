"""Tests for health check endpoints."""

from unittest.mock import AsyncMock, patch

import pytest
from httpx import AsyncClient


class TestHealthEndpoints:
    """Tests for health check routes."""

    @pytest.mark.asyncio
    async def test_health_endpoint(self, client: AsyncClient):
        response = await client.get("/health")
        assert response.status_code == 200

        data = response.json()
        assert data["status"] == "healthy"
        assert data["service"] == "category-directory"
        assert "version" in data
        assert "timestamp" in data
        assert data["uptime"] >= 0

    @pytest.mark.asyncio
    async def test_ready_endpoint(self, client: AsyncClient):
        response = await client.get("/ready")
        assert response.status_code == 200

        data = response.json()
        assert data["status"] == "ready"
        assert data["checks"] == {"database": True}
        assert "error" not in data

    @pytest.mark.asyncio
    async def test_ready_reports_unreachable_store(self, client: AsyncClient):
        with patch(
            "app.api.routes.health.ping",
            AsyncMock(side_effect=ConnectionRefusedError("connection refused")),
        ):
            response = await client.get("/ready")

        assert response.status_code == 503
        data = response.json()
        assert data["status"] == "not ready"
        assert data["checks"] == {"database": False}
        assert "connection refused" in data["error"]

    @pytest.mark.asyncio
    async def test_request_id_is_echoed(self, client: AsyncClient):
        response = await client.get("/health", headers={"X-Request-ID": "req-42"})
        assert response.headers["X-Request-ID"] == "req-42"
