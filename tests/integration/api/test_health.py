"""Tests for health check endpoints."""

import pytest
from httpx import AsyncClient


class TestHealthEndpoint:
    """Tests for the health check endpoint."""

    @pytest.mark.asyncio
    async def test_health_returns_200(self, client: AsyncClient) -> None:
        response = await client.get("/health")

        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_health_returns_correct_structure(self, client: AsyncClient) -> None:
        data = (await client.get("/health")).json()

        assert data["status"] == "healthy"
        assert data["version"] == "1.0.0"
        assert "timestamp" in data
        assert "environment" in data

    @pytest.mark.asyncio
    async def test_detailed_health_reports_session(self, client: AsyncClient) -> None:
        data = (await client.get("/health/detailed")).json()

        assert data["database"] == "healthy"
        assert data["session"] == "anonymous"

    @pytest.mark.asyncio
    async def test_responses_carry_request_id(self, client: AsyncClient) -> None:
        response = await client.get("/health", headers={"X-Request-ID": "req-1"})

        assert response.headers["x-request-id"] == "req-1"

    @pytest.mark.asyncio
    async def test_detailed_health_after_login(self, authenticated_client: AsyncClient) -> None:
        data = (await authenticated_client.get("/health/detailed")).json()

        assert data["status"] == "healthy"
        assert data["session"] == "authenticated"
        assert data["profile_stale"] is False
