"""Smoke tests for health and app wiring."""

from fastapi import FastAPI
from httpx import AsyncClient

from medonboard.api.v1.dependencies import get_db
from medonboard.domain.exceptions import SqlNotConfiguredException


async def test_health_returns_ok(client: AsyncClient) -> None:
    """GET /api/v1/health returns 200 and status ok."""
    response = await client.get("/api/v1/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


async def test_ready_returns_503_without_database(app: FastAPI, client: AsyncClient) -> None:
    """GET /api/v1/health/ready maps SqlNotConfiguredException to 503."""

    async def _no_db():
        raise SqlNotConfiguredException()
        yield  # pragma: no cover

    app.dependency_overrides[get_db] = _no_db
    response = await client.get("/api/v1/health/ready")
    assert response.status_code == 503
    assert response.json()["error"] == "SERVICE_UNAVAILABLE"


async def test_unknown_route_returns_json_404(client: AsyncClient) -> None:
    """Unknown paths go through the HTTP exception handler."""
    response = await client.get("/api/v1/does-not-exist")
    assert response.status_code == 404
    assert response.json()["error"] == "HTTP_ERROR"
