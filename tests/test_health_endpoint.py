"""
Health checks.

- /health - liveness básico, sin dependencias
- /health/db - ejecuta SELECT 1 contra la base configurada
"""

from unittest.mock import AsyncMock

import httpx
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from app.api.deps import get_db_session
from app.main import app


class TestHealthChecks:
    def test_basic_health_endpoint(self, client: TestClient):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok", "service": "hotel-reservations-api"}

    async def test_health_over_asgi_transport(self):
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
            response = await ac.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_database_health_check(self, client: TestClient):
        response = client.get("/health/db")

        assert response.status_code == 200, f"/health/db falló: {response.json()}"
        assert response.json() == {"status": "healthy", "component": "database"}

    def test_database_health_check_reports_unavailable(self, client: TestClient):
        broken_session = AsyncMock()
        broken_session.execute.side_effect = OperationalError("SELECT 1", {}, Exception("down"))

        async def _broken():
            yield broken_session

        app.dependency_overrides[get_db_session] = _broken
        response = client.get("/health/db")

        assert response.status_code == 503
        data = response.json()
        assert data["status"] == "unhealthy"
        assert data["error"] == "Database connection failed"
