"""Smoke tests for the application wiring."""

import pytest
from httpx import ASGITransport, AsyncClient

from backend.main import app


@pytest.mark.asyncio
async def test_health_check() -> None:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_routers_are_mounted() -> None:
    paths = {route.path for route in app.routes}
    assert app.title == "Daywise"
    assert {
        "/api/review-items",
        "/api/review-items/{item_id}/review",
        "/api/achievements/check",
        "/api/rewards/{reward_id}/purchase",
        "/api/planning/order",
    } <= paths
