from __future__ import annotations

import pytest
from aiohttp import test_utils

from monitoring.health import HealthServer


def client_for(server: HealthServer) -> test_utils.TestClient:
    return test_utils.TestClient(test_utils.TestServer(server.app))


@pytest.mark.asyncio
async def test_health_route() -> None:
    async with client_for(HealthServer(port=0)) as client:
        response = await client.get("/health")

        assert response.status == 200
        assert await response.text() == "OK"


@pytest.mark.asyncio
async def test_root_route_reports_time() -> None:
    async with client_for(HealthServer(port=0)) as client:
        response = await client.get("/")
        text = await response.text()

    assert response.status == 200
    assert text.startswith("🤖 Keep-Alive Bot is running!\nTime: ")
    assert text.endswith("Z")


@pytest.mark.asyncio
async def test_unknown_route_is_404() -> None:
    async with client_for(HealthServer(port=0)) as client:
        response = await client.get("/metrics")

    assert response.status == 404
