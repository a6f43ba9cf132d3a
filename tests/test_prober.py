from __future__ import annotations

import httpx
import pytest

from monitoring.prober import HTTPProber, is_success_status


def prober_for(handler) -> HTTPProber:
    return HTTPProber(timeout=30, user_agent="KeepAliveBot/test", transport=httpx.MockTransport(handler))


@pytest.mark.parametrize(
    ("status_code", "expected"),
    [(199, False), (200, True), (204, True), (302, True), (399, True), (400, False), (503, False)],
)
def test_success_status_range(status_code: int, expected: bool) -> None:
    assert is_success_status(status_code) is expected


@pytest.mark.asyncio
async def test_ok_response_is_success() -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["agent"] = request.headers.get("User-Agent")
        return httpx.Response(200, text="alive")

    result = await prober_for(handler).probe("https://mybot.example.com")

    assert result.success is True
    assert result.status_code == 200
    assert result.error_type is None
    assert seen == {"method": "GET", "agent": "KeepAliveBot/test"}


@pytest.mark.asyncio
async def test_service_unavailable_is_failure() -> None:
    result = await prober_for(lambda request: httpx.Response(503)).probe("https://mybot.example.com")

    assert result.success is False
    assert result.status_code == 503
    assert result.diagnostic == "HTTP 503"


@pytest.mark.asyncio
async def test_not_modified_counts_as_alive() -> None:
    result = await prober_for(lambda request: httpx.Response(304)).probe("http://mybot.example.com")

    assert result.success is True


@pytest.mark.asyncio
async def test_redirect_is_followed() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/":
            return httpx.Response(301, headers={"Location": "https://mybot.example.com/home"})
        return httpx.Response(200)

    result = await prober_for(handler).probe("https://mybot.example.com/")

    assert result.success is True
    assert result.status_code == 200


@pytest.mark.asyncio
async def test_connection_refused_is_failure_not_exception() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    result = await prober_for(handler).probe("https://down.example.com")

    assert result.success is False
    assert result.status_code is None
    assert result.error_type == "ConnectError"


@pytest.mark.asyncio
async def test_timeout_is_failure() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    result = await prober_for(handler).probe("https://slow.example.com")

    assert result.success is False
    assert result.error_type == "Timeout"


@pytest.mark.asyncio
async def test_unexpected_handler_error_is_failure() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise RuntimeError("boom")

    result = await prober_for(handler).probe("https://weird.example.com")

    assert result.success is False
    assert result.error_type == "RuntimeError"
