"""
Unit tests for the request timing middleware.

Covers request reporting, the response headers, slow request warnings and
failures raised by downstream handlers.
"""

import itertools
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi import FastAPI, Request
from httpx import ASGITransport, AsyncClient
from starlette.responses import Response

from grant_portal.server.middleware import LogfireMiddleware

MODULE = "grant_portal.server.middleware.logfire_middleware"


def make_request(method: str = "GET", path: str = "/api/calls", headers=None) -> Request:
    request = AsyncMock(spec=Request)
    request.method = method
    request.url.path = path
    request.headers = headers or {}
    request.state = MagicMock()
    return request


class TestLogfireMiddlewareDispatch:
    """Test LogfireMiddleware.dispatch directly."""

    async def test_reports_successful_request(self):
        async def call_next(request):
            return Response(content="ok", status_code=201)

        middleware = LogfireMiddleware(app=AsyncMock())

        with patch(f"{MODULE}.log_api_request") as mock_log:
            response = await middleware.dispatch(make_request("POST", "/api/proposals"), call_next)

        assert response.status_code == 201
        kwargs = mock_log.call_args[1]
        assert kwargs["method"] == "POST"
        assert kwargs["path"] == "/api/proposals"
        assert kwargs["status_code"] == 201
        assert kwargs["duration_ms"] >= 0
        assert float(response.headers["X-Process-Time"]) >= 0
        assert len(response.headers["X-Request-ID"]) == 32

    async def test_keeps_incoming_request_id(self):
        async def call_next(request):
            return Response(status_code=200)

        middleware = LogfireMiddleware(app=AsyncMock())
        request = make_request(headers={"X-Request-ID": "req-42"})

        with patch(f"{MODULE}.log_api_request"):
            response = await middleware.dispatch(request, call_next)

        assert response.headers["X-Request-ID"] == "req-42"
        assert request.state.request_id == "req-42"

    async def test_reports_failure_and_reraises(self):
        async def call_next(request):
            raise RuntimeError("downstream failure")

        middleware = LogfireMiddleware(app=AsyncMock())

        with patch(f"{MODULE}.log_api_request") as mock_log, patch(f"{MODULE}.logger") as mock_logger:
            with pytest.raises(RuntimeError):
                await middleware.dispatch(make_request(), call_next)

        assert mock_log.call_args[1]["status_code"] == 500
        mock_logger.error.assert_called_once()

    async def test_warns_on_slow_request(self):
        async def call_next(request):
            return Response(status_code=200)

        middleware = LogfireMiddleware(app=AsyncMock())
        clock = itertools.count(0.0, 2.5)

        with patch(f"{MODULE}.log_api_request"), patch(f"{MODULE}.logger") as mock_logger, patch(
            f"{MODULE}.time.perf_counter", side_effect=lambda: next(clock)
        ):
            await middleware.dispatch(make_request(), call_next)

        mock_logger.warning.assert_called_once()
        assert "Slow API request" in mock_logger.warning.call_args[0][0]


async def test_middleware_in_application():
    app = FastAPI()
    app.add_middleware(LogfireMiddleware)

    @app.get("/ping")
    async def ping():
        return {"ok": True}

    with patch(f"{MODULE}.log_api_request") as mock_log:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://localhost") as client:
            response = await client.get("/ping")

    assert response.status_code == 200
    assert "x-process-time" in response.headers
    assert "x-request-id" in response.headers
    mock_log.assert_called_once()
    assert mock_log.call_args[1]["path"] == "/ping"
