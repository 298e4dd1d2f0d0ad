"""
Logfire Middleware for FastAPI.

Times every request, tags it with a request id and reports it through
``grant_portal.core.monitoring``. Responses carry ``X-Request-ID`` and
``X-Process-Time`` (milliseconds).
"""

import time
import uuid
from typing import Callable

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from grant_portal.core.logging_config import get_logger
from grant_portal.core.monitoring import log_api_request

logger = get_logger(__name__)

SLOW_REQUEST_MS = 1000
REQUEST_ID_HEADER = "X-Request-ID"


class LogfireMiddleware(BaseHTTPMiddleware):
    """Report method, path, status and duration of each API request."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id
        method = request.method
        path = request.url.path
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as e:
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.error(
                f"API request failed: {method} {path} [{request_id}]",
                exc_info=True,
                extra={"request_id": request_id, "duration_ms": elapsed_ms, "error": str(e)},
            )
            log_api_request(method=method, path=path, status_code=500, duration_ms=elapsed_ms)
            raise

        elapsed_ms = (time.perf_counter() - started) * 1000
        log_api_request(method=method, path=path, status_code=response.status_code, duration_ms=elapsed_ms)
        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers["X-Process-Time"] = f"{elapsed_ms:.2f}"

        if elapsed_ms > SLOW_REQUEST_MS:
            logger.warning(
                f"Slow API request: {method} {path} took {elapsed_ms:.2f}ms",
                extra={"request_id": request_id, "status_code": response.status_code},
            )
        return response
