"""
Global Exception Handler.

Last line of defence for exceptions no other handler claimed: log them with
the request context and answer 500 with an id the caller can quote.
"""

from fastapi import Request
from fastapi.responses import JSONResponse

from grant_portal.core.logging_config import get_logger
from grant_portal.core.monitoring import log_error

logger = get_logger(__name__)


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Log an unhandled exception and return a generic 500 response.

    Args:
        request: The request being served
        exc: The exception that escaped the route

    Returns:
        JSONResponse with ``detail``, ``error_id`` and ``error_type``
    """
    error_id = id(exc)
    error_type = type(exc).__name__
    context = {
        "error_id": error_id,
        "request_id": getattr(request.state, "request_id", None),
        "method": request.method,
        "path": request.url.path,
        "query_params": dict(request.query_params),
        "client": request.client.host if request.client else "unknown",
        "error_type": error_type,
    }

    logger.error(
        f"Unhandled exception [{error_id}] in {request.method} {request.url.path}: {exc}",
        exc_info=exc,
        extra=context,
    )
    log_error(error_type, str(exc), {"error_id": error_id, "path": request.url.path})

    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error", "error_id": error_id, "error_type": error_type},
    )
