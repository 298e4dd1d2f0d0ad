"""
Domain Exception Handler.

Turns the typed errors raised by the service layer into JSON responses that
look like FastAPI's own ``HTTPException`` responses (``{"detail": ...}``).
"""

from fastapi import Request
from fastapi.responses import JSONResponse

from grant_portal.core.errors import GrantPortalError
from grant_portal.core.logging_config import get_logger

logger = get_logger(__name__)


async def domain_exception_handler(request: Request, exc: GrantPortalError) -> JSONResponse:
    """
    Map a ``GrantPortalError`` to its HTTP status.

    Args:
        request: The HTTP request that caused the exception
        exc: The domain error

    Returns:
        JSONResponse with ``detail`` set to the error message
    """
    level = logger.warning if exc.status_code >= 500 else logger.debug
    level(
        f"{type(exc).__name__} in {request.method} {request.url.path}: {exc.message}",
        extra={"status_code": exc.status_code, "details": exc.details},
    )
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})
