"""Domain error types for Grant Portal.

Purpose:
- Give the service layer typed failures that do not depend on FastAPI.
- Carry the HTTP status the API layer should answer with.

Usage:
- Raise ``NotFoundError`` / ``PermissionDeniedError`` / ``InvalidStateError`` /
  ``ValidationFailedError`` from services and lookups; ``grant_portal.server.exception_handlers`` turns
  them into JSON responses with ``detail`` set to the message.
"""

from __future__ import annotations

from typing import Any, Optional


class GrantPortalError(Exception):
    """Base error for expected, user-facing failures.

    Args:
        message: Human-readable error description.
        details: Optional structured context for logs.
    """

    status_code: int = 400

    def __init__(self, message: str, *, details: Optional[Any] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class NotFoundError(GrantPortalError):
    """Raised when a requested resource does not exist (HTTP 404)."""

    status_code = 404


class PermissionDeniedError(GrantPortalError):
    """Raised when the caller lacks the role or ownership required (HTTP 403)."""

    status_code = 403

    def __init__(self, message: str = "Access denied", *, details: Optional[Any] = None) -> None:
        super().__init__(message, details=details)


class InvalidStateError(GrantPortalError):
    """Raised when an operation conflicts with the resource's current state (HTTP 409)."""

    status_code = 409


class UploadRejectedError(GrantPortalError):
    """Raised when an uploaded file is missing, of a disallowed type or too large."""

    def __init__(self, message: str, *, status_code: int = 400) -> None:
        super().__init__(message)
        self.status_code = status_code


class ValidationFailedError(GrantPortalError):
    """Raised when a request is well-formed but its values are inconsistent (HTTP 422)."""

    status_code = 422
