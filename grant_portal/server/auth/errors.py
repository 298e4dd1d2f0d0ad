"""Authentication error types."""

from __future__ import annotations

from typing import Any, Optional

from grant_portal.core.errors import GrantPortalError


class SupabaseAuthError(GrantPortalError):
    """Raised when the Supabase Auth API rejects a request or cannot be reached.

    Args:
        message: The provider's error message.
        status_code: HTTP status returned by the provider, 503 for transport failures.
        details: Decoded response body, when there was one.
    """

    def __init__(self, message: str, *, status_code: int = 400, details: Optional[Any] = None) -> None:
        super().__init__(message, details=details)
        self.status_code = status_code

    @property
    def is_unavailable(self) -> bool:
        """True when the provider could not answer (transport failure or 5xx)."""
        return self.status_code >= 500


class AuthNotConfiguredError(GrantPortalError):
    """Raised when Supabase credentials are missing from the configuration (HTTP 503)."""

    status_code = 503

    def __init__(self, message: str = "Authentication service is not configured") -> None:
        super().__init__(message)
