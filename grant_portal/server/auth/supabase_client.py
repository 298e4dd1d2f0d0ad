"""
Supabase Auth client.

A thin async client for the Supabase Auth (GoTrue) REST API. Every request
carries the service-role key as ``apikey``; user-scoped calls send the user's
access token as the bearer token instead of the key.
"""

from __future__ import annotations

import time
from typing import Any, Dict, Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field

from grant_portal.core.logging_config import get_logger
from grant_portal.server.core.config import settings

from .errors import AuthNotConfiguredError, SupabaseAuthError

logger = get_logger(__name__)


class SupabaseUser(BaseModel):
    """User object as returned by Supabase Auth."""

    model_config = ConfigDict(extra="ignore")

    id: str
    email: Optional[str] = None
    user_metadata: Dict[str, Any] = Field(default_factory=dict)


class SupabaseSession(BaseModel):
    """Token pair returned by the token endpoint."""

    model_config = ConfigDict(extra="ignore")

    access_token: str
    refresh_token: str
    expires_in: Optional[int] = None
    expires_at: Optional[int] = None
    user: SupabaseUser

    def model_post_init(self, __context: Any) -> None:
        if self.expires_at is None and self.expires_in is not None:
            self.expires_at = int(time.time()) + self.expires_in


def _error_message(response: httpx.Response) -> tuple[str, Any]:
    try:
        body = response.json()
    except ValueError:
        return response.text or f"Authentication failed ({response.status_code})", None
    if isinstance(body, dict):
        for key in ("msg", "error_description", "message", "error"):
            if body.get(key):
                return str(body[key]), body
    return f"Authentication failed ({response.status_code})", body


class SupabaseAuthClient:
    """Async client for the Supabase Auth REST API.

    Args:
        base_url: Supabase project URL, e.g. ``https://xyz.supabase.co``.
        service_role_key: Service-role API key.
        timeout: Request timeout in seconds.
        client: Pre-built ``httpx.AsyncClient`` (tests pass one with a mock transport).
    """

    def __init__(
        self,
        base_url: str,
        service_role_key: str,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._key = service_role_key
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, str]] = None,
        access_token: Optional[str] = None,
    ) -> Dict[str, Any]:
        headers = {
            "apikey": self._key,
            "Authorization": f"Bearer {access_token or self._key}",
        }
        try:
            response = await self._client.request(
                method, f"{self._base_url}{path}", json=json, params=params, headers=headers
            )
        except httpx.HTTPError as e:
            logger.error(f"Supabase Auth request failed: {method} {path}: {e}")
            raise SupabaseAuthError("Authentication service unavailable", status_code=503) from e

        if response.is_error:
            message, body = _error_message(response)
            logger.debug(f"Supabase Auth returned {response.status_code} for {method} {path}: {message}")
            # Provider-side failures surface as 503 like transport errors
            status_code = 503 if response.status_code >= 500 else response.status_code
            raise SupabaseAuthError(message, status_code=status_code, details=body)
        return response.json()

    async def create_user(
        self, email: str, password: str, user_metadata: Optional[Dict[str, Any]] = None
    ) -> SupabaseUser:
        """Create a confirmed user through the admin API."""
        data = await self._request(
            "POST",
            "/auth/v1/admin/users",
            json={
                "email": email,
                "password": password,
                "email_confirm": True,
                "user_metadata": user_metadata or {},
            },
        )
        # Some GoTrue versions wrap the user object
        return SupabaseUser.model_validate(data.get("user", data))

    async def sign_in_with_password(self, email: str, password: str) -> SupabaseSession:
        data = await self._request(
            "POST",
            "/auth/v1/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        return SupabaseSession.model_validate(data)

    async def refresh_session(self, refresh_token: str) -> SupabaseSession:
        data = await self._request(
            "POST",
            "/auth/v1/token",
            params={"grant_type": "refresh_token"},
            json={"refresh_token": refresh_token},
        )
        return SupabaseSession.model_validate(data)

    async def get_user(self, access_token: str) -> SupabaseUser:
        """Resolve the user an access token belongs to."""
        data = await self._request("GET", "/auth/v1/user", access_token=access_token)
        return SupabaseUser.model_validate(data)

    async def aclose(self) -> None:
        await self._client.aclose()


def profile_from_supabase_user(user: SupabaseUser) -> Dict[str, Optional[str]]:
    """Derive local profile fields from Supabase user metadata.

    ``first_name``/``last_name`` win; otherwise ``full_name`` (or ``name``) is
    split on the first space.
    """
    meta = user.user_metadata or {}
    first_name = meta.get("first_name")
    last_name = meta.get("last_name")
    if not first_name and not last_name:
        full_name = (meta.get("full_name") or meta.get("name") or "").strip()
        if full_name:
            first_name, _, last_name = full_name.partition(" ")
    return {
        "email": user.email,
        "first_name": first_name or None,
        "last_name": last_name or None,
        "profile_image_url": meta.get("avatar_url"),
    }


_auth_client: Optional[SupabaseAuthClient] = None


def get_auth_client() -> SupabaseAuthClient:
    """FastAPI dependency returning the process-wide Supabase Auth client.

    Raises:
        AuthNotConfiguredError: If the Supabase URL or service-role key is missing
    """
    global _auth_client
    if _auth_client is None:
        config = settings.supabase
        if not config.is_configured:
            raise AuthNotConfiguredError()
        _auth_client = SupabaseAuthClient(config.url, config.service_role_key, timeout=config.timeout)
        logger.info(f"Supabase Auth client created for {config.url}")
    return _auth_client


async def close_auth_client() -> None:
    """Close the shared client, if one was created."""
    global _auth_client
    if _auth_client is not None:
        await _auth_client.aclose()
        _auth_client = None
