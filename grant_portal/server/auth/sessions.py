"""
Server-side session store.

Session payloads live in the ``sessions`` table; the client only holds the
opaque session id in an HTTP-only cookie.
"""

from __future__ import annotations

import secrets
from datetime import timedelta
from typing import Any, Dict, Optional

from fastapi import Response

from grant_portal.core.database.base import utc_now
from grant_portal.core.database.repositories.sessions import WebSessionRepository
from grant_portal.core.logging_config import get_logger
from grant_portal.server.core.config import SessionConfig

logger = get_logger(__name__)


class SessionStore:
    """Create, read, refresh and destroy server-side sessions.

    Args:
        repo: Repository over the ``sessions`` table.
        ttl_seconds: Default lifetime of a session.
    """

    def __init__(self, repo: WebSessionRepository, ttl_seconds: int) -> None:
        self.repo = repo
        self.ttl_seconds = ttl_seconds

    async def create(self, data: Dict[str, Any], ttl: Optional[int] = None) -> str:
        sid = secrets.token_urlsafe(32)
        await self.save(sid, data, ttl)
        return sid

    async def get(self, sid: str) -> Optional[Dict[str, Any]]:
        """Return the payload for ``sid``; expired sessions are deleted and yield None."""
        row = await self.repo.get_by_id(sid)
        if row is None:
            return None
        if row.expire <= utc_now():
            logger.debug("Dropping expired session")
            await self.repo.delete(sid)
            return None
        return dict(row.sess)

    async def save(self, sid: str, data: Dict[str, Any], ttl: Optional[int] = None) -> None:
        expire = utc_now() + timedelta(seconds=ttl or self.ttl_seconds)
        await self.repo.put(sid, data, expire)

    async def destroy(self, sid: str) -> None:
        await self.repo.delete(sid)

    async def purge_expired(self) -> int:
        removed = await self.repo.purge_expired(utc_now())
        if removed:
            logger.info(f"Purged {removed} expired sessions")
        return removed


def set_session_cookie(response: Response, sid: str, config: SessionConfig) -> None:
    response.set_cookie(
        key=config.cookie_name,
        value=sid,
        max_age=config.ttl_seconds,
        httponly=True,
        samesite="lax",
        secure=config.secure_cookie,
        path="/",
    )


def clear_session_cookie(response: Response, config: SessionConfig) -> None:
    response.delete_cookie(
        key=config.cookie_name,
        httponly=True,
        samesite="lax",
        secure=config.secure_cookie,
        path="/",
    )


def session_payload(auth_session: Any) -> Dict[str, Any]:
    """Build the ``user`` entry stored in a session from a Supabase token response."""
    return {
        "id": auth_session.user.id,
        "email": auth_session.user.email,
        "access_token": auth_session.access_token,
        "refresh_token": auth_session.refresh_token,
        "expires_at": auth_session.expires_at,
    }
