"""
Web session repository.

Low-level persistence for server-side sessions; token generation and expiry
policy live in ``grant_portal.server.auth.sessions``.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from ..entities.sessions import WebSession
from .base import AsyncBaseRepository


class WebSessionRepository(AsyncBaseRepository[WebSession]):
    """Repository for rows of the ``sessions`` table."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, WebSession)

    async def put(self, sid: str, data: Dict[str, Any], expire: datetime) -> WebSession:
        """Insert or replace the payload and expiry stored under ``sid``."""
        row = await self.get_by_id(sid)
        if row is None:
            return await self.create(WebSession(sid=sid, sess=data, expire=expire))
        row.sess = data
        row.expire = expire
        return await self.update(row)

    async def purge_expired(self, now: datetime) -> int:
        """Delete every session whose expiry is before ``now``.

        Returns:
            Number of rows removed
        """
        result = await self.session.execute(delete(WebSession).where(WebSession.expire < now))
        await self.session.commit()
        return result.rowcount or 0
