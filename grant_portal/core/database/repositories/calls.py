"""
Call for proposals repository.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from ..entities.calls import CallForProposal
from .base import AsyncBaseRepository


class CallRepository(AsyncBaseRepository[CallForProposal]):
    """Repository for calls for proposals, newest first."""

    order_by = "created_at"

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, CallForProposal)

    async def list_by_status(self, status: Optional[str] = None) -> List[CallForProposal]:
        return await self.list(filters={"status": status})
