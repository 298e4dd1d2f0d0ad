"""
Decision repository.
"""

from __future__ import annotations

from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from ..entities.reviews import Decision
from .base import AsyncBaseRepository


class DecisionRepository(AsyncBaseRepository[Decision]):
    """Repository for funding decisions, newest first."""

    order_by = "decision_date"

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Decision)

    async def list_for_proposal(self, proposal_id: str) -> List[Decision]:
        return await self.list(filters={"proposal_id": proposal_id})
