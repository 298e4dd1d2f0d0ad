"""
Review repository.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.reviews import Review
from .base import AsyncBaseRepository


class ReviewRepository(AsyncBaseRepository[Review]):
    """Repository for peer reviews, newest first."""

    order_by = "created_at"

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Review)

    async def list_for_proposal(self, proposal_id: str) -> List[Review]:
        return await self.list(filters={"proposal_id": proposal_id})

    async def list_by_reviewer(self, reviewer_id: str) -> List[Review]:
        return await self.list(filters={"reviewer_id": reviewer_id})

    async def get_for_reviewer(self, proposal_id: str, reviewer_id: str) -> Optional[Review]:
        stmt = select(Review).where(Review.proposal_id == proposal_id, Review.reviewer_id == reviewer_id)
        result = await self.session.execute(stmt)
        return result.scalars().first()
