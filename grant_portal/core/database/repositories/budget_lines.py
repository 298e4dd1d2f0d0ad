"""
Budget line repository.

Besides CRUD this repository computes the aggregates the proposal budget
depends on.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Dict, List

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.budget_lines import BudgetLine
from .base import AsyncBaseRepository


class BudgetLineRepository(AsyncBaseRepository[BudgetLine]):
    """Repository for proposal budget lines."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, BudgetLine)

    async def list_for_proposal(self, proposal_id: str) -> List[BudgetLine]:
        return await self.list(filters={"proposal_id": proposal_id})

    async def total_for_proposal(self, proposal_id: str) -> Decimal:
        """Sum of all line amounts of a proposal (0 when it has none)."""
        stmt = select(func.sum(BudgetLine.amount)).where(BudgetLine.proposal_id == proposal_id)
        result = await self.session.execute(stmt)
        return Decimal(str(result.scalar() or 0))

    async def totals_by_category(self, proposal_id: str) -> Dict[str, Decimal]:
        """Sum of line amounts per category for a proposal."""
        stmt = (
            select(BudgetLine.category, func.sum(BudgetLine.amount))
            .where(BudgetLine.proposal_id == proposal_id)
            .group_by(BudgetLine.category)
        )
        result = await self.session.execute(stmt)
        return {category: Decimal(str(total or 0)) for category, total in result.all()}
