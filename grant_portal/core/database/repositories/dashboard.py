"""
Dashboard metrics queries.

Read-only aggregates across proposals, reviews, awards and calls.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from grant_portal.core.models.domain.enums import CallStatus, ProposalStatus

from ..entities.awards import Award
from ..entities.calls import CallForProposal
from ..entities.proposals import Proposal
from ..entities.reviews import Review


class DashboardRepository:
    """Aggregate queries for the dashboard."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def _scalar(self, stmt) -> Any:
        result = await self.session.execute(stmt)
        return result.scalar()

    async def metrics(self, *, year_start: datetime) -> Dict[str, Any]:
        """Compute the headline dashboard numbers.

        Args:
            year_start: Awards created on or after this moment count as this year's

        Returns:
            Mapping with active_proposals, pending_reviews, awards_ytd,
            total_award_amount and open_calls
        """
        active_proposals = await self._scalar(
            select(func.count()).select_from(Proposal).where(Proposal.status == ProposalStatus.submitted.value)
        )
        pending_reviews = await self._scalar(
            select(func.count()).select_from(Review).where(Review.submitted_at.is_(None))  # type: ignore[union-attr]
        )
        awards_ytd = await self._scalar(
            select(func.count()).select_from(Award).where(Award.created_at >= year_start)
        )
        total_award_amount = await self._scalar(
            select(func.sum(Award.award_amount)).where(Award.created_at >= year_start)
        )
        open_calls = await self._scalar(
            select(func.count())
            .select_from(CallForProposal)
            .where(CallForProposal.status == CallStatus.published.value)
        )
        return {
            "active_proposals": int(active_proposals or 0),
            "pending_reviews": int(pending_reviews or 0),
            "awards_ytd": int(awards_ytd or 0),
            "total_award_amount": Decimal(str(total_award_amount or 0)),
            "open_calls": int(open_calls or 0),
        }
