"""
Award repositories.

This module provides data access for awards and the records tracked against
them: milestones, disbursements and progress reports.
"""

from __future__ import annotations

from decimal import Decimal
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from grant_portal.core.models.domain.enums import DisbursementStatus

from ..entities.awards import Award, Disbursement, Milestone, ProgressReport
from ..entities.proposals import Proposal
from .base import AsyncBaseRepository


class AwardRepository(AsyncBaseRepository[Award]):
    """Repository for awards, newest first."""

    order_by = "created_at"

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Award)

    async def get_by_proposal(self, proposal_id: str) -> Optional[Award]:
        stmt = select(Award).where(Award.proposal_id == proposal_id)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def search(self, *, status: Optional[str] = None, pi_user_id: Optional[str] = None) -> List[Award]:
        """List awards, optionally by status and by the PI of the awarded proposal.

        Args:
            status: Only awards in this status
            pi_user_id: Only awards on proposals led by this user

        Returns:
            Matching awards, newest first
        """
        stmt = select(Award).order_by(Award.created_at.desc())  # type: ignore[attr-defined]
        if status is not None:
            stmt = stmt.where(Award.status == status)
        if pi_user_id is not None:
            stmt = stmt.join(Proposal, Proposal.id == Award.proposal_id).where(Proposal.pi_user_id == pi_user_id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())


class MilestoneRepository(AsyncBaseRepository[Milestone]):
    """Repository for award milestones."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Milestone)

    async def list_for_award(self, award_id: str) -> List[Milestone]:
        stmt = select(Milestone).where(Milestone.award_id == award_id).order_by(Milestone.due_date)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())


class DisbursementRepository(AsyncBaseRepository[Disbursement]):
    """Repository for award disbursements."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Disbursement)

    async def list_for_award(self, award_id: str) -> List[Disbursement]:
        stmt = select(Disbursement).where(Disbursement.award_id == award_id).order_by(Disbursement.scheduled_date)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def committed_total(self, award_id: str, *, exclude_id: Optional[str] = None) -> Decimal:
        """Sum of disbursements still expected to be paid out for an award.

        Failed and cancelled disbursements do not count.

        Args:
            award_id: Award to total
            exclude_id: Disbursement to leave out (the one being changed)

        Returns:
            The committed amount
        """
        stmt = select(func.sum(Disbursement.amount)).where(
            Disbursement.award_id == award_id,
            Disbursement.status.not_in(  # type: ignore[attr-defined]
                [DisbursementStatus.failed.value, DisbursementStatus.cancelled.value]
            ),
        )
        if exclude_id is not None:
            stmt = stmt.where(Disbursement.id != exclude_id)
        result = await self.session.execute(stmt)
        return Decimal(str(result.scalar() or 0))


class ProgressReportRepository(AsyncBaseRepository[ProgressReport]):
    """Repository for award progress reports, newest first."""

    order_by = "created_at"

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, ProgressReport)

    async def list_for_award(self, award_id: str) -> List[ProgressReport]:
        return await self.list(filters={"award_id": award_id})
