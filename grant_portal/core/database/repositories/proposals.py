"""
Proposal and team member repositories.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.proposals import Proposal, ProposalTeamMember
from .base import AsyncBaseRepository, QueryBuilder


class ProposalRepository(AsyncBaseRepository[Proposal]):
    """Repository for proposals."""

    order_by = "created_at"

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Proposal)

    async def search(
        self,
        *,
        call_id: Optional[str] = None,
        status: Optional[str] = None,
        search: Optional[str] = None,
        pi_user_id: Optional[str] = None,
    ) -> List[Proposal]:
        """List proposals matching the given filters, newest first.

        Args:
            call_id: Only proposals for this call
            status: Only proposals in this status
            search: Case-insensitive substring of the title or abstract
            pi_user_id: Only proposals led by this user

        Returns:
            Matching proposals
        """
        stmt = select(Proposal).order_by(Proposal.created_at.desc())  # type: ignore[attr-defined]
        stmt = QueryBuilder.apply_filters(
            stmt, Proposal, {"call_id": call_id, "status": status, "pi_user_id": pi_user_id}
        )
        if search:
            pattern = f"%{search}%"
            stmt = stmt.where(
                or_(Proposal.title.ilike(pattern), Proposal.abstract.ilike(pattern))  # type: ignore[attr-defined]
            )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())


class TeamMemberRepository(AsyncBaseRepository[ProposalTeamMember]):
    """Repository for proposal team members."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, ProposalTeamMember)

    async def list_for_proposal(self, proposal_id: str) -> List[ProposalTeamMember]:
        return await self.list(filters={"proposal_id": proposal_id})
