"""
Repository bundle for dependency injection.

This module provides a convenience bundle of all repository instances
sharing one session, for injection into services and API handlers.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from .attachments import AttachmentRepository
from .audit_logs import AuditLogRepository
from .awards import (
    AwardRepository,
    DisbursementRepository,
    MilestoneRepository,
    ProgressReportRepository,
)
from .budget_lines import BudgetLineRepository
from .calls import CallRepository
from .dashboard import DashboardRepository
from .decisions import DecisionRepository
from .proposals import ProposalRepository, TeamMemberRepository
from .reviews import ReviewRepository
from .sessions import WebSessionRepository
from .users import UserRepository, UserRoleRepository


@dataclass(frozen=True)
class RepoBundle:
    """Convenience bundle of all SQL repositories for dependency injection."""

    users: UserRepository
    roles: UserRoleRepository
    sessions: WebSessionRepository
    calls: CallRepository
    proposals: ProposalRepository
    team: TeamMemberRepository
    budget: BudgetLineRepository
    attachments: AttachmentRepository
    reviews: ReviewRepository
    decisions: DecisionRepository
    awards: AwardRepository
    milestones: MilestoneRepository
    disbursements: DisbursementRepository
    reports: ProgressReportRepository
    audit: AuditLogRepository
    dashboard: DashboardRepository


def build_repos(session: AsyncSession) -> RepoBundle:
    """Build a RepoBundle from an existing session.

    Args:
        session: Existing async session

    Returns:
        Bundle containing all repository instances
    """
    return RepoBundle(
        users=UserRepository(session),
        roles=UserRoleRepository(session),
        sessions=WebSessionRepository(session),
        calls=CallRepository(session),
        proposals=ProposalRepository(session),
        team=TeamMemberRepository(session),
        budget=BudgetLineRepository(session),
        attachments=AttachmentRepository(session),
        reviews=ReviewRepository(session),
        decisions=DecisionRepository(session),
        awards=AwardRepository(session),
        milestones=MilestoneRepository(session),
        disbursements=DisbursementRepository(session),
        reports=ProgressReportRepository(session),
        audit=AuditLogRepository(session),
        dashboard=DashboardRepository(session),
    )
