"""
Award service.

Awards are granted to approved proposals and then carry milestones,
disbursements and progress reports, each with its own status lifecycle.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from grant_portal.core.database.base import utc_now
from grant_portal.core.database.entities import (
    Award,
    Disbursement,
    Milestone,
    ProgressReport,
    Proposal,
)
from grant_portal.core.database.repositories import RepoBundle
from grant_portal.core.errors import InvalidStateError, NotFoundError, PermissionDeniedError
from grant_portal.core.logging_config import get_logger
from grant_portal.core.models.domain.enums import (
    AwardStatus,
    DisbursementStatus,
    MilestoneStatus,
    ProposalStatus,
    ReportStatus,
)
from grant_portal.core.models.domain.transitions import (
    AWARD_TRANSITIONS,
    DISBURSEMENT_TRANSITIONS,
    MILESTONE_TRANSITIONS,
    REPORT_TRANSITIONS,
    ensure_transition,
)
from grant_portal.core.models.io.awards import (
    AwardCreate,
    DisbursementCreate,
    DisbursementUpdate,
    MilestoneCreate,
    MilestoneUpdate,
    ReportCreate,
)
from grant_portal.server.auth.dependencies import CurrentUser

from .access import can_view_award, is_manager, scope_to_own
from .audit import record_audit, snapshot
from .lookups import get_award_or_404, get_proposal_or_404

logger = get_logger(__name__)

# Disbursements in these states no longer count against the award amount.
RELEASED_DISBURSEMENT_STATES = frozenset({DisbursementStatus.failed.value, DisbursementStatus.cancelled.value})


async def list_awards(repos: RepoBundle, user: CurrentUser, *, status: Optional[str] = None) -> List[Award]:
    return await repos.awards.search(status=status, pi_user_id=user.id if scope_to_own(user) else None)


async def get_visible_award(repos: RepoBundle, user: CurrentUser, award_id: str) -> Tuple[Award, Proposal]:
    """Load an award with its proposal, enforcing award visibility."""
    award = await get_award_or_404(repos, award_id)
    proposal = await repos.proposals.get_by_id(award.proposal_id)
    if not can_view_award(user, award, proposal):
        raise PermissionDeniedError()
    return award, proposal


async def create_award(repos: RepoBundle, user: CurrentUser, data: AwardCreate) -> Award:
    """Grant an award to an approved proposal.

    Raises:
        NotFoundError: Unknown proposal
        InvalidStateError: The proposal is not approved or already has an award
    """
    proposal = await get_proposal_or_404(repos, data.proposal_id)
    if proposal.status != ProposalStatus.approved.value:
        raise InvalidStateError("Only approved proposals can be awarded")
    if await repos.awards.get_by_proposal(proposal.id) is not None:
        raise InvalidStateError("Proposal has already been awarded")

    award = await repos.awards.create(Award(**data.model_dump(), status=AwardStatus.pending.value))
    await record_audit(
        repos,
        user_id=user.id,
        action="create_award",
        resource_type="award",
        resource_id=award.id,
        new_values=snapshot(award),
    )
    return award


async def change_award_status(repos: RepoBundle, user: CurrentUser, award_id: str, target: AwardStatus) -> Award:
    award = await get_award_or_404(repos, award_id)
    ensure_transition(AWARD_TRANSITIONS, AwardStatus(award.status), target, resource="award")
    before = snapshot(award)
    award.status = target.value
    award = await repos.awards.update(award)
    await record_audit(
        repos,
        user_id=user.id,
        action="change_award_status",
        resource_type="award",
        resource_id=award.id,
        old_values=before,
        new_values=snapshot(award),
    )
    return award


# =====================================================================
# Milestones
# =====================================================================


async def list_milestones(repos: RepoBundle, user: CurrentUser, award_id: str) -> List[Milestone]:
    await get_visible_award(repos, user, award_id)
    return await repos.milestones.list_for_award(award_id)


async def create_milestone(repos: RepoBundle, user: CurrentUser, award_id: str, data: MilestoneCreate) -> Milestone:
    await get_award_or_404(repos, award_id)
    milestone = await repos.milestones.create(Milestone(**data.model_dump(), award_id=award_id))
    await record_audit(
        repos,
        user_id=user.id,
        action="create_milestone",
        resource_type="milestone",
        resource_id=milestone.id,
        new_values=snapshot(milestone),
    )
    return milestone


async def update_milestone(
    repos: RepoBundle, user: CurrentUser, award_id: str, milestone_id: str, data: MilestoneUpdate
) -> Milestone:
    milestone = await repos.milestones.get_by_id(milestone_id)
    if milestone is None or milestone.award_id != award_id:
        raise NotFoundError("Milestone not found")
    before = snapshot(milestone)

    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    target = changes.pop("status", None)
    if target is not None and target.value != milestone.status:
        ensure_transition(MILESTONE_TRANSITIONS, MilestoneStatus(milestone.status), target, resource="milestone")
        milestone.status = target.value
        if target == MilestoneStatus.completed:
            milestone.completed_date = utc_now()
    for field, value in changes.items():
        setattr(milestone, field, value)
    milestone = await repos.milestones.update(milestone)

    await record_audit(
        repos,
        user_id=user.id,
        action="update_milestone",
        resource_type="milestone",
        resource_id=milestone.id,
        old_values=before,
        new_values=snapshot(milestone),
    )
    return milestone


# =====================================================================
# Disbursements
# =====================================================================


async def _ensure_within_award(repos: RepoBundle, award: Award, amount, exclude_id: Optional[str] = None) -> None:
    committed = await repos.disbursements.committed_total(award.id, exclude_id=exclude_id)
    if committed + amount > award.award_amount:
        raise InvalidStateError(
            "Disbursements would exceed the award amount",
            details={"committed": str(committed), "requested": str(amount), "award_amount": str(award.award_amount)},
        )


async def list_disbursements(repos: RepoBundle, user: CurrentUser, award_id: str) -> List[Disbursement]:
    await get_visible_award(repos, user, award_id)
    return await repos.disbursements.list_for_award(award_id)


async def create_disbursement(
    repos: RepoBundle, user: CurrentUser, award_id: str, data: DisbursementCreate
) -> Disbursement:
    """Schedule a payment against an award.

    Raises:
        InvalidStateError: The committed total would exceed the award amount
    """
    award = await get_award_or_404(repos, award_id)
    await _ensure_within_award(repos, award, data.amount)
    disbursement = await repos.disbursements.create(
        Disbursement(**data.model_dump(), award_id=award_id, status=DisbursementStatus.scheduled.value)
    )
    await record_audit(
        repos,
        user_id=user.id,
        action="create_disbursement",
        resource_type="disbursement",
        resource_id=disbursement.id,
        new_values=snapshot(disbursement),
    )
    return disbursement


async def update_disbursement(
    repos: RepoBundle, user: CurrentUser, award_id: str, disbursement_id: str, data: DisbursementUpdate
) -> Disbursement:
    award = await get_award_or_404(repos, award_id)
    disbursement = await repos.disbursements.get_by_id(disbursement_id)
    if disbursement is None or disbursement.award_id != award_id:
        raise NotFoundError("Disbursement not found")
    before = snapshot(disbursement)

    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    target = changes.pop("status", None)
    if target is not None and target.value != disbursement.status:
        ensure_transition(
            DISBURSEMENT_TRANSITIONS, DisbursementStatus(disbursement.status), target, resource="disbursement"
        )
        # A failed payment rescheduled counts against the award again
        if disbursement.status in RELEASED_DISBURSEMENT_STATES and target.value not in RELEASED_DISBURSEMENT_STATES:
            await _ensure_within_award(repos, award, disbursement.amount, exclude_id=disbursement.id)
        disbursement.status = target.value
        if target == DisbursementStatus.processed:
            disbursement.processed_date = utc_now()
    for field, value in changes.items():
        setattr(disbursement, field, value)
    disbursement = await repos.disbursements.update(disbursement)

    await record_audit(
        repos,
        user_id=user.id,
        action="update_disbursement",
        resource_type="disbursement",
        resource_id=disbursement.id,
        old_values=before,
        new_values=snapshot(disbursement),
    )
    return disbursement


# =====================================================================
# Progress reports
# =====================================================================


async def _get_report(repos: RepoBundle, award_id: str, report_id: str) -> ProgressReport:
    report = await repos.reports.get_by_id(report_id)
    if report is None or report.award_id != award_id:
        raise NotFoundError("Report not found")
    return report


async def list_reports(repos: RepoBundle, user: CurrentUser, award_id: str) -> List[ProgressReport]:
    await get_visible_award(repos, user, award_id)
    return await repos.reports.list_for_award(award_id)


async def create_report(repos: RepoBundle, user: CurrentUser, award_id: str, data: ReportCreate) -> ProgressReport:
    _award, proposal = await get_visible_award(repos, user, award_id)
    if proposal.pi_user_id != user.id and not is_manager(user):
        raise PermissionDeniedError()
    report = await repos.reports.create(
        ProgressReport(**data.model_dump(), award_id=award_id, status=ReportStatus.draft.value)
    )
    await record_audit(
        repos,
        user_id=user.id,
        action="create_report",
        resource_type="report",
        resource_id=report.id,
        new_values=snapshot(report),
    )
    return report


async def _apply_report_status(
    repos: RepoBundle, user: CurrentUser, report: ProgressReport, target: ReportStatus, action: str
) -> ProgressReport:
    ensure_transition(REPORT_TRANSITIONS, ReportStatus(report.status), target, resource="report")
    before = snapshot(report)
    report.status = target.value
    if target == ReportStatus.submitted:
        report.submitted_at = utc_now()
        report.submitted_by = user.id
    report = await repos.reports.update(report)
    await record_audit(
        repos,
        user_id=user.id,
        action=action,
        resource_type="report",
        resource_id=report.id,
        old_values=before,
        new_values=snapshot(report),
    )
    return report


async def submit_report(repos: RepoBundle, user: CurrentUser, award_id: str, report_id: str) -> ProgressReport:
    _award, proposal = await get_visible_award(repos, user, award_id)
    if proposal.pi_user_id != user.id:
        raise PermissionDeniedError("Only the principal investigator can submit this report")
    report = await _get_report(repos, award_id, report_id)
    return await _apply_report_status(repos, user, report, ReportStatus.submitted, "submit_report")


async def change_report_status(
    repos: RepoBundle, user: CurrentUser, award_id: str, report_id: str, target: ReportStatus
) -> ProgressReport:
    """Review, approve or return a report on behalf of a manager.

    Raises:
        InvalidStateError: Illegal transition, or ``submitted``, which only the
            principal investigator may set through :func:`submit_report`
    """
    if target == ReportStatus.submitted:
        raise InvalidStateError("Reports are submitted by the principal investigator")
    await get_award_or_404(repos, award_id)
    report = await _get_report(repos, award_id, report_id)
    return await _apply_report_status(repos, user, report, target, "change_report_status")
