"""
Proposal service.

Creation, editing and the applicant side of the proposal lifecycle
(submit / withdraw), manager status changes and team membership.
"""

from __future__ import annotations

from decimal import Decimal
from typing import List

from grant_portal.core.database.base import utc_now
from grant_portal.core.database.entities import Proposal, ProposalTeamMember
from grant_portal.core.database.repositories import RepoBundle
from grant_portal.core.errors import InvalidStateError, NotFoundError, PermissionDeniedError
from grant_portal.core.logging_config import get_logger
from grant_portal.core.models.domain.enums import CallStatus, ProposalStatus
from grant_portal.core.models.domain.transitions import PROPOSAL_TRANSITIONS, ensure_transition
from grant_portal.core.models.io.proposals import (
    ProposalCreate,
    ProposalUpdate,
    TeamMemberCreate,
)
from grant_portal.server.auth.dependencies import CurrentUser

from .access import ensure_can_edit_proposal, ensure_can_view_proposal, scope_to_own
from .audit import record_audit, snapshot
from .lookups import get_call_or_404, get_proposal_or_404

logger = get_logger(__name__)


async def list_proposals(
    repos: RepoBundle,
    user: CurrentUser,
    *,
    call_id: str | None = None,
    status: str | None = None,
    search: str | None = None,
) -> List[Proposal]:
    return await repos.proposals.search(
        call_id=call_id,
        status=status,
        search=search,
        pi_user_id=user.id if scope_to_own(user) else None,
    )


async def get_visible_proposal(repos: RepoBundle, user: CurrentUser, proposal_id: str) -> Proposal:
    proposal = await get_proposal_or_404(repos, proposal_id)
    ensure_can_view_proposal(user, proposal)
    return proposal


async def get_editable_proposal(repos: RepoBundle, user: CurrentUser, proposal_id: str) -> Proposal:
    proposal = await get_proposal_or_404(repos, proposal_id)
    ensure_can_edit_proposal(user, proposal)
    return proposal


def _ensure_pi(user: CurrentUser, proposal: Proposal, action: str) -> None:
    if proposal.pi_user_id != user.id:
        raise PermissionDeniedError(f"Only the principal investigator can {action} this proposal")


async def create_proposal(repos: RepoBundle, user: CurrentUser, data: ProposalCreate) -> Proposal:
    """Start a draft proposal led by ``user``.

    Raises:
        NotFoundError: Unknown call
        InvalidStateError: The call is not published
    """
    call = await get_call_or_404(repos, data.call_id)
    if call.status != CallStatus.published.value:
        raise InvalidStateError("Call is not accepting proposals")

    proposal = await repos.proposals.create(
        Proposal(**data.model_dump(), status=ProposalStatus.draft.value, pi_user_id=user.id)
    )
    await record_audit(
        repos,
        user_id=user.id,
        action="create_proposal",
        resource_type="proposal",
        resource_id=proposal.id,
        new_values=snapshot(proposal),
    )
    return proposal


async def update_proposal(
    repos: RepoBundle, user: CurrentUser, proposal_id: str, data: ProposalUpdate
) -> Proposal:
    """Apply a partial update to an editable proposal.

    Raises:
        InvalidStateError: ``total_budget`` was sent for a proposal that has budget lines
    """
    proposal = await get_editable_proposal(repos, user, proposal_id)
    before = snapshot(proposal)

    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    if "total_budget" in changes and await repos.budget.list_for_proposal(proposal.id):
        raise InvalidStateError("Total budget is computed from the budget lines")
    for field, value in changes.items():
        setattr(proposal, field, value)
    proposal.updated_at = utc_now()
    proposal = await repos.proposals.update(proposal)

    await record_audit(
        repos,
        user_id=user.id,
        action="update_proposal",
        resource_type="proposal",
        resource_id=proposal.id,
        old_values=before,
        new_values=snapshot(proposal),
    )
    return proposal


async def _apply_status(
    repos: RepoBundle,
    user: CurrentUser,
    proposal: Proposal,
    target: ProposalStatus,
    action: str,
) -> Proposal:
    ensure_transition(PROPOSAL_TRANSITIONS, ProposalStatus(proposal.status), target, resource="proposal")
    before = snapshot(proposal)
    proposal.status = target.value
    if target == ProposalStatus.submitted:
        proposal.submission_date = utc_now()
    proposal.updated_at = utc_now()
    proposal = await repos.proposals.update(proposal)
    await record_audit(
        repos,
        user_id=user.id,
        action=action,
        resource_type="proposal",
        resource_id=proposal.id,
        old_values=before,
        new_values=snapshot(proposal),
    )
    logger.info(f"Proposal {proposal.id}: {before['status']} -> {proposal.status}")
    return proposal


async def _budget_total(repos: RepoBundle, proposal: Proposal) -> Decimal:
    # With budget lines the total is their sum; otherwise the declared figure.
    if await repos.budget.list_for_proposal(proposal.id):
        return await repos.budget.total_for_proposal(proposal.id)
    return proposal.total_budget or Decimal("0")


async def submit_proposal(repos: RepoBundle, user: CurrentUser, proposal_id: str) -> Proposal:
    """Submit a draft for review.

    Raises:
        PermissionDeniedError: The caller is not the PI
        InvalidStateError: Not a draft, the call is closed, or the budget exceeds the call's cap
    """
    proposal = await get_proposal_or_404(repos, proposal_id)
    _ensure_pi(user, proposal, "submit")
    if proposal.status != ProposalStatus.draft.value:
        raise InvalidStateError("Only draft proposals can be submitted")

    call = await get_call_or_404(repos, proposal.call_id)
    if call.status != CallStatus.published.value or call.close_date < utc_now():
        raise InvalidStateError("Call is closed for submissions")
    if call.budget_cap is not None and await _budget_total(repos, proposal) > call.budget_cap:
        raise InvalidStateError("Total budget exceeds the call's budget cap")

    return await _apply_status(repos, user, proposal, ProposalStatus.submitted, "submit_proposal")


async def withdraw_proposal(repos: RepoBundle, user: CurrentUser, proposal_id: str) -> Proposal:
    proposal = await get_proposal_or_404(repos, proposal_id)
    _ensure_pi(user, proposal, "withdraw")
    return await _apply_status(repos, user, proposal, ProposalStatus.withdrawn, "withdraw_proposal")


async def change_proposal_status(
    repos: RepoBundle, user: CurrentUser, proposal_id: str, target: ProposalStatus
) -> Proposal:
    """Move a proposal along the review pipeline on behalf of a manager.

    Raises:
        InvalidStateError: Illegal transition, or ``submitted``, which only
            :func:`submit_proposal` may set
    """
    if target == ProposalStatus.submitted:
        raise InvalidStateError("Proposals are submitted by their principal investigator")
    proposal = await get_proposal_or_404(repos, proposal_id)
    return await _apply_status(repos, user, proposal, target, "change_proposal_status")


# =====================================================================
# Team members
# =====================================================================


async def list_team(repos: RepoBundle, user: CurrentUser, proposal_id: str) -> List[ProposalTeamMember]:
    await get_visible_proposal(repos, user, proposal_id)
    return await repos.team.list_for_proposal(proposal_id)


async def add_team_member(
    repos: RepoBundle, user: CurrentUser, proposal_id: str, data: TeamMemberCreate
) -> ProposalTeamMember:
    await get_editable_proposal(repos, user, proposal_id)
    if data.user_id is not None and await repos.users.get_by_id(data.user_id) is None:
        raise NotFoundError("User not found")
    member = await repos.team.create(ProposalTeamMember(**data.model_dump(), proposal_id=proposal_id))
    await record_audit(
        repos,
        user_id=user.id,
        action="add_team_member",
        resource_type="proposal_team_member",
        resource_id=member.id,
        new_values=snapshot(member),
    )
    return member


async def remove_team_member(repos: RepoBundle, user: CurrentUser, proposal_id: str, member_id: str) -> None:
    await get_editable_proposal(repos, user, proposal_id)
    member = await repos.team.get_by_id(member_id)
    if member is None or member.proposal_id != proposal_id:
        raise NotFoundError("Team member not found")
    before = snapshot(member)
    await repos.team.delete(member_id)
    await record_audit(
        repos,
        user_id=user.id,
        action="remove_team_member",
        resource_type="proposal_team_member",
        resource_id=member_id,
        old_values=before,
    )
