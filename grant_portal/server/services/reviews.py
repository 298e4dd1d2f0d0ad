"""
Review and decision service.

Reviews can be written while a proposal is in one of the review stages; a
review is editable by its author until it is submitted. Decisions close the
review by moving the proposal to its outcome status.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from grant_portal.core.database.base import utc_now
from grant_portal.core.database.entities import Decision, Review
from grant_portal.core.database.repositories import RepoBundle
from grant_portal.core.errors import InvalidStateError, NotFoundError, PermissionDeniedError
from grant_portal.core.logging_config import get_logger
from grant_portal.core.models.domain.enums import DecisionType, ProposalStatus, UserRoleName
from grant_portal.core.models.domain.transitions import UNDER_REVIEW
from grant_portal.core.models.io.reviews import DecisionCreate, ReviewCreate, ReviewUpdate
from grant_portal.server.auth.dependencies import CurrentUser

from .access import is_manager
from .audit import record_audit, snapshot
from .proposals import get_visible_proposal

logger = get_logger(__name__)

UNDER_REVIEW_VALUES = frozenset(status.value for status in UNDER_REVIEW)

# Proposal status each decision leads to; None leaves the proposal where it is.
DECISION_OUTCOMES: Dict[DecisionType, Optional[ProposalStatus]] = {
    DecisionType.award: ProposalStatus.approved,
    DecisionType.reject: ProposalStatus.rejected,
    DecisionType.revise: ProposalStatus.draft,
    DecisionType.defer: None,
}


def _ensure_under_review(status: str) -> None:
    if status not in UNDER_REVIEW_VALUES:
        raise InvalidStateError("Proposal is not under review")


async def list_reviews(repos: RepoBundle, user: CurrentUser, proposal_id: str) -> List[Review]:
    """Reviews of a proposal the caller may see.

    Managers and auditors see all of them; everyone else sees the reviews
    they wrote, and the PI additionally sees submitted ones.
    """
    proposal = await get_visible_proposal(repos, user, proposal_id)
    reviews = await repos.reviews.list_for_proposal(proposal_id)
    if is_manager(user) or user.has_role(UserRoleName.auditor):
        return reviews
    is_pi = proposal.pi_user_id == user.id
    return [r for r in reviews if r.reviewer_id == user.id or (is_pi and r.submitted_at is not None)]


async def create_review(repos: RepoBundle, user: CurrentUser, proposal_id: str, data: ReviewCreate) -> Review:
    """Write the caller's review of a proposal.

    Raises:
        PermissionDeniedError: The caller leads the proposal
        InvalidStateError: The proposal is not under review, or the caller already reviewed it
    """
    proposal = await get_visible_proposal(repos, user, proposal_id)
    if proposal.pi_user_id == user.id:
        raise PermissionDeniedError("You cannot review your own proposal")
    _ensure_under_review(proposal.status)
    if await repos.reviews.get_for_reviewer(proposal_id, user.id) is not None:
        raise InvalidStateError("You have already reviewed this proposal")

    review = await repos.reviews.create(
        Review(
            proposal_id=proposal_id,
            reviewer_id=user.id,
            **data.model_dump(exclude={"submit"}),
            submitted_at=utc_now() if data.submit else None,
        )
    )
    await record_audit(
        repos,
        user_id=user.id,
        action="create_review",
        resource_type="review",
        resource_id=review.id,
        new_values=snapshot(review),
    )
    return review


async def update_review(
    repos: RepoBundle, user: CurrentUser, proposal_id: str, review_id: str, data: ReviewUpdate
) -> Review:
    review = await repos.reviews.get_by_id(review_id)
    if review is None or review.proposal_id != proposal_id:
        raise NotFoundError("Review not found")
    if review.reviewer_id != user.id:
        raise PermissionDeniedError("Only the author can edit this review")
    if review.submitted_at is not None:
        raise InvalidStateError("Submitted reviews cannot be changed")

    before = snapshot(review)
    for field, value in data.model_dump(exclude_unset=True, exclude_none=True, exclude={"submit"}).items():
        setattr(review, field, value)
    if data.submit:
        review.submitted_at = utc_now()
    review = await repos.reviews.update(review)

    await record_audit(
        repos,
        user_id=user.id,
        action="update_review",
        resource_type="review",
        resource_id=review.id,
        old_values=before,
        new_values=snapshot(review),
    )
    return review


async def list_my_reviews(repos: RepoBundle, user: CurrentUser) -> List[Review]:
    return await repos.reviews.list_by_reviewer(user.id)


# =====================================================================
# Decisions
# =====================================================================


async def list_decisions(repos: RepoBundle, user: CurrentUser, proposal_id: str) -> List[Decision]:
    await get_visible_proposal(repos, user, proposal_id)
    return await repos.decisions.list_for_proposal(proposal_id)


async def record_decision(
    repos: RepoBundle, user: CurrentUser, proposal_id: str, data: DecisionCreate
) -> Decision:
    """Record a decision and move the proposal to its outcome status.

    Raises:
        InvalidStateError: The proposal is not under review
    """
    proposal = await get_visible_proposal(repos, user, proposal_id)
    _ensure_under_review(proposal.status)

    decision = await repos.decisions.create(
        Decision(proposal_id=proposal_id, approved_by=user.id, **data.model_dump())
    )

    outcome = DECISION_OUTCOMES[DecisionType(decision.decision_type)]
    if outcome is not None:
        before = proposal.status
        proposal.status = outcome.value
        proposal.updated_at = utc_now()
        await repos.proposals.update(proposal)
        logger.info(f"Decision {decision.decision_type} moved proposal {proposal_id}: {before} -> {outcome.value}")

    await record_audit(
        repos,
        user_id=user.id,
        action="record_decision",
        resource_type="decision",
        resource_id=decision.id,
        new_values=snapshot(decision),
        meta={"proposal_id": proposal_id, "proposal_status": proposal.status},
    )
    return decision
