"""Status transition tables.

Each table maps a current status to the set of statuses it may move to.
Statuses missing from a table's keys are terminal.
"""

from __future__ import annotations

from enum import Enum
from typing import Mapping, TypeVar

from grant_portal.core.errors import InvalidStateError

from .enums import (
    AwardStatus,
    CallStatus,
    DisbursementStatus,
    MilestoneStatus,
    ProposalStatus,
    ReportStatus,
)

StatusT = TypeVar("StatusT", bound=Enum)

CALL_TRANSITIONS: Mapping[CallStatus, frozenset[CallStatus]] = {
    CallStatus.draft: frozenset({CallStatus.published, CallStatus.archived}),
    CallStatus.published: frozenset({CallStatus.closed}),
    CallStatus.closed: frozenset({CallStatus.published, CallStatus.archived}),
}

PROPOSAL_TRANSITIONS: Mapping[ProposalStatus, frozenset[ProposalStatus]] = {
    ProposalStatus.draft: frozenset({ProposalStatus.submitted, ProposalStatus.withdrawn}),
    ProposalStatus.submitted: frozenset(
        {ProposalStatus.admin_review, ProposalStatus.rejected, ProposalStatus.withdrawn}
    ),
    ProposalStatus.admin_review: frozenset(
        {ProposalStatus.peer_review, ProposalStatus.rejected, ProposalStatus.withdrawn}
    ),
    ProposalStatus.peer_review: frozenset({ProposalStatus.panel_review, ProposalStatus.rejected}),
    ProposalStatus.panel_review: frozenset(
        {ProposalStatus.approved, ProposalStatus.rejected, ProposalStatus.draft}
    ),
}

# Proposals in these states can be reviewed and decided on.
UNDER_REVIEW: frozenset[ProposalStatus] = frozenset(
    {
        ProposalStatus.submitted,
        ProposalStatus.admin_review,
        ProposalStatus.peer_review,
        ProposalStatus.panel_review,
    }
)

AWARD_TRANSITIONS: Mapping[AwardStatus, frozenset[AwardStatus]] = {
    AwardStatus.pending: frozenset({AwardStatus.active, AwardStatus.terminated}),
    AwardStatus.active: frozenset({AwardStatus.suspended, AwardStatus.completed, AwardStatus.terminated}),
    AwardStatus.suspended: frozenset({AwardStatus.active, AwardStatus.terminated}),
}

DISBURSEMENT_TRANSITIONS: Mapping[DisbursementStatus, frozenset[DisbursementStatus]] = {
    DisbursementStatus.scheduled: frozenset({DisbursementStatus.pending, DisbursementStatus.cancelled}),
    DisbursementStatus.pending: frozenset(
        {DisbursementStatus.processed, DisbursementStatus.failed, DisbursementStatus.cancelled}
    ),
    DisbursementStatus.failed: frozenset({DisbursementStatus.scheduled}),
}

MILESTONE_TRANSITIONS: Mapping[MilestoneStatus, frozenset[MilestoneStatus]] = {
    MilestoneStatus.pending: frozenset(
        {
            MilestoneStatus.in_progress,
            MilestoneStatus.completed,
            MilestoneStatus.overdue,
            MilestoneStatus.cancelled,
        }
    ),
    MilestoneStatus.in_progress: frozenset(
        {MilestoneStatus.completed, MilestoneStatus.overdue, MilestoneStatus.cancelled}
    ),
    MilestoneStatus.overdue: frozenset({MilestoneStatus.completed, MilestoneStatus.cancelled}),
}

REPORT_TRANSITIONS: Mapping[ReportStatus, frozenset[ReportStatus]] = {
    ReportStatus.draft: frozenset({ReportStatus.submitted}),
    ReportStatus.submitted: frozenset({ReportStatus.reviewed, ReportStatus.draft}),
    ReportStatus.reviewed: frozenset({ReportStatus.approved, ReportStatus.draft}),
}


def can_transition(table: Mapping[StatusT, frozenset[StatusT]], current: StatusT, target: StatusT) -> bool:
    """Return True if ``current -> target`` is listed in ``table``."""
    return target in table.get(current, frozenset())


def ensure_transition(
    table: Mapping[StatusT, frozenset[StatusT]],
    current: StatusT,
    target: StatusT,
    *,
    resource: str,
) -> None:
    """Raise ``InvalidStateError`` unless ``current -> target`` is allowed.

    Args:
        table: One of the ``*_TRANSITIONS`` mappings.
        current: Present status of the resource.
        target: Requested status.
        resource: Resource name used in the error message (e.g. ``"proposal"``).
    """
    if not can_transition(table, current, target):
        raise InvalidStateError(
            f"Cannot move {resource} from '{current.value}' to '{target.value}'",
            details={"current": current.value, "target": target.value},
        )
