"""Domain enums and status transitions for grant management."""

from .enums import (
    AttachmentType,
    AwardStatus,
    BudgetCategory,
    CallStatus,
    DecisionType,
    DisbursementStatus,
    MilestoneStatus,
    ProposalStatus,
    ReportStatus,
    TeamRole,
    UserRoleName,
)

__all__ = [
    "AttachmentType",
    "AwardStatus",
    "BudgetCategory",
    "CallStatus",
    "DecisionType",
    "DisbursementStatus",
    "MilestoneStatus",
    "ProposalStatus",
    "ReportStatus",
    "TeamRole",
    "UserRoleName",
]
