"""Domain enums for grant management models."""

from __future__ import annotations

from enum import Enum


class UserRoleName(str, Enum):
    """
    Roles a user can hold.

    A user may hold several roles at once; access rules check for membership.
    """

    super_admin = "super_admin"
    grant_manager = "grant_manager"
    researcher = "researcher"  # Default role for new accounts.
    reviewer = "reviewer"
    finance_officer = "finance_officer"
    ethics_officer = "ethics_officer"
    auditor = "auditor"


class CallStatus(str, Enum):
    """Lifecycle status of a call for proposals."""

    draft = "draft"
    published = "published"  # Accepting proposals.
    closed = "closed"
    archived = "archived"


class ProposalStatus(str, Enum):
    """Lifecycle status of a proposal."""

    draft = "draft"
    submitted = "submitted"
    admin_review = "admin_review"
    peer_review = "peer_review"
    panel_review = "panel_review"
    approved = "approved"
    rejected = "rejected"
    withdrawn = "withdrawn"


class TeamRole(str, Enum):
    """Role of a person on a proposal team."""

    pi = "pi"
    co_investigator = "co_investigator"
    researcher = "researcher"
    student = "student"


class BudgetCategory(str, Enum):
    """Category of a proposal budget line."""

    personnel = "personnel"
    equipment = "equipment"
    travel = "travel"
    materials = "materials"
    overhead = "overhead"
    other = "other"


class AttachmentType(str, Enum):
    """Kind of document attached to a proposal or award."""

    proposal_document = "proposal_document"
    budget_file = "budget_file"
    cv = "cv"
    ethics_approval = "ethics_approval"
    support_letter = "support_letter"
    milestone_deliverable = "milestone_deliverable"
    report = "report"
    other = "other"


class DecisionType(str, Enum):
    """Outcome recorded for a reviewed proposal."""

    award = "award"
    reject = "reject"
    defer = "defer"
    revise = "revise"


class AwardStatus(str, Enum):
    """Lifecycle status of an award."""

    pending = "pending"
    active = "active"
    suspended = "suspended"
    completed = "completed"
    terminated = "terminated"


class DisbursementStatus(str, Enum):
    """Payment status of a scheduled disbursement."""

    scheduled = "scheduled"
    pending = "pending"
    processed = "processed"
    failed = "failed"
    cancelled = "cancelled"


class MilestoneStatus(str, Enum):
    """Progress status of an award milestone."""

    pending = "pending"
    in_progress = "in_progress"
    completed = "completed"
    overdue = "overdue"
    cancelled = "cancelled"


class ReportStatus(str, Enum):
    """Status of a progress report."""

    draft = "draft"
    submitted = "submitted"
    reviewed = "reviewed"
    approved = "approved"
