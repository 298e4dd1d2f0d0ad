"""
Database entity models.

This package contains all database entity models organized by business domain.

Modules:
- users: portal users and their roles
- sessions: server-side web sessions
- calls: calls for proposals
- proposals: proposals and their team members
- budget_lines: proposal budget items
- attachments: uploaded files for proposals and awards
- reviews: peer reviews and funding decisions
- awards: awards, disbursements, milestones and progress reports
- audit_logs: audit trail
"""

from .attachments import Attachment
from .audit_logs import AuditLog
from .awards import Award, Disbursement, Milestone, ProgressReport
from .budget_lines import BudgetLine
from .calls import CallForProposal
from .proposals import Proposal, ProposalTeamMember
from .reviews import Decision, Review
from .sessions import WebSession
from .users import User, UserRole

__all__ = [
    "Attachment",
    "AuditLog",
    "Award",
    "BudgetLine",
    "CallForProposal",
    "Decision",
    "Disbursement",
    "Milestone",
    "ProgressReport",
    "Proposal",
    "ProposalTeamMember",
    "Review",
    "User",
    "UserRole",
    "WebSession",
]
