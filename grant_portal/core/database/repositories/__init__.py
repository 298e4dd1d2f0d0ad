"""
Database repository layer using SQLModel.

This package contains all repository classes organized by business domain.
Each module provides async data access operations for its entities.

Modules:
- base: AsyncBaseRepository CRUD implementation and QueryBuilder utilities
- users: users and role assignments
- sessions: server-side web sessions
- calls: calls for proposals
- proposals: proposals and team members
- budget_lines: budget lines and budget aggregates
- attachments: uploaded file metadata
- reviews / decisions: review workflow
- awards: awards, milestones, disbursements and progress reports
- audit_logs: audit trail
- dashboard: read-only aggregate queries
- bundle: RepoBundle and build_repos
"""

from .bundle import RepoBundle, build_repos

__all__ = ["RepoBundle", "build_repos"]
