"""
Proposal budget service.

After every budget line change the proposal's ``total_budget`` is set to the
sum of its lines.
"""

from __future__ import annotations

from typing import List

from grant_portal.core.database.base import utc_now
from grant_portal.core.database.entities import BudgetLine, Proposal
from grant_portal.core.database.repositories import RepoBundle
from grant_portal.core.errors import NotFoundError
from grant_portal.core.models.io.budget import BudgetLineCreate, BudgetLineUpdate, BudgetSummary
from grant_portal.server.auth.dependencies import CurrentUser

from .audit import record_audit, snapshot
from .proposals import get_editable_proposal, get_visible_proposal


async def _recompute_total(repos: RepoBundle, proposal: Proposal) -> None:
    proposal.total_budget = await repos.budget.total_for_proposal(proposal.id)
    proposal.updated_at = utc_now()
    await repos.proposals.update(proposal)


async def _get_line(repos: RepoBundle, proposal_id: str, line_id: str) -> BudgetLine:
    line = await repos.budget.get_by_id(line_id)
    if line is None or line.proposal_id != proposal_id:
        raise NotFoundError("Budget line not found")
    return line


async def list_budget_lines(repos: RepoBundle, user: CurrentUser, proposal_id: str) -> List[BudgetLine]:
    await get_visible_proposal(repos, user, proposal_id)
    return await repos.budget.list_for_proposal(proposal_id)


async def budget_summary(repos: RepoBundle, user: CurrentUser, proposal_id: str) -> BudgetSummary:
    await get_visible_proposal(repos, user, proposal_id)
    lines = await repos.budget.list_for_proposal(proposal_id)
    return BudgetSummary(
        proposal_id=proposal_id,
        total=await repos.budget.total_for_proposal(proposal_id),
        by_category=await repos.budget.totals_by_category(proposal_id),
        line_count=len(lines),
    )


async def add_budget_line(
    repos: RepoBundle, user: CurrentUser, proposal_id: str, data: BudgetLineCreate
) -> BudgetLine:
    proposal = await get_editable_proposal(repos, user, proposal_id)
    line = await repos.budget.create(BudgetLine(**data.model_dump(), proposal_id=proposal_id))
    await _recompute_total(repos, proposal)
    await record_audit(
        repos,
        user_id=user.id,
        action="create_budget_line",
        resource_type="budget_line",
        resource_id=line.id,
        new_values=snapshot(line),
    )
    return line


async def update_budget_line(
    repos: RepoBundle, user: CurrentUser, proposal_id: str, line_id: str, data: BudgetLineUpdate
) -> BudgetLine:
    proposal = await get_editable_proposal(repos, user, proposal_id)
    line = await _get_line(repos, proposal_id, line_id)
    before = snapshot(line)

    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    for field, value in changes.items():
        setattr(line, field, value)
    line = await repos.budget.update(line)
    await _recompute_total(repos, proposal)

    await record_audit(
        repos,
        user_id=user.id,
        action="update_budget_line",
        resource_type="budget_line",
        resource_id=line.id,
        old_values=before,
        new_values=snapshot(line),
    )
    return line


async def delete_budget_line(repos: RepoBundle, user: CurrentUser, proposal_id: str, line_id: str) -> None:
    proposal = await get_editable_proposal(repos, user, proposal_id)
    line = await _get_line(repos, proposal_id, line_id)
    before = snapshot(line)
    await repos.budget.delete(line.id)
    await _recompute_total(repos, proposal)
    await record_audit(
        repos,
        user_id=user.id,
        action="delete_budget_line",
        resource_type="budget_line",
        resource_id=line_id,
        old_values=before,
    )
