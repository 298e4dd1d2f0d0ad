"""
Proposal Budget Endpoints.

Budget lines are edited individually; the proposal's total budget follows
their sum.
"""

from typing import List

from fastapi import APIRouter, Response, status

from grant_portal.core.models.io.budget import (
    BudgetLineCreate,
    BudgetLineRead,
    BudgetLineUpdate,
    BudgetSummary,
)
from grant_portal.server.auth.dependencies import CurrentUserDep
from grant_portal.server.services import budget as budget_service
from grant_portal.server.services.deps import ReposDep

router = APIRouter()


@router.get(
    "/proposals/{proposal_id}/budget",
    response_model=List[BudgetLineRead],
    summary="List Budget Lines",
    responses={404: {"description": "Proposal not found"}},
)
async def list_budget(proposal_id: str, user: CurrentUserDep, repos: ReposDep) -> List[BudgetLineRead]:
    lines = await budget_service.list_budget_lines(repos, user, proposal_id)
    return [BudgetLineRead.model_validate(line) for line in lines]


@router.get(
    "/proposals/{proposal_id}/budget/summary",
    response_model=BudgetSummary,
    summary="Budget Summary",
    description="Totals of the proposal budget, overall and per category.",
)
async def get_budget_summary(proposal_id: str, user: CurrentUserDep, repos: ReposDep) -> BudgetSummary:
    return await budget_service.budget_summary(repos, user, proposal_id)


@router.post(
    "/proposals/{proposal_id}/budget",
    response_model=BudgetLineRead,
    status_code=status.HTTP_201_CREATED,
    summary="Add Budget Line",
)
async def add_budget_line(
    proposal_id: str, body: BudgetLineCreate, user: CurrentUserDep, repos: ReposDep
) -> BudgetLineRead:
    line = await budget_service.add_budget_line(repos, user, proposal_id, body)
    return BudgetLineRead.model_validate(line)


@router.put("/proposals/{proposal_id}/budget/{line_id}", response_model=BudgetLineRead, summary="Update Budget Line")
async def update_budget_line(
    proposal_id: str, line_id: str, body: BudgetLineUpdate, user: CurrentUserDep, repos: ReposDep
) -> BudgetLineRead:
    line = await budget_service.update_budget_line(repos, user, proposal_id, line_id, body)
    return BudgetLineRead.model_validate(line)


@router.delete(
    "/proposals/{proposal_id}/budget/{line_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Budget Line",
)
async def delete_budget_line(proposal_id: str, line_id: str, user: CurrentUserDep, repos: ReposDep) -> Response:
    await budget_service.delete_budget_line(repos, user, proposal_id, line_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
