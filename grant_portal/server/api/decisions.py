"""
Decision Endpoints.

Grant managers record the outcome of a review: award, reject, revise or defer.
"""

from typing import List

from fastapi import APIRouter, status

from grant_portal.core.models.io.reviews import DecisionCreate, DecisionRead
from grant_portal.server.auth.dependencies import CurrentUserDep
from grant_portal.server.services import reviews as review_service
from grant_portal.server.services.access import ManagerDep
from grant_portal.server.services.deps import ReposDep

router = APIRouter()


@router.get("/proposals/{proposal_id}/decisions", response_model=List[DecisionRead], summary="List Decisions")
async def list_decisions(proposal_id: str, user: CurrentUserDep, repos: ReposDep) -> List[DecisionRead]:
    decisions = await review_service.list_decisions(repos, user, proposal_id)
    return [DecisionRead.model_validate(d) for d in decisions]


@router.post(
    "/proposals/{proposal_id}/decisions",
    response_model=DecisionRead,
    status_code=status.HTTP_201_CREATED,
    summary="Record Decision",
    description="Record a decision. award -> approved, reject -> rejected, revise -> draft, defer -> unchanged.",
    responses={409: {"description": "Proposal is not under review"}},
)
async def record_decision(
    proposal_id: str, body: DecisionCreate, user: ManagerDep, repos: ReposDep
) -> DecisionRead:
    decision = await review_service.record_decision(repos, user, proposal_id, body)
    return DecisionRead.model_validate(decision)
