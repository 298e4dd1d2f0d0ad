"""
Proposal Team Endpoints.
"""

from typing import List

from fastapi import APIRouter, Response, status

from grant_portal.core.models.io.proposals import TeamMemberCreate, TeamMemberRead
from grant_portal.server.auth.dependencies import CurrentUserDep
from grant_portal.server.services import proposals as proposal_service
from grant_portal.server.services.deps import ReposDep

router = APIRouter()


@router.get("/proposals/{proposal_id}/team", response_model=List[TeamMemberRead], summary="List Team Members")
async def list_team(proposal_id: str, user: CurrentUserDep, repos: ReposDep) -> List[TeamMemberRead]:
    members = await proposal_service.list_team(repos, user, proposal_id)
    return [TeamMemberRead.model_validate(m) for m in members]


@router.post(
    "/proposals/{proposal_id}/team",
    response_model=TeamMemberRead,
    status_code=status.HTTP_201_CREATED,
    summary="Add Team Member",
    description="Add a portal user (user_id) or an external person (name, email) to the proposal team.",
)
async def add_team_member(
    proposal_id: str, body: TeamMemberCreate, user: CurrentUserDep, repos: ReposDep
) -> TeamMemberRead:
    member = await proposal_service.add_team_member(repos, user, proposal_id, body)
    return TeamMemberRead.model_validate(member)


@router.delete(
    "/proposals/{proposal_id}/team/{member_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove Team Member",
)
async def remove_team_member(proposal_id: str, member_id: str, user: CurrentUserDep, repos: ReposDep) -> Response:
    await proposal_service.remove_team_member(repos, user, proposal_id, member_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
