"""
Proposal Endpoints.

This module provides the proposal lifecycle: drafting, editing, submission
and withdrawal by the principal investigator, and status changes by grant
managers.
"""

from typing import List, Optional

from fastapi import APIRouter, status

from grant_portal.core.models.domain.enums import ProposalStatus
from grant_portal.core.models.io.proposals import (
    ProposalCreate,
    ProposalRead,
    ProposalStatusUpdate,
    ProposalUpdate,
)
from grant_portal.server.auth.dependencies import CurrentUserDep
from grant_portal.server.services import proposals as proposal_service
from grant_portal.server.services.access import ManagerDep
from grant_portal.server.services.deps import ReposDep

router = APIRouter()


@router.get(
    "",
    response_model=List[ProposalRead],
    summary="List Proposals",
    description="List proposals visible to the caller. Researchers only see proposals they lead.",
)
async def list_proposals(
    user: CurrentUserDep,
    repos: ReposDep,
    call_id: Optional[str] = None,
    status: Optional[ProposalStatus] = None,
    search: Optional[str] = None,
) -> List[ProposalRead]:
    """
    List proposals.

    - **call_id**: only proposals for this call.
    - **status**: only proposals in this status.
    - **search**: case-insensitive match on title or abstract.
    """
    proposals = await proposal_service.list_proposals(
        repos, user, call_id=call_id, status=status.value if status else None, search=search
    )
    return [ProposalRead.model_validate(p) for p in proposals]


@router.get(
    "/{proposal_id}",
    response_model=ProposalRead,
    summary="Get Proposal",
    responses={403: {"description": "Access denied"}, 404: {"description": "Proposal not found"}},
)
async def get_proposal(proposal_id: str, user: CurrentUserDep, repos: ReposDep) -> ProposalRead:
    return ProposalRead.model_validate(await proposal_service.get_visible_proposal(repos, user, proposal_id))


@router.post(
    "",
    response_model=ProposalRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Proposal",
    description="Start a draft proposal against a published call. The caller becomes its PI.",
    responses={
        404: {"description": "Call not found"},
        409: {"description": "Call is not accepting proposals"},
    },
)
async def create_proposal(body: ProposalCreate, user: CurrentUserDep, repos: ReposDep) -> ProposalRead:
    return ProposalRead.model_validate(await proposal_service.create_proposal(repos, user, body))


@router.put(
    "/{proposal_id}",
    response_model=ProposalRead,
    summary="Update Proposal",
    responses={
        403: {"description": "Neither the PI nor a manager"},
        409: {"description": "The PI can only edit drafts"},
    },
)
async def update_proposal(
    proposal_id: str, body: ProposalUpdate, user: CurrentUserDep, repos: ReposDep
) -> ProposalRead:
    return ProposalRead.model_validate(await proposal_service.update_proposal(repos, user, proposal_id, body))


@router.post(
    "/{proposal_id}/submit",
    response_model=ProposalRead,
    summary="Submit Proposal",
    description="Submit a draft for review. The call must still be open and the budget within its cap.",
    responses={
        403: {"description": "Only the PI can submit"},
        409: {"description": "Not a draft, call closed, or budget over the cap"},
    },
)
async def submit_proposal(proposal_id: str, user: CurrentUserDep, repos: ReposDep) -> ProposalRead:
    return ProposalRead.model_validate(await proposal_service.submit_proposal(repos, user, proposal_id))


@router.post(
    "/{proposal_id}/withdraw",
    response_model=ProposalRead,
    summary="Withdraw Proposal",
    responses={403: {"description": "Only the PI can withdraw"}, 409: {"description": "Cannot withdraw now"}},
)
async def withdraw_proposal(proposal_id: str, user: CurrentUserDep, repos: ReposDep) -> ProposalRead:
    return ProposalRead.model_validate(await proposal_service.withdraw_proposal(repos, user, proposal_id))


@router.patch(
    "/{proposal_id}/status",
    response_model=ProposalRead,
    summary="Change Proposal Status",
    responses={409: {"description": "Illegal status transition"}},
)
async def change_status(
    proposal_id: str, body: ProposalStatusUpdate, user: ManagerDep, repos: ReposDep
) -> ProposalRead:
    proposal = await proposal_service.change_proposal_status(repos, user, proposal_id, body.status)
    return ProposalRead.model_validate(proposal)
