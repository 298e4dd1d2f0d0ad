"""
Call for Proposals Endpoints.

Listing and reading calls is public; creating and updating them requires
authentication (and a manager role for updates).
"""

from typing import List, Optional

from fastapi import APIRouter, status

from grant_portal.core.models.domain.enums import CallStatus
from grant_portal.core.models.io.calls import CallCreate, CallRead, CallUpdate
from grant_portal.server.auth.dependencies import CurrentUserDep
from grant_portal.server.services import calls as call_service
from grant_portal.server.services.access import ManagerDep
from grant_portal.server.services.deps import ReposDep
from grant_portal.server.services.lookups import get_call_or_404

router = APIRouter()


@router.get(
    "",
    response_model=List[CallRead],
    summary="List Calls",
    description="List calls for proposals, newest first, optionally filtered by status.",
)
async def list_calls(repos: ReposDep, status: Optional[CallStatus] = None) -> List[CallRead]:
    calls = await repos.calls.list_by_status(status.value if status else None)
    return [CallRead.model_validate(c) for c in calls]


@router.get(
    "/{call_id}",
    response_model=CallRead,
    summary="Get Call",
    responses={404: {"description": "Call not found"}},
)
async def get_call(call_id: str, repos: ReposDep) -> CallRead:
    return CallRead.model_validate(await get_call_or_404(repos, call_id))


@router.post(
    "",
    response_model=CallRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Call",
    description="Create a draft call. The creator becomes a grant manager if they are not one yet.",
    responses={422: {"description": "Invalid dates or amounts"}},
)
async def create_call(body: CallCreate, user: CurrentUserDep, repos: ReposDep) -> CallRead:
    """
    Create a call for proposals.

    - **open_date** / **close_date**: submission window; the close date must be later.
    - **budget_cap**: optional ceiling on each proposal's total budget.
    - **rubrics**: optional scoring criteria for reviewers.
    """
    call = await call_service.create_call(repos, user, body)
    return CallRead.model_validate(call)


@router.patch(
    "/{call_id}",
    response_model=CallRead,
    summary="Update Call",
    description="Partially update a call. Status changes must follow draft -> published -> closed -> archived.",
    responses={
        404: {"description": "Call not found"},
        409: {"description": "Illegal status transition"},
    },
)
async def update_call(call_id: str, body: CallUpdate, user: ManagerDep, repos: ReposDep) -> CallRead:
    call = await call_service.update_call(repos, user, call_id, body)
    return CallRead.model_validate(call)
