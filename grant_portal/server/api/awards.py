"""
Award Endpoints.

Awards are created by grant managers for approved proposals. Milestones and
progress reports track delivery; disbursements track payments and are
handled by managers and finance officers.
"""

from typing import List, Optional

from fastapi import APIRouter, status

from grant_portal.core.models.domain.enums import AwardStatus
from grant_portal.core.models.io.awards import (
    AwardCreate,
    AwardRead,
    AwardStatusUpdate,
    DisbursementCreate,
    DisbursementRead,
    DisbursementUpdate,
    MilestoneCreate,
    MilestoneRead,
    MilestoneUpdate,
    ReportCreate,
    ReportRead,
    ReportStatusUpdate,
)
from grant_portal.server.auth.dependencies import CurrentUserDep
from grant_portal.server.services import awards as award_service
from grant_portal.server.services.access import FinanceDep, ManagerDep
from grant_portal.server.services.deps import ReposDep

router = APIRouter()


@router.get(
    "",
    response_model=List[AwardRead],
    summary="List Awards",
    description="List awards, newest first. Researchers only see awards on proposals they lead.",
)
async def list_awards(user: CurrentUserDep, repos: ReposDep, status: Optional[AwardStatus] = None) -> List[AwardRead]:
    awards = await award_service.list_awards(repos, user, status=status.value if status else None)
    return [AwardRead.model_validate(a) for a in awards]


@router.get(
    "/{award_id}",
    response_model=AwardRead,
    summary="Get Award",
    responses={403: {"description": "Access denied"}, 404: {"description": "Award not found"}},
)
async def get_award(award_id: str, user: CurrentUserDep, repos: ReposDep) -> AwardRead:
    award, _proposal = await award_service.get_visible_award(repos, user, award_id)
    return AwardRead.model_validate(award)


@router.post(
    "",
    response_model=AwardRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Award",
    description="Grant an award to an approved proposal. New awards are pending.",
    responses={
        404: {"description": "Proposal not found"},
        409: {"description": "Proposal not approved or already awarded"},
        422: {"description": "Invalid amount or dates"},
    },
)
async def create_award(body: AwardCreate, user: ManagerDep, repos: ReposDep) -> AwardRead:
    return AwardRead.model_validate(await award_service.create_award(repos, user, body))


@router.patch(
    "/{award_id}/status",
    response_model=AwardRead,
    summary="Change Award Status",
    responses={409: {"description": "Illegal status transition"}},
)
async def change_award_status(award_id: str, body: AwardStatusUpdate, user: ManagerDep, repos: ReposDep) -> AwardRead:
    award = await award_service.change_award_status(repos, user, award_id, body.status)
    return AwardRead.model_validate(award)


# =====================================================================
# Milestones
# =====================================================================


@router.get("/{award_id}/milestones", response_model=List[MilestoneRead], summary="List Milestones")
async def list_milestones(award_id: str, user: CurrentUserDep, repos: ReposDep) -> List[MilestoneRead]:
    milestones = await award_service.list_milestones(repos, user, award_id)
    return [MilestoneRead.model_validate(m) for m in milestones]


@router.post(
    "/{award_id}/milestones",
    response_model=MilestoneRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Milestone",
)
async def create_milestone(
    award_id: str, body: MilestoneCreate, user: ManagerDep, repos: ReposDep
) -> MilestoneRead:
    return MilestoneRead.model_validate(await award_service.create_milestone(repos, user, award_id, body))


@router.patch(
    "/{award_id}/milestones/{milestone_id}",
    response_model=MilestoneRead,
    summary="Update Milestone",
    description="Partially update a milestone. Completing it stamps the completion date.",
)
async def update_milestone(
    award_id: str, milestone_id: str, body: MilestoneUpdate, user: ManagerDep, repos: ReposDep
) -> MilestoneRead:
    milestone = await award_service.update_milestone(repos, user, award_id, milestone_id, body)
    return MilestoneRead.model_validate(milestone)


# =====================================================================
# Disbursements
# =====================================================================


@router.get("/{award_id}/disbursements", response_model=List[DisbursementRead], summary="List Disbursements")
async def list_disbursements(award_id: str, user: CurrentUserDep, repos: ReposDep) -> List[DisbursementRead]:
    disbursements = await award_service.list_disbursements(repos, user, award_id)
    return [DisbursementRead.model_validate(d) for d in disbursements]


@router.post(
    "/{award_id}/disbursements",
    response_model=DisbursementRead,
    status_code=status.HTTP_201_CREATED,
    summary="Schedule Disbursement",
    responses={409: {"description": "Would exceed the award amount"}},
)
async def create_disbursement(
    award_id: str, body: DisbursementCreate, user: FinanceDep, repos: ReposDep
) -> DisbursementRead:
    disbursement = await award_service.create_disbursement(repos, user, award_id, body)
    return DisbursementRead.model_validate(disbursement)


@router.patch(
    "/{award_id}/disbursements/{disbursement_id}",
    response_model=DisbursementRead,
    summary="Update Disbursement",
    description="Partially update a disbursement. Processing it stamps the processed date.",
)
async def update_disbursement(
    award_id: str, disbursement_id: str, body: DisbursementUpdate, user: FinanceDep, repos: ReposDep
) -> DisbursementRead:
    disbursement = await award_service.update_disbursement(repos, user, award_id, disbursement_id, body)
    return DisbursementRead.model_validate(disbursement)


# =====================================================================
# Progress reports
# =====================================================================


@router.get("/{award_id}/reports", response_model=List[ReportRead], summary="List Progress Reports")
async def list_reports(award_id: str, user: CurrentUserDep, repos: ReposDep) -> List[ReportRead]:
    return [ReportRead.model_validate(r) for r in await award_service.list_reports(repos, user, award_id)]


@router.post(
    "/{award_id}/reports",
    response_model=ReportRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Progress Report",
)
async def create_report(award_id: str, body: ReportCreate, user: CurrentUserDep, repos: ReposDep) -> ReportRead:
    return ReportRead.model_validate(await award_service.create_report(repos, user, award_id, body))


@router.post("/{award_id}/reports/{report_id}/submit", response_model=ReportRead, summary="Submit Progress Report")
async def submit_report(award_id: str, report_id: str, user: CurrentUserDep, repos: ReposDep) -> ReportRead:
    return ReportRead.model_validate(await award_service.submit_report(repos, user, award_id, report_id))


@router.patch(
    "/{award_id}/reports/{report_id}/status",
    response_model=ReportRead,
    summary="Change Report Status",
)
async def change_report_status(
    award_id: str, report_id: str, body: ReportStatusUpdate, user: ManagerDep, repos: ReposDep
) -> ReportRead:
    report = await award_service.change_report_status(repos, user, award_id, report_id, body.status)
    return ReportRead.model_validate(report)
