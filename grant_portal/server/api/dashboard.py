"""
Dashboard Endpoints.

Headline metrics and the recent activity feed for signed-in users.
"""

from datetime import datetime
from typing import List

from fastapi import APIRouter

from grant_portal.core.database.base import utc_now
from grant_portal.core.models.io.dashboard import ActivityEntry, DashboardMetrics
from grant_portal.server.auth.dependencies import CurrentUserDep
from grant_portal.server.services.deps import ReposDep

router = APIRouter()

MAX_ACTIVITY = 100


@router.get(
    "/metrics",
    response_model=DashboardMetrics,
    summary="Dashboard Metrics",
    description="Submitted proposals, pending reviews, this year's awards and their total, and open calls.",
)
async def get_metrics(user: CurrentUserDep, repos: ReposDep) -> DashboardMetrics:
    year_start = datetime(utc_now().year, 1, 1)
    return DashboardMetrics(**await repos.dashboard.metrics(year_start=year_start))


@router.get("/activity", response_model=List[ActivityEntry], summary="Recent Activity")
async def get_activity(user: CurrentUserDep, repos: ReposDep, limit: int = 10) -> List[ActivityEntry]:
    """Latest audit trail entries; ``limit`` is clamped to 1..100."""
    limit = max(1, min(limit, MAX_ACTIVITY))
    return [ActivityEntry.model_validate(entry) for entry in await repos.audit.recent(limit)]
