"""
Dashboard I/O models.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict


class DashboardMetrics(BaseModel):
    """Headline numbers shown on the dashboard."""

    active_proposals: int
    pending_reviews: int
    awards_ytd: int
    total_award_amount: Decimal
    open_calls: int


class ActivityEntry(BaseModel):
    """One line of the recent activity feed, taken from the audit trail."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    action: str
    resource_type: str
    resource_id: Optional[str] = None
    user_id: Optional[str] = None
    timestamp: datetime
