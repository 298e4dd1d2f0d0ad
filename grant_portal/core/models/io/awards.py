"""
Award I/O models for API requests and responses.

Covers awards and their milestones, disbursements and progress reports.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from grant_portal.core.models.domain.enums import (
    AwardStatus,
    DisbursementStatus,
    MilestoneStatus,
    ReportStatus,
)

from .common import NaiveUTCDatetime

# =====================================================================
# Awards
# =====================================================================


class AwardRead(BaseModel):
    """Schema for reading an award."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    proposal_id: str
    award_amount: Decimal
    start_date: datetime
    end_date: datetime
    status: AwardStatus
    award_letter: Optional[str] = None
    special_conditions: Optional[str] = None
    created_at: datetime


class AwardCreate(BaseModel):
    """Schema for granting an award to an approved proposal."""

    proposal_id: str
    award_amount: Decimal = Field(gt=0, max_digits=12, decimal_places=2)
    start_date: NaiveUTCDatetime
    end_date: NaiveUTCDatetime
    award_letter: Optional[str] = None
    special_conditions: Optional[str] = None

    @model_validator(mode="after")
    def _check_dates(self) -> "AwardCreate":
        if self.end_date <= self.start_date:
            raise ValueError("end_date must be after start_date")
        return self


class AwardStatusUpdate(BaseModel):
    status: AwardStatus


# =====================================================================
# Milestones
# =====================================================================


class MilestoneRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    award_id: str
    title: str
    description: Optional[str] = None
    due_date: datetime
    completed_date: Optional[datetime] = None
    status: MilestoneStatus
    deliverable_required: bool


class MilestoneCreate(BaseModel):
    title: str = Field(min_length=1, max_length=500)
    description: Optional[str] = None
    due_date: NaiveUTCDatetime
    deliverable_required: bool = False


class MilestoneUpdate(BaseModel):
    """Schema for a partial milestone update; ``status`` must be a legal transition."""

    title: Optional[str] = Field(default=None, min_length=1, max_length=500)
    description: Optional[str] = None
    due_date: Optional[NaiveUTCDatetime] = None
    deliverable_required: Optional[bool] = None
    status: Optional[MilestoneStatus] = None


# =====================================================================
# Disbursements
# =====================================================================


class DisbursementRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    award_id: str
    amount: Decimal
    scheduled_date: datetime
    processed_date: Optional[datetime] = None
    status: DisbursementStatus
    transaction_ref: Optional[str] = None
    notes: Optional[str] = None


class DisbursementCreate(BaseModel):
    amount: Decimal = Field(gt=0, max_digits=10, decimal_places=2)
    scheduled_date: NaiveUTCDatetime
    notes: Optional[str] = None


class DisbursementUpdate(BaseModel):
    """Schema for a partial disbursement update; ``status`` must be a legal transition."""

    scheduled_date: Optional[NaiveUTCDatetime] = None
    notes: Optional[str] = None
    status: Optional[DisbursementStatus] = None
    transaction_ref: Optional[str] = Field(default=None, max_length=255)


# =====================================================================
# Progress reports
# =====================================================================


class ReportRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    award_id: str
    reporting_period: str
    narrative: Optional[str] = None
    status: ReportStatus
    submitted_at: Optional[datetime] = None
    submitted_by: Optional[str] = None
    created_at: datetime


class ReportCreate(BaseModel):
    reporting_period: str = Field(min_length=1, max_length=100)
    narrative: Optional[str] = None


class ReportStatusUpdate(BaseModel):
    status: ReportStatus
