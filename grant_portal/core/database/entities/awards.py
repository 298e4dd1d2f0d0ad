"""
Award entity models.

This module contains the award granted to an approved proposal and the
records tracked against it: disbursements, milestones and progress reports.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import DateTime
from sqlmodel import Field, Text

from grant_portal.core.models.domain.enums import (
    AwardStatus,
    DisbursementStatus,
    MilestoneStatus,
    ReportStatus,
)

from ..base import Base, new_id, utc_now


class Award(Base, table=True):
    """Entity for an award. A proposal has at most one award.

    Table: awards
    """

    __tablename__ = "awards"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    proposal_id: str = Field(foreign_key="proposals.id", max_length=36, unique=True)
    award_amount: Decimal = Field(max_digits=12, decimal_places=2)
    start_date: datetime = Field(sa_type=DateTime)
    end_date: datetime = Field(sa_type=DateTime)
    status: str = Field(default=AwardStatus.pending.value, max_length=16, index=True)
    award_letter: Optional[str] = Field(default=None, sa_type=Text)
    special_conditions: Optional[str] = Field(default=None, sa_type=Text)
    created_at: datetime = Field(default_factory=utc_now, index=True, sa_type=DateTime)

    def __repr__(self) -> str:
        return f"Award(id={self.id}, status={self.status}, amount={self.award_amount})"


class Disbursement(Base, table=True):
    """Entity for a scheduled payment of award funds.

    Table: disbursements
    """

    __tablename__ = "disbursements"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    award_id: str = Field(foreign_key="awards.id", max_length=36, index=True)
    amount: Decimal = Field(max_digits=10, decimal_places=2)
    scheduled_date: datetime = Field(sa_type=DateTime)
    processed_date: Optional[datetime] = Field(default=None, sa_type=DateTime)
    status: str = Field(default=DisbursementStatus.scheduled.value, max_length=16)
    transaction_ref: Optional[str] = Field(default=None, max_length=255)
    notes: Optional[str] = Field(default=None, sa_type=Text)


class Milestone(Base, table=True):
    """Entity for an award milestone.

    Table: milestones
    """

    __tablename__ = "milestones"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    award_id: str = Field(foreign_key="awards.id", max_length=36, index=True)
    title: str = Field(max_length=500)
    description: Optional[str] = Field(default=None, sa_type=Text)
    due_date: datetime = Field(sa_type=DateTime)
    completed_date: Optional[datetime] = Field(default=None, sa_type=DateTime)
    status: str = Field(default=MilestoneStatus.pending.value, max_length=16)
    deliverable_required: bool = Field(default=False)


class ProgressReport(Base, table=True):
    """Entity for a periodic progress report on an award.

    Table: reports
    """

    __tablename__ = "reports"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    award_id: str = Field(foreign_key="awards.id", max_length=36, index=True)
    reporting_period: str = Field(max_length=100)
    narrative: Optional[str] = Field(default=None, sa_type=Text)
    status: str = Field(default=ReportStatus.draft.value, max_length=16)
    submitted_at: Optional[datetime] = Field(default=None, sa_type=DateTime)
    submitted_by: Optional[str] = Field(default=None, foreign_key="users.id", max_length=64)
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime)
