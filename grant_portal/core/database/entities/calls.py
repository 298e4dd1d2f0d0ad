"""
Call for proposals entity model.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Optional

from sqlalchemy import DateTime
from sqlmodel import JSON, Column, Field, Text

from grant_portal.core.models.domain.enums import CallStatus

from ..base import Base, new_id, utc_now


class CallForProposal(Base, table=True):
    """Entity for a funding call.

    ``rubrics`` holds the scoring criteria reviewers are expected to use.

    Table: call_for_proposals
    """

    __tablename__ = "call_for_proposals"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    title: str = Field(max_length=500)
    description: str = Field(sa_type=Text)
    short_description: Optional[str] = Field(default=None, max_length=1000)

    open_date: datetime = Field(sa_type=DateTime)
    close_date: datetime = Field(sa_type=DateTime)
    budget_cap: Optional[Decimal] = Field(default=None, max_digits=12, decimal_places=2)
    eligibility_criteria: Optional[str] = Field(default=None, sa_type=Text)

    status: str = Field(default=CallStatus.draft.value, max_length=16, index=True)
    rubrics: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON))

    created_by: str = Field(foreign_key="users.id", max_length=64)
    created_at: datetime = Field(default_factory=utc_now, index=True, sa_type=DateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=DateTime)

    def __repr__(self) -> str:
        return f"CallForProposal(id={self.id}, status={self.status})"
