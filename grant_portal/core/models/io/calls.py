"""
Call for proposals I/O models for API requests and responses.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from grant_portal.core.models.domain.enums import CallStatus

from .common import NaiveUTCDatetime


class CallRead(BaseModel):
    """Schema for reading a call."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    description: str
    short_description: Optional[str] = None
    open_date: datetime
    close_date: datetime
    budget_cap: Optional[Decimal] = None
    eligibility_criteria: Optional[str] = None
    status: CallStatus
    rubrics: Optional[Dict[str, Any]] = None
    created_by: str
    created_at: datetime
    updated_at: datetime


class CallCreate(BaseModel):
    """Schema for creating a call. New calls start as drafts."""

    title: str = Field(min_length=1, max_length=500)
    description: str = Field(min_length=1)
    short_description: Optional[str] = Field(default=None, max_length=1000)
    open_date: NaiveUTCDatetime
    close_date: NaiveUTCDatetime
    budget_cap: Optional[Decimal] = Field(default=None, gt=0, max_digits=12, decimal_places=2)
    eligibility_criteria: Optional[str] = None
    rubrics: Optional[Dict[str, Any]] = None

    @model_validator(mode="after")
    def _check_dates(self) -> "CallCreate":
        if self.close_date <= self.open_date:
            raise ValueError("close_date must be after open_date")
        return self


class CallUpdate(BaseModel):
    """Schema for a partial call update, including status changes."""

    title: Optional[str] = Field(default=None, min_length=1, max_length=500)
    description: Optional[str] = None
    short_description: Optional[str] = Field(default=None, max_length=1000)
    open_date: Optional[NaiveUTCDatetime] = None
    close_date: Optional[NaiveUTCDatetime] = None
    budget_cap: Optional[Decimal] = Field(default=None, gt=0, max_digits=12, decimal_places=2)
    eligibility_criteria: Optional[str] = None
    rubrics: Optional[Dict[str, Any]] = None
    status: Optional[CallStatus] = None
