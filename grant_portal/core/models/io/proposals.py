"""
Proposal I/O models for API requests and responses.

This module also holds the team member schemas, which only exist in the
context of a proposal.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from grant_portal.core.models.domain.enums import ProposalStatus, TeamRole


class ProposalRead(BaseModel):
    """Schema for reading a proposal."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    call_id: str
    title: str
    abstract: str
    objectives: Optional[str] = None
    methodology: Optional[str] = None
    expected_outcomes: Optional[str] = None
    status: ProposalStatus
    pi_user_id: str
    total_budget: Optional[Decimal] = None
    submission_date: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class ProposalCreate(BaseModel):
    """Schema for starting a proposal against a published call."""

    call_id: str
    title: str = Field(min_length=1, max_length=500)
    abstract: str = Field(min_length=1)
    objectives: Optional[str] = None
    methodology: Optional[str] = None
    expected_outcomes: Optional[str] = None
    total_budget: Optional[Decimal] = Field(default=None, ge=0, max_digits=12, decimal_places=2)


class ProposalUpdate(BaseModel):
    """Schema for a partial proposal update."""

    title: Optional[str] = Field(default=None, min_length=1, max_length=500)
    abstract: Optional[str] = Field(default=None, min_length=1)
    objectives: Optional[str] = None
    methodology: Optional[str] = None
    expected_outcomes: Optional[str] = None
    total_budget: Optional[Decimal] = Field(default=None, ge=0, max_digits=12, decimal_places=2)


class ProposalStatusUpdate(BaseModel):
    """Schema for moving a proposal through the review pipeline."""

    status: ProposalStatus


class TeamMemberRead(BaseModel):
    """Schema for reading a team member."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    proposal_id: str
    user_id: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None
    role: TeamRole
    contribution: Optional[str] = None
    effort_percentage: Optional[int] = None


class TeamMemberCreate(BaseModel):
    """Schema for adding a team member; either ``user_id`` or ``name`` is required."""

    model_config = ConfigDict(use_enum_values=True)

    user_id: Optional[str] = None
    name: Optional[str] = Field(default=None, max_length=255)
    email: Optional[str] = Field(default=None, max_length=255)
    role: TeamRole
    contribution: Optional[str] = None
    effort_percentage: Optional[int] = Field(default=None, ge=0, le=100)

    @model_validator(mode="after")
    def _check_identity(self) -> "TeamMemberCreate":
        if not self.user_id and not self.name:
            raise ValueError("Either user_id or name is required")
        return self
