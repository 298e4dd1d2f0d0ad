"""
Proposal entity models.

This module contains the proposal itself and the members of its team.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import DateTime
from sqlmodel import Field, Text

from grant_portal.core.models.domain.enums import ProposalStatus

from ..base import Base, new_id, utc_now


class Proposal(Base, table=True):
    """Entity for a research proposal submitted against a call.

    ``total_budget`` is kept equal to the sum of the proposal's budget lines.

    Table: proposals
    """

    __tablename__ = "proposals"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    call_id: str = Field(foreign_key="call_for_proposals.id", max_length=36, index=True)

    title: str = Field(max_length=500)
    abstract: str = Field(sa_type=Text)
    objectives: Optional[str] = Field(default=None, sa_type=Text)
    methodology: Optional[str] = Field(default=None, sa_type=Text)
    expected_outcomes: Optional[str] = Field(default=None, sa_type=Text)

    status: str = Field(default=ProposalStatus.draft.value, max_length=16, index=True)
    pi_user_id: str = Field(foreign_key="users.id", max_length=64, index=True)
    total_budget: Optional[Decimal] = Field(default=None, max_digits=12, decimal_places=2)
    submission_date: Optional[datetime] = Field(default=None, sa_type=DateTime)

    created_at: datetime = Field(default_factory=utc_now, index=True, sa_type=DateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=DateTime)

    def __repr__(self) -> str:
        return f"Proposal(id={self.id}, status={self.status})"


class ProposalTeamMember(Base, table=True):
    """Entity for a person on a proposal team.

    ``user_id`` is set for portal users; external members only carry a name
    and email.

    Table: proposal_team_members
    """

    __tablename__ = "proposal_team_members"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    proposal_id: str = Field(foreign_key="proposals.id", max_length=36, index=True)
    user_id: Optional[str] = Field(default=None, foreign_key="users.id", max_length=64)
    name: Optional[str] = Field(default=None, max_length=255)
    email: Optional[str] = Field(default=None, max_length=255)
    role: str = Field(max_length=32)
    contribution: Optional[str] = Field(default=None, sa_type=Text)
    effort_percentage: Optional[int] = Field(default=None)
