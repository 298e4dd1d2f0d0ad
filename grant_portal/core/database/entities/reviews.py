"""
Review and decision entity models.

Reviews hold a reviewer's scores for a proposal; decisions record the
outcome a grant manager reached after review.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import DateTime, UniqueConstraint
from sqlmodel import JSON, Column, Field, Text

from ..base import Base, new_id, utc_now


class Review(Base, table=True):
    """Entity for a peer review.

    A review is a draft until ``submitted_at`` is set; one review per
    reviewer per proposal.

    Table: reviews
    """

    __tablename__ = "reviews"
    __table_args__ = (UniqueConstraint("proposal_id", "reviewer_id", name="uq_reviews_proposal_reviewer"),)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    proposal_id: str = Field(foreign_key="proposals.id", max_length=36, index=True)
    reviewer_id: str = Field(foreign_key="users.id", max_length=64, index=True)

    scores: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON))
    comments: Optional[str] = Field(default=None, sa_type=Text)
    recommendation: Optional[str] = Field(default=None, max_length=50)
    conflict_of_interest: bool = Field(default=False)

    submitted_at: Optional[datetime] = Field(default=None, sa_type=DateTime)
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime)

    def __repr__(self) -> str:
        return f"Review(id={self.id}, proposal_id={self.proposal_id}, submitted={self.submitted_at is not None})"


class Decision(Base, table=True):
    """Entity for a funding decision on a proposal.

    Table: decisions
    """

    __tablename__ = "decisions"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    proposal_id: str = Field(foreign_key="proposals.id", max_length=36, index=True)
    decision_type: str = Field(max_length=16)
    rationale: Optional[str] = Field(default=None, sa_type=Text)
    approved_by: str = Field(foreign_key="users.id", max_length=64)
    decision_date: datetime = Field(default_factory=utc_now, sa_type=DateTime)
