"""
Review and decision I/O models.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from grant_portal.core.models.domain.enums import DecisionType


class ReviewRead(BaseModel):
    """Schema for reading a review."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    proposal_id: str
    reviewer_id: str
    scores: Optional[Dict[str, Any]] = None
    comments: Optional[str] = None
    recommendation: Optional[str] = None
    conflict_of_interest: bool
    submitted_at: Optional[datetime] = None
    created_at: datetime


class ReviewCreate(BaseModel):
    """Schema for writing a review. ``submit`` finalises it immediately."""

    scores: Optional[Dict[str, Any]] = None
    comments: Optional[str] = None
    recommendation: Optional[str] = Field(default=None, max_length=50)
    conflict_of_interest: bool = False
    submit: bool = False


class ReviewUpdate(BaseModel):
    """Schema for editing a draft review."""

    scores: Optional[Dict[str, Any]] = None
    comments: Optional[str] = None
    recommendation: Optional[str] = Field(default=None, max_length=50)
    conflict_of_interest: Optional[bool] = None
    submit: bool = False


class DecisionRead(BaseModel):
    """Schema for reading a decision."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    proposal_id: str
    decision_type: DecisionType
    rationale: Optional[str] = None
    approved_by: str
    decision_date: datetime


class DecisionCreate(BaseModel):
    """Schema for recording a decision."""

    model_config = ConfigDict(use_enum_values=True)

    decision_type: DecisionType
    rationale: Optional[str] = None
