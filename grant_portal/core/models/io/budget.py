"""
Budget I/O models for API requests and responses.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from grant_portal.core.models.domain.enums import BudgetCategory


class BudgetLineRead(BaseModel):
    """Schema for reading a budget line."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    proposal_id: str
    category: BudgetCategory
    description: str
    amount: Decimal
    justification: Optional[str] = None


class BudgetLineCreate(BaseModel):
    """Schema for adding a budget line."""

    model_config = ConfigDict(use_enum_values=True)

    category: BudgetCategory
    description: str = Field(min_length=1, max_length=500)
    amount: Decimal = Field(gt=0, max_digits=10, decimal_places=2)
    justification: Optional[str] = None


class BudgetLineUpdate(BaseModel):
    """Schema for a partial budget line update."""

    model_config = ConfigDict(use_enum_values=True)

    category: Optional[BudgetCategory] = None
    description: Optional[str] = Field(default=None, min_length=1, max_length=500)
    amount: Optional[Decimal] = Field(default=None, gt=0, max_digits=10, decimal_places=2)
    justification: Optional[str] = None


class BudgetSummary(BaseModel):
    """Budget totals of a proposal, overall and per category."""

    proposal_id: str
    total: Decimal
    by_category: Dict[str, Decimal]
    line_count: int
