"""
Budget line entity model.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from sqlmodel import Field, Text

from ..base import Base, new_id


class BudgetLine(Base, table=True):
    """Entity for a single costed item of a proposal budget.

    Table: budget_lines
    """

    __tablename__ = "budget_lines"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    proposal_id: str = Field(foreign_key="proposals.id", max_length=36, index=True)
    category: str = Field(max_length=32)
    description: str = Field(max_length=500)
    amount: Decimal = Field(max_digits=10, decimal_places=2)
    justification: Optional[str] = Field(default=None, sa_type=Text)

    def __repr__(self) -> str:
        return f"BudgetLine(id={self.id}, category={self.category}, amount={self.amount})"
