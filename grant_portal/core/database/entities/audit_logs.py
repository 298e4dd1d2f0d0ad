"""
Audit log entity model.

Every mutating API operation records who changed what, with before/after
snapshots of the resource.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import DateTime
from sqlmodel import JSON, Column, Field

from ..base import Base, new_id, utc_now


class AuditLog(Base, table=True):
    """Entity for an audit trail record.

    ``meta`` maps to the ``metadata`` column; the attribute name is reserved
    by SQLAlchemy's declarative base.

    Table: audit_logs
    """

    __tablename__ = "audit_logs"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    user_id: Optional[str] = Field(default=None, foreign_key="users.id", max_length=64)
    action: str = Field(max_length=100)
    resource_type: str = Field(max_length=50)
    resource_id: Optional[str] = Field(default=None, max_length=64)
    old_values: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON))
    new_values: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON))
    meta: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column("metadata", JSON))
    timestamp: datetime = Field(default_factory=utc_now, index=True, sa_type=DateTime)

    def __repr__(self) -> str:
        return f"AuditLog(action={self.action}, resource={self.resource_type}:{self.resource_id})"
