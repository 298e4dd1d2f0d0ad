"""
Web session entity model.

Server-side session storage keyed by an opaque session id held in the
client's cookie.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict

from sqlalchemy import DateTime
from sqlmodel import JSON, Column, Field

from ..base import Base


class WebSession(Base, table=True):
    """Entity for a server-side web session.

    Table: sessions
    """

    __tablename__ = "sessions"

    sid: str = Field(primary_key=True, max_length=128)
    sess: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))
    expire: datetime = Field(index=True, sa_type=DateTime)

    def __repr__(self) -> str:
        return f"WebSession(expire={self.expire})"
