"""
Attachment entity model.

Attachments belong either to a proposal or to an award. The file itself lives
in the upload directory under ``filename``.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime
from sqlmodel import Field

from ..base import Base, new_id, utc_now


class Attachment(Base, table=True):
    """Entity for an uploaded file.

    Table: attachments
    """

    __tablename__ = "attachments"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    proposal_id: Optional[str] = Field(default=None, foreign_key="proposals.id", max_length=36, index=True)
    award_id: Optional[str] = Field(default=None, foreign_key="awards.id", max_length=36, index=True)

    filename: str = Field(max_length=255)
    original_name: str = Field(max_length=255)
    file_type: Optional[str] = Field(default=None, max_length=100)
    file_size: Optional[int] = Field(default=None)
    type: str = Field(max_length=32)

    uploaded_by: str = Field(foreign_key="users.id", max_length=64)
    uploaded_at: datetime = Field(default_factory=utc_now, sa_type=DateTime)
