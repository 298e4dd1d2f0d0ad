"""
Attachment I/O models.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

from grant_portal.core.models.domain.enums import AttachmentType


class AttachmentRead(BaseModel):
    """Schema for reading attachment metadata. The stored file name is not exposed."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    proposal_id: Optional[str] = None
    award_id: Optional[str] = None
    original_name: str
    file_type: Optional[str] = None
    file_size: Optional[int] = None
    type: AttachmentType
    uploaded_by: str
    uploaded_at: datetime
