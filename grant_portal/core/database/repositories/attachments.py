"""
Attachment repository.
"""

from __future__ import annotations

from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from ..entities.attachments import Attachment
from .base import AsyncBaseRepository


class AttachmentRepository(AsyncBaseRepository[Attachment]):
    """Repository for uploaded file metadata, newest first."""

    order_by = "uploaded_at"

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Attachment)

    async def list_for_proposal(self, proposal_id: str) -> List[Attachment]:
        return await self.list(filters={"proposal_id": proposal_id})

    async def list_for_award(self, award_id: str) -> List[Attachment]:
        return await self.list(filters={"award_id": award_id})
