"""
Audit log repository.
"""

from __future__ import annotations

from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from ..entities.audit_logs import AuditLog
from .base import AsyncBaseRepository


class AuditLogRepository(AsyncBaseRepository[AuditLog]):
    """Repository for the audit trail, newest first."""

    order_by = "timestamp"

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, AuditLog)

    async def recent(self, limit: int = 10) -> List[AuditLog]:
        return await self.list(limit=limit)

    async def list_for_resource(self, resource_type: str, resource_id: str) -> List[AuditLog]:
        return await self.list(filters={"resource_type": resource_type, "resource_id": resource_id})
