"""
Audit trail writer.

Every mutating API operation calls ``record_audit`` after its change is
committed.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from sqlmodel import SQLModel

from grant_portal.core.database.entities import AuditLog
from grant_portal.core.database.repositories import RepoBundle
from grant_portal.core.logging_config import get_logger
from grant_portal.core.monitoring import log_audit_event

logger = get_logger(__name__)


def snapshot(entity: Optional[SQLModel]) -> Optional[Dict[str, Any]]:
    """JSON-safe copy of an entity's fields, for ``old_values``/``new_values``."""
    if entity is None:
        return None
    return entity.model_dump(mode="json")


async def record_audit(
    repos: RepoBundle,
    *,
    user_id: Optional[str],
    action: str,
    resource_type: str,
    resource_id: Optional[str],
    old_values: Optional[Dict[str, Any]] = None,
    new_values: Optional[Dict[str, Any]] = None,
    meta: Optional[Dict[str, Any]] = None,
) -> AuditLog:
    """
    Persist an audit record and forward it to Logfire.

    Args:
        repos: Repository bundle of the current request
        user_id: The acting user
        action: Action name, e.g. ``submit_proposal``
        resource_type: Kind of resource, e.g. ``proposal``
        resource_id: Identifier of the affected resource
        old_values: Snapshot before the change
        new_values: Snapshot after the change
        meta: Extra context

    Returns:
        The stored AuditLog
    """
    entry = await repos.audit.create(
        AuditLog(
            user_id=user_id,
            action=action,
            resource_type=resource_type,
            resource_id=resource_id,
            old_values=old_values,
            new_values=new_values,
            meta=meta,
        )
    )
    logger.info(f"Audit: {action} {resource_type}:{resource_id} by {user_id}")
    log_audit_event(action, resource_type, resource_id, user_id)
    return entry
