"""
Call for proposals service.
"""

from __future__ import annotations

from grant_portal.core.database.base import utc_now
from grant_portal.core.database.entities import CallForProposal
from grant_portal.core.database.repositories import RepoBundle
from grant_portal.core.errors import ValidationFailedError
from grant_portal.core.logging_config import get_logger
from grant_portal.core.models.domain.enums import CallStatus, UserRoleName
from grant_portal.core.models.domain.transitions import CALL_TRANSITIONS, ensure_transition
from grant_portal.core.models.io.calls import CallCreate, CallUpdate
from grant_portal.server.auth.dependencies import CurrentUser

from .access import is_manager
from .audit import record_audit, snapshot
from .lookups import get_call_or_404

logger = get_logger(__name__)


async def create_call(repos: RepoBundle, user: CurrentUser, data: CallCreate) -> CallForProposal:
    """Create a draft call owned by ``user``.

    A caller without a manager role is made a grant manager first.
    """
    if not is_manager(user):
        await repos.roles.assign(user.id, UserRoleName.grant_manager.value)
        logger.info(f"Granted grant_manager to {user.id} on call creation")

    call = await repos.calls.create(
        CallForProposal(**data.model_dump(), status=CallStatus.draft.value, created_by=user.id)
    )
    await record_audit(
        repos,
        user_id=user.id,
        action="create_call",
        resource_type="call",
        resource_id=call.id,
        new_values=snapshot(call),
    )
    return call


async def update_call(repos: RepoBundle, user: CurrentUser, call_id: str, data: CallUpdate) -> CallForProposal:
    """Apply a partial update; a status change must follow the call lifecycle.

    Raises:
        NotFoundError: Unknown call
        InvalidStateError: Illegal status transition
        ValidationFailedError: The resulting close date is not after the open date
    """
    call = await get_call_or_404(repos, call_id)
    before = snapshot(call)

    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    new_status = changes.pop("status", None)
    if new_status is not None and new_status.value != call.status:
        ensure_transition(CALL_TRANSITIONS, CallStatus(call.status), new_status, resource="call")
        call.status = new_status.value

    open_date = changes.get("open_date", call.open_date)
    close_date = changes.get("close_date", call.close_date)
    if close_date <= open_date:
        raise ValidationFailedError("close_date must be after open_date")

    for field, value in changes.items():
        setattr(call, field, value)
    call.updated_at = utc_now()
    call = await repos.calls.update(call)

    await record_audit(
        repos,
        user_id=user.id,
        action="update_call",
        resource_type="call",
        resource_id=call.id,
        old_values=before,
        new_values=snapshot(call),
    )
    return call
