"""
Attachment service.

Uploads for proposals follow proposal edit rights; uploads for awards are
open to the award's PI and managers. Downloads follow view rights of the
owning record.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Tuple

from fastapi import UploadFile

from grant_portal.core.database.entities import Attachment
from grant_portal.core.database.repositories import RepoBundle
from grant_portal.core.errors import NotFoundError, PermissionDeniedError
from grant_portal.core.logging_config import get_logger
from grant_portal.core.models.domain.enums import AttachmentType
from grant_portal.server.auth.dependencies import CurrentUser
from grant_portal.server.core.config import UploadConfig

from .access import is_manager
from .audit import record_audit, snapshot
from .awards import get_visible_award
from .proposals import get_editable_proposal, get_visible_proposal
from .uploads import discard_upload, store_upload, stored_path

logger = get_logger(__name__)


async def _save(
    repos: RepoBundle,
    user: CurrentUser,
    file: Optional[UploadFile],
    attachment_type: AttachmentType,
    config: UploadConfig,
    *,
    proposal_id: Optional[str] = None,
    award_id: Optional[str] = None,
) -> Attachment:
    stored = await store_upload(file, config)
    try:
        attachment = await repos.attachments.create(
            Attachment(
                proposal_id=proposal_id,
                award_id=award_id,
                filename=stored.filename,
                original_name=stored.original_name,
                file_type=stored.content_type,
                file_size=stored.size,
                type=attachment_type.value,
                uploaded_by=user.id,
            )
        )
        await record_audit(
            repos,
            user_id=user.id,
            action="upload_attachment",
            resource_type="attachment",
            resource_id=attachment.id,
            new_values=snapshot(attachment),
        )
    except Exception:
        logger.warning(f"Discarding upload {stored.filename}: attachment was not recorded")
        discard_upload(stored.filename, config)
        raise
    return attachment


async def upload_proposal_attachment(
    repos: RepoBundle,
    user: CurrentUser,
    proposal_id: str,
    file: Optional[UploadFile],
    attachment_type: AttachmentType,
    config: UploadConfig,
) -> Attachment:
    await get_editable_proposal(repos, user, proposal_id)
    return await _save(repos, user, file, attachment_type, config, proposal_id=proposal_id)


async def list_proposal_attachments(repos: RepoBundle, user: CurrentUser, proposal_id: str) -> List[Attachment]:
    await get_visible_proposal(repos, user, proposal_id)
    return await repos.attachments.list_for_proposal(proposal_id)


async def upload_award_attachment(
    repos: RepoBundle,
    user: CurrentUser,
    award_id: str,
    file: Optional[UploadFile],
    attachment_type: AttachmentType,
    config: UploadConfig,
) -> Attachment:
    _award, proposal = await get_visible_award(repos, user, award_id)
    if proposal.pi_user_id != user.id and not is_manager(user):
        raise PermissionDeniedError()
    return await _save(repos, user, file, attachment_type, config, award_id=award_id)


async def list_award_attachments(repos: RepoBundle, user: CurrentUser, award_id: str) -> List[Attachment]:
    await get_visible_award(repos, user, award_id)
    return await repos.attachments.list_for_award(award_id)


async def resolve_download(
    repos: RepoBundle, user: CurrentUser, attachment_id: str, config: UploadConfig
) -> Tuple[Attachment, Path]:
    """Check access to an attachment and locate its file on disk."""
    attachment = await repos.attachments.get_by_id(attachment_id)
    if attachment is None:
        raise NotFoundError("Attachment not found")
    if attachment.proposal_id is not None:
        await get_visible_proposal(repos, user, attachment.proposal_id)
    elif attachment.award_id is not None:
        await get_visible_award(repos, user, attachment.award_id)
    return attachment, stored_path(attachment.filename, config)
