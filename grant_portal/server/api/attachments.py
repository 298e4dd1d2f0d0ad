"""
Attachment Endpoints.

Multipart uploads for proposals and awards, and downloads of stored files.
"""

from typing import List, Optional

from fastapi import APIRouter, File, Form, UploadFile, status
from fastapi.responses import FileResponse

from grant_portal.core.models.domain.enums import AttachmentType
from grant_portal.core.models.io.attachments import AttachmentRead
from grant_portal.server.auth.dependencies import CurrentUserDep
from grant_portal.server.services import attachments as attachment_service
from grant_portal.server.services.deps import ReposDep, UploadConfigDep

router = APIRouter()

UPLOAD_RESPONSES = {
    400: {"description": "No file uploaded or unsupported file type"},
    413: {"description": "File too large"},
}


@router.post(
    "/proposals/{proposal_id}/attachments",
    response_model=AttachmentRead,
    status_code=status.HTTP_201_CREATED,
    summary="Upload Proposal Attachment",
    responses=UPLOAD_RESPONSES,
)
async def upload_proposal_attachment(
    proposal_id: str,
    user: CurrentUserDep,
    repos: ReposDep,
    config: UploadConfigDep,
    file: Optional[UploadFile] = File(None),
    attachment_type: AttachmentType = Form(AttachmentType.other, alias="type"),
) -> AttachmentRead:
    attachment = await attachment_service.upload_proposal_attachment(
        repos, user, proposal_id, file, attachment_type, config
    )
    return AttachmentRead.model_validate(attachment)


@router.get(
    "/proposals/{proposal_id}/attachments",
    response_model=List[AttachmentRead],
    summary="List Proposal Attachments",
)
async def list_proposal_attachments(proposal_id: str, user: CurrentUserDep, repos: ReposDep) -> List[AttachmentRead]:
    attachments = await attachment_service.list_proposal_attachments(repos, user, proposal_id)
    return [AttachmentRead.model_validate(a) for a in attachments]


@router.post(
    "/awards/{award_id}/attachments",
    response_model=AttachmentRead,
    status_code=status.HTTP_201_CREATED,
    summary="Upload Award Attachment",
    responses=UPLOAD_RESPONSES,
)
async def upload_award_attachment(
    award_id: str,
    user: CurrentUserDep,
    repos: ReposDep,
    config: UploadConfigDep,
    file: Optional[UploadFile] = File(None),
    attachment_type: AttachmentType = Form(AttachmentType.other, alias="type"),
) -> AttachmentRead:
    attachment = await attachment_service.upload_award_attachment(repos, user, award_id, file, attachment_type, config)
    return AttachmentRead.model_validate(attachment)


@router.get("/awards/{award_id}/attachments", response_model=List[AttachmentRead], summary="List Award Attachments")
async def list_award_attachments(award_id: str, user: CurrentUserDep, repos: ReposDep) -> List[AttachmentRead]:
    attachments = await attachment_service.list_award_attachments(repos, user, award_id)
    return [AttachmentRead.model_validate(a) for a in attachments]


@router.get(
    "/attachments/{attachment_id}/download",
    summary="Download Attachment",
    response_class=FileResponse,
    responses={404: {"description": "Attachment or file not found"}},
)
async def download_attachment(
    attachment_id: str, user: CurrentUserDep, repos: ReposDep, config: UploadConfigDep
) -> FileResponse:
    attachment, path = await attachment_service.resolve_download(repos, user, attachment_id, config)
    return FileResponse(
        path,
        filename=attachment.original_name,
        media_type=attachment.file_type or "application/octet-stream",
    )
