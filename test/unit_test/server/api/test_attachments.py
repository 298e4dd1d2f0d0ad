"""
Unit tests for attachment upload, listing and download.
"""

import pytest
from httpx import AsyncClient

from grant_portal.core.models.domain.enums import ProposalStatus

pytestmark = pytest.mark.asyncio


async def upload(
    client: AsyncClient,
    url: str,
    name: str = "plan.pdf",
    content: bytes = b"%PDF-1.4 plan",
    kind: str = "proposal_document",
):
    return await client.post(url, files={"file": (name, content, "application/pdf")}, data={"type": kind})


class TestProposalAttachments:
    async def test_upload_and_list(self, client: AsyncClient, act_as, seed, upload_config):
        from pathlib import Path

        call = await seed.call()
        proposal = await seed.proposal(call, "pi-1")
        act_as("pi-1", "researcher")

        response = await upload(client, f"/api/proposals/{proposal.id}/attachments")
        listed = await client.get(f"/api/proposals/{proposal.id}/attachments")

        assert response.status_code == 201
        data = response.json()
        assert data["original_name"] == "plan.pdf"
        assert data["type"] == "proposal_document"
        assert data["file_size"] == len(b"%PDF-1.4 plan")
        assert data["uploaded_by"] == "pi-1"
        assert "filename" not in data
        assert [a["id"] for a in listed.json()] == [data["id"]]
        stored = list(Path(upload_config.directory).iterdir())
        assert len(stored) == 1
        assert stored[0].suffix == ".pdf"

    async def test_type_defaults_to_other(self, client: AsyncClient, act_as, seed):
        call = await seed.call()
        proposal = await seed.proposal(call, "pi-1")
        act_as("pi-1", "researcher")

        response = await client.post(
            f"/api/proposals/{proposal.id}/attachments", files={"file": ("notes.txt", b"hello", "text/plain")}
        )

        assert response.status_code == 201
        assert response.json()["type"] == "other"

    async def test_unsupported_extension(self, client: AsyncClient, act_as, seed):
        call = await seed.call()
        proposal = await seed.proposal(call, "pi-1")
        act_as("pi-1", "researcher")

        response = await upload(client, f"/api/proposals/{proposal.id}/attachments", name="run.exe")

        assert response.status_code == 400
        assert response.json()["detail"] == "Unsupported file type"

    async def test_file_too_large(self, client: AsyncClient, act_as, seed, upload_config):
        call = await seed.call()
        proposal = await seed.proposal(call, "pi-1")
        act_as("pi-1", "researcher")

        response = await upload(
            client, f"/api/proposals/{proposal.id}/attachments", content=b"x" * (upload_config.max_bytes + 1)
        )

        assert response.status_code == 413
        assert response.json()["detail"] == f"File too large (limit {upload_config.max_bytes} bytes)"

    async def test_missing_file(self, client: AsyncClient, act_as, seed):
        call = await seed.call()
        proposal = await seed.proposal(call, "pi-1")
        act_as("pi-1", "researcher")

        response = await client.post(f"/api/proposals/{proposal.id}/attachments", data={"type": "cv"})

        assert response.status_code == 400
        assert response.json()["detail"] == "No file uploaded"

    async def test_upload_needs_edit_rights(self, client: AsyncClient, act_as, seed):
        call = await seed.call()
        proposal = await seed.proposal(call, "pi-1", status=ProposalStatus.submitted)
        act_as("pi-1", "researcher")

        response = await upload(client, f"/api/proposals/{proposal.id}/attachments")

        assert response.status_code == 409


class TestDownload:
    async def test_download_returns_content(self, client: AsyncClient, act_as, seed):
        call = await seed.call()
        proposal = await seed.proposal(call, "pi-1")
        act_as("pi-1", "researcher")
        attachment = (await upload(client, f"/api/proposals/{proposal.id}/attachments")).json()

        response = await client.get(f"/api/attachments/{attachment['id']}/download")

        assert response.status_code == 200
        assert response.content == b"%PDF-1.4 plan"
        assert "plan.pdf" in response.headers["content-disposition"]

    async def test_stranger_cannot_download(self, client: AsyncClient, act_as, seed):
        call = await seed.call()
        proposal = await seed.proposal(call, "pi-1")
        act_as("pi-1", "researcher")
        attachment = (await upload(client, f"/api/proposals/{proposal.id}/attachments")).json()
        act_as("pi-2", "researcher")

        response = await client.get(f"/api/attachments/{attachment['id']}/download")

        assert response.status_code == 403

    async def test_unknown_attachment(self, client: AsyncClient, act_as):
        act_as("pi-1", "researcher")

        response = await client.get("/api/attachments/missing/download")

        assert response.status_code == 404
        assert response.json()["detail"] == "Attachment not found"


class TestAwardAttachments:
    async def test_pi_uploads_deliverable(self, client: AsyncClient, act_as, seed):
        call = await seed.call()
        proposal = await seed.proposal(call, "pi-1", status=ProposalStatus.approved)
        award = await seed.award(proposal)
        act_as("pi-1", "researcher")

        response = await upload(client, f"/api/awards/{award.id}/attachments", kind="milestone_deliverable")
        listed = await client.get(f"/api/awards/{award.id}/attachments")

        assert response.status_code == 201
        assert response.json()["award_id"] == award.id
        assert response.json()["proposal_id"] is None
        assert len(listed.json()) == 1

    async def test_auditor_can_view_but_not_upload(self, client: AsyncClient, act_as, seed):
        call = await seed.call()
        proposal = await seed.proposal(call, "pi-1", status=ProposalStatus.approved)
        award = await seed.award(proposal)
        act_as("auditor-1", "auditor")

        listed = await client.get(f"/api/awards/{award.id}/attachments")
        response = await upload(client, f"/api/awards/{award.id}/attachments")

        assert listed.status_code == 200
        assert response.status_code == 403
