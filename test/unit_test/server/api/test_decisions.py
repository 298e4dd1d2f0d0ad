import pytest
from httpx import AsyncClient

from grant_portal.core.models.domain.enums import ProposalStatus

pytestmark = pytest.mark.asyncio


class TestRecordDecision:
    @pytest.mark.parametrize(
        "decision_type, expected_status",
        [
            ("award", "approved"),
            ("reject", "rejected"),
            ("revise", "draft"),
            ("defer", "panel_review"),
        ],
    )
    async def test_decision_moves_proposal(self, client: AsyncClient, act_as, seed, decision_type, expected_status):
        call = await seed.call()
        proposal = await seed.proposal(call, "pi-1", status=ProposalStatus.panel_review)
        act_as("manager-1", "grant_manager")

        response = await client.post(
            f"/api/proposals/{proposal.id}/decisions",
            json={"decision_type": decision_type, "rationale": "Panel consensus"},
        )
        fetched = await client.get(f"/api/proposals/{proposal.id}")

        assert response.status_code == 201
        assert response.json()["approved_by"] == "manager-1"
        assert fetched.json()["status"] == expected_status

    async def test_requires_proposal_under_review(self, client: AsyncClient, act_as, seed):
        call = await seed.call()
        proposal = await seed.proposal(call, "pi-1")
        act_as("manager-1", "grant_manager")

        response = await client.post(f"/api/proposals/{proposal.id}/decisions", json={"decision_type": "award"})

        assert response.status_code == 409
        assert response.json()["detail"] == "Proposal is not under review"

    async def test_requires_manager(self, client: AsyncClient, act_as, seed):
        call = await seed.call()
        proposal = await seed.proposal(call, "pi-1", status=ProposalStatus.submitted)
        act_as("reviewer-1", "reviewer")

        response = await client.post(f"/api/proposals/{proposal.id}/decisions", json={"decision_type": "award"})

        assert response.status_code == 403


async def test_pi_can_list_decisions(client: AsyncClient, act_as, seed):
    call = await seed.call()
    proposal = await seed.proposal(call, "pi-1", status=ProposalStatus.submitted)
    act_as("manager-1", "grant_manager")
    await client.post(f"/api/proposals/{proposal.id}/decisions", json={"decision_type": "reject"})
    act_as("pi-1", "researcher")

    response = await client.get(f"/api/proposals/{proposal.id}/decisions")

    assert response.status_code == 200
    assert [d["decision_type"] for d in response.json()] == ["reject"]
