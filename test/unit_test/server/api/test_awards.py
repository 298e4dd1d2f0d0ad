"""
Unit tests for awards and their milestones, disbursements and progress reports.
"""

from decimal import Decimal

import pytest
from httpx import AsyncClient

from grant_portal.core.models.domain.enums import AwardStatus, ProposalStatus

pytestmark = pytest.mark.asyncio

AWARD_DATES = {"start_date": "2026-01-01T00:00:00", "end_date": "2027-01-01T00:00:00"}


@pytest.fixture
async def approved_proposal(seed):
    call = await seed.call()
    return await seed.proposal(call, "pi-1", status=ProposalStatus.approved)


@pytest.fixture
async def award(seed, approved_proposal):
    return await seed.award(approved_proposal, amount="10000.00")


class TestCreateAward:
    async def test_award_approved_proposal(self, client: AsyncClient, act_as, approved_proposal):
        act_as("manager-1", "grant_manager")

        response = await client.post(
            "/api/awards", json={"proposal_id": approved_proposal.id, "award_amount": "25000.00", **AWARD_DATES}
        )

        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "pending"
        assert Decimal(str(data["award_amount"])) == Decimal("25000")

    async def test_proposal_must_be_approved(self, client: AsyncClient, act_as, seed):
        call = await seed.call()
        proposal = await seed.proposal(call, "pi-1", status=ProposalStatus.panel_review)
        act_as("manager-1", "grant_manager")

        response = await client.post(
            "/api/awards", json={"proposal_id": proposal.id, "award_amount": "100", **AWARD_DATES}
        )

        assert response.status_code == 409
        assert response.json()["detail"] == "Only approved proposals can be awarded"

    async def test_one_award_per_proposal(self, client: AsyncClient, act_as, approved_proposal, award):
        act_as("manager-1", "grant_manager")

        response = await client.post(
            "/api/awards", json={"proposal_id": approved_proposal.id, "award_amount": "100", **AWARD_DATES}
        )

        assert response.status_code == 409
        assert response.json()["detail"] == "Proposal has already been awarded"

    async def test_end_date_after_start(self, client: AsyncClient, act_as, approved_proposal):
        act_as("manager-1", "grant_manager")

        response = await client.post(
            "/api/awards",
            json={
                "proposal_id": approved_proposal.id,
                "award_amount": "100",
                "start_date": "2026-01-01T00:00:00",
                "end_date": "2025-01-01T00:00:00",
            },
        )

        assert response.status_code == 422

    async def test_researcher_cannot_award(self, client: AsyncClient, act_as, approved_proposal):
        act_as("pi-1", "researcher")

        response = await client.post(
            "/api/awards", json={"proposal_id": approved_proposal.id, "award_amount": "100", **AWARD_DATES}
        )

        assert response.status_code == 403


class TestViewAwards:
    async def test_pi_lists_only_own_awards(self, client: AsyncClient, act_as, seed, award):
        call = await seed.call()
        other = await seed.proposal(call, "pi-2", status=ProposalStatus.approved)
        await seed.award(other)
        act_as("pi-1", "researcher")

        response = await client.get("/api/awards")

        assert [a["id"] for a in response.json()] == [award.id]

    async def test_finance_lists_all_and_filters(self, client: AsyncClient, act_as, seed, award):
        call = await seed.call()
        other = await seed.proposal(call, "pi-2", status=ProposalStatus.approved)
        suspended = await seed.award(other, status=AwardStatus.suspended)
        act_as("finance-1", "finance_officer")

        everything = await client.get("/api/awards")
        filtered = await client.get("/api/awards", params={"status": "suspended"})

        assert len(everything.json()) == 2
        assert [a["id"] for a in filtered.json()] == [suspended.id]

    async def test_stranger_cannot_view(self, client: AsyncClient, act_as, award):
        act_as("pi-2", "researcher")

        response = await client.get(f"/api/awards/{award.id}")

        assert response.status_code == 403

    async def test_unknown_award(self, client: AsyncClient, act_as):
        act_as("manager-1", "grant_manager")

        response = await client.get("/api/awards/missing")

        assert response.status_code == 404
        assert response.json()["detail"] == "Award not found"


class TestAwardStatus:
    async def test_suspend_active_award(self, client: AsyncClient, act_as, award):
        act_as("manager-1", "grant_manager")

        response = await client.patch(f"/api/awards/{award.id}/status", json={"status": "suspended"})

        assert response.status_code == 200
        assert response.json()["status"] == "suspended"

    async def test_completed_is_terminal(self, client: AsyncClient, act_as, seed, approved_proposal):
        award = await seed.award(approved_proposal, status=AwardStatus.completed)
        act_as("manager-1", "grant_manager")

        response = await client.patch(f"/api/awards/{award.id}/status", json={"status": "active"})

        assert response.status_code == 409
        assert response.json()["detail"] == "Cannot move award from 'completed' to 'active'"


class TestMilestones:
    async def test_create_and_complete(self, client: AsyncClient, act_as, award):
        act_as("manager-1", "grant_manager")
        created = await client.post(
            f"/api/awards/{award.id}/milestones",
            json={"title": "Field campaign", "due_date": "2026-06-01T00:00:00", "deliverable_required": True},
        )

        completed = await client.patch(
            f"/api/awards/{award.id}/milestones/{created.json()['id']}", json={"status": "completed"}
        )

        assert created.status_code == 201
        assert created.json()["status"] == "pending"
        assert completed.status_code == 200
        assert completed.json()["status"] == "completed"
        assert completed.json()["completed_date"] is not None

    async def test_completed_milestone_cannot_reopen(self, client: AsyncClient, act_as, award):
        act_as("manager-1", "grant_manager")
        created = await client.post(
            f"/api/awards/{award.id}/milestones", json={"title": "Kickoff", "due_date": "2026-02-01T00:00:00"}
        )
        milestone_id = created.json()["id"]
        await client.patch(f"/api/awards/{award.id}/milestones/{milestone_id}", json={"status": "completed"})

        response = await client.patch(f"/api/awards/{award.id}/milestones/{milestone_id}", json={"status": "pending"})

        assert response.status_code == 409

    async def test_pi_lists_milestones(self, client: AsyncClient, act_as, award):
        act_as("manager-1", "grant_manager")
        await client.post(f"/api/awards/{award.id}/milestones", json={"title": "B", "due_date": "2026-09-01T00:00:00"})
        await client.post(f"/api/awards/{award.id}/milestones", json={"title": "A", "due_date": "2026-03-01T00:00:00"})
        act_as("pi-1", "researcher")

        response = await client.get(f"/api/awards/{award.id}/milestones")

        assert [m["title"] for m in response.json()] == ["A", "B"]

    async def test_unknown_milestone(self, client: AsyncClient, act_as, award):
        act_as("manager-1", "grant_manager")

        response = await client.patch(f"/api/awards/{award.id}/milestones/missing", json={"title": "x"})

        assert response.status_code == 404


class TestDisbursements:
    async def schedule(self, client: AsyncClient, award_id: str, amount: str):
        return await client.post(
            f"/api/awards/{award_id}/disbursements", json={"amount": amount, "scheduled_date": "2026-03-01T00:00:00"}
        )

    async def test_schedule_within_award(self, client: AsyncClient, act_as, award):
        act_as("finance-1", "finance_officer")

        first = await self.schedule(client, award.id, "6000")
        second = await self.schedule(client, award.id, "4000")

        assert first.status_code == 201
        assert first.json()["status"] == "scheduled"
        assert second.status_code == 201

    async def test_cannot_exceed_award_amount(self, client: AsyncClient, act_as, award):
        act_as("finance-1", "finance_officer")
        await self.schedule(client, award.id, "6000")

        response = await self.schedule(client, award.id, "4000.01")

        assert response.status_code == 409
        assert response.json()["detail"] == "Disbursements would exceed the award amount"

    async def test_cancelled_disbursement_frees_amount(self, client: AsyncClient, act_as, award):
        act_as("finance-1", "finance_officer")
        first = (await self.schedule(client, award.id, "8000")).json()

        cancelled = await client.patch(
            f"/api/awards/{award.id}/disbursements/{first['id']}", json={"status": "cancelled"}
        )
        response = await self.schedule(client, award.id, "9000")

        assert cancelled.json()["status"] == "cancelled"
        assert response.status_code == 201

    async def test_rescheduling_failed_payment_is_checked(self, client: AsyncClient, act_as, award):
        act_as("finance-1", "finance_officer")
        first = (await self.schedule(client, award.id, "8000")).json()
        url = f"/api/awards/{award.id}/disbursements/{first['id']}"
        await client.patch(url, json={"status": "pending"})
        await client.patch(url, json={"status": "failed"})
        await self.schedule(client, award.id, "5000")

        response = await client.patch(url, json={"status": "scheduled"})

        assert response.status_code == 409

    async def test_processing_stamps_date(self, client: AsyncClient, act_as, award):
        act_as("finance-1", "finance_officer")
        first = (await self.schedule(client, award.id, "1000")).json()
        url = f"/api/awards/{award.id}/disbursements/{first['id']}"
        await client.patch(url, json={"status": "pending"})

        response = await client.patch(url, json={"status": "processed", "transaction_ref": "TX-1"})

        assert response.json()["status"] == "processed"
        assert response.json()["processed_date"] is not None
        assert response.json()["transaction_ref"] == "TX-1"

    async def test_researcher_cannot_schedule(self, client: AsyncClient, act_as, award):
        act_as("pi-1", "researcher")

        response = await self.schedule(client, award.id, "10")

        assert response.status_code == 403


class TestProgressReports:
    async def test_pi_creates_and_submits(self, client: AsyncClient, act_as, award):
        act_as("pi-1", "researcher")
        created = await client.post(
            f"/api/awards/{award.id}/reports", json={"reporting_period": "2026-Q1", "narrative": "On track"}
        )

        submitted = await client.post(f"/api/awards/{award.id}/reports/{created.json()['id']}/submit")

        assert created.status_code == 201
        assert created.json()["status"] == "draft"
        assert submitted.status_code == 200
        assert submitted.json()["status"] == "submitted"
        assert submitted.json()["submitted_by"] == "pi-1"

    async def test_manager_reviews_report(self, client: AsyncClient, act_as, award):
        act_as("pi-1", "researcher")
        report = (await client.post(f"/api/awards/{award.id}/reports", json={"reporting_period": "2026-Q1"})).json()
        await client.post(f"/api/awards/{award.id}/reports/{report['id']}/submit")
        act_as("manager-1", "grant_manager")

        response = await client.patch(
            f"/api/awards/{award.id}/reports/{report['id']}/status", json={"status": "reviewed"}
        )

        assert response.status_code == 200
        assert response.json()["status"] == "reviewed"

    async def test_only_pi_submits(self, client: AsyncClient, act_as, award):
        act_as("manager-1", "grant_manager")
        report = (await client.post(f"/api/awards/{award.id}/reports", json={"reporting_period": "2026-Q1"})).json()

        response = await client.post(f"/api/awards/{award.id}/reports/{report['id']}/submit")

        assert response.status_code == 403
        assert response.json()["detail"] == "Only the principal investigator can submit this report"

    async def test_draft_cannot_be_approved(self, client: AsyncClient, act_as, award):
        act_as("pi-1", "researcher")
        report = (await client.post(f"/api/awards/{award.id}/reports", json={"reporting_period": "2026-Q1"})).json()
        act_as("manager-1", "grant_manager")

        response = await client.patch(
            f"/api/awards/{award.id}/reports/{report['id']}/status", json={"status": "approved"}
        )

        assert response.status_code == 409

    async def test_manager_cannot_submit_report(self, client: AsyncClient, act_as, award, repos):
        act_as("pi-1", "researcher")
        report = (await client.post(f"/api/awards/{award.id}/reports", json={"reporting_period": "2026-Q1"})).json()
        act_as("manager-1", "grant_manager")

        response = await client.patch(
            f"/api/awards/{award.id}/reports/{report['id']}/status", json={"status": "submitted"}
        )

        assert response.status_code == 409
        assert response.json()["detail"] == "Reports are submitted by the principal investigator"
        stored = await repos.reports.get_by_id(report["id"])
        assert stored.status == "draft"
        assert stored.submitted_by is None

    async def test_finance_cannot_create_report(self, client: AsyncClient, act_as, award):
        act_as("finance-1", "finance_officer")

        response = await client.post(f"/api/awards/{award.id}/reports", json={"reporting_period": "2026-Q1"})

        assert response.status_code == 403
