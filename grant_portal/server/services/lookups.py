"""Fetch-or-raise helpers shared by the services."""

from __future__ import annotations

from grant_portal.core.database.entities import Award, CallForProposal, Proposal
from grant_portal.core.database.repositories import RepoBundle
from grant_portal.core.errors import NotFoundError


async def get_call_or_404(repos: RepoBundle, call_id: str) -> CallForProposal:
    call = await repos.calls.get_by_id(call_id)
    if call is None:
        raise NotFoundError("Call not found")
    return call


async def get_proposal_or_404(repos: RepoBundle, proposal_id: str) -> Proposal:
    proposal = await repos.proposals.get_by_id(proposal_id)
    if proposal is None:
        raise NotFoundError("Proposal not found")
    return proposal


async def get_award_or_404(repos: RepoBundle, award_id: str) -> Award:
    award = await repos.awards.get_by_id(award_id)
    if award is None:
        raise NotFoundError("Award not found")
    return award
