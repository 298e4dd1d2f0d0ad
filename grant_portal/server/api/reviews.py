"""
Review Endpoints.

Reviewers (and managers) score proposals that are under review. A review
stays editable by its author until it is submitted.
"""

from typing import List

from fastapi import APIRouter, status

from grant_portal.core.models.io.reviews import ReviewCreate, ReviewRead, ReviewUpdate
from grant_portal.server.auth.dependencies import CurrentUserDep
from grant_portal.server.services import reviews as review_service
from grant_portal.server.services.access import ReviewerDep
from grant_portal.server.services.deps import ReposDep

router = APIRouter()


@router.get(
    "/proposals/{proposal_id}/reviews",
    response_model=List[ReviewRead],
    summary="List Reviews",
    description="Managers and auditors see every review; reviewers see their own; the PI sees submitted ones.",
)
async def list_reviews(proposal_id: str, user: CurrentUserDep, repos: ReposDep) -> List[ReviewRead]:
    reviews = await review_service.list_reviews(repos, user, proposal_id)
    return [ReviewRead.model_validate(r) for r in reviews]


@router.post(
    "/proposals/{proposal_id}/reviews",
    response_model=ReviewRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Review",
    responses={
        403: {"description": "Not a reviewer, or reviewing one's own proposal"},
        409: {"description": "Proposal not under review, or already reviewed"},
    },
)
async def create_review(proposal_id: str, body: ReviewCreate, user: ReviewerDep, repos: ReposDep) -> ReviewRead:
    """
    Review a proposal.

    - **scores**: criterion -> score mapping, following the call's rubrics.
    - **submit**: finalise the review now; it can no longer be edited afterwards.
    """
    review = await review_service.create_review(repos, user, proposal_id, body)
    return ReviewRead.model_validate(review)


@router.put(
    "/proposals/{proposal_id}/reviews/{review_id}",
    response_model=ReviewRead,
    summary="Update Review",
    responses={403: {"description": "Not the author"}, 409: {"description": "Already submitted"}},
)
async def update_review(
    proposal_id: str, review_id: str, body: ReviewUpdate, user: CurrentUserDep, repos: ReposDep
) -> ReviewRead:
    review = await review_service.update_review(repos, user, proposal_id, review_id, body)
    return ReviewRead.model_validate(review)


@router.get("/reviews/mine", response_model=List[ReviewRead], summary="My Reviews")
async def my_reviews(user: CurrentUserDep, repos: ReposDep) -> List[ReviewRead]:
    return [ReviewRead.model_validate(r) for r in await review_service.list_my_reviews(repos, user)]
