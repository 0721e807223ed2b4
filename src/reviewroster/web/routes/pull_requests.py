"""Pull request REST API endpoints for ReviewRoster.

Provides routes for opening a pull request with automatic reviewer
assignment, merging it, and swapping one of its reviewers.
"""

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from reviewroster.domain import PullRequest, PullRequestStatus
from reviewroster.logging import bind_operation_context, get_logger
from reviewroster.services import PullRequestService
from reviewroster.web.dependencies import get_pull_request_service

logger = get_logger(__name__)


# --- Pydantic Schemas ---


class PullRequestCreate(BaseModel):
    """Request schema for opening a pull request."""

    pull_request_id: str = Field(..., min_length=1, max_length=255)
    pull_request_name: str = Field(..., min_length=1, max_length=255)
    author_id: str = Field(..., min_length=1)


class PullRequestMerge(BaseModel):
    """Request schema for merging a pull request."""

    pull_request_id: str = Field(..., min_length=1)


class PullRequestReassign(BaseModel):
    """Request schema for replacing one reviewer."""

    pull_request_id: str = Field(..., min_length=1)
    old_user_id: str = Field(..., min_length=1)


class PullRequestBody(BaseModel):
    """Pull request as rendered by the API.

    Timestamps are exposed as ``createdAt`` and ``mergedAt``.
    """

    pull_request_id: str
    pull_request_name: str
    author_id: str
    status: PullRequestStatus
    assigned_reviewers: list[str]
    model_config = ConfigDict(populate_by_name=True)

    created_at: datetime | None = Field(default=None, alias="createdAt")
    merged_at: datetime | None = Field(default=None, alias="mergedAt")

    @classmethod
    def from_domain(cls, pull_request: PullRequest) -> PullRequestBody:
        return cls(**pull_request.model_dump())


class PullRequestResponse(BaseModel):
    """Response wrapper for a single pull request."""

    pr: PullRequestBody


class ReassignResponse(BaseModel):
    """Response for a reviewer swap."""

    pr: PullRequestBody
    replaced_by: str


# --- Router ---


def create_pull_requests_router() -> APIRouter:
    """Create the pull request router.

    Routes:
        POST /pullRequest/create - Open a pull request and assign reviewers
        POST /pullRequest/merge - Merge a pull request (idempotent)
        POST /pullRequest/reassign - Replace one reviewer
    """
    router = APIRouter(prefix="/pullRequest", tags=["pull_requests"])

    @router.post("/create", response_model=PullRequestResponse, status_code=201)
    async def create_pull_request(
        payload: PullRequestCreate,
        service: PullRequestService = Depends(get_pull_request_service),  # noqa: B008
    ) -> PullRequestResponse:
        bind_operation_context(
            "create_pull_request",
            pull_request_id=payload.pull_request_id,
            author_id=payload.author_id,
        )
        pull_request = await service.create_pull_request(
            payload.pull_request_id,
            payload.pull_request_name,
            payload.author_id,
        )
        logger.info("pull_request_created_via_api", reviewers=pull_request.assigned_reviewers)
        return PullRequestResponse(pr=PullRequestBody.from_domain(pull_request))

    @router.post("/merge", response_model=PullRequestResponse)
    async def merge_pull_request(
        payload: PullRequestMerge,
        service: PullRequestService = Depends(get_pull_request_service),  # noqa: B008
    ) -> PullRequestResponse:
        bind_operation_context("merge_pull_request", pull_request_id=payload.pull_request_id)
        pull_request = await service.merge_pull_request(payload.pull_request_id)
        return PullRequestResponse(pr=PullRequestBody.from_domain(pull_request))

    @router.post("/reassign", response_model=ReassignResponse)
    async def reassign_reviewer(
        payload: PullRequestReassign,
        service: PullRequestService = Depends(get_pull_request_service),  # noqa: B008
    ) -> ReassignResponse:
        bind_operation_context(
            "reassign_reviewer",
            pull_request_id=payload.pull_request_id,
            old_reviewer_id=payload.old_user_id,
        )
        pull_request, new_reviewer_id = await service.reassign_reviewer(
            payload.pull_request_id,
            payload.old_user_id,
        )
        return ReassignResponse(
            pr=PullRequestBody.from_domain(pull_request),
            replaced_by=new_reviewer_id,
        )

    return router
