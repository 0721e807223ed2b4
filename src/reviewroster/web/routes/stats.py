"""Reviewer statistics endpoint for ReviewRoster."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from reviewroster.domain import ReviewerStat
from reviewroster.services import ReviewerStatsService
from reviewroster.web.dependencies import get_stats_service


class ReviewerStatsResponse(BaseModel):
    """Assignment counts per reviewer, highest first."""

    stats: list[ReviewerStat]


def create_stats_router() -> APIRouter:
    """Create the stats router.

    Routes:
        GET /stats/reviewers - Review assignment counts per user
    """
    router = APIRouter(prefix="/stats", tags=["stats"])

    @router.get("/reviewers", response_model=ReviewerStatsResponse)
    async def reviewer_stats(
        service: ReviewerStatsService = Depends(get_stats_service),  # noqa: B008
    ) -> ReviewerStatsResponse:
        return ReviewerStatsResponse(stats=await service.get_reviewer_stats())

    return router
