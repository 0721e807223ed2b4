"""Team REST API endpoints for ReviewRoster.

Provides routes for creating a team with its members, reading a team, and
deactivating a batch of members with reviewer rebalancing.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from reviewroster.domain import Team, TeamMember
from reviewroster.logging import bind_operation_context, get_logger
from reviewroster.services import TeamService, UserService
from reviewroster.web.dependencies import get_team_service, get_user_service

logger = get_logger(__name__)


# --- Pydantic Schemas ---


class TeamCreate(BaseModel):
    """Request schema for creating a team."""

    team_name: str = Field(..., min_length=1, max_length=255)
    members: list[TeamMember] = Field(default_factory=list)


class TeamResponse(BaseModel):
    """Response wrapper for a single team."""

    team: Team


class DeactivateMembersRequest(BaseModel):
    """Request schema for deactivating team members."""

    team_name: str = Field(..., min_length=1)
    user_ids: list[str] = Field(..., min_length=1)


class DeactivateMembersResponse(BaseModel):
    """Users actually deactivated by the request."""

    team_name: str
    deactivated: list[str]


# --- Router ---


def create_teams_router() -> APIRouter:
    """Create the team router.

    Routes:
        POST /team/add - Create a team with members
        GET /team/get - Read a team by name
        POST /team/deactivateMembers - Deactivate members and rebalance reviews
    """
    router = APIRouter(prefix="/team", tags=["teams"])

    @router.post("/add", response_model=TeamResponse, status_code=201)
    async def add_team(
        payload: TeamCreate,
        service: TeamService = Depends(get_team_service),  # noqa: B008
    ) -> TeamResponse:
        bind_operation_context("create_team", team_name=payload.team_name)
        team = await service.create_team(payload.team_name, payload.members)
        return TeamResponse(team=team)

    @router.get("/get", response_model=Team)
    async def get_team(
        team_name: str = Query(..., min_length=1),
        service: TeamService = Depends(get_team_service),  # noqa: B008
    ) -> Team:
        bind_operation_context("get_team", team_name=team_name)
        return await service.get_team(team_name)

    @router.post("/deactivateMembers", response_model=DeactivateMembersResponse)
    async def deactivate_members(
        payload: DeactivateMembersRequest,
        service: UserService = Depends(get_user_service),  # noqa: B008
    ) -> DeactivateMembersResponse:
        bind_operation_context("deactivate_team_members", team_name=payload.team_name)
        deactivated = await service.deactivate_team_members(payload.team_name, payload.user_ids)
        logger.info(
            "team_members_deactivated_via_api",
            requested=len(payload.user_ids),
            deactivated=len(deactivated),
        )
        return DeactivateMembersResponse(team_name=payload.team_name, deactivated=deactivated)

    return router
