"""FastAPI dependencies resolving collaborators from ``app.state``."""

from __future__ import annotations

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from reviewroster.services import (
    PullRequestService,
    ReviewerStatsService,
    TeamService,
    UserService,
)


def get_session_factory(request: Request) -> async_sessionmaker[AsyncSession]:
    """Dependency that retrieves the session factory from app state."""
    return request.app.state.session_factory  # type: ignore[no-any-return]


def get_team_service(request: Request) -> TeamService:
    return request.app.state.team_service  # type: ignore[no-any-return]


def get_user_service(request: Request) -> UserService:
    return request.app.state.user_service  # type: ignore[no-any-return]


def get_pull_request_service(request: Request) -> PullRequestService:
    return request.app.state.pull_request_service  # type: ignore[no-any-return]


def get_stats_service(request: Request) -> ReviewerStatsService:
    return request.app.state.stats_service  # type: ignore[no-any-return]
