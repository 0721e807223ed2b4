"""FastAPI route definitions for the ReviewRoster API.

This module contains route handlers for teams, users, pull requests,
reviewer statistics and health checks.
"""

from __future__ import annotations

from reviewroster.web.routes.health import (
    HealthResponse,
    ReadinessResponse,
    create_health_router,
)
from reviewroster.web.routes.pull_requests import (
    PullRequestBody,
    PullRequestCreate,
    PullRequestMerge,
    PullRequestReassign,
    create_pull_requests_router,
)
from reviewroster.web.routes.stats import ReviewerStatsResponse, create_stats_router
from reviewroster.web.routes.teams import (
    DeactivateMembersRequest,
    TeamCreate,
    create_teams_router,
)
from reviewroster.web.routes.users import SetIsActiveRequest, create_users_router

__all__ = [
    # Health
    "HealthResponse",
    "ReadinessResponse",
    "create_health_router",
    # Teams
    "DeactivateMembersRequest",
    "TeamCreate",
    "create_teams_router",
    # Users
    "SetIsActiveRequest",
    "create_users_router",
    # Pull requests
    "PullRequestBody",
    "PullRequestCreate",
    "PullRequestMerge",
    "PullRequestReassign",
    "create_pull_requests_router",
    # Stats
    "ReviewerStatsResponse",
    "create_stats_router",
]
