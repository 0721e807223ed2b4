"""FastAPI application factory for ReviewRoster.

This module provides the application factory that creates and configures
a FastAPI application with:
- CORS middleware for cross-origin requests
- Request logging middleware with correlation IDs
- Error handlers rendering ``{"error": {"code", "message"}}`` bodies
- Database, store and service lifecycle management

Example usage:
    >>> from reviewroster.config import ReviewRosterConfig
    >>> from reviewroster.web.app import create_app
    >>>
    >>> app = create_app(ReviewRosterConfig())
    >>>
    >>> import uvicorn
    >>> uvicorn.run(app, host="0.0.0.0", port=8080)
"""

from __future__ import annotations

import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from reviewroster import __version__
from reviewroster.config import AssignmentConfig, ReviewRosterConfig, load_config
from reviewroster.database.connection import get_engine, get_session_factory
from reviewroster.database.stores import (
    SqlPullRequestStore,
    SqlTeamDirectory,
    SqlUserDirectory,
)
from reviewroster.logging import get_logger, setup_logging
from reviewroster.services import (
    DeactivationCascade,
    PullRequestService,
    ReviewerStatsService,
    SecureRandomSelector,
    TeamService,
    UserService,
)
from reviewroster.web.errors import register_error_handlers
from reviewroster.web.middleware import RequestLoggingMiddleware
from reviewroster.web.routes.health import create_health_router
from reviewroster.web.routes.pull_requests import create_pull_requests_router
from reviewroster.web.routes.stats import create_stats_router
from reviewroster.web.routes.teams import create_teams_router
from reviewroster.web.routes.users import create_users_router

logger = get_logger(__name__)


def install_services(
    app: FastAPI,
    session_factory: async_sessionmaker[AsyncSession],
    assignment: AssignmentConfig,
) -> None:
    """Build the SQL stores and services and store them in app.state.

    Args:
        app: Application to populate.
        session_factory: Session factory the stores open sessions from.
        assignment: Reviewer assignment settings.
    """
    users = SqlUserDirectory(session_factory)
    teams = SqlTeamDirectory(session_factory)
    pull_requests = SqlPullRequestStore(session_factory)
    cascade = DeactivationCascade(teams=teams, users=users, pull_requests=pull_requests)

    app.state.session_factory = session_factory
    app.state.team_service = TeamService(teams=teams, users=users)
    app.state.user_service = UserService(
        users=users,
        pull_requests=pull_requests,
        cascade=cascade,
    )
    app.state.pull_request_service = PullRequestService(
        users=users,
        pull_requests=pull_requests,
        selector=SecureRandomSelector(),
        reviewers_per_pull_request=assignment.reviewers_per_pull_request,
    )
    app.state.stats_service = ReviewerStatsService(pull_requests=pull_requests)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create the database engine and services on startup, dispose on shutdown.

    Args:
        app: FastAPI application instance

    Yields:
        None after startup, cleans up on context exit
    """
    config: ReviewRosterConfig = app.state.config

    logger.info("app_startup_begin", host=config.web.host, port=config.web.port)

    engine = get_engine(config.database)
    app.state.engine = engine
    install_services(app, get_session_factory(engine), config.assignment)

    logger.info(
        "services_initialized",
        pool_size=config.database.pool_size,
        reviewers_per_pull_request=config.assignment.reviewers_per_pull_request,
    )

    yield

    logger.info("app_shutdown_begin")
    await engine.dispose()
    logger.info("database_pool_disposed")


def create_app(config: ReviewRosterConfig | None = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Args:
        config: Optional ReviewRosterConfig. If None, creates default config.

    Returns:
        Configured FastAPI application instance.
    """
    if config is None:
        config = ReviewRosterConfig()

    app = FastAPI(
        title="ReviewRoster",
        version=__version__,
        description="Pull request reviewer assignment service",
        lifespan=lifespan,
    )

    # Read by the lifespan on startup
    app.state.config = config

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.web.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggingMiddleware)

    register_error_handlers(app)

    app.include_router(create_health_router())
    app.include_router(create_teams_router())
    app.include_router(create_users_router())
    app.include_router(create_pull_requests_router())
    app.include_router(create_stats_router())

    logger.info(
        "app_created",
        cors_origins=config.web.cors_origins,
        version=__version__,
    )

    return app


CONFIG_PATH_ENV = "REVIEWROSTER_CONFIG_FILE"


def create_app_from_environment() -> FastAPI:
    """Application factory for ``uvicorn --reload`` and other import-string runners.

    Reload workers re-import the application in a fresh process, so the
    configuration file chosen on the command line is passed through the
    ``REVIEWROSTER_CONFIG_FILE`` environment variable. Without it the usual
    search order of ``load_config`` applies.
    """
    config_path = os.environ.get(CONFIG_PATH_ENV)
    config = load_config(Path(config_path) if config_path else None)
    setup_logging(config.logging)
    return create_app(config)
