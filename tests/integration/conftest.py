"""Pytest fixtures for integration tests.

Provides async database fixtures for testing query functions, stores and
HTTP routes against an in-memory SQLite database. Production runs on
PostgreSQL; the schema uses no dialect-specific types, so the same models
work on both.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from reviewroster.config import AssignmentConfig
from reviewroster.database.connection import create_schema, get_session_factory
from reviewroster.database.models import PullRequest, PullRequestReviewer, Team, User
from reviewroster.database.stores import SqlPullRequestStore, SqlTeamDirectory, SqlUserDirectory
from reviewroster.domain import PullRequestStatus
from reviewroster.web.app import create_app, install_services


@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create an in-memory SQLite async engine shared by all sessions of a test."""
    test_engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await create_schema(test_engine)

    yield test_engine

    await test_engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return get_session_factory(engine)


@pytest_asyncio.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Create a new async database session for each test."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture
async def seed(session_factory: async_sessionmaker[AsyncSession]):
    """Return a coroutine that inserts teams, users and pull requests.

    Usage:
        await seed(
            teams={"backend": [("A", True), ("B", True)]},
            pull_requests=[("pr-1", "A", ["B"], PullRequestStatus.OPEN)],
        )
    """

    async def _seed(
        teams: dict[str, list[tuple[str, bool]]] | None = None,
        pull_requests: list[tuple[str, str, list[str], PullRequestStatus]] | None = None,
    ) -> None:
        async with session_factory() as session:
            for team_name, members in (teams or {}).items():
                session.add(Team(team_name=team_name))
                for user_id, is_active in members:
                    session.add(
                        User(
                            user_id=user_id,
                            username=f"User {user_id}",
                            team_name=team_name,
                            is_active=is_active,
                        )
                    )
            await session.flush()
            for pr_id, author_id, reviewers, status in pull_requests or []:
                session.add(
                    PullRequest(
                        pull_request_id=pr_id,
                        pull_request_name=f"Change {pr_id}",
                        author_id=author_id,
                        status=status,
                        reviewers=[
                            PullRequestReviewer(reviewer_id=reviewer_id, position=position)
                            for position, reviewer_id in enumerate(reviewers)
                        ],
                    )
                )
            await session.commit()

    return _seed


@pytest_asyncio.fixture
async def user_directory(session_factory: async_sessionmaker[AsyncSession]) -> SqlUserDirectory:
    return SqlUserDirectory(session_factory)


@pytest_asyncio.fixture
async def team_directory(session_factory: async_sessionmaker[AsyncSession]) -> SqlTeamDirectory:
    return SqlTeamDirectory(session_factory)


@pytest_asyncio.fixture
async def pull_request_store(
    session_factory: async_sessionmaker[AsyncSession],
) -> SqlPullRequestStore:
    return SqlPullRequestStore(session_factory)


@pytest_asyncio.fixture
async def async_client(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client for an app wired to the SQLite-backed stores and services."""
    app = create_app()
    install_services(app, session_factory, AssignmentConfig())

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
