"""SQL-backed collaborators for the ReviewRoster services.

Each store wraps the query functions with a session factory. Every method
opens its own session, so each write is one atomic unit scoped to a single
entity, and every read observes the latest committed state. ORM rows are
converted to detached domain models before the session closes.

Example usage:
    >>> session_factory = get_session_factory(get_engine(config.database))
    >>> users = SqlUserDirectory(session_factory)
    >>> user = await users.get_by_id("u1")
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from reviewroster.database.queries import pull_request as pr_queries
from reviewroster.database.queries import team as team_queries
from reviewroster.database.queries import user as user_queries
from reviewroster.domain import (
    PullRequest,
    PullRequestShort,
    PullRequestStatus,
    Team,
    TeamMember,
    User,
)
from reviewroster.errors import NotFoundError


class SqlUserDirectory:
    """User directory backed by the ``users`` table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get_by_id(self, user_id: str) -> User:
        async with self._session_factory() as session:
            user = await user_queries.get_user(session, user_id)
            if user is None:
                raise NotFoundError(
                    f"user {user_id} not found",
                    entity="user",
                    entity_id=user_id,
                    operation="get_user",
                )
            return User.model_validate(user)

    async def list_by_team(self, team_name: str) -> list[User]:
        async with self._session_factory() as session:
            users = await user_queries.list_users_by_team(session, team_name)
            return [User.model_validate(user) for user in users]

    async def update_active(self, user_id: str, is_active: bool) -> None:
        async with self._session_factory() as session:
            await user_queries.update_user_active(session, user_id, is_active)

    async def add_team_members(self, team_name: str, members: Sequence[TeamMember]) -> None:
        async with self._session_factory() as session:
            await user_queries.upsert_team_members(session, team_name, members)


class SqlTeamDirectory:
    """Team directory backed by the ``teams`` table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def create(self, team_name: str) -> None:
        async with self._session_factory() as session:
            await team_queries.create_team(session, team_name)

    async def get_by_name(self, team_name: str) -> Team:
        async with self._session_factory() as session:
            team = await team_queries.get_team(session, team_name)
            if team is None:
                raise NotFoundError(
                    f"team {team_name} not found",
                    entity="team",
                    entity_id=team_name,
                    operation="get_team",
                )
            return Team(
                team_name=team.team_name,
                members=[TeamMember.model_validate(user) for user in team.members],
            )


class SqlPullRequestStore:
    """Pull request store backed by ``pull_requests`` and ``pr_reviewers``."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def create(self, pull_request: PullRequest) -> None:
        async with self._session_factory() as session:
            await pr_queries.create_pull_request(
                session,
                pull_request_id=pull_request.pull_request_id,
                pull_request_name=pull_request.pull_request_name,
                author_id=pull_request.author_id,
                reviewer_ids=pull_request.assigned_reviewers,
            )

    async def get_by_id(self, pull_request_id: str) -> PullRequest:
        async with self._session_factory() as session:
            row = await pr_queries.get_pull_request(session, pull_request_id)
            if row is None:
                raise NotFoundError(
                    f"pull request {pull_request_id} not found",
                    entity="pull_request",
                    entity_id=pull_request_id,
                    operation="get_pull_request",
                )
            return PullRequest.model_validate(row)

    async def update_status(
        self,
        pull_request_id: str,
        status: PullRequestStatus,
        merged_at: datetime | None,
        expected_status: PullRequestStatus | None = None,
    ) -> None:
        async with self._session_factory() as session:
            await pr_queries.update_pull_request_status(
                session,
                pull_request_id,
                status,
                merged_at,
                expected_status=expected_status,
            )

    async def set_reviewers(self, pull_request_id: str, reviewer_ids: Sequence[str]) -> None:
        async with self._session_factory() as session:
            await pr_queries.set_reviewers(session, pull_request_id, reviewer_ids)

    async def list_by_reviewer(self, reviewer_id: str) -> list[PullRequestShort]:
        async with self._session_factory() as session:
            rows = await pr_queries.list_by_reviewer(session, reviewer_id)
            return [PullRequestShort.model_validate(row) for row in rows]

    async def list_open_by_reviewers(
        self, reviewer_ids: Sequence[str]
    ) -> list[PullRequestShort]:
        async with self._session_factory() as session:
            rows = await pr_queries.list_open_by_reviewers(session, reviewer_ids)
            return [PullRequestShort.model_validate(row) for row in rows]

    async def count_by_reviewer(self) -> dict[str, int]:
        async with self._session_factory() as session:
            return await pr_queries.count_by_reviewer(session)
