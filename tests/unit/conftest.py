"""Pytest fixtures for unit tests.

Provides in-memory implementations of the directory and store interfaces
so the services can be exercised without a database. The fakes follow the
same contracts as the SQL stores: lookups raise NotFoundError, duplicate
creates raise AlreadyExistsError, and conditional status updates raise
NotFoundError when no row matches.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timezone
from typing import Any

import pytest

from reviewroster.domain import (
    PullRequest,
    PullRequestShort,
    PullRequestStatus,
    Team,
    TeamMember,
    User,
)
from reviewroster.errors import AlreadyExistsError, NotFoundError
from reviewroster.services import (
    DeactivationCascade,
    PullRequestService,
    ReviewerStatsService,
    TeamService,
    UserService,
)


class InMemoryRoster:
    """Shared state behind the fake directories and store."""

    def __init__(self) -> None:
        self.teams: set[str] = set()
        self.users: dict[str, User] = {}
        self.pull_requests: dict[str, PullRequest] = {}
        self.calls: list[tuple[str, tuple[Any, ...]]] = []
        self.failures: dict[str, Exception] = {}

    def record(self, method: str, *args: Any) -> None:
        self.calls.append((method, args))
        if method in self.failures:
            raise self.failures[method]

    def calls_to(self, method: str) -> list[tuple[Any, ...]]:
        return [args for name, args in self.calls if name == method]

    def add_team(self, team_name: str, *members: tuple[str, bool]) -> None:
        """Seed a team. Each member is ``(user_id, is_active)``."""
        self.teams.add(team_name)
        for user_id, is_active in members:
            self.users[user_id] = User(
                user_id=user_id,
                username=user_id.upper(),
                team_name=team_name,
                is_active=is_active,
            )

    def add_pull_request(
        self,
        pull_request_id: str,
        author_id: str,
        reviewers: Sequence[str],
        status: PullRequestStatus = PullRequestStatus.OPEN,
    ) -> None:
        self.pull_requests[pull_request_id] = PullRequest(
            pull_request_id=pull_request_id,
            pull_request_name=f"Change {pull_request_id}",
            author_id=author_id,
            status=status,
            assigned_reviewers=list(reviewers),
            created_at=datetime(2026, 1, 1, tzinfo=timezone.utc),
            merged_at=(
                datetime(2026, 1, 2, tzinfo=timezone.utc)
                if status == PullRequestStatus.MERGED
                else None
            ),
        )

    def reviewers_of(self, pull_request_id: str) -> list[str]:
        return list(self.pull_requests[pull_request_id].assigned_reviewers)


def _short(pull_request: PullRequest) -> PullRequestShort:
    return PullRequestShort(
        pull_request_id=pull_request.pull_request_id,
        pull_request_name=pull_request.pull_request_name,
        author_id=pull_request.author_id,
        status=pull_request.status,
    )


class FakeUserDirectory:
    def __init__(self, roster: InMemoryRoster) -> None:
        self.roster = roster

    async def get_by_id(self, user_id: str) -> User:
        self.roster.record("get_user", user_id)
        if user_id not in self.roster.users:
            raise NotFoundError(f"user {user_id} not found", entity="user", entity_id=user_id)
        return self.roster.users[user_id].model_copy()

    async def list_by_team(self, team_name: str) -> list[User]:
        self.roster.record("list_by_team", team_name)
        members = [u for u in self.roster.users.values() if u.team_name == team_name]
        return [u.model_copy() for u in sorted(members, key=lambda u: u.user_id)]

    async def update_active(self, user_id: str, is_active: bool) -> None:
        self.roster.record("update_active", user_id, is_active)
        if user_id not in self.roster.users:
            raise NotFoundError(f"user {user_id} not found", entity="user", entity_id=user_id)
        self.roster.users[user_id] = self.roster.users[user_id].model_copy(
            update={"is_active": is_active}
        )

    async def add_team_members(self, team_name: str, members: Sequence[TeamMember]) -> None:
        self.roster.record("add_team_members", team_name, tuple(members))
        for member in members:
            self.roster.users[member.user_id] = User(
                user_id=member.user_id,
                username=member.username,
                team_name=team_name,
                is_active=member.is_active,
            )


class FakeTeamDirectory:
    def __init__(self, roster: InMemoryRoster) -> None:
        self.roster = roster

    async def create(self, team_name: str) -> None:
        self.roster.record("create_team", team_name)
        if team_name in self.roster.teams:
            raise AlreadyExistsError(
                f"team {team_name} already exists", entity="team", entity_id=team_name
            )
        self.roster.teams.add(team_name)

    async def get_by_name(self, team_name: str) -> Team:
        self.roster.record("get_team", team_name)
        if team_name not in self.roster.teams:
            raise NotFoundError(f"team {team_name} not found", entity="team", entity_id=team_name)
        members = sorted(
            (u for u in self.roster.users.values() if u.team_name == team_name),
            key=lambda u: u.user_id,
        )
        return Team(
            team_name=team_name,
            members=[
                TeamMember(user_id=u.user_id, username=u.username, is_active=u.is_active)
                for u in members
            ],
        )


class FakePullRequestStore:
    def __init__(self, roster: InMemoryRoster) -> None:
        self.roster = roster
        self.raw_counts: dict[str, Any] | None = None

    async def create(self, pull_request: PullRequest) -> None:
        self.roster.record("create_pull_request", pull_request)
        if pull_request.pull_request_id in self.roster.pull_requests:
            raise AlreadyExistsError(
                f"pull request {pull_request.pull_request_id} already exists",
                entity="pull_request",
                entity_id=pull_request.pull_request_id,
            )
        self.roster.pull_requests[pull_request.pull_request_id] = pull_request.model_copy(
            update={"created_at": datetime.now(timezone.utc)}
        )

    async def get_by_id(self, pull_request_id: str) -> PullRequest:
        self.roster.record("get_pull_request", pull_request_id)
        if pull_request_id not in self.roster.pull_requests:
            raise NotFoundError(
                f"pull request {pull_request_id} not found",
                entity="pull_request",
                entity_id=pull_request_id,
            )
        return self.roster.pull_requests[pull_request_id].model_copy(deep=True)

    async def update_status(
        self,
        pull_request_id: str,
        status: PullRequestStatus,
        merged_at: datetime | None,
        expected_status: PullRequestStatus | None = None,
    ) -> None:
        self.roster.record("update_status", pull_request_id, status, merged_at, expected_status)
        current = self.roster.pull_requests.get(pull_request_id)
        if current is None or (expected_status is not None and current.status != expected_status):
            raise NotFoundError(
                f"pull request {pull_request_id} not found",
                entity="pull_request",
                entity_id=pull_request_id,
            )
        self.roster.pull_requests[pull_request_id] = current.model_copy(
            update={"status": status, "merged_at": merged_at}
        )

    async def set_reviewers(self, pull_request_id: str, reviewer_ids: Sequence[str]) -> None:
        self.roster.record("set_reviewers", pull_request_id, tuple(reviewer_ids))
        current = self.roster.pull_requests[pull_request_id]
        self.roster.pull_requests[pull_request_id] = current.model_copy(
            update={"assigned_reviewers": list(reviewer_ids)}
        )

    async def list_by_reviewer(self, reviewer_id: str) -> list[PullRequestShort]:
        self.roster.record("list_by_reviewer", reviewer_id)
        return [
            _short(pr)
            for pr in self.roster.pull_requests.values()
            if reviewer_id in pr.assigned_reviewers
        ]

    async def list_open_by_reviewers(
        self, reviewer_ids: Sequence[str]
    ) -> list[PullRequestShort]:
        self.roster.record("list_open_by_reviewers", tuple(reviewer_ids))
        wanted = set(reviewer_ids)
        return [
            _short(pr)
            for pr_id, pr in sorted(self.roster.pull_requests.items())
            if pr.status == PullRequestStatus.OPEN and wanted & set(pr.assigned_reviewers)
        ]

    async def count_by_reviewer(self) -> dict[str, Any]:
        self.roster.record("count_by_reviewer")
        if self.raw_counts is not None:
            return dict(self.raw_counts)
        counts: dict[str, int] = {}
        for pr in self.roster.pull_requests.values():
            for reviewer_id in pr.assigned_reviewers:
                counts[reviewer_id] = counts.get(reviewer_id, 0) + 1
        return counts


class FirstCandidatesSelector:
    """Deterministic selector returning the first ``n`` candidates."""

    def __init__(self) -> None:
        self.calls: list[tuple[list[str], int]] = []

    def pick(self, candidates: Sequence[str], n: int) -> list[str]:
        self.calls.append((list(candidates), n))
        return list(dict.fromkeys(candidates))[: max(n, 0)]


@pytest.fixture
def roster() -> InMemoryRoster:
    return InMemoryRoster()


@pytest.fixture
def users(roster: InMemoryRoster) -> FakeUserDirectory:
    return FakeUserDirectory(roster)


@pytest.fixture
def teams(roster: InMemoryRoster) -> FakeTeamDirectory:
    return FakeTeamDirectory(roster)


@pytest.fixture
def pull_requests(roster: InMemoryRoster) -> FakePullRequestStore:
    return FakePullRequestStore(roster)


@pytest.fixture
def selector() -> FirstCandidatesSelector:
    return FirstCandidatesSelector()


@pytest.fixture
def pr_service(
    users: FakeUserDirectory,
    pull_requests: FakePullRequestStore,
    selector: FirstCandidatesSelector,
) -> PullRequestService:
    return PullRequestService(users=users, pull_requests=pull_requests, selector=selector)


@pytest.fixture
def cascade(
    teams: FakeTeamDirectory,
    users: FakeUserDirectory,
    pull_requests: FakePullRequestStore,
) -> DeactivationCascade:
    return DeactivationCascade(teams=teams, users=users, pull_requests=pull_requests)


@pytest.fixture
def team_service(teams: FakeTeamDirectory, users: FakeUserDirectory) -> TeamService:
    return TeamService(teams=teams, users=users)


@pytest.fixture
def user_service(
    users: FakeUserDirectory,
    pull_requests: FakePullRequestStore,
    cascade: DeactivationCascade,
) -> UserService:
    return UserService(users=users, pull_requests=pull_requests, cascade=cascade)


@pytest.fixture
def stats_service(pull_requests: FakePullRequestStore) -> ReviewerStatsService:
    return ReviewerStatsService(pull_requests=pull_requests)
