"""Collaborator interfaces consumed by the ReviewRoster services.

The services depend on these shapes only. ``reviewroster.database.stores``
provides the SQL-backed implementations; tests use in-memory fakes.

Lookups raise ``NotFoundError`` instead of returning None; writes raise the
``ReviewRosterError`` subclass matching the failure.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import datetime
from typing import Any, Protocol

from reviewroster.domain import (
    PullRequest,
    PullRequestShort,
    PullRequestStatus,
    Team,
    TeamMember,
    User,
)


class UserDirectory(Protocol):
    """Owner of user records."""

    async def get_by_id(self, user_id: str) -> User:
        """Return the user or raise NotFoundError."""
        ...

    async def list_by_team(self, team_name: str) -> list[User]:
        """Return every member of the team, ordered by user_id."""
        ...

    async def update_active(self, user_id: str, is_active: bool) -> None:
        """Set the active flag or raise NotFoundError."""
        ...

    async def add_team_members(self, team_name: str, members: Sequence[TeamMember]) -> None:
        """Insert or update users as members of the team."""
        ...


class TeamDirectory(Protocol):
    """Owner of team records."""

    async def create(self, team_name: str) -> None:
        """Create the team or raise AlreadyExistsError."""
        ...

    async def get_by_name(self, team_name: str) -> Team:
        """Return the team with its members or raise NotFoundError."""
        ...


class PullRequestStore(Protocol):
    """Owner of pull requests and their reviewer lists."""

    async def create(self, pull_request: PullRequest) -> None:
        """Persist an OPEN pull request with its reviewers, or raise AlreadyExistsError."""
        ...

    async def get_by_id(self, pull_request_id: str) -> PullRequest:
        """Return the pull request or raise NotFoundError."""
        ...

    async def update_status(
        self,
        pull_request_id: str,
        status: PullRequestStatus,
        merged_at: datetime | None,
        expected_status: PullRequestStatus | None = None,
    ) -> None:
        """Conditionally update status, raising NotFoundError when no row matched."""
        ...

    async def set_reviewers(self, pull_request_id: str, reviewer_ids: Sequence[str]) -> None:
        """Replace the reviewer list, preserving the given order."""
        ...

    async def list_by_reviewer(self, reviewer_id: str) -> list[PullRequestShort]:
        """Pull requests of any status where the user reviews."""
        ...

    async def list_open_by_reviewers(
        self, reviewer_ids: Sequence[str]
    ) -> list[PullRequestShort]:
        """OPEN pull requests reviewed by any of the users, each listed once."""
        ...

    async def count_by_reviewer(self) -> Mapping[str, Any]:
        """Raw reviewer -> assignment count aggregate."""
        ...


class ReviewerSelector(Protocol):
    """Policy choosing reviewers from a candidate pool."""

    def pick(self, candidates: Sequence[str], n: int) -> list[str]:
        """Return up to ``n`` distinct candidates."""
        ...
