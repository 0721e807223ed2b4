"""Domain models exchanged between the stores, services and API.

These are plain Pydantic models, detached from any database session. The
SQL stores build them from ORM rows via ``from_attributes``; tests build
them directly.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class PullRequestStatus(str, Enum):
    """Pull request lifecycle status. Transitions only OPEN -> MERGED."""

    OPEN = "OPEN"
    MERGED = "MERGED"


class User(BaseModel):
    """A user record owned by the user directory."""

    model_config = ConfigDict(from_attributes=True)

    user_id: str
    username: str
    team_name: str
    is_active: bool = True


class TeamMember(BaseModel):
    """A user as listed inside a team."""

    model_config = ConfigDict(from_attributes=True)

    user_id: str
    username: str
    is_active: bool = True


class Team(BaseModel):
    """A team and its current members."""

    team_name: str
    members: list[TeamMember] = Field(default_factory=list)


class PullRequest(BaseModel):
    """A pull request and its ordered reviewer list.

    Attributes:
        pull_request_id: Caller-supplied identifier.
        pull_request_name: Human-readable title.
        author_id: User who opened the pull request; never a reviewer.
        status: OPEN or MERGED.
        assigned_reviewers: Reviewer user IDs in slot order, no duplicates.
        created_at: Creation timestamp set by the store.
        merged_at: Set once, when the pull request is merged.
    """

    model_config = ConfigDict(from_attributes=True)

    pull_request_id: str
    pull_request_name: str
    author_id: str
    status: PullRequestStatus = PullRequestStatus.OPEN
    assigned_reviewers: list[str] = Field(default_factory=list)
    created_at: datetime | None = None
    merged_at: datetime | None = None

    @property
    def is_merged(self) -> bool:
        return self.status == PullRequestStatus.MERGED


class PullRequestShort(BaseModel):
    """Summary row returned by reviewer queries."""

    model_config = ConfigDict(from_attributes=True)

    pull_request_id: str
    pull_request_name: str
    author_id: str
    status: PullRequestStatus


class UserReviews(BaseModel):
    """Pull requests a user is assigned to review."""

    user_id: str
    pull_requests: list[PullRequestShort] = Field(default_factory=list)


class ReviewerStat(BaseModel):
    """Number of review assignments held by one user."""

    user_id: str
    count: int
