"""SQLAlchemy ORM models for ReviewRoster.

This module defines the database schema: teams, users, pull requests and
their reviewer slots.

All models use SQLAlchemy 2.0 declarative style with Mapped[] type annotations.
"""

from reviewroster.database.models.base import Base, TimestampMixin, UTCDateTime
from reviewroster.database.models.pull_request import PullRequest, PullRequestReviewer
from reviewroster.database.models.team import Team, User

__all__ = [
    "Base",
    "TimestampMixin",
    "UTCDateTime",
    "Team",
    "User",
    "PullRequest",
    "PullRequestReviewer",
]
