"""Pull request models for ReviewRoster.

Defines the ``pull_requests`` table and the ``pr_reviewers`` association
table. Reviewer slots carry an explicit ``position`` so the reviewer order
survives a write/read round trip; the composite primary key rules out a
reviewer appearing twice on one pull request.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Enum, ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from reviewroster.database.models.base import Base, TimestampMixin, UTCDateTime
from reviewroster.domain import PullRequestStatus


class PullRequest(TimestampMixin, Base):
    """A pull request tracked for reviewer assignment.

    Attributes:
        pull_request_id: Caller-supplied primary key.
        pull_request_name: Human-readable title.
        author_id: Foreign key to the authoring user.
        status: OPEN until merged, then MERGED.
        merged_at: Set when the status flips to MERGED.
        reviewers: Reviewer slots ordered by position.
    """

    __tablename__ = "pull_requests"

    pull_request_id: Mapped[str] = mapped_column(Text, primary_key=True)
    pull_request_name: Mapped[str] = mapped_column(Text, nullable=False)
    author_id: Mapped[str] = mapped_column(
        ForeignKey("users.user_id"),
        nullable=False,
    )
    status: Mapped[PullRequestStatus] = mapped_column(
        Enum(PullRequestStatus, name="pr_status"),
        default=PullRequestStatus.OPEN,
        nullable=False,
        index=True,
    )
    merged_at: Mapped[datetime | None] = mapped_column(
        UTCDateTime(),
        nullable=True,
    )

    reviewers: Mapped[list["PullRequestReviewer"]] = relationship(
        "PullRequestReviewer",
        back_populates="pull_request",
        lazy="selectin",
        order_by="PullRequestReviewer.position",
        cascade="all, delete-orphan",
    )

    @property
    def assigned_reviewers(self) -> list[str]:
        """Reviewer user IDs in slot order."""
        return [slot.reviewer_id for slot in self.reviewers]


class PullRequestReviewer(Base):
    """One reviewer slot on a pull request.

    Attributes:
        pull_request_id: Foreign key to the pull request.
        reviewer_id: Foreign key to the reviewing user.
        position: Zero-based slot index within the reviewer list.
    """

    __tablename__ = "pr_reviewers"

    pull_request_id: Mapped[str] = mapped_column(
        ForeignKey("pull_requests.pull_request_id", ondelete="CASCADE"),
        primary_key=True,
    )
    reviewer_id: Mapped[str] = mapped_column(
        ForeignKey("users.user_id"),
        primary_key=True,
        index=True,
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    pull_request: Mapped[PullRequest] = relationship(
        "PullRequest",
        back_populates="reviewers",
    )
