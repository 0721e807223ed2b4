"""Team and User models for ReviewRoster.

A user belongs to exactly one team at a time; membership is the
``users.team_name`` foreign key. Users are never deleted, only flagged
inactive.
"""

from __future__ import annotations

from sqlalchemy import Boolean, ForeignKey, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from reviewroster.database.models.base import Base, TimestampMixin


class Team(TimestampMixin, Base):
    """A named group of users that review each other's pull requests.

    Attributes:
        team_name: Primary key.
        members: Users currently in the team, ordered by user_id.
    """

    __tablename__ = "teams"

    team_name: Mapped[str] = mapped_column(Text, primary_key=True)

    members: Mapped[list["User"]] = relationship(
        "User",
        back_populates="team",
        lazy="selectin",
        order_by="User.user_id",
    )


class User(TimestampMixin, Base):
    """A team member who can author and review pull requests.

    Attributes:
        user_id: Primary key.
        username: Display name.
        team_name: Foreign key to the user's team.
        is_active: Inactive users are never picked as reviewers.
    """

    __tablename__ = "users"

    user_id: Mapped[str] = mapped_column(Text, primary_key=True)
    username: Mapped[str] = mapped_column(Text, nullable=False)
    team_name: Mapped[str] = mapped_column(
        ForeignKey("teams.team_name"),
        nullable=False,
        index=True,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
    )

    team: Mapped[Team] = relationship("Team", back_populates="members")
