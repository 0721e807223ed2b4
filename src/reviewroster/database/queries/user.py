"""User query functions for ReviewRoster.

Provides async functions for inserting and updating team members, looking
users up, and flipping their active flag.
"""

from __future__ import annotations

from collections.abc import Iterable

import structlog
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from reviewroster.database.models.team import User
from reviewroster.database.queries.errors import translate_errors
from reviewroster.domain import TeamMember
from reviewroster.errors import NotFoundError

logger = structlog.get_logger(__name__)


async def upsert_team_members(
    session: AsyncSession,
    team_name: str,
    members: Iterable[TeamMember],
) -> int:
    """Insert or update users as members of a team.

    Existing users are moved into the team and get their username and
    active flag overwritten.

    Args:
        session: Active async database session.
        team_name: Team the members belong to.
        members: Members to write.

    Returns:
        Number of members written.
    """
    written = 0
    async with translate_errors(session, "upsert_team_members", "team", team_name):
        for member in members:
            user = await session.get(User, member.user_id)
            if user is None:
                session.add(
                    User(
                        user_id=member.user_id,
                        username=member.username,
                        team_name=team_name,
                        is_active=member.is_active,
                    )
                )
            else:
                user.username = member.username
                user.team_name = team_name
                user.is_active = member.is_active
            written += 1
        await session.commit()

    logger.info("team_members_upserted", team_name=team_name, members_count=written)
    return written


async def get_user(
    session: AsyncSession,
    user_id: str,
) -> User | None:
    """Retrieve a user by ID.

    Returns:
        The User instance if found, None otherwise.
    """
    async with translate_errors(session, "get_user", "user", user_id):
        stmt = select(User).where(User.user_id == user_id)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()


async def list_users_by_team(
    session: AsyncSession,
    team_name: str,
) -> list[User]:
    """List all members of a team, active or not, ordered by user_id."""
    async with translate_errors(session, "list_users_by_team", "team", team_name):
        stmt = (
            select(User)
            .where(User.team_name == team_name)
            .order_by(User.user_id.asc())
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())


async def update_user_active(
    session: AsyncSession,
    user_id: str,
    is_active: bool,
) -> None:
    """Set a user's active flag.

    Raises:
        NotFoundError: If no user with this ID exists.
    """
    async with translate_errors(session, "update_user_active", "user", user_id):
        stmt = (
            update(User)
            .where(User.user_id == user_id)
            .values(is_active=is_active)
        )
        result = await session.execute(stmt)
        if result.rowcount == 0:
            await session.rollback()
            raise NotFoundError(
                f"user {user_id} not found",
                entity="user",
                entity_id=user_id,
                operation="update_user_active",
            )
        await session.commit()

    logger.info("user_active_updated", user_id=user_id, is_active=is_active)


async def deactivate_team(
    session: AsyncSession,
    team_name: str,
) -> int:
    """Flag every member of a team inactive without touching reviews.

    Backs the ``reviewroster deactivate-team`` admin command; the HTTP API
    uses the reassigning cascade instead.

    Returns:
        Number of users updated.
    """
    async with translate_errors(session, "deactivate_team", "team", team_name):
        stmt = (
            update(User)
            .where(User.team_name == team_name)
            .values(is_active=False)
        )
        result = await session.execute(stmt)
        await session.commit()

    logger.info("team_deactivated", team_name=team_name, users_count=result.rowcount)
    return result.rowcount
