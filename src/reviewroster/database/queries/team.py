"""Team query functions for ReviewRoster."""

from __future__ import annotations

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from reviewroster.database.models.team import Team
from reviewroster.database.queries.errors import translate_errors
from reviewroster.errors import AlreadyExistsError

logger = structlog.get_logger(__name__)


async def create_team(
    session: AsyncSession,
    team_name: str,
) -> Team:
    """Create a new, empty team.

    Args:
        session: Active async database session.
        team_name: Unique team name.

    Returns:
        The newly created Team instance.

    Raises:
        AlreadyExistsError: If a team with this name exists.
    """
    async with translate_errors(
        session, "create_team", "team", team_name, conflict_is_duplicate=True
    ):
        if await session.get(Team, team_name) is not None:
            raise AlreadyExistsError(
                f"team {team_name} already exists",
                entity="team",
                entity_id=team_name,
                operation="create_team",
            )
        team = Team(team_name=team_name)
        session.add(team)
        await session.commit()

    logger.info("team_created", team_name=team_name)
    return team


async def get_team(
    session: AsyncSession,
    team_name: str,
) -> Team | None:
    """Retrieve a team, with its members, by name.

    Returns:
        The Team instance if found, None otherwise.
    """
    async with translate_errors(session, "get_team", "team", team_name):
        stmt = select(Team).where(Team.team_name == team_name)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()


async def list_teams(session: AsyncSession) -> list[Team]:
    """List all teams ordered by name. Used by the ``reviewroster teams`` command."""
    async with translate_errors(session, "list_teams", "team"):
        stmt = select(Team).order_by(Team.team_name.asc())
        result = await session.execute(stmt)
        return list(result.scalars().all())
