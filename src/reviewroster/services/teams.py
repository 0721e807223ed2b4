"""Team service: team creation and lookup."""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from reviewroster.domain import Team, TeamMember
from reviewroster.errors import AlreadyExistsError
from reviewroster.services.ports import TeamDirectory, UserDirectory

logger = structlog.get_logger(__name__)


class TeamService:
    """Creates teams with their members and reads them back."""

    def __init__(self, teams: TeamDirectory, users: UserDirectory) -> None:
        self.teams = teams
        self.users = users
        self._logger = logger.bind(component="TeamService")

    async def create_team(self, team_name: str, members: Sequence[TeamMember]) -> Team:
        """Create a team and upsert its members.

        Members that already exist in another team are moved to this one.

        Args:
            team_name: Unique team name.
            members: Initial members.

        Returns:
            The team with its members as stored.

        Raises:
            AlreadyExistsError: If the team name is taken.
        """
        log = self._logger.bind(team_name=team_name)

        try:
            await self.teams.create(team_name)
        except AlreadyExistsError:
            log.warning("team_already_exists")
            raise

        if members:
            await self.users.add_team_members(team_name, members)

        team = await self.teams.get_by_name(team_name)
        log.info("team_created", members_count=len(team.members))
        return team

    async def get_team(self, team_name: str) -> Team:
        return await self.teams.get_by_name(team_name)
