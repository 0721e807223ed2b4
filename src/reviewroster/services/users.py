"""User service: activation flags, review listings and team deactivation."""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from reviewroster.domain import User, UserReviews
from reviewroster.services.deactivation import DeactivationCascade
from reviewroster.services.ports import PullRequestStore, UserDirectory

logger = structlog.get_logger(__name__)


class UserService:
    """User-facing operations.

    ``set_is_active`` flips a single flag and never touches reviewer lists;
    bulk deactivation with reassignment goes through ``deactivate_team_members``.
    """

    def __init__(
        self,
        users: UserDirectory,
        pull_requests: PullRequestStore,
        cascade: DeactivationCascade,
    ) -> None:
        self.users = users
        self.pull_requests = pull_requests
        self.cascade = cascade
        self._logger = logger.bind(component="UserService")

    async def set_is_active(self, user_id: str, is_active: bool) -> User:
        """Set a user's active flag and return the updated user.

        Raises:
            NotFoundError: If the user does not exist.
        """
        await self.users.update_active(user_id, is_active)
        user = await self.users.get_by_id(user_id)
        self._logger.info("user_active_updated", user_id=user_id, is_active=is_active)
        return user

    async def get_user_reviews(self, user_id: str) -> UserReviews:
        """List every pull request, of any status, the user reviews.

        Raises:
            NotFoundError: If the user does not exist.
        """
        await self.users.get_by_id(user_id)
        pull_requests = await self.pull_requests.list_by_reviewer(user_id)
        return UserReviews(user_id=user_id, pull_requests=pull_requests)

    async def deactivate_team_members(
        self,
        team_name: str,
        user_ids: Sequence[str],
    ) -> list[str]:
        return await self.cascade.deactivate_team_users_and_reassign(team_name, user_ids)
