"""Cascading deactivation of team members.

When several members of a team are deactivated at once, every OPEN pull
request they review is re-staffed from the teammates who stay active, and
only then are the users flipped to inactive. The cascade is safe to re-run:
pull requests already rebalanced no longer reference the deactivated users,
and re-writing an inactive flag is a no-op.

Replacements are taken in candidate-pool order rather than at random, so a
retried cascade reaches the same end state as an uninterrupted one.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

import structlog

from reviewroster.services.ports import PullRequestStore, TeamDirectory, UserDirectory

logger = structlog.get_logger(__name__)


def rebuild_reviewers(
    reviewers: Sequence[str],
    to_deactivate: set[str] | frozenset[str],
    still_active: Sequence[str],
    author_id: str,
) -> list[str]:
    """Rebuild one reviewer list with deactivated reviewers replaced.

    Kept reviewers stay in their slots. Each deactivated reviewer is swapped
    for the first candidate of ``still_active`` that is not already on the
    pull request, not the author and not used by an earlier slot. A slot
    with no such candidate left is dropped.

    Args:
        reviewers: Current reviewer list in slot order.
        to_deactivate: Users being deactivated.
        still_active: Replacement pool in priority order.
        author_id: Pull request author, never eligible.

    Returns:
        The new reviewer list.
    """
    consumed = {author_id}
    consumed.update(reviewer for reviewer in reviewers if reviewer not in to_deactivate)

    candidates = iter(still_active)
    rebuilt: list[str] = []
    for reviewer in reviewers:
        if reviewer not in to_deactivate:
            rebuilt.append(reviewer)
            continue

        replacement = _next_unused(candidates, consumed)
        if replacement is not None:
            consumed.add(replacement)
            rebuilt.append(replacement)

    return rebuilt


def _next_unused(candidates: Iterable[str], consumed: set[str]) -> str | None:
    for candidate in candidates:
        if candidate not in consumed:
            return candidate
    return None


class DeactivationCascade:
    """Deactivates team members and re-staffs their open reviews.

    Attributes:
        teams: Team directory, used to resolve the team.
        users: User directory owning the active flags.
        pull_requests: Store owning reviewer lists.
    """

    def __init__(
        self,
        teams: TeamDirectory,
        users: UserDirectory,
        pull_requests: PullRequestStore,
    ) -> None:
        self.teams = teams
        self.users = users
        self.pull_requests = pull_requests
        self._logger = logger.bind(component="DeactivationCascade")

    async def deactivate_team_users_and_reassign(
        self,
        team_name: str,
        user_ids: Sequence[str],
    ) -> list[str]:
        """Run the cascade for a batch of team members.

        IDs that are not active members of the team are ignored. A failure
        partway aborts the cascade and propagates; writes already made are
        kept, and calling again with the same arguments completes the work.

        Args:
            team_name: Team whose members are deactivated.
            user_ids: Requested user IDs.

        Returns:
            The user IDs that were deactivated by this call, in team order.

        Raises:
            NotFoundError: If the team does not exist.
        """
        log = self._logger.bind(team_name=team_name)

        if not user_ids:
            log.debug("deactivation_skipped", reason="no_user_ids")
            return []

        await self.teams.get_by_name(team_name)
        members = await self.users.list_by_team(team_name)

        requested = set(user_ids)
        to_deactivate = [
            member.user_id
            for member in members
            if member.is_active and member.user_id in requested
        ]
        if not to_deactivate:
            log.info("deactivation_skipped", reason="no_active_members_requested")
            return []

        deactivating = frozenset(to_deactivate)
        still_active = [
            member.user_id
            for member in members
            if member.is_active and member.user_id not in deactivating
        ]

        affected = await self.pull_requests.list_open_by_reviewers(to_deactivate)
        log.info(
            "deactivation_started",
            user_ids=to_deactivate,
            candidate_pool=still_active,
            affected_pull_requests=len(affected),
        )

        for summary in affected:
            pull_request = await self.pull_requests.get_by_id(summary.pull_request_id)
            if pull_request.is_merged:
                log.info(
                    "deactivation_pull_request_skipped",
                    pull_request_id=pull_request.pull_request_id,
                    reason="merged",
                )
                continue

            rebuilt = rebuild_reviewers(
                pull_request.assigned_reviewers,
                deactivating,
                still_active,
                pull_request.author_id,
            )
            await self.pull_requests.set_reviewers(pull_request.pull_request_id, rebuilt)

            log.info(
                "pull_request_rebalanced",
                pull_request_id=pull_request.pull_request_id,
                previous_reviewers=pull_request.assigned_reviewers,
                reviewers=rebuilt,
            )

        for user_id in to_deactivate:
            await self.users.update_active(user_id, False)

        log.info("team_members_deactivated", user_ids=to_deactivate)
        return to_deactivate
