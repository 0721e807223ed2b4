"""Pull request lifecycle service.

This module implements the PullRequestService, the single place where the
reviewer-assignment rules are enforced:

1. ``create_pull_request()`` picks up to N active teammates of the author
   (never the author) and persists the pull request with them.
2. ``merge_pull_request()`` flips OPEN -> MERGED once; repeating it returns
   the already merged pull request unchanged.
3. ``reassign_reviewer()`` swaps one reviewer for a random active teammate
   of that reviewer, in place, and is refused on merged pull requests.

Every operation reads what it needs, decides, writes, then re-reads the
stored pull request and returns that re-read copy.

Example usage:
    >>> service = PullRequestService(users=users, pull_requests=prs)
    >>> pr = await service.create_pull_request("pr-1", "Add search", "u1")
    >>> pr, new_reviewer = await service.reassign_reviewer("pr-1", pr.assigned_reviewers[0])
"""

from __future__ import annotations

from datetime import datetime, timezone

import structlog

from reviewroster.domain import PullRequest, PullRequestStatus
from reviewroster.errors import (
    AlreadyMergedError,
    NoCandidateError,
    NotAssignedError,
    NotFoundError,
    ReviewRosterError,
)
from reviewroster.services.ports import PullRequestStore, ReviewerSelector, UserDirectory
from reviewroster.services.selection import SecureRandomSelector

logger = structlog.get_logger(__name__)

DEFAULT_REVIEWERS_PER_PULL_REQUEST = 2


class PullRequestService:
    """Creates, merges and re-staffs pull requests.

    Attributes:
        users: User directory used to resolve authors, reviewers and teams.
        pull_requests: Store owning pull requests and reviewer lists.
        selector: Policy picking reviewers from a candidate pool.
        reviewers_per_pull_request: Reviewers picked at creation time.
    """

    def __init__(
        self,
        users: UserDirectory,
        pull_requests: PullRequestStore,
        selector: ReviewerSelector | None = None,
        reviewers_per_pull_request: int = DEFAULT_REVIEWERS_PER_PULL_REQUEST,
    ) -> None:
        self.users = users
        self.pull_requests = pull_requests
        self.selector = selector if selector is not None else SecureRandomSelector()
        self.reviewers_per_pull_request = reviewers_per_pull_request
        self._logger = logger.bind(component="PullRequestService")

    async def create_pull_request(
        self,
        pull_request_id: str,
        pull_request_name: str,
        author_id: str,
    ) -> PullRequest:
        """Open a pull request and assign reviewers from the author's team.

        Args:
            pull_request_id: Caller-supplied identifier.
            pull_request_name: Human-readable title.
            author_id: ID of the authoring user.

        Returns:
            The stored pull request as re-read after the write.

        Raises:
            NotFoundError: If the author does not exist.
            AlreadyExistsError: If the identifier is taken.
        """
        log = self._logger.bind(pull_request_id=pull_request_id, author_id=author_id)

        try:
            author = await self.users.get_by_id(author_id)
        except NotFoundError:
            log.warning("pull_request_author_not_found")
            raise

        team_members = await self.users.list_by_team(author.team_name)
        candidates = [
            member.user_id
            for member in team_members
            if member.is_active and member.user_id != author_id
        ]
        reviewers = self.selector.pick(candidates, self.reviewers_per_pull_request)

        draft = PullRequest(
            pull_request_id=pull_request_id,
            pull_request_name=pull_request_name,
            author_id=author_id,
            status=PullRequestStatus.OPEN,
            assigned_reviewers=reviewers,
        )

        try:
            await self.pull_requests.create(draft)
        except ReviewRosterError as exc:
            log.warning("pull_request_create_failed", kind=exc.kind.value, error=str(exc))
            raise

        created = await self.pull_requests.get_by_id(pull_request_id)

        log.info(
            "pull_request_created",
            team_name=author.team_name,
            reviewers=created.assigned_reviewers,
            candidates_count=len(candidates),
        )
        return created

    async def merge_pull_request(self, pull_request_id: str) -> PullRequest:
        """Mark a pull request as merged.

        Merging is idempotent: a pull request that is already MERGED is
        returned unchanged, keeping its original ``merged_at``.

        Raises:
            NotFoundError: If the pull request does not exist.
        """
        log = self._logger.bind(pull_request_id=pull_request_id)

        pull_request = await self.pull_requests.get_by_id(pull_request_id)
        if pull_request.is_merged:
            log.info("pull_request_already_merged")
            return pull_request

        merged_at = datetime.now(timezone.utc)
        try:
            await self.pull_requests.update_status(
                pull_request_id,
                PullRequestStatus.MERGED,
                merged_at,
                expected_status=PullRequestStatus.OPEN,
            )
        except NotFoundError:
            # No OPEN row matched: either a concurrent merge won or the
            # pull request vanished. The re-read below tells them apart.
            current = await self.pull_requests.get_by_id(pull_request_id)
            if current.is_merged:
                log.info("pull_request_merged_concurrently")
                return current
            raise

        merged = await self.pull_requests.get_by_id(pull_request_id)
        log.info("pull_request_merged", merged_at=merged_at.isoformat())
        return merged

    async def reassign_reviewer(
        self,
        pull_request_id: str,
        old_reviewer_id: str,
    ) -> tuple[PullRequest, str]:
        """Replace one reviewer with a random active teammate of theirs.

        The replacement takes the old reviewer's slot, so the order of the
        reviewer list is kept.

        Args:
            pull_request_id: Pull request to update.
            old_reviewer_id: Reviewer to replace.

        Returns:
            Tuple of the re-read pull request and the new reviewer's ID.

        Raises:
            NotFoundError: If the pull request or old reviewer does not exist.
            AlreadyMergedError: If the pull request is merged.
            NotAssignedError: If the old reviewer is not on the pull request.
            NoCandidateError: If no eligible teammate remains.
        """
        log = self._logger.bind(
            pull_request_id=pull_request_id,
            old_reviewer_id=old_reviewer_id,
        )

        pull_request = await self.pull_requests.get_by_id(pull_request_id)

        if pull_request.is_merged:
            log.warning("reassign_on_merged_pull_request")
            raise AlreadyMergedError(
                f"pull request {pull_request_id} is merged",
                entity="pull_request",
                entity_id=pull_request_id,
                operation="reassign_reviewer",
            )

        if old_reviewer_id not in pull_request.assigned_reviewers:
            log.warning("reviewer_not_assigned")
            raise NotAssignedError(
                f"user {old_reviewer_id} is not a reviewer of {pull_request_id}",
                entity="pull_request",
                entity_id=pull_request_id,
                operation="reassign_reviewer",
            )

        old_reviewer = await self.users.get_by_id(old_reviewer_id)
        team_members = await self.users.list_by_team(old_reviewer.team_name)

        assigned = set(pull_request.assigned_reviewers)
        candidates = [
            member.user_id
            for member in team_members
            if member.is_active
            and member.user_id != old_reviewer_id
            and member.user_id != pull_request.author_id
            and member.user_id not in assigned
        ]

        if not candidates:
            log.warning("no_reassign_candidate", team_name=old_reviewer.team_name)
            raise NoCandidateError(
                f"no active replacement for {old_reviewer_id} in team {old_reviewer.team_name}",
                entity="team",
                entity_id=old_reviewer.team_name,
                operation="reassign_reviewer",
            )

        new_reviewer_id = self.selector.pick(candidates, 1)[0]
        new_reviewers = [
            new_reviewer_id if reviewer_id == old_reviewer_id else reviewer_id
            for reviewer_id in pull_request.assigned_reviewers
        ]

        await self.pull_requests.set_reviewers(pull_request_id, new_reviewers)
        updated = await self.pull_requests.get_by_id(pull_request_id)

        log.info(
            "reviewer_reassigned",
            new_reviewer_id=new_reviewer_id,
            reviewers=updated.assigned_reviewers,
        )
        return updated, new_reviewer_id
