"""Pull request query functions for ReviewRoster.

Provides async functions for creating pull requests together with their
reviewer slots, reading them back, flipping their status, rewriting the
reviewer list, and the reviewer-centric read queries used by the services.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

import structlog
from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from reviewroster.database.models.pull_request import PullRequest, PullRequestReviewer
from reviewroster.database.queries.errors import translate_errors
from reviewroster.domain import PullRequestStatus
from reviewroster.errors import AlreadyExistsError, NotFoundError

logger = structlog.get_logger(__name__)


def _reviewer_slots(reviewer_ids: Sequence[str]) -> list[PullRequestReviewer]:
    return [
        PullRequestReviewer(reviewer_id=reviewer_id, position=position)
        for position, reviewer_id in enumerate(reviewer_ids)
    ]


async def create_pull_request(
    session: AsyncSession,
    pull_request_id: str,
    pull_request_name: str,
    author_id: str,
    reviewer_ids: Sequence[str] = (),
) -> PullRequest:
    """Create an OPEN pull request and its reviewer slots in one transaction.

    Args:
        session: Active async database session.
        pull_request_id: Caller-supplied unique identifier.
        pull_request_name: Human-readable title.
        author_id: ID of the authoring user.
        reviewer_ids: Reviewer user IDs in slot order.

    Returns:
        The newly created PullRequest instance.

    Raises:
        AlreadyExistsError: If the identifier is already taken.
    """
    async with translate_errors(
        session,
        "create_pull_request",
        "pull_request",
        pull_request_id,
        conflict_is_duplicate=True,
    ):
        if await session.get(PullRequest, pull_request_id) is not None:
            raise AlreadyExistsError(
                f"pull request {pull_request_id} already exists",
                entity="pull_request",
                entity_id=pull_request_id,
                operation="create_pull_request",
            )
        pull_request = PullRequest(
            pull_request_id=pull_request_id,
            pull_request_name=pull_request_name,
            author_id=author_id,
            status=PullRequestStatus.OPEN,
            reviewers=_reviewer_slots(reviewer_ids),
        )
        session.add(pull_request)
        await session.commit()

    logger.info(
        "pull_request_row_created",
        pull_request_id=pull_request_id,
        author_id=author_id,
        reviewers_count=len(reviewer_ids),
    )
    return pull_request


async def get_pull_request(
    session: AsyncSession,
    pull_request_id: str,
) -> PullRequest | None:
    """Retrieve a pull request, with reviewers in slot order, by ID.

    Returns:
        The PullRequest instance if found, None otherwise.
    """
    async with translate_errors(session, "get_pull_request", "pull_request", pull_request_id):
        stmt = select(PullRequest).where(PullRequest.pull_request_id == pull_request_id)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()


async def update_pull_request_status(
    session: AsyncSession,
    pull_request_id: str,
    status: PullRequestStatus,
    merged_at: datetime | None,
    expected_status: PullRequestStatus | None = None,
) -> None:
    """Set status and merged_at in a single conditional UPDATE.

    Args:
        session: Active async database session.
        pull_request_id: ID of the pull request to update.
        status: New status.
        merged_at: Merge timestamp (None for OPEN).
        expected_status: When given, only a row currently in this status
            is updated.

    Raises:
        NotFoundError: If no row matched (missing, or not in expected_status).
    """
    async with translate_errors(
        session, "update_pull_request_status", "pull_request", pull_request_id
    ):
        stmt = (
            update(PullRequest)
            .where(PullRequest.pull_request_id == pull_request_id)
            .values(status=status, merged_at=merged_at)
        )
        if expected_status is not None:
            stmt = stmt.where(PullRequest.status == expected_status)
        result = await session.execute(stmt)
        if result.rowcount == 0:
            await session.rollback()
            raise NotFoundError(
                f"pull request {pull_request_id} not found",
                entity="pull_request",
                entity_id=pull_request_id,
                operation="update_pull_request_status",
            )
        await session.commit()

    logger.info(
        "pull_request_status_updated",
        pull_request_id=pull_request_id,
        status=status.value,
    )


async def set_reviewers(
    session: AsyncSession,
    pull_request_id: str,
    reviewer_ids: Sequence[str],
) -> None:
    """Replace the reviewer list of a pull request, preserving order.

    Deletes the existing slots and inserts the new ones in one transaction.
    """
    async with translate_errors(session, "set_reviewers", "pull_request", pull_request_id):
        await session.execute(
            delete(PullRequestReviewer).where(
                PullRequestReviewer.pull_request_id == pull_request_id
            )
        )
        for slot in _reviewer_slots(reviewer_ids):
            slot.pull_request_id = pull_request_id
            session.add(slot)
        await session.commit()

    logger.info(
        "pull_request_reviewers_set",
        pull_request_id=pull_request_id,
        reviewers=list(reviewer_ids),
    )


async def list_by_reviewer(
    session: AsyncSession,
    reviewer_id: str,
) -> list[PullRequest]:
    """List pull requests of any status where the user is a reviewer, newest first."""
    async with translate_errors(session, "list_by_reviewer", "user", reviewer_id):
        stmt = (
            select(PullRequest)
            .join(
                PullRequestReviewer,
                PullRequestReviewer.pull_request_id == PullRequest.pull_request_id,
            )
            .where(PullRequestReviewer.reviewer_id == reviewer_id)
            .order_by(PullRequest.created_at.desc(), PullRequest.pull_request_id.asc())
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())


async def list_open_by_reviewers(
    session: AsyncSession,
    reviewer_ids: Sequence[str],
) -> list[PullRequest]:
    """List OPEN pull requests reviewed by any of the given users.

    One query covers the whole batch; each pull request appears once.
    """
    if not reviewer_ids:
        return []

    async with translate_errors(session, "list_open_by_reviewers", "pull_request"):
        stmt = (
            select(PullRequest)
            .join(
                PullRequestReviewer,
                PullRequestReviewer.pull_request_id == PullRequest.pull_request_id,
            )
            .where(PullRequest.status == PullRequestStatus.OPEN)
            .where(PullRequestReviewer.reviewer_id.in_(list(reviewer_ids)))
            .distinct()
            .order_by(PullRequest.pull_request_id.asc())
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())


async def count_by_reviewer(session: AsyncSession) -> dict[str, int]:
    """Count reviewer slots per user across all pull requests."""
    async with translate_errors(session, "count_by_reviewer", "pull_request"):
        stmt = select(
            PullRequestReviewer.reviewer_id,
            func.count().label("review_count"),
        ).group_by(PullRequestReviewer.reviewer_id)
        result = await session.execute(stmt)
        return {reviewer_id: review_count for reviewer_id, review_count in result.all()}
