"""Reviewer statistics.

Turns the store's reviewer -> count aggregate into ``ReviewerStat`` rows.
Entries whose count is not an integer are logged and skipped so a single
malformed row cannot fail the whole report.
"""

from __future__ import annotations

import numbers
from decimal import Decimal
from typing import Any

import structlog

from reviewroster.domain import ReviewerStat
from reviewroster.services.ports import PullRequestStore

logger = structlog.get_logger(__name__)


def parse_count(raw_count: Any) -> int | None:
    """Interpret an aggregate value as an exact integer.

    Integers and strings holding a base-10 integer are accepted. Floats and
    decimals are accepted only when they have no fractional part. Booleans,
    fractional values and anything else return None.

    Args:
        raw_count: Value read from the reviewer -> count aggregate.

    Returns:
        The count, or None when the value is not an integer.
    """
    if isinstance(raw_count, bool):
        return None
    if isinstance(raw_count, numbers.Integral):
        return int(raw_count)
    if isinstance(raw_count, str):
        try:
            return int(raw_count.strip(), 10)
        except ValueError:
            return None
    if isinstance(raw_count, (numbers.Real, Decimal)):
        try:
            whole = int(raw_count)
        except (OverflowError, ValueError):
            return None
        return whole if whole == raw_count else None
    return None


class ReviewerStatsService:
    """Read-only aggregation of review assignments per user."""

    def __init__(self, pull_requests: PullRequestStore) -> None:
        self.pull_requests = pull_requests
        self._logger = logger.bind(component="ReviewerStatsService")

    async def get_reviewer_stats(self) -> list[ReviewerStat]:
        """Return assignment counts, highest first, ties ordered by user ID."""
        raw_counts = await self.pull_requests.count_by_reviewer()

        stats: list[ReviewerStat] = []
        for user_id, raw_count in raw_counts.items():
            count = parse_count(raw_count)
            if count is None:
                self._logger.warning("reviewer_stat_skipped", user_id=user_id, count=repr(raw_count))
                continue
            stats.append(ReviewerStat(user_id=str(user_id), count=count))

        stats.sort(key=lambda stat: (-stat.count, stat.user_id))
        return stats
