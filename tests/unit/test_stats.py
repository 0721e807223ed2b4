"""Unit tests for ReviewerStatsService."""

from __future__ import annotations

from decimal import Decimal

import pytest

from reviewroster.errors import StorageError
from reviewroster.services.stats import parse_count


class TestReviewerStats:
    """Test get_reviewer_stats()."""

    @pytest.mark.asyncio
    async def test_counts_from_assignments(self, roster, stats_service) -> None:
        roster.add_team("backend", ("A", True), ("B", True), ("C", True))
        roster.add_pull_request("pr-1", "A", ["B", "C"])
        roster.add_pull_request("pr-2", "A", ["B"])

        stats = await stats_service.get_reviewer_stats()

        assert [(s.user_id, s.count) for s in stats] == [("B", 2), ("C", 1)]

    @pytest.mark.asyncio
    async def test_empty_store(self, stats_service) -> None:
        assert await stats_service.get_reviewer_stats() == []

    @pytest.mark.asyncio
    async def test_ties_ordered_by_user_id(self, pull_requests, stats_service) -> None:
        pull_requests.raw_counts = {"zed": 3, "amy": 3, "bob": 5}

        stats = await stats_service.get_reviewer_stats()

        assert [s.user_id for s in stats] == ["bob", "amy", "zed"]

    @pytest.mark.asyncio
    async def test_malformed_counts_are_skipped(self, pull_requests, stats_service) -> None:
        pull_requests.raw_counts = {
            "ok-int": 4,
            "ok-str": "2",
            "ok-decimal": Decimal("3"),
            "ok-float": 5.0,
            "bad-text": "many",
            "bad-none": None,
            "bad-bool": True,
            "bad-list": [1],
            "bad-half": 2.5,
            "bad-decimal": Decimal("3.7"),
            "bad-str-float": "2.5",
            "bad-nan": float("nan"),
            "bad-inf": float("inf"),
        }

        stats = await stats_service.get_reviewer_stats()

        assert {s.user_id: s.count for s in stats} == {
            "ok-float": 5,
            "ok-int": 4,
            "ok-decimal": 3,
            "ok-str": 2,
        }

    @pytest.mark.parametrize(
        ("raw_count", "expected"),
        [
            (7, 7),
            (" 12 ", 12),
            (Decimal("4.000"), 4),
            (6.0, 6),
            (0.1, None),
            (Decimal("3.7"), None),
            (False, None),
            ("", None),
            (object(), None),
        ],
    )
    def test_parse_count(self, raw_count, expected) -> None:
        assert parse_count(raw_count) == expected

    @pytest.mark.asyncio
    async def test_storage_failure_propagates(self, roster, stats_service) -> None:
        roster.failures["count_by_reviewer"] = StorageError("database error")

        with pytest.raises(StorageError):
            await stats_service.get_reviewer_stats()
