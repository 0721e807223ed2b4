"""Integration tests for database query functions.

Runs against an in-memory SQLite database via aiosqlite.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from reviewroster.database.queries import (
    count_by_reviewer,
    create_pull_request,
    create_team,
    deactivate_team,
    get_pull_request,
    get_team,
    get_user,
    list_by_reviewer,
    list_open_by_reviewers,
    list_teams,
    list_users_by_team,
    set_reviewers,
    update_pull_request_status,
    update_user_active,
    upsert_team_members,
)
from reviewroster.domain import PullRequestStatus, TeamMember
from reviewroster.errors import AlreadyExistsError, NotFoundError, StorageError

OPEN = PullRequestStatus.OPEN
MERGED = PullRequestStatus.MERGED


# ---------------------------------------------------------------------------
# Teams and users
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_create_and_get_team(db_session) -> None:
    team = await create_team(db_session, "backend")
    assert team.team_name == "backend"

    fetched = await get_team(db_session, "backend")
    assert fetched is not None
    assert fetched.members == []


@pytest.mark.asyncio
async def test_create_duplicate_team(db_session) -> None:
    await create_team(db_session, "backend")

    with pytest.raises(AlreadyExistsError) as exc_info:
        await create_team(db_session, "backend")

    assert exc_info.value.entity == "team"
    assert exc_info.value.operation == "create_team"


@pytest.mark.asyncio
async def test_get_missing_team_returns_none(db_session) -> None:
    assert await get_team(db_session, "nobody") is None


@pytest.mark.asyncio
async def test_list_teams_sorted(db_session) -> None:
    for name in ("platform", "backend", "mobile"):
        await create_team(db_session, name)

    assert [t.team_name for t in await list_teams(db_session)] == [
        "backend",
        "mobile",
        "platform",
    ]


@pytest.mark.asyncio
async def test_upsert_team_members_inserts_and_moves(db_session, seed) -> None:
    await seed(teams={"backend": [("u1", True)]})
    await create_team(db_session, "platform")

    written = await upsert_team_members(
        db_session,
        "platform",
        [
            TeamMember(user_id="u1", username="Moved", is_active=False),
            TeamMember(user_id="u2", username="New"),
        ],
    )

    assert written == 2
    moved = await get_user(db_session, "u1")
    assert moved.team_name == "platform"
    assert moved.username == "Moved"
    assert moved.is_active is False
    assert [u.user_id for u in await list_users_by_team(db_session, "platform")] == ["u1", "u2"]
    assert await list_users_by_team(db_session, "backend") == []


@pytest.mark.asyncio
async def test_list_users_by_team_ordered(db_session, seed) -> None:
    await seed(teams={"backend": [("u3", True), ("u1", False), ("u2", True)]})

    users = await list_users_by_team(db_session, "backend")

    assert [(u.user_id, u.is_active) for u in users] == [
        ("u1", False),
        ("u2", True),
        ("u3", True),
    ]


@pytest.mark.asyncio
async def test_update_user_active(db_session, seed) -> None:
    await seed(teams={"backend": [("u1", True)]})

    await update_user_active(db_session, "u1", False)

    db_session.expire_all()
    assert (await get_user(db_session, "u1")).is_active is False


@pytest.mark.asyncio
async def test_update_user_active_missing(db_session) -> None:
    with pytest.raises(NotFoundError) as exc_info:
        await update_user_active(db_session, "ghost", False)

    assert exc_info.value.entity_id == "ghost"


@pytest.mark.asyncio
async def test_deactivate_team_flips_every_member(db_session, seed) -> None:
    await seed(teams={"backend": [("u1", True), ("u2", True)], "mobile": [("m1", True)]})

    assert await deactivate_team(db_session, "backend") == 2

    db_session.expire_all()
    assert [u.is_active for u in await list_users_by_team(db_session, "backend")] == [False, False]
    assert (await get_user(db_session, "m1")).is_active is True


# ---------------------------------------------------------------------------
# Pull requests
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_create_pull_request_with_ordered_reviewers(db_session, seed) -> None:
    await seed(teams={"backend": [("A", True), ("B", True), ("C", True)]})

    await create_pull_request(db_session, "pr-1", "Add search", "A", ["C", "B"])

    db_session.expire_all()
    pr = await get_pull_request(db_session, "pr-1")
    assert pr.status == OPEN
    assert pr.assigned_reviewers == ["C", "B"]
    assert pr.merged_at is None
    assert pr.created_at is not None
    assert pr.created_at.utcoffset() == timedelta(0)


@pytest.mark.asyncio
async def test_create_duplicate_pull_request(db_session, seed) -> None:
    await seed(
        teams={"backend": [("A", True), ("B", True)]},
        pull_requests=[("pr-1", "A", ["B"], OPEN)],
    )

    with pytest.raises(AlreadyExistsError) as exc_info:
        await create_pull_request(db_session, "pr-1", "Again", "A", [])

    assert exc_info.value.entity == "pull_request"
    db_session.expire_all()
    assert (await get_pull_request(db_session, "pr-1")).assigned_reviewers == ["B"]


@pytest.mark.asyncio
async def test_get_missing_pull_request(db_session) -> None:
    assert await get_pull_request(db_session, "nope") is None


@pytest.mark.asyncio
async def test_conditional_status_update(db_session, seed) -> None:
    await seed(
        teams={"backend": [("A", True), ("B", True)]},
        pull_requests=[("pr-1", "A", ["B"], OPEN)],
    )
    merged_at = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)

    await update_pull_request_status(db_session, "pr-1", MERGED, merged_at, expected_status=OPEN)

    db_session.expire_all()
    pr = await get_pull_request(db_session, "pr-1")
    assert pr.status == MERGED
    assert pr.merged_at == merged_at
    assert pr.merged_at.tzinfo is not None

    with pytest.raises(NotFoundError):
        await update_pull_request_status(
            db_session, "pr-1", MERGED, datetime.now(timezone.utc), expected_status=OPEN
        )


@pytest.mark.asyncio
async def test_status_update_normalises_offset_to_utc(db_session, seed) -> None:
    await seed(
        teams={"backend": [("A", True), ("B", True)]},
        pull_requests=[("pr-1", "A", ["B"], OPEN)],
    )
    moscow = timezone(timedelta(hours=3))

    await update_pull_request_status(
        db_session, "pr-1", MERGED, datetime(2026, 3, 1, 15, 0, tzinfo=moscow)
    )

    db_session.expire_all()
    pr = await get_pull_request(db_session, "pr-1")
    assert pr.merged_at == datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)
    assert pr.merged_at.utcoffset() == timedelta(0)


@pytest.mark.asyncio
async def test_status_update_missing_row(db_session) -> None:
    with pytest.raises(NotFoundError):
        await update_pull_request_status(db_session, "ghost", MERGED, None)


@pytest.mark.asyncio
async def test_set_reviewers_replaces_in_order(db_session, seed) -> None:
    await seed(
        teams={"backend": [("A", True), ("B", True), ("C", True), ("D", True)]},
        pull_requests=[("pr-1", "A", ["B", "C"], OPEN)],
    )

    await set_reviewers(db_session, "pr-1", ["D", "C"])

    db_session.expire_all()
    assert (await get_pull_request(db_session, "pr-1")).assigned_reviewers == ["D", "C"]

    await set_reviewers(db_session, "pr-1", [])
    db_session.expire_all()
    assert (await get_pull_request(db_session, "pr-1")).assigned_reviewers == []


@pytest.mark.asyncio
async def test_set_reviewers_rejects_duplicates(db_session, seed) -> None:
    await seed(
        teams={"backend": [("A", True), ("B", True), ("C", True)]},
        pull_requests=[("pr-1", "A", ["B"], OPEN)],
    )

    with pytest.raises(StorageError) as exc_info:
        await set_reviewers(db_session, "pr-1", ["C", "C"])

    assert exc_info.value.operation == "set_reviewers"
    db_session.expire_all()
    assert (await get_pull_request(db_session, "pr-1")).assigned_reviewers == ["B"]


@pytest.mark.asyncio
async def test_list_by_reviewer_any_status(db_session, seed) -> None:
    await seed(
        teams={"backend": [("A", True), ("B", True), ("C", True)]},
        pull_requests=[
            ("pr-1", "A", ["B"], OPEN),
            ("pr-2", "A", ["B", "C"], MERGED),
            ("pr-3", "A", ["C"], OPEN),
        ],
    )

    rows = await list_by_reviewer(db_session, "B")

    assert {pr.pull_request_id for pr in rows} == {"pr-1", "pr-2"}


@pytest.mark.asyncio
async def test_list_open_by_reviewers_distinct_and_open_only(db_session, seed) -> None:
    await seed(
        teams={"backend": [("A", True), ("B", True), ("C", True), ("D", True)]},
        pull_requests=[
            ("pr-1", "A", ["B", "C"], OPEN),
            ("pr-2", "A", ["C"], MERGED),
            ("pr-3", "A", ["D"], OPEN),
            ("pr-4", "A", ["C", "D"], OPEN),
        ],
    )

    rows = await list_open_by_reviewers(db_session, ["B", "C"])

    assert [pr.pull_request_id for pr in rows] == ["pr-1", "pr-4"]


@pytest.mark.asyncio
async def test_list_open_by_reviewers_empty_input(db_session) -> None:
    assert await list_open_by_reviewers(db_session, []) == []


@pytest.mark.asyncio
async def test_count_by_reviewer(db_session, seed) -> None:
    await seed(
        teams={"backend": [("A", True), ("B", True), ("C", True)]},
        pull_requests=[
            ("pr-1", "A", ["B", "C"], OPEN),
            ("pr-2", "A", ["B"], MERGED),
        ],
    )

    assert await count_by_reviewer(db_session) == {"B": 2, "C": 1}
