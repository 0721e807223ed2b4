"""End-to-end tests running the full application lifespan on a SQLite file."""

from __future__ import annotations

from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient

from reviewroster.config import AssignmentConfig, DatabaseConfig, ReviewRosterConfig
from reviewroster.database.connection import create_schema, get_engine
from reviewroster.web.app import create_app


@pytest.fixture
def config(tmp_path: Path) -> ReviewRosterConfig:
    return ReviewRosterConfig(
        database=DatabaseConfig(url=f"sqlite+aiosqlite:///{tmp_path / 'roster.db'}"),
        assignment=AssignmentConfig(reviewers_per_pull_request=1),
    )


@pytest.mark.asyncio
async def test_review_lifecycle(config: ReviewRosterConfig) -> None:
    engine = get_engine(config.database)
    await create_schema(engine)
    await engine.dispose()

    app = create_app(config)
    async with app.router.lifespan_context(app):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            created = await client.post(
                "/team/add",
                json={
                    "team_name": "backend",
                    "members": [
                        {"user_id": "alice", "username": "Alice"},
                        {"user_id": "bob", "username": "Bob"},
                        {"user_id": "carol", "username": "Carol"},
                    ],
                },
            )
            assert created.status_code == 201

            pr = await client.post(
                "/pullRequest/create",
                json={
                    "pull_request_id": "pr-100",
                    "pull_request_name": "Speed up search",
                    "author_id": "alice",
                },
            )
            assert pr.status_code == 201
            reviewers = pr.json()["pr"]["assigned_reviewers"]
            assert len(reviewers) == 1
            assert reviewers[0] in {"bob", "carol"}

            reassigned = await client.post(
                "/pullRequest/reassign",
                json={"pull_request_id": "pr-100", "old_user_id": reviewers[0]},
            )
            assert reassigned.status_code == 200
            replacement = reassigned.json()["replaced_by"]
            assert replacement == ({"bob", "carol"} - {reviewers[0]}).pop()

            deactivated = await client.post(
                "/team/deactivateMembers",
                json={"team_name": "backend", "user_ids": [replacement]},
            )
            assert deactivated.json()["deactivated"] == [replacement]

            reviews = await client.get("/users/getReview", params={"user_id": reviewers[0]})
            assert [p["pull_request_id"] for p in reviews.json()["pull_requests"]] == ["pr-100"]

            merged = await client.post("/pullRequest/merge", json={"pull_request_id": "pr-100"})
            assert merged.json()["pr"]["status"] == "MERGED"

            after_merge = await client.post(
                "/pullRequest/reassign",
                json={"pull_request_id": "pr-100", "old_user_id": reviewers[0]},
            )
            assert after_merge.status_code == 409
            assert after_merge.json()["error"]["code"] == "PR_MERGED"

            stats = await client.get("/stats/reviewers")
            assert stats.json() == {"stats": [{"user_id": reviewers[0], "count": 1}]}

            ready = await client.get("/health/ready")
            assert ready.json() == {"status": "ok", "database": "connected"}
