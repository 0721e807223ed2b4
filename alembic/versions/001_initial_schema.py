"""Initial schema for ReviewRoster.

Creates the teams, users, pull_requests and pr_reviewers tables.

Revision ID: 001
Revises: None
Create Date: 2026-10-19
"""

from __future__ import annotations

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "teams",
        sa.Column("team_name", sa.Text(), primary_key=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )

    op.create_table(
        "users",
        sa.Column("user_id", sa.Text(), primary_key=True),
        sa.Column("username", sa.Text(), nullable=False),
        sa.Column(
            "team_name",
            sa.Text(),
            sa.ForeignKey("teams.team_name"),
            nullable=False,
        ),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )
    op.create_index("ix_users_team_name", "users", ["team_name"])

    op.create_table(
        "pull_requests",
        sa.Column("pull_request_id", sa.Text(), primary_key=True),
        sa.Column("pull_request_name", sa.Text(), nullable=False),
        sa.Column(
            "author_id",
            sa.Text(),
            sa.ForeignKey("users.user_id"),
            nullable=False,
        ),
        sa.Column(
            "status",
            sa.Enum("OPEN", "MERGED", name="pr_status"),
            nullable=False,
            server_default="OPEN",
        ),
        sa.Column("merged_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )
    op.create_index("ix_pull_requests_status", "pull_requests", ["status"])

    op.create_table(
        "pr_reviewers",
        sa.Column(
            "pull_request_id",
            sa.Text(),
            sa.ForeignKey("pull_requests.pull_request_id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column(
            "reviewer_id",
            sa.Text(),
            sa.ForeignKey("users.user_id"),
            primary_key=True,
        ),
        sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
    )
    op.create_index("ix_pr_reviewers_reviewer_id", "pr_reviewers", ["reviewer_id"])


def downgrade() -> None:
    op.drop_index("ix_pr_reviewers_reviewer_id", table_name="pr_reviewers")
    op.drop_table("pr_reviewers")
    op.drop_index("ix_pull_requests_status", table_name="pull_requests")
    op.drop_table("pull_requests")
    op.drop_index("ix_users_team_name", table_name="users")
    op.drop_table("users")
    op.drop_table("teams")
    sa.Enum(name="pr_status").drop(op.get_bind(), checkfirst=True)
