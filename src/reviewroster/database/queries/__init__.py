"""Database query functions for ReviewRoster.

This module provides async query functions for all database entities:
- Team creation and lookup
- User upsert, lookup and active-flag updates
- Pull request CRUD, reviewer slots and reviewer-centric reads
"""

from reviewroster.database.queries.pull_request import (
    count_by_reviewer,
    create_pull_request,
    get_pull_request,
    list_by_reviewer,
    list_open_by_reviewers,
    set_reviewers,
    update_pull_request_status,
)
from reviewroster.database.queries.team import create_team, get_team, list_teams
from reviewroster.database.queries.user import (
    deactivate_team,
    get_user,
    list_users_by_team,
    update_user_active,
    upsert_team_members,
)

__all__ = [
    # Team queries
    "create_team",
    "get_team",
    "list_teams",
    # User queries
    "upsert_team_members",
    "get_user",
    "list_users_by_team",
    "update_user_active",
    "deactivate_team",
    # Pull request queries
    "create_pull_request",
    "get_pull_request",
    "update_pull_request_status",
    "set_reviewers",
    "list_by_reviewer",
    "list_open_by_reviewers",
    "count_by_reviewer",
]
