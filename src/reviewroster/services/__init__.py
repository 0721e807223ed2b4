"""Domain services for ReviewRoster.

This package holds the reviewer-assignment rules:
- PullRequestService: create, merge and reassign
- DeactivationCascade: bulk deactivation with reviewer rebalancing
- TeamService and UserService: team and user operations
- ReviewerStatsService: assignment counts per reviewer
- SecureRandomSelector: the reviewer selection policy
"""

from reviewroster.services.deactivation import DeactivationCascade, rebuild_reviewers
from reviewroster.services.pull_requests import (
    DEFAULT_REVIEWERS_PER_PULL_REQUEST,
    PullRequestService,
)
from reviewroster.services.selection import SecureRandomSelector
from reviewroster.services.stats import ReviewerStatsService
from reviewroster.services.teams import TeamService
from reviewroster.services.users import UserService

__all__ = [
    "DEFAULT_REVIEWERS_PER_PULL_REQUEST",
    "DeactivationCascade",
    "PullRequestService",
    "ReviewerStatsService",
    "SecureRandomSelector",
    "TeamService",
    "UserService",
    "rebuild_reviewers",
]
