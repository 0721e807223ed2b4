"""Database layer for ReviewRoster.

This module handles database connections, session management, the ORM
models, and the SQL-backed stores used by the services.

Public API:
    get_engine: Create an AsyncEngine from DatabaseConfig.
    get_session_factory: Create an async_sessionmaker from an engine.
    create_schema: Create all tables on an engine.
    Base: SQLAlchemy declarative base for all models.
"""

from reviewroster.database.connection import create_schema, get_engine, get_session_factory
from reviewroster.database.models import (
    Base,
    PullRequest,
    PullRequestReviewer,
    Team,
    TimestampMixin,
    User,
)

__all__ = [
    "get_engine",
    "get_session_factory",
    "create_schema",
    "Base",
    "TimestampMixin",
    "Team",
    "User",
    "PullRequest",
    "PullRequestReviewer",
]
