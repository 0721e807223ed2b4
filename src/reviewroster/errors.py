"""Error taxonomy for ReviewRoster.

Every failure raised by the stores and services is a ``ReviewRosterError``
carrying an ``ErrorKind``. Callers (the HTTP layer, the CLI) branch on the
kind; the concrete subclasses exist so ``except`` clauses can be narrow.
Underlying causes are chained with ``raise ... from exc`` and stay reachable
through ``__cause__``.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Distinguishable failure kinds.

    Attributes:
        NOT_FOUND: User, team, or pull request absent.
        ALREADY_EXISTS: Duplicate identifier on create.
        ALREADY_MERGED: Mutating operation attempted on a merged pull request.
        NOT_ASSIGNED: Reassignment target is not currently a reviewer.
        NO_CANDIDATE: No eligible replacement reviewer in the team.
        STORAGE_FAILURE: Any persistence error not otherwise classified.
    """

    NOT_FOUND = "not_found"
    ALREADY_EXISTS = "already_exists"
    ALREADY_MERGED = "already_merged"
    NOT_ASSIGNED = "not_assigned"
    NO_CANDIDATE = "no_candidate"
    STORAGE_FAILURE = "storage_failure"


class ReviewRosterError(Exception):
    """Base class for all ReviewRoster failures.

    Attributes:
        kind: The failure kind.
        entity: Entity type involved ("user", "team", "pull_request"), if any.
        entity_id: Identifier of the entity involved, if any.
        operation: Name of the operation that failed, if known.
    """

    kind: ErrorKind = ErrorKind.STORAGE_FAILURE

    def __init__(
        self,
        message: str,
        *,
        entity: str | None = None,
        entity_id: str | None = None,
        operation: str | None = None,
    ) -> None:
        self.message = message
        self.entity = entity
        self.entity_id = entity_id
        self.operation = operation
        super().__init__(message)

    @property
    def cause(self) -> BaseException | None:
        """The underlying exception this error wraps, if any."""
        return self.__cause__

    def __str__(self) -> str:
        if self.operation:
            return f"{self.operation}: {self.message}"
        return self.message


class NotFoundError(ReviewRosterError):
    """Raised when a user, team, or pull request does not exist."""

    kind = ErrorKind.NOT_FOUND


class AlreadyExistsError(ReviewRosterError):
    """Raised when creating an entity whose identifier is taken."""

    kind = ErrorKind.ALREADY_EXISTS


class AlreadyMergedError(ReviewRosterError):
    """Raised when a reviewer change targets a merged pull request."""

    kind = ErrorKind.ALREADY_MERGED


class NotAssignedError(ReviewRosterError):
    """Raised when the reviewer to replace is not assigned to the pull request."""

    kind = ErrorKind.NOT_ASSIGNED


class NoCandidateError(ReviewRosterError):
    """Raised when no active teammate can take over a review."""

    kind = ErrorKind.NO_CANDIDATE


class StorageError(ReviewRosterError):
    """Raised for persistence failures that are not otherwise classified."""

    kind = ErrorKind.STORAGE_FAILURE
