"""Translation of SQLAlchemy exceptions into ReviewRoster errors.

Query functions wrap their statements in ``translate_errors`` so callers
only ever see ``ReviewRosterError`` subclasses. A failed write rolls the
session back before the translated error propagates.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from reviewroster.errors import AlreadyExistsError, StorageError

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def translate_errors(
    session: AsyncSession,
    operation: str,
    entity: str,
    entity_id: str | None = None,
    conflict_is_duplicate: bool = False,
) -> AsyncIterator[None]:
    """Map SQLAlchemy failures raised inside the block to domain errors.

    Args:
        session: Session the block runs on; rolled back on failure.
        operation: Query name, recorded on the raised error.
        entity: Entity type the query targets.
        entity_id: Identifier of the targeted entity, if any.
        conflict_is_duplicate: Map ``IntegrityError`` to
            ``AlreadyExistsError`` instead of ``StorageError``.

    Raises:
        AlreadyExistsError: On an integrity conflict when requested.
        StorageError: On any other SQLAlchemy error.
    """
    try:
        yield
    except IntegrityError as exc:
        await session.rollback()
        if conflict_is_duplicate:
            raise AlreadyExistsError(
                f"{entity} {entity_id} already exists",
                entity=entity,
                entity_id=entity_id,
                operation=operation,
            ) from exc
        logger.error(
            "storage_integrity_error",
            operation=operation,
            entity=entity,
            entity_id=entity_id,
            error=str(exc.orig),
        )
        raise StorageError(
            f"integrity error on {entity}",
            entity=entity,
            entity_id=entity_id,
            operation=operation,
        ) from exc
    except SQLAlchemyError as exc:
        await session.rollback()
        logger.error(
            "storage_error",
            operation=operation,
            entity=entity,
            entity_id=entity_id,
            error=str(exc),
        )
        raise StorageError(
            f"database error on {entity}",
            entity=entity,
            entity_id=entity_id,
            operation=operation,
        ) from exc
