"""Mapping of ReviewRoster errors onto HTTP responses.

Every failure leaves the API as ``{"error": {"code": ..., "message": ...}}``.
Handlers are registered on the application by ``register_error_handlers``.
"""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from reviewroster.errors import ErrorKind, ReviewRosterError
from reviewroster.logging import get_logger

logger = get_logger(__name__)

_STATUS_BY_KIND: dict[ErrorKind, tuple[int, str]] = {
    ErrorKind.NOT_FOUND: (404, "NOT_FOUND"),
    ErrorKind.ALREADY_EXISTS: (409, "PR_EXISTS"),
    ErrorKind.ALREADY_MERGED: (409, "PR_MERGED"),
    ErrorKind.NOT_ASSIGNED: (409, "NOT_ASSIGNED"),
    ErrorKind.NO_CANDIDATE: (409, "NO_CANDIDATE"),
    ErrorKind.STORAGE_FAILURE: (500, "INTERNAL_ERROR"),
}


def error_body(code: str, message: str) -> dict[str, Any]:
    return {"error": {"code": code, "message": message}}


def status_for_error(exc: ReviewRosterError) -> tuple[int, str]:
    """Return the HTTP status and error code for a ReviewRoster error.

    Duplicate teams are a client error (400 TEAM_EXISTS); duplicate pull
    requests are a conflict (409 PR_EXISTS).
    """
    if exc.kind is ErrorKind.ALREADY_EXISTS and exc.entity == "team":
        return 400, "TEAM_EXISTS"
    return _STATUS_BY_KIND.get(exc.kind, (500, "INTERNAL_ERROR"))


async def handle_reviewroster_error(request: Request, exc: ReviewRosterError) -> JSONResponse:
    status_code, code = status_for_error(exc)

    if status_code >= 500:
        logger.error(
            "request_storage_failure",
            path=request.url.path,
            operation=exc.operation,
            entity=exc.entity,
            entity_id=exc.entity_id,
            error=str(exc),
            cause=repr(exc.cause) if exc.cause else None,
        )
        message = "internal error"
    else:
        logger.info(
            "request_rejected",
            path=request.url.path,
            code=code,
            entity=exc.entity,
            entity_id=exc.entity_id,
        )
        message = exc.message

    return JSONResponse(status_code=status_code, content=error_body(code, message))


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = f"{location}: {first.get('msg', 'invalid request')}" if location else "invalid request"

    logger.info("request_validation_failed", path=request.url.path, errors=len(errors))
    return JSONResponse(status_code=400, content=error_body("BAD_REQUEST", message))


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ReviewRosterError, handle_reviewroster_error)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, handle_validation_error)  # type: ignore[arg-type]
