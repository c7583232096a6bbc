"""Exception handlers: the single place where error kinds become HTTP status codes."""

import logging
from datetime import UTC, datetime
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.core.errors import (
    ErrorKind,
    LedgerError,
    MissingToken,
    TokenError,
    ValidationFailed,
)
from app.schemas.errors import ErrorResponse, ValidationErrorResponse

logger = logging.getLogger(__name__)

STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.UNAUTHENTICATED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

INTERNAL_MESSAGE = "Internal server error"

# Request parts FastAPI prefixes onto error locations.
_LOCATION_PARTS = frozenset({"body", "query", "path", "header", "cookie"})


def _json(
    status_code: int,
    message: str,
    errors: dict[str, str] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    now = datetime.now(UTC)
    if errors is None:
        body = ErrorResponse(status=status_code, message=message, timestamp=now)
    else:
        body = ValidationErrorResponse(
            status=status_code, message=message, timestamp=now, errors=errors
        )
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json"),
        headers=headers,
    )


def _field_name(loc: tuple[Any, ...]) -> str:
    parts = [str(p) for p in loc if p not in _LOCATION_PARTS and not isinstance(p, int)]
    if parts:
        return ".".join(parts)
    return str(loc[0]) if loc else "body"


async def ledger_error_handler(request: Request, exc: LedgerError) -> JSONResponse:
    status_code = STATUS_BY_KIND[exc.kind]
    if isinstance(exc, ValidationFailed):
        return _json(status_code, exc.message, errors=exc.errors)
    if exc.kind is ErrorKind.INTERNAL:
        logger.error("Internal fault on %s %s: %s", request.method, request.url.path, exc.message)
        return _json(status_code, INTERNAL_MESSAGE)
    headers = None
    if isinstance(exc, (MissingToken, TokenError)):
        headers = {"WWW-Authenticate": "Bearer"}
    return _json(status_code, exc.message, headers=headers)


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors: dict[str, str] = {}
    for err in exc.errors():
        errors.setdefault(_field_name(tuple(err.get("loc", ()))), err.get("msg", "Invalid value"))
    return _json(status.HTTP_400_BAD_REQUEST, "Validation failed", errors=errors)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _json(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_MESSAGE)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(LedgerError, ledger_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
