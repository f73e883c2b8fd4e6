from __future__ import annotations

import logging
from typing import Any, cast

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from rrs.api.middleware.request_id import get_request_id
from rrs.domain.common.errors import (
    ConflictError,
    InvalidStatusError,
    InvalidTransitionError,
    NotFoundError,
    PersistenceError,
    ReservationError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# Checked in order; subclasses must precede their bases.
_HTTP_STATUS_BY_ERROR: tuple[tuple[type[ReservationError], int], ...] = (
    (ValidationError, 400),
    (ConflictError, 409),
    (InvalidTransitionError, 409),
    (NotFoundError, 404),
    (InvalidStatusError, 500),
    (PersistenceError, 503),
)

_HTTP_ERROR_CODES = {
    400: "BAD_REQUEST",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
}


def http_status_for(exc: ReservationError) -> int:
    for error_type, status_code in _HTTP_STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status_code
    return 500


def error_body(code: str, message: str, details: dict[str, Any] | None = None) -> dict[str, Any]:
    return {
        "error": {"code": code, "message": message, "details": details or {}},
        "requestId": get_request_id(),
    }


async def _reservation_error_handler(_: Request, exc: Exception) -> JSONResponse:
    error = cast(ReservationError, exc)
    status_code = http_status_for(error)
    if status_code >= 500:
        logger.error(
            "request_failed",
            exc_info=error,
            extra={"error_code": error.code, "status_code": status_code},
        )
    return JSONResponse(status_code=status_code, content=error_body(error.code, str(error)))


async def _http_exception_handler(_: Request, exc: Exception) -> JSONResponse:
    http_exc = cast(StarletteHTTPException, exc)
    return JSONResponse(
        status_code=http_exc.status_code,
        content=error_body(
            _HTTP_ERROR_CODES.get(http_exc.status_code, "HTTP_ERROR"),
            str(http_exc.detail) if http_exc.detail else "request failed",
        ),
        headers=getattr(http_exc, "headers", None),
    )


async def _request_validation_handler(_: Request, exc: Exception) -> JSONResponse:
    validation_exc = cast(RequestValidationError, exc)
    return JSONResponse(
        status_code=400,
        content=error_body(
            "INVALID_REQUEST",
            "request validation failed",
            {"errors": jsonable_encoder(validation_exc.errors())},
        ),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ReservationError, _reservation_error_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
