from __future__ import annotations

import logging
from typing import Any, cast

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from octopoz.api.middleware.request_id import get_request_id
from octopoz.application.errors import (
    CapacityExceededError,
    ConcurrencyConflictError,
    EngineError,
    InvalidOrderTransitionError,
    InvalidReservationTransitionError,
    NoTableAvailableError,
    OrderNotFoundError,
    OrderVersionConflictError,
    PromotionNotApplicableError,
    ReservationNotFoundError,
    TableUnavailableError,
    TenantInactiveError,
    TenantNotFoundError,
)

logger = logging.getLogger(__name__)


def _error_response(
    *,
    status_code: int,
    code: str,
    message: str,
    details: dict[str, Any] | None = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": {
                "code": code,
                "message": message,
                "details": details or {},
            },
            "requestId": get_request_id(),
        },
    )


def _exception_handler(status_code: int, code: str):
    async def handler(_: Request, exc: Exception) -> JSONResponse:
        details = getattr(exc, "details", None)
        if status_code >= 500:
            logger.warning("engine_error", extra={"reason": code})
        return _error_response(
            status_code=status_code,
            code=code,
            message=str(exc),
            details=details if isinstance(details, dict) else None,
        )

    return handler


async def _http_exception_handler(_: Request, exc: Exception) -> JSONResponse:
    http_exc = cast(StarletteHTTPException, exc)
    message = str(http_exc.detail) if http_exc.detail else "request failed"
    code = "HTTP_ERROR"
    if http_exc.status_code == 404:
        code = "NOT_FOUND"
    elif http_exc.status_code == 400:
        code = "BAD_REQUEST"
    elif http_exc.status_code == 409:
        code = "CONFLICT"
    return _error_response(
        status_code=http_exc.status_code,
        code=code,
        message=message,
    )


async def _validation_exception_handler(_: Request, exc: Exception) -> JSONResponse:
    validation_exc = cast(RequestValidationError, exc)
    return _error_response(
        status_code=400,
        code="INVALID_REQUEST",
        message="request validation failed",
        details={"errors": jsonable_encoder(validation_exc.errors())},
    )


def register_exception_handlers(app: FastAPI) -> None:
    mappings: list[tuple[type[Exception], int, str]] = [
        (TenantNotFoundError, 404, "TENANT_NOT_FOUND"),
        (TenantInactiveError, 403, "TENANT_INACTIVE"),
        (CapacityExceededError, 429, "CAPACITY_EXCEEDED"),
        (PromotionNotApplicableError, 409, "PROMOTION_NOT_APPLICABLE"),
        (NoTableAvailableError, 409, "NO_TABLE_AVAILABLE"),
        (TableUnavailableError, 409, "TABLE_UNAVAILABLE"),
        (OrderNotFoundError, 404, "ORDER_NOT_FOUND"),
        (ReservationNotFoundError, 404, "RESERVATION_NOT_FOUND"),
        (InvalidOrderTransitionError, 409, "INVALID_ORDER_TRANSITION"),
        (OrderVersionConflictError, 409, "CONFLICT"),
        (InvalidReservationTransitionError, 409, "INVALID_RESERVATION_TRANSITION"),
        (ConcurrencyConflictError, 503, "CONCURRENCY_CONFLICT"),
        (EngineError, 400, "ENGINE_ERROR"),
    ]

    for exc_cls, status_code, code in mappings:
        app.add_exception_handler(exc_cls, _exception_handler(status_code, code))

    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
