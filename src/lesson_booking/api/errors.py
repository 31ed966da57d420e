"""
lesson_booking.api.errors

Exception handlers that turn application errors into JSON responses.

Responsibilities:
- Render `BookingError` subclasses with their status code and error code.
- Map request schema errors to 400 (same shape as `InvalidRequest`).
- Log unexpected failures and answer with a generic 500 body.
"""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.status import HTTP_400_BAD_REQUEST, HTTP_500_INTERNAL_SERVER_ERROR

from lesson_booking.errors import BookingError, InvalidRequest
from lesson_booking.observability.logging import get_logger

log = get_logger(__name__)


def _body(code: str, message: str, details: dict[str, Any] | None = None) -> dict[str, Any]:
    return {"error": code, "message": message, "details": details or {}}


async def booking_error_handler(request: Request, exc: BookingError) -> JSONResponse:
    if exc.status_code >= 500:
        log.error("request_failed", error=exc.code, message=exc.message, context=exc.context)
    else:
        log.info("request_rejected", error=exc.code, message=exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content=_body(exc.code, exc.message, exc.details),
    )


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", ""), "type": err.get("type", "")}
        for err in exc.errors()
    ]
    log.info("request_rejected", error=InvalidRequest.code, errors=len(errors))
    return JSONResponse(
        status_code=HTTP_400_BAD_REQUEST,
        content=_body(InvalidRequest.code, "Invalid request", {"errors": errors}),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    # Internal error text stays in the logs.
    log.exception("unhandled_error", error_type=type(exc).__name__)
    return JSONResponse(
        status_code=HTTP_500_INTERNAL_SERVER_ERROR,
        content=_body("internal_error", "An unexpected error occurred"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BookingError, booking_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
