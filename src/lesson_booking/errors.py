"""
lesson_booking.errors

Application error taxonomy.

Responsibilities:
- Define the domain errors raised by services and repositories.
- Carry a client-safe message and a log-only context dict.
- Declare the HTTP status and machine-readable code each error maps to.
"""

from __future__ import annotations

from typing import Any

from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_404_NOT_FOUND,
    HTTP_409_CONFLICT,
    HTTP_500_INTERNAL_SERVER_ERROR,
)


class BookingError(Exception):
    """
    Base class for application errors.

    `message` is safe to return to API clients; `context` is for logs only.
    `details` is the subset of structured data the client may see.
    """

    code = "internal_error"
    status_code = HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        *,
        context: dict[str, Any] | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}
        self.details = details or {}


class InvalidRequest(BookingError):
    code = "invalid_request"
    status_code = HTTP_400_BAD_REQUEST

    def __init__(
        self,
        message: str = "Invalid request",
        *,
        errors: list[dict[str, Any]] | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, context=context, details={"errors": errors or []})
        self.errors = errors or []


class InvalidIdentifier(BookingError):
    code = "invalid_identifier"
    status_code = HTTP_400_BAD_REQUEST

    def __init__(self, identifier: str) -> None:
        super().__init__(
            f"'{identifier}' is not a valid identifier",
            context={"identifier": identifier},
            details={"identifier": identifier},
        )
        self.identifier = identifier


class NotFound(BookingError):
    code = "not_found"
    status_code = HTTP_404_NOT_FOUND

    def __init__(self, resource: str, identifier: str) -> None:
        super().__init__(
            f"{resource} '{identifier}' was not found",
            context={"resource": resource, "identifier": identifier},
            details={"resource": resource, "identifier": identifier},
        )


class OrderRejected(BookingError):
    """
    Raised in transactional inventory mode when at least one item cannot be applied.
    Nothing was written; `outcomes` explains which items blocked the order.
    """

    code = "order_rejected"
    status_code = HTTP_409_CONFLICT

    def __init__(self, outcomes: list[dict[str, Any]]) -> None:
        super().__init__(
            "Order could not be fulfilled from current inventory",
            context={"outcomes": outcomes},
            details={"itemOutcomes": outcomes},
        )
        self.outcomes = outcomes


class StorageUnavailable(BookingError):
    code = "storage_unavailable"
    status_code = HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, operation: str, *, context: dict[str, Any] | None = None) -> None:
        # The underlying driver error stays in `context`; clients only see the operation.
        ctx = {"operation": operation, **(context or {})}
        super().__init__(f"Storage is unavailable ({operation})", context=ctx)
        self.operation = operation


class ConfigurationError(BookingError):
    code = "configuration_error"

    def __init__(self, message: str, *, context: dict[str, Any] | None = None) -> None:
        super().__init__(message, context=context)


# --- Module Notes -----------------------------------------------------------
# HTTP rendering of these errors lives in `api.errors`; services never build responses.
