"""API exceptions - mapped to HTTP status codes by ApiErrorMiddleware."""

from typing import Any


class ApiError(Exception):
    """Base exception for errors reported to API clients."""

    status_code = 500

    def __init__(
        self,
        message: str,
        errors: list[dict[str, Any]] | None = None,
    ) -> None:
        self.message = message
        self.errors = errors
        super().__init__(message)


class ValidationError(ApiError):
    """Malformed or missing input."""

    status_code = 400

    def __init__(
        self,
        message: str,
        errors: list[dict[str, Any]] | None = None,
        field: str | None = None,
    ) -> None:
        super().__init__(message, errors)
        self.field = field


class NotFoundError(ApiError):
    """Referenced entity does not exist."""

    status_code = 404


class ConflictError(ApiError):
    """Duplicate entity or invariant violation."""

    status_code = 409


class ForbiddenError(ApiError):
    """Caller is not allowed to act on the resource."""

    status_code = 403


class InvalidTransitionError(ApiError):
    """Requested order status change is not allowed."""

    status_code = 400

    def __init__(
        self,
        message: str,
        current_status: str | None = None,
        requested_status: str | None = None,
    ) -> None:
        super().__init__(message)
        self.current_status = current_status
        self.requested_status = requested_status


class InvalidStateError(InvalidTransitionError):
    """Order is in a state that does not allow the operation."""


class InternalError(ApiError):
    """Unexpected failure, usually in storage."""

    status_code = 500
