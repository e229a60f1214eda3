"""Service-layer errors. Each carries the HTTP status the API maps it to."""

from __future__ import annotations


class ServiceError(Exception):
    """Base class for errors raised by services and surfaced to API callers."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(ServiceError):
    """Missing or malformed required field."""

    status_code = 400


class AuthenticationError(ServiceError):
    """No authenticated session."""

    status_code = 401


class AuthorizationError(ServiceError):
    """Authenticated, but neither owner nor admin."""

    status_code = 403


class NotFoundError(ServiceError):
    """Entity id does not resolve."""

    status_code = 404


class ConflictError(ServiceError):
    """Uniqueness violation the caller can fix (e.g. slug taken)."""

    status_code = 409


class DependencyError(ServiceError):
    """Datastore or blob-store call failed; the underlying message is forwarded."""

    status_code = 500

    def __init__(self, message: str, error: str | None = None) -> None:
        super().__init__(message)
        self.error = error
