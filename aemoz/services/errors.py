"""Error taxonomy shared by the service layer and the HTTP handlers."""

from __future__ import annotations

from typing import Any, Mapping


class ServiceError(Exception):
    """Base class for failures that map onto a structured HTTP response."""

    status_code: int = 500
    code: str = "internal"
    default_message: str = "Internal server error"

    def __init__(
        self,
        message: str | None = None,
        *,
        fields: Mapping[str, str] | None = None,
        **context: Any,
    ) -> None:
        self.message = message or self.default_message
        self.fields = dict(fields) if fields else None
        self.context = context
        super().__init__(self.message)

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"detail": self.message, "code": self.code}
        if self.fields:
            payload["fields"] = self.fields
        payload.update(self.context)
        return payload


class ValidationFailed(ServiceError):
    status_code = 400
    code = "validation_failed"
    default_message = "Invalid input"


class Conflict(ServiceError):
    status_code = 409
    code = "conflict"
    default_message = "Resource already exists"


class NotFound(ServiceError):
    status_code = 404
    code = "not_found"
    default_message = "Resource not found"


class Unauthorized(ServiceError):
    """Wrong admin password."""

    status_code = 401
    code = "unauthorized"
    default_message = "Incorrect password"


class Unauthenticated(ServiceError):
    """No credential supplied."""

    status_code = 401
    code = "unauthenticated"
    default_message = "Access token required"


class InvalidCredential(ServiceError):
    """Credential present but forged, malformed or expired."""

    status_code = 403
    code = "invalid_credential"
    default_message = "Invalid or expired token"


class PreconditionFailed(ServiceError):
    status_code = 400
    code = "precondition_failed"
    default_message = "Draw preconditions not met"


class Unavailable(ServiceError):
    """Storage timed out or is unreachable; the caller may retry."""

    status_code = 503
    code = "unavailable"
    default_message = "Service temporarily unavailable, try again"


class Internal(ServiceError):
    """Unexpected failure; the response carries no internal detail."""

    status_code = 500
    code = "internal"
    default_message = "Internal server error"


__all__ = [
    "ServiceError",
    "ValidationFailed",
    "Conflict",
    "NotFound",
    "Unauthorized",
    "Unauthenticated",
    "InvalidCredential",
    "PreconditionFailed",
    "Unavailable",
    "Internal",
]
