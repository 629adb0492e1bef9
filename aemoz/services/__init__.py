"""Service layer: registry, grouping engine, group store and access gate."""

from .errors import (
    Conflict,
    Internal,
    InvalidCredential,
    NotFound,
    PreconditionFailed,
    ServiceError,
    Unauthenticated,
    Unauthorized,
    Unavailable,
    ValidationFailed,
)
from .access_gate import AccessGate, AdminIdentity
from .draw import DrawResult, GroupingEngine
from .group_store import GroupStore
from .registry import ParticipantRegistry

__all__ = [
    "AccessGate",
    "AdminIdentity",
    "GroupingEngine",
    "DrawResult",
    "GroupStore",
    "ParticipantRegistry",
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
