"""Telemetry helpers and metrics."""

from .metrics import (
    DRAW_COUNTER,
    DRAW_GROUPS,
    ERROR_COUNTER,
    LOGIN_COUNTER,
    REQUEST_COUNT,
    REQUEST_LATENCY,
    increment_login,
    observe_request,
    record_draw,
)

__all__ = [
    "DRAW_COUNTER",
    "DRAW_GROUPS",
    "ERROR_COUNTER",
    "LOGIN_COUNTER",
    "REQUEST_COUNT",
    "REQUEST_LATENCY",
    "increment_login",
    "observe_request",
    "record_draw",
]
