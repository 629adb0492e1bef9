"""Application middleware package."""

from .logging import StructuredLoggingMiddleware
from .rate_limit import RateLimitMiddleware
from .telemetry import TelemetryMiddleware

__all__ = ["StructuredLoggingMiddleware", "RateLimitMiddleware", "TelemetryMiddleware"]
