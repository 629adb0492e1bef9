"""Fixed-window per-IP rate limiting with a stricter bucket for admin login."""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass
from typing import Callable

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response
from starlette.types import ASGIApp

from aemoz.config.settings import RateLimitConfig

logger = logging.getLogger(__name__)

LOGIN_PATH = "/auth/login"


@dataclass(slots=True)
class _Window:
    started_at: float
    count: int = 0


class FixedWindowCounter:
    """Counts hits per key inside consecutive windows of ``window_seconds``."""

    def __init__(
        self,
        limit: int,
        window_seconds: int,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.limit = limit
        self.window_seconds = window_seconds
        self._clock = clock
        self._windows: dict[str, _Window] = {}

    def hit(self, key: str) -> float | None:
        """Record a hit; return seconds to wait when the limit is exceeded."""

        now = self._clock()
        window = self._windows.get(key)
        if window is None or now - window.started_at >= self.window_seconds:
            self._evict_expired(now)
            window = _Window(started_at=now)
            self._windows[key] = window

        window.count += 1
        if window.count > self.limit:
            return window.started_at + self.window_seconds - now
        return None

    def _evict_expired(self, now: float) -> None:
        expired = [
            key
            for key, window in self._windows.items()
            if now - window.started_at >= self.window_seconds
        ]
        for key in expired:
            del self._windows[key]


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Reject requests beyond the configured per-IP caps with HTTP 429."""

    def __init__(self, app: ASGIApp, config: RateLimitConfig) -> None:
        super().__init__(app)
        self.config = config
        self.general = FixedWindowCounter(config.max_requests, config.window_seconds)
        self.login = FixedWindowCounter(
            config.login_max_attempts, config.window_seconds
        )

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        if not self.config.enabled or request.method == "OPTIONS":
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"

        if request.url.path == LOGIN_PATH and request.method == "POST":
            retry_after = self.login.hit(client_ip)
            if retry_after is not None:
                logger.warning("Login rate limit exceeded for %s", client_ip)
                return self._too_many(
                    "Too many login attempts, try again later", retry_after
                )

        retry_after = self.general.hit(client_ip)
        if retry_after is not None:
            logger.warning("Rate limit exceeded for %s", client_ip)
            return self._too_many("Too many requests, try again later", retry_after)

        return await call_next(request)

    @staticmethod
    def _too_many(message: str, retry_after: float) -> JSONResponse:
        return JSONResponse(
            status_code=429,
            content={"detail": message, "code": "rate_limited"},
            headers={"Retry-After": str(max(1, math.ceil(retry_after)))},
        )


__all__ = ["RateLimitMiddleware", "FixedWindowCounter", "LOGIN_PATH"]
