"""Security helpers for the admin secret and JWT handling."""

from __future__ import annotations

import hmac
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from jose import JWTError, jwt
from pydantic import BaseModel, ValidationError

from aemoz.config.settings import SecurityConfig


def secrets_match(candidate: str, expected: str) -> bool:
    """Compare two secrets in constant time."""

    return hmac.compare_digest(
        candidate.encode("utf-8"),
        expected.encode("utf-8"),
    )


class AuthenticationError(Exception):
    """Raised when a JWT cannot be decoded or is otherwise invalid."""


class TokenPayload(BaseModel):
    """Claims embedded in admin access tokens."""

    sub: str
    role: str
    exp: datetime
    iat: datetime | None = None


def create_access_token(
    config: SecurityConfig,
    *,
    role: str = "admin",
    expires_delta: Optional[timedelta] = None,
    now: Optional[datetime] = None,
) -> str:
    """Generate a signed JWT access token for the given role."""

    now = now or datetime.now(timezone.utc)
    expires_delta = expires_delta or timedelta(
        hours=config.access_token_expires_hours
    )
    to_encode: dict[str, Any] = {
        "sub": role,
        "role": role,
        "iat": now,
        "exp": now + expires_delta,
    }

    secret = config.jwt_secret_key.get_secret_value()
    return jwt.encode(to_encode, secret, algorithm=config.jwt_algorithm)


def decode_access_token(config: SecurityConfig, token: str) -> TokenPayload:
    """Decode and validate a JWT access token, returning its payload."""

    secret = config.jwt_secret_key.get_secret_value()
    try:
        payload = jwt.decode(token, secret, algorithms=[config.jwt_algorithm])
        return TokenPayload.model_validate(payload)
    except (JWTError, ValidationError) as exc:
        raise AuthenticationError("Invalid authentication token") from exc


__all__ = [
    "secrets_match",
    "create_access_token",
    "decode_access_token",
    "AuthenticationError",
    "TokenPayload",
]
