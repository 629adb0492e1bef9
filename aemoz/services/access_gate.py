"""Shared-secret admin authentication and credential verification."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from aemoz.config.settings import SecurityConfig
from aemoz.services.errors import (
    InvalidCredential,
    Unauthenticated,
    Unauthorized,
    ValidationFailed,
)
from aemoz.telemetry import increment_login
from aemoz.utils import (
    AuthenticationError,
    create_access_token,
    decode_access_token,
    secrets_match,
)

logger = logging.getLogger(__name__)

ADMIN_ROLE = "admin"


@dataclass(frozen=True, slots=True)
class IssuedToken:
    token: str
    expires_in: int


@dataclass(frozen=True, slots=True)
class AdminIdentity:
    """Decoded claims of a verified credential."""

    role: str
    issued_at: datetime | None
    expires_at: datetime


class AccessGate:
    """Issues and verifies the admin session credential."""

    def __init__(self, config: SecurityConfig) -> None:
        self.config = config

    @property
    def expires_in(self) -> int:
        return self.config.access_token_expires_hours * 3600

    def login(self, password: str | None) -> IssuedToken:
        if not password:
            raise ValidationFailed(
                "Password is required",
                fields={"password": "required"},
            )

        expected = self.config.admin_password.get_secret_value()
        if not secrets_match(password, expected):
            logger.info("Rejected admin login attempt")
            raise Unauthorized()

        increment_login()
        return IssuedToken(
            token=create_access_token(self.config, role=ADMIN_ROLE),
            expires_in=self.expires_in,
        )

    def verify(self, token: str | None) -> AdminIdentity:
        if not token:
            raise Unauthenticated()

        try:
            payload = decode_access_token(self.config, token)
        except AuthenticationError as exc:
            raise InvalidCredential() from exc

        if payload.role != ADMIN_ROLE:
            raise InvalidCredential("Token does not grant admin access")

        return AdminIdentity(
            role=payload.role,
            issued_at=payload.iat,
            expires_at=payload.exp,
        )


__all__ = ["AccessGate", "AdminIdentity", "IssuedToken", "ADMIN_ROLE"]
