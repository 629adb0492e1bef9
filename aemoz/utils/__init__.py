"""Utility helpers for the AEMOZ backend."""

from .security import (
    AuthenticationError,
    TokenPayload,
    create_access_token,
    decode_access_token,
    secrets_match,
)

__all__ = [
    "secrets_match",
    "create_access_token",
    "decode_access_token",
    "AuthenticationError",
    "TokenPayload",
]
