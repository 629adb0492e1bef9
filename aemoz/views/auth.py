"""Pydantic schemas related to authentication."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    """Admin password submitted to obtain an access token."""

    password: Optional[str] = Field(default=None, max_length=256)


class TokenResponse(BaseModel):
    """Standard access token response body."""

    message: str = "Login successful"
    token: str
    token_type: str = Field(default="bearer", serialization_alias="tokenType")
    expires_in: int = Field(
        default=0,
        serialization_alias="expiresIn",
        description="Seconds until the token expires",
    )


class IdentityResponse(BaseModel):
    role: str
    issued_at: Optional[datetime] = Field(default=None, serialization_alias="issuedAt")
    expires_at: datetime = Field(serialization_alias="expiresAt")


class ValidateResponse(BaseModel):
    valid: bool = True
    user: IdentityResponse


__all__ = [
    "LoginRequest",
    "TokenResponse",
    "IdentityResponse",
    "ValidateResponse",
]
