"""Authentication controller providing admin login endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from aemoz.controllers.dependencies import AccessGateDep, CurrentAdminDep
from aemoz.views import (
    IdentityResponse,
    LoginRequest,
    TokenResponse,
    ValidateResponse,
    error_responses,
)

router = APIRouter(
    prefix="/auth",
    tags=["auth"],
    responses=error_responses(400, 401, 403, 429),
)


@router.post("/login", response_model=TokenResponse)
async def login(
    payload: LoginRequest,
    gate: AccessGateDep,
) -> TokenResponse:
    """Check the shared admin password and issue a JWT access token."""

    issued = gate.login(payload.password)
    return TokenResponse(token=issued.token, expires_in=issued.expires_in)


@router.get("/validate", response_model=ValidateResponse)
async def validate(admin: CurrentAdminDep) -> ValidateResponse:
    return ValidateResponse(
        user=IdentityResponse(
            role=admin.role,
            issued_at=admin.issued_at,
            expires_at=admin.expires_at,
        )
    )
