"""Common response schemas."""

from typing import Any, Optional

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    detail: str
    code: Optional[str] = None
    fields: Optional[dict[str, str]] = None


def error_responses(*status_codes: int) -> dict[int | str, dict[str, Any]]:
    """OpenAPI ``responses=`` entries documenting the error body."""

    return {status_code: {"model": ErrorResponse} for status_code in status_codes}


class SuccessResponse(BaseModel):
    message: str


class StatsResponse(BaseModel):
    participants: int
    courses: int
    groups: int


class HealthResponse(BaseModel):
    status: str
    timestamp: str
    database: str
    service: str
    version: str
