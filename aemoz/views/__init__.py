"""Pydantic schemas used as views in the MVC architecture."""

from .auth import IdentityResponse, LoginRequest, TokenResponse, ValidateResponse
from .common import (
    ErrorResponse,
    HealthResponse,
    StatsResponse,
    SuccessResponse,
    error_responses,
)
from .draw import (
    CurrentDrawResponse,
    DrawResponse,
    DrawStatsResponse,
    GroupMemberResponse,
    GroupResponse,
)
from .participants import (
    CourseBucketResponse,
    CourseParticipant,
    Pagination,
    ParticipantCreatedResponse,
    ParticipantCreateRequest,
    ParticipantDeletedResponse,
    ParticipantListResponse,
    ParticipantResponse,
    ParticipantSummary,
    SeedResponse,
)

__all__ = [
    "LoginRequest",
    "TokenResponse",
    "IdentityResponse",
    "ValidateResponse",
    "ErrorResponse",
    "error_responses",
    "SuccessResponse",
    "StatsResponse",
    "HealthResponse",
    "GroupMemberResponse",
    "GroupResponse",
    "DrawStatsResponse",
    "DrawResponse",
    "CurrentDrawResponse",
    "ParticipantCreateRequest",
    "ParticipantResponse",
    "ParticipantCreatedResponse",
    "ParticipantSummary",
    "ParticipantDeletedResponse",
    "Pagination",
    "ParticipantListResponse",
    "CourseParticipant",
    "CourseBucketResponse",
    "SeedResponse",
]
