"""Pydantic schemas for participant registration and listings."""

from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class ParticipantCreateRequest(BaseModel):
    """Self-registration payload; range checks happen in the registry."""

    name: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("name", "nome"),
    )
    course: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("course", "curso"),
    )
    semester: Optional[int] = Field(
        None,
        validation_alias=AliasChoices("semester", "semestre"),
    )


class ParticipantResponse(BaseModel):
    """Serialized participant record."""

    id: UUID
    name: str
    course: str
    semester: int
    createdAt: datetime = Field(
        ...,
        validation_alias=AliasChoices("createdAt", "created_at"),
        serialization_alias="createdAt",
    )

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class ParticipantCreatedResponse(BaseModel):
    message: str
    participant: ParticipantResponse


class ParticipantSummary(BaseModel):
    """What is left of a participant after deletion."""

    id: UUID
    name: str
    course: str

    model_config = ConfigDict(from_attributes=True)


class ParticipantDeletedResponse(BaseModel):
    message: str
    participant: ParticipantSummary


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    totalPages: int


class ParticipantListResponse(BaseModel):
    participants: list[ParticipantResponse]
    pagination: Pagination


class CourseParticipant(BaseModel):
    id: UUID
    name: str
    semester: int

    model_config = ConfigDict(from_attributes=True)


class CourseBucketResponse(BaseModel):
    course: str
    count: int
    participants: list[CourseParticipant]


class SeedResponse(BaseModel):
    message: str
    added: int
    total: int


__all__ = [
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
