"""Pydantic schemas for draw results."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class GroupMemberResponse(BaseModel):
    id: UUID
    name: str
    course: str
    semester: int

    model_config = ConfigDict(from_attributes=True)


class GroupResponse(BaseModel):
    """A drawn group with its members ordered by name."""

    id: UUID
    name: str
    color: str
    createdAt: datetime = Field(
        ...,
        validation_alias=AliasChoices("createdAt", "created_at"),
        serialization_alias="createdAt",
    )
    members: list[GroupMemberResponse]

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class DrawStatsResponse(BaseModel):
    totalParticipants: int = Field(
        ...,
        validation_alias=AliasChoices("totalParticipants", "total_participants"),
        serialization_alias="totalParticipants",
    )
    totalGroups: int = Field(
        ...,
        validation_alias=AliasChoices("totalGroups", "total_groups"),
        serialization_alias="totalGroups",
    )
    participantsInGroups: int = Field(
        ...,
        validation_alias=AliasChoices("participantsInGroups", "participants_in_groups"),
        serialization_alias="participantsInGroups",
    )
    remainingParticipants: int = Field(
        ...,
        validation_alias=AliasChoices("remainingParticipants", "remaining_participants"),
        serialization_alias="remainingParticipants",
    )

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class DrawResponse(BaseModel):
    message: str
    groups: list[GroupResponse]
    stats: DrawStatsResponse


class CurrentDrawResponse(BaseModel):
    groups: list[GroupResponse]
    drawnAt: datetime = Field(..., serialization_alias="drawnAt")


__all__ = [
    "GroupMemberResponse",
    "GroupResponse",
    "DrawStatsResponse",
    "DrawResponse",
    "CurrentDrawResponse",
]
