"""Public participant self-registration."""

from __future__ import annotations

from fastapi import APIRouter, status

from aemoz.controllers.dependencies import RegistryDep
from aemoz.views import (
    ParticipantCreatedResponse,
    ParticipantCreateRequest,
    ParticipantResponse,
    error_responses,
)

router = APIRouter(
    prefix="/participants",
    tags=["participants"],
    responses=error_responses(400, 409, 503),
)


@router.post(
    "",
    response_model=ParticipantCreatedResponse,
    status_code=status.HTTP_201_CREATED,
)
async def register_participant(
    payload: ParticipantCreateRequest,
    registry: RegistryDep,
) -> ParticipantCreatedResponse:
    """Register a participant for the next draw."""

    participant = await registry.register(
        payload.name,
        payload.course,
        payload.semester,
    )
    return ParticipantCreatedResponse(
        message="Participant registered successfully",
        participant=ParticipantResponse.model_validate(participant),
    )
