"""Admin endpoints for participant management and full reset."""

from __future__ import annotations

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query

from aemoz.controllers.dependencies import GroupStoreDep, RegistryDep, get_current_admin
from aemoz.views import (
    CourseBucketResponse,
    CourseParticipant,
    Pagination,
    ParticipantDeletedResponse,
    ParticipantListResponse,
    ParticipantResponse,
    ParticipantSummary,
    SeedResponse,
    SuccessResponse,
    error_responses,
)

router = APIRouter(
    prefix="/admin",
    tags=["admin"],
    dependencies=[Depends(get_current_admin)],
    responses=error_responses(400, 401, 403, 404, 409, 503),
)


@router.get("/participants", response_model=ParticipantListResponse)
async def list_participants(
    registry: RegistryDep,
    page: Annotated[int, Query()] = 1,
    limit: Annotated[int, Query()] = 50,
    course: Annotated[Optional[str], Query()] = None,
) -> ParticipantListResponse:
    """Page through participants, newest first, optionally filtered by course."""

    result = await registry.list(course=course, page=page, page_size=limit)
    return ParticipantListResponse(
        participants=[
            ParticipantResponse.model_validate(item) for item in result.items
        ],
        pagination=Pagination(
            page=result.page,
            limit=result.limit,
            total=result.total,
            totalPages=result.total_pages,
        ),
    )


@router.get("/participants/by-course", response_model=list[CourseBucketResponse])
async def participants_by_course(registry: RegistryDep) -> list[CourseBucketResponse]:
    buckets = await registry.list_by_course()
    return [
        CourseBucketResponse(
            course=bucket.course,
            count=bucket.count,
            participants=[
                CourseParticipant.model_validate(p) for p in bucket.participants
            ],
        )
        for bucket in buckets
    ]


@router.delete("/participants/{participant_id}", response_model=ParticipantDeletedResponse)
async def delete_participant(
    participant_id: str,
    registry: RegistryDep,
) -> ParticipantDeletedResponse:
    """Delete a participant; its group membership goes with it."""

    participant = await registry.delete(participant_id)
    return ParticipantDeletedResponse(
        message="Participant deleted successfully",
        participant=ParticipantSummary.model_validate(participant),
    )


@router.delete("/clear-all", response_model=SuccessResponse)
async def clear_all(store: GroupStoreDep) -> SuccessResponse:
    await store.clear_all()
    return SuccessResponse(message="All data removed successfully")


@router.post("/test-data", response_model=SeedResponse)
async def seed_test_data(registry: RegistryDep) -> SeedResponse:
    """Load the bundled sample participants (existing ones are skipped)."""

    result = await registry.seed_sample_data()
    return SeedResponse(
        message=f"{result.added} sample participants added",
        added=result.added,
        total=result.total,
    )
