"""Admin endpoints that run and read back the draw."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from aemoz.controllers.dependencies import (
    GroupingEngineDep,
    GroupStoreDep,
    get_current_admin,
)
from aemoz.views import (
    CurrentDrawResponse,
    DrawResponse,
    DrawStatsResponse,
    GroupResponse,
    error_responses,
)

router = APIRouter(
    prefix="/admin/sorteio",
    tags=["draw"],
    dependencies=[Depends(get_current_admin)],
    responses=error_responses(400, 401, 403, 404, 500, 503),
)


@router.post("", response_model=DrawResponse)
async def run_draw(engine: GroupingEngineDep) -> DrawResponse:
    """Replace the current groups with a fresh random draw."""

    result = await engine.run_draw()
    return DrawResponse(
        message="Draw completed successfully",
        groups=[GroupResponse.model_validate(group) for group in result.groups],
        stats=DrawStatsResponse.model_validate(result.stats),
    )


@router.get("/result", response_model=CurrentDrawResponse)
async def current_draw(store: GroupStoreDep) -> CurrentDrawResponse:
    draw = await store.get_current_draw()
    return CurrentDrawResponse(
        groups=[GroupResponse.model_validate(group) for group in draw.groups],
        drawnAt=draw.drawn_at,
    )
