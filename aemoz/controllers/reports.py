"""PDF exports of participants and draw results."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response
from fastapi.concurrency import run_in_threadpool

from aemoz.controllers.dependencies import GroupStoreDep, RegistryDep, get_current_admin
from aemoz.services import NotFound
from aemoz.services.pdf import render_groups_pdf, render_participants_pdf
from aemoz.views import error_responses

router = APIRouter(
    prefix="/admin/pdf",
    tags=["reports"],
    dependencies=[Depends(get_current_admin)],
    responses=error_responses(401, 403, 404, 503),
)

PDF_MEDIA_TYPE = "application/pdf"


def _attachment(content: bytes, filename: str) -> Response:
    return Response(
        content=content,
        media_type=PDF_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/participants", response_class=Response)
async def participants_pdf(registry: RegistryDep) -> Response:
    buckets = await registry.list_by_course()
    if not buckets:
        raise NotFound("No participants registered")

    content = await run_in_threadpool(render_participants_pdf, buckets)
    return _attachment(content, "participants.pdf")


@router.get("/groups", response_class=Response)
async def groups_pdf(store: GroupStoreDep) -> Response:
    draw = await store.get_current_draw()
    content = await run_in_threadpool(render_groups_pdf, draw)
    return _attachment(content, "draw-result.pdf")
