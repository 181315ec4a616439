from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse

from available_schedules.observability.metrics import CONTENT_TYPE_LATEST


router = APIRouter(tags=["metrics"])


@router.get("/metrics", response_class=PlainTextResponse)
async def metrics(request: Request) -> PlainTextResponse:
    store = request.app.state.metrics
    return PlainTextResponse(store.render(), media_type=CONTENT_TYPE_LATEST)
