from __future__ import annotations

import asyncio
from datetime import date, datetime, timezone

import structlog
from fastapi import APIRouter, HTTPException, Query, Request

from available_schedules.models.schemas import AvailableScheduleResponse, ScheduleFilters
from available_schedules.services.schedule_service import (
    MAX_DAYS,
    PROFESSIONALS,
    UNITS,
    build_schedule,
    normalize_start_date,
)

AVAILABLE_SCHEDULE_ROUTE = "/v2/appoints/available-schedule"

router = APIRouter(tags=["schedules"])


@router.get(AVAILABLE_SCHEDULE_ROUTE, response_model=AvailableScheduleResponse)
async def available_schedule(
    request: Request,
    professional_id: int = Query(default=2684),
    unit_id: int = Query(default=901),
    days: int = Query(default=15, ge=1, le=MAX_DAYS),
    start_date: date | None = Query(default=None),
) -> AvailableScheduleResponse:
    professional = PROFESSIONALS.get(professional_id)
    if professional is None:
        raise HTTPException(status_code=404, detail="Professional not found")
    unit = UNITS.get(unit_id)
    if unit is None:
        raise HTTPException(status_code=404, detail="Unit not found")

    delay_ms = request.app.state.settings.extra_delay_ms
    if delay_ms > 0:
        await asyncio.sleep(delay_ms / 1000.0)

    now = datetime.now(timezone.utc)
    applied = normalize_start_date(start_date, now)
    schedule = build_schedule(professional, unit, days, applied)

    structlog.get_logger("schedules").debug(
        "schedule_built",
        professional_id=professional_id,
        unit_id=unit_id,
        days=len(schedule),
        start_date=applied.isoformat(),
    )

    return AvailableScheduleResponse(
        success=True,
        filters=ScheduleFilters(
            professional_id=professional_id,
            unit_id=unit_id,
            days_requested=days,
            days_returned=len(schedule),
            start_date_requested=start_date,
            start_date_applied=applied,
            generated_at=now,
        ),
        response=schedule,
    )
