from __future__ import annotations

import datetime as dt

from pydantic import BaseModel


class NamedRef(BaseModel):
    id: int
    name: str


class Slot(BaseModel):
    start: str
    available: bool


class DaySchedule(BaseModel):
    professional: NamedRef
    unit: NamedRef
    room: NamedRef
    specialty: NamedRef
    date: dt.date
    slots: list[Slot]


class ScheduleFilters(BaseModel):
    professional_id: int
    unit_id: int
    days_requested: int
    days_returned: int
    start_date_requested: dt.date | None = None
    start_date_applied: dt.date
    generated_at: dt.datetime


class AvailableScheduleResponse(BaseModel):
    success: bool = True
    filters: ScheduleFilters
    response: list[DaySchedule]
