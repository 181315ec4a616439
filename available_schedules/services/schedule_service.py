from __future__ import annotations

import random
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone

from available_schedules.models.schemas import DaySchedule, NamedRef, Slot

MAX_DAYS = 120

# Half-hour slots, morning and afternoon shifts.
_SLOT_TIMES = [f"{h:02d}:{m:02d}" for h in range(8, 12) for m in (0, 30)] + [
    f"{h:02d}:{m:02d}" for h in range(13, 18) for m in (0, 30)
]


@dataclass(frozen=True)
class Professional:
    id: int
    name: str
    specialty: NamedRef


@dataclass(frozen=True)
class Unit:
    id: int
    name: str
    room: NamedRef


PROFESSIONALS: dict[int, Professional] = {
    p.id: p
    for p in (
        Professional(2684, "Dr(a). Pat Duarte", NamedRef(id=10, name="Cardiologia")),
        Professional(512, "Dr. Ícaro Menezes", NamedRef(id=20, name="Dermatologia")),
        Professional(782, "Dr(a). Helena Faria", NamedRef(id=30, name="Pediatria")),
        Professional(903, "Dr. André Ribeiro", NamedRef(id=40, name="Ortopedia")),
    )
}

UNITS: dict[int, Unit] = {
    u.id: u
    for u in (
        Unit(901, "Clínica Central", NamedRef(id=101, name="Consultório 101")),
        Unit(905, "Unidade Bela Vista", NamedRef(id=204, name="Consultório 204")),
        Unit(910, "Centro Norte", NamedRef(id=12, name="Sala 12")),
        Unit(915, "Hub Telemedicina", NamedRef(id=1, name="Sala Virtual")),
    )
}


def normalize_start_date(requested: date | None, now: datetime) -> date:
    """Clamp the requested start to today (UTC); no request means today."""

    today = now.astimezone(timezone.utc).date()
    if requested is None or requested < today:
        return today
    return requested


def _slots_for(professional: Professional, unit: Unit, day: date) -> list[Slot]:
    if day.weekday() == 6:
        return []
    # Same professional/unit/day always yields the same availability.
    rng = random.Random(f"{professional.id}:{unit.id}:{day.isoformat()}")
    return [Slot(start=start, available=rng.random() >= 0.35) for start in _SLOT_TIMES]


def build_schedule(professional: Professional, unit: Unit, days: int, start: date) -> list[DaySchedule]:
    if days <= 0 or days > MAX_DAYS:
        raise ValueError(f"days must be between 1 and {MAX_DAYS}")

    schedule = []
    for offset in range(days):
        day = start + timedelta(days=offset)
        schedule.append(
            DaySchedule(
                professional=NamedRef(id=professional.id, name=professional.name),
                unit=NamedRef(id=unit.id, name=unit.name),
                room=unit.room,
                specialty=professional.specialty,
                date=day,
                slots=_slots_for(professional, unit, day),
            )
        )
    return schedule
