from __future__ import annotations

import random

from fastapi import FastAPI

from available_schedules.api.metrics import router as metrics_router
from available_schedules.api.schedules import AVAILABLE_SCHEDULE_ROUTE
from available_schedules.api.schedules import router as schedules_router
from available_schedules.config import Settings, get_settings
from available_schedules.observability.metrics import MetricsStore
from available_schedules.observability.middleware import InstrumentationMiddleware


def create_app(
    settings: Settings | None = None,
    *,
    metrics: MetricsStore | None = None,
    rng: random.Random | None = None,
) -> FastAPI:
    settings = settings or get_settings()
    metrics = metrics or MetricsStore(settings.histogram_buckets)
    rng = rng or random.Random(settings.error_seed)

    app = FastAPI(title="Available Schedules", version=settings.version)
    app.state.settings = settings
    app.state.metrics = metrics

    app.include_router(schedules_router)
    app.include_router(metrics_router)

    @app.get("/healthz")
    async def healthz() -> dict[str, str]:
        return {"status": "ok"}

    app.add_middleware(
        InstrumentationMiddleware,
        route=AVAILABLE_SCHEDULE_ROUTE,
        metrics=metrics,
        service_name=settings.service_name,
        env=settings.env,
        version=settings.version,
        error_rate=settings.error_rate,
        rng=rng,
    )
    return app


app = create_app()
