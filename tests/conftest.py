from __future__ import annotations

import random
from collections.abc import AsyncIterator, Callable

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from available_schedules.config import Settings, get_settings
from available_schedules.main import create_app
from available_schedules.observability.metrics import MetricsStore

BUCKETS = [0.05, 0.1, 0.2, 0.5, 1.0]


@pytest.fixture(autouse=True)
def test_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SERVICE_NAME", "available-schedules")
    monkeypatch.setenv("ENV", "test")
    monkeypatch.setenv("VERSION", "1.0.0-test")
    monkeypatch.setenv("ERROR_RATE", "0")
    get_settings.cache_clear()

    yield

    get_settings.cache_clear()


@pytest.fixture
def metrics() -> MetricsStore:
    return MetricsStore(BUCKETS)


@pytest.fixture
def make_app(metrics: MetricsStore) -> Callable[..., FastAPI]:
    def _make(error_rate: float = 0.0, seed: int = 1234, **overrides) -> FastAPI:
        settings = Settings(error_rate=error_rate, **overrides)
        return create_app(settings, metrics=metrics, rng=random.Random(seed))

    return _make


@pytest.fixture
async def api_client(make_app: Callable[..., FastAPI]) -> AsyncIterator[AsyncClient]:
    transport = ASGITransport(app=make_app())
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
