from __future__ import annotations

import random
from time import perf_counter
from typing import Any, Callable

import structlog

from available_schedules.observability.metrics import MetricsStore
from available_schedules.observability.tracing import correlation_ids, extract_context


INJECTED_ERROR_BODY = b'{"error":"transient error retrieving schedule"}'


class StatusCapturingSend:
    """Stands in for the ASGI ``send`` of one request and records its status.

    Messages from the downstream app are held until :meth:`flush`, so the
    response can still be replaced after the handler returned.
    """

    def __init__(self, send: Callable[..., Any], status: int = 200) -> None:
        self._send = send
        self.status = status
        self._messages: list[dict[str, Any]] = []

    async def __call__(self, message: dict[str, Any]) -> None:
        if message.get("type") == "http.response.start":
            self.status = int(message.get("status", self.status))
        self._messages.append(message)

    def override(self, status: int, content_type: str, body: bytes) -> None:
        self.status = status
        self._messages = [
            {
                "type": "http.response.start",
                "status": status,
                "headers": [
                    (b"content-type", content_type.encode("latin-1")),
                    (b"content-length", str(len(body)).encode("latin-1")),
                ],
            },
            {"type": "http.response.body", "body": body, "more_body": False},
        ]

    async def flush(self) -> None:
        messages, self._messages = self._messages, []
        for message in messages:
            await self._send(message)


class InstrumentationMiddleware:
    """Times one named route, injects faults, logs the request and records metrics.

    Installed app-wide; requests whose path is not ``route`` pass through untouched.
    """

    def __init__(
        self,
        app: Callable[..., Any],
        *,
        route: str,
        metrics: MetricsStore,
        service_name: str,
        env: str,
        version: str,
        error_rate: float = 0.0,
        rng: random.Random | None = None,
    ) -> None:
        self.app = app
        self.route = route
        self.metrics = metrics
        self.service_name = service_name
        self.env = env
        self.version = version
        self.error_rate = error_rate
        self.rng = rng or random.Random()

    def _matches(self, scope: dict[str, Any]) -> bool:
        path = scope.get("path", "")
        if path == self.route:
            return True
        # Servers may include the mount prefix in ``path``.
        root_path = scope.get("root_path", "")
        return bool(root_path) and path.startswith(root_path) and path[len(root_path):] == self.route

    async def __call__(self, scope: dict[str, Any], receive: Callable[..., Any], send: Callable[..., Any]) -> None:
        if scope.get("type") != "http" or not self._matches(scope):
            await self.app(scope, receive, send)
            return

        start = perf_counter()
        capture = StatusCapturingSend(send)

        try:
            await self.app(scope, receive, capture)
        except BaseException:
            # Handler failed or the request was cancelled; the framework answers 500.
            capture.status = 500
            self._record(scope, capture.status, start)
            raise

        if self.rng.random() < self.error_rate:
            capture.override(500, "application/json", INJECTED_ERROR_BODY)

        try:
            await capture.flush()
        finally:
            self._record(scope, capture.status, start)

    def _record(self, scope: dict[str, Any], status: int, start: float) -> None:
        trace_id, span_id = correlation_ids(extract_context(scope))

        elapsed = perf_counter() - start
        elapsed_ms = elapsed * 1000.0

        try:
            structlog.get_logger("access").info(
                "http_request",
                service=self.service_name,
                env=self.env,
                version=self.version,
                route=self.route,
                method=scope.get("method", ""),
                status=status,
                latency_ms=round(elapsed_ms, 2),
                trace_id=trace_id,
                span_id=span_id,
            )
        except Exception:
            structlog.get_logger("instrumentation").exception("access_log_failed", route=self.route)

        try:
            self.metrics.observe(self.route, status, elapsed)
        except Exception:
            structlog.get_logger("instrumentation").exception("metrics_observe_failed", route=self.route)
