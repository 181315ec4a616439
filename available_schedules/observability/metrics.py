from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from threading import Lock


CONTENT_TYPE_LATEST = "text/plain; version=0.0.4"


@dataclass(frozen=True)
class MetricsSnapshot:
    counts: dict[str, dict[int, int]]
    buckets: tuple[float, ...]
    bucket_counts: tuple[int, ...]
    overflow_count: int
    sum: float
    count: int


def _validate_buckets(buckets: Sequence[float]) -> tuple[float, ...]:
    bounds = tuple(float(b) for b in buckets)
    if not bounds:
        raise ValueError("histogram needs at least one bucket boundary")
    for bound in bounds:
        if not math.isfinite(bound) or bound <= 0:
            raise ValueError(f"bucket boundary must be a positive finite number, got {bound!r}")
    for lower, upper in zip(bounds, bounds[1:]):
        if upper <= lower:
            raise ValueError(f"bucket boundaries must be strictly ascending: {lower!r} >= {upper!r}")
    return bounds


def _format_boundary(bound: float) -> str:
    text = repr(bound)
    if text.endswith(".0"):
        text = text[:-2]
    return text


def _escape_label(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")


class MetricsStore:
    """Thread-safe request counters and latency histogram (resets on restart).

    Counters are keyed by (route, status). The histogram uses the boundaries
    given at construction; an observation lands in the first bucket whose
    boundary is >= its duration, or in the overflow bucket past the last one.
    """

    def __init__(self, buckets: Sequence[float]) -> None:
        self._lock = Lock()
        self._buckets = _validate_buckets(buckets)
        self._counts: dict[str, dict[int, int]] = {}
        # One slot per boundary plus the trailing overflow bucket.
        self._bucket_counts: list[int] = [0] * (len(self._buckets) + 1)
        self._sum: float = 0.0
        self._count: int = 0

    @property
    def buckets(self) -> tuple[float, ...]:
        return self._buckets

    def observe(self, route: str, status: int, duration_seconds: float) -> None:
        with self._lock:
            statuses = self._counts.setdefault(route, {})
            statuses[status] = statuses.get(status, 0) + 1

            self._sum += float(duration_seconds)
            self._count += 1

            for i, bound in enumerate(self._buckets):
                if duration_seconds <= bound:
                    self._bucket_counts[i] += 1
                    return
            self._bucket_counts[-1] += 1

    def snapshot(self) -> MetricsSnapshot:
        with self._lock:
            return MetricsSnapshot(
                counts={route: dict(statuses) for route, statuses in self._counts.items()},
                buckets=self._buckets,
                bucket_counts=tuple(self._bucket_counts[:-1]),
                overflow_count=self._bucket_counts[-1],
                sum=self._sum,
                count=self._count,
            )

    def render(self) -> str:
        """Render the current state in the Prometheus text exposition format."""

        lines: list[str] = []
        with self._lock:
            lines.append("# HELP http_requests_total Total HTTP requests")
            lines.append("# TYPE http_requests_total counter")
            for route, statuses in self._counts.items():
                for status, value in statuses.items():
                    lines.append(
                        f'http_requests_total{{route="{_escape_label(route)}",status="{status}"}} {value}'
                    )

            lines.append("# HELP http_request_duration_seconds Request latency in seconds")
            lines.append("# TYPE http_request_duration_seconds histogram")
            cumulative = 0
            for bound, value in zip(self._buckets, self._bucket_counts):
                cumulative += value
                lines.append(f'http_request_duration_seconds_bucket{{le="{_format_boundary(bound)}"}} {cumulative}')
            cumulative += self._bucket_counts[-1]
            lines.append(f'http_request_duration_seconds_bucket{{le="+Inf"}} {cumulative}')
            lines.append(f"http_request_duration_seconds_sum {self._sum:.6f}")
            lines.append(f"http_request_duration_seconds_count {self._count}")

        return "\n".join(lines) + "\n"
