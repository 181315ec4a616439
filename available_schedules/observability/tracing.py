from __future__ import annotations

from typing import Any

import structlog
from opentelemetry import propagate, trace
from opentelemetry.context import Context
from starlette.datastructures import Headers


def extract_context(scope: dict[str, Any]) -> Context | None:
    """Build an OpenTelemetry context from the request's propagation headers."""

    try:
        return propagate.extract(Headers(scope=scope))
    except Exception:
        structlog.get_logger("instrumentation").debug("trace_context_extract_failed", exc_info=True)
        return None


def correlation_ids(context: Context | None) -> tuple[str, str]:
    """Return (trace_id, span_id) as lowercase hex, or empty strings.

    The inbound propagated context wins; otherwise the span active in the
    current execution context (e.g. set by an outer tracing middleware) is used.
    """

    try:
        span_context = trace.get_current_span(context).get_span_context()
        if not span_context.is_valid and context is not None:
            span_context = trace.get_current_span().get_span_context()
        if not span_context.is_valid:
            return "", ""
        return trace.format_trace_id(span_context.trace_id), trace.format_span_id(span_context.span_id)
    except Exception:
        structlog.get_logger("instrumentation").debug("trace_context_invalid", exc_info=True)
        return "", ""
