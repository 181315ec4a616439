"""Observability for the schedules service.

JSON logs through structlog, request counters and a latency histogram in
Prometheus text format, and trace/span ids pulled from the inbound request.
"""
