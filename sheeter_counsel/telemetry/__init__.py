"""Telemetry helpers and metrics."""

from .metrics import (
    ERROR_COUNTER,
    FLOW_COUNTER,
    REQUEST_COUNT,
    REQUEST_LATENCY,
    UPSTREAM_RETRY_COUNTER,
    increment_upstream_retry,
    observe_flow,
    observe_request,
)

__all__ = [
    "ERROR_COUNTER",
    "FLOW_COUNTER",
    "REQUEST_COUNT",
    "REQUEST_LATENCY",
    "UPSTREAM_RETRY_COUNTER",
    "increment_upstream_retry",
    "observe_flow",
    "observe_request",
]
