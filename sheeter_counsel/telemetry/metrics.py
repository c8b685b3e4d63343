"""Prometheus metrics definitions and helpers."""

from __future__ import annotations

from prometheus_client import Counter, Histogram

REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total HTTP requests processed",
    ("method", "route", "status"),
)

REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ("method", "route"),
    buckets=(
        0.05,
        0.1,
        0.25,
        0.5,
        1.0,
        2.5,
        5.0,
        10.0,
        30.0,
        60.0,
        120.0,
    ),
)

ERROR_COUNTER = Counter(
    "app_internal_errors_total",
    "Number of requests ending in internal server error responses",
    ("method", "route"),
)

UPSTREAM_RETRY_COUNTER = Counter(
    "upstream_retries_total",
    "Outbound API attempts that were retried after a transient failure",
    ("reason",),
)

FLOW_COUNTER = Counter(
    "flow_invocations_total",
    "Completed AI flow invocations by outcome",
    ("flow", "outcome"),
)


def observe_request(
    method: str,
    route: str,
    status_code: int,
    duration_seconds: float,
) -> None:
    """Record metrics for a completed HTTP request."""

    safe_route = route or "unknown"
    safe_method = method or "UNKNOWN"
    status_label = str(status_code)
    observed_duration = duration_seconds if duration_seconds >= 0 else 0

    REQUEST_COUNT.labels(
        method=safe_method,
        route=safe_route,
        status=status_label,
    ).inc()
    REQUEST_LATENCY.labels(
        method=safe_method,
        route=safe_route,
    ).observe(observed_duration)

    if status_code >= 500:
        ERROR_COUNTER.labels(
            method=safe_method,
            route=safe_route,
        ).inc()


def increment_upstream_retry(reason: str) -> None:
    """Count one retried outbound attempt (``rate_limited`` or ``network``)."""

    UPSTREAM_RETRY_COUNTER.labels(reason=reason or "unknown").inc()


def observe_flow(flow: str, outcome: str) -> None:
    """Count a finished flow invocation (``success`` or the failure class name)."""

    FLOW_COUNTER.labels(flow=flow, outcome=outcome).inc()
