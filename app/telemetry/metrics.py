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
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)

ERROR_COUNTER = Counter(
    "app_internal_errors_total",
    "Number of requests ending in internal server error responses",
    ("method", "route"),
)

PIPELINE_RUNS = Counter(
    "study_pipeline_runs_total",
    "Study-material pipeline invocations by transport and outcome",
    ("transport", "outcome"),
)

PIPELINE_FAILURES = Counter(
    "study_pipeline_failures_total",
    "Classified study-material pipeline failures",
    ("kind",),
)

PIPELINE_DURATION = Histogram(
    "study_pipeline_duration_seconds",
    "End-to-end study-material pipeline duration in seconds",
    ("transport",),
    buckets=(1.0, 2.5, 5.0, 10.0, 20.0, 30.0, 60.0, 120.0, 300.0),
)

ASSET_POLLS = Counter(
    "remote_asset_polls_total",
    "Files API state polls by observed state",
    ("state",),
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
    observed_duration = duration_seconds if duration_seconds >= 0 else 0

    REQUEST_COUNT.labels(
        method=safe_method,
        route=safe_route,
        status=str(status_code),
    ).inc()
    REQUEST_LATENCY.labels(method=safe_method, route=safe_route).observe(observed_duration)

    if status_code >= 500:
        ERROR_COUNTER.labels(method=safe_method, route=safe_route).inc()


def observe_pipeline_run(transport: str, outcome: str, duration_seconds: float) -> None:
    """Record one finished pipeline invocation."""

    PIPELINE_RUNS.labels(transport=transport, outcome=outcome).inc()
    PIPELINE_DURATION.labels(transport=transport).observe(max(duration_seconds, 0))


def observe_pipeline_failure(kind: str) -> None:
    PIPELINE_FAILURES.labels(kind=kind).inc()


def observe_asset_poll(state: str) -> None:
    ASSET_POLLS.labels(state=state).inc()
