"""Telemetry helpers and metrics."""

from .metrics import (
    ASSET_POLLS,
    ERROR_COUNTER,
    PIPELINE_DURATION,
    PIPELINE_FAILURES,
    PIPELINE_RUNS,
    REQUEST_COUNT,
    REQUEST_LATENCY,
    observe_asset_poll,
    observe_pipeline_failure,
    observe_pipeline_run,
    observe_request,
)

__all__ = [
    "ASSET_POLLS",
    "ERROR_COUNTER",
    "PIPELINE_DURATION",
    "PIPELINE_FAILURES",
    "PIPELINE_RUNS",
    "REQUEST_COUNT",
    "REQUEST_LATENCY",
    "observe_asset_poll",
    "observe_pipeline_failure",
    "observe_pipeline_run",
    "observe_request",
]
