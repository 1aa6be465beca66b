"""Telemetry helpers and metrics."""

from .metrics import (
    ERROR_COUNTER,
    FALLBACK_COUNTER,
    MODEL_ATTEMPT_COUNTER,
    REQUEST_COUNT,
    REQUEST_LATENCY,
    REQUESTS_IN_PROGRESS,
    increment_fallback,
    observe_model_attempt,
    observe_request,
)

__all__ = [
    "ERROR_COUNTER",
    "FALLBACK_COUNTER",
    "MODEL_ATTEMPT_COUNTER",
    "REQUEST_COUNT",
    "REQUEST_LATENCY",
    "REQUESTS_IN_PROGRESS",
    "increment_fallback",
    "observe_model_attempt",
    "observe_request",
]
