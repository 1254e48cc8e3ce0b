"""Prometheus metrics for py3bls.

Metrics live in a dedicated registry so a host process can expose them next
to its own without name clashes. Recording is skipped entirely when
PY3BLS_METRICS_ENABLED is false.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterator
from contextlib import contextmanager

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    Info,
    generate_latest,
)

from .config import get_metrics_enabled
from .errors import InvalidArgumentError

logger = logging.getLogger(__name__)

REGISTRY = CollectorRegistry()

# Application info
APP_INFO = Info(
    "py3bls_build",
    "Build information about py3bls",
    registry=REGISTRY,
)
APP_INFO.info({"version": "0.1.0", "name": "py3bls"})

BLS_OPERATIONS_TOTAL = Counter(
    "py3bls_operations_total",
    "Total number of completed BLS operations",
    ["scheme", "operation"],
    registry=REGISTRY,
)

BLS_OPERATION_DURATION_SECONDS = Histogram(
    "py3bls_operation_duration_seconds",
    "Time spent performing BLS operations",
    ["scheme", "operation"],
    buckets=[0.0005, 0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
    registry=REGISTRY,
)

BLS_VERIFICATION_FAILURES_TOTAL = Counter(
    "py3bls_verification_failures_total",
    "Total number of verifications that returned False",
    ["scheme", "operation"],
    registry=REGISTRY,
)

BLS_INVALID_ARGUMENTS_TOTAL = Counter(
    "py3bls_invalid_arguments_total",
    "Total number of calls rejected with InvalidArgumentError",
    ["operation"],
    registry=REGISTRY,
)


def metrics_enabled() -> bool:
    return get_metrics_enabled()


@contextmanager
def track_operation(scheme: str, operation: str) -> Iterator[None]:
    """Count and time one scheme operation.

    An ``InvalidArgumentError`` escaping the block is counted and re-raised.
    """
    if not metrics_enabled():
        yield
        return

    start_time = time.perf_counter()
    try:
        yield
    except InvalidArgumentError:
        BLS_INVALID_ARGUMENTS_TOTAL.labels(operation=operation).inc()
        raise
    duration = time.perf_counter() - start_time
    BLS_OPERATIONS_TOTAL.labels(scheme=scheme, operation=operation).inc()
    BLS_OPERATION_DURATION_SECONDS.labels(scheme=scheme, operation=operation).observe(duration)


def record_verification(scheme: str, operation: str, result: bool) -> bool:
    """Count a negative verification result and pass ``result`` through."""
    if not result and metrics_enabled():
        BLS_VERIFICATION_FAILURES_TOTAL.labels(scheme=scheme, operation=operation).inc()
    return result


def get_metrics_output() -> bytes:
    """Generate Prometheus-formatted metrics output."""
    return generate_latest(REGISTRY)


def get_metrics_content_type() -> str:
    """Get the content type for Prometheus metrics."""
    return CONTENT_TYPE_LATEST
