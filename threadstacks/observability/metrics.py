"""Prometheus metrics for thread-stack builds.

Defines counters, gauges and histograms and provides a helper to start the
metrics HTTP server when enabled via configuration.
"""

from __future__ import annotations

import logging

from prometheus_client import Counter, Gauge, Histogram, start_http_server

logger = logging.getLogger(__name__)


# Keep label cardinality low: only the worker label, never thread IDs.
stack_builds_total = Counter(
    "thread_stack_builds_total",
    "Number of topology builds",
    labelnames=("worker",),
)

stack_build_duration_seconds = Histogram(
    "thread_stack_build_duration_seconds",
    "Duration of a single topology build",
    labelnames=("worker",),
    buckets=(0.0005, 0.001, 0.0025, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 1),
)

stack_entries_current = Gauge(
    "thread_stack_entries_current",
    "Entries produced by the latest build by kind",
    labelnames=("kind", "worker"),
)

stack_size = Histogram(
    "thread_stack_size",
    "Number of threads per stack entry",
    labelnames=("worker",),
    buckets=(2, 3, 4, 5, 8, 13, 21, 34),
)

dangling_parent_refs_total = Counter(
    "thread_stack_dangling_parent_refs_total",
    "Handoff references dropped because the parent was absent",
    labelnames=("worker",),
)

cyclic_stacks_total = Counter(
    "thread_stack_cyclic_stacks_total",
    "Stacks whose head was chosen by the cycle fallback",
    labelnames=("worker",),
)


_server_started: bool = False


def ensure_metrics_server(port: int) -> None:
    """Start Prometheus metrics HTTP server once per process.

    Args:
        port: Port to bind the metrics endpoint to.
    """
    global _server_started
    if _server_started:
        return
    try:
        start_http_server(port)
        _server_started = True
        logger.info("Prometheus metrics server started", extra={"port": port})
    except OSError as e:
        # Metrics are optional; the CLI keeps working without them
        logger.warning("Failed to start metrics server: %s", e, exc_info=True)
