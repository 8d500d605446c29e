"""Metrics Adapter abstraction to decouple Prometheus from services.

Provides a minimal interface for build metrics with a Prometheus-backed
implementation and a no-op fallback, so ThreadStackService never touches
Prometheus directly.
"""

from __future__ import annotations

import logging
import os
from typing import Protocol

from threadstacks.models.results import StackBuildSummary
from threadstacks.observability.metrics import (
    cyclic_stacks_total,
    dangling_parent_refs_total,
    stack_build_duration_seconds,
    stack_builds_total,
    stack_entries_current,
    stack_size,
)

logger = logging.getLogger(__name__)


class MetricsAdapter(Protocol):
    """Abstract metrics interface used by services."""

    def observe_build(self, summary: StackBuildSummary) -> None:
        """Record counters and timings for one finished build."""

    def observe_stack_size(self, size: int) -> None:
        """Record the size of one stack entry."""


class PrometheusMetricsAdapter:
    """Prometheus-backed metrics adapter.

    Handles exceptions internally to avoid impacting the main workflow.
    """

    def __init__(self) -> None:
        """Initialize adapter and cache worker identifier."""
        self._worker_id = os.getenv("HOSTNAME", "thread-stacks-1")

    def observe_build(self, summary: StackBuildSummary) -> None:
        try:
            stack_builds_total.labels(worker=self._worker_id).inc()
            stack_build_duration_seconds.labels(worker=self._worker_id).observe(
                summary.duration_seconds
            )
            stack_entries_current.labels(kind="stack", worker=self._worker_id).set(
                summary.stack_count
            )
            stack_entries_current.labels(kind="thread", worker=self._worker_id).set(
                summary.entry_count - summary.stack_count
            )
            if summary.dangling_parent_count:
                dangling_parent_refs_total.labels(worker=self._worker_id).inc(
                    summary.dangling_parent_count
                )
            if summary.cyclic_stack_count:
                cyclic_stacks_total.labels(worker=self._worker_id).inc(
                    summary.cyclic_stack_count
                )
        except Exception:
            logger.debug(
                "Prometheus observe_build failed (non-fatal)",
                extra={"entry_count": summary.entry_count},
                exc_info=True,
            )

    def observe_stack_size(self, size: int) -> None:
        try:
            stack_size.labels(worker=self._worker_id).observe(size)
        except Exception:
            logger.debug("Prometheus observe_stack_size failed", exc_info=True)


class NoopMetricsAdapter:
    """No-op adapter used when metrics are disabled."""

    def observe_build(self, summary: StackBuildSummary) -> None:  # noqa: ARG002
        return

    def observe_stack_size(self, size: int) -> None:  # noqa: ARG002
        return
