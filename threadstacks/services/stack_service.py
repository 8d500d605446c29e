"""Service facade over the pure topology functions.

Adds timing, structured logging and metrics around each build while the
functions in ``services.topology`` stay side-effect free.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Collection, Mapping, Sequence
from typing import Optional

from threadstacks.core.exceptions import ThreadNotFoundError
from threadstacks.models.results import StackBuildSummary
from threadstacks.models.schemas import (
    Thread,
    ThreadChain,
    ThreadListEntry,
    ThreadMetadata,
    ThreadStatus,
)
from threadstacks.observability.metrics_adapter import (
    MetricsAdapter,
    NoopMetricsAdapter,
)
from threadstacks.services.topology.chain import get_thread_chain
from threadstacks.services.topology.graph import build_handoff_graph
from threadstacks.services.topology.stacks import (
    build_stacks_from_graph,
    flatten_entries,
    get_stack_size,
)
from threadstacks.services.views.grouping import group_entries_by_status

logger = logging.getLogger(__name__)


class ThreadStackService:
    """Builds display entries and reports on each build."""

    def __init__(self, metrics: Optional[MetricsAdapter] = None) -> None:
        self._metrics: MetricsAdapter = metrics or NoopMetricsAdapter()

    def build(
        self, threads: Sequence[Thread]
    ) -> tuple[list[ThreadListEntry], StackBuildSummary]:
        """Build entries for ``threads`` and summarize the result."""
        started = time.perf_counter()
        graph = build_handoff_graph(threads)
        entries = build_stacks_from_graph(threads, graph)
        duration = time.perf_counter() - started

        summary = self.summarize(
            threads,
            entries,
            dangling_parent_count=len(graph.dangling),
            duration_seconds=duration,
        )
        self._metrics.observe_build(summary)
        for entry in entries:
            if entry.kind == "stack":
                self._metrics.observe_stack_size(get_stack_size(entry))

        if summary.dangling_parent_count or summary.cyclic_stack_count:
            logger.warning(
                "Thread list has inconsistent handoff references",
                extra={
                    "dangling_parent_count": summary.dangling_parent_count,
                    "cyclic_stack_count": summary.cyclic_stack_count,
                },
            )
        logger.info("Thread stacks built", extra=summary.model_dump())
        return entries, summary

    @staticmethod
    def summarize(
        threads: Sequence[Thread],
        entries: Sequence[ThreadListEntry],
        *,
        dangling_parent_count: int = 0,
        duration_seconds: float = 0.0,
    ) -> StackBuildSummary:
        """Compute counts describing a build result."""
        stacks = [e.stack for e in entries if e.stack is not None]
        cyclic = sum(
            1 for s in stacks if s.topology.root_id in s.topology.child_to_parent
        )
        return StackBuildSummary(
            thread_count=len(threads),
            entry_count=len(entries),
            stack_count=len(stacks),
            largest_stack=max((get_stack_size(e) for e in entries), default=0),
            dangling_parent_count=dangling_parent_count,
            cyclic_stack_count=cyclic,
            duration_seconds=duration_seconds,
        )

    def flatten(
        self, threads: Sequence[Thread], expanded_ids: Collection[str]
    ) -> list[Thread]:
        """Navigation order for the given expand state."""
        entries, _ = self.build(threads)
        return flatten_entries(entries, expanded_ids)

    def columns(
        self,
        threads: Sequence[Thread],
        metadata: Mapping[str, ThreadMetadata],
    ) -> dict[ThreadStatus, list[ThreadListEntry]]:
        """Kanban columns for the given metadata."""
        entries, _ = self.build(threads)
        return group_entries_by_status(entries, metadata)

    def chain(self, threads: Sequence[Thread], thread_id: str) -> ThreadChain:
        """Handoff lineage of ``thread_id``.

        Raises:
            ThreadNotFoundError: If the ID is not in ``threads``
        """
        result = get_thread_chain(threads, thread_id)
        if result.current is None:
            raise ThreadNotFoundError(
                f"Thread {thread_id} not found in thread list", thread_id=thread_id
            )
        logger.debug(
            "Thread chain resolved",
            extra={
                "thread_id": thread_id,
                "ancestor_count": len(result.ancestors),
                "descendant_count": len(result.descendants),
            },
        )
        return result
