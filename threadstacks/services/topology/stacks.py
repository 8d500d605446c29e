"""Thread stack builder for the dashboard views.

Turns a flat thread list into display entries: bare threads and stacks of
handoff trees. The table, kanban and card views all render from the same
entries so they agree on heads, membership and nesting.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Collection, Iterator, Sequence
from typing import Optional

from threadstacks.models.schemas import (
    StackTopology,
    Thread,
    ThreadListEntry,
    ThreadStack,
)
from threadstacks.services.topology.graph import (
    HandoffGraph,
    build_handoff_graph,
    collect_component,
)
from threadstacks.utils.dates import parse_timestamp, recency_key

logger = logging.getLogger(__name__)


def build_thread_stacks(threads: Sequence[Thread]) -> list[ThreadListEntry]:
    """Group threads into handoff stacks.

    Every input thread ends up in exactly one entry. Entries are sorted by
    effective recency, newest first; ties keep input order.

    Args:
        threads: Flat thread list, IDs expected to be unique

    Returns:
        Display entries (kind ``thread`` or ``stack``)
    """
    return build_stacks_from_graph(threads, build_handoff_graph(threads))


def build_stacks_from_graph(
    threads: Sequence[Thread], graph: HandoffGraph
) -> list[ThreadListEntry]:
    """Build entries from an already computed handoff graph of ``threads``."""
    assigned: set[str] = set()
    entries: list[ThreadListEntry] = []

    for t in threads:
        if t.id in assigned:
            continue
        member_ids = collect_component(graph, t.id)
        assigned.update(member_ids)
        entries.append(_build_entry(graph, member_ids))

    entries.sort(key=lambda e: recency_key(_effective_date(e)), reverse=True)
    return entries


def _build_entry(graph: HandoffGraph, member_ids: list[str]) -> ThreadListEntry:
    members = [graph.thread_map[mid] for mid in member_ids]
    if len(members) == 1:
        return ThreadListEntry(kind="thread", thread=members[0])

    in_component = set(member_ids)
    child_to_parent: dict[str, str] = {}
    parent_to_children: dict[str, list[str]] = {}
    for mid in member_ids:
        pid = graph.child_to_parent.get(mid)
        if pid is not None and pid in in_component:
            child_to_parent[mid] = pid
            parent_to_children.setdefault(pid, []).append(mid)

    root_id = next((mid for mid in member_ids if mid not in child_to_parent), None)
    if root_id is None:
        # Only cyclic components have no parentless member
        root_id = member_ids[0]
        logger.debug(
            "Handoff cycle detected, using first member as stack head",
            extra={"root_id": root_id, "member_count": len(member_ids)},
        )

    ordered = _tree_order(graph, root_id, member_ids, parent_to_children)
    head = graph.thread_map[root_id]
    descendants = [graph.thread_map[mid] for mid in ordered if mid != root_id]

    stack = ThreadStack(
        head=head,
        descendants=descendants,
        last_active_date=_newest_date(members),
        topology=StackTopology(
            root_id=root_id,
            child_to_parent=child_to_parent,
            parent_to_children=parent_to_children,
        ),
    )
    return ThreadListEntry(kind="stack", thread=head, stack=stack)


def _tree_order(
    graph: HandoffGraph,
    root_id: str,
    member_ids: list[str],
    parent_to_children: dict[str, list[str]],
) -> list[str]:
    """Depth-first order from the root, newest children first.

    Members unreachable from the root (possible only inside a cycle) follow
    in encounter order so none are dropped.
    """
    ordered: list[str] = []
    seen: set[str] = set()

    def visit(node_id: str) -> None:
        # Iterative to stay clear of the recursion limit on long chains
        stack = [node_id]
        while stack:
            current = stack.pop()
            if current in seen:
                continue
            seen.add(current)
            ordered.append(current)
            children = sorted(
                parent_to_children.get(current, ()),
                key=lambda cid: recency_key(graph.thread_map[cid].last_updated_date),
                reverse=True,
            )
            stack.extend(reversed(children))

    visit(root_id)
    for mid in member_ids:
        if mid not in seen:
            visit(mid)
    return ordered


def _newest_date(members: Sequence[Thread]) -> Optional[str]:
    newest = _newest_member(members)
    return newest.last_updated_date if newest is not None else None


def _newest_member(members: Sequence[Thread]) -> Optional[Thread]:
    """Member with the greatest parseable date; first one wins ties."""
    best: Optional[Thread] = None
    best_key = 0.0
    for m in members:
        parsed = parse_timestamp(m.last_updated_date)
        if parsed is None:
            continue
        key = parsed.timestamp()
        if best is None or key > best_key:
            best, best_key = m, key
    return best


def _effective_date(entry: ThreadListEntry) -> Optional[str]:
    if entry.stack is not None:
        return entry.stack.last_active_date
    return entry.thread.last_updated_date


def get_stack_size(entry: ThreadListEntry) -> int:
    """Number of threads represented by an entry."""
    if entry.kind == "stack" and entry.stack is not None:
        return 1 + len(entry.stack.descendants)
    return 1


def get_last_active(entry: ThreadListEntry) -> Thread:
    """Most recently touched member of an entry.

    Falls back to the head when no member has a parseable date.
    """
    if entry.kind != "stack" or entry.stack is None:
        return entry.thread
    return _newest_member(entry.members()) or entry.thread


def flatten_entries(
    entries: Sequence[ThreadListEntry], expanded_ids: Collection[str]
) -> list[Thread]:
    """Keyboard navigation order: heads, plus descendants of expanded stacks."""
    result: list[Thread] = []
    for entry in entries:
        result.append(entry.thread)
        if entry.stack is not None and entry.id in expanded_ids:
            result.extend(entry.stack.descendants)
    return result


def compute_depths(topology: StackTopology) -> dict[str, int]:
    """Nesting depth per member: root 0, its children 1, and so on.

    Members not reachable from the root get depth 1.
    """
    depths = {topology.root_id: 0}
    queue = deque([topology.root_id])
    while queue:
        node_id = queue.popleft()
        for child_id in topology.parent_to_children.get(node_id, ()):
            if child_id in depths:
                continue
            depths[child_id] = depths[node_id] + 1
            queue.append(child_id)
    for child_id in topology.child_to_parent:
        depths.setdefault(child_id, 1)
    return depths


def iter_stack_rows(entry: ThreadListEntry) -> Iterator[tuple[Thread, int]]:
    """Yield ``(thread, depth)`` for every member in display order."""
    if entry.stack is None:
        yield entry.thread, 0
        return
    depths = compute_depths(entry.stack.topology)
    yield entry.stack.head, 0
    for t in entry.stack.descendants:
        yield t, depths.get(t.id, 1)
