"""Handoff graph materialization and connected-component discovery."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Sequence

from threadstacks.models.schemas import Thread


@dataclass
class HandoffGraph:
    """Adjacency indices over the admitted handoff edges of a thread list."""

    thread_map: dict[str, Thread] = field(default_factory=dict)
    child_to_parent: dict[str, str] = field(default_factory=dict)
    parent_to_children: dict[str, list[str]] = field(default_factory=dict)
    dangling: list[str] = field(default_factory=list)


def build_handoff_graph(threads: Sequence[Thread]) -> HandoffGraph:
    """Build parent->children and child->parent maps from ``handoff_parent_id``.

    An edge is admitted only when the named parent is part of ``threads``.
    Children of a parent are listed in input order.
    """
    graph = HandoffGraph()
    for t in threads:
        graph.thread_map[t.id] = t

    for t in threads:
        parent_id = t.handoff_parent_id
        if not parent_id:
            continue
        if parent_id not in graph.thread_map:
            graph.dangling.append(t.id)
            continue
        graph.child_to_parent[t.id] = parent_id
        graph.parent_to_children.setdefault(parent_id, []).append(t.id)

    return graph


def collect_component(graph: HandoffGraph, start_id: str) -> list[str]:
    """Return IDs of every thread connected to ``start_id``.

    Walks up to the root ancestor (stopping at the first already-visited
    node), then expands breadth-first downward from everything seen so far.
    Order is start, ancestors nearest first, then descendants level by level.
    """
    members = [start_id]
    visited = {start_id}

    current_id = start_id
    while True:
        parent_id = graph.child_to_parent.get(current_id)
        if parent_id is None or parent_id in visited:
            break
        visited.add(parent_id)
        members.append(parent_id)
        current_id = parent_id

    queue = deque(members)
    while queue:
        node_id = queue.popleft()
        for child_id in graph.parent_to_children.get(node_id, ()):
            if child_id in visited:
                continue
            visited.add(child_id)
            members.append(child_id)
            queue.append(child_id)

    return members
