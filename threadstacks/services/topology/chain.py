"""Handoff lineage of a single thread."""

from __future__ import annotations

from collections.abc import Sequence

from threadstacks.models.schemas import ChainThread, Thread, ThreadChain
from threadstacks.services.topology.graph import build_handoff_graph
from threadstacks.utils.dates import recency_key


def get_thread_chain(threads: Sequence[Thread], thread_id: str) -> ThreadChain:
    """Build the chain of ancestors and descendants around ``thread_id``.

    Ancestors are listed root first. Descendants follow the same tree order
    as stack descendants (depth-first, newest child first). An unknown ID
    yields an empty chain with ``current`` set to None.
    """
    graph = build_handoff_graph(threads)
    current = graph.thread_map.get(thread_id)
    if current is None:
        return ThreadChain()

    visited = {thread_id}
    ancestors: list[ChainThread] = []
    parent_id = graph.child_to_parent.get(thread_id)
    while parent_id is not None and parent_id not in visited:
        visited.add(parent_id)
        ancestors.insert(0, ChainThread.from_thread(graph.thread_map[parent_id]))
        parent_id = graph.child_to_parent.get(parent_id)

    descendants: list[ChainThread] = []
    pending = [thread_id]
    while pending:
        node_id = pending.pop()
        children = sorted(
            (c for c in graph.parent_to_children.get(node_id, ()) if c not in visited),
            key=lambda cid: recency_key(graph.thread_map[cid].last_updated_date),
            reverse=True,
        )
        for child_id in reversed(children):
            visited.add(child_id)
            pending.append(child_id)
        if node_id != thread_id:
            descendants.append(ChainThread.from_thread(graph.thread_map[node_id]))

    return ThreadChain(
        ancestors=ancestors,
        current=ChainThread.from_thread(current),
        descendants=descendants,
    )
