"""Entry groupings consumed by the kanban and card-grid views."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import datetime, timezone
from typing import Optional

from threadstacks.models.schemas import (
    THREAD_STATUSES,
    DateGroup,
    Thread,
    ThreadListEntry,
    ThreadMetadata,
    ThreadStatus,
)
from threadstacks.services.topology.stacks import get_last_active
from threadstacks.utils.dates import parse_timestamp

DATE_LABELS = ("Today", "Yesterday", "This Week", "This Month", "Older")


def group_entries_by_status(
    entries: Sequence[ThreadListEntry],
    metadata: Mapping[str, ThreadMetadata],
) -> dict[ThreadStatus, list[ThreadListEntry]]:
    """Split entries into kanban columns.

    A stack goes to the column of its most recently touched member, so a
    finished head with an active continuation still shows as active.
    Threads without metadata count as ``active``.
    """
    columns: dict[ThreadStatus, list[ThreadListEntry]] = {
        status: [] for status in THREAD_STATUSES
    }
    for entry in entries:
        meta = metadata.get(get_last_active(entry).id)
        status: ThreadStatus = meta.status if meta is not None else "active"
        columns[status].append(entry)
    return columns


def get_date_label(value: Optional[str], now: Optional[datetime] = None) -> str:
    """Relative label for a timestamp, based on whole days elapsed."""
    parsed = parse_timestamp(value)
    if parsed is None:
        return "Older"
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    diff_days = (now - parsed).days

    if diff_days == 0:
        return "Today"
    if diff_days == 1:
        return "Yesterday"
    if diff_days < 7:
        return "This Week"
    if diff_days < 30:
        return "This Month"
    return "Older"


def group_threads_by_date(
    threads: Sequence[Thread], now: Optional[datetime] = None
) -> list[DateGroup]:
    """Group threads by relative date label, skipping empty groups."""
    now = now or datetime.now(timezone.utc)
    groups: dict[str, list[Thread]] = {}
    for t in threads:
        groups.setdefault(get_date_label(t.last_updated_date, now), []).append(t)
    return [
        DateGroup(label=label, threads=groups[label])
        for label in DATE_LABELS
        if label in groups
    ]
