"""Data models package.

Exports all Pydantic models for threads, stacks and build results.
"""

from threadstacks.models.results import StackBuildSummary
from threadstacks.models.schemas import (
    THREAD_STATUSES,
    ChainThread,
    DateGroup,
    StackTopology,
    Thread,
    ThreadBlocker,
    ThreadChain,
    ThreadListEntry,
    ThreadListFile,
    ThreadMetadata,
    ThreadStack,
    ThreadStatus,
)

__all__ = [
    "Thread",
    "ThreadBlocker",
    "ThreadMetadata",
    "ThreadStatus",
    "THREAD_STATUSES",
    "StackTopology",
    "ThreadStack",
    "ThreadListEntry",
    "ChainThread",
    "ThreadChain",
    "DateGroup",
    "ThreadListFile",
    "StackBuildSummary",
]
