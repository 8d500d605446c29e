"""Pydantic models for threads, stacks and their topology.

Wire format uses the dashboard's camelCase keys (``lastUpdatedDate``,
``handoffParentId``, ``rootId`` ...) while Python code works with
snake_case attributes. Dump with ``model_dump(mode="json", by_alias=True)``.
"""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

ThreadStatus = Literal["active", "blocked", "parked", "done"]

THREAD_STATUSES: tuple[ThreadStatus, ...] = ("active", "blocked", "parked", "done")


class Thread(BaseModel):
    """Conversation thread as supplied by the data source.

    Unknown fields are kept so that a round trip through the builder does not
    lose data the renderers rely on.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="allow",
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "id": "T-0a1b2c",
                "title": "Fix flaky login test",
                "lastUpdated": "2 hours ago",
                "lastUpdatedDate": "2025-01-02T10:30:00Z",
                "handoffParentId": "T-99ffee",
            }
        },
    )

    id: str = Field(..., min_length=1, description="Unique, stable thread ID")
    title: str = Field(default="", description="Display title")
    last_updated: str = Field(
        default="", description="Human readable recency, display only"
    )
    last_updated_date: Optional[str] = Field(
        default=None, description="ISO-8601 timestamp used for ordering"
    )
    handoff_parent_id: Optional[str] = Field(
        default=None, description="ID of the thread this one was continued from"
    )

    workspace: Optional[str] = Field(default=None, description="Workspace name")
    repo: Optional[str] = Field(default=None, description="Repository URL")
    model: Optional[str] = Field(default=None, description="Agent model label")
    messages: int = Field(default=0, ge=0, description="Message count")
    cost: Optional[float] = Field(default=None, description="Estimated cost in USD")
    context_percent: Optional[int] = Field(
        default=None, description="Context window usage percentage"
    )


class ThreadBlocker(BaseModel):
    """A thread blocking another one."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    blocked_by_thread_id: str = Field(..., description="Blocking thread ID")
    reason: Optional[str] = Field(default=None, description="Free-form reason")


class ThreadMetadata(BaseModel):
    """Per-thread dashboard metadata (status, blockers, linked issue).

    Stored by the backend with snake_case keys, so no alias generator here.
    """

    thread_id: str = Field(..., min_length=1, description="Thread ID")
    status: ThreadStatus = Field(default="active", description="Board status")
    blockers: list[ThreadBlocker] = Field(
        default_factory=list, description="Threads blocking this one"
    )
    linked_issue_url: Optional[str] = Field(
        default=None, description="Linked issue tracker URL"
    )


class StackTopology(BaseModel):
    """Parent/child index restricted to the members of a single stack."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    root_id: str = Field(..., description="ID of the stack head")
    child_to_parent: dict[str, str] = Field(
        default_factory=dict, description="Child ID -> parent ID"
    )
    parent_to_children: dict[str, list[str]] = Field(
        default_factory=dict, description="Parent ID -> child IDs"
    )


class ThreadStack(BaseModel):
    """A handoff tree collapsed into one renderable unit."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    head: Thread = Field(..., description="Root of the handoff tree")
    descendants: list[Thread] = Field(
        default_factory=list, description="Other members in tree order"
    )
    last_active_date: Optional[str] = Field(
        default=None, description="Newest parseable lastUpdatedDate among members"
    )
    topology: StackTopology = Field(..., description="Component-local topology")


class ThreadListEntry(BaseModel):
    """Display entry: a bare thread or a stack headed by ``thread``."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    kind: Literal["thread", "stack"] = Field(..., description="Entry kind")
    thread: Thread = Field(..., description="Bare thread or stack head")
    stack: Optional[ThreadStack] = Field(
        default=None, description="Stack payload, set only for kind=stack"
    )

    @property
    def id(self) -> str:
        """ID of the primary rendered thread."""
        return self.thread.id

    def members(self) -> list[Thread]:
        """Return head followed by descendants (or just the bare thread)."""
        if self.stack is None:
            return [self.thread]
        return [self.stack.head, *self.stack.descendants]


class ChainThread(BaseModel):
    """Compact thread summary used in a handoff chain."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    title: str = ""
    last_updated: str = ""
    workspace: Optional[str] = None

    @classmethod
    def from_thread(cls, thread: Thread) -> "ChainThread":
        return cls(
            id=thread.id,
            title=thread.title,
            last_updated=thread.last_updated,
            workspace=thread.workspace,
        )


class ThreadChain(BaseModel):
    """Handoff lineage of one thread: ancestors root-first, then descendants."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    ancestors: list[ChainThread] = Field(default_factory=list)
    current: Optional[ChainThread] = None
    descendants: list[ChainThread] = Field(default_factory=list)


class DateGroup(BaseModel):
    """Threads sharing a relative date label (Today, Yesterday, ...)."""

    label: str = Field(..., description="Relative date label")
    threads: list[Thread] = Field(default_factory=list)


class ThreadListFile(BaseModel):
    """Root model for a thread list JSON file."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "version": "1.0",
                "threads": [{"id": "T-1", "title": "First"}],
            }
        }
    )

    version: str = Field(
        default="1.0", pattern=r"^\d+\.\d+$", description="Schema version"
    )
    threads: list[Thread] = Field(default_factory=list, description="Threads")
