"""Result models for service operations.

Defines Pydantic models used as return types for service methods to
improve contracts, validation, and interoperability.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class StackBuildSummary(BaseModel):
    """Summary of one topology build, used for logs and metrics.

    Use ``model_dump()`` to attach the values to a log record as extra fields.
    """

    thread_count: int = Field(0, description="Threads in the input list")
    entry_count: int = Field(0, description="Display entries produced")
    stack_count: int = Field(0, description="Entries of kind=stack")
    largest_stack: int = Field(0, description="Size of the largest entry")
    dangling_parent_count: int = Field(
        0, description="Handoff references to threads absent from the input"
    )
    cyclic_stack_count: int = Field(
        0, description="Stacks whose root was chosen by the cycle fallback"
    )
    duration_seconds: float = Field(0.0, description="Wall time of the build")
