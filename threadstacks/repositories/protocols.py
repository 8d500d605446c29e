"""Repository protocols (ports).

Concrete adapters (e.g., file-based ThreadRepository) satisfy them via
structural subtyping (no inheritance required).
"""

from __future__ import annotations

from pathlib import Path
from collections.abc import Sequence
from typing import Any, Protocol

from threadstacks.models.schemas import Thread, ThreadListEntry, ThreadMetadata


class ThreadRepositoryProtocol(Protocol):
    """Port for reading thread input and writing build output."""

    def load_threads(self, path: Path) -> list[Thread]:  # noqa: D401
        """Load a thread list; raise ThreadDataError on bad input."""

    def load_metadata(self, path: Path) -> dict[str, ThreadMetadata]:  # noqa: D401
        """Load metadata keyed by thread ID; raise ThreadDataError on bad input."""

    def save_json(self, path: Path, payload: Any) -> str:  # noqa: D401
        """Persist a JSON payload and return the path string."""

    def save_entries(  # noqa: D401
        self, path: Path, entries: Sequence[ThreadListEntry]
    ) -> str:
        """Persist built entries as JSON and return the path string."""
