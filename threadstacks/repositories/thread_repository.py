"""Thread repository for file-based input and output using Pydantic models.

Reads thread lists and metadata exported by the dashboard backend and
writes build results to JSON files atomically.
"""

import json
import logging
from pathlib import Path
from collections.abc import Sequence
from typing import Any

from pydantic import TypeAdapter, ValidationError

from threadstacks.core.exceptions import ThreadDataError
from threadstacks.models.schemas import (
    Thread,
    ThreadListEntry,
    ThreadListFile,
    ThreadMetadata,
)

logger = logging.getLogger(__name__)

_metadata_list = TypeAdapter(list[ThreadMetadata])


class ThreadRepository:
    """Repository for thread list files.

    Accepted thread file shapes:
    - a bare JSON array of thread objects
    - ``{"version": "1.0", "threads": [...]}``
    """

    def __init__(self, *, indent: int = 2):
        """Initialize repository.

        Args:
            indent: JSON indentation used when saving; 0 writes compact JSON
        """
        self._indent = indent

    def _read_json(self, path: Path) -> Any:
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except FileNotFoundError as e:
            raise ThreadDataError(f"File not found: {path}", path=str(path)) from e
        except json.JSONDecodeError as e:
            raise ThreadDataError(f"Invalid JSON in {path}: {e}", path=str(path)) from e
        except OSError as e:
            raise ThreadDataError(f"Cannot read {path}: {e}", path=str(path)) from e

    def load_threads(self, path: Path) -> list[Thread]:
        """Load and validate a thread list.

        Args:
            path: JSON file with threads

        Returns:
            Threads in file order

        Raises:
            ThreadDataError: If the file is missing, malformed or invalid
        """
        path = Path(path)
        data = self._read_json(path)
        if isinstance(data, list):
            data = {"threads": data}

        try:
            threads = ThreadListFile.model_validate(data).threads
        except ValidationError as e:
            raise ThreadDataError(
                f"Invalid thread list in {path}",
                path=str(path),
                validation_errors=e.errors(include_url=False),
            ) from e

        logger.info(
            f"Loaded {len(threads)} threads from {path}",
            extra={"thread_count": len(threads), "file_path": str(path)},
        )
        return threads

    def load_metadata(self, path: Path) -> dict[str, ThreadMetadata]:
        """Load per-thread metadata keyed by thread ID.

        Accepts either a list of records or a mapping of thread ID to record
        (``thread_id`` may then be omitted from the record).

        Raises:
            ThreadDataError: If the file is missing, malformed or invalid
        """
        path = Path(path)
        data = self._read_json(path)
        if isinstance(data, dict):
            data = [
                {"thread_id": thread_id, **record}
                if isinstance(record, dict)
                else record
                for thread_id, record in data.items()
            ]

        try:
            records = _metadata_list.validate_python(data)
        except ValidationError as e:
            raise ThreadDataError(
                f"Invalid thread metadata in {path}",
                path=str(path),
                validation_errors=e.errors(include_url=False),
            ) from e

        logger.info(
            f"Loaded metadata for {len(records)} threads from {path}",
            extra={"metadata_count": len(records), "file_path": str(path)},
        )
        return {r.thread_id: r for r in records}

    def save_json(self, path: Path, payload: Any) -> str:
        """Write a JSON-compatible payload atomically.

        Args:
            path: Destination file
            payload: Data produced by ``model_dump(mode="json")``

        Returns:
            Path of the written file as string
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        temp_path = path.with_suffix(path.suffix + ".tmp")
        try:
            with open(temp_path, "w", encoding="utf-8") as f:
                json.dump(payload, f, ensure_ascii=False, indent=self._indent or None)
            temp_path.replace(path)
        except OSError as e:
            logger.error(f"Failed to write {path}: {e}", extra={"file_path": str(path)})
            if temp_path.exists():
                temp_path.unlink()
            raise

        logger.info(f"Saved output to {path}", extra={"file_path": str(path)})
        return str(path)

    def save_entries(self, path: Path, entries: Sequence[ThreadListEntry]) -> str:
        """Write built entries in the dashboard's camelCase wire format."""
        payload = [e.model_dump(mode="json", by_alias=True) for e in entries]
        return self.save_json(path, payload)
