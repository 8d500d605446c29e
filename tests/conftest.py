"""Pytest configuration and shared fixtures."""

import sys
from pathlib import Path

import pytest

# Make the package importable without installation
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from threadstacks.models.schemas import Thread  # noqa: E402


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "slow: mark test as slow running")


@pytest.fixture
def make_thread():
    """Factory for threads with readable defaults."""

    def _make(thread_id, updated=None, parent=None, **extra):  # noqa: ANN001
        return Thread(
            id=thread_id,
            title=f"Thread {thread_id}",
            last_updated="2 hours ago",
            last_updated_date=updated,
            handoff_parent_id=parent,
            **extra,
        )

    return _make
