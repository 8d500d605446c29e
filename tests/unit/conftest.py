"""Pytest configuration for unit tests."""

import pytest

_CONFIG_ENV = (
    "THREADS_FILE",
    "METADATA_FILE",
    "OUTPUT_FILE",
    "OUTPUT_INDENT",
    "LOG_LEVEL",
    "LOG_FORMAT",
    "ENABLE_METRICS",
    "METRICS_MODE",
    "PUSHGATEWAY_URL",
    "LOKI_URL",
)


@pytest.fixture(autouse=True)
def reset_environment(monkeypatch, tmp_path):
    """Isolate tests from host env vars and any local .env file."""
    for name in _CONFIG_ENV:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    yield
