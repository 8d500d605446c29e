from pathlib import Path

import pytest
from pydantic import ValidationError

from threadstacks.core.config import StackConfig


def test_defaults():
    config = StackConfig()

    assert config.threads_file == Path("data/threads.json")
    assert config.metadata_file is None
    assert config.log_format == "json"
    assert config.enable_metrics is False
    config.validate_requirements()


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("THREADS_FILE", "/tmp/t.json")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("OUTPUT_INDENT", "0")

    config = StackConfig()

    assert config.threads_file == Path("/tmp/t.json")
    assert config.log_level == "DEBUG"
    assert config.output_indent == 0


def test_invalid_log_format_rejected():
    with pytest.raises(ValidationError):
        StackConfig(log_format="xml")


def test_push_mode_requires_pushgateway():
    config = StackConfig(enable_metrics=True, metrics_mode="push")

    with pytest.raises(ValueError, match="pushgateway_url"):
        config.validate_requirements()

    StackConfig(enable_metrics=True, metrics_mode="scrape").validate_requirements()
