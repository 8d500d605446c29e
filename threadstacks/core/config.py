"""Configuration management using Pydantic BaseSettings.

This module provides strongly-typed configuration with automatic validation
and environment variable loading.
"""

from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StackConfig(BaseSettings):
    """Thread-stacks configuration with Pydantic validation.

    All settings are loaded from environment variables with type validation.
    """

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    # === Input / Output ===
    threads_file: Path = Field(
        default=Path("data/threads.json"),
        description="JSON file with the thread list (array or {version, threads})",
    )
    metadata_file: Optional[Path] = Field(
        default=None,
        description="Optional JSON file with per-thread metadata (status, blockers)",
    )
    output_file: Optional[Path] = Field(
        default=None, description="Write results here instead of stdout"
    )
    output_indent: int = Field(
        default=2, ge=0, le=8, description="JSON indentation for emitted output"
    )

    # === Logging ===
    log_level: str = Field(
        default="INFO",
        pattern=r"^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Logging level",
    )
    log_format: str = Field(
        default="json",
        pattern=r"^(json|text)$",
        description="Log output format: json or text",
    )
    service_name: str = Field(
        default="thread-stacks",
        description="Service name to include in logs and metrics",
    )
    loki_url: Optional[str] = Field(
        default=None, description="Loki URL for log shipping (e.g., http://loki:3100)"
    )

    # === Observability ===
    enable_metrics: bool = Field(
        default=False, description="Enable Prometheus metrics export"
    )
    metrics_port: int = Field(
        default=9090, ge=1024, le=65535, description="Port for metrics HTTP server"
    )
    metrics_mode: str = Field(
        default="push",
        pattern=r"^(scrape|push|both)$",
        description=(
            "How to expose metrics: scrape via HTTP, push to Pushgateway, or both"
        ),
    )
    pushgateway_url: Optional[str] = Field(
        default=None,
        description="Prometheus Pushgateway URL (e.g., http://pushgateway:9091)",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Accept lowercase level names from the environment."""
        if isinstance(v, str):
            return v.upper()
        return v

    def validate_requirements(self) -> None:
        """Validate cross-field requirements.

        Raises:
            ValueError: If requirements are not met
        """
        if (
            self.enable_metrics
            and self.metrics_mode in ("push", "both")
            and not self.pushgateway_url
        ):
            raise ValueError(
                "pushgateway_url is required when metrics_mode is push or both"
            )
