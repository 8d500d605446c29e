"""Application DI container.

Builds and provides the repository, metrics adapter and service so the CLI
stays a thin facade.
"""

from __future__ import annotations

from threadstacks.core.config import StackConfig
from threadstacks.observability.metrics import ensure_metrics_server
from threadstacks.observability.metrics_adapter import (
    MetricsAdapter,
    NoopMetricsAdapter,
    PrometheusMetricsAdapter,
)
from threadstacks.repositories.protocols import ThreadRepositoryProtocol
from threadstacks.repositories.thread_repository import ThreadRepository
from threadstacks.services.stack_service import ThreadStackService


class Container:
    """Container building all primary services for the thread-stacks app."""

    def __init__(self, *, config: StackConfig) -> None:
        """Build and wire core components from configuration."""
        self._config = config
        self._repository: ThreadRepositoryProtocol = ThreadRepository(
            indent=config.output_indent
        )
        self._metrics: MetricsAdapter = (
            PrometheusMetricsAdapter()
            if config.enable_metrics
            else NoopMetricsAdapter()
        )
        self._service = ThreadStackService(metrics=self._metrics)

    def initialize_runtime(self) -> None:
        """Perform side-effectful initialization (metrics server)."""
        if self._config.enable_metrics and self._config.metrics_mode in (
            "scrape",
            "both",
        ):
            ensure_metrics_server(self._config.metrics_port)

    def provide_repository(self) -> ThreadRepositoryProtocol:
        """Provide thread repository instance."""
        return self._repository

    def provide_metrics(self) -> MetricsAdapter:
        """Provide metrics adapter instance."""
        return self._metrics

    def provide_stack_service(self) -> ThreadStackService:
        """Provide thread stack service instance."""
        return self._service
