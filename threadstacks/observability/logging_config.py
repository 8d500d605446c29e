"""Logging configuration with structured JSON output and optional Loki shipping.

Injects service context (service, environment, host, version, git_sha) into
every record so builds can be correlated across dashboard instances.
"""

import logging
import os
import socket
import sys
from typing import Optional

from pythonjsonlogger import jsonlogger

_CONTEXT_FIELDS = ("service", "environment", "host", "version", "git_sha")
_LOKI_NOISY_LOGGERS = ("requests", "urllib3", "logging_loki")


class _ExcludeLoggerFilter(logging.Filter):
    """Drop records from the given logger name prefixes.

    Keeps the Loki handler from shipping its own HTTP client logs.
    """

    def __init__(self, *prefixes: str) -> None:
        super().__init__()
        self._prefixes = tuple(prefixes)

    def filter(self, record: logging.LogRecord) -> bool:
        return not record.name.startswith(self._prefixes)


class StackJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter adding timestamp, level, logger and context fields."""

    def add_fields(
        self, log_record: dict, record: logging.LogRecord, message_dict: dict
    ) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = self.formatTime(record, self.datefmt)
        log_record["level"] = record.levelname
        log_record["logger"] = record.name

        if hasattr(record, "correlation_id"):
            log_record["correlation_id"] = record.correlation_id
        for key in _CONTEXT_FIELDS:
            if hasattr(record, key):
                log_record[key] = getattr(record, key)


class _ContextFilter(logging.Filter):
    """Fill in service context fields on records that lack them."""

    def __init__(self, service_name: str) -> None:
        super().__init__()
        self._defaults = {
            "service": service_name,
            "environment": os.getenv("ENVIRONMENT", "development"),
            # ENV HOSTNAME wins over socket hostname inside containers
            "host": os.getenv("HOSTNAME", socket.gethostname()),
            "version": os.getenv("APP_VERSION"),
            "git_sha": os.getenv("GIT_SHA"),
        }

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in self._defaults.items():
            if value is not None and not hasattr(record, key):
                setattr(record, key, value)
        return True


def _build_console_handler(numeric_level: int, log_format: str) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(numeric_level)
    if log_format == "json":
        handler.setFormatter(
            StackJsonFormatter(
                "%(timestamp)s %(level)s %(logger)s %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
    else:
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
    return handler


def _attach_loki_handler(
    root_logger: logging.Logger,
    loki_url: str,
    service_name: str,
    numeric_level: int,
    context_filter: logging.Filter,
) -> None:
    try:
        import logging_loki
    except ImportError:
        root_logger.warning(
            "python-logging-loki not installed, skipping Loki handler. "
            "Install with: pip install python-logging-loki"
        )
        return

    try:
        loki_handler = logging_loki.LokiHandler(
            url=f"{loki_url}/loki/api/v1/push",
            tags={"service": service_name},
            version="1",
        )
    except Exception as e:
        root_logger.error(
            f"Failed to setup Loki handler: {e}", extra={"loki_url": loki_url}
        )
        return

    loki_handler.setLevel(numeric_level)
    loki_handler.addFilter(_ExcludeLoggerFilter(*_LOKI_NOISY_LOGGERS))
    loki_handler.addFilter(context_filter)
    root_logger.addHandler(loki_handler)

    for noisy in _LOKI_NOISY_LOGGERS:
        nl = logging.getLogger(noisy)
        nl.setLevel(max(logging.WARNING, numeric_level))
        nl.propagate = False

    root_logger.info(
        "Loki handler configured",
        extra={"loki_url": loki_url, "service": service_name},
    )


def setup_logging(
    level: str = "INFO",
    log_format: str = "json",
    service_name: str = "thread-stacks",
    loki_url: Optional[str] = None,
) -> None:
    """Setup logging with a console handler and an optional Loki handler.

    Console output goes to stderr so that command output on stdout stays
    machine readable.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Output format - 'json' or 'text'
        service_name: Service name for log labels
        loki_url: Optional Loki URL for remote logging (e.g., http://loki:3100)
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()

    # Filters on handlers also see records propagated from module loggers
    context_filter = _ContextFilter(service_name)
    console_handler = _build_console_handler(numeric_level, log_format)
    console_handler.addFilter(context_filter)
    root_logger.addHandler(console_handler)

    if loki_url:
        _attach_loki_handler(
            root_logger, loki_url, service_name, numeric_level, context_filter
        )

    root_logger.debug(
        "Logging configured",
        extra={
            "level": level,
            "format": log_format,
            "loki_enabled": loki_url is not None,
        },
    )


def get_logger(name: str) -> logging.Logger:
    """Get logger instance for a module.

    Args:
        name: Logger name (usually __name__ from calling module)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)


def add_correlation_id(
    logger: logging.Logger, correlation_id: str
) -> logging.LoggerAdapter:
    """Wrap a logger so every record carries ``correlation_id``."""
    return logging.LoggerAdapter(logger, {"correlation_id": correlation_id})
