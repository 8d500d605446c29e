"""Main entry point and CLI for thread-stacks.

Provides both module entry point (python -m threadstacks) and a console CLI
with subcommands to build stacks, resolve one thread's handoff chain, or
split stacks into kanban columns. Arguments override environment-based
configuration selectively.
"""

import argparse
import json
import os
import sys
import uuid
from typing import Any

from pydantic import ValidationError

from threadstacks.core.config import StackConfig
from threadstacks.core.exceptions import ThreadDataError, ThreadNotFoundError
from threadstacks.di.container import Container
from threadstacks.models.schemas import ThreadListEntry
from threadstacks.observability.logging_config import (
    add_correlation_id,
    get_logger,
    setup_logging,
)
from threadstacks.services.topology.stacks import get_last_active, get_stack_size


def _add_io_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--threads",
        dest="threads_file",
        help="Thread list JSON file (overrides THREADS_FILE)",
    )
    parser.add_argument(
        "--output",
        dest="output_file",
        help="Write JSON result to this file instead of stdout (OUTPUT_FILE)",
    )


def _build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser with subcommands.

    Returns:
        Configured ArgumentParser instance.
    """
    parser = argparse.ArgumentParser(
        prog="thread-stacks",
        description=(
            "Group agent threads into handoff stacks. "
            "If no subcommand is provided, the default is 'build'."
        ),
    )
    parser.add_argument(
        "--log-level",
        dest="log_level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (overrides LOG_LEVEL)",
    )
    subparsers = parser.add_subparsers(dest="command")

    # build: full entry list, optionally flattened for navigation
    build_parser = subparsers.add_parser(
        "build", help="Build display entries from a thread list (default)"
    )
    _add_io_arguments(build_parser)
    build_parser.add_argument(
        "--flatten",
        action="store_true",
        help="Emit the keyboard navigation order instead of entries",
    )
    build_parser.add_argument(
        "--expand",
        dest="expanded_ids",
        nargs="+",
        default=[],
        help="Stack head IDs treated as expanded when flattening",
    )

    # chain: ancestors/descendants of one thread
    chain_parser = subparsers.add_parser(
        "chain", help="Show the handoff chain around one thread"
    )
    chain_parser.add_argument("thread_id", help="Thread identifier (e.g. T-0a1b2c)")
    _add_io_arguments(chain_parser)

    # columns: kanban placement by most recently touched member
    columns_parser = subparsers.add_parser(
        "columns", help="Split entries into kanban status columns"
    )
    _add_io_arguments(columns_parser)
    columns_parser.add_argument(
        "--metadata",
        dest="metadata_file",
        help="Thread metadata JSON file (overrides METADATA_FILE)",
    )

    return parser


def _load_config(args: argparse.Namespace) -> StackConfig | None:
    """Load configuration from environment and apply CLI overrides.

    Returns None if validation/loading failed (errors are printed).
    """
    try:
        overrides = {
            k: v
            for k, v in {
                "threads_file": getattr(args, "threads_file", None),
                "metadata_file": getattr(args, "metadata_file", None),
                "output_file": getattr(args, "output_file", None),
                "log_level": getattr(args, "log_level", None),
            }.items()
            if v is not None
        }
        config = StackConfig(**overrides)
        config.validate_requirements()
        return config
    except ValidationError as e:
        print(f"Configuration validation error:\n{e}", file=sys.stderr)
        return None
    except ValueError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return None


def _column_payload(entry: ThreadListEntry) -> dict[str, Any]:
    return {
        "id": entry.id,
        "kind": entry.kind,
        "size": get_stack_size(entry),
        "lastActiveId": get_last_active(entry).id,
    }


def _emit(container: Container, config: StackConfig, payload: Any) -> None:
    if config.output_file is not None:
        container.provide_repository().save_json(config.output_file, payload)
        return
    indent = config.output_indent or None
    print(json.dumps(payload, ensure_ascii=False, indent=indent))


def _push_metrics(config: StackConfig, logger: Any) -> None:
    """Push the default registry to Pushgateway for one-shot runs."""
    if not (
        config.enable_metrics
        and config.pushgateway_url
        and config.metrics_mode in ("push", "both")
    ):
        return
    try:
        from prometheus_client import REGISTRY, push_to_gateway

        instance = os.getenv("HOSTNAME", "thread-stacks-1")
        push_to_gateway(
            config.pushgateway_url.replace("http://", "").replace("https://", ""),
            job=config.service_name,
            registry=REGISTRY,
            grouping_key={"instance": instance},
        )
        logger.info(
            "Metrics pushed to Pushgateway",
            extra={"pushgateway_url": config.pushgateway_url, "instance": instance},
        )
    except OSError:
        logger.debug("Metrics push failed (non-fatal)", exc_info=True)


def _run_command(command: str, args: argparse.Namespace, config: StackConfig) -> int:
    """Execute the selected CLI command using provided configuration."""
    setup_logging(
        level=config.log_level,
        log_format=config.log_format,
        service_name=config.service_name,
        loki_url=config.loki_url,
    )
    logger = add_correlation_id(get_logger(__name__), str(uuid.uuid4()))

    container = Container(config=config)
    container.initialize_runtime()
    repository = container.provide_repository()
    service = container.provide_stack_service()

    try:
        threads = repository.load_threads(config.threads_file)
        payload: Any = None

        if command == "chain":
            payload = service.chain(threads, args.thread_id).model_dump(
                mode="json", by_alias=True
            )
        elif command == "columns":
            metadata = (
                repository.load_metadata(config.metadata_file)
                if config.metadata_file is not None
                else {}
            )
            columns = service.columns(threads, metadata)
            payload = {
                status: [_column_payload(e) for e in entries]
                for status, entries in columns.items()
            }
        elif getattr(args, "flatten", False):
            flat = service.flatten(threads, set(args.expanded_ids))
            payload = [t.model_dump(mode="json", by_alias=True) for t in flat]
        else:
            entries, _ = service.build(threads)
            if config.output_file is not None:
                repository.save_entries(config.output_file, entries)
            else:
                payload = [e.model_dump(mode="json", by_alias=True) for e in entries]

        if payload is not None:
            _emit(container, config, payload)
    except ThreadDataError as e:
        logger.error(
            str(e),
            extra={"file_path": e.path, "validation_errors": e.validation_errors},
        )
        return 1
    except ThreadNotFoundError as e:
        logger.error(str(e), extra={"thread_id": e.thread_id})
        return 1
    except OSError as e:
        logger.error(f"Failed to write output: {e}")
        return 1

    _push_metrics(config, logger)
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main application entry point with CLI support.

    Args:
        argv: Optional list of arguments to parse; defaults to sys.argv[1:]

    Returns:
        Exit code (0 for success, 1 for error)
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    command = args.command or "build"
    if args.command is None:
        args.flatten = False
        args.expanded_ids = []

    config = _load_config(args)
    if config is None:
        return 1

    return _run_command(command, args, config)


def cli() -> None:
    """Synchronous CLI entrypoint for console_scripts."""
    sys.exit(main())


if __name__ == "__main__":
    sys.exit(main())
