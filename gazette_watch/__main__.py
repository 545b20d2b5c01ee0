"""
CLI entry point for gazette-watch.

Usage:
    python -m gazette_watch check
    python -m gazette_watch check --source "DOE/PB" --terms "prefeitura,kaline"
    python -m gazette_watch check --url https://example.com/diario.pdf --snippets
    python -m gazette_watch status
"""

import argparse
import asyncio
import json
import logging
import sys

import structlog

# Log level mapping
LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}

EXIT_SOURCE_FAILED = 2


def setup_logging(level: str = "INFO", json_output: bool = False):
    """Configure structured logging (to stderr; stdout carries results)."""
    log_level = LOG_LEVELS.get(level.upper(), logging.INFO)

    if json_output:
        processors = [
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = [
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S"),
            structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def _split_sources(values):
    sources = []
    for value in values or []:
        sources.extend(s.strip() for s in value.split(",") if s.strip())
    return sources or None


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="gazette-watch",
        description="Official gazette monitor with term alerts",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Scheduled check of all configured sources
  python -m gazette_watch check

  # One source, explicit terms, no global alert
  python -m gazette_watch check --source "DOE/PB" --terms "prefeitura" --dry-run

  # Manual run against a specific document, keeping history untouched
  python -m gazette_watch check --url file:///tmp/doe.pdf --snippets
        """,
    )

    parser.add_argument(
        "--config",
        type=str,
        help="Path to sources.yml config file",
    )
    parser.add_argument(
        "--store-dir",
        type=str,
        help="Directory of the key-value store (default: STORE_DIR or .gazette-watch)",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Logging level (default: INFO)",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Output logs as JSON (for production)",
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Show version and exit",
    )

    subparsers = parser.add_subparsers(dest="command")

    check = subparsers.add_parser("check", help="Check sources for a new edition")
    check.add_argument(
        "--url",
        type=str,
        help="Explicit document URL (manual run, dedup bypassed)",
    )
    check.add_argument(
        "--source",
        action="append",
        help="Source to process; repeatable or comma-separated (default: all, or the primary source with --url)",
    )
    check.add_argument(
        "--terms",
        type=str,
        help="Comma-separated terms replacing the configured ones",
    )
    check.add_argument(
        "--dry-run",
        action="store_true",
        help="Do not send the global notification",
    )
    check.add_argument(
        "--snippets",
        action="store_true",
        help="Include text excerpts around each hit",
    )
    check.add_argument(
        "--persist",
        action="store_true",
        help="Advance the dedup key even for a manual run",
    )

    subparsers.add_parser("status", help="Print the persisted run history as JSON")
    subparsers.add_parser("groups", help="Print the configured subscriber groups as JSON")

    return parser.parse_args(argv)


def _build_store(args, settings):
    from .storage import FileKeyValueStore

    return FileKeyValueStore(args.store_dir or settings.store_dir)


async def check_async(args):
    """Run one check invocation and return its result."""
    from .config import Settings, load_sources
    from .core.normalizer import parse_terms
    from .orchestrator import CheckRequest, Monitor

    settings = Settings.from_env()
    sources = load_sources(args.config, settings.timezone)

    request = CheckRequest(
        url=args.url,
        sources=_split_sources(args.source),
        terms=parse_terms(args.terms) or None,
        dry_run=args.dry_run,
        snippets=args.snippets,
        persist=args.persist,
    )

    monitor = Monitor(sources=sources, store=_build_store(args, settings), settings=settings)
    return await monitor.run(request)


def show_status(args) -> dict:
    from .config import Settings, load_sources, primary_source
    from .core.ledger import load_history

    settings = Settings.from_env()
    primary = primary_source(load_sources(args.config, settings.timezone))
    return load_history(_build_store(args, settings), primary).to_dict()


def show_groups(args) -> dict:
    from .config import Settings
    from .storage import load_groups

    store = _build_store(args, Settings.from_env())
    return {"groups": [g.to_dict() for g in load_groups(store)]}


def _print_json(data) -> None:
    print(json.dumps(data, ensure_ascii=False, indent=2))


def main(argv=None):
    """Main entry point."""
    args = parse_args(argv)

    if args.version:
        from . import __version__
        print(f"gazette-watch {__version__}")
        sys.exit(0)

    setup_logging(args.log_level, args.json_logs)
    logger = structlog.get_logger(__name__)

    try:
        if args.command == "status":
            _print_json(show_status(args))
            sys.exit(0)
        if args.command == "groups":
            _print_json(show_groups(args))
            sys.exit(0)
        if args.command != "check":
            parse_args(["--help"])

        result = asyncio.run(check_async(args))
        _print_json(result.to_dict())
        sys.exit(0 if result.ok else EXIT_SOURCE_FAILED)
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        sys.exit(130)
    except Exception as e:
        logger.exception("fatal_error", error=str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
