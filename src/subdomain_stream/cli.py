"""CLI entrypoint for subdomain-stream."""

from __future__ import annotations

import argparse
import os
from collections.abc import Sequence

from .config import (
    DEFAULT_BASE_URL,
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_READ_TIMEOUT,
    ClientConfig,
)
from .errors import ConfigError
from .logging_utils import configure_logging, get_logger
from .models import SessionState
from .pipeline import run_pipeline
from .validation import load_lines_from_file

EXIT_OK = 0
EXIT_SEARCH_FAILED = 1
EXIT_CONFIG = 2
EXIT_INTERRUPTED = 130


def build_parser() -> argparse.ArgumentParser:
    """Build CLI parser."""
    parser = argparse.ArgumentParser(
        description="Subdomain Stream - watch subdomain discovery results as the server finds them."
    )
    parser.add_argument("targets", nargs="*", help="Domains to search, e.g. example.com.")
    parser.add_argument("--targets-file", help="Path to a file with one domain per line.")
    parser.add_argument(
        "--server",
        help=f"Discovery server base URL (or set SUBDOMAIN_STREAM_URL; default {DEFAULT_BASE_URL}).",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=DEFAULT_CONNECT_TIMEOUT,
        help="Seconds to wait for the connection to open.",
    )
    parser.add_argument(
        "--read-timeout",
        type=float,
        default=DEFAULT_READ_TIMEOUT,
        help="Seconds the stream may stay silent before the search fails.",
    )
    parser.add_argument(
        "--max-duration",
        type=float,
        help="Fail a search that runs longer than this many seconds.",
    )
    parser.add_argument(
        "--check-dns",
        action="store_true",
        help="Skip targets that do not resolve before contacting the server.",
    )
    parser.add_argument("--output", help="Write all results to this CSV file.")
    parser.add_argument("--no-progress", action="store_true", help="Disable the live counter.")
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    verbosity.add_argument("--quiet", action="store_true", help="Only log warnings and errors.")
    return parser


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse and pre-validate CLI input."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if not (args.targets or args.targets_file):
        parser.error("Provide at least one target domain or --targets-file.")
    return args


def _materialize_targets(args: argparse.Namespace) -> tuple[str, ...]:
    targets = [target.strip() for target in args.targets]
    if args.targets_file:
        targets.extend(load_lines_from_file(args.targets_file))
    return tuple(dict.fromkeys(targets))


def namespace_to_config(args: argparse.Namespace) -> ClientConfig:
    """Convert CLI args to validated ClientConfig."""
    base_url = args.server or os.getenv("SUBDOMAIN_STREAM_URL") or DEFAULT_BASE_URL
    return ClientConfig(
        targets=_materialize_targets(args),
        base_url=base_url,
        connect_timeout=args.timeout,
        read_timeout=args.read_timeout,
        max_duration=args.max_duration,
        check_dns=bool(args.check_dns),
        output=args.output,
        show_progress=not args.no_progress,
    )


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entrypoint."""
    args = parse_args(argv)
    configure_logging(args.verbose, quiet=args.quiet)
    logger = get_logger()
    try:
        config = namespace_to_config(args)
    except ConfigError as exc:
        logger.error("Invalid configuration: %s", exc)
        return EXIT_CONFIG
    except OSError as exc:
        logger.error("Cannot read targets file: %s", exc)
        return EXIT_CONFIG

    try:
        sessions = run_pipeline(config, logger=logger)
    except KeyboardInterrupt:
        logger.info("Interrupted.")
        return EXIT_INTERRUPTED

    if any(session.state is SessionState.ERRORED for session in sessions):
        return EXIT_SEARCH_FAILED
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
