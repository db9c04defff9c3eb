from __future__ import annotations

import argparse
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from benchfuse.app import cache_status, clear_cache, refresh_dataset
from benchfuse.config import ConfigurationError, configure_logging

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Fuse AI model benchmark data")
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug output, including fusion state transitions",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    refresh = subparsers.add_parser("refresh", help="Refresh sources and the merged dataset")
    refresh.add_argument(
        "--force",
        action="store_true",
        help="Refetch the benchmark source even if a snapshot exists",
    )

    cache = subparsers.add_parser("cache", help="Cache maintenance commands")
    cache_sub = cache.add_subparsers(dest="cache_command", required=True)
    cache_sub.add_parser("status", help="Show cached artifacts")
    cache_sub.add_parser("clear", help="Delete all cached artifacts")

    return parser.parse_args(list(argv))


def _run_refresh(args: argparse.Namespace) -> int:
    outcome = refresh_dataset(force=args.force)
    if not outcome.ok:
        log.error("Refresh failed: %s", outcome.error)
        return 1
    return 0


def _show_cache_status() -> int:
    status = cache_status()
    log.info("Cache directory: %s", status.cache_dir)
    log.info("Artifacts: %d (%s)", status.artifact_count, status.total_size_human)
    for artifact in status.artifacts:
        metadata = artifact.metadata or {}
        stamp = metadata.get("fetched_at") or metadata.get("fused_at") or "-"
        fingerprint = metadata.get("fingerprint") or metadata.get("primary_fingerprint") or "-"
        log.info(
            "  %s: %s, updated %s, fingerprint %s%s",
            artifact.path.name,
            artifact.size,
            stamp,
            str(fingerprint)[:12],
            " (corrupt)" if artifact.corrupt else "",
        )
    return 0


def _clear_cache() -> int:
    removed = clear_cache()
    for path in removed:
        log.info("Removed %s", path)
    return 0


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    try:
        if parsed_args.command == "refresh":
            exit_code = _run_refresh(parsed_args)
        elif parsed_args.command == "cache" and parsed_args.cache_command == "status":
            exit_code = _show_cache_status()
        elif parsed_args.command == "cache" and parsed_args.cache_command == "clear":
            exit_code = _clear_cache()
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301
    except ConfigurationError:
        log.exception("Configuration error")
        sys.exit(2)
    except Exception:
        log.exception("Fatal error")
        sys.exit(1)

    sys.exit(exit_code)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
