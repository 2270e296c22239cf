"""Command line entry point for one-shot table synchronisation."""

from __future__ import annotations

import argparse
import asyncio
import logging
from pathlib import Path
from typing import Sequence

from locsync.backend.app.context import build_context
from locsync.backend.config import ConfigurationError, UpdateMode, load_settings
from locsync.backend.services import SyncOutcome

logger = logging.getLogger(__name__)


def _build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Download the remote translation table and import it."
    )
    parser.add_argument("--config", type=Path, help="Settings file to load")
    parser.add_argument(
        "--mode",
        choices=[mode.value for mode in UpdateMode],
        help="Override the configured update mode",
    )
    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        "--from-cache",
        action="store_true",
        help="Import the cached table instead of downloading",
    )
    source.add_argument(
        "--fallback-to-cache",
        action="store_true",
        help="Import the cached table when the download fails",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def _report(outcome: SyncOutcome) -> None:
    if outcome.fetch_error is not None:
        print(f"download failed: {outcome.fetch_error}")
    if outcome.ok and outcome.result is not None:
        result = outcome.result
        print(
            f"imported from {outcome.origin} ({result.mode.value}): "
            f"{result.added} added, {result.updated} updated, {result.removed} removed"
        )
        print(f"languages: {', '.join(result.languages)}")
    elif outcome.error is not None:
        print(f"sync failed ({type(outcome.error).__name__}): {outcome.error}")


def main(argv: Sequence[str] | None = None) -> int:
    """Run a single synchronisation and return a process exit code."""

    parser = _build_argument_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = load_settings(args.config)
    except ConfigurationError as error:
        print(f"failed to load settings: {error}")
        return 1

    context = build_context(settings)
    mode = UpdateMode(args.mode) if args.mode else None

    try:
        if args.from_cache:
            outcome = asyncio.run(context.sync_service.load_cached(mode=mode))
        else:
            outcome = asyncio.run(
                context.sync_service.sync(use_cache_on_failure=args.fallback_to_cache, mode=mode)
            )
    finally:
        context.close()

    _report(outcome)
    return 0 if outcome.ok else 1


if __name__ == "__main__":  # pragma: no cover - CLI invocation
    raise SystemExit(main())
