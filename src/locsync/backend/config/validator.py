"""Validation helpers to surface configuration mistakes early."""

from __future__ import annotations

import argparse
import os
from pathlib import Path
from typing import Sequence

from .schema import AppSettings, ConfigurationError
from .settings import load_settings


def _validate_source(settings: AppSettings) -> list[str]:
    errors: list[str] = []
    source = settings.sync.source

    try:
        endpoint = source.resolved_endpoint
    except ConfigurationError as error:
        errors.append(f"sync.source.endpoint: {error}")
    else:
        if not endpoint.startswith(("http://", "https://")):
            errors.append("sync.source.endpoint: must be an http(s) URL")

    if source.separator.isalnum():
        errors.append("sync.source.separator: must not be a letter or digit")

    if source.cache_path.exists() and source.cache_path.is_dir():
        errors.append(f"sync.source.cache_path: {source.cache_path} is a directory")

    return errors


def _validate_session(settings: AppSettings) -> list[str]:
    errors: list[str] = []
    preferences_path = settings.session.preferences_path
    if preferences_path is not None and preferences_path == settings.sync.source.cache_path:
        errors.append("session.preferences_path: must differ from sync.source.cache_path")
    return errors


def validate_settings(settings: AppSettings) -> list[str]:
    """Return human-readable issues detected in ``settings``."""

    errors: list[str] = []
    errors.extend(_validate_source(settings))
    errors.extend(_validate_session(settings))
    return errors


def _build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Validate locsync settings and report issues before deploying."
    )
    parser.add_argument(
        "config",
        nargs="?",
        type=Path,
        help="Settings file to validate (defaults to LOCSYNC_CONFIG or built-in defaults)",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for running validations from the command line."""

    parser = _build_argument_parser()
    args = parser.parse_args(argv)
    label = str(args.config or os.getenv("LOCSYNC_CONFIG") or "defaults")

    try:
        settings = load_settings(args.config)
    except (ConfigurationError, FileNotFoundError) as error:
        print(f"[{label}] failed to load settings: {error}")
        return 1

    issues = validate_settings(settings)
    if issues:
        print(f"[{label}] {len(issues)} issue(s) detected:")
        for issue in issues:
            print(f"  - {issue}")
        return 1

    print(f"[{label}] OK")
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI invocation
    raise SystemExit(main())
