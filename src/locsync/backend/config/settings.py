"""Configuration loader wrapping the settings schema models."""

from __future__ import annotations

import logging
import os
from copy import deepcopy
from functools import lru_cache
from pathlib import Path
from typing import Any, Mapping

import yaml
from pydantic import ValidationError

from .schema import AppSettings, ConfigurationError

logger = logging.getLogger(__name__)

CONFIG_DIRECTORY = Path(__file__).resolve().parent / "data"
DEFAULTS_FILE = CONFIG_DIRECTORY / "defaults.yaml"

CONFIG_ENV = "LOCSYNC_CONFIG"
TABLE_ID_ENV = "LOCSYNC_TABLE_ID"
GRID_ID_ENV = "LOCSYNC_GRID_ID"


def _load_yaml(path: Path) -> dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
    except yaml.YAMLError as error:
        raise ConfigurationError(f"Configuration file {path.name} is not valid YAML: {error}") from error
    if not isinstance(data, dict):
        raise ConfigurationError("Configuration file must define a mapping at the top level")
    return data


def _merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Recursively overlay ``override`` onto a copy of ``base``."""

    merged = deepcopy(dict(base))
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = _merge(current, value)
        else:
            merged[key] = deepcopy(value)
    return merged


@lru_cache(maxsize=1)
def load_defaults() -> dict[str, Any]:
    """Load and cache the packaged default settings document."""

    if not DEFAULTS_FILE.exists():
        raise FileNotFoundError("Default settings file not found")
    return _load_yaml(DEFAULTS_FILE)


def _apply_environment(raw: dict[str, Any]) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    table_id = os.getenv(TABLE_ID_ENV)
    if table_id:
        overrides["table_id"] = table_id
    grid_id = os.getenv(GRID_ID_ENV)
    if grid_id:
        overrides["grid_id"] = grid_id
    if not overrides:
        return raw
    return _merge(raw, {"sync": {"source": overrides}})


def load_settings(
    path: str | os.PathLike[str] | None = None,
    *,
    overrides: Mapping[str, Any] | None = None,
) -> AppSettings:
    """Build validated settings from defaults, an optional file and the environment.

    ``path`` takes precedence over the ``LOCSYNC_CONFIG`` environment variable.
    ``overrides`` are applied last and are mainly useful to tests and the CLI.
    """

    raw = load_defaults()

    config_path = path or os.getenv(CONFIG_ENV)
    if config_path:
        config_file = Path(config_path).expanduser()
        if not config_file.exists():
            raise ConfigurationError(f"Configuration file not found: {config_file}")
        logger.debug("Loading settings from %s", config_file)
        raw = _merge(raw, _load_yaml(config_file))

    raw = _apply_environment(raw)
    if overrides:
        raw = _merge(raw, overrides)

    try:
        return AppSettings.model_validate(raw)
    except ValidationError as error:
        raise ConfigurationError(f"Configuration validation failed: {error}") from error


__all__ = [
    "CONFIG_DIRECTORY",
    "CONFIG_ENV",
    "DEFAULTS_FILE",
    "GRID_ID_ENV",
    "TABLE_ID_ENV",
    "load_defaults",
    "load_settings",
]
