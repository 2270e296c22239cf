"""Configuration models and loaders."""

from .schema import AppSettings, ConfigurationError, RemoteTableSource, UpdateMode
from .settings import load_settings

__all__ = [
    "AppSettings",
    "ConfigurationError",
    "RemoteTableSource",
    "UpdateMode",
    "load_settings",
]
