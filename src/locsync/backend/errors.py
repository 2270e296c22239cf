"""Exception taxonomy shared by the fetcher, synchronizer and session manager."""

from __future__ import annotations


class LocsyncError(Exception):
    """Base class for all recoverable locsync failures."""


class ConfigurationError(LocsyncError, ValueError):
    """Raised when endpoint, language or settings values are missing or invalid."""


class FetchError(LocsyncError):
    """Raised when the remote table could not be downloaded."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class CacheMissError(LocsyncError):
    """Raised when no cached table exists at the configured path."""


class CacheReadError(LocsyncError):
    """Raised when the cached table exists but cannot be read."""


class EmptyInputError(LocsyncError):
    """Raised when an import is attempted with empty CSV content."""


class CsvImportError(LocsyncError):
    """Raised when CSV content cannot be parsed or applied to the store."""


class NoLanguagesAvailableError(LocsyncError):
    """Raised when an operation needs at least one known language."""


class SessionNotInitializedError(LocsyncError):
    """Raised when the language session is used before ``initialize``."""


class CacheWriteWarning(UserWarning):
    """Emitted when a fetched table could not be written to the local cache."""


__all__ = [
    "CacheMissError",
    "CacheReadError",
    "CacheWriteWarning",
    "ConfigurationError",
    "CsvImportError",
    "EmptyInputError",
    "FetchError",
    "LocsyncError",
    "NoLanguagesAvailableError",
    "SessionNotInitializedError",
]
