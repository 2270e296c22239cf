"""String key-value preference storage surviving process restarts."""

from __future__ import annotations

import logging
import os
import sqlite3
from pathlib import Path
from threading import Lock
from typing import Protocol

logger = logging.getLogger(__name__)


class PreferenceStore(Protocol):
    """Minimal persistence interface used for the language preference."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def save(self) -> None: ...


class InMemoryPreferenceStore:
    """Thread-safe preference store that lives only as long as the process."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._values: dict[str, str] = dict(initial or {})
        self._lock = Lock()
        self.saves = 0

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._values[key] = value

    def save(self) -> None:
        with self._lock:
            self.saves += 1


class SQLitePreferenceStore:
    """SQLite-backed preference store.

    ``set`` stages a value that ``get`` already observes; ``save`` writes the
    staged values to disk in a single transaction.
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self._path = str(path)
        self._pending: dict[str, str] = {}
        self._lock = Lock()
        Path(self._path).parent.mkdir(parents=True, exist_ok=True)
        self._initialise()

    def _connect(self) -> sqlite3.Connection:
        connection = sqlite3.connect(self._path, check_same_thread=False)
        connection.execute("PRAGMA journal_mode=WAL")
        connection.execute("PRAGMA synchronous=NORMAL")
        return connection

    def _initialise(self) -> None:
        with self._connect() as connection:
            connection.execute(
                """
                CREATE TABLE IF NOT EXISTS preferences (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                )
                """
            )

    def get(self, key: str) -> str | None:
        with self._lock:
            if key in self._pending:
                return self._pending[key]
            with self._connect() as connection:
                row = connection.execute(
                    "SELECT value FROM preferences WHERE key = ?",
                    (key,),
                ).fetchone()
        return row[0] if row is not None else None

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._pending[key] = value

    def save(self) -> None:
        with self._lock:
            if not self._pending:
                return
            with self._connect() as connection:
                connection.executemany(
                    "INSERT INTO preferences (key, value) VALUES (?, ?)"
                    " ON CONFLICT(key) DO UPDATE SET value = excluded.value",
                    list(self._pending.items()),
                )
            logger.debug("Saved %d preference(s) to %s", len(self._pending), self._path)
            self._pending.clear()


def build_preference_store(path: str | os.PathLike[str] | None) -> PreferenceStore:
    """Return a persistent store for ``path`` or an in-memory one when unset."""

    if path:
        return SQLitePreferenceStore(Path(path).expanduser())
    return InMemoryPreferenceStore()


__all__ = [
    "InMemoryPreferenceStore",
    "PreferenceStore",
    "SQLitePreferenceStore",
    "build_preference_store",
]
