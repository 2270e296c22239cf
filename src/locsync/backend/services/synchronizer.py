"""Apply fetched CSV tables to the translation store."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from threading import Lock
from typing import Any

from locsync.backend.config.schema import UpdateMode
from locsync.backend.errors import CsvImportError, EmptyInputError, LocsyncError
from locsync.backend.localization import TranslationStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImportResult:
    """Outcome of a single import attempt."""

    ok: bool
    mode: UpdateMode
    added: int = 0
    updated: int = 0
    removed: int = 0
    languages: tuple[str, ...] = ()
    error: LocsyncError | None = None

    @property
    def error_type(self) -> str | None:
        return type(self.error).__name__ if self.error is not None else None

    def as_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "ok": self.ok,
            "mode": self.mode.value,
            "added": self.added,
            "updated": self.updated,
            "removed": self.removed,
            "languages": list(self.languages),
        }
        if self.error is not None:
            payload["error"] = self.error_type
            payload["message"] = str(self.error)
        return payload


class TranslationStoreSynchronizer:
    """Serialises imports into a store and broadcasts a refresh afterwards.

    Imports are all-or-nothing: any failure is reported through the returned
    :class:`ImportResult` and the store keeps its previous state.
    """

    def __init__(self, store: TranslationStore, *, key_prefix: str = "") -> None:
        self.store = store
        self._key_prefix = key_prefix
        self._lock = Lock()

    def import_csv(
        self,
        csv_text: str,
        mode: UpdateMode = UpdateMode.REPLACE,
        separator: str = ",",
    ) -> ImportResult:
        mode = UpdateMode(mode)
        if not csv_text or not csv_text.strip():
            logger.warning("Empty CSV data; nothing imported")
            return ImportResult(ok=False, mode=mode, error=EmptyInputError("Empty CSV data"))

        with self._lock:
            try:
                stats = self.store.import_csv(self._key_prefix, csv_text, mode, separator)
            except CsvImportError as error:
                logger.warning("Failed to import CSV: %s", error)
                return ImportResult(ok=False, mode=mode, error=error)
            except Exception as error:
                logger.warning("Failed to import CSV: %s", error, exc_info=True)
                return ImportResult(ok=False, mode=mode, error=CsvImportError(str(error)))

        self.store.refresh_all()

        logger.info(
            "CSV imported successfully (%s): %d added, %d updated, %d removed, languages=%s",
            mode.value,
            stats.added,
            stats.updated,
            stats.removed,
            ", ".join(stats.languages),
        )
        return ImportResult(
            ok=True,
            mode=mode,
            added=stats.added,
            updated=stats.updated,
            removed=stats.removed,
            languages=stats.languages,
        )


__all__ = ["ImportResult", "TranslationStoreSynchronizer"]
