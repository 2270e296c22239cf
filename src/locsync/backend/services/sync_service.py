"""Fetch-then-import pipeline tying the fetcher to the synchronizer."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any

from locsync.backend.config.schema import RemoteTableSource, UpdateMode
from locsync.backend.errors import ConfigurationError, FetchError, LocsyncError
from locsync.backend.services.fetcher import TableFetcher
from locsync.backend.services.synchronizer import ImportResult, TranslationStoreSynchronizer

logger = logging.getLogger(__name__)

ORIGIN_REMOTE = "remote"
ORIGIN_CACHE = "cache"
ORIGIN_NONE = "none"


@dataclass(frozen=True)
class SyncOutcome:
    """Where the imported table came from and what the import did."""

    origin: str
    result: ImportResult | None = None
    error: LocsyncError | None = None
    fetch_error: FetchError | None = None

    @property
    def ok(self) -> bool:
        return self.result is not None and self.result.ok

    def as_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"ok": self.ok, "origin": self.origin}
        if self.result is not None:
            payload["import"] = self.result.as_dict()
        if self.error is not None:
            payload["error"] = type(self.error).__name__
            payload["message"] = str(self.error)
        if self.fetch_error is not None:
            payload["fetch_error"] = str(self.fetch_error)
        return payload


class SyncService:
    """Download a remote table and import it, optionally falling back to cache."""

    def __init__(
        self,
        fetcher: TableFetcher,
        synchronizer: TranslationStoreSynchronizer,
        source: RemoteTableSource,
        *,
        mode: UpdateMode = UpdateMode.REPLACE,
        startup_delay: float = 1.0,
        ready: asyncio.Event | None = None,
    ) -> None:
        self.fetcher = fetcher
        self.synchronizer = synchronizer
        self.source = source
        self.mode = mode
        self._startup_delay = startup_delay
        self._ready = ready

    def _import(self, csv_text: str, mode: UpdateMode | None) -> ImportResult:
        return self.synchronizer.import_csv(
            csv_text,
            mode or self.mode,
            self.source.separator,
        )

    async def sync(
        self,
        *,
        use_cache_on_failure: bool = False,
        mode: UpdateMode | None = None,
    ) -> SyncOutcome:
        """Fetch the remote table and import it.

        With ``use_cache_on_failure`` a failed fetch falls back to the cached
        copy; otherwise the store is left as it was.
        """

        try:
            csv_text = await self.fetcher.fetch(self.source)
        except ConfigurationError as error:
            logger.warning("Translation table endpoint misconfigured: %s", error)
            return SyncOutcome(origin=ORIGIN_NONE, error=error)
        except FetchError as error:
            logger.error("Error downloading translation table: %s", error)
            if not use_cache_on_failure:
                return SyncOutcome(origin=ORIGIN_NONE, error=error)
            outcome = await self.load_cached(mode=mode)
            return SyncOutcome(
                origin=outcome.origin,
                result=outcome.result,
                error=outcome.error,
                fetch_error=error,
            )

        result = self._import(csv_text, mode)
        return SyncOutcome(origin=ORIGIN_REMOTE, result=result, error=result.error)

    async def load_cached(self, *, mode: UpdateMode | None = None) -> SyncOutcome:
        """Import the locally cached table, if one exists."""

        try:
            csv_text = self.fetcher.load_cached(self.source)
        except LocsyncError as error:
            logger.warning("%s", error)
            return SyncOutcome(origin=ORIGIN_NONE, error=error)

        result = self._import(csv_text, mode)
        return SyncOutcome(origin=ORIGIN_CACHE, result=result, error=result.error)

    async def run_startup_sync(self, *, use_cache_on_failure: bool = False) -> SyncOutcome:
        """Wait until collaborators are ready, then run the first sync."""

        if self._ready is not None:
            await self._ready.wait()
        elif self._startup_delay > 0:
            await asyncio.sleep(self._startup_delay)
        return await self.sync(use_cache_on_failure=use_cache_on_failure)


__all__ = [
    "ORIGIN_CACHE",
    "ORIGIN_NONE",
    "ORIGIN_REMOTE",
    "SyncOutcome",
    "SyncService",
]
