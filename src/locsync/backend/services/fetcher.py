"""Download of remote translation tables with a local cache copy."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from warnings import warn

import requests

from locsync.backend.config.schema import RemoteTableSource
from locsync.backend.errors import (
    CacheMissError,
    CacheReadError,
    CacheWriteWarning,
    FetchError,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10.0


def _decode(body: bytes, *, origin: str) -> str:
    try:
        return body.decode("utf-8")
    except UnicodeDecodeError as error:
        raise FetchError(f"{origin} is not valid UTF-8: {error}") from error


class TableFetcher:
    """Fetch CSV tables over HTTP, once per call, and mirror them to disk.

    The fetcher never retries and never falls back to the cache on its own;
    both are decisions for the caller.
    """

    def __init__(
        self,
        *,
        session: requests.Session | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        if timeout <= 0:
            raise ValueError("timeout must be positive")
        self._session = session or requests.Session()
        self._timeout = timeout

    def _download(self, url: str) -> bytes:
        try:
            response = self._session.get(url, timeout=self._timeout)
            response.raise_for_status()
        except requests.RequestException as error:
            status = error.response.status_code if error.response is not None else None
            raise FetchError(str(error), status_code=status) from error
        return response.content

    async def fetch(self, source: RemoteTableSource) -> str:
        """Download the table described by ``source`` and return its text.

        Raises :class:`ConfigurationError` when the endpoint cannot be resolved
        and :class:`FetchError` on transport failures or non-success statuses.
        A failed cache write only emits :class:`CacheWriteWarning`.
        """

        url = source.resolved_endpoint
        logger.info("Downloading translation table from %s", url)

        body = await asyncio.to_thread(self._download, url)
        text = _decode(body, origin="Downloaded table")
        self._write_cache(source.cache_path, body)
        logger.debug("Downloaded %d byte(s) from %s", len(body), url)
        return text

    def _write_cache(self, path: Path, body: bytes) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(body)
        except OSError as error:
            logger.warning("Failed to save translation table to %s: %s", path, error)
            warn(
                CacheWriteWarning(f"Failed to save translation table to {path}: {error}"),
                stacklevel=3,
            )
            return
        logger.debug("Translation table cached at %s", path)

    def load_cached(self, source: RemoteTableSource) -> str:
        """Return the previously cached table for ``source``."""

        path = source.cache_path
        if not path.exists():
            raise CacheMissError(f"Local translation table not found at: {path}")

        try:
            body = path.read_bytes()
        except OSError as error:
            raise CacheReadError(f"Error reading local translation table: {error}") from error

        try:
            return body.decode("utf-8")
        except UnicodeDecodeError as error:
            raise CacheReadError(f"Cached translation table is not valid UTF-8: {error}") from error


__all__ = ["DEFAULT_TIMEOUT_SECONDS", "TableFetcher"]
