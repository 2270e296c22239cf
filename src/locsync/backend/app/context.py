"""Explicitly constructed service graph shared by the HTTP surface and CLI."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import requests
from flask import current_app

from locsync.backend.config.schema import AppSettings
from locsync.backend.errors import ConfigurationError
from locsync.backend.localization import TranslationStore
from locsync.backend.services import (
    LanguageSessionManager,
    PreferenceStore,
    SyncService,
    TableFetcher,
    TranslationStoreSynchronizer,
    build_preference_store,
)

logger = logging.getLogger(__name__)

EXTENSION_KEY = "locsync"


@dataclass
class LocalizationContext:
    """The store plus every service operating on it."""

    settings: AppSettings
    store: TranslationStore
    preferences: PreferenceStore
    fetcher: TableFetcher
    synchronizer: TranslationStoreSynchronizer
    session: LanguageSessionManager
    sync_service: SyncService

    def close(self) -> None:
        """Detach the session from the store once the graph is no longer used."""

        self.session.close()


def build_context(
    settings: AppSettings,
    *,
    http_session: requests.Session | None = None,
    preferences: PreferenceStore | None = None,
) -> LocalizationContext:
    """Wire the services for ``settings`` around a fresh translation store."""

    store = TranslationStore()
    if preferences is None:
        preferences = build_preference_store(settings.session.preferences_path)

    fetcher = TableFetcher(session=http_session, timeout=settings.sync.fetch_timeout_seconds)
    synchronizer = TranslationStoreSynchronizer(store, key_prefix=settings.sync.key_prefix)
    session = LanguageSessionManager(
        store,
        preferences,
        default_language=settings.session.default_language,
        preference_key=settings.session.preference_key,
        load_from_preferences=settings.session.load_from_preferences,
    )
    sync_service = SyncService(
        fetcher,
        synchronizer,
        settings.sync.source,
        mode=settings.sync.update_mode,
        startup_delay=settings.sync.startup_delay_seconds,
    )
    return LocalizationContext(
        settings=settings,
        store=store,
        preferences=preferences,
        fetcher=fetcher,
        synchronizer=synchronizer,
        session=session,
        sync_service=sync_service,
    )


async def warm_start(context: LocalizationContext) -> None:
    """Seed the store from the cached table and start the language session."""

    outcome = await context.sync_service.load_cached()
    if outcome.ok:
        logger.info("Translation store seeded from cache")

    if not context.session.initialized:
        try:
            context.session.initialize()
        except ConfigurationError as error:
            logger.warning("Language session deferred until the first sync: %s", error)


def get_context() -> LocalizationContext:
    """Return the context attached to the current Flask application."""

    return current_app.extensions[EXTENSION_KEY]


__all__ = [
    "EXTENSION_KEY",
    "LocalizationContext",
    "build_context",
    "get_context",
    "warm_start",
]
