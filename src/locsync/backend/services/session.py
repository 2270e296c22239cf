"""Active-language session backed by the translation store."""

from __future__ import annotations

import logging
from threading import RLock
from typing import Callable

from locsync.backend.errors import (
    ConfigurationError,
    NoLanguagesAvailableError,
    SessionNotInitializedError,
)
from locsync.backend.events import EventChannel
from locsync.backend.localization import TranslationStore
from locsync.backend.services.preferences import PreferenceStore

logger = logging.getLogger(__name__)

DEFAULT_PREFERENCE_KEY = "SelectedLanguage"


class LanguageSessionManager:
    """Hold the current language, persist it and announce changes.

    The manager only reads the store. It listens to the store's refresh
    broadcast so a language dropped by an import is replaced: first by the
    configured default, otherwise by the first known language.
    """

    def __init__(
        self,
        store: TranslationStore,
        preferences: PreferenceStore,
        *,
        default_language: str | None = None,
        preference_key: str = DEFAULT_PREFERENCE_KEY,
        load_from_preferences: bool = True,
    ) -> None:
        self._store = store
        self._preferences = preferences
        self._default_language = default_language
        self._preference_key = preference_key
        self._load_from_preferences = load_from_preferences
        self._current: str | None = None
        self._lock = RLock()
        self.language_changed: EventChannel[str] = EventChannel("language changed")
        self._unsubscribe = store.subscribe_refresh(self._on_store_refresh)

    @property
    def initialized(self) -> bool:
        return self._current is not None

    def initialize(
        self,
        default_language: str | None = None,
        persisted_preference: str | None = None,
    ) -> str:
        """Select the starting language and return it.

        A supported persisted preference wins. When ``persisted_preference``
        is ``None`` the preference store is consulted, if enabled. Otherwise
        the default is used and must itself be supported.
        """

        default = default_language or self._default_language
        with self._lock:
            if self._current is not None:
                return self._current

            preference = persisted_preference
            if preference is None and self._load_from_preferences:
                preference = self._preferences.get(self._preference_key)

            if preference and self.is_supported(preference):
                self._default_language = default
                self._apply(preference)
                return preference
            if preference:
                logger.warning("Persisted language '%s' is not supported; using default", preference)

            if not default or not self.is_supported(default):
                raise ConfigurationError(f"Default language '{default}' is not supported")
            self._default_language = default
            self._apply(default)
            return default

    def _require_active(self) -> str:
        if self._current is None:
            raise SessionNotInitializedError("Language session has not been initialized")
        return self._current

    def _apply(self, code: str) -> None:
        self._current = code
        self._preferences.set(self._preference_key, code)
        self._preferences.save()
        logger.info("Language changed to: %s", code)
        self.language_changed.publish(code)

    def set_language(self, code: str) -> bool:
        """Switch to ``code`` and return ``True``, or ``False`` when unsupported."""

        with self._lock:
            self._require_active()
            if not code or not self.is_supported(code):
                logger.warning("Language '%s' is not supported or invalid", code)
                return False
            self._apply(code)
        return True

    def get_current_language(self) -> str:
        return self._require_active()

    def is_supported(self, code: str) -> bool:
        return code in self._store.known_languages()

    def get_available_languages(self) -> list[str]:
        return self._store.known_languages()

    def translate(self, term: str) -> str:
        """Return ``term`` translated to the current language.

        Empty terms yield an empty string and unknown terms are returned
        unchanged.
        """

        if not term:
            logger.warning("Translation term is null or empty: %r", term)
            return ""
        language = self._require_active()
        found, text = self._store.try_get_translation(term, language)
        if not found:
            logger.warning("Translation term not found: %s", term)
            return term
        return text

    def cycle_to_next_language(self) -> str:
        """Advance to the next known language in store order and return it."""

        with self._lock:
            languages = self._store.known_languages()
            if not languages:
                logger.warning("No languages available in the translation store")
                raise NoLanguagesAvailableError("No languages available")

            current = self._require_active()
            if current in languages:
                target = languages[(languages.index(current) + 1) % len(languages)]
            else:
                target = languages[0]
            self._apply(target)
            return target

    def subscribe(self, listener: Callable[[str], None]) -> Callable[[], None]:
        """Register ``listener`` for language-change notifications."""

        return self.language_changed.subscribe(listener)

    def _on_store_refresh(self, store: TranslationStore) -> None:
        languages = store.known_languages()
        with self._lock:
            if self._current is None:
                if self._default_language:
                    try:
                        self.initialize()
                    except ConfigurationError as error:
                        logger.warning("Language session not started after refresh: %s", error)
                return

            if self._current in languages or not languages:
                return

            stale = self._current
            if self._default_language in languages:
                replacement = self._default_language
            else:
                replacement = languages[0]
            logger.warning(
                "Language '%s' is no longer available; switching to '%s'", stale, replacement
            )
            self._apply(replacement)

    def close(self) -> None:
        """Stop listening to store refreshes."""

        self._unsubscribe()


__all__ = ["DEFAULT_PREFERENCE_KEY", "LanguageSessionManager"]
