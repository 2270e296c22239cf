"""Unit tests for the language session manager."""

from __future__ import annotations

import pytest

from locsync.backend.config.schema import UpdateMode
from locsync.backend.errors import (
    ConfigurationError,
    NoLanguagesAvailableError,
    SessionNotInitializedError,
)
from locsync.backend.localization import TranslationStore
from locsync.backend.services import (
    InMemoryPreferenceStore,
    LanguageSessionManager,
    TranslationStoreSynchronizer,
)

TABLE = "key,English,Spanish,German\nHELLO,Hello,Hola,Hallo\nONLY_EN,Only,,\n"


@pytest.fixture()
def store() -> TranslationStore:
    store = TranslationStore()
    store.import_csv("", TABLE, UpdateMode.REPLACE)
    return store


@pytest.fixture()
def manager(store: TranslationStore, preferences: InMemoryPreferenceStore) -> LanguageSessionManager:
    return LanguageSessionManager(store, preferences, default_language="English")


def test_initialize_prefers_supported_persisted_language(manager, preferences) -> None:
    assert manager.initialize("English", "Spanish") == "Spanish"
    assert manager.get_current_language() == "Spanish"
    assert preferences.get("SelectedLanguage") == "Spanish"


def test_initialize_ignores_unsupported_preference(manager) -> None:
    assert manager.initialize("English", "Klingon") == "English"


def test_initialize_reads_preference_store(store) -> None:
    preferences = InMemoryPreferenceStore({"SelectedLanguage": "German"})
    manager = LanguageSessionManager(store, preferences)

    assert manager.initialize("English") == "German"


def test_initialize_skips_preference_store_when_disabled(store) -> None:
    preferences = InMemoryPreferenceStore({"SelectedLanguage": "German"})
    manager = LanguageSessionManager(store, preferences, load_from_preferences=False)

    assert manager.initialize("English") == "English"


def test_initialize_rejects_unsupported_default(manager) -> None:
    with pytest.raises(ConfigurationError):
        manager.initialize("French")
    assert not manager.initialized


def test_set_language_rejects_unknown_code(manager, preferences) -> None:
    manager.initialize("English")
    saves = preferences.saves

    assert manager.set_language("fr") is False
    assert manager.set_language("") is False
    assert manager.get_current_language() == "English"
    assert preferences.saves == saves


def test_set_language_persists_and_notifies_every_time(manager, preferences) -> None:
    manager.initialize("English")
    notifications: list[str] = []
    manager.subscribe(notifications.append)

    assert manager.set_language("German") is True
    assert manager.set_language("German") is True

    assert manager.get_current_language() == "German"
    assert notifications == ["German", "German"]
    assert preferences.get("SelectedLanguage") == "German"


def test_is_supported_tracks_latest_import(manager, store) -> None:
    assert manager.is_supported("Spanish")

    TranslationStoreSynchronizer(store).import_csv("key,English,French\nHELLO,Hello,Salut\n")

    assert not manager.is_supported("Spanish")
    assert manager.is_supported("French")
    assert manager.get_available_languages() == ["English", "French"]


@pytest.mark.parametrize("start", ["English", "Spanish", "German"])
def test_cycle_visits_every_language_before_repeating(manager, start: str) -> None:
    manager.initialize(start)
    languages = manager.get_available_languages()

    visited = [manager.cycle_to_next_language() for _ in range(len(languages))]

    assert sorted(visited) == sorted(languages)
    assert visited[-1] == start
    offset = languages.index(start)
    assert visited == [languages[(offset + step) % len(languages)] for step in range(1, 4)]


def test_cycle_without_languages_fails(preferences) -> None:
    manager = LanguageSessionManager(TranslationStore(), preferences)

    with pytest.raises(NoLanguagesAvailableError):
        manager.cycle_to_next_language()


def test_cycle_from_stale_language_selects_first(manager, store) -> None:
    manager.initialize("Spanish")
    # Import without a refresh broadcast so the session keeps the stale code.
    store.import_csv("", "key,German,English\nHELLO,Hallo,Hello\n", UpdateMode.REPLACE)

    assert manager.cycle_to_next_language() == "German"


def test_replace_import_dropping_language_falls_back_to_default(manager, store) -> None:
    manager.initialize("English", "Spanish")
    notifications: list[str] = []
    manager.subscribe(notifications.append)

    TranslationStoreSynchronizer(store).import_csv("key,German,English\nHELLO,Hallo,Hello\n")

    assert manager.get_current_language() == "English"
    assert notifications == ["English"]


def test_replace_import_selects_first_language_when_default_missing(manager, store) -> None:
    manager.initialize("English")

    TranslationStoreSynchronizer(store).import_csv("key,German,Spanish\nHELLO,Hallo,Hola\n")

    assert manager.get_current_language() == "German"


def test_refresh_starts_deferred_session(preferences) -> None:
    store = TranslationStore()
    manager = LanguageSessionManager(store, preferences, default_language="English")
    with pytest.raises(ConfigurationError):
        manager.initialize()

    TranslationStoreSynchronizer(store).import_csv(TABLE)

    assert manager.get_current_language() == "English"


def test_translate_current_language(manager) -> None:
    manager.initialize("Spanish")

    assert manager.translate("HELLO") == "Hola"
    assert manager.translate("ONLY_EN") == "ONLY_EN"
    assert manager.translate("MISSING") == "MISSING"
    assert manager.translate("") == ""


def test_operations_require_initialisation(manager) -> None:
    with pytest.raises(SessionNotInitializedError):
        manager.get_current_language()
    with pytest.raises(SessionNotInitializedError):
        manager.translate("HELLO")


def test_set_language_requires_initialisation(manager, preferences) -> None:
    with pytest.raises(SessionNotInitializedError):
        manager.set_language("German")

    assert not manager.initialized
    assert preferences.saves == 0


def test_cycle_requires_initialisation(manager) -> None:
    with pytest.raises(SessionNotInitializedError):
        manager.cycle_to_next_language()

    assert not manager.initialized


def test_initialize_after_rejected_set_language_reads_preference(store) -> None:
    preferences = InMemoryPreferenceStore({"SelectedLanguage": "Spanish"})
    manager = LanguageSessionManager(store, preferences, default_language="English")

    with pytest.raises(SessionNotInitializedError):
        manager.set_language("German")

    assert manager.initialize() == "Spanish"


def test_close_stops_following_store_refreshes(manager, store) -> None:
    manager.initialize("Spanish")
    manager.close()

    TranslationStoreSynchronizer(store).import_csv("key,German,English\nHELLO,Hallo,Hello\n")

    assert manager.get_current_language() == "Spanish"
