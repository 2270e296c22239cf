"""Service-layer helpers for fetching, importing and language sessions."""

from .fetcher import TableFetcher
from .preferences import (
    InMemoryPreferenceStore,
    PreferenceStore,
    SQLitePreferenceStore,
    build_preference_store,
)
from .session import LanguageSessionManager
from .sync_service import SyncOutcome, SyncService
from .synchronizer import ImportResult, TranslationStoreSynchronizer

__all__ = [
    "ImportResult",
    "InMemoryPreferenceStore",
    "LanguageSessionManager",
    "PreferenceStore",
    "SQLitePreferenceStore",
    "SyncOutcome",
    "SyncService",
    "TableFetcher",
    "TranslationStoreSynchronizer",
    "build_preference_store",
]
