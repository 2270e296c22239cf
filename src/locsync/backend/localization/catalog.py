"""In-memory translation store populated from CSV translation tables."""

from __future__ import annotations

import csv
import io
import logging
import re
from dataclasses import dataclass, field
from threading import RLock
from types import MappingProxyType
from typing import Any, Callable, Mapping

from locsync.backend.config.schema import UpdateMode
from locsync.backend.errors import CsvImportError
from locsync.backend.events import EventChannel

logger = logging.getLogger(__name__)

METADATA_COLUMNS = frozenset({"type", "desc", "description"})

_LANGUAGE_CODE_SUFFIX = re.compile(r"^(?P<name>.*?)\s*\[[^\]]*\]$")


@dataclass(frozen=True)
class Translator:
    """Callable helper for retrieving localized strings."""

    language: str | None
    messages: Mapping[str, str]
    fallback_language: str | None = None
    fallback: Mapping[str, str] = field(default_factory=dict)

    def __call__(self, key: str) -> str:
        return self.messages.get(key) or self.fallback.get(key, key)


@dataclass(frozen=True)
class TranslationEntry:
    """A term key with its per-language values."""

    key: str
    translations: Mapping[str, str] = field(default_factory=dict)

    def get(self, language: str) -> str | None:
        """Return the text for ``language`` or ``None`` when untranslated."""

        value = self.translations.get(language)
        return value if value else None


@dataclass(frozen=True)
class ParsedTable:
    """CSV content parsed into language columns and term rows."""

    languages: tuple[str, ...]
    entries: Mapping[str, Mapping[str, str]]


@dataclass(frozen=True)
class ImportStats:
    """Counts describing what a single import changed."""

    added: int
    updated: int
    removed: int
    languages: tuple[str, ...]


def normalise_language(header: str) -> str:
    """Strip surrounding whitespace and a trailing ``[code]`` from a header cell."""

    cleaned = header.strip()
    match = _LANGUAGE_CODE_SUFFIX.match(cleaned)
    if match and match.group("name"):
        return match.group("name").strip()
    return cleaned


def parse_csv_table(csv_text: str, separator: str = ",", prefix: str = "") -> ParsedTable:
    """Parse CSV content into a :class:`ParsedTable`.

    The first non-empty row is the header: column zero holds term keys,
    ``Type``/``Desc``/``Description`` columns are ignored and every other
    column is a language. Empty cells mean the term is untranslated for that
    language. When a key repeats, the last row wins.
    """

    text = csv_text.lstrip("\ufeff")
    try:
        rows = list(csv.reader(io.StringIO(text), delimiter=separator))
    except csv.Error as error:
        raise CsvImportError(f"Malformed CSV content: {error}") from error

    rows = [row for row in rows if any(cell.strip() for cell in row)]
    if not rows:
        raise CsvImportError("CSV content has no header row")

    header, body = rows[0], rows[1:]
    columns: list[tuple[int, str]] = []
    seen: set[str] = set()
    for index, cell in enumerate(header[1:], start=1):
        name = normalise_language(cell)
        if not name or name.lower() in METADATA_COLUMNS:
            continue
        if name in seen:
            raise CsvImportError(f"Duplicate language column: {name}")
        seen.add(name)
        columns.append((index, name))

    if not columns:
        raise CsvImportError("CSV header does not declare any language column")

    entries: dict[str, dict[str, str]] = {}
    for row in body:
        key = row[0].strip() if row else ""
        if not key:
            continue
        values: dict[str, str] = {}
        for index, language in columns:
            if index < len(row) and row[index] != "":
                values[language] = row[index]
        entries[f"{prefix}{key}"] = values

    return ParsedTable(languages=tuple(name for _, name in columns), entries=entries)


class TranslationStore:
    """Thread-safe store of translation entries and known languages.

    Imports build the next state on the side and swap it in under the lock,
    so readers only ever observe a complete pre-import or post-import state.
    """

    def __init__(self) -> None:
        self._lock = RLock()
        self._languages: tuple[str, ...] = ()
        self._entries: Mapping[str, Mapping[str, str]] = MappingProxyType({})
        self._refresh: EventChannel[TranslationStore] = EventChannel("store refresh")

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def known_languages(self) -> list[str]:
        with self._lock:
            return list(self._languages)

    def entries(self) -> dict[str, dict[str, str]]:
        """Return a detached copy of every entry."""

        with self._lock:
            return {key: dict(values) for key, values in self._entries.items()}

    def get_entry(self, key: str) -> TranslationEntry | None:
        with self._lock:
            values = self._entries.get(key)
        if values is None:
            return None
        return TranslationEntry(key=key, translations=dict(values))

    def try_get_translation(self, term: str, language: str) -> tuple[bool, str]:
        """Return ``(found, text)`` for ``term`` in ``language``."""

        entry = self.get_entry(term)
        text = entry.get(language) if entry is not None else None
        if text is None:
            return False, ""
        return True, text

    def translator(self, language: str | None, fallback_language: str | None = None) -> Translator:
        """Return a translator bound to ``language`` with an optional fallback."""

        with self._lock:
            entries = self._entries
        messages: dict[str, str] = {}
        if language:
            messages = {
                key: values[language] for key, values in entries.items() if values.get(language)
            }
        fallback: dict[str, str] = {}
        if fallback_language and fallback_language != language:
            fallback = {
                key: values[fallback_language]
                for key, values in entries.items()
                if values.get(fallback_language)
            }
        return Translator(
            language=language,
            messages=messages,
            fallback_language=fallback_language,
            fallback=fallback,
        )

    def import_csv(
        self,
        prefix: str,
        csv_text: str,
        mode: UpdateMode,
        separator: str = ",",
    ) -> ImportStats:
        """Parse ``csv_text`` and apply it according to ``mode``.

        Raises :class:`CsvImportError` without touching the store when the
        content cannot be parsed.
        """

        mode = UpdateMode(mode)
        table = parse_csv_table(csv_text, separator=separator, prefix=prefix)

        with self._lock:
            current = self._entries
            staged: dict[str, Mapping[str, str]]
            added = updated = removed = 0

            if mode is UpdateMode.REPLACE:
                staged = {key: dict(values) for key, values in table.entries.items()}
                languages = table.languages
                removed = sum(1 for key in current if key not in staged)
                for key, values in staged.items():
                    if key not in current:
                        added += 1
                    elif dict(current[key]) != values:
                        updated += 1
            else:
                staged = dict(current)
                for key, values in table.entries.items():
                    existing = current.get(key)
                    if existing is None:
                        staged[key] = dict(values)
                        added += 1
                    elif mode is UpdateMode.MERGE:
                        merged = {**existing, **values}
                        if merged != dict(existing):
                            staged[key] = merged
                            updated += 1
                languages = self._languages + tuple(
                    name for name in table.languages if name not in self._languages
                )

            self._entries = MappingProxyType(staged)
            self._languages = languages

        logger.debug(
            "Imported %d row(s) in %s mode: %d added, %d updated, %d removed",
            len(table.entries),
            mode.value,
            added,
            updated,
            removed,
        )
        return ImportStats(added=added, updated=updated, removed=removed, languages=languages)

    def subscribe_refresh(self, listener: Callable[[TranslationStore], None]) -> Callable[[], None]:
        """Register a listener run by :meth:`refresh_all`."""

        return self._refresh.subscribe(listener)

    def refresh_all(self) -> None:
        """Ask every registered view to recompute from the current store."""

        self._refresh.publish(self)


def export_catalogue(
    store: TranslationStore,
    language: str | None,
    *,
    fallback_language: str | None = None,
) -> dict[str, Any]:
    """Expose a language's translations together with the fallback catalogue."""

    languages = store.known_languages()
    selected = language if language in languages else (languages[0] if languages else None)
    translator = store.translator(selected, fallback_language)

    return {
        "language": translator.language,
        "available_languages": languages,
        "messages": dict(translator.messages),
        "fallback": {"language": fallback_language, "messages": dict(translator.fallback)},
    }


__all__ = [
    "ImportStats",
    "METADATA_COLUMNS",
    "ParsedTable",
    "TranslationEntry",
    "TranslationStore",
    "Translator",
    "export_catalogue",
    "normalise_language",
    "parse_csv_table",
]
