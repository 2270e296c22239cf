"""Translation store and catalogue helpers."""

from .catalog import (
    ImportStats,
    TranslationEntry,
    TranslationStore,
    Translator,
    export_catalogue,
    parse_csv_table,
)

__all__ = [
    "ImportStats",
    "TranslationEntry",
    "TranslationStore",
    "Translator",
    "export_catalogue",
    "parse_csv_table",
]
