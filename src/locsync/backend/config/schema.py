"""Pydantic models describing the synchronisation and session settings."""

from __future__ import annotations

import re
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from locsync.backend.errors import ConfigurationError

DEFAULT_ENDPOINT_TEMPLATE = (
    "https://docs.google.com/spreadsheets/u/1/d/${id}/export"
    "?format=csv&id=${id}&gid=${gid}"
)

TABLE_ID_PLACEHOLDER = "${id}"
GRID_ID_PLACEHOLDER = "${gid}"

_UNRESOLVED_PLACEHOLDER = re.compile(r"\$\{[^}]*\}")


class UpdateMode(str, Enum):
    """Policy deciding how an imported table combines with existing entries."""

    REPLACE = "Replace"
    ADD_ONLY = "AddOnly"
    MERGE = "Merge"

    @classmethod
    def _missing_(cls, value: object) -> UpdateMode | None:
        if not isinstance(value, str):
            return None
        wanted = value.replace("_", "").replace("-", "").strip().lower()
        for member in cls:
            if member.value.lower() == wanted:
                return member
        return None


def resolve_endpoint(template: str, table_id: str, grid_id: str) -> str:
    """Substitute the table and grid identifiers into ``template``.

    Raises :class:`ConfigurationError` when a placeholder has no identifier to
    fill it, when an unknown placeholder survives substitution, or when the
    resulting endpoint is empty.
    """

    template = (template or "").strip()
    if TABLE_ID_PLACEHOLDER in template and not table_id.strip():
        raise ConfigurationError("Endpoint template requires a table identifier")
    if GRID_ID_PLACEHOLDER in template and not grid_id.strip():
        raise ConfigurationError("Endpoint template requires a grid identifier")

    resolved = template.replace(TABLE_ID_PLACEHOLDER, table_id.strip()).replace(
        GRID_ID_PLACEHOLDER, grid_id.strip()
    )
    if not resolved:
        raise ConfigurationError("Remote table endpoint is not specified")

    leftover = _UNRESOLVED_PLACEHOLDER.search(resolved)
    if leftover:
        raise ConfigurationError(
            f"Endpoint contains an unresolved placeholder: {leftover.group(0)}"
        )
    return resolved


class ImmutableModel(BaseModel):
    """Base class that freezes instances and rejects unknown fields."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)


class RemoteTableSource(ImmutableModel):
    """Where a translation table is downloaded from and cached to."""

    endpoint_template: str = Field(default=DEFAULT_ENDPOINT_TEMPLATE, alias="endpoint")
    table_id: str = ""
    grid_id: str = ""
    cache_path: Path = Path("localization.csv")
    separator: str = ","

    @field_validator("endpoint_template", mode="before")
    @classmethod
    def _strip_template(cls, value: Any) -> Any:
        # Spreadsheet export links are often pasted with trailing line breaks.
        return value.strip() if isinstance(value, str) else value

    @field_validator("table_id", "grid_id", mode="before")
    @classmethod
    def _coerce_identifier(cls, value: Any) -> str:
        if value is None:
            return ""
        return str(value).strip()

    @field_validator("cache_path", mode="after")
    @classmethod
    def _expand_cache_path(cls, value: Path) -> Path:
        return value.expanduser()

    @field_validator("separator")
    @classmethod
    def _validate_separator(cls, value: str) -> str:
        if len(value) != 1:
            raise ConfigurationError("CSV separator must be a single character")
        if value in {'"', "\r", "\n"}:
            raise ConfigurationError("CSV separator cannot be a quote or line break")
        return value

    @property
    def resolved_endpoint(self) -> str:
        """Return the endpoint with identifiers substituted."""

        return resolve_endpoint(self.endpoint_template, self.table_id, self.grid_id)


class SyncSettings(ImmutableModel):
    """Options controlling download and import of the remote table."""

    source: RemoteTableSource = Field(default_factory=RemoteTableSource)
    update_mode: UpdateMode = UpdateMode.REPLACE
    key_prefix: str = ""
    fetch_timeout_seconds: float = Field(default=10.0, gt=0)
    startup_delay_seconds: float = Field(default=1.0, ge=0)

    @field_validator("update_mode", mode="before")
    @classmethod
    def _coerce_update_mode(cls, value: Any) -> Any:
        if isinstance(value, str):
            try:
                return UpdateMode(value)
            except ValueError as error:
                raise ConfigurationError(f"Unknown update mode: {value}") from error
        return value


class SessionSettings(ImmutableModel):
    """Options controlling the active language session."""

    default_language: str = "English"
    load_from_preferences: bool = True
    preference_key: str = "SelectedLanguage"
    preferences_path: Path | None = None

    @field_validator("default_language", "preference_key")
    @classmethod
    def _require_text(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ConfigurationError("Session settings require non-empty values")
        return value

    @field_validator("preferences_path", mode="after")
    @classmethod
    def _expand_preferences_path(cls, value: Path | None) -> Path | None:
        return value.expanduser() if value is not None else None


class AppSettings(ImmutableModel):
    """Top-level configuration document."""

    sync: SyncSettings = Field(default_factory=SyncSettings)
    session: SessionSettings = Field(default_factory=SessionSettings)


__all__ = [
    "AppSettings",
    "ConfigurationError",
    "DEFAULT_ENDPOINT_TEMPLATE",
    "GRID_ID_PLACEHOLDER",
    "ImmutableModel",
    "RemoteTableSource",
    "SessionSettings",
    "SyncSettings",
    "TABLE_ID_PLACEHOLDER",
    "UpdateMode",
    "resolve_endpoint",
]
