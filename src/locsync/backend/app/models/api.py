"""Pydantic models describing the public API request bodies."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from locsync.backend.config.schema import UpdateMode

__all__ = [
    "LanguageChangeRequest",
    "SyncRequest",
    "format_validation_error",
]


class SyncRequest(BaseModel):
    """Options accepted when triggering a synchronisation."""

    model_config = ConfigDict(extra="forbid")

    use_cache_on_failure: bool = False
    mode: UpdateMode | None = None

    @field_validator("mode", mode="before")
    @classmethod
    def _coerce_mode(cls, value: Any) -> Any:
        if isinstance(value, str):
            return UpdateMode(value)
        return value


class LanguageChangeRequest(BaseModel):
    """Body of a request selecting the active language."""

    model_config = ConfigDict(extra="forbid")

    language: str


def format_validation_error(error: ValidationError) -> str:
    """Return a concise human-readable description of validation issues."""

    messages: list[str] = []
    for issue in error.errors():
        location = ".".join(str(part) for part in issue.get("loc", ()))
        message = issue.get("msg", "Invalid value")
        if location:
            messages.append(f"{location}: {message}")
        else:
            messages.append(message)

    details = "; ".join(messages) if messages else str(error)
    return f"Invalid request payload: {details}"
