"""Typed request models shared across the blueprints."""

from .api import LanguageChangeRequest, SyncRequest, format_validation_error

__all__ = ["LanguageChangeRequest", "SyncRequest", "format_validation_error"]
