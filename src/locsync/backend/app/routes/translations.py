"""Expose translated terms and catalogues to front-end consumers."""

from __future__ import annotations

from http import HTTPStatus
from typing import Any

from flask import Blueprint, jsonify, request

from locsync.backend.app.context import get_context
from locsync.backend.localization import export_catalogue

blueprint = Blueprint("translations", __name__, url_prefix="/api/v1/translations")


@blueprint.get("/")
def get_catalogue() -> tuple[Any, int]:
    """Return every translation for the requested or current language."""

    context = get_context()
    session = context.session
    language = request.args.get("language")
    if not language and session.initialized:
        language = session.get_current_language()

    payload = export_catalogue(
        context.store,
        language,
        fallback_language=context.settings.session.default_language,
    )
    return jsonify(payload), HTTPStatus.OK


@blueprint.get("/<path:term>")
def translate_term(term: str) -> tuple[Any, int]:
    """Translate a single term into the current language."""

    context = get_context()
    language = context.session.get_current_language()
    found, _ = context.store.try_get_translation(term, language)
    payload = {
        "term": term,
        "language": language,
        "text": context.session.translate(term),
        "found": found,
    }
    return jsonify(payload), HTTPStatus.OK
