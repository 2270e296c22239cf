"""Endpoints exposing the active language session."""

from __future__ import annotations

from http import HTTPStatus
from typing import Any

from flask import Blueprint, jsonify

from locsync.backend.app.context import get_context
from locsync.backend.app.http import parse_json_body, problem_response
from locsync.backend.app.models import LanguageChangeRequest

blueprint = Blueprint("languages", __name__, url_prefix="/api/v1/languages")


def _session_payload() -> dict[str, Any]:
    session = get_context().session
    return {
        "current": session.get_current_language() if session.initialized else None,
        "available": session.get_available_languages(),
    }


@blueprint.get("")
def list_languages() -> tuple[Any, int]:
    return jsonify(_session_payload()), HTTPStatus.OK


@blueprint.get("/<string:code>")
def get_language_support(code: str) -> tuple[Any, int]:
    """Report whether ``code`` is a known language."""

    supported = get_context().session.is_supported(code)
    return jsonify({"language": code, "supported": supported}), HTTPStatus.OK


@blueprint.put("/current")
def change_language() -> tuple[Any, int]:
    """Select the active language."""

    body = parse_json_body(LanguageChangeRequest)
    if not get_context().session.set_language(body.language):
        return problem_response(
            "unsupported_language",
            status=HTTPStatus.UNPROCESSABLE_ENTITY,
            message=f"Language '{body.language}' is not supported or invalid",
        ).to_response()
    return jsonify(_session_payload()), HTTPStatus.OK


@blueprint.post("/cycle")
def cycle_language() -> tuple[Any, int]:
    """Advance to the next known language."""

    get_context().session.cycle_to_next_language()
    return jsonify(_session_payload()), HTTPStatus.OK
