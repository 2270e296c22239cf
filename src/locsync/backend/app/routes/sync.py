"""Endpoints triggering remote and cached table imports."""

from __future__ import annotations

import asyncio
from http import HTTPStatus
from typing import Any

from flask import Blueprint, jsonify

from locsync.backend.app.context import get_context
from locsync.backend.app.http import parse_json_body, status_for_error
from locsync.backend.app.models import SyncRequest
from locsync.backend.services import SyncOutcome

blueprint = Blueprint("sync", __name__, url_prefix="/api/v1/sync")


def _outcome_response(outcome: SyncOutcome) -> tuple[Any, int]:
    if outcome.ok:
        return jsonify(outcome.as_dict()), HTTPStatus.OK
    if outcome.error is None:  # pragma: no cover - outcomes always carry an error on failure
        return jsonify(outcome.as_dict()), HTTPStatus.INTERNAL_SERVER_ERROR
    _, status = status_for_error(outcome.error)
    return jsonify(outcome.as_dict()), status


@blueprint.post("")
def trigger_sync() -> tuple[Any, int]:
    """Download the remote table and import it."""

    options = parse_json_body(SyncRequest)
    context = get_context()
    outcome = asyncio.run(
        context.sync_service.sync(
            use_cache_on_failure=options.use_cache_on_failure,
            mode=options.mode,
        )
    )
    return _outcome_response(outcome)


@blueprint.post("/cached")
def import_cached() -> tuple[Any, int]:
    """Import the table cached by the last successful download."""

    options = parse_json_body(SyncRequest)
    outcome = asyncio.run(get_context().sync_service.load_cached(mode=options.mode))
    return _outcome_response(outcome)
