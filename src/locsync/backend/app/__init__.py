"""Application factory for the locsync HTTP surface."""

import asyncio
import logging

from flask import Flask, jsonify
from pydantic import ValidationError
from werkzeug.exceptions import BadRequest

from locsync.backend.config import AppSettings, load_settings
from locsync.backend.errors import LocsyncError
from locsync.backend.version import get_project_version

from .context import EXTENSION_KEY, LocalizationContext, build_context, warm_start
from .http import problem_from_error, problem_response
from .models import format_validation_error
from .routes import register_routes

logger = logging.getLogger(__name__)


def create_app(
    settings: AppSettings | None = None,
    *,
    context: LocalizationContext | None = None,
    warm: bool = True,
) -> Flask:
    """Create and configure the Flask application instance.

    ``context`` lets callers inject a pre-wired service graph (tests pass one
    with a fake HTTP session). With ``warm`` the store is seeded from the
    cached table and the language session is started before serving.
    """

    app = Flask(__name__)

    if context is None:
        context = build_context(settings or load_settings())
    app.extensions[EXTENSION_KEY] = context

    if warm:
        asyncio.run(warm_start(context))

    register_routes(app)

    @app.route("/health", methods=["GET"])
    def health_check():
        """Simple health check endpoint for infrastructure monitoring."""

        session = context.session
        payload = {
            "status": "ok",
            "version": get_project_version(),
            "languages": context.store.known_languages(),
            "terms": len(context.store),
            "current_language": session.get_current_language() if session.initialized else None,
        }
        return jsonify(payload)

    @app.errorhandler(BadRequest)
    def handle_bad_request(error: BadRequest):
        """Return consistent JSON responses for malformed payloads."""

        message = error.description or "Invalid request"
        return problem_response("bad_request", status=400, message=message).to_response()

    @app.errorhandler(ValidationError)
    def handle_validation_error(error: ValidationError):
        """Surface request model validation failures to clients."""

        return problem_response(
            "validation_error", status=400, message=format_validation_error(error)
        ).to_response()

    @app.errorhandler(LocsyncError)
    def handle_locsync_error(error: LocsyncError):
        """Translate domain failures into problem responses."""

        logger.warning("Request failed: %s", error)
        return problem_from_error(error).to_response()

    return app
