"""HTTP helper utilities shared across Flask blueprints."""

from __future__ import annotations

from dataclasses import dataclass
from http import HTTPStatus
from typing import Any, Mapping, TypeVar

from flask import jsonify, request
from pydantic import BaseModel
from werkzeug.exceptions import BadRequest

from locsync.backend.errors import (
    CacheMissError,
    CacheReadError,
    ConfigurationError,
    CsvImportError,
    EmptyInputError,
    FetchError,
    LocsyncError,
    NoLanguagesAvailableError,
    SessionNotInitializedError,
)

_ERROR_CODES: tuple[tuple[type[LocsyncError], str, int], ...] = (
    (ConfigurationError, "configuration_error", HTTPStatus.INTERNAL_SERVER_ERROR),
    (FetchError, "fetch_failed", HTTPStatus.BAD_GATEWAY),
    (CacheMissError, "cache_missing", HTTPStatus.NOT_FOUND),
    (CacheReadError, "cache_unreadable", HTTPStatus.INTERNAL_SERVER_ERROR),
    (EmptyInputError, "empty_input", HTTPStatus.UNPROCESSABLE_ENTITY),
    (CsvImportError, "import_failed", HTTPStatus.UNPROCESSABLE_ENTITY),
    (NoLanguagesAvailableError, "no_languages", HTTPStatus.CONFLICT),
    (SessionNotInitializedError, "session_not_initialized", HTTPStatus.CONFLICT),
)


@dataclass(frozen=True)
class ProblemResponse:
    """Lightweight representation of an RFC 7807-style error payload."""

    error: str
    status: int
    message: str | None = None
    extra: Mapping[str, Any] | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return the serialisable payload for this problem response."""

        payload: dict[str, Any] = {"error": self.error}
        if self.message:
            payload["message"] = self.message
        if self.extra:
            payload.update(self.extra)
        return payload

    def to_response(self) -> tuple[Any, int]:
        """Convert the problem payload into a Flask response tuple."""

        return jsonify(self.as_dict()), self.status


def problem_response(
    error: str,
    *,
    status: int,
    message: str | None = None,
    **extra: Any,
) -> ProblemResponse:
    """Convenience factory mirroring Flask's ``jsonify`` interface."""

    additional: Mapping[str, Any] | None = extra or None
    return ProblemResponse(error=error, status=status, message=message, extra=additional)


def status_for_error(error: LocsyncError) -> tuple[str, int]:
    """Map a domain error to its problem code and HTTP status."""

    for error_type, code, status in _ERROR_CODES:
        if isinstance(error, error_type):
            return code, int(status)
    return "internal_error", int(HTTPStatus.INTERNAL_SERVER_ERROR)


def problem_from_error(error: LocsyncError, **extra: Any) -> ProblemResponse:
    code, status = status_for_error(error)
    return problem_response(code, status=status, message=str(error), **extra)


ModelT = TypeVar("ModelT", bound=BaseModel)


def parse_json_body(model: type[ModelT]) -> ModelT:
    """Validate the JSON request body against ``model``.

    A missing body is treated as an empty object so every field falls back to
    its default.
    """

    data = request.get_json(silent=True)
    if data is None:
        if request.get_data(cache=True):
            raise BadRequest("Request body must be valid JSON")
        data = {}
    if not isinstance(data, Mapping):
        raise BadRequest("Request JSON must be an object")
    return model.model_validate(dict(data))


__all__ = [
    "ProblemResponse",
    "parse_json_body",
    "problem_from_error",
    "problem_response",
    "status_for_error",
]
