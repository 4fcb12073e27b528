"""JSON response helpers shared by the HTTP handlers."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from flask import jsonify
from werkzeug.exceptions import HTTPException, MethodNotAllowed

from mediasync._errors import (
    InvalidPath,
    MediaSyncError,
    NotDirectory,
    NotFound,
    NotRegularFile,
    PermissionDenied,
)

if TYPE_CHECKING:
    from flask import Response

_STATUS: tuple[tuple[type[MediaSyncError], int, str | None], ...] = (
    (InvalidPath, 400, None),
    (NotDirectory, 400, None),
    (NotRegularFile, 400, None),
    (PermissionDenied, 403, "forbidden"),
    (NotFound, 404, "file not found"),
)


def json_response(body: Any, status: int = 200) -> Response:
    """Serialize ``body`` as JSON with the given status."""
    response = jsonify(body)
    response.status_code = status
    return response


def error_response(message: str, status: int) -> Response:
    """Build the ``{"error": message}`` envelope."""
    return json_response({"error": message}, status)


def error_from_exception(exc: Exception) -> Response:
    """Map an exception onto a status code and error envelope.

    Request-shape errors become 400, access errors 403, missing paths 404
    and everything else 500.
    """
    for cls, status, message in _STATUS:
        if isinstance(exc, cls):
            return error_response(message or exc.message, status)
    if isinstance(exc, MediaSyncError):
        return error_response(exc.message, 500)
    return error_response(str(exc), 500)


def handle_http_exception(exc: HTTPException) -> Response:
    """Render framework errors (unknown route, bad method) as JSON."""
    if isinstance(exc, MethodNotAllowed):
        response = error_response("method not supported", 405)
        if exc.valid_methods:
            response.headers["Allow"] = ", ".join(exc.valid_methods)
        return response
    return error_response(exc.description or exc.name, exc.code or 500)
