"""The ``/fileinfo`` listing endpoint."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from flask import Blueprint, request

from mediasync._errors import MediaSyncError
from mediasync.server._http import error_response, json_response

if TYPE_CHECKING:
    from flask import Response

    from mediasync._listing import ListingSource

log = logging.getLogger(__name__)

FILEINFO_PATH = "/fileinfo"


def create_fileinfo_blueprint(source: ListingSource) -> Blueprint:
    """Serve the file listing produced by ``source`` as a JSON array."""
    bp = Blueprint("fileinfo", __name__)

    @bp.route(FILEINFO_PATH, methods=["GET"])
    def fileinfo() -> Response:
        log.info("received %s request for %s", request.method, request.path)
        try:
            files = source.list_files()
        except (MediaSyncError, OSError) as exc:
            log.error("couldn't list files: %s", exc)
            return error_response(str(exc), 500)
        return json_response(files, 200)

    return bp
