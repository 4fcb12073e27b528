"""Download and delete endpoints for one served directory."""

from __future__ import annotations

import logging
import os
import stat
from typing import TYPE_CHECKING

from flask import Blueprint, request, send_file

from mediasync._content import compute_checksum
from mediasync._errors import MediaSyncError, NotRegularFile, map_os_error
from mediasync._fsobject import stat_path
from mediasync._path import normalize_prefix, resolve_request_path
from mediasync.server._http import error_from_exception, error_response

if TYPE_CHECKING:
    from flask import Response

    from mediasync._cache import ContentCache

log = logging.getLogger(__name__)

CHECKSUM_HEADER = "X-MediaServer-Checksum"


def create_download_blueprint(
    disk_path: str,
    serve_path: str,
    *,
    cache: ContentCache | None = None,
    name: str = "download",
) -> Blueprint:
    """Serve files below ``disk_path`` at ``serve_path``.

    ``GET``/``HEAD`` stream a file with its SHA-256 in the
    ``X-MediaServer-Checksum`` header; ``DELETE`` removes it.

    :param disk_path: Directory the files live in.
    :param serve_path: URL prefix; a trailing ``/`` is added if missing.
    :param cache: Used for checksums of unchanged files; deleted files are evicted.
    :param name: Blueprint name, unique per application.
    """
    disk_root = os.path.abspath(disk_path)
    prefix = normalize_prefix(serve_path)
    bp = Blueprint(name, __name__)
    methods = ["GET", "HEAD", "DELETE"]
    log.info("starting download handler for %s at %s", disk_root, prefix)

    def checksum_for(target: str, st: os.stat_result) -> str:
        if cache is not None and cache.is_fresh(target, st.st_size, st.st_mtime_ns):
            cached, _ = cache.get(target)
            if cached is not None and cached.checksum is not None:
                return cached.checksum
        try:
            return compute_checksum(target)
        except OSError as exc:
            raise map_os_error(exc, target) from exc

    def send(target: str, st: os.stat_result) -> Response:
        checksum = checksum_for(target, st)
        log.info("serving file %s", target)
        response = send_file(target, conditional=False, etag=False)
        response.headers[CHECKSUM_HEADER] = checksum
        return response

    def delete(target: str) -> Response | tuple[str, int]:
        log.info("deleting %s", target)
        try:
            os.remove(target)
        except OSError as exc:
            err = map_os_error(exc, target)
            log.error("failed to delete %s: %s", target, err)
            return error_response(str(err), 500)
        if cache is not None:
            cache.remove(target)
        return "", 204

    @bp.route(prefix, defaults={"rest": ""}, methods=methods)
    @bp.route(f"{prefix}<path:rest>", methods=methods)
    def serve(rest: str) -> Response | tuple[str, int]:
        log.info("received %s request for %s", request.method, request.path)
        try:
            target = resolve_request_path(request.path, prefix, disk_root)
            st = stat_path(target)
            if not stat.S_ISREG(st.st_mode):
                raise NotRegularFile("not a regular file", path=target)
            if request.method == "DELETE":
                return delete(target)
            return send(target, st)
        except (MediaSyncError, OSError) as exc:
            log.error("couldn't serve %s: %s", request.path, exc)
            return error_from_exception(exc)

    return bp
