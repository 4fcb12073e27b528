"""HTTP surface: file listing, downloads and deletion."""

from __future__ import annotations

from typing import TYPE_CHECKING

from flask import Flask
from werkzeug.exceptions import HTTPException

from mediasync.server._download import CHECKSUM_HEADER, create_download_blueprint
from mediasync.server._fileinfo import FILEINFO_PATH, create_fileinfo_blueprint
from mediasync.server._http import error_from_exception, error_response, handle_http_exception

if TYPE_CHECKING:
    from collections.abc import Iterable

    from mediasync._cache import ContentCache
    from mediasync._config import FilePath
    from mediasync._listing import ListingSource

__all__ = [
    "CHECKSUM_HEADER",
    "FILEINFO_PATH",
    "create_app",
    "create_download_blueprint",
    "create_fileinfo_blueprint",
    "error_from_exception",
    "error_response",
]


def create_app(
    file_paths: Iterable[FilePath],
    source: ListingSource,
    *,
    cache: ContentCache | None = None,
) -> Flask:
    """Build the Flask application.

    :param file_paths: Directories to serve, each under its own prefix.
    :param source: Where ``/fileinfo`` takes its listing from.
    :param cache: Shared content cache, used by the download handlers.
    """
    app = Flask("mediasync")
    app.register_error_handler(HTTPException, handle_http_exception)
    app.register_blueprint(create_fileinfo_blueprint(source))
    for i, fp in enumerate(file_paths):
        app.register_blueprint(
            create_download_blueprint(fp.disk_path, fp.prefix, cache=cache, name=f"download_{i}"),
        )
    return app
