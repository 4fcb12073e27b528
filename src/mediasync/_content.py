"""Content inspection: checksums and MIME type detection."""

from __future__ import annotations

import hashlib
import mimetypes
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from mediasync._types import PathLike

CHUNK_SIZE = 1024 * 1024
SNIFF_SIZE = 512
DEFAULT_CONTENT_TYPE = "application/octet-stream"
TEXT_CONTENT_TYPE = "text/plain; charset=utf-8"


def compute_checksum(path: PathLike) -> str:
    """Return the hex SHA-256 digest of a file's content."""
    digest = hashlib.sha256()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(CHUNK_SIZE), b""):
            digest.update(chunk)
    return digest.hexdigest()


def _looks_like_text(head: bytes) -> bool:
    if b"\0" in head:
        return False
    try:
        head.decode("utf-8")
    except UnicodeDecodeError as exc:
        # A multi-byte sequence cut off at the sniff boundary is still text.
        return exc.reason == "unexpected end of data"
    return True


def detect_content_type(path: PathLike) -> str:
    """Best-effort MIME type of a file.

    The first bytes of the file are read; an empty file yields ``""``.
    The file name decides the type when it has a known extension,
    otherwise the content is sniffed for UTF-8 text.
    """
    with open(path, "rb") as f:
        head = f.read(SNIFF_SIZE)
    if not head:
        return ""
    guessed, _ = mimetypes.guess_type(str(path), strict=False)
    if guessed:
        return guessed
    if _looks_like_text(head):
        return TEXT_CONTENT_TYPE
    return DEFAULT_CONTENT_TYPE
