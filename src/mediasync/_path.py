"""Path helpers for mapping between web prefixes and disk roots."""

from __future__ import annotations

import os
import posixpath
import re

from mediasync._errors import InvalidPath

_SEPARATORS = re.compile(r"[/\\]")


def contains_dot_dot(path: str) -> bool:
    """Return ``True`` if ``path`` has a ``..`` segment.

    Only whole segments count: ``a/../b`` is rejected, ``a..b`` is not.
    Both forward and backward slashes delimit segments.
    """
    if ".." not in path:
        return False
    return any(segment == ".." for segment in _SEPARATORS.split(path))


def normalize_prefix(prefix: str) -> str:
    """Return a web prefix that starts and ends with ``/``.

    :raises InvalidPath: If the prefix contains a ``..`` segment.
    """
    if contains_dot_dot(prefix):
        raise InvalidPath("Prefix contains '..' segment", path=prefix)
    if not prefix.startswith("/"):
        prefix = "/" + prefix
    if not prefix.endswith("/"):
        prefix += "/"
    return prefix


def resolve_request_path(request_path: str, web_prefix: str, disk_root: str) -> str:
    """Map a request path under ``web_prefix`` onto ``disk_root``.

    :raises InvalidPath: If the request path contains a ``..`` segment.
    """
    if contains_dot_dot(request_path):
        raise InvalidPath("invalid path", path=request_path)
    rest = request_path[len(web_prefix) :] if request_path.startswith(web_prefix) else request_path
    rest = rest.lstrip("/")
    if not rest:
        return disk_root
    return os.path.join(disk_root, *rest.split("/"))


def to_web_path(disk_path: str, disk_root: str, web_prefix: str) -> str:
    """Rewrite a disk path to the web path it is served under.

    Every occurrence of ``disk_root`` is substituted literally, e.g.
    ``/data/media/x/y.mp4`` under ``/data/media`` at ``/media/`` becomes
    ``/media/x/y.mp4``.
    """
    return disk_path.replace(disk_root, web_prefix.rstrip("/"))


def is_hidden(path: str) -> bool:
    """Return ``True`` for dotfiles and editor backups ending in ``~``."""
    return posixpath.basename(path.replace("\\", "/")).startswith(".") or path.endswith("~")
