"""Registry: web prefixes mapped to the disk roots they publish."""

from __future__ import annotations

import logging
import os
import threading
from typing import TYPE_CHECKING

from mediasync._errors import NotDirectory
from mediasync._fsobject import FilesystemObject
from mediasync._models import WebObject
from mediasync._path import normalize_prefix

if TYPE_CHECKING:
    from mediasync._cache import ContentCache

log = logging.getLogger(__name__)


class Registry:
    """Keeps track of which disk roots are served under which web prefix.

    :param cache: Optional cache; scans reuse unchanged files from it and
        every listed root is synced back into it.
    """

    def __init__(self, cache: ContentCache | None = None) -> None:
        self._cache = cache
        self._roots: dict[str, FilesystemObject] = {}
        self._lock = threading.Lock()

    def __repr__(self) -> str:
        prefixes = sorted(self._roots)
        return f"Registry(prefixes={prefixes!r})"

    def __len__(self) -> int:
        return len(self._roots)

    def register(self, web_prefix: str, disk_path: str) -> FilesystemObject:
        """Publish ``disk_path`` under ``web_prefix``.

        A root already registered at the same prefix is replaced.

        :param web_prefix: URL prefix; a trailing ``/`` is added if missing.
        :param disk_path: Directory to publish; made absolute, trailing separators dropped.
        :returns: The root node stored for the prefix.
        :raises NotFound: If ``disk_path`` does not exist.
        :raises PermissionDenied: If ``disk_path`` cannot be stat'ed.
        :raises NotDirectory: If ``disk_path`` is not a directory.
        """
        prefix = normalize_prefix(web_prefix)
        disk_path = os.path.abspath(disk_path)
        fso = FilesystemObject.from_path(disk_path, root=True, cache=self._cache)
        if not fso.is_dir:
            raise NotDirectory("Roots must be directories", path=disk_path)
        log.info("registering root %s at %s", fso.path, prefix)
        with self._lock:
            self._roots[prefix] = fso
        return fso

    def roots(self) -> dict[str, FilesystemObject]:
        """Snapshot of the prefix to root mapping."""
        with self._lock:
            return dict(self._roots)

    def list_all_files(self) -> list[WebObject]:
        """Clean every root and list its visible files.

        :raises MediaSyncError: If cleaning any root fails; nothing is returned.
        """
        result: list[WebObject] = []
        for prefix, root in self.roots().items():
            root.clean()
            if self._cache is not None:
                self._cache.sync(root)
            result.extend(WebObject.from_fso(f, root.path, prefix) for f in root.files())
        return result
