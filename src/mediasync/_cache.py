"""ContentCache: path-keyed store of known files, to avoid recomputing checksums."""

from __future__ import annotations

import logging
import os
import threading
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping

    from mediasync._fsobject import FilesystemObject

log = logging.getLogger(__name__)


class ContentCache:
    """Maps absolute paths to the last observed :class:`FilesystemObject`.

    A cached node may be reused only while its size and modification time
    match what is on disk; see :meth:`is_fresh`. All mutations serialize
    on one lock. Snapshots are not guaranteed to be a consistent
    point-in-time view across concurrent writers.
    """

    def __init__(self) -> None:
        self._entries: dict[str, FilesystemObject] = {}
        self._lock = threading.Lock()

    def __repr__(self) -> str:
        return f"ContentCache(entries={len(self._entries)})"

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, path: object) -> bool:
        return path in self._entries

    def get(self, path: str) -> tuple[FilesystemObject | None, bool]:
        """Look up a path.

        :returns: ``(node, True)`` on a hit, ``(None, False)`` otherwise.
        """
        node = self._entries.get(path)
        return node, node is not None

    def is_fresh(self, path: str, size: int, mtime_ns: int) -> bool:
        """Return ``True`` if the cached node for ``path`` matches the given stat values."""
        node, found = self.get(path)
        return found and node is not None and node.is_equal(path, size, mtime_ns)

    def put(self, node: FilesystemObject) -> None:
        """Insert or overwrite the entry for ``node.path``."""
        with self._lock:
            self._entries[node.path] = node

    def remove(self, path: str) -> None:
        """Drop the entry for ``path``; a missing entry is ignored."""
        with self._lock:
            self._entries.pop(path, None)

    def merge(self, other: Mapping[str, FilesystemObject]) -> None:
        """Overwrite entries with every item of ``other``."""
        with self._lock:
            self._entries.update(other)

    def values(self) -> list[FilesystemObject]:
        """Unordered snapshot of every cached node."""
        with self._lock:
            return list(self._entries.values())

    def update_from(self, tree: FilesystemObject) -> None:
        """Insert every regular file found below ``tree``."""
        self.merge({node.path: node for node in tree.regular_files()})

    def sync(self, tree: FilesystemObject) -> None:
        """Make the entries below ``tree.path`` mirror the files of ``tree``.

        Files no longer present in the tree are evicted.
        """
        fresh = {node.path: node for node in tree.regular_files()}
        prefix = tree.path.rstrip(os.sep) + os.sep
        with self._lock:
            stale = [p for p in self._entries if p.startswith(prefix) and p not in fresh]
            for path in stale:
                del self._entries[path]
            self._entries.update(fresh)
        log.debug("synced %d files under %s, evicted %d", len(fresh), tree.path, len(stale))
