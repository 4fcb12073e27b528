"""FilesystemObject: in-memory snapshot of a directory tree."""

from __future__ import annotations

import dataclasses
import errno
import logging
import os
import stat
import threading
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from mediasync._content import compute_checksum, detect_content_type
from mediasync._errors import (
    DirectoryNotEmpty,
    MediaSyncError,
    NotDirectory,
    PermissionDenied,
    map_os_error,
)
from mediasync._path import is_hidden

if TYPE_CHECKING:
    from collections.abc import Iterator

    from mediasync._cache import ContentCache
    from mediasync._types import JSONObject

log = logging.getLogger(__name__)


def stat_path(path: str) -> os.stat_result:
    """Stat ``path`` following symlinks.

    :raises NotFound: If the path does not exist.
    :raises PermissionDenied: If access is denied.
    """
    try:
        return os.stat(path)
    except OSError as exc:
        raise map_os_error(exc, path) from exc


@dataclasses.dataclass(eq=False)
class FilesystemObject:
    """A file or directory on disk, as seen at the last scan.

    Directory nodes own their ``children``; each directory replaces its
    child list under its own lock, so sibling subtrees can be scanned by
    different threads. The list is swapped, never mutated in place, so a
    concurrent reader always sees a complete (possibly stale) listing.

    :param path: Absolute path on disk; unique within a root.
    :param size: Size in bytes.
    :param mtime_ns: Modification time in nanoseconds since the epoch.
    :param mode: Raw ``st_mode`` bits.
    :param is_dir: Whether the entry is a directory.
    :param root: ``True`` only for the node originally requested; never deleted.
    :param checksum: Hex SHA-256 of the content, regular files only.
    :param content_type: Detected MIME type, regular files only.
    :param cache: Cache consulted by :meth:`scan` to reuse unchanged files.
    """

    path: str
    size: int
    mtime_ns: int
    mode: int
    is_dir: bool
    root: bool = False
    checksum: str | None = None
    content_type: str = ""
    children: list[FilesystemObject] = dataclasses.field(default_factory=list, repr=False)
    cache: ContentCache | None = dataclasses.field(default=None, repr=False)
    inode: tuple[int, int] = dataclasses.field(default=(0, 0), repr=False)
    _lock: threading.Lock = dataclasses.field(default_factory=threading.Lock, init=False, repr=False)

    # region: construction
    @classmethod
    def from_stat(
        cls,
        path: str,
        st: os.stat_result,
        *,
        root: bool = False,
        cache: ContentCache | None = None,
    ) -> FilesystemObject:
        """Build a node from an existing stat result.

        Regular files have their checksum and content type computed here.

        :raises PermissionDenied: If the file cannot be read.
        """
        fso = cls(
            path=path,
            size=st.st_size,
            mtime_ns=st.st_mtime_ns,
            mode=st.st_mode,
            is_dir=stat.S_ISDIR(st.st_mode),
            root=root,
            cache=cache,
            inode=(st.st_dev, st.st_ino),
        )
        if fso.is_regular:
            log.debug("computing checksum for %s", path)
            try:
                fso.content_type = detect_content_type(path)
                fso.checksum = compute_checksum(path)
            except OSError as exc:
                log.error("couldn't read %s: %s", path, exc)
                raise map_os_error(exc, path) from exc
        return fso

    @classmethod
    def from_path(
        cls,
        path: str,
        *,
        root: bool = False,
        cache: ContentCache | None = None,
    ) -> FilesystemObject:
        """Stat ``path`` and build a node for it.

        When ``cache`` holds a node for the same path with identical size
        and modification time, that node is returned instead and no
        checksum is computed.

        :raises NotFound: If the path does not exist.
        :raises PermissionDenied: If the path cannot be stat'ed or read.
        """
        st = stat_path(path)
        if cache is not None and not root:
            cached, found = cache.get(path)
            if found and cached.is_regular and cached.is_equal(path, st.st_size, st.st_mtime_ns):
                log.debug("reusing cached node for %s", path)
                return cached
        log.debug("creating new node for %s", path)
        return cls.from_stat(path, st, root=root, cache=cache)

    # endregion

    # region: properties
    @property
    def is_regular(self) -> bool:
        """``True`` for regular files (not directories, sockets, devices, ...)."""
        return not self.is_dir and stat.S_ISREG(self.mode)

    @property
    def mod_time(self) -> datetime:
        """Modification time as an aware UTC datetime."""
        return datetime.fromtimestamp(self.mtime_ns / 1e9, tz=timezone.utc)

    @property
    def name(self) -> str:
        return os.path.basename(self.path)

    def is_equal(self, path: str, size: int, mtime_ns: int) -> bool:
        """Return ``True`` if this node still describes the given on-disk state."""
        return self.path == path and self.size == size and self.mtime_ns == mtime_ns

    # endregion

    # region: scan and clean
    def scan(self) -> None:
        """Rebuild the children of this directory from disk, recursively.

        Entries that cannot be accessed are skipped; any other error
        aborts the scan.

        :raises NotDirectory: If this node is not a directory.
        """
        self._scan(frozenset())

    def _scan(self, ancestors: frozenset[tuple[int, int]]) -> None:
        if not self.is_dir:
            raise NotDirectory("Cannot scan a non-directory", path=self.path)
        with self._lock:
            if self.root:
                log.info("scanning directory %s", self.path)
            else:
                log.debug("scanning directory %s", self.path)

            try:
                names = sorted(os.listdir(self.path))
            except OSError as exc:
                log.error("couldn't read directory %s: %s", self.path, exc)
                raise map_os_error(exc, self.path) from exc

            lineage = ancestors | {self.inode}
            children: list[FilesystemObject] = []
            for name in names:
                child_path = os.path.join(self.path, name)
                try:
                    child = FilesystemObject.from_path(child_path, cache=self.cache)
                except PermissionDenied as exc:
                    log.info("skipping %s: %s", child_path, exc)
                    continue
                except (MediaSyncError, OSError) as exc:
                    log.error("couldn't create node for %s: %s", child_path, exc)
                    raise
                if child.is_dir:
                    if child.inode in lineage:
                        log.info("skipping %s: symlink loop", child_path)
                        continue
                    child._scan(lineage)
                children.append(child)
            self.children = children

    def clean(self) -> None:
        """Remove every directory below this one that holds no files.

        A root node is rescanned first and is never removed itself. A
        non-root directory that still has children after cleaning raises
        :class:`DirectoryNotEmpty` so its parent keeps it.

        :raises NotDirectory: If this node is not a directory.
        :raises DirectoryNotEmpty: If a non-root directory must be kept.
        """
        if not self.is_dir:
            raise NotDirectory("Cannot clean a non-directory", path=self.path)
        if self.root:
            log.info("cleaning up empty directories in %s", self.path)
            try:
                self.scan()
            except (MediaSyncError, OSError) as exc:
                log.error("couldn't scan %s for cleanup: %s", self.path, exc)
                raise
        else:
            log.debug("cleaning up empty directories in %s", self.path)

        with self._lock:
            kept: list[FilesystemObject] = []
            for child in self.children:
                if not child.is_dir:
                    kept.append(child)
                    continue
                try:
                    child.clean()
                except DirectoryNotEmpty:
                    kept.append(child)
                except (MediaSyncError, OSError) as exc:
                    log.error("can't clean up %s: %s", child.path, exc)
                    raise
            self.children = kept

            if self.root:
                return
            if self.children:
                raise DirectoryNotEmpty("Directory not empty", path=self.path)

            log.info("deleting empty directory %s", self.path)
            self._remove_directory()

    def _remove_directory(self) -> None:
        try:
            os.rmdir(self.path)
        except FileNotFoundError:
            log.debug("directory %s already removed", self.path)
        except OSError as exc:
            if exc.errno in (errno.ENOTEMPTY, errno.EEXIST):
                raise DirectoryNotEmpty("Directory not empty", path=self.path) from None
            log.error("failed deleting directory %s: %s", self.path, exc)
            raise map_os_error(exc, self.path) from exc

    # endregion

    # region: deletion
    def delete(self) -> None:
        """Remove this entry from disk.

        :raises PermissionDenied: If this node is a root, or the OS refuses.
        """
        if self.root:
            raise PermissionDenied("Refusing to delete a root directory", path=self.path)
        log.info("deleting %s", self.path)
        try:
            if self.is_dir:
                os.rmdir(self.path)
            else:
                os.remove(self.path)
        except OSError as exc:
            log.error("failed deleting %s: %s", self.path, exc)
            raise map_os_error(exc, self.path) from exc

    # endregion

    # region: traversal
    def walk(self) -> Iterator[FilesystemObject]:
        """Yield every descendant node, depth first."""
        for child in self.children:
            yield child
            if child.is_dir:
                yield from child.walk()

    def regular_files(self) -> Iterator[FilesystemObject]:
        """Yield every descendant regular file, hidden ones included."""
        return (node for node in self.walk() if node.is_regular)

    def files(self) -> list[FilesystemObject]:
        """All descendant regular files except dotfiles and ``~`` backups."""
        return [node for node in self.regular_files() if not is_hidden(node.path)]

    # endregion

    def to_dict(self) -> JSONObject:
        """JSON-serializable listing entry."""
        return {
            "path": self.path,
            "content_type": self.content_type,
            "size": self.size,
            "mod_time": self.mod_time.isoformat(),
            "is_dir": self.is_dir,
            "hash": self.checksum,
        }
