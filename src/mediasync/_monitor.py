"""FileMonitor: periodic clean and cache sync of one root."""

from __future__ import annotations

import enum
import logging
import threading
from typing import TYPE_CHECKING

from mediasync._errors import MediaSyncError, MonitorStateError, NotDirectory
from mediasync._fsobject import FilesystemObject

if TYPE_CHECKING:
    from types import TracebackType

    from mediasync._cache import ContentCache

log = logging.getLogger(__name__)

UPDATE_INTERVAL = 10 * 60.0


class MonitorState(enum.Enum):
    """Lifecycle of a :class:`FileMonitor`."""

    CREATED = "created"
    RUNNING = "running"
    STOPPED = "stopped"


class FileMonitor:
    """Keeps one root clean and its files mirrored in a :class:`ContentCache`.

    Construction performs the first clean and cache sync, so the root is
    consistent as soon as the monitor exists. :meth:`start` then repeats
    that every ``interval`` seconds on a background thread until
    :meth:`stop` is called. A monitor runs at most once: starting twice,
    stopping before starting, or stopping twice raises
    :class:`MonitorStateError`.

    :param path: Root directory to monitor.
    :param cache: Cache receiving the root's regular files.
    :param interval: Seconds between passes.
    :raises NotFound: If ``path`` does not exist.
    :raises NotDirectory: If ``path`` is not a directory.
    """

    def __init__(self, path: str, cache: ContentCache, *, interval: float = UPDATE_INTERVAL) -> None:
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval!r}")
        self._cache = cache
        self._interval = interval
        self._root = FilesystemObject.from_path(path, root=True, cache=cache)
        if not self._root.is_dir:
            raise NotDirectory("Monitors only watch directories", path=path)
        # Clean implies a scan.
        self._root.clean()
        self._cache.sync(self._root)

        self._state = MonitorState.CREATED
        self._state_lock = threading.Lock()
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None
        self._passes = 0

    def __repr__(self) -> str:
        return f"FileMonitor(path={self._root.path!r}, state={self._state.value!r})"

    @property
    def root(self) -> FilesystemObject:
        return self._root

    @property
    def state(self) -> MonitorState:
        return self._state

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def passes(self) -> int:
        """Number of passes attempted since construction, failed ones included."""
        return self._passes

    def _transition(self, expected: MonitorState, target: MonitorState) -> None:
        with self._state_lock:
            if self._state is not expected:
                raise MonitorStateError(
                    f"Cannot move monitor from {self._state.value} to {target.value}",
                    path=self._root.path,
                )
            self._state = target

    def tick(self) -> bool:
        """Run one clean and cache sync pass.

        Filesystem failures are logged, not raised; the next pass retries.
        Other exceptions propagate; the monitor loop logs them and keeps running.

        :returns: ``True`` if the pass succeeded.
        """
        try:
            self._root.clean()
        except (MediaSyncError, OSError):
            log.exception("error doing periodic clean of %s", self._root.path)
            return False
        finally:
            self._passes += 1
        self._cache.sync(self._root)
        return True

    def run(self) -> None:
        """Run the loop in the calling thread until :meth:`stop` is called.

        :raises MonitorStateError: If the monitor was already started.
        """
        self._transition(MonitorState.CREATED, MonitorState.RUNNING)
        self._loop()

    def start(self) -> None:
        """Run the loop on a daemon thread and return immediately.

        :raises MonitorStateError: If the monitor was already started.
        """
        self._transition(MonitorState.CREATED, MonitorState.RUNNING)
        self._thread = threading.Thread(
            target=self._loop,
            name=f"monitor:{self._root.path}",
            daemon=True,
        )
        self._thread.start()

    def _loop(self) -> None:
        log.info("monitoring %s every %ss", self._root.path, self._interval)
        while not self._stop.wait(self._interval):
            try:
                self.tick()
            except Exception:
                # Keep monitoring; the next pass retries.
                log.exception("unexpected error in monitor pass for %s", self._root.path)
        log.info("monitor loop for %s exited", self._root.path)

    def stop(self, timeout: float | None = None) -> None:
        """Signal the loop to exit and wait for it.

        A pass in progress runs to completion first.

        :raises MonitorStateError: If the monitor is not running.
        """
        self._transition(MonitorState.RUNNING, MonitorState.STOPPED)
        self._stop.set()
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(timeout)
        log.info("file monitor for %s stopped", self._root.path)

    def __enter__(self) -> FileMonitor:
        self.start()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if self._state is MonitorState.RUNNING:
            self.stop()
