"""Normalized error hierarchy for mediasync."""

from __future__ import annotations

from typing import Optional


class MediaSyncError(Exception):
    """Base class for all mediasync errors.

    :param message: Human-readable error description.
    :param path: The disk or request path involved in the error, if any.
    """

    def __init__(self, message: str = "", *, path: Optional[str] = None) -> None:
        self.path = path
        super().__init__(message)

    @property
    def message(self) -> str:
        """The bare message, without the path context."""
        return super().__str__()

    def __str__(self) -> str:
        if self.path is not None:
            return f"{self.message} | path={self.path!r}"
        return self.message

    def __repr__(self) -> str:
        cls = type(self).__name__
        args = [repr(self.message)]
        if self.path is not None:
            args.append(f"path={self.path!r}")
        return f"{cls}({', '.join(args)})"


class NotDirectory(MediaSyncError):
    """Raised when a directory operation is invoked on a non-directory."""


class NotRegularFile(MediaSyncError):
    """Raised when a file operation is invoked on a directory or special file."""


class DirectoryNotEmpty(MediaSyncError):
    """Signals that a directory still holds files and must be kept."""


class NotFound(MediaSyncError):
    """Raised when a file or directory does not exist."""


class PermissionDenied(MediaSyncError):
    """Raised when the operating system denies access to a path."""


class InvalidPath(MediaSyncError):
    """Raised for malformed or unsafe request paths."""


class MonitorStateError(MediaSyncError):
    """Raised on an invalid monitor lifecycle transition."""


class ConfigError(MediaSyncError):
    """Raised when the configuration cannot be loaded or is invalid."""


def map_os_error(exc: OSError, path: str) -> MediaSyncError:
    """Translate a native ``OSError`` into a mediasync error.

    ``FileNotFoundError`` and ``PermissionError`` get their own types;
    anything else becomes a plain :class:`MediaSyncError`.
    """
    if isinstance(exc, FileNotFoundError):
        return NotFound(f"No such file or directory: {path}", path=path)
    if isinstance(exc, PermissionError):
        return PermissionDenied(f"Permission denied: {path}", path=path)
    return MediaSyncError(str(exc), path=path)
