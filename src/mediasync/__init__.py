"""Serve directory trees over HTTP with a checksummed, self-cleaning file index."""

from mediasync._cache import ContentCache
from mediasync._config import FilePath, ServerConfig, load_config
from mediasync._errors import (
    ConfigError,
    DirectoryNotEmpty,
    InvalidPath,
    MediaSyncError,
    MonitorStateError,
    NotDirectory,
    NotFound,
    NotRegularFile,
    PermissionDenied,
)
from mediasync._fsobject import FilesystemObject
from mediasync._listing import CacheListing, ListingMode, ListingSource, RegistryListing, listing_source
from mediasync._models import WebObject
from mediasync._monitor import FileMonitor, MonitorState
from mediasync._registry import Registry

__version__ = "0.1.0"

__all__ = [
    # Core
    "FilesystemObject",
    "ContentCache",
    "FileMonitor",
    "MonitorState",
    "Registry",
    "WebObject",
    # Listing
    "ListingMode",
    "ListingSource",
    "CacheListing",
    "RegistryListing",
    "listing_source",
    # Config
    "FilePath",
    "ServerConfig",
    "load_config",
    # Errors
    "MediaSyncError",
    "NotDirectory",
    "NotRegularFile",
    "DirectoryNotEmpty",
    "NotFound",
    "PermissionDenied",
    "InvalidPath",
    "MonitorStateError",
    "ConfigError",
    # Version
    "__version__",
]
