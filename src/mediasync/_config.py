"""Configuration model: immutable data containers describing what to serve."""

from __future__ import annotations

import dataclasses
import logging
from pathlib import Path

import yaml

from mediasync._errors import ConfigError, InvalidPath
from mediasync._listing import ListingMode
from mediasync._monitor import UPDATE_INTERVAL
from mediasync._path import normalize_prefix

CONFIG_NAMES = ("config.yaml", "config.yml")
CONFIG_DIRS = (".", "/etc/mediasync", "~/.config/mediasync")


@dataclasses.dataclass(frozen=True)
class FilePath:
    """A disk directory and the URL prefix it is served under.

    :param disk_path: Directory on disk.
    :param serve_path: URL prefix, e.g. ``"/media/"``.
    """

    disk_path: str
    serve_path: str

    @property
    def prefix(self) -> str:
        """``serve_path`` with leading and trailing ``/``."""
        return normalize_prefix(self.serve_path)


@dataclasses.dataclass(frozen=True)
class ServerConfig:
    """Top-level configuration container.

    :param host: Interface to bind.
    :param port: TCP port to listen on.
    :param listing: ``"cache"`` to list the monitored cache, ``"registry"``
        to rescan on every listing request.
    :param update_interval: Seconds between monitor passes.
    :param log_level: Name of the root logging level.
    :param file_paths: Directories to serve, in order.
    """

    host: str = "0.0.0.0"
    port: int = 4242
    listing: str = ListingMode.CACHE.value
    update_interval: float = UPDATE_INTERVAL
    log_level: str = "INFO"
    file_paths: tuple[FilePath, ...] = ()

    def validate(self) -> None:
        """Check the configuration is usable.

        :raises ConfigError: On the first problem found.
        """
        if not self.file_paths:
            raise ConfigError("At least one entry in 'file_paths' is required")
        try:
            ListingMode(self.listing)
        except ValueError:
            modes = sorted(m.value for m in ListingMode)
            raise ConfigError(f"Unknown listing mode '{self.listing}'. Available modes: {modes}") from None
        if not 0 < self.port < 65536:
            raise ConfigError(f"Port out of range: {self.port}")
        if self.update_interval <= 0:
            raise ConfigError(f"update_interval must be positive, got {self.update_interval}")
        if not isinstance(logging.getLevelName(self.log_level), int):
            raise ConfigError(f"Unknown log_level '{self.log_level}'")
        seen: set[str] = set()
        for fp in self.file_paths:
            if not fp.disk_path:
                raise ConfigError(f"Empty disk_path for serve_path '{fp.serve_path}'")
            try:
                prefix = fp.prefix
            except InvalidPath:
                raise ConfigError(f"Invalid serve_path '{fp.serve_path}'", path=fp.disk_path) from None
            if prefix in seen:
                raise ConfigError(f"Duplicate serve_path '{prefix}'", path=fp.disk_path)
            seen.add(prefix)

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> ServerConfig:
        """Construct from a plain dict (e.g. parsed YAML).

        :raises ConfigError: If a value has the wrong shape.
        """
        raw_paths = data.get("file_paths", [])
        if not isinstance(raw_paths, list):
            raise ConfigError("Expected 'file_paths' to be a list")

        file_paths: list[FilePath] = []
        for i, entry in enumerate(raw_paths):
            if not isinstance(entry, dict):
                raise ConfigError(f"file_paths[{i}] must be a mapping")
            try:
                file_paths.append(FilePath(disk_path=str(entry["disk_path"]), serve_path=str(entry["serve_path"])))
            except KeyError as exc:
                raise ConfigError(f"file_paths[{i}] is missing {exc.args[0]!r}") from None

        defaults = cls()
        try:
            return cls(
                host=str(data.get("host", defaults.host)),
                port=int(data.get("port", defaults.port)),  # type: ignore[call-overload]
                listing=str(data.get("listing", defaults.listing)),
                update_interval=float(data.get("update_interval", defaults.update_interval)),  # type: ignore[arg-type]
                log_level=str(data.get("log_level", defaults.log_level)).upper(),
                file_paths=tuple(file_paths),
            )
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"Invalid configuration value: {exc}") from None


def find_config() -> Path | None:
    """Return the first config file in the standard search directories."""
    for directory in CONFIG_DIRS:
        for name in CONFIG_NAMES:
            candidate = Path(directory).expanduser() / name
            if candidate.is_file():
                return candidate
    return None


def load_config(path: str | Path | None = None) -> ServerConfig:
    """Load and validate the configuration.

    :param path: Explicit config file; searched for when omitted.
    :raises ConfigError: If no file is found, it cannot be parsed, or it is invalid.
    """
    config_path = Path(path) if path is not None else find_config()
    if config_path is None:
        searched = [str(Path(d) / CONFIG_NAMES[0]) for d in CONFIG_DIRS]
        raise ConfigError(f"No configuration file found. Searched: {searched}")

    try:
        with open(config_path) as f:
            raw = yaml.safe_load(f)
    except OSError as exc:
        raise ConfigError(f"Can't read configuration: {exc}", path=str(config_path)) from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML: {exc}", path=str(config_path)) from exc

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError("Configuration must be a mapping", path=str(config_path))

    config = ServerConfig.from_dict(raw)
    config.validate()
    return config
