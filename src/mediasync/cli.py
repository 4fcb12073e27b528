"""Command-line entry point for the mediasync server.

Usage:
    mediasync-server                      # search for config.yaml
    mediasync-server --config my.yaml     # explicit config file
    mediasync-server --port 8080 --log-level DEBUG
"""

from __future__ import annotations

import argparse
import dataclasses
import logging
import os
import signal
import sys
from typing import TYPE_CHECKING

from werkzeug.serving import make_server

from mediasync._cache import ContentCache
from mediasync._config import ServerConfig, load_config
from mediasync._errors import MediaSyncError
from mediasync._listing import ListingMode, listing_source
from mediasync._monitor import FileMonitor
from mediasync._registry import Registry
from mediasync.server import create_app

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger("mediasync")

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="mediasync-server", description=__doc__.splitlines()[0])
    parser.add_argument("--config", "-c", help="path to the YAML configuration file")
    parser.add_argument("--host", help="interface to bind (overrides config)")
    parser.add_argument("--port", type=int, help="port to listen on (overrides config)")
    parser.add_argument("--log-level", help="logging level (overrides config)")
    return parser.parse_args(argv)


def _apply_overrides(config: ServerConfig, args: argparse.Namespace) -> ServerConfig:
    overrides: dict[str, object] = {}
    if args.host:
        overrides["host"] = args.host
    if args.port:
        overrides["port"] = args.port
    if args.log_level:
        overrides["log_level"] = args.log_level.upper()
    return dataclasses.replace(config, **overrides) if overrides else config


def _raise_interrupt(signum: int, frame: FrameType | None) -> None:
    raise KeyboardInterrupt


def build(config: ServerConfig, cache: ContentCache) -> tuple[Registry, list[FileMonitor]]:
    """Register every configured root and create its monitor.

    Monitors are only created when listing from the cache.

    :raises MediaSyncError: If any root cannot be registered or monitored.
    """
    registry = Registry(cache)
    monitors: list[FileMonitor] = []
    for fp in config.file_paths:
        disk_path = os.path.abspath(fp.disk_path)
        registry.register(fp.prefix, disk_path)
        if ListingMode(config.listing) is ListingMode.CACHE:
            monitors.append(FileMonitor(disk_path, cache, interval=config.update_interval))
    return registry, monitors


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)

    try:
        config = _apply_overrides(load_config(args.config), args)
        config.validate()
    except MediaSyncError as exc:
        log.error("can't get configuration: %s", exc)
        return 1
    logging.getLogger().setLevel(config.log_level)

    cache = ContentCache()
    try:
        registry, monitors = build(config, cache)
    except (MediaSyncError, OSError) as exc:
        log.error("couldn't register roots: %s", exc)
        return 1

    source = listing_source(config.listing, cache=cache, registry=registry)
    app = create_app(config.file_paths, source, cache=cache)
    server = make_server(config.host, config.port, app, threaded=True)

    for monitor in monitors:
        monitor.start()
    signal.signal(signal.SIGTERM, _raise_interrupt)

    log.info("starting server on %s:%d (listing from %s)", config.host, config.port, config.listing)
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        log.info("stopping server")
    finally:
        server.server_close()
        for monitor in monitors:
            monitor.stop()
    return 0


if __name__ == "__main__":
    sys.exit(main())
