"""Tests for the HTTP handlers."""

from __future__ import annotations

from typing import TYPE_CHECKING
from unittest.mock import patch

import pytest

from mediasync._cache import ContentCache
from mediasync._config import FilePath
from mediasync._content import compute_checksum
from mediasync._errors import MediaSyncError, PermissionDenied
from mediasync._fsobject import FilesystemObject
from mediasync._listing import CacheListing, RegistryListing
from mediasync._monitor import FileMonitor
from mediasync._registry import Registry
from mediasync.server import CHECKSUM_HEADER, FILEINFO_PATH, create_app
from tests.fsutil import write_file

if TYPE_CHECKING:
    from pathlib import Path

    from flask.testing import FlaskClient


@pytest.fixture
def served(tmp_path: Path) -> Path:
    root = tmp_path / "srv" / "files"
    write_file(root / "a" / "b.txt", b"0123456789")
    (root / "a" / "empty").mkdir()
    return root


@pytest.fixture
def client(served: Path, cache: ContentCache) -> FlaskClient:
    registry = Registry(cache)
    registry.register("/dl/", str(served))
    app = create_app([FilePath(str(served), "/dl")], RegistryListing(registry), cache=cache)
    app.testing = True
    return app.test_client()


class TestDownload:
    def test_get_file(self, client: FlaskClient, served: Path) -> None:
        resp = client.get("/dl/a/b.txt")
        assert resp.status_code == 200
        assert resp.data == b"0123456789"
        assert resp.headers[CHECKSUM_HEADER] == compute_checksum(served / "a" / "b.txt")

    def test_head_file(self, client: FlaskClient, served: Path) -> None:
        resp = client.head("/dl/a/b.txt")
        assert resp.status_code == 200
        assert resp.data == b""
        assert resp.headers[CHECKSUM_HEADER] == compute_checksum(served / "a" / "b.txt")

    def test_checksum_from_fresh_cache(self, client: FlaskClient, served: Path, cache: ContentCache) -> None:
        target = served / "a" / "b.txt"
        node = FilesystemObject.from_path(str(target))
        node.checksum = "cached-sum"
        cache.put(node)
        resp = client.get("/dl/a/b.txt")
        assert resp.headers[CHECKSUM_HEADER] == "cached-sum"

    def test_stale_cache_entry_rehashed(self, client: FlaskClient, served: Path, cache: ContentCache) -> None:
        target = served / "a" / "b.txt"
        node = FilesystemObject.from_path(str(target))
        node.checksum = "cached-sum"
        cache.put(node)
        target.write_bytes(b"changed content")
        resp = client.get("/dl/a/b.txt")
        assert resp.data == b"changed content"
        assert resp.headers[CHECKSUM_HEADER] == compute_checksum(target)

    def test_missing_file(self, client: FlaskClient) -> None:
        resp = client.get("/dl/a/nope.txt")
        assert resp.status_code == 404
        assert resp.get_json() == {"error": "file not found"}

    def test_directory_rejected(self, client: FlaskClient) -> None:
        resp = client.get("/dl/a")
        assert resp.status_code == 400
        assert "error" in resp.get_json()

    def test_root_rejected(self, client: FlaskClient) -> None:
        assert client.get("/dl/").status_code == 400

    def test_dot_dot_rejected_before_stat(self, client: FlaskClient) -> None:
        with patch("mediasync.server._download.stat_path") as stat_path:
            resp = client.get("/dl/a/../b.txt")
        assert resp.status_code == 400
        assert resp.get_json() == {"error": "invalid path"}
        stat_path.assert_not_called()

    def test_dots_inside_name_allowed(self, client: FlaskClient, served: Path) -> None:
        write_file(served / "a..b.txt", b"dots")
        resp = client.get("/dl/a..b.txt")
        assert resp.status_code == 200
        assert resp.data == b"dots"

    def test_permission_denied(self, client: FlaskClient) -> None:
        with patch("mediasync.server._download.stat_path", side_effect=PermissionDenied("denied")):
            resp = client.get("/dl/a/b.txt")
        assert resp.status_code == 403
        assert resp.get_json() == {"error": "forbidden"}

    def test_unsupported_method(self, client: FlaskClient) -> None:
        resp = client.post("/dl/a/b.txt")
        assert resp.status_code == 405
        assert resp.get_json() == {"error": "method not supported"}
        assert "DELETE" in resp.headers["Allow"]


class TestDelete:
    def test_delete_file(self, client: FlaskClient, served: Path, cache: ContentCache) -> None:
        target = served / "a" / "b.txt"
        cache.put(FilesystemObject.from_path(str(target)))
        resp = client.delete("/dl/a/b.txt")
        assert resp.status_code == 204
        assert not target.exists()
        assert str(target) not in cache

    def test_delete_missing(self, client: FlaskClient) -> None:
        assert client.delete("/dl/a/nope.txt").status_code == 404

    def test_delete_directory_rejected(self, client: FlaskClient, served: Path) -> None:
        assert client.delete("/dl/a/empty").status_code == 400
        assert (served / "a" / "empty").is_dir()

    def test_delete_failure(self, client: FlaskClient, served: Path, cache: ContentCache) -> None:
        target = served / "a" / "b.txt"
        cache.put(FilesystemObject.from_path(str(target)))
        with patch("mediasync.server._download.os.remove", side_effect=PermissionError(13, "denied")):
            resp = client.delete("/dl/a/b.txt")
        assert resp.status_code == 500
        assert "Permission denied" in resp.get_json()["error"]
        assert target.exists()
        assert str(target) in cache


class TestFileInfo:
    def test_registry_listing(self, client: FlaskClient, served: Path) -> None:
        resp = client.get(FILEINFO_PATH)
        assert resp.status_code == 200
        [entry] = resp.get_json()
        assert entry["web_path"] == "/dl/a/b.txt"
        assert entry["size"] == 10
        assert entry["hash"] == compute_checksum(served / "a" / "b.txt")
        assert not (served / "a" / "empty").exists()

    def test_cache_listing(self, served: Path) -> None:
        cache = ContentCache()
        FileMonitor(str(served), cache)
        app = create_app([FilePath(str(served), "/dl/")], CacheListing(cache), cache=cache)
        resp = app.test_client().get(FILEINFO_PATH)
        assert resp.status_code == 200
        assert [e["path"] for e in resp.get_json()] == [str(served / "a" / "b.txt")]

    def test_empty_listing_is_array(self, tmp_path: Path) -> None:
        app = create_app([], CacheListing(ContentCache()))
        resp = app.test_client().get(FILEINFO_PATH)
        assert resp.get_json() == []

    def test_listing_failure(self, tmp_path: Path) -> None:
        class Broken:
            def list_files(self) -> list[dict[str, object]]:
                raise MediaSyncError("boom")

        app = create_app([], Broken())
        resp = app.test_client().get(FILEINFO_PATH)
        assert resp.status_code == 500
        assert resp.get_json() == {"error": "boom"}

    def test_post_not_supported(self, client: FlaskClient) -> None:
        resp = client.post(FILEINFO_PATH)
        assert resp.status_code == 405
        assert resp.get_json() == {"error": "method not supported"}


class TestRouting:
    def test_unknown_route_is_json(self, client: FlaskClient) -> None:
        resp = client.get("/elsewhere")
        assert resp.status_code == 404
        assert "error" in resp.get_json()

    def test_multiple_roots(self, tmp_path: Path) -> None:
        write_file(tmp_path / "one" / "f.txt", b"one")
        write_file(tmp_path / "two" / "f.txt", b"two")
        app = create_app(
            [FilePath(str(tmp_path / "one"), "/one/"), FilePath(str(tmp_path / "two"), "/two/")],
            CacheListing(ContentCache()),
        )
        c = app.test_client()
        assert c.get("/one/f.txt").data == b"one"
        assert c.get("/two/f.txt").data == b"two"
