"""Tests for checksums and content type detection."""

from __future__ import annotations

import hashlib
from typing import TYPE_CHECKING

from mediasync._content import DEFAULT_CONTENT_TYPE, TEXT_CONTENT_TYPE, compute_checksum, detect_content_type

if TYPE_CHECKING:
    from pathlib import Path


class TestComputeChecksum:
    def test_sha256(self, tmp_path: Path) -> None:
        f = tmp_path / "a.bin"
        f.write_bytes(b"hello world")
        assert compute_checksum(f) == hashlib.sha256(b"hello world").hexdigest()

    def test_empty_file(self, tmp_path: Path) -> None:
        f = tmp_path / "empty"
        f.write_bytes(b"")
        assert compute_checksum(f) == hashlib.sha256(b"").hexdigest()


class TestDetectContentType:
    def test_empty_file_has_no_type(self, tmp_path: Path) -> None:
        f = tmp_path / "empty.mp4"
        f.write_bytes(b"")
        assert detect_content_type(f) == ""

    def test_known_extension(self, tmp_path: Path) -> None:
        f = tmp_path / "page.html"
        f.write_bytes(b"<html></html>")
        assert detect_content_type(f) == "text/html"

    def test_unknown_extension_text(self, tmp_path: Path) -> None:
        f = tmp_path / "NOTES"
        f.write_bytes("héllo\n".encode())
        assert detect_content_type(f) == TEXT_CONTENT_TYPE

    def test_unknown_extension_binary(self, tmp_path: Path) -> None:
        f = tmp_path / "blob"
        f.write_bytes(b"\x00\x01\x02\xff")
        assert detect_content_type(f) == DEFAULT_CONTENT_TYPE

    def test_multibyte_split_at_boundary_is_text(self, tmp_path: Path) -> None:
        f = tmp_path / "README"
        f.write_bytes(b"a" * 511 + "é".encode())
        assert detect_content_type(f) == TEXT_CONTENT_TYPE
