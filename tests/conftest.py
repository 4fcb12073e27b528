"""Shared test fixtures."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest

from mediasync._cache import ContentCache
from tests.fsutil import write_file

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture
def cache() -> ContentCache:
    return ContentCache()


@pytest.fixture
def media_root(tmp_path: Path) -> Path:
    """A root with files at several depths and some empty directories.

    ::

        root/
          top.txt
          a/b.txt
          a/empty/
          deep/x/y/z.mp4
          hollow/inner/leaf/
    """
    root = tmp_path / "root"
    root.mkdir()
    write_file(root / "top.txt", b"top")
    write_file(root / "a" / "b.txt")
    (root / "a" / "empty").mkdir()
    write_file(root / "deep" / "x" / "y" / "z.mp4", os.urandom(64))
    (root / "hollow" / "inner" / "leaf").mkdir(parents=True)
    return root
