"""Quickstart: register a directory, list its files, and clean it.

Demonstrates:
- Registering a disk root under a web prefix
- Listing visible files with their web paths and checksums
- Empty directories being pruned by the listing pass
"""

from __future__ import annotations

import os
import tempfile

from mediasync import ContentCache, Registry

if __name__ == "__main__":
    with tempfile.TemporaryDirectory() as tmp:
        os.makedirs(os.path.join(tmp, "a", "empty"))
        with open(os.path.join(tmp, "a", "b.txt"), "wb") as f:
            f.write(b"0123456789")

        registry = Registry(ContentCache())
        registry.register("/dl", tmp)

        # Listing cleans first, so a/empty is gone afterwards
        for obj in registry.list_all_files():
            print(f"{obj.web_path}  {obj.fso.size} bytes  sha256={obj.fso.checksum}")
        print(f"a/empty still exists: {os.path.exists(os.path.join(tmp, 'a', 'empty'))}")

    print("Done! Temp directory cleaned up automatically.")
