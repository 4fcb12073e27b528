"""Monitoring: keep a cache in sync with a directory in the background.

Demonstrates:
- Starting a FileMonitor on a root with a short interval
- Reading the cache-backed listing as new files appear
- Stopping the monitor through its context manager
"""

from __future__ import annotations

import os
import tempfile
import time

from mediasync import CacheListing, ContentCache, FileMonitor

if __name__ == "__main__":
    with tempfile.TemporaryDirectory() as tmp:
        cache = ContentCache()
        listing = CacheListing(cache)

        with FileMonitor(tmp, cache, interval=0.5) as monitor:
            print(f"Initial listing: {listing.list_files()}")

            with open(os.path.join(tmp, "new.mp4"), "wb") as f:
                f.write(os.urandom(128))

            time.sleep(1.5)
            for entry in listing.list_files():
                print(f"{entry['path']}  {entry['content_type']}  {entry['hash']}")
            print(f"Passes so far: {monitor.passes}")

        print(f"Monitor state: {monitor.state.value}")
