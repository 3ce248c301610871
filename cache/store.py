"""
cache/store.py -- In-memory TTL cache for static documentation files.

Avoids re-reading the UI bundle and stylesheet from disk on every request.
Entries are keyed by absolute file path and expire after a configurable TTL
(default 1 hour). In debug mode nothing is cached so edits to files in the
dist directory show up immediately.

Usage:
    cache = FileCache(ttl=600)
    data = cache.get("/opt/app/dist/bundle.js")   # returns bytes or None
    cache.purge_expired()                         # call periodically to trim old entries
"""

import logging
import threading
import time
from pathlib import Path
from typing import Optional

logger = logging.getLogger("swaggerinjector.cache")

_DEFAULT_TTL = 60 * 60  # 1 hour in seconds


class FileCache:
    def __init__(self, ttl: Optional[int] = _DEFAULT_TTL, debug: bool = False) -> None:
        self.ttl = _DEFAULT_TTL if ttl is None else ttl
        self.debug = debug
        self._entries: dict[str, tuple[bytes, float]] = {}
        self._lock = threading.Lock()

    def get(self, path: str) -> Optional[bytes]:
        """Return the file contents, from cache when fresh. None if unreadable."""
        if not self.debug:
            with self._lock:
                entry = self._entries.get(path)
            if entry is not None:
                data, cached_at = entry
                if time.time() - cached_at <= self.ttl:
                    return data
                self._delete(path)

        data = self._read(path)
        if data is not None and not self.debug:
            self.set(path, data)
        return data

    def set(self, path: str, data: bytes) -> None:
        """Store data for path, replacing any existing entry."""
        with self._lock:
            self._entries[path] = (data, time.time())

    def purge_expired(self) -> int:
        """Delete all entries older than TTL. Returns number of entries removed."""
        cutoff = time.time() - self.ttl
        with self._lock:
            expired = [path for path, (_, cached_at) in self._entries.items() if cached_at < cutoff]
            for path in expired:
                del self._entries[path]
        return len(expired)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def _read(self, path: str) -> Optional[bytes]:
        file_path = Path(path)
        if not file_path.is_file():
            return None
        try:
            return file_path.read_bytes()
        except OSError as e:
            logger.warning("Could not read file '%s': %s", path, e)
            return None

    def _delete(self, path: str) -> None:
        with self._lock:
            self._entries.pop(path, None)
