"""File-backed TTL cache for catalog responses.

One JSON file per key under the cache directory. Keys are SHA-256 hex
digests (see animap.utils.hashing.compute_cache_key), so they are always
safe file names. Files are written atomically, so a concurrent reader sees
either the old or the new payload, never a partial one.
"""

import json
import os
import re
import tempfile
import time
from pathlib import Path
from typing import Any, Callable, Optional, Union

from animap.logging import get_logger

logger = get_logger(__name__, component="cache")

CACHE_KEY_PATTERN = re.compile(r"^[0-9a-f]{64}$")


class ResponseCache:
    """TTL cache of JSON-serializable catalog responses.

    Expired entries are deleted when read. A disabled cache stores nothing
    and always misses.
    """

    def __init__(
        self,
        directory: Union[str, Path],
        ttl_seconds: int = 3600,
        enabled: bool = True,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the cache.

        Args:
            directory: Directory holding cache files (created on first write)
            ttl_seconds: Entry lifetime in seconds
            enabled: When False, get() always misses and set() is a no-op
            clock: Wall-clock time source returning epoch seconds
        """
        if ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be positive, got: {ttl_seconds}")

        self.directory = Path(directory)
        self.ttl_seconds = ttl_seconds
        self.enabled = enabled
        self._clock = clock

    def _path_for(self, key: str) -> Path:
        if not CACHE_KEY_PATTERN.match(key):
            raise ValueError(f"Cache keys must be SHA-256 hex digests, got: {key!r}")
        return self.directory / f"{key}.json"

    def get(self, key: str) -> Optional[Any]:
        """Return the cached value for key, or None on a miss or expiry.

        Unreadable or corrupt entries are treated as misses and removed.
        """
        if not self.enabled:
            return None

        path = self._path_for(key)
        try:
            with open(path, "r", encoding="utf-8") as f:
                record = json.load(f)
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as e:
            logger.warning(
                "Discarding unreadable cache entry",
                extra={"event": "cache.entry.corrupt", "path": str(path), "error": str(e)},
            )
            self._remove(path)
            return None

        stored_at = record.get("stored_at") if isinstance(record, dict) else None
        if not isinstance(stored_at, (int, float)):
            self._remove(path)
            return None

        if self._clock() - stored_at >= self.ttl_seconds:
            logger.debug("Cache entry expired", extra={"event": "cache.entry.expired", "key": key})
            self._remove(path)
            return None

        logger.debug("Cache hit", extra={"event": "cache.entry.hit", "key": key})
        return record.get("value")

    def set(self, key: str, value: Any) -> None:
        """Store a JSON-serializable value under key."""
        if not self.enabled:
            return

        path = self._path_for(key)
        self.directory.mkdir(parents=True, exist_ok=True)

        record = {"stored_at": self._clock(), "value": value}
        fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=".tmp-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(record, f, ensure_ascii=False)
            os.replace(tmp_name, path)
        except BaseException:
            self._remove(Path(tmp_name))
            raise

        logger.debug("Cache entry stored", extra={"event": "cache.entry.stored", "key": key})

    def delete(self, key: str) -> None:
        """Remove the entry stored under key, if any."""
        self._remove(self._path_for(key))

    def clear(self) -> int:
        """Delete every cache entry.

        Returns:
            Number of entries removed
        """
        if not self.directory.exists():
            return 0

        removed = 0
        for path in self.directory.glob("*.json"):
            if CACHE_KEY_PATTERN.match(path.stem):
                self._remove(path)
                removed += 1
        return removed

    @staticmethod
    def _remove(path: Path) -> None:
        try:
            path.unlink()
        except FileNotFoundError:
            pass
