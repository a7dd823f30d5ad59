"""Template file content store for tplview."""

import logging
import threading
import time
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .exceptions import ContentReadError

logger = logging.getLogger(__name__)


class ContentStore:
    """Thread-safe file content cache with TTL and hot-reload detection."""

    def __init__(self, ttl_seconds: float = 300, enable_hot_reload: bool = True):
        """Initialize the content store.

        Args:
            ttl_seconds: Time-to-live for cached contents in seconds
            enable_hot_reload: Whether to drop entries whose file mtime changed
        """
        self._cache: Dict[str, Dict[str, Any]] = {}
        self._lock = threading.RLock()
        self._ttl_seconds = ttl_seconds
        self._enable_hot_reload = enable_hot_reload
        self._hits = 0
        self._misses = 0

    def read(self, file_path: Union[str, Path]) -> bytes:
        """Return the contents of ``file_path``, from cache when still valid.

        Args:
            file_path: Absolute path of a template file

        Returns:
            Raw file bytes

        Raises:
            ContentReadError: If the file cannot be read
        """
        cached = self.get(file_path)
        if cached is not None:
            return cached

        path = Path(file_path)
        try:
            content = path.read_bytes()
        except OSError as e:
            raise ContentReadError(
                f"Error reading template file {path}: {e.strerror or e}"
            ) from e

        self.set(path, content)
        return content

    def get(self, file_path: Union[str, Path]) -> Optional[bytes]:
        """Get cached contents if available and valid.

        Args:
            file_path: Path to the template file

        Returns:
            Cached bytes if valid, None otherwise
        """
        path = Path(file_path).resolve()
        cache_key = str(path)

        with self._lock:
            if cache_key not in self._cache:
                self._misses += 1
                return None

            cache_entry = self._cache[cache_key]
            current_time = time.time()

            # Check TTL expiry
            if current_time - cache_entry["timestamp"] > self._ttl_seconds:
                del self._cache[cache_key]
                self._misses += 1
                return None

            if self._enable_hot_reload:
                try:
                    current_mtime = path.stat().st_mtime
                except OSError:
                    # File was deleted or became inaccessible
                    del self._cache[cache_key]
                    self._misses += 1
                    return None
                if current_mtime != cache_entry["mtime"]:
                    logger.debug(f"Template changed on disk: {cache_key}")
                    del self._cache[cache_key]
                    self._misses += 1
                    return None

            self._hits += 1
            return cache_entry["content"]

    def set(self, file_path: Union[str, Path], content: bytes) -> None:
        """Cache file contents.

        Args:
            file_path: Path to the template file
            content: File bytes to cache
        """
        path = Path(file_path).resolve()
        cache_key = str(path)

        try:
            mtime = path.stat().st_mtime if self._enable_hot_reload else 0.0
        except OSError:
            mtime = 0.0

        with self._lock:
            self._cache[cache_key] = {
                "content": content,
                "timestamp": time.time(),
                "mtime": mtime,
            }

    def invalidate(self, file_path: Union[str, Path]) -> bool:
        """Invalidate a specific cached file.

        Returns:
            True if an entry was removed, False if it wasn't cached
        """
        cache_key = str(Path(file_path).resolve())

        with self._lock:
            if cache_key in self._cache:
                del self._cache[cache_key]
                return True
            return False

    def clear(self) -> None:
        """Clear all cached contents."""
        with self._lock:
            self._cache.clear()

    def size(self) -> int:
        """Get the current number of cached files."""
        with self._lock:
            return len(self._cache)

    def cleanup_expired(self) -> int:
        """Remove expired cache entries.

        Returns:
            Number of entries removed
        """
        current_time = time.time()

        with self._lock:
            expired_keys = [
                key
                for key, entry in self._cache.items()
                if current_time - entry["timestamp"] > self._ttl_seconds
            ]
            for key in expired_keys:
                del self._cache[key]

        return len(expired_keys)

    def get_stats(self) -> Dict[str, Any]:
        """Get cache statistics."""
        with self._lock:
            return {
                "total_entries": len(self._cache),
                "hits": self._hits,
                "misses": self._misses,
                "ttl_seconds": self._ttl_seconds,
                "hot_reload_enabled": self._enable_hot_reload,
            }


# Global store instance
_global_store: Optional[ContentStore] = None
_store_lock = threading.Lock()


def get_global_store() -> ContentStore:
    """Get the process-wide content store, creating it on first use."""
    global _global_store

    if _global_store is None:
        with _store_lock:
            if _global_store is None:
                _global_store = ContentStore()

    return _global_store


def set_global_store(store: Optional[ContentStore]) -> None:
    """Replace the process-wide content store.

    Args:
        store: Store instance to set, or None to create a new default store
    """
    global _global_store

    with _store_lock:
        _global_store = store or ContentStore()
