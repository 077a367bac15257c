"""
In-process response cache with time-to-live and explicit invalidation.

Entries are kept in a dictionary guarded by a lock. The compute function of
``get_or_compute`` runs outside the lock, so two concurrent misses on the same
key may both compute; the last value stored wins. Values are re-derived from
persisted state, so a duplicate computation is harmless.
"""
import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable

logger = logging.getLogger("flask.app")


class CacheComputeError(Exception):
    """Wraps whatever a compute function raised; nothing was cached"""

    def __init__(self, key: str, original: BaseException):
        self.key = key
        self.original = original
        super().__init__(f"Computing cache entry '{key}' failed: {original}")


@dataclass
class CacheEntry:
    """A cached value together with its lifetime"""

    value: Any
    created_at: float
    expires_at: float

    def is_live(self, now: float) -> bool:
        return now < self.expires_at


class ResponseCache:
    """Key/value store with compute-if-absent and prefix invalidation"""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    def get_or_compute(self, key: str, ttl: float, compute_fn: Callable[[], Any]):
        """
        Return the live value stored under key, computing it on a miss

        Args:
            key (str): cache key
            ttl (float): seconds the computed value stays live
            compute_fn (callable): called with no arguments on a miss

        Raises:
            CacheComputeError: compute_fn raised; the key is left empty
        """
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and entry.is_live(now):
                self._hits += 1
                logger.debug("Cache hit: %s", key)
                return entry.value
            if entry is not None:
                del self._entries[key]
            self._misses += 1

        logger.debug("Cache miss: %s", key)
        try:
            value = compute_fn()
        except CacheComputeError:
            raise
        except Exception as error:  # pylint: disable=broad-except
            logger.debug("Not caching %s: %s", key, error)
            raise CacheComputeError(key, error) from error

        created = self._clock()
        with self._lock:
            self._entries[key] = CacheEntry(value, created, created + ttl)
        return value

    def invalidate(self, key: str) -> None:
        """Remove one entry; missing keys are ignored"""
        with self._lock:
            removed = self._entries.pop(key, None)
        if removed is not None:
            logger.debug("Invalidated cache key %s", key)

    def invalidate_pattern(self, prefix: str) -> int:
        """Remove every entry whose key starts with prefix"""
        with self._lock:
            doomed = [key for key in self._entries if key.startswith(prefix)]
            for key in doomed:
                del self._entries[key]
        logger.debug("Invalidated %d cache keys with prefix %s", len(doomed), prefix)
        return len(doomed)

    def clear(self) -> None:
        """Drop every entry and reset the counters"""
        with self._lock:
            self._entries.clear()
            self._hits = 0
            self._misses = 0

    def keys(self) -> list[str]:
        """Keys of the entries that have not expired"""
        now = self._clock()
        with self._lock:
            return [key for key, entry in self._entries.items() if entry.is_live(now)]

    def stats(self) -> dict:
        with self._lock:
            return {"hits": self._hits, "misses": self._misses, "size": len(self._entries)}

    def __contains__(self, key: str) -> bool:
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            return entry is not None and entry.is_live(now)

    def __len__(self) -> int:
        return len(self.keys())
