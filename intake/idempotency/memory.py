"""In-process idempotency cache."""

import threading
import time
from typing import Any, Callable, Dict, Optional

from intake.idempotency.cache import IdempotencyCache, IdempotencyEntry
from intake.logging import get_module_logger

logger = get_module_logger()

DEFAULT_TTL_SECONDS = 600.0
DEFAULT_SWEEP_INTERVAL_SECONDS = 60.0


class InMemoryIdempotencyCache(IdempotencyCache):
    """Time-bounded in-process store of operation results.

    Owned by a pipeline instance and shared by every caller presenting the
    same key. Expired entries are dropped lazily on read, and a sweep of all
    expired entries runs on ``put`` at most once per ``sweep_interval_seconds``
    to bound memory.

    Every public method is synchronous, so under asyncio no other task can
    interleave between the existence check and the write in ``put``. The lock
    additionally covers callers running in worker threads.

    Attributes:
        default_ttl_seconds: TTL used when ``put`` is called without one
        sweep_interval_seconds: Minimum time between automatic sweeps
    """

    def __init__(
        self,
        default_ttl_seconds: float = DEFAULT_TTL_SECONDS,
        sweep_interval_seconds: float = DEFAULT_SWEEP_INTERVAL_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if default_ttl_seconds <= 0:
            raise ValueError("default_ttl_seconds must be positive")
        self.default_ttl_seconds = default_ttl_seconds
        self.sweep_interval_seconds = sweep_interval_seconds
        self._clock = clock
        self._entries: Dict[str, IdempotencyEntry] = {}
        self._lock = threading.Lock()
        self._last_sweep = clock()
        self._hits = 0
        self._misses = 0
        self._writes = 0
        self._rejected_writes = 0
        self._evictions = 0

    def get(self, key: str) -> Optional[IdempotencyEntry]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._misses += 1
                return None

            if entry.is_expired(self._clock()):
                del self._entries[key]
                self._evictions += 1
                self._misses += 1
                logger.debug("idempotency_entry_expired", key=key)
                return None

            self._hits += 1
            return entry

    def put(self, key: str, result: Any, ttl_seconds: Optional[float] = None) -> bool:
        ttl = self.default_ttl_seconds if ttl_seconds is None else ttl_seconds
        with self._lock:
            now = self._clock()
            existing = self._entries.get(key)
            if existing is not None and not existing.is_expired(now):
                self._rejected_writes += 1
                logger.debug("idempotency_write_discarded", key=key)
                return False

            self._entries[key] = IdempotencyEntry(
                key=key,
                result=result,
                created_at=now,
                expires_at=now + ttl,
            )
            self._writes += 1

            if now - self._last_sweep >= self.sweep_interval_seconds:
                self._sweep_locked(now)
            return True

    def invalidate(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def sweep(self) -> int:
        with self._lock:
            return self._sweep_locked(self._clock())

    def _sweep_locked(self, now: float) -> int:
        """Internal version of sweep (assumes lock is held)."""
        expired = [k for k, e in self._entries.items() if e.is_expired(now)]
        for key in expired:
            del self._entries[key]
        self._evictions += len(expired)
        self._last_sweep = now
        if expired:
            logger.debug(
                "idempotency_cache_swept",
                removed=len(expired),
                remaining=len(self._entries),
            )
        return len(expired)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
        logger.info("idempotency_cache_cleared")

    def get_stats(self) -> Dict[str, Any]:
        with self._lock:
            lookups = self._hits + self._misses
            return {
                "size": len(self._entries),
                "hits": self._hits,
                "misses": self._misses,
                "hit_rate": self._hits / lookups if lookups else 0.0,
                "writes": self._writes,
                "rejected_writes": self._rejected_writes,
                "evictions": self._evictions,
            }
