"""Idempotency cache abstract base class and entry model."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class IdempotencyEntry:
    """Result recorded for an idempotency key.

    Fields:
        key: Idempotency key
        result: Result produced by the first successful completion
        created_at: Epoch seconds when the entry was stored
        expires_at: Epoch seconds after which the entry is ignored
    """

    key: str
    result: Any
    created_at: float
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at


class IdempotencyCache(ABC):
    """Abstract base class for idempotency cache implementations.

    Implementations must perform each method as one atomic step: a reader
    must never observe a half-written entry, and ``put`` must check for a live
    entry and write in the same critical section (first writer wins).
    """

    @abstractmethod
    def get(self, key: str) -> Optional[IdempotencyEntry]:
        """Get the live entry for an idempotency key.

        Args:
            key: Idempotency key.

        Returns:
            The entry, or None if absent or expired. Expired entries are
            evicted as part of the read.
        """
        pass

    @abstractmethod
    def put(self, key: str, result: Any, ttl_seconds: Optional[float] = None) -> bool:
        """Store a result unless a live entry already exists for the key.

        Args:
            key: Idempotency key.
            result: Result to record.
            ttl_seconds: Time-to-live in seconds; implementation default if None.

        Returns:
            True if the result was stored, False if an existing entry won.
        """
        pass

    @abstractmethod
    def invalidate(self, key: str) -> None:
        """Remove the entry for a key, if any."""
        pass

    @abstractmethod
    def sweep(self) -> int:
        """Remove every expired entry.

        Returns:
            Number of entries removed.
        """
        pass

    @abstractmethod
    def clear(self) -> None:
        """Clear all cached entries (for testing)."""
        pass

    @abstractmethod
    def get_stats(self) -> Dict[str, Any]:
        """Get cache statistics.

        Returns:
            Dict with cache statistics (implementation-specific).
        """
        pass
