"""Per-caller rate limiters.

The limiter interface exposes a single mutator, ``check_and_consume``, which
reads, resets and increments a caller's window in one synchronous step. No
other code path writes window state, so concurrent requests for the same key
can never lose an increment.
"""

import math
import threading
import time
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict

from intake.logging import get_module_logger
from intake.rate_limiting.models import RateLimitDecision, RateLimitWindow

logger = get_module_logger()

DEFAULT_SWEEP_INTERVAL_SECONDS = 60.0


class RateLimiter(ABC):
    """Abstract base class for admission control per caller key.

    A sliding-window or token-bucket implementation can replace the fixed
    window without affecting callers, as long as it honours this interface.
    """

    @abstractmethod
    def check_and_consume(self, caller_key: str) -> RateLimitDecision:
        """Count a request for the caller and decide whether it is admitted."""
        pass

    @abstractmethod
    def reset_key(self, caller_key: str) -> None:
        """Forget the caller's window (admin override, tests)."""
        pass

    @abstractmethod
    def sweep(self) -> int:
        """Drop windows that have elapsed. Returns the number removed."""
        pass

    @abstractmethod
    def clear(self) -> None:
        """Drop all windows."""
        pass

    @abstractmethod
    def get_stats(self) -> Dict[str, Any]:
        """Get limiter statistics."""
        pass


class FixedWindowRateLimiter(RateLimiter):
    """Fixed-window request counter per caller key.

    The first request from a key opens a window of ``window_seconds``. Each
    request in the window increments the counter and is admitted while the
    counter is at most ``limit``. Once the window has elapsed, the next
    request replaces it with a fresh window as part of the same check.

    Attributes:
        name: Scope name used in log events (e.g. "submission", "batch")
        limit: Maximum requests per window
        window_seconds: Window length in seconds
        sweep_interval_seconds: Minimum time between automatic sweeps
    """

    def __init__(
        self,
        limit: int,
        window_seconds: float,
        name: str = "default",
        sweep_interval_seconds: float = DEFAULT_SWEEP_INTERVAL_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if limit < 1:
            raise ValueError("limit must be at least 1")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be positive")
        self.name = name
        self.limit = limit
        self.window_seconds = window_seconds
        self.sweep_interval_seconds = sweep_interval_seconds
        self._clock = clock
        self._windows: Dict[str, RateLimitWindow] = {}
        self._lock = threading.Lock()
        self._last_sweep = clock()

    def check_and_consume(self, caller_key: str) -> RateLimitDecision:
        with self._lock:
            now = self._clock()

            if now - self._last_sweep >= self.sweep_interval_seconds:
                self._sweep_locked(now)

            window = self._windows.get(caller_key)
            if window is None or window.has_elapsed(now):
                window = RateLimitWindow(
                    caller_key=caller_key,
                    window_start=now,
                    count=0,
                    limit=self.limit,
                    window_seconds=self.window_seconds,
                )
                self._windows[caller_key] = window

            window.count += 1
            allowed = window.count <= window.limit
            decision = RateLimitDecision(
                allowed=allowed,
                limit=window.limit,
                remaining=max(0, window.limit - window.count),
                reset_at=window.reset_at,
                retry_after=None if allowed else max(1, math.ceil(window.reset_at - now)),
            )

        if not allowed:
            logger.warning(
                "rate_limit_exceeded",
                limiter=self.name,
                caller_key=caller_key,
                limit=decision.limit,
                retry_after=decision.retry_after,
            )
        return decision

    def reset_key(self, caller_key: str) -> None:
        with self._lock:
            self._windows.pop(caller_key, None)

    def sweep(self) -> int:
        with self._lock:
            return self._sweep_locked(self._clock())

    def _sweep_locked(self, now: float) -> int:
        """Internal version of sweep (assumes lock is held)."""
        elapsed = [k for k, w in self._windows.items() if w.has_elapsed(now)]
        for key in elapsed:
            del self._windows[key]
        self._last_sweep = now
        if elapsed:
            logger.debug(
                "rate_limit_windows_swept",
                limiter=self.name,
                removed=len(elapsed),
                remaining=len(self._windows),
            )
        return len(elapsed)

    def clear(self) -> None:
        with self._lock:
            self._windows.clear()

    def get_stats(self) -> Dict[str, Any]:
        with self._lock:
            now = self._clock()
            active = sum(1 for w in self._windows.values() if not w.has_elapsed(now))
            return {
                "name": self.name,
                "total_keys": len(self._windows),
                "active_keys": active,
            }
