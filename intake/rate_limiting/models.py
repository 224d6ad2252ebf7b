"""Rate limiting models."""

from dataclasses import dataclass
from typing import Optional


@dataclass
class RateLimitWindow:
    """Fixed counting window for one caller key.

    Fields:
        caller_key: Key identifying the caller (e.g. network origin)
        window_start: Epoch seconds when the window opened
        count: Requests counted in this window, the current one included
        limit: Maximum requests admitted per window
        window_seconds: Window length
    """

    caller_key: str
    window_start: float
    count: int
    limit: int
    window_seconds: float

    @property
    def reset_at(self) -> float:
        return self.window_start + self.window_seconds

    def has_elapsed(self, now: float) -> bool:
        return now >= self.reset_at


@dataclass(frozen=True)
class RateLimitDecision:
    """Outcome of a check_and_consume call.

    Fields:
        allowed: True if the request is admitted
        limit: Maximum requests per window
        remaining: Requests still admitted in the current window
        reset_at: Epoch seconds when the window resets
        retry_after: Whole seconds until the reset, only set when denied
    """

    allowed: bool
    limit: int
    remaining: int
    reset_at: float
    retry_after: Optional[int] = None
