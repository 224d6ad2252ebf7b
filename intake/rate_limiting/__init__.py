"""Per-caller rate limiting."""

from intake.rate_limiting.limiter import FixedWindowRateLimiter, RateLimiter
from intake.rate_limiting.models import RateLimitDecision, RateLimitWindow

__all__ = [
    "FixedWindowRateLimiter",
    "RateLimiter",
    "RateLimitDecision",
    "RateLimitWindow",
]
