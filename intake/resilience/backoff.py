"""Exponential backoff with jitter."""

import random
from typing import Callable

from intake.resilience.config import RetryConfig

JITTER_RATIO = 0.25

JitterSource = Callable[[float, float], float]


def compute_delay(
    attempt_number: int,
    config: RetryConfig,
    jitter: JitterSource = random.uniform,
) -> float:
    """Calculate the delay in seconds before retrying after ``attempt_number``.

    Uses the formula: min(max_delay, base_delay * multiplier ^ (attempt - 1)),
    perturbed by uniform jitter within +/-25% of that value and floored at 0.
    Jitter spreads out retries from many callers hitting the same transient
    condition.

    Args:
        attempt_number: 1-based number of the attempt that just failed
        config: RetryConfig with base, ceiling and multiplier
        jitter: Callable returning a uniform value in [low, high]

    Returns:
        Non-negative delay in seconds
    """
    exponent = max(0, attempt_number - 1)
    try:
        growth = config.base_delay_seconds * (config.multiplier**exponent)
    except OverflowError:
        growth = config.max_delay_seconds
    capped = min(config.max_delay_seconds, growth)
    delay = capped + capped * JITTER_RATIO * jitter(-1.0, 1.0)
    return max(0.0, delay)
