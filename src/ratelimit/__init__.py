"""Request rate limiting for the acquisition pipeline."""

from src.ratelimit.constants import (
    ANONYMOUS_IDENTIFIER,
    FETCH_HISTORY_MAX_REQUESTS,
    FETCH_HISTORY_RESOURCE,
    FETCH_HISTORY_WINDOW_MS,
)
from src.ratelimit.limiter import RateLimiterProtocol, SlidingWindowRateLimiter


__all__ = [
    "ANONYMOUS_IDENTIFIER",
    "FETCH_HISTORY_MAX_REQUESTS",
    "FETCH_HISTORY_RESOURCE",
    "FETCH_HISTORY_WINDOW_MS",
    "RateLimiterProtocol",
    "SlidingWindowRateLimiter",
]
