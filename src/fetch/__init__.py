"""HTTP fetch layer for the on-this-day feed.

This module provides the remote feed client with:
- Deterministic endpoint URLs with zero-padded dates
- Per-attempt timeouts
- Bounded exponential-backoff retry on 5xx and transport failures
- Metrics collection for observability
"""

from src.fetch.client import OnThisDayClient
from src.fetch.config import FeedClientConfig
from src.fetch.constants import (
    DEFAULT_BASE_URL,
    DEFAULT_TIMEOUT_SECONDS,
    DEFAULT_USER_AGENT,
    HEALTH_TIMEOUT_SECONDS,
    HTTP_STATUS_OK_MAX,
    HTTP_STATUS_OK_MIN,
    HTTP_STATUS_SERVER_ERROR_MIN,
    ON_THIS_DAY_PATH,
)
from src.fetch.metrics import FetchMetrics
from src.fetch.models import RetryPolicy


__all__ = [
    # Client
    "OnThisDayClient",
    # Config
    "FeedClientConfig",
    # Models
    "RetryPolicy",
    # Constants
    "DEFAULT_BASE_URL",
    "DEFAULT_TIMEOUT_SECONDS",
    "DEFAULT_USER_AGENT",
    "HEALTH_TIMEOUT_SECONDS",
    "HTTP_STATUS_OK_MAX",
    "HTTP_STATUS_OK_MIN",
    "HTTP_STATUS_SERVER_ERROR_MIN",
    "ON_THIS_DAY_PATH",
    # Metrics
    "FetchMetrics",
]
