"""Composition root for the acquisition pipeline."""

import structlog

from src.acquisition.orchestrator import AcquisitionOrchestrator, FeedSource
from src.cache import CacheStore
from src.fetch import FeedClientConfig, OnThisDayClient, RetryPolicy
from src.ratelimit import SlidingWindowRateLimiter
from src.settings import AppSettings


logger = structlog.get_logger()


def build_client_config(settings: AppSettings) -> FeedClientConfig:
    """Translate application settings into client configuration.

    Args:
        settings: Validated application settings.

    Returns:
        Client configuration.
    """
    return FeedClientConfig(
        base_url=settings.wikipedia_api_url,
        user_agent=settings.wikipedia_api_user_agent,
        timeout_seconds=settings.fetch_timeout_seconds,
        retry_policy=RetryPolicy(max_retries=settings.fetch_max_retries),
    )


def build_orchestrator(
    settings: AppSettings,
    *,
    cache: CacheStore | None = None,
    rate_limiter: SlidingWindowRateLimiter | None = None,
    client: FeedSource | None = None,
    cache_write_failure_fatal: bool = True,
) -> AcquisitionOrchestrator:
    """Create an orchestrator with fresh collaborators.

    Callers that serve many requests should build one orchestrator and
    reuse it so the cache and rate limiter are shared.

    Args:
        settings: Validated application settings.
        cache: Existing cache to share, or None for a new one.
        rate_limiter: Existing limiter to share, or None for a new one.
        client: Existing client, or None to build one from settings.
        cache_write_failure_fatal: Whether cache write failures fail the call.

    Returns:
        Ready-to-use orchestrator.
    """
    if settings.redis_url:
        logger.info(
            "external_cache_ignored",
            component="acquisition",
            reason="in-process cache only",
        )

    # CacheStore defines __len__, so an empty shared cache is falsy.
    if cache is None:
        cache = CacheStore(name="history")

    return AcquisitionOrchestrator(
        rate_limiter=rate_limiter or SlidingWindowRateLimiter(),
        cache=cache,
        client=client or OnThisDayClient(build_client_config(settings)),
        cache_write_failure_fatal=cache_write_failure_fatal,
    )
