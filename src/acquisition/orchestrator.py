"""Orchestration of a single on-this-day feed acquisition.

The pipeline runs in one pass:

    rate gate -> input validation -> cache probe -> remote fetch
              -> validate -> sanitize -> cache write-back -> return

Every failure surfaces to the caller with its classification intact; the
orchestrator never falls back to stale or partial data.
"""

import time
import uuid
from typing import Any, Protocol

import structlog

from src.acquisition.constants import (
    COMPONENT_ACQUISITION,
    DAYS_IN_MONTH,
    MAX_DAY,
    MAX_MONTH,
    MIN_DAY,
    MIN_MONTH,
)
from src.acquisition.state_machine import AcquisitionState, AcquisitionStateMachine
from src.cache import CACHE_STRATEGIES, CacheStore, history_cache_key
from src.errors import (
    AcquisitionError,
    CacheError,
    DateValidationError,
    RateLimitedError,
    UnknownError,
)
from src.feed.models import Feed
from src.feed.sanitizer import FeedSanitizer
from src.feed.validator import FeedValidator
from src.ratelimit import (
    ANONYMOUS_IDENTIFIER,
    FETCH_HISTORY_MAX_REQUESTS,
    FETCH_HISTORY_RESOURCE,
    FETCH_HISTORY_WINDOW_MS,
    RateLimiterProtocol,
)


logger = structlog.get_logger()


class FeedSource(Protocol):
    """Protocol for the remote feed client."""

    def fetch_on_this_day(self, month: int, day: int) -> dict[str, Any]:
        """Fetch the raw payload for a date."""
        ...


def validate_date(month: object, day: object) -> tuple[int, int]:
    """Validate a month/day pair.

    February allows 29 days regardless of the year.

    Args:
        month: Requested month.
        day: Requested day of month.

    Returns:
        The validated (month, day).

    Raises:
        DateValidationError: If either value is not an integer in range or
            the day exceeds the month's length.
    """
    if isinstance(month, bool) or not isinstance(month, int):
        msg = "Month must be an integer"
        raise DateValidationError(msg, field="month")
    if not MIN_MONTH <= month <= MAX_MONTH:
        msg = f"Month must be between {MIN_MONTH} and {MAX_MONTH}"
        raise DateValidationError(msg, field="month")

    if isinstance(day, bool) or not isinstance(day, int):
        msg = "Day must be an integer"
        raise DateValidationError(msg, field="day")
    if not MIN_DAY <= day <= MAX_DAY:
        msg = f"Day must be between {MIN_DAY} and {MAX_DAY}"
        raise DateValidationError(msg, field="day")

    if day > DAYS_IN_MONTH[month]:
        msg = "Invalid day for the given month"
        raise DateValidationError(msg, field="day")

    return month, day


class AcquisitionOrchestrator:
    """Composes rate limiter, cache, client, validator and sanitizer.

    All collaborators are injected; the process entry point owns their
    lifecycle. Concurrent calls are independent: two simultaneous misses
    for the same date both fetch and the last cache write wins.
    """

    def __init__(
        self,
        rate_limiter: RateLimiterProtocol,
        cache: CacheStore,
        client: FeedSource,
        validator: FeedValidator | None = None,
        sanitizer: FeedSanitizer | None = None,
        cache_write_failure_fatal: bool = True,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            rate_limiter: Request budget gate.
            cache: Feed cache.
            client: Remote feed client.
            validator: Feed validator.
            sanitizer: Feed sanitizer.
            cache_write_failure_fatal: If False, a failed cache write is
                logged and the feed is still returned.
        """
        self._rate_limiter = rate_limiter
        self._cache = cache
        self._client = client
        self._validator = validator or FeedValidator()
        self._sanitizer = sanitizer or FeedSanitizer()
        self._cache_write_failure_fatal = cache_write_failure_fatal

    def acquire_feed(
        self,
        month: int,
        day: int,
        bypass_cache: bool = False,
    ) -> Feed:
        """Acquire the sanitized feed for a calendar date.

        Args:
            month: Month number (1-12).
            day: Day of month.
            bypass_cache: Skip the cache probe and always fetch.

        Returns:
            Validated, sanitized feed.

        Raises:
            RateLimitedError: Request budget exhausted.
            DateValidationError: Invalid month/day.
            RemoteError: Upstream non-2xx after retries.
            TransportError: Timeout or network failure after retries.
            SchemaError: Payload has the wrong shape.
            CacheError: Cache write failed (when configured as fatal).
            UnknownError: Any other failure.
        """
        request_id = uuid.uuid4().hex[:12]
        machine = AcquisitionStateMachine(request_id)
        log = logger.bind(
            component=COMPONENT_ACQUISITION,
            request_id=request_id,
            month=month,
            day=day,
            bypass_cache=bypass_cache,
        )
        start_time_ns = time.perf_counter_ns()

        try:
            feed = self._run(machine, log, month, day, bypass_cache)
        except AcquisitionError as error:
            self._fail(machine, log, error)
            raise
        except Exception as e:
            msg = f"Unexpected error: {e}"
            unknown = UnknownError(msg)
            self._fail(machine, log, unknown)
            raise unknown from e

        duration_ms = (time.perf_counter_ns() - start_time_ns) / 1_000_000
        from_cache = AcquisitionState.CACHE_HIT in machine.history
        log.info(
            "acquisition_complete",
            duration_ms=round(duration_ms, 2),
            source="cache" if from_cache else "remote",
            events_count=len(feed.events),
            births_count=len(feed.births),
            deaths_count=len(feed.deaths),
        )
        return feed

    def _run(
        self,
        machine: AcquisitionStateMachine,
        log: structlog.stdlib.BoundLogger,
        month: int,
        day: int,
        bypass_cache: bool,
    ) -> Feed:
        """Run the pipeline stages in order."""
        if self._rate_limiter.check_limit(
            ANONYMOUS_IDENTIFIER,
            FETCH_HISTORY_RESOURCE,
            FETCH_HISTORY_MAX_REQUESTS,
            FETCH_HISTORY_WINDOW_MS,
        ):
            log.warning(
                "rate_limit_exceeded",
                identifier=ANONYMOUS_IDENTIFIER,
                resource=FETCH_HISTORY_RESOURCE,
            )
            raise RateLimitedError(ANONYMOUS_IDENTIFIER, FETCH_HISTORY_RESOURCE)
        machine.transition(AcquisitionState.RATE_CHECKED)

        month, day = validate_date(month, day)
        machine.transition(AcquisitionState.INPUT_VALIDATED)

        cache_key = history_cache_key(month, day)

        if not bypass_cache:
            cached = self._cache.get(cache_key)
            if cached is not None:
                log.info("cache_hit", cache_key=cache_key)
                machine.transition(AcquisitionState.CACHE_HIT)
                machine.transition(AcquisitionState.DONE)
                return cached
            log.debug("cache_miss", cache_key=cache_key)

        log.info("feed_fetch_started")
        raw = self._client.fetch_on_this_day(month, day)
        machine.transition(AcquisitionState.FETCHED)
        log.info("feed_fetched", has_data=bool(raw))

        validated = self._validator.validate(raw)
        machine.transition(AcquisitionState.VALIDATED)
        log.info("feed_validated", **validated.counts())

        sanitized = self._sanitizer.sanitize(validated)
        machine.transition(AcquisitionState.SANITIZED)
        log.info("feed_sanitized", **sanitized.counts())

        self._write_back(log, cache_key, sanitized)
        machine.transition(AcquisitionState.CACHED)

        machine.transition(AcquisitionState.DONE)
        return sanitized

    def _write_back(
        self,
        log: structlog.stdlib.BoundLogger,
        cache_key: str,
        feed: Feed,
    ) -> None:
        """Store a sanitized feed under the history strategy.

        Raises:
            CacheError: If the write fails and failures are fatal.
        """
        try:
            self._cache.set(cache_key, feed, CACHE_STRATEGIES["HISTORY_DATA"])
        except Exception as e:
            if self._cache_write_failure_fatal:
                if isinstance(e, CacheError):
                    raise
                msg = f"Cache write failed: {e}"
                raise CacheError(msg, key=cache_key) from e
            log.warning("cache_write_failed", cache_key=cache_key, error=str(e))
            return
        log.info("feed_cached", cache_key=cache_key)

    @staticmethod
    def _fail(
        machine: AcquisitionStateMachine,
        log: structlog.stdlib.BoundLogger,
        error: AcquisitionError,
    ) -> None:
        """Record a failure and move the machine to FAILED."""
        log.error(
            "acquisition_failed",
            stage=machine.pending_stage,
            failed_after=machine.state.value,
            error_kind=error.kind.value,
            error=error.message,
            error_details=error.details,
        )
        if machine.can_transition(AcquisitionState.FAILED):
            machine.transition(AcquisitionState.FAILED)
