"""HTTP client for the on-this-day feed endpoint with bounded retries."""

import time
from collections.abc import Callable
from typing import Any

import httpx
import structlog

from src.errors import (
    AcquisitionError,
    RemoteError,
    SchemaError,
    TransportError,
)
from src.fetch.config import FeedClientConfig
from src.fetch.constants import (
    HTTP_STATUS_OK_MAX,
    HTTP_STATUS_OK_MIN,
    ON_THIS_DAY_PATH,
)
from src.fetch.metrics import FetchMetrics


logger = structlog.get_logger()


class OnThisDayClient:
    """Client for ``GET {base_url}/feed/onthisday/all/{MM}/{DD}``.

    Provides:
    - Per-attempt timeout
    - Bounded exponential-backoff retry on 5xx and transport failures
    - Classified errors (RemoteError, TransportError, SchemaError)
    - Metrics collection
    """

    def __init__(
        self,
        config: FeedClientConfig | None = None,
        transport: httpx.BaseTransport | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Initialize the client.

        Args:
            config: Client configuration.
            transport: Optional httpx transport (tests use MockTransport).
            sleep: Function used to wait between attempts, in seconds.
        """
        self._config = config or FeedClientConfig()
        self._transport = transport
        self._sleep = sleep
        self._metrics = FetchMetrics()
        self._log = logger.bind(component="fetch")

    @property
    def config(self) -> FeedClientConfig:
        """Get the client configuration."""
        return self._config

    @property
    def metrics(self) -> FetchMetrics:
        """Get the client's fetch metrics."""
        return self._metrics

    def build_url(self, month: int, day: int) -> str:
        """Build the endpoint URL for a date.

        Args:
            month: Month number (1-12).
            day: Day of month (1-31).

        Returns:
            Absolute URL with zero-padded month and day.
        """
        return self._config.base_url + ON_THIS_DAY_PATH.format(month=month, day=day)

    def fetch_on_this_day(self, month: int, day: int) -> dict[str, Any]:
        """Fetch the raw on-this-day payload for a date.

        Args:
            month: Month number (1-12).
            day: Day of month (1-31).

        Returns:
            Decoded JSON object.

        Raises:
            RemoteError: Upstream answered with a non-2xx status.
            TransportError: Timeout or network failure.
            SchemaError: Body is not a JSON object.
        """
        url = self.build_url(month, day)
        log = self._log.bind(url=url, month=month, day=day)

        start_time_ns = time.perf_counter_ns()
        try:
            return self._execute_with_retry(url, log)
        finally:
            duration_ms = (time.perf_counter_ns() - start_time_ns) / 1_000_000
            self._metrics.record_duration(duration_ms)

    def _build_headers(self) -> dict[str, str]:
        return {
            "Api-User-Agent": self._config.user_agent,
            "User-Agent": self._config.user_agent,
            "Accept": "application/json",
        }

    def _execute_with_retry(
        self,
        url: str,
        log: structlog.stdlib.BoundLogger,
    ) -> dict[str, Any]:
        """Execute request with retry logic.

        Args:
            url: URL to fetch.
            log: Bound logger.

        Returns:
            Decoded JSON object from the first successful attempt.

        Raises:
            AcquisitionError: The last error once retries are exhausted, or
                the first non-retryable error.
        """
        policy = self._config.retry_policy
        headers = self._build_headers()

        for attempt in range(policy.max_retries + 1):
            try:
                payload = self._execute_single(url, headers, log, attempt)
            except AcquisitionError as error:
                if not policy.should_retry(error, attempt):
                    self._metrics.record_failure(error.kind)
                    log.warning(
                        "fetch_failed",
                        attempt=attempt,
                        error_kind=error.kind.value,
                        error=error.message,
                    )
                    raise

                delay_ms = policy.get_delay_ms(attempt)
                self._metrics.record_retry()
                log.info(
                    "retry_attempt",
                    attempt=attempt + 1,
                    delay_ms=delay_ms,
                    max_retries=policy.max_retries,
                    error_kind=error.kind.value,
                )
                self._sleep(delay_ms / 1000.0)
                continue

            self._metrics.record_success()
            if attempt:
                log.info("fetch_recovered", attempts=attempt + 1)
            return payload

        # should_retry refuses once attempt reaches max_retries, so the loop
        # always returns or raises before getting here.
        msg = "Retry loop exited without a result"
        raise RuntimeError(msg)

    def _execute_single(
        self,
        url: str,
        headers: dict[str, str],
        log: structlog.stdlib.BoundLogger,
        attempt: int,
    ) -> dict[str, Any]:
        """Execute a single HTTP request.

        Args:
            url: URL to fetch.
            headers: Request headers.
            log: Bound logger.
            attempt: Current attempt number.

        Returns:
            Decoded JSON object.

        Raises:
            RemoteError: Non-2xx status.
            TransportError: Timeout or network failure.
            SchemaError: Body is not a JSON object.
        """
        try:
            with httpx.Client(
                timeout=self._config.timeout_seconds,
                follow_redirects=True,
                transport=self._transport,
            ) as client:
                response = client.get(url, headers=headers)
        except httpx.TimeoutException as e:
            msg = f"Request timed out: {e}"
            raise TransportError(msg, reason="timeout") from e
        except httpx.TransportError as e:
            msg = f"Request failed: {e}"
            raise TransportError(msg, reason="network") from e

        self._metrics.record_response(response.status_code)
        log.debug(
            "fetch_response",
            attempt=attempt,
            status_code=response.status_code,
            bytes=len(response.content),
        )

        if not HTTP_STATUS_OK_MIN <= response.status_code < HTTP_STATUS_OK_MAX:
            raise RemoteError(response.status_code, url=url)

        try:
            payload = response.json()
        except ValueError as e:
            msg = f"Response body is not valid JSON: {e}"
            raise SchemaError(msg) from e

        if not isinstance(payload, dict):
            msg = f"Response body must be a JSON object, got {type(payload).__name__}"
            raise SchemaError(msg)

        return payload
