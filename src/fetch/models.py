"""Retry policy for the HTTP fetch layer."""

import random
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

from src.errors import AcquisitionError, ErrorKind, RemoteError
from src.fetch.constants import HTTP_STATUS_SERVER_ERROR_MIN


class RetryPolicy(BaseModel):
    """Configuration for retry behavior.

    Controls how many times to retry and the backoff strategy.
    Uses exponential backoff: delay = base_delay_ms * (exponential_base ^ attempt),
    capped at max_delay_ms.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    max_retries: Annotated[int, Field(ge=0, le=10)] = 2
    base_delay_ms: Annotated[int, Field(ge=0, le=60000)] = 1000
    max_delay_ms: Annotated[int, Field(ge=0, le=300000)] = 5000
    exponential_base: Annotated[float, Field(ge=1.0, le=5.0)] = 2.0
    jitter_factor: Annotated[float, Field(ge=0.0, le=1.0)] = 0.0

    def should_retry(self, error: AcquisitionError, attempt: int) -> bool:
        """Determine if a request should be retried.

        Only upstream 5xx responses and transport failures (timeouts,
        connection errors) are retried; 4xx responses never are.

        Args:
            error: The error that occurred.
            attempt: Current attempt number (0-indexed).

        Returns:
            True if the request should be retried.
        """
        if attempt >= self.max_retries:
            return False

        if error.kind == ErrorKind.TRANSPORT:
            return True

        if error.kind == ErrorKind.REMOTE and isinstance(error, RemoteError):
            return error.status >= HTTP_STATUS_SERVER_ERROR_MIN

        return False

    def get_delay_ms(self, attempt: int) -> int:
        """Calculate delay before the next retry attempt.

        Args:
            attempt: Current attempt number (0-indexed).

        Returns:
            Delay in milliseconds.
        """
        delay = self.base_delay_ms * (self.exponential_base**attempt)
        delay = min(delay, self.max_delay_ms)

        jitter = delay * self.jitter_factor * random.random()  # noqa: S311
        return int(delay + jitter)
