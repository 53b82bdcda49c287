"""Upstream liveness probe.

Reports whether the encyclopedia API answers a HEAD request. The probe is
read-only with respect to the pipeline: it never touches the cache or the
rate limiter.
"""

import time
from datetime import UTC, datetime
from typing import Literal

import httpx
import structlog
from pydantic import BaseModel, ConfigDict, Field

from src.fetch.constants import (
    HEALTH_TIMEOUT_SECONDS,
    HTTP_STATUS_OK_MAX,
    HTTP_STATUS_OK_MIN,
)


logger = structlog.get_logger()

HTTP_STATUS_HEALTHY = 200
HTTP_STATUS_UNAVAILABLE = 503

ServiceStatus = Literal["ok", "degraded", "unhealthy"]


class ServiceHealth(BaseModel):
    """Health of each dependency."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    wikipedia: ServiceStatus
    cache: ServiceStatus = "ok"


class HealthReport(BaseModel):
    """Result of a liveness check."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    status: Literal["healthy", "degraded"]
    timestamp: datetime
    services: ServiceHealth
    uptime_seconds: float = Field(ge=0)

    @property
    def http_status(self) -> int:
        """HTTP status the health endpoint should answer with."""
        if self.status == "healthy":
            return HTTP_STATUS_HEALTHY
        return HTTP_STATUS_UNAVAILABLE


class HealthProbe:
    """HEAD-requests the upstream base URL with a short timeout."""

    def __init__(
        self,
        base_url: str,
        user_agent: str,
        timeout_seconds: float = HEALTH_TIMEOUT_SECONDS,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the probe.

        Args:
            base_url: Upstream API base URL.
            user_agent: Identifying client string.
            timeout_seconds: Request timeout.
            transport: Optional httpx transport for tests.
        """
        self._url = base_url.rstrip("/") + "/"
        self._user_agent = user_agent
        self._timeout = timeout_seconds
        self._transport = transport
        self._started = time.monotonic()
        self._log = logger.bind(component="health")

    def check(self) -> HealthReport:
        """Probe the upstream once.

        Returns:
            Health report. A non-2xx answer marks the upstream ``degraded``
            but keeps the overall status ``healthy``; only an unreachable
            upstream degrades the overall status.
        """
        wikipedia: ServiceStatus
        try:
            with httpx.Client(
                timeout=self._timeout,
                follow_redirects=True,
                transport=self._transport,
            ) as client:
                response = client.head(
                    self._url, headers={"User-Agent": self._user_agent}
                )
            ok = HTTP_STATUS_OK_MIN <= response.status_code < HTTP_STATUS_OK_MAX
            wikipedia = "ok" if ok else "degraded"
            self._log.debug("health_probe", status_code=response.status_code)
        except httpx.HTTPError as e:
            wikipedia = "unhealthy"
            self._log.warning("health_probe_failed", error=str(e))

        return HealthReport(
            status="degraded" if wikipedia == "unhealthy" else "healthy",
            timestamp=datetime.now(UTC),
            services=ServiceHealth(wikipedia=wikipedia),
            uptime_seconds=round(time.monotonic() - self._started, 3),
        )
