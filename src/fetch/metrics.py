"""Per-client counters for on-this-day fetches."""

from dataclasses import dataclass, field

from src.errors import ErrorKind


@dataclass
class FetchMetrics:
    """Counters owned by one OnThisDayClient.

    Responses are counted per attempt; successes, failures and durations
    are counted per ``fetch_on_this_day`` call, retries included.
    """

    responses_by_status: dict[int, int] = field(default_factory=dict)
    retries: int = 0
    fetches_succeeded: int = 0
    fetches_failed: dict[str, int] = field(default_factory=dict)
    fetch_duration_ms_total: float = 0.0

    def record_response(self, status_code: int) -> None:
        """Count an upstream answer, whatever its status."""
        self.responses_by_status[status_code] = (
            self.responses_by_status.get(status_code, 0) + 1
        )

    def record_retry(self) -> None:
        self.retries += 1

    def record_success(self) -> None:
        self.fetches_succeeded += 1

    def record_failure(self, kind: ErrorKind) -> None:
        """Count a fetch that ended with a classified error.

        Args:
            kind: Classification of the final error.
        """
        self.fetches_failed[kind.value] = self.fetches_failed.get(kind.value, 0) + 1

    def record_duration(self, duration_ms: float) -> None:
        self.fetch_duration_ms_total += duration_ms

    @property
    def fetch_count(self) -> int:
        """Number of completed fetch calls."""
        return self.fetches_succeeded + sum(self.fetches_failed.values())

    @property
    def avg_fetch_duration_ms(self) -> float:
        """Mean wall time of a fetch call, retries and backoff included."""
        if self.fetch_count == 0:
            return 0.0
        return self.fetch_duration_ms_total / self.fetch_count

    def to_dict(self) -> dict[str, int | float | dict[str, int] | dict[int, int]]:
        """Convert metrics to dictionary.

        Returns:
            Dictionary of metric name to value.
        """
        return {
            "responses_by_status": dict(self.responses_by_status),
            "retries": self.retries,
            "fetches_succeeded": self.fetches_succeeded,
            "fetches_failed": dict(self.fetches_failed),
            "fetch_count": self.fetch_count,
            "avg_fetch_duration_ms": round(self.avg_fetch_duration_ms, 2),
        }
