"""Error taxonomy for the feed acquisition pipeline.

Every failure surfaced by the pipeline is an ``AcquisitionError`` carrying an
explicit ``ErrorKind`` discriminant. Retry and mapping decisions match on the
kind, never on message text.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Classification of acquisition errors.

    - RATE_LIMITED: Caller exceeded the local request budget
    - VALIDATION: Month/day input rejected
    - REMOTE: Upstream answered with a non-2xx status
    - TRANSPORT: Timeout or network failure before a response arrived
    - SCHEMA: Payload could not be coerced to the feed shape
    - CACHE: Cache store failure
    - UNKNOWN: Unclassified error
    """

    RATE_LIMITED = "RATE_LIMITED"
    VALIDATION = "VALIDATION"
    REMOTE = "REMOTE"
    TRANSPORT = "TRANSPORT"
    SCHEMA = "SCHEMA"
    CACHE = "CACHE"
    UNKNOWN = "UNKNOWN"


ErrorDetails = dict[str, str | int | bool | None]


class AcquisitionError(Exception):
    """Base exception for all pipeline errors.

    Provides structured error information for logging and for mapping to
    caller-facing responses.
    """

    kind: ErrorKind = ErrorKind.UNKNOWN

    def __init__(
        self,
        message: str,
        details: ErrorDetails | None = None,
    ) -> None:
        """Initialize the acquisition error.

        Args:
            message: Diagnostic message (logged, not shown to end users).
            details: Additional structured error details.
        """
        super().__init__(message)
        self.message = message
        self.details: ErrorDetails = details or {}

    def to_dict(self) -> dict[str, str | ErrorDetails]:
        """Convert error to dictionary for logging/serialization.

        Returns:
            Dictionary representation of the error.
        """
        return {
            "kind": self.kind.value,
            "message": self.message,
            "details": dict(self.details),
        }


class RateLimitedError(AcquisitionError):
    """Raised when the local sliding-window budget is exhausted."""

    kind = ErrorKind.RATE_LIMITED

    def __init__(self, identifier: str, resource: str) -> None:
        """Initialize the error.

        Args:
            identifier: Client identifier that was limited.
            resource: Resource name the budget applies to.
        """
        super().__init__(
            f"Rate limit exceeded for {resource}:{identifier}",
            details={"identifier": identifier, "resource": resource},
        )
        self.identifier = identifier
        self.resource = resource


class DateValidationError(AcquisitionError):
    """Raised when the requested month/day is not a valid calendar date."""

    kind = ErrorKind.VALIDATION

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize the error.

        Args:
            message: Human-readable description of the violation.
            field: Name of the offending input field.
        """
        super().__init__(message, details={"field": field})
        self.field = field


class RemoteError(AcquisitionError):
    """Raised when the upstream API answers with a non-2xx status."""

    kind = ErrorKind.REMOTE

    def __init__(self, status: int, url: str | None = None) -> None:
        """Initialize the error.

        Args:
            status: HTTP status code returned by the upstream.
            url: Requested URL.
        """
        super().__init__(
            f"API request failed: {status}",
            details={"status": status, "url": url},
        )
        self.status = status
        self.url = url


class TransportError(AcquisitionError):
    """Raised when a request fails before a response is received."""

    kind = ErrorKind.TRANSPORT

    def __init__(self, message: str, reason: str = "network") -> None:
        """Initialize the error.

        Args:
            message: Diagnostic message from the transport layer.
            reason: Either ``timeout`` or ``network``.
        """
        super().__init__(message, details={"reason": reason})
        self.reason = reason


class SchemaError(AcquisitionError):
    """Raised when a payload cannot be coerced to the feed shape."""

    kind = ErrorKind.SCHEMA

    def __init__(
        self,
        message: str,
        field: str | None = None,
        error_count: int = 1,
    ) -> None:
        """Initialize the error.

        Args:
            message: Human-readable error message.
            field: Dotted path of the first failing field.
            error_count: Number of individual violations found.
        """
        super().__init__(
            message,
            details={"field": field, "error_count": error_count},
        )
        self.field = field
        self.error_count = error_count


class CacheError(AcquisitionError):
    """Raised when the cache store cannot complete an operation."""

    kind = ErrorKind.CACHE

    def __init__(self, message: str, key: str | None = None) -> None:
        """Initialize the error.

        Args:
            message: Diagnostic message.
            key: Cache key involved, if any.
        """
        super().__init__(message, details={"key": key})
        self.key = key


class UnknownError(AcquisitionError):
    """Wraps an unexpected exception raised inside the pipeline."""

    kind = ErrorKind.UNKNOWN
