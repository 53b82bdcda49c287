"""Mapping of acquisition errors to caller-facing responses.

The presentation layer turns errors into HTTP-like responses. Diagnostic
detail stays in the logs; only the generic messages below reach end users.
"""

from src.errors.taxonomy import AcquisitionError, ErrorKind, RemoteError


HTTP_STATUS_BAD_REQUEST = 400
HTTP_STATUS_TOO_MANY_REQUESTS = 429
HTTP_STATUS_INTERNAL_ERROR = 500

_STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.RATE_LIMITED: HTTP_STATUS_TOO_MANY_REQUESTS,
    ErrorKind.VALIDATION: HTTP_STATUS_BAD_REQUEST,
}

_MESSAGE_BY_KIND: dict[ErrorKind, str] = {
    ErrorKind.RATE_LIMITED: "Too many requests. Please try again later.",
    ErrorKind.VALIDATION: "Invalid date requested.",
    ErrorKind.REMOTE: "Wikipedia API error. Please try again later.",
    ErrorKind.TRANSPORT: "Could not reach Wikipedia. Please try again later.",
    ErrorKind.SCHEMA: "Wikipedia returned data in an unexpected format.",
    ErrorKind.CACHE: "An unexpected error occurred.",
    ErrorKind.UNKNOWN: "An unexpected error occurred.",
}


def http_status_for(error: BaseException) -> int:
    """Map an error to the HTTP status the presentation layer should use.

    Args:
        error: Any exception raised by the pipeline.

    Returns:
        429 for rate limiting, 400 for invalid input, 500 otherwise.
    """
    if isinstance(error, AcquisitionError):
        return _STATUS_BY_KIND.get(error.kind, HTTP_STATUS_INTERNAL_ERROR)
    return HTTP_STATUS_INTERNAL_ERROR


def user_message_for(error: BaseException) -> str:
    """Get a generic, user-safe message for an error.

    Args:
        error: Any exception raised by the pipeline.

    Returns:
        Message suitable for display to end users.
    """
    if not isinstance(error, AcquisitionError):
        return _MESSAGE_BY_KIND[ErrorKind.UNKNOWN]

    if (
        isinstance(error, RemoteError)
        and error.status == HTTP_STATUS_TOO_MANY_REQUESTS
    ):
        return "Too many requests to Wikipedia. Please try again later."

    # Validation messages describe the caller's own input, so they are safe.
    if error.kind == ErrorKind.VALIDATION:
        return error.message

    return _MESSAGE_BY_KIND[error.kind]


def to_error_response(error: BaseException) -> dict[str, str | int]:
    """Build the error payload handed to the presentation layer.

    Args:
        error: Any exception raised by the pipeline.

    Returns:
        Dictionary with ``error`` message, ``code`` kind and ``status``.
    """
    kind = error.kind if isinstance(error, AcquisitionError) else ErrorKind.UNKNOWN
    return {
        "error": user_message_for(error),
        "code": kind.value,
        "status": http_status_for(error),
    }
