"""Error taxonomy and response mapping for the acquisition pipeline."""

from src.errors.mapper import http_status_for, to_error_response, user_message_for
from src.errors.taxonomy import (
    AcquisitionError,
    CacheError,
    DateValidationError,
    ErrorKind,
    RateLimitedError,
    RemoteError,
    SchemaError,
    TransportError,
    UnknownError,
)


__all__ = [
    # Taxonomy
    "AcquisitionError",
    "CacheError",
    "DateValidationError",
    "ErrorKind",
    "RateLimitedError",
    "RemoteError",
    "SchemaError",
    "TransportError",
    "UnknownError",
    # Mapping
    "http_status_for",
    "to_error_response",
    "user_message_for",
]
