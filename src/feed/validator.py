"""Structural validation of raw on-this-day payloads."""

from collections.abc import Mapping
from typing import Any

import structlog
from pydantic import ValidationError

from src.errors import SchemaError
from src.feed.models import Feed


logger = structlog.get_logger()


def validate_feed(raw: Any) -> Feed:
    """Coerce a raw payload into a Feed.

    Missing collections and fields fall back to their defaults. Present
    fields must have the right type: years and thumbnail sizes are native
    integers, URLs parse as absolute http(s) URLs.

    Args:
        raw: Decoded JSON payload.

    Returns:
        Validated Feed.

    Raises:
        SchemaError: If the payload cannot be coerced to the feed shape.
    """
    if not isinstance(raw, Mapping):
        msg = f"Feed payload must be an object, got {type(raw).__name__}"
        raise SchemaError(msg)

    try:
        return Feed.model_validate(dict(raw))
    except ValidationError as e:
        errors = e.errors()
        first = errors[0] if errors else {}
        field = ".".join(str(part) for part in first.get("loc", ())) or None
        msg = f"Feed payload failed validation at {field}: {first.get('msg')}"
        raise SchemaError(msg, field=field, error_count=len(errors)) from e


class FeedValidator:
    """Validator wrapper injected into the orchestrator."""

    def validate(self, raw: Any) -> Feed:
        """Validate a raw payload.

        Args:
            raw: Decoded JSON payload.

        Returns:
            Validated Feed.

        Raises:
            SchemaError: If the payload cannot be coerced to the feed shape.
        """
        feed = validate_feed(raw)
        logger.debug("feed_validated", component="feed", **feed.counts())
        return feed
