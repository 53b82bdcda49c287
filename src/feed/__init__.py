"""On-this-day feed models, validation and sanitization."""

from src.feed.constants import (
    FEED_COLLECTIONS,
    MAX_EVENTS_PER_COLLECTION,
    MAX_PAGES_PER_EVENT,
)
from src.feed.models import (
    ContentUrls,
    DesktopUrls,
    Event,
    Feed,
    Page,
    Thumbnail,
)
from src.feed.sanitizer import FeedSanitizer, sanitize_feed, sanitize_html, strip_tags
from src.feed.validator import FeedValidator, validate_feed


__all__ = [
    # Models
    "ContentUrls",
    "DesktopUrls",
    "Event",
    "Feed",
    "Page",
    "Thumbnail",
    # Validation
    "FeedValidator",
    "validate_feed",
    # Sanitization
    "FeedSanitizer",
    "sanitize_feed",
    "sanitize_html",
    "strip_tags",
    # Constants
    "FEED_COLLECTIONS",
    "MAX_EVENTS_PER_COLLECTION",
    "MAX_PAGES_PER_EVENT",
]
