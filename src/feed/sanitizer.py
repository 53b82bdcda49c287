"""Markup sanitization and size capping for validated feeds."""

from urllib.parse import urlparse

import structlog
from bs4 import BeautifulSoup, NavigableString, Tag

from src.feed.constants import (
    ALLOWED_ATTRIBUTES,
    ALLOWED_TAGS,
    DROP_CONTENT_TAGS,
    MAX_EVENTS_PER_COLLECTION,
    MAX_PAGES_PER_EVENT,
    SAFE_HREF_SCHEMES,
)
from src.feed.models import Event, Feed, Page


logger = structlog.get_logger()

_NO_TAGS: frozenset[str] = frozenset()


def _is_safe_href(value: str) -> bool:
    """Check that a link target is relative or uses a safe scheme."""
    # Control characters and whitespace are ignored by browsers when
    # resolving the scheme, so strip them before parsing.
    compact = "".join(ch for ch in value if ch.isprintable() and not ch.isspace())
    scheme = urlparse(compact).scheme.lower()
    return not scheme or scheme in SAFE_HREF_SCHEMES


def _clean_attributes(tag: Tag, allowed_attributes: frozenset[str]) -> None:
    kept: dict[str, str | list[str]] = {}
    for name, value in tag.attrs.items():
        attr = name.lower()
        if attr not in allowed_attributes:
            continue
        if attr == "href" and not _is_safe_href(str(value)):
            continue
        kept[attr] = value
    tag.attrs = kept


def _clean_children(
    node: Tag,
    allowed_tags: frozenset[str],
    allowed_attributes: frozenset[str],
) -> None:
    """Recursively strip disallowed markup below ``node``.

    Disallowed tags are unwrapped so their text survives; tags in
    DROP_CONTENT_TAGS are removed along with their content. Comments,
    doctypes and other non-text strings are removed.
    """
    for child in list(node.children):
        if isinstance(child, Tag):
            name = child.name.lower()
            if name in DROP_CONTENT_TAGS:
                child.decompose()
                continue
            _clean_children(child, allowed_tags, allowed_attributes)
            if name in allowed_tags:
                _clean_attributes(child, allowed_attributes)
            else:
                child.unwrap()
        elif isinstance(child, NavigableString) and type(child) is not NavigableString:
            child.extract()


def _sanitize(
    markup: str,
    allowed_tags: frozenset[str],
    allowed_attributes: frozenset[str],
) -> str:
    soup = BeautifulSoup(markup, "html.parser")
    _clean_children(soup, allowed_tags, allowed_attributes)
    return soup.decode(formatter="minimal")


def sanitize_html(markup: str) -> str:
    """Reduce markup to the minimal inline set.

    Keeps ``p b i em strong a span`` with ``href title class`` attributes.

    Args:
        markup: Untrusted HTML fragment.

    Returns:
        Sanitized HTML fragment.
    """
    return _sanitize(markup, ALLOWED_TAGS, ALLOWED_ATTRIBUTES)


def strip_tags(markup: str) -> str:
    """Remove all markup, leaving HTML-escaped text.

    Args:
        markup: Untrusted HTML fragment.

    Returns:
        Text content with no tags.
    """
    return _sanitize(markup, _NO_TAGS, _NO_TAGS)


def _sanitize_page(page: Page) -> Page:
    return page.model_copy(
        update={
            "title": strip_tags(page.title) if page.title else "",
            "extract": sanitize_html(page.extract) if page.extract else None,
        }
    )


def _sanitize_event(event: Event) -> Event:
    return event.model_copy(
        update={
            "text": sanitize_html(event.text) if event.text else "",
            "pages": tuple(
                _sanitize_page(page) for page in event.pages[:MAX_PAGES_PER_EVENT]
            ),
        }
    )


def _sanitize_collection(events: tuple[Event, ...]) -> tuple[Event, ...]:
    return tuple(
        _sanitize_event(event) for event in events[:MAX_EVENTS_PER_COLLECTION]
    )


def sanitize_feed(feed: Feed) -> Feed:
    """Sanitize a validated feed for presentation.

    Truncates each collection to MAX_EVENTS_PER_COLLECTION, keeps only the
    first page of each event, sanitizes event text and page extracts, and
    strips all markup from page titles. Absent event text becomes "".
    Sanitizing an already sanitized feed returns an equal feed.

    Args:
        feed: Validated feed.

    Returns:
        New sanitized feed.
    """
    return Feed(
        events=_sanitize_collection(feed.events),
        births=_sanitize_collection(feed.births),
        deaths=_sanitize_collection(feed.deaths),
    )


class FeedSanitizer:
    """Sanitizer wrapper injected into the orchestrator."""

    def sanitize(self, feed: Feed) -> Feed:
        """Sanitize a validated feed.

        Args:
            feed: Validated feed.

        Returns:
            New sanitized feed.
        """
        sanitized = sanitize_feed(feed)
        logger.debug("feed_sanitized", component="feed", **sanitized.counts())
        return sanitized
