"""Data models for on-this-day feeds.

All models are frozen and hold tuples, so a validated feed can be cached and
shared between callers without risk of in-place mutation. Unknown upstream
keys are ignored; every field tolerates absence.
"""

from typing import Annotated
from urllib.parse import urlparse

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    StrictInt,
    field_validator,
)

from src.feed.constants import VALID_URL_SCHEMES


def _check_url(value: str) -> str:
    """Ensure a string parses as an absolute http(s) URL."""
    parsed = urlparse(value)
    if parsed.scheme not in VALID_URL_SCHEMES or not parsed.netloc:
        msg = f"Invalid URL: {value!r}"
        raise ValueError(msg)
    return value


Url = Annotated[str, AfterValidator(_check_url)]


class Thumbnail(BaseModel):
    """Page thumbnail image."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    source: Url
    width: StrictInt
    height: StrictInt


class DesktopUrls(BaseModel):
    """Desktop links for a page."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    page: Url


class ContentUrls(BaseModel):
    """Content links for a page."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    desktop: DesktopUrls


class Page(BaseModel):
    """Encyclopedia page linked from an event."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    title: str | None = None
    extract: str | None = None
    thumbnail: Thumbnail | None = None
    content_urls: ContentUrls | None = None


class Event(BaseModel):
    """Single historical event, birth or death."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    year: StrictInt | None = None
    text: str | None = None
    pages: tuple[Page, ...] = Field(default_factory=tuple)

    @field_validator("pages", mode="before")
    @classmethod
    def null_pages_as_empty(cls, v: object) -> object:
        """Treat an explicit null page list as empty."""
        return () if v is None else v


class Feed(BaseModel):
    """Events, births and deaths for one calendar date.

    Collection order is the upstream order.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    events: tuple[Event, ...] = Field(default_factory=tuple)
    births: tuple[Event, ...] = Field(default_factory=tuple)
    deaths: tuple[Event, ...] = Field(default_factory=tuple)

    @field_validator("events", "births", "deaths", mode="before")
    @classmethod
    def null_collection_as_empty(cls, v: object) -> object:
        """Treat an explicit null collection as empty."""
        return () if v is None else v

    def counts(self) -> dict[str, int]:
        """Get the size of each collection.

        Returns:
            Dictionary of collection name to length.
        """
        return {
            "events": len(self.events),
            "births": len(self.births),
            "deaths": len(self.deaths),
        }
