"""Unit tests for feed payload validation."""

import pytest

from src.errors import ErrorKind, SchemaError
from src.feed import Feed, FeedValidator, validate_feed
from tests.helpers.payloads import LEAP_DAY_PAYLOAD, make_event, make_page, make_payload


class TestValidateFeed:
    """Tests for accepted payloads."""

    def test_full_payload(self) -> None:
        """Test a representative payload with every field present."""
        feed = validate_feed(make_payload(events=3, births=2, deaths=1))

        assert feed.counts() == {"events": 3, "births": 2, "deaths": 1}
        page = feed.events[0].pages[0]
        assert page.title == "Page_1900_0"
        assert page.thumbnail is not None
        assert page.thumbnail.width == 320
        assert page.content_urls is not None
        assert page.content_urls.desktop.page.startswith("https://en.wikipedia.org/")

    def test_missing_collections_default_to_empty(self) -> None:
        """Test that absent collections become empty tuples."""
        feed = validate_feed(LEAP_DAY_PAYLOAD)

        assert len(feed.events) == 1
        assert feed.births == ()
        assert feed.deaths == ()

    def test_null_collections_treated_as_empty(self) -> None:
        """Test that explicit nulls are accepted as empty collections."""
        feed = validate_feed({"events": None, "births": [], "deaths": None})

        assert feed == Feed()

    def test_empty_object(self) -> None:
        """Test that an empty object is a valid, empty feed."""
        assert validate_feed({}) == Feed()

    def test_unknown_keys_ignored(self) -> None:
        """Test that extra upstream keys are dropped."""
        payload = make_payload(events=1, births=0, deaths=0)
        payload["holidays"] = [{"text": "x"}]
        payload["events"][0]["extra"] = "ignored"

        feed = validate_feed(payload)

        assert "extra" not in feed.events[0].model_dump()
        assert not hasattr(feed, "holidays")

    def test_optional_event_fields(self) -> None:
        """Test that events may omit year, text and pages."""
        feed = validate_feed({"events": [{}]})

        event = feed.events[0]
        assert event.year is None
        assert event.text is None
        assert event.pages == ()

    def test_result_is_immutable(self) -> None:
        """Test that the validated feed cannot be mutated in place."""
        feed = validate_feed(make_payload())

        with pytest.raises(ValueError):
            feed.events = ()  # type: ignore[misc]

    def test_validator_wrapper(self) -> None:
        """Test that the injectable validator delegates to validate_feed."""
        payload = make_payload()

        assert FeedValidator().validate(payload) == validate_feed(payload)


class TestValidateFeedRejections:
    """Tests for rejected payloads."""

    @pytest.mark.parametrize("raw", [None, [], "events", 42])
    def test_non_object_payload(self, raw: object) -> None:
        """Test that non-object payloads are rejected."""
        with pytest.raises(SchemaError) as exc_info:
            validate_feed(raw)

        assert exc_info.value.kind == ErrorKind.SCHEMA

    def test_string_year_rejected(self) -> None:
        """Test that a year must be a native integer."""
        with pytest.raises(SchemaError) as exc_info:
            validate_feed({"events": [{"year": "1504", "text": "x"}]})

        assert exc_info.value.field == "events.0.year"

    def test_non_string_text_rejected(self) -> None:
        """Test that event text must be a string."""
        with pytest.raises(SchemaError):
            validate_feed({"births": [{"year": 1900, "text": 12}]})

    def test_collection_must_be_list(self) -> None:
        """Test that collections must be sequences of objects."""
        with pytest.raises(SchemaError) as exc_info:
            validate_feed({"deaths": "none"})

        assert exc_info.value.field is not None
        assert exc_info.value.field.startswith("deaths")

    def test_invalid_thumbnail_url_rejected(self) -> None:
        """Test that thumbnail sources must be absolute http(s) URLs."""
        event = make_event(1900, "x")
        event["pages"] = [
            make_page(
                thumbnail={"source": "javascript:alert(1)", "width": 1, "height": 1}
            )
        ]

        with pytest.raises(SchemaError) as exc_info:
            validate_feed({"events": [event]})

        assert exc_info.value.field == "events.0.pages.0.thumbnail.source"

    def test_thumbnail_dimensions_must_be_integers(self) -> None:
        """Test that thumbnail width and height are strict integers."""
        event = make_event(1900, "x")
        event["pages"] = [
            make_page(
                thumbnail={
                    "source": "https://upload.wikimedia.org/a.jpg",
                    "width": "320",
                    "height": 240,
                }
            )
        ]

        with pytest.raises(SchemaError):
            validate_feed({"events": [event]})

    def test_counts_all_violations(self) -> None:
        """Test that the error records how many fields failed."""
        with pytest.raises(SchemaError) as exc_info:
            validate_feed({"events": [{"year": "a"}, {"year": "b"}]})

        assert exc_info.value.error_count == 2
