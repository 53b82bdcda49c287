"""Constants for feed validation and sanitization."""

# Collections present in every feed, in presentation order
FEED_COLLECTIONS = ("events", "births", "deaths")

# Sanitization caps
MAX_EVENTS_PER_COLLECTION = 20
MAX_PAGES_PER_EVENT = 1

# Supported URL schemes
VALID_URL_SCHEMES = ("http", "https")

# Inline markup allowed in event text and page extracts
ALLOWED_TAGS = frozenset({"p", "b", "i", "em", "strong", "a", "span"})
ALLOWED_ATTRIBUTES = frozenset({"href", "title", "class"})
SAFE_HREF_SCHEMES = frozenset({"http", "https", "mailto"})

# Elements removed together with everything inside them
DROP_CONTENT_TAGS = frozenset(
    {
        "script",
        "style",
        "iframe",
        "object",
        "embed",
        "noscript",
        "template",
        "textarea",
        "svg",
        "math",
        "head",
        "title",
    }
)
