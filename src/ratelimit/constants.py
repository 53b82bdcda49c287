"""Constants for request rate limiting."""

# Bounded storage for per-key timestamp windows
DEFAULT_STORAGE_MAX_ENTRIES = 1000
DEFAULT_STORAGE_TTL_SECONDS = 60

# Budget applied to feed acquisition; there is no authentication, so every
# caller shares the anonymous bucket.
ANONYMOUS_IDENTIFIER = "anonymous"
FETCH_HISTORY_RESOURCE = "fetch-history"
FETCH_HISTORY_MAX_REQUESTS = 30
FETCH_HISTORY_WINDOW_MS = 60_000
