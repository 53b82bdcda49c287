"""Constants for the cache layer."""

# Store-wide defaults
DEFAULT_MAX_ENTRIES = 500
DEFAULT_TTL_SECONDS = 5 * 60  # 5 minutes

# On-this-day feeds change at most daily
HISTORY_DATA_TTL_SECONDS = 24 * 60 * 60

HISTORY_KEY_PREFIX = "history"
