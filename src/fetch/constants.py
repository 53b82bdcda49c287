"""HTTP constants for the fetch layer.

Centralizes all HTTP-related constants to avoid duplication across modules.
"""

# HTTP Status Code Ranges
HTTP_STATUS_OK_MIN = 200
HTTP_STATUS_OK_MAX = 300
HTTP_STATUS_SERVER_ERROR_MIN = 500

# Upstream endpoint
DEFAULT_BASE_URL = "https://en.wikipedia.org/api/rest_v1"
DEFAULT_USER_AGENT = (
    "ChronosDashboard/1.0 (https://localhost:3000; contact@example.com)"
)
ON_THIS_DAY_PATH = "/feed/onthisday/all/{month:02d}/{day:02d}"

# Request defaults
DEFAULT_TIMEOUT_SECONDS = 10.0
HEALTH_TIMEOUT_SECONDS = 5.0
