"""Internal constants shared across the library."""

CONFIG_KEY = "sheetcrm_config"
DATA_KEY = "sheetcrm_data"
TOUCHPOINTS_KEY = "sheetcrm_touchpoints"

ENDPOINT_SUFFIX = "/exec"
WRITE_CONTENT_TYPE = "text/plain;charset=utf-8"

# ------------------------------------------------------------------
# Retry budget
# ------------------------------------------------------------------

DEFAULT_ATTEMPTS = 3
NETWORK_RETRY_DELAY_S = 1.5
BUSY_RETRY_DELAY_S = 3.0
BUSY_RETRY_JITTER_S = 1.0
MOCK_DELAY_RANGE_S: tuple[float, float] = (0.3, 0.5)

# Lower-cased substrings of a remote error message that mean the script's
# LockService could not get the document lock.
BUSY_MESSAGE_MARKERS: tuple[str, ...] = (
    "server is busy",
    "lock timeout",
    "could not obtain lock",
)

# ------------------------------------------------------------------
# HTML error pages served instead of JSON
# ------------------------------------------------------------------

HTML_MARKERS: tuple[str, ...] = ("<!doctype html", "<html")
NOT_FOUND_MARKER = "Page Not Found"
SIGN_IN_MARKER = "Sign in"
BODY_EXCERPT_CHARS = 100

# ------------------------------------------------------------------
# Row fallbacks
# ------------------------------------------------------------------

UNKNOWN_ARTIST = "Unknown Artist"
UNKNOWN = "Unknown"
UNASSIGNED = "Unassigned"
MIN_CHILD_ROW_CELLS = 2
