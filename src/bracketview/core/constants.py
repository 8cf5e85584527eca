"""
Configuration constants for the bracket display.

This module centralizes the default parameters used by the API client, the
refresh drivers and the layout engine so that every entry point agrees on
the same values.
"""

# =============================================================================
# start.gg API
# =============================================================================

STARTGG_API_URL = "https://api.start.gg/gql/alpha"
STARTGG_TOKEN_ENV = "STARTGG_TOKEN"

# Request defaults
DEFAULT_TIMEOUT = 10.0
DEFAULT_MAX_RETRIES = 3
DEFAULT_BACKOFF_FACTOR = 1.5
DEFAULT_SETS_PER_PAGE = 64

# =============================================================================
# Refresh delays (seconds, measured from the end of the previous run)
# =============================================================================

DEFAULT_BRACKET_DELAY: float = 30.0
DEFAULT_OVERLAY_DELAY: float = 5.0
DEFAULT_SCHEDULE_DELAY: float = 15.0
DEFAULT_POOL_CYCLE_DELAY: float = 8.0
DEFAULT_SIDE_TOGGLE_DELAY: float = 4.0
DEFAULT_COUNTDOWN_DELAY: float = 1.0

# =============================================================================
# Bracket semantics
# =============================================================================

GRAND_FINAL_LABEL = "Grand Final"
GRAND_FINAL_RESET_LABEL = "Grand Final Reset"
LOSERS_FINAL_LABEL = "Losers Final"

SYNTHETIC_ID_PREFIX = "preview"
RESET_NAMESPACE = "gfr"

TBD = "TBD"
NAME_DELIMITER = "|"
MAX_NAME_LENGTH: int = 16
ELLIPSIS = "…"

# =============================================================================
# Layout defaults
# =============================================================================

DEFAULT_COLUMN_PITCH: float = 220.0
DEFAULT_X_OFFSET: float = 20.0
DEFAULT_Y_OFFSET: float = 40.0
DEFAULT_AVAILABLE_HEIGHT: float = 600.0
DEFAULT_BOX_WIDTH: float = 180.0
DEFAULT_BOX_HEIGHT: float = 44.0
DEFAULT_SPACING_MODE = "centered"

# =============================================================================
# Panels and storage
# =============================================================================

SCHEDULE_TIMEZONE = "America/Los_Angeles"
SCHEDULE_TIME_FORMAT = "%b %d, %I:%M %p"
MAX_SCHEDULE_ENTRIES: int = 4
NOT_ACTIVE_TEXT = "Not Active"
NO_MATCHES_TEXT = "No matches found"
NO_BRACKET_TEXT = "No bracket data."

BRACKET_CACHE_KEY = "bracket_data"
DEFAULT_CACHE_FILE = "data/bracket_cache.json"
DEFAULT_OUTPUT_DIR = "data/display"
