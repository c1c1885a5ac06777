"""
Constants used across the tennis tracker.
"""

# Owner of rows migrated from the single-user schema, and fallback session id
DEFAULT_USER_ID = "default"

# Per-user settings keys
SETTING_USER_NAME = "user_name"
SETTING_DEFAULT_START_TIME = "default_start_time"
SETTING_DEFAULT_DURATION = "default_duration"
SETTING_SURFACES = "surfaces"

DEFAULT_SURFACES = ["Clay", "Grass", "Hard", "Carpet"]
DEFAULT_START_TIME = "10:00"
DEFAULT_DURATION = "90"  # minutes
DEFAULT_PLAYER_NAME = "Player"

# Separator for surfaces and set scores ("6,3")
LIST_SEPARATOR = ","

# Calendar events without a duration last this long
DEFAULT_EVENT_DURATION_MINUTES = 90

GOOGLE_OAUTH_SCOPES = [
    "https://www.googleapis.com/auth/calendar.events",
    "https://www.googleapis.com/auth/userinfo.email",
    "https://www.googleapis.com/auth/userinfo.profile",
]
