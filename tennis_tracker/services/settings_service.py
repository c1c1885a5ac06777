"""
Runtime configuration read from environment variables.

Values are read on each call so tests can override them with monkeypatch.
"""

import os
import logging
import secrets
from typing import List, Optional
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

_generated_session_secret: Optional[str] = None


def get_bool_env(key: str, default: bool = True) -> bool:
    """
    Parse a boolean environment variable from a string value.

    Args:
        key: Environment variable name
        default: Default value if the variable is not set

    Returns:
        bool: Parsed boolean value
    """
    value = os.getenv(key)
    if value is None:
        return default
    return value.lower() in ("true", "1", "yes")


def get_int_env(key: str, default: int) -> int:
    value = os.getenv(key)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning(f"Ignoring non-integer {key}={value!r}, using {default}")
        return default


def is_test_env() -> bool:
    return os.getenv("ENV", "").lower() == "test"


def is_production() -> bool:
    return os.getenv("ENV", "").lower() == "production"


def get_app_url() -> str:
    """Public base URL of the app, used to build the OAuth redirect."""
    return os.getenv("APP_URL", "http://localhost:3000").rstrip("/")


def get_google_redirect_uri() -> str:
    return f"{get_app_url()}/api/auth/google/callback"


def get_google_client_id() -> Optional[str]:
    return os.getenv("GOOGLE_CLIENT_ID")


def get_google_client_secret() -> Optional[str]:
    return os.getenv("GOOGLE_CLIENT_SECRET")


def get_calendar_time_zone() -> str:
    return os.getenv("CALENDAR_TIME_ZONE", "UTC")


def get_session_secret() -> str:
    """
    Key used to sign the session cookie.

    Without SESSION_SECRET a random key is generated per process, which signs
    everyone out on restart.
    """
    global _generated_session_secret
    secret = os.getenv("SESSION_SECRET")
    if secret:
        return secret
    if is_production():
        raise RuntimeError("SESSION_SECRET must be set in production")
    if _generated_session_secret is None:
        logger.warning("SESSION_SECRET not set - generating a temporary signing key")
        _generated_session_secret = secrets.token_urlsafe(32)
    return _generated_session_secret


def get_session_max_age() -> int:
    return get_int_env("SESSION_MAX_AGE", 24 * 60 * 60)


def get_session_https_only() -> bool:
    return get_bool_env("SESSION_HTTPS_ONLY", default=False)


def get_allowed_origins() -> List[str]:
    origins = os.getenv("ALLOWED_ORIGINS", "http://localhost:3000")
    return [o.strip() for o in origins.split(",") if o.strip()]
