"""
Google OAuth 2.0 and Calendar API client.

Implements the authorization-code flow (consent URL, code exchange, userinfo)
and event creation on the user's primary calendar. Tokens are never
refreshed here; an expired token surfaces as a GoogleAPIError on next use.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional
from urllib.parse import urlencode

import httpx

from tennis_tracker.models.schemas import GoogleUserInfo, OAuthTokens
from tennis_tracker.services import settings_service
from tennis_tracker.utils.constants import DEFAULT_EVENT_DURATION_MINUTES, GOOGLE_OAUTH_SCOPES

logger = logging.getLogger(__name__)

GOOGLE_AUTH_URL = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
GOOGLE_USERINFO_URL = "https://www.googleapis.com/oauth2/v2/userinfo"
GOOGLE_CALENDAR_EVENTS_URL = "https://www.googleapis.com/calendar/v3/calendars/{calendar_id}/events"

REQUEST_TIMEOUT = 10.0


class GoogleAPIError(Exception):
    """A Google endpoint failed or returned something unusable."""


def build_authorization_url(state: Optional[str] = None) -> str:
    """
    Build the consent URL (offline access, forced re-consent).

    Args:
        state: Optional opaque value echoed back to the callback

    Returns:
        URL to open in the browser
    """
    params = {
        "client_id": settings_service.get_google_client_id() or "",
        "redirect_uri": settings_service.get_google_redirect_uri(),
        "response_type": "code",
        "scope": " ".join(GOOGLE_OAUTH_SCOPES),
        "access_type": "offline",
        "prompt": "consent",
    }
    if state:
        params["state"] = state
    return f"{GOOGLE_AUTH_URL}?{urlencode(params)}"


async def exchange_code(code: str) -> OAuthTokens:
    """
    Exchange an authorization code for an access/refresh token pair.

    Raises:
        GoogleAPIError: If the token endpoint rejects the code
    """
    data = {
        "code": code,
        "client_id": settings_service.get_google_client_id() or "",
        "client_secret": settings_service.get_google_client_secret() or "",
        "redirect_uri": settings_service.get_google_redirect_uri(),
        "grant_type": "authorization_code",
    }
    try:
        async with httpx.AsyncClient(timeout=REQUEST_TIMEOUT) as client:
            resp = await client.post(GOOGLE_TOKEN_URL, data=data)
            resp.raise_for_status()
            payload = resp.json()
        return OAuthTokens.model_validate(payload)
    except Exception as e:
        raise GoogleAPIError(f"Token exchange failed: {e}") from e


async def fetch_user_info(access_token: str) -> GoogleUserInfo:
    """
    Fetch the signed-in Google account's profile.

    Raises:
        GoogleAPIError: If the userinfo request fails
    """
    try:
        async with httpx.AsyncClient(timeout=REQUEST_TIMEOUT) as client:
            resp = await client.get(
                GOOGLE_USERINFO_URL,
                headers={"Authorization": f"Bearer {access_token}"},
            )
            resp.raise_for_status()
            payload = resp.json()
        return GoogleUserInfo.model_validate(payload)
    except Exception as e:
        raise GoogleAPIError(f"Userinfo request failed: {e}") from e


def event_window(date: str, start_time: str, duration: Optional[int]) -> tuple:
    """
    Start and end datetimes for a match.

    Args:
        date: "YYYY-MM-DD"
        start_time: "HH:MM"
        duration: Minutes; None or 0 uses the default length

    Returns:
        (start, end) naive datetimes in the calendar's time zone
    """
    start = datetime.strptime(f"{date}T{start_time}", "%Y-%m-%dT%H:%M")
    end = start + timedelta(minutes=duration or DEFAULT_EVENT_DURATION_MINUTES)
    return start, end


def event_title(opponent: str, surface: str) -> str:
    return f"Tennis with {opponent} - {surface}"


async def create_calendar_event(
    tokens: OAuthTokens,
    opponent: str,
    surface: str,
    date: str,
    start_time: str,
    duration: Optional[int] = None,
    calendar_id: str = "primary",
) -> dict:
    """
    Insert a match into the user's Google Calendar.

    Raises:
        GoogleAPIError: If the date/time is invalid or the insert fails

    Returns:
        Created event resource
    """
    try:
        start, end = event_window(date, start_time, duration)
    except ValueError as e:
        raise GoogleAPIError(f"Invalid event date/time: {e}") from e

    time_zone = settings_service.get_calendar_time_zone()
    body = {
        "summary": event_title(opponent, surface),
        "start": {"dateTime": start.isoformat(), "timeZone": time_zone},
        "end": {"dateTime": end.isoformat(), "timeZone": time_zone},
    }

    try:
        async with httpx.AsyncClient(timeout=REQUEST_TIMEOUT) as client:
            resp = await client.post(
                GOOGLE_CALENDAR_EVENTS_URL.format(calendar_id=calendar_id),
                json=body,
                headers={"Authorization": f"Bearer {tokens.access_token}"},
            )
            resp.raise_for_status()
            event = resp.json()
    except Exception as e:
        raise GoogleAPIError(f"Calendar insert failed: {e}") from e

    logger.info(f"Created calendar event {event.get('id')} ({body['summary']})")
    return event
