"""Google Calendar route handlers."""

import logging

from fastapi import APIRouter, Depends, HTTPException

from tennis_tracker.api.auth_dependencies import require_user
from tennis_tracker.models.schemas import CalendarEventRequest, SessionData, SuccessResponse
from tennis_tracker.services import google_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/api/calendar/event", response_model=SuccessResponse)
async def create_calendar_event(
    event_request: CalendarEventRequest,
    session_data: SessionData = Depends(require_user),
):
    """
    Add a match to the user's primary Google Calendar.

    Request body:
        {
            "opponent": "Alex",
            "surface": "Clay",
            "date": "2025-10-15",
            "startTime": "10:00",
            "duration": 90   // Optional, minutes
        }

    The match itself is saved separately; a failure here does not undo it.
    """
    if session_data.tokens is None:
        raise HTTPException(status_code=401, detail="Not connected to Google Calendar")

    try:
        await google_service.create_calendar_event(
            tokens=session_data.tokens,
            opponent=event_request.opponent,
            surface=event_request.surface,
            date=event_request.date,
            start_time=event_request.startTime,
            duration=event_request.duration,
        )
    except google_service.GoogleAPIError as e:
        logger.error(f"Error creating calendar event for {session_data.user_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to create calendar event")

    return {"success": True}
