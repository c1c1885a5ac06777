"""Bulk data load for the front end."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from tennis_tracker.api.auth_dependencies import require_user
from tennis_tracker.database.db import get_db_session
from tennis_tracker.models.schemas import InitResponse, SessionData
from tennis_tracker.services import data_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/api/init", response_model=InitResponse)
async def init_data(
    session_data: SessionData = Depends(require_user),
    session: AsyncSession = Depends(get_db_session),
):
    """
    Everything the app needs on load: matches, seasons, settings, players and
    whether Google Calendar is linked.
    """
    user_id = session_data.user_id
    try:
        return {
            "matches": await data_service.list_matches(session, user_id),
            "seasons": await data_service.list_seasons(session, user_id),
            "settings": await data_service.get_user_settings(session, user_id),
            "players": await data_service.list_player_names(session, user_id),
            "googleConnected": session_data.calendar_connected,
        }
    except Exception as e:
        logger.error(f"Error initializing data for {user_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to initialize data")
