"""Per-user settings route handlers."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from tennis_tracker.api.auth_dependencies import get_current_user_id
from tennis_tracker.database.db import get_db_session
from tennis_tracker.models.schemas import SettingsResponse, SuccessResponse, UpdateSettingsRequest
from tennis_tracker.services import data_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/api/settings", response_model=SettingsResponse)
async def get_settings(
    user_id: str = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """Get the user's settings, with defaults for anything unset."""
    try:
        return await data_service.get_user_settings(session, user_id)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error loading settings: {str(e)}")


@router.post("/api/settings", response_model=SuccessResponse)
async def update_settings(
    settings_request: UpdateSettingsRequest,
    user_id: str = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """
    Upsert settings. Omitted fields are left as they are.

    Request body:
        {
            "userName": "Mark",
            "defaultStartTime": "10:00",
            "defaultDuration": 90,
            "surfaces": ["Clay", "Hard"]   // or "Clay,Hard"
        }
    """
    try:
        await data_service.update_user_settings(
            session,
            user_id,
            user_name=settings_request.userName,
            default_start_time=settings_request.defaultStartTime,
            default_duration=settings_request.defaultDuration,
            surfaces=settings_request.surfaces,
        )
        return {"success": True}
    except Exception as e:
        logger.error(f"Error saving settings for {user_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error saving settings: {str(e)}")
