"""Match CRUD route handlers."""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from tennis_tracker.api.auth_dependencies import get_current_user_id
from tennis_tracker.database.db import get_db_session
from tennis_tracker.models.schemas import (
    CreateMatchRequest,
    CreateMatchResponse,
    MatchResponse,
    SuccessResponse,
    UpdateMatchRequest,
    UpdateScoreRequest,
)
from tennis_tracker.services import data_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/api/matches", response_model=List[MatchResponse])
async def list_matches(
    user_id: str = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """All of the user's matches, newest first."""
    try:
        return await data_service.list_matches(session, user_id)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error loading matches: {str(e)}")


@router.post("/api/matches", response_model=CreateMatchResponse)
async def create_match(
    match_request: CreateMatchRequest,
    user_id: str = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """
    Schedule a match. The opponent is added to the player list if new.

    Request body:
        {
            "player1": "Mark",         // Optional - defaults to the user's name setting
            "player2": "Alex",
            "date": "2025-10-15",
            "startTime": "10:00",      // Optional
            "duration": 90,            // Optional, minutes
            "surface": "Hard",
            "season": "Fall 2025"
        }

    Returns:
        {"id": <match id>}
    """
    missing = match_request.missing_fields()
    if missing:
        raise HTTPException(
            status_code=400, detail=f"Missing required field: {', '.join(missing)}"
        )

    try:
        match_id = await data_service.create_match(session, user_id, match_request)
        return {"id": match_id}
    except Exception as e:
        logger.error(f"Error creating match for {user_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error creating match: {str(e)}")


@router.get("/api/matches/{match_id}", response_model=MatchResponse)
async def get_match(
    match_id: int,
    user_id: str = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    match = await data_service.get_match(session, user_id, match_id)
    if not match:
        raise HTTPException(status_code=404, detail="Match not found")
    return match


@router.put("/api/matches/{match_id}", response_model=SuccessResponse)
async def update_match(
    match_id: int,
    match_request: UpdateMatchRequest,
    user_id: str = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """Replace all fields of a match (including score and status)."""
    try:
        updated = await data_service.update_match(session, user_id, match_id, match_request)
        if not updated:
            raise HTTPException(status_code=404, detail="Match not found")
        return {"success": True}
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error updating match: {str(e)}")


@router.put("/api/matches/{match_id}/score", response_model=SuccessResponse)
async def update_match_score(
    match_id: int,
    score_request: UpdateScoreRequest,
    user_id: str = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """
    Record a result; the match is marked completed.

    Request body:
        {"score1": "6,6", "score2": "4,2"}
    """
    try:
        updated = await data_service.update_match_score(
            session, user_id, match_id, score_request.score1, score_request.score2
        )
        if not updated:
            raise HTTPException(status_code=404, detail="Match not found")
        return {"success": True}
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error saving score: {str(e)}")


@router.delete("/api/matches/{match_id}", response_model=SuccessResponse)
async def delete_match(
    match_id: int,
    user_id: str = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """Delete a match. Deleting an id that does not exist is not an error."""
    try:
        await data_service.delete_match(session, user_id, match_id)
        return {"success": True}
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error deleting match: {str(e)}")
