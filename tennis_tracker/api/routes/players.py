"""Opponent list, create and delete route handlers."""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from tennis_tracker.api.auth_dependencies import get_current_user_id
from tennis_tracker.database.db import get_db_session
from tennis_tracker.models.schemas import CreatePlayerRequest, SuccessResponse
from tennis_tracker.services import data_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/api/players", response_model=List[str])
async def list_players(
    user_id: str = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """Opponent names, most-played first, then alphabetical."""
    try:
        return await data_service.list_player_names(session, user_id)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error loading players: {str(e)}")


@router.post("/api/players", response_model=SuccessResponse)
async def create_player(
    player_request: CreatePlayerRequest,
    user_id: str = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """
    Add an opponent.

    Request body:
        {"name": "Alex"}
    """
    try:
        if not player_request.name or not player_request.name.strip():
            raise HTTPException(status_code=400, detail="Name is required")

        await data_service.create_player(session, user_id, player_request.name.strip())
        return {"success": True}
    except data_service.DuplicatePlayerError:
        raise HTTPException(status_code=400, detail="Player already exists")
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error creating player: {str(e)}")


@router.delete("/api/players/{name}", response_model=SuccessResponse)
async def delete_player(
    name: str,
    user_id: str = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """Remove an opponent. Their matches stay; deleting an unknown name is not an error."""
    try:
        await data_service.delete_player(session, user_id, name)
        return {"success": True}
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error deleting player: {str(e)}")
