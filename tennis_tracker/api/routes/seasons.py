"""Season and stats route handlers."""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from tennis_tracker.api.auth_dependencies import get_current_user_id
from tennis_tracker.database.db import get_db_session
from tennis_tracker.database.models import MatchStatus
from tennis_tracker.models.schemas import HeadToHeadResponse, StatsResponse
from tennis_tracker.services import calculation_service, data_service

logger = logging.getLogger(__name__)
router = APIRouter()


def _group_to_dict(group: calculation_service.GroupStats, label: str) -> dict:
    return {
        label: group.name,
        "matchCount": group.match_count,
        "gamesWon": group.games_won,
        "gamesLost": group.games_lost,
        "winPercentage": group.win_percentage,
    }


@router.get("/api/seasons", response_model=List[str])
async def list_seasons(
    user_id: str = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """Distinct season labels, descending."""
    try:
        return await data_service.list_seasons(session, user_id)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error loading seasons: {str(e)}")


@router.get("/api/stats", response_model=StatsResponse)
async def get_stats(
    user_id: str = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """
    Completed matches plus dashboard aggregates.

    Returns:
        {
            "totalGames": <completed match count>,
            "matches": [...completed matches...],
            "summary": {overall game win %, per-surface and per-season breakdowns}
        }
    """
    try:
        matches = await data_service.list_matches(session, user_id)
        completed = await data_service.list_matches(
            session, user_id, status=MatchStatus.COMPLETED
        )
        completed_count = await data_service.count_matches(
            session, user_id, status=MatchStatus.COMPLETED
        )
        surfaces = await data_service.get_surfaces(session, user_id)
        seasons = await data_service.list_seasons(session, user_id)

        stats = calculation_service.overall_stats(matches, surfaces, seasons)
        return {
            "totalGames": completed_count,
            "matches": completed,
            "summary": {
                "completedMatches": stats.completed_matches,
                "upcomingMatches": stats.upcoming_matches,
                "gamesWon": stats.games_won,
                "gamesLost": stats.games_lost,
                "winPercentage": stats.win_percentage,
                "surfaces": [_group_to_dict(s, "surface") for s in stats.surfaces],
                "seasons": [_group_to_dict(s, "season") for s in stats.seasons],
            },
        }
    except Exception as e:
        logger.error(f"Error computing stats for {user_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error loading stats: {str(e)}")


@router.get("/api/stats/head-to-head", response_model=Optional[HeadToHeadResponse])
async def get_head_to_head(
    opponent: str,
    surface: str,
    user_id: str = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """Games won/lost against one opponent on one surface; null if never played there."""
    try:
        completed = await data_service.list_matches(
            session, user_id, status=MatchStatus.COMPLETED
        )
        h2h = calculation_service.head_to_head(completed, opponent, surface)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error loading head-to-head: {str(e)}")

    if h2h is None:
        return None
    return {
        "gamesWon": h2h.games_won,
        "gamesLost": h2h.games_lost,
        "matchCount": h2h.match_count,
        "winPercentage": h2h.win_percentage,
    }
