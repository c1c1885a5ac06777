"""
Data service layer for database operations.
Handles all CRUD operations for settings, players, matches and seasons.

Every function is scoped to a user id; rows belonging to other users are
never read or written.
"""

import logging
from typing import List, Dict, Optional, Union, TYPE_CHECKING
from sqlalchemy.ext.asyncio import AsyncSession

if TYPE_CHECKING:
    from tennis_tracker.models.schemas import CreateMatchRequest, UpdateMatchRequest
from sqlalchemy import select, update, delete, func, and_
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError
from tennis_tracker.database.models import Match, MatchStatus, Player, Setting
from tennis_tracker.utils.constants import (
    DEFAULT_DURATION,
    DEFAULT_START_TIME,
    DEFAULT_SURFACES,
    LIST_SEPARATOR,
    SETTING_DEFAULT_DURATION,
    SETTING_DEFAULT_START_TIME,
    SETTING_SURFACES,
    SETTING_USER_NAME,
)

logger = logging.getLogger(__name__)


class DuplicatePlayerError(ValueError):
    """Raised when a user already has a player with the given name."""


#
# Helper functions
#


def match_to_dict(match: Match) -> Dict:
    """Convert a Match row to its API dictionary."""
    return {
        "id": match.id,
        "player1": match.player1,
        "player2": match.player2,
        "date": match.date,
        "start_time": match.start_time,
        "duration": match.duration,
        "surface": match.surface,
        "season": match.season,
        "score1": match.score1,
        "score2": match.score2,
        "status": match.status.value if match.status else None,
    }


def split_surfaces(value: Optional[str]) -> List[str]:
    if not value:
        return list(DEFAULT_SURFACES)
    return [s for s in value.split(LIST_SEPARATOR) if s]


def _insert(session: AsyncSession, model):
    """INSERT with ON CONFLICT support for the bound dialect (SQLite or PostgreSQL)."""
    if session.bind.dialect.name == "postgresql":
        return pg_insert(model)
    return sqlite_insert(model)


#
# Settings
#


async def get_settings_map(session: AsyncSession, user_id: str) -> Dict[str, str]:
    """All raw settings rows for a user as {key: value}."""
    result = await session.execute(select(Setting).where(Setting.user_id == user_id))
    return {s.key: s.value for s in result.scalars().all()}


async def get_setting(session: AsyncSession, user_id: str, key: str) -> Optional[str]:
    """
    Get a setting value.

    Args:
        session: Database session
        user_id: Owner of the setting
        key: Setting key

    Returns:
        Setting value or None if not found
    """
    result = await session.execute(
        select(Setting).where(and_(Setting.user_id == user_id, Setting.key == key))
    )
    setting = result.scalar_one_or_none()
    return setting.value if setting else None


async def set_setting(session: AsyncSession, user_id: str, key: str, value: str) -> None:
    """
    Set a setting value (upsert).

    Args:
        session: Database session
        user_id: Owner of the setting
        key: Setting key
        value: Setting value
    """
    stmt = _insert(session, Setting).values(user_id=user_id, key=key, value=value)
    stmt = stmt.on_conflict_do_update(
        index_elements=["user_id", "key"],
        set_=dict(value=stmt.excluded.value),
    )
    await session.execute(stmt)
    await session.commit()


async def has_settings(session: AsyncSession, user_id: str) -> bool:
    result = await session.execute(
        select(Setting.key).where(Setting.user_id == user_id).limit(1)
    )
    return result.first() is not None


async def add_default_setting(session: AsyncSession, user_id: str, key: str, value: str) -> None:
    """Insert a setting only if the user does not have that key yet."""
    stmt = _insert(session, Setting).values(user_id=user_id, key=key, value=value)
    stmt = stmt.on_conflict_do_nothing(index_elements=["user_id", "key"])
    await session.execute(stmt)


async def get_user_settings(session: AsyncSession, user_id: str) -> Dict:
    """
    Get a user's settings in API form, with defaults for missing keys.

    Returns:
        {"userName", "defaultStartTime", "defaultDuration", "surfaces"}
    """
    settings = await get_settings_map(session, user_id)
    return {
        "userName": settings.get(SETTING_USER_NAME) or "",
        "defaultStartTime": settings.get(SETTING_DEFAULT_START_TIME) or DEFAULT_START_TIME,
        "defaultDuration": settings.get(SETTING_DEFAULT_DURATION) or DEFAULT_DURATION,
        "surfaces": split_surfaces(settings.get(SETTING_SURFACES)),
    }


async def update_user_settings(
    session: AsyncSession,
    user_id: str,
    user_name: Optional[str] = None,
    default_start_time: Optional[str] = None,
    default_duration: Optional[Union[int, str]] = None,
    surfaces: Optional[Union[List[str], str]] = None,
) -> None:
    """Upsert the provided settings; None leaves a key unchanged."""
    if user_name is not None:
        await set_setting(session, user_id, SETTING_USER_NAME, user_name)
    if default_start_time is not None:
        await set_setting(session, user_id, SETTING_DEFAULT_START_TIME, default_start_time)
    if default_duration is not None:
        await set_setting(session, user_id, SETTING_DEFAULT_DURATION, str(default_duration))
    if surfaces is not None:
        if isinstance(surfaces, list):
            surfaces = LIST_SEPARATOR.join(s.strip() for s in surfaces if s.strip())
        await set_setting(session, user_id, SETTING_SURFACES, surfaces)


async def get_surfaces(session: AsyncSession, user_id: str) -> List[str]:
    return split_surfaces(await get_setting(session, user_id, SETTING_SURFACES))


#
# Players
#


async def list_player_names(session: AsyncSession, user_id: str) -> List[str]:
    """
    Get a user's opponents, most-played first, then alphabetically.

    Match counts only include this user's matches against each name.
    """
    match_count = func.count(Match.id).label("match_count")
    result = await session.execute(
        select(Player.name, match_count)
        .select_from(Player)
        .outerjoin(
            Match,
            and_(Match.player2 == Player.name, Match.user_id == user_id),
        )
        .where(Player.user_id == user_id)
        .group_by(Player.name)
        .order_by(match_count.desc(), Player.name.asc())
    )
    return [row.name for row in result.all()]


async def create_player(session: AsyncSession, user_id: str, name: str) -> Dict:
    """
    Add an opponent.

    Raises:
        DuplicatePlayerError: If the user already has a player with this name
    """
    player = Player(user_id=user_id, name=name)
    session.add(player)
    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        raise DuplicatePlayerError("Player already exists")
    await session.refresh(player)
    return {"id": player.id, "name": player.name}


async def ensure_player(session: AsyncSession, user_id: str, name: str) -> None:
    """Insert the player if the user does not have one with this name yet."""
    stmt = _insert(session, Player).values(user_id=user_id, name=name)
    stmt = stmt.on_conflict_do_nothing(index_elements=["user_id", "name"])
    await session.execute(stmt)
    await session.commit()


async def delete_player(session: AsyncSession, user_id: str, name: str) -> bool:
    """
    Delete an opponent by name. Matches against them are kept.

    Returns:
        True if a row was removed
    """
    result = await session.execute(
        delete(Player).where(and_(Player.user_id == user_id, Player.name == name))
    )
    await session.commit()
    return result.rowcount > 0


#
# Matches
#


async def list_matches(
    session: AsyncSession, user_id: str, status: Optional[MatchStatus] = None
) -> List[Dict]:
    """
    Get a user's matches, newest first (date, then start time).

    Args:
        session: Database session
        user_id: Owner of the matches
        status: Optional status filter
    """
    query = select(Match).where(Match.user_id == user_id)
    if status is not None:
        query = query.where(Match.status == status)
    query = query.order_by(Match.date.desc(), Match.start_time.desc())
    result = await session.execute(query)
    return [match_to_dict(m) for m in result.scalars().all()]


async def count_matches(
    session: AsyncSession, user_id: str, status: Optional[MatchStatus] = None
) -> int:
    query = select(func.count(Match.id)).where(Match.user_id == user_id)
    if status is not None:
        query = query.where(Match.status == status)
    result = await session.execute(query)
    return result.scalar_one()


async def get_match(session: AsyncSession, user_id: str, match_id: int) -> Optional[Dict]:
    result = await session.execute(
        select(Match).where(and_(Match.id == match_id, Match.user_id == user_id))
    )
    match = result.scalar_one_or_none()
    return match_to_dict(match) if match else None


async def create_match(
    session: AsyncSession,
    user_id: str,
    match_request: "CreateMatchRequest",
) -> int:
    """
    Schedule a new match.

    The opponent is added to the user's players first (insert-or-ignore).
    player1 defaults to the user's configured name.

    Returns:
        Match ID
    """
    await ensure_player(session, user_id, match_request.player2)

    player1 = match_request.player1
    if not player1:
        player1 = await get_setting(session, user_id, SETTING_USER_NAME) or ""

    new_match = Match(
        user_id=user_id,
        player1=player1,
        player2=match_request.player2,
        date=match_request.date,
        start_time=match_request.startTime or None,
        duration=match_request.duration,
        surface=match_request.surface,
        season=match_request.season,
        score1=None,
        score2=None,
        status=MatchStatus.SCHEDULED,
    )
    session.add(new_match)
    await session.flush()
    await session.commit()
    await session.refresh(new_match)

    logger.info(f"Scheduled match {new_match.id} for user {user_id} vs {new_match.player2}")
    return new_match.id


async def update_match(
    session: AsyncSession,
    user_id: str,
    match_id: int,
    match_request: "UpdateMatchRequest",
) -> bool:
    """
    Replace every mutable field of a match.

    Returns:
        True if successful, False if the user has no match with this id
    """
    result = await session.execute(
        update(Match)
        .where(and_(Match.id == match_id, Match.user_id == user_id))
        .values(
            player1=match_request.player1,
            player2=match_request.player2,
            date=match_request.date,
            start_time=match_request.start_time,
            duration=match_request.duration,
            surface=match_request.surface,
            season=match_request.season,
            score1=match_request.score1,
            score2=match_request.score2,
            status=match_request.status,
        )
    )
    await session.commit()
    return result.rowcount > 0


async def update_match_score(
    session: AsyncSession,
    user_id: str,
    match_id: int,
    score1: Optional[str],
    score2: Optional[str],
) -> bool:
    """
    Record a score; the match becomes completed whatever its prior status.

    Returns:
        True if successful, False if the user has no match with this id
    """
    result = await session.execute(
        update(Match)
        .where(and_(Match.id == match_id, Match.user_id == user_id))
        .values(score1=score1, score2=score2, status=MatchStatus.COMPLETED)
    )
    await session.commit()
    return result.rowcount > 0


async def delete_match(session: AsyncSession, user_id: str, match_id: int) -> bool:
    """
    Delete a match.

    Returns:
        True if a row was removed, False if nothing matched
    """
    result = await session.execute(
        delete(Match).where(and_(Match.id == match_id, Match.user_id == user_id))
    )
    await session.commit()
    return result.rowcount > 0


#
# Seasons
#


async def list_seasons(session: AsyncSession, user_id: str) -> List[str]:
    """Distinct season labels used by the user's matches, descending."""
    result = await session.execute(
        select(Match.season)
        .where(Match.user_id == user_id)
        .distinct()
        .order_by(Match.season.desc())
    )
    return [row[0] for row in result.all()]
