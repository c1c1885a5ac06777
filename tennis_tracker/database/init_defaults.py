"""
Initialize default settings for a user.
Run on first login so every user starts with a name, default times and surfaces.
"""

import logging
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from tennis_tracker.services import data_service
from tennis_tracker.utils.constants import (
    DEFAULT_DURATION,
    DEFAULT_PLAYER_NAME,
    DEFAULT_START_TIME,
    DEFAULT_SURFACES,
    LIST_SEPARATOR,
    SETTING_DEFAULT_DURATION,
    SETTING_DEFAULT_START_TIME,
    SETTING_SURFACES,
    SETTING_USER_NAME,
)

logger = logging.getLogger(__name__)


async def init_user_defaults(
    session: AsyncSession, user_id: str, display_name: Optional[str] = None
) -> bool:
    """
    Seed default settings if the user has none.

    Args:
        session: Database session
        user_id: User to seed
        display_name: Name to store as user_name (falls back to "Player")

    Returns:
        True if defaults were written, False if the user already had settings
    """
    if await data_service.has_settings(session, user_id):
        return False

    defaults = {
        SETTING_USER_NAME: display_name or DEFAULT_PLAYER_NAME,
        SETTING_DEFAULT_START_TIME: DEFAULT_START_TIME,
        SETTING_DEFAULT_DURATION: DEFAULT_DURATION,
        SETTING_SURFACES: LIST_SEPARATOR.join(DEFAULT_SURFACES),
    }
    for key, value in defaults.items():
        await data_service.add_default_setting(session, user_id, key, value)
    await session.commit()

    logger.info(f"✓ Default settings initialized for user {user_id}")
    return True
