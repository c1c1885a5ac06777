"""
Authentication dependencies for FastAPI routes.

Sessions live in a signed cookie (Starlette SessionMiddleware); these helpers
validate its contents into a SessionData record.
"""

from fastapi import Depends, HTTPException, Request, status
from tennis_tracker.models.schemas import SessionData, SessionState


def get_session_data(request: Request) -> SessionData:
    """
    Dependency to read the current session.

    Returns:
        SessionData (empty when signed out or when the cookie payload is invalid)
    """
    return SessionData.from_cookie(dict(request.session))


def save_session_data(request: Request, data: SessionData) -> None:
    """Replace the cookie contents with the given session record."""
    request.session.clear()
    request.session.update(data.model_dump(mode="json", exclude_none=True))


def clear_session(request: Request) -> None:
    request.session.clear()


async def require_user(session_data: SessionData = Depends(get_session_data)) -> SessionData:
    """
    Require a signed-in user.

    Raises:
        HTTPException: 401 if the session has no user id
    """
    if session_data.state is SessionState.UNAUTHENTICATED:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    return session_data


async def get_current_user_id(session_data: SessionData = Depends(require_user)) -> str:
    """User id of the signed-in user (401 if signed out)."""
    return session_data.user_id
