"""Google sign-in route handlers."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import HTMLResponse
from sqlalchemy.ext.asyncio import AsyncSession

from tennis_tracker.api.routes import limiter
from tennis_tracker.api.auth_dependencies import (
    clear_session,
    get_session_data,
    save_session_data,
)
from tennis_tracker.database.db import get_db_session
from tennis_tracker.database.init_defaults import init_user_defaults
from tennis_tracker.models.schemas import (
    AuthStatusResponse,
    AuthUrlResponse,
    SessionData,
    SessionState,
    SessionUser,
    SuccessResponse,
)
from tennis_tracker.services import google_service
from tennis_tracker.utils.constants import DEFAULT_USER_ID

logger = logging.getLogger(__name__)
router = APIRouter()

OAUTH_SUCCESS_HTML = """
<html>
  <body>
    <script>
      if (window.opener) {
        window.opener.postMessage({ type: 'OAUTH_AUTH_SUCCESS' }, '*');
        window.close();
      } else {
        window.location.href = '/';
      }
    </script>
    <p>Authentication successful. This window should close automatically.</p>
  </body>
</html>
"""


@router.get("/api/auth/google/url", response_model=AuthUrlResponse)
@limiter.limit("30/minute")
async def google_auth_url(request: Request):
    """Return the Google consent URL for the popup sign-in flow."""
    return {"url": google_service.build_authorization_url()}


@router.get("/api/auth/google/callback", response_class=HTMLResponse)
@limiter.limit("10/minute")
async def google_auth_callback(
    request: Request,
    code: Optional[str] = None,
    session: AsyncSession = Depends(get_db_session),
):
    """
    OAuth redirect target.

    Exchanges the code for tokens, loads the Google profile, stores the
    session and seeds default settings for first-time users. Responds with a
    page that notifies the opener window and closes itself.
    """
    if not code:
        raise HTTPException(status_code=400, detail="Missing authorization code")

    try:
        tokens = await google_service.exchange_code(code)
        user_info = await google_service.fetch_user_info(tokens.access_token)
    except google_service.GoogleAPIError as e:
        logger.error(f"Error getting tokens: {e}", exc_info=True)
        return HTMLResponse(content="Authentication failed", status_code=500)

    user_id = user_info.id or user_info.email or DEFAULT_USER_ID
    save_session_data(
        request,
        SessionData(
            user_id=user_id,
            user_email=user_info.email,
            user_name=user_info.name,
            tokens=tokens,
        ),
    )

    try:
        await init_user_defaults(session, user_id, user_info.given_name)
    except Exception as e:
        logger.error(f"Failed to initialize settings for user {user_id}: {e}", exc_info=True)
        return HTMLResponse(content="Authentication failed", status_code=500)

    logger.info(f"User {user_id} signed in with Google")
    return HTMLResponse(content=OAUTH_SUCCESS_HTML)


@router.get("/api/auth/google/status", response_model=AuthStatusResponse)
async def google_auth_status(session_data: SessionData = Depends(get_session_data)):
    """Report whether calendar tokens are stored, without checking them with Google."""
    user = None
    if session_data.state is not SessionState.UNAUTHENTICATED:
        user = SessionUser(
            id=session_data.user_id,
            email=session_data.user_email,
            name=session_data.user_name,
        )
    return AuthStatusResponse(
        connected=session_data.state is SessionState.CALENDAR_LINKED, user=user
    )


@router.post("/api/auth/logout", response_model=SuccessResponse)
async def logout(request: Request):
    clear_session(request)
    return {"success": True}
