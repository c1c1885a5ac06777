"""
API routes - combined router from all domain modules.

Shared infrastructure (limiter) lives here; every sub-router imports what it
needs from this package.
"""

from fastapi import APIRouter
from slowapi import Limiter
from slowapi.util import get_remote_address

from tennis_tracker.services.settings_service import is_test_env

# ---------------------------------------------------------------------------
# Shared rate limiter
# ---------------------------------------------------------------------------
if is_test_env():
    limiter = Limiter(key_func=get_remote_address)

    def no_op_limit(*args, **kwargs):
        """No-op decorator for test mode - doesn't apply any rate limiting."""
        def decorator(func):
            return func
        return decorator

    limiter.limit = lambda *args, **kwargs: no_op_limit()
else:
    limiter = Limiter(key_func=get_remote_address)

# ---------------------------------------------------------------------------
# Import sub-routers and combine
# ---------------------------------------------------------------------------
from tennis_tracker.api.routes.auth import router as auth_router  # noqa: E402
from tennis_tracker.api.routes.calendar import router as calendar_router  # noqa: E402
from tennis_tracker.api.routes.dashboard import router as dashboard_router  # noqa: E402
from tennis_tracker.api.routes.settings import router as settings_router  # noqa: E402
from tennis_tracker.api.routes.players import router as players_router  # noqa: E402
from tennis_tracker.api.routes.matches import router as matches_router  # noqa: E402
from tennis_tracker.api.routes.seasons import router as seasons_router  # noqa: E402

router = APIRouter()
router.include_router(dashboard_router)
router.include_router(auth_router)
router.include_router(calendar_router)
router.include_router(settings_router)
router.include_router(players_router)
router.include_router(matches_router)
router.include_router(seasons_router)
