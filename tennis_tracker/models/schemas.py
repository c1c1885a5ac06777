"""
Pydantic models for API request/response validation.
"""

import enum
from typing import Optional, List, Union
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from tennis_tracker.database.models import MatchStatus


# ============================================================================
# Session
# ============================================================================


class OAuthTokens(BaseModel):
    """Google token pair as returned by the token endpoint."""

    model_config = ConfigDict(extra="ignore")

    access_token: str
    refresh_token: Optional[str] = None
    token_type: Optional[str] = "Bearer"
    scope: Optional[str] = None
    expires_in: Optional[int] = None
    id_token: Optional[str] = None


class SessionState(str, enum.Enum):
    """Where a browser session is in the sign-in flow."""

    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATED_NO_CALENDAR = "authenticated_no_calendar"
    CALENDAR_LINKED = "calendar_linked"


class SessionData(BaseModel):
    """Contents of the signed session cookie."""

    model_config = ConfigDict(extra="ignore")

    user_id: Optional[str] = None
    user_email: Optional[str] = None
    user_name: Optional[str] = None
    tokens: Optional[OAuthTokens] = None

    @classmethod
    def from_cookie(cls, payload: dict) -> "SessionData":
        """Validate a raw cookie payload; anything malformed reads as signed out."""
        try:
            return cls.model_validate(payload or {})
        except ValidationError:
            return cls()

    @property
    def state(self) -> SessionState:
        if not self.user_id:
            return SessionState.UNAUTHENTICATED
        if self.tokens is None:
            return SessionState.AUTHENTICATED_NO_CALENDAR
        return SessionState.CALENDAR_LINKED

    @property
    def calendar_connected(self) -> bool:
        return self.tokens is not None


class SessionUser(BaseModel):
    """Signed-in user as reported by the status endpoint."""

    id: str
    email: Optional[str] = None
    name: Optional[str] = None


class AuthStatusResponse(BaseModel):
    connected: bool
    user: Optional[SessionUser] = None


class AuthUrlResponse(BaseModel):
    url: str


class GoogleUserInfo(BaseModel):
    """Subset of the Google userinfo (v2) payload."""

    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = None
    email: Optional[str] = None
    name: Optional[str] = None
    given_name: Optional[str] = None


class SuccessResponse(BaseModel):
    success: bool = True


# ============================================================================
# Settings
# ============================================================================


class SettingsResponse(BaseModel):
    """Per-user settings, with defaults filled in."""

    userName: str
    defaultStartTime: str
    defaultDuration: str
    surfaces: List[str]


class UpdateSettingsRequest(BaseModel):
    """Partial settings update; omitted fields are left untouched."""

    userName: Optional[str] = None
    defaultStartTime: Optional[str] = None
    defaultDuration: Optional[Union[int, str]] = None
    surfaces: Optional[Union[List[str], str]] = None


# ============================================================================
# Players
# ============================================================================


class CreatePlayerRequest(BaseModel):
    name: Optional[str] = None


# ============================================================================
# Matches
# ============================================================================


class MatchResponse(BaseModel):
    """Match row as stored."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    player1: str
    player2: str
    date: str
    start_time: Optional[str] = None
    duration: Optional[int] = None
    surface: str
    season: str
    score1: Optional[str] = None
    score2: Optional[str] = None
    status: MatchStatus


class CreateMatchRequest(BaseModel):
    """Request to schedule a match. Opponent, date, surface and season are required."""

    player1: Optional[str] = None
    player2: Optional[str] = None
    date: Optional[str] = None
    startTime: Optional[str] = None
    duration: Optional[int] = None
    surface: Optional[str] = None
    season: Optional[str] = None

    def missing_fields(self) -> List[str]:
        required = {
            "player2": self.player2,
            "date": self.date,
            "surface": self.surface,
            "season": self.season,
        }
        return [name for name, value in required.items() if not value or not str(value).strip()]


class CreateMatchResponse(BaseModel):
    id: int


class UpdateMatchRequest(BaseModel):
    """Full replacement of a match's mutable fields."""

    player1: str
    player2: str
    date: str
    start_time: Optional[str] = None
    duration: Optional[int] = None
    surface: str
    season: str
    score1: Optional[str] = None
    score2: Optional[str] = None
    status: MatchStatus = MatchStatus.SCHEDULED


class UpdateScoreRequest(BaseModel):
    """Per-set games for each side, e.g. score1="6,6", score2="4,2"."""

    score1: Optional[str] = None
    score2: Optional[str] = None


# ============================================================================
# Calendar
# ============================================================================


class CalendarEventRequest(BaseModel):
    opponent: str
    surface: str
    date: str
    startTime: str
    duration: Optional[int] = None

    @field_validator("startTime")
    @classmethod
    def _check_start_time(cls, value: str) -> str:
        parts = value.split(":")
        if len(parts) != 2 or not all(p.isdigit() for p in parts):
            raise ValueError("startTime must look like HH:MM")
        return value


# ============================================================================
# Stats
# ============================================================================


class HeadToHeadResponse(BaseModel):
    gamesWon: int
    gamesLost: int
    matchCount: int
    winPercentage: str


class SurfaceStatsResponse(BaseModel):
    surface: str
    matchCount: int
    gamesWon: int
    gamesLost: int
    winPercentage: str


class SeasonStatsResponse(BaseModel):
    season: str
    matchCount: int
    gamesWon: int
    gamesLost: int
    winPercentage: str


class StatsSummary(BaseModel):
    completedMatches: int
    upcomingMatches: int
    gamesWon: int
    gamesLost: int
    winPercentage: str
    surfaces: List[SurfaceStatsResponse] = Field(default_factory=list)
    seasons: List[SeasonStatsResponse] = Field(default_factory=list)


class StatsResponse(BaseModel):
    totalGames: int
    matches: List[MatchResponse]
    summary: StatsSummary


class InitResponse(BaseModel):
    matches: List[MatchResponse]
    seasons: List[str]
    settings: SettingsResponse
    players: List[str]
    googleConnected: bool
