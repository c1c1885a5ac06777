"""
Route tests for the tennis tracker API.
Run against a temporary SQLite database with the session dependency overridden.
"""
import pytest
from fastapi.testclient import TestClient

from tennis_tracker.models.schemas import GoogleUserInfo, OAuthTokens, SessionData, SessionState
from tennis_tracker.services import google_service
from tennis_tracker.tests.conftest import login_as


def schedule(client, **overrides):
    body = {
        "player2": "Alex",
        "date": "2025-10-15",
        "startTime": "10:00",
        "duration": 90,
        "surface": "Hard",
        "season": "Fall 2025",
    }
    body.update(overrides)
    response = client.post("/api/matches", json=body)
    assert response.status_code == 200, response.text
    return response.json()["id"]


# ============================================================================
# Health and auth gate
# ============================================================================

def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.text == "OK"


@pytest.mark.parametrize(
    "method,path",
    [
        ("get", "/api/init"),
        ("get", "/api/matches"),
        ("get", "/api/matches/1"),
        ("delete", "/api/matches/1"),
        ("get", "/api/players"),
        ("get", "/api/settings"),
        ("get", "/api/seasons"),
        ("get", "/api/stats"),
    ],
)
def test_requires_session(client, method, path):
    response = getattr(client, method)(path)
    assert response.status_code == 401
    assert response.json()["detail"] == "Unauthorized"


# ============================================================================
# Auth routes
# ============================================================================

def test_google_auth_url(client, monkeypatch):
    monkeypatch.setenv("GOOGLE_CLIENT_ID", "client-123")
    monkeypatch.setenv("APP_URL", "https://tennis.example.com")

    response = client.get("/api/auth/google/url")

    assert response.status_code == 200
    url = response.json()["url"]
    assert url.startswith("https://accounts.google.com/o/oauth2/v2/auth?")
    assert "client_id=client-123" in url
    assert "access_type=offline" in url
    assert "prompt=consent" in url


def test_status_signed_out(client):
    response = client.get("/api/auth/google/status")
    assert response.status_code == 200
    assert response.json() == {"connected": False, "user": None}


def test_status_signed_in(app, client):
    login_as(app, "user-a", email="a@example.com", name="Mark")

    response = client.get("/api/auth/google/status")

    assert response.json() == {
        "connected": True,
        "user": {"id": "user-a", "email": "a@example.com", "name": "Mark"},
    }


def test_status_signed_in_without_calendar(app, client):
    login_as(app, "user-a", tokens=False)

    body = client.get("/api/auth/google/status").json()

    assert body["connected"] is False
    assert body["user"]["id"] == "user-a"


def test_session_state_transitions():
    assert SessionData().state is SessionState.UNAUTHENTICATED
    assert SessionData(user_id="user-a").state is SessionState.AUTHENTICATED_NO_CALENDAR
    linked = SessionData(user_id="user-a", tokens=OAuthTokens(access_token="access"))
    assert linked.state is SessionState.CALENDAR_LINKED
    # Tokens without a user still read as signed out
    assert SessionData(tokens=OAuthTokens(access_token="access")).state is SessionState.UNAUTHENTICATED


def test_malformed_session_payload_reads_as_signed_out():
    session_data = SessionData.from_cookie({"user_id": "user-a", "tokens": {"refresh_token": "no-access"}})
    assert session_data.state is SessionState.UNAUTHENTICATED


def test_callback_requires_code(client):
    response = client.get("/api/auth/google/callback")
    assert response.status_code == 400


def test_callback_signs_in_and_seeds_settings(client, monkeypatch):
    async def fake_exchange(code):
        assert code == "auth-code"
        return OAuthTokens(access_token="access", refresh_token="refresh")

    async def fake_user_info(access_token):
        return GoogleUserInfo(id="google-42", email="mark@example.com", name="Mark R", given_name="Mark")

    monkeypatch.setattr(google_service, "exchange_code", fake_exchange)
    monkeypatch.setattr(google_service, "fetch_user_info", fake_user_info)

    response = client.get("/api/auth/google/callback", params={"code": "auth-code"})

    assert response.status_code == 200
    assert "OAUTH_AUTH_SUCCESS" in response.text

    # The session cookie now identifies the user
    status = client.get("/api/auth/google/status").json()
    assert status["connected"] is True
    assert status["user"]["id"] == "google-42"

    settings = client.get("/api/settings").json()
    assert settings["userName"] == "Mark"
    assert settings["surfaces"] == ["Clay", "Grass", "Hard", "Carpet"]

    # Logging out drops the session
    assert client.post("/api/auth/logout").json() == {"success": True}
    assert client.get("/api/auth/google/status").json() == {"connected": False, "user": None}
    assert client.get("/api/matches").status_code == 401


def test_callback_google_failure(client, monkeypatch):
    async def failing_exchange(code):
        raise google_service.GoogleAPIError("invalid_grant")

    monkeypatch.setattr(google_service, "exchange_code", failing_exchange)

    response = client.get("/api/auth/google/callback", params={"code": "bad"})

    assert response.status_code == 500
    assert response.text == "Authentication failed"
    assert client.get("/api/auth/google/status").json()["connected"] is False


def test_tampered_cookie_reads_as_signed_out(client):
    client.cookies.set("session", "not-a-signed-value")
    response = client.get("/api/auth/google/status")
    assert response.json() == {"connected": False, "user": None}


# ============================================================================
# Matches
# ============================================================================

def test_schedule_match_round_trip(auth_client):
    match_id = schedule(auth_client)

    matches = auth_client.get("/api/matches").json()
    assert len(matches) == 1
    match = matches[0]
    assert match["id"] == match_id
    assert match["status"] == "scheduled"
    assert match["score1"] is None
    assert match["score2"] is None
    assert match["player2"] == "Alex"

    # Opponent was added to the player list
    assert auth_client.get("/api/players").json() == ["Alex"]


def test_schedule_match_missing_fields(auth_client):
    response = auth_client.post("/api/matches", json={"player2": "Alex", "date": "2025-10-15"})

    assert response.status_code == 400
    assert response.json()["detail"] == "Missing required field: surface, season"
    assert auth_client.get("/api/matches").json() == []


def test_get_match(auth_client):
    match_id = schedule(auth_client)

    response = auth_client.get(f"/api/matches/{match_id}")
    assert response.status_code == 200
    assert response.json()["surface"] == "Hard"

    assert auth_client.get("/api/matches/9999").status_code == 404


def test_record_score_completes_match(auth_client):
    match_id = schedule(auth_client)

    response = auth_client.put(f"/api/matches/{match_id}/score", json={"score1": "6,6", "score2": "4,2"})

    assert response.json() == {"success": True}
    match = auth_client.get(f"/api/matches/{match_id}").json()
    assert match["status"] == "completed"
    assert match["score1"] == "6,6"


def test_record_score_unknown_match(auth_client):
    response = auth_client.put("/api/matches/9999/score", json={"score1": "6", "score2": "0"})
    assert response.status_code == 404


def test_update_match(auth_client):
    match_id = schedule(auth_client)

    response = auth_client.put(
        f"/api/matches/{match_id}",
        json={
            "player1": "Mark",
            "player2": "John",
            "date": "2025-10-20",
            "start_time": "18:30",
            "duration": 60,
            "surface": "Clay",
            "season": "Fall 2025",
            "score1": None,
            "score2": None,
            "status": "scheduled",
        },
    )

    assert response.status_code == 200
    match = auth_client.get(f"/api/matches/{match_id}").json()
    assert match["player2"] == "John"
    assert match["start_time"] == "18:30"
    assert match["duration"] == 60


def test_update_unknown_match(auth_client):
    response = auth_client.put(
        "/api/matches/9999",
        json={"player1": "Mark", "player2": "John", "date": "2025-10-20", "surface": "Clay", "season": "Fall 2025"},
    )
    assert response.status_code == 404
    assert response.json()["detail"] == "Match not found"


def test_delete_match_is_idempotent(auth_client):
    match_id = schedule(auth_client)

    assert auth_client.delete(f"/api/matches/{match_id}").json() == {"success": True}
    assert auth_client.delete(f"/api/matches/{match_id}").json() == {"success": True}
    assert auth_client.get("/api/matches").json() == []


def test_other_users_matches_are_hidden(app):
    client = TestClient(app)
    login_as(app, "user-a")
    match_id = schedule(client)

    login_as(app, "user-b")
    assert client.get("/api/matches").json() == []
    assert client.get(f"/api/matches/{match_id}").status_code == 404
    assert client.put(f"/api/matches/{match_id}/score", json={"score1": "6", "score2": "0"}).status_code == 404
    full_update = client.put(
        f"/api/matches/{match_id}",
        json={"player1": "Intruder", "player2": "John", "date": "2025-11-01", "surface": "Clay",
              "season": "Fall 2025", "score1": "6", "score2": "0", "status": "completed"},
    )
    assert full_update.status_code == 404
    assert full_update.json()["detail"] == "Match not found"
    client.delete(f"/api/matches/{match_id}")

    login_as(app, "user-a")
    match = client.get(f"/api/matches/{match_id}").json()
    assert match["status"] == "scheduled"
    assert match["player1"] != "Intruder"
    assert match["player2"] == "Alex"
    assert match["surface"] == "Hard"
    assert match["score1"] is None


# ============================================================================
# Players and settings
# ============================================================================

def test_players_crud(auth_client):
    assert auth_client.post("/api/players", json={"name": " Alex "}).json() == {"success": True}

    duplicate = auth_client.post("/api/players", json={"name": "Alex"})
    assert duplicate.status_code == 400
    assert duplicate.json()["detail"] == "Player already exists"

    assert auth_client.get("/api/players").json() == ["Alex"]
    assert auth_client.delete("/api/players/Alex").json() == {"success": True}
    assert auth_client.delete("/api/players/Alex").json() == {"success": True}
    assert auth_client.get("/api/players").json() == []


def test_create_player_requires_name(auth_client):
    response = auth_client.post("/api/players", json={"name": "  "})
    assert response.status_code == 400
    assert response.json()["detail"] == "Name is required"


def test_settings_round_trip(auth_client):
    response = auth_client.post(
        "/api/settings",
        json={"userName": "Mark", "defaultDuration": 60, "surfaces": "Hard,Clay"},
    )
    assert response.json() == {"success": True}

    settings = auth_client.get("/api/settings").json()
    assert settings == {
        "userName": "Mark",
        "defaultStartTime": "10:00",
        "defaultDuration": "60",
        "surfaces": ["Hard", "Clay"],
    }


# ============================================================================
# Init, seasons and stats
# ============================================================================

def test_init(auth_client):
    schedule(auth_client, season="Winter 2026")

    data = auth_client.get("/api/init").json()

    assert len(data["matches"]) == 1
    assert data["seasons"] == ["Winter 2026"]
    assert data["players"] == ["Alex"]
    assert data["settings"]["defaultStartTime"] == "10:00"
    assert data["googleConnected"] is True


def test_init_without_calendar_tokens(app):
    login_as(app, "user-a", tokens=False)
    data = TestClient(app).get("/api/init").json()
    assert data["googleConnected"] is False


def test_stats(auth_client):
    auth_client.post("/api/settings", json={"surfaces": ["Hard", "Clay"]})
    played = schedule(auth_client, surface="Hard")
    auth_client.put(f"/api/matches/{played}/score", json={"score1": "6,3", "score2": "4,6"})
    schedule(auth_client, surface="Clay", season="Winter 2026")

    stats = auth_client.get("/api/stats").json()

    assert stats["totalGames"] == 1
    assert [m["id"] for m in stats["matches"]] == [played]
    summary = stats["summary"]
    assert summary["completedMatches"] == 1
    assert summary["upcomingMatches"] == 1
    assert summary["gamesWon"] == 9
    assert summary["gamesLost"] == 10
    assert summary["winPercentage"] == "47"
    assert summary["surfaces"][0] == {
        "surface": "Hard",
        "matchCount": 1,
        "gamesWon": 9,
        "gamesLost": 10,
        "winPercentage": "47",
    }
    assert [s["season"] for s in summary["seasons"]] == ["Fall 2025"]


def test_head_to_head(auth_client):
    played = schedule(auth_client, player2="Alex", surface="Hard")
    auth_client.put(f"/api/matches/{played}/score", json={"score1": "6,6", "score2": "4,3"})

    response = auth_client.get("/api/stats/head-to-head", params={"opponent": "Alex", "surface": "Hard"})
    assert response.json() == {"gamesWon": 12, "gamesLost": 7, "matchCount": 1, "winPercentage": "63"}

    missing = auth_client.get("/api/stats/head-to-head", params={"opponent": "Alex", "surface": "Clay"})
    assert missing.status_code == 200
    assert missing.json() is None


# ============================================================================
# Calendar
# ============================================================================

def test_calendar_event(auth_client, monkeypatch):
    calls = []

    async def fake_create(**kwargs):
        calls.append(kwargs)
        return {"id": "evt-1"}

    monkeypatch.setattr(google_service, "create_calendar_event", fake_create)

    response = auth_client.post(
        "/api/calendar/event",
        json={"opponent": "Alex", "surface": "Clay", "date": "2025-10-15", "startTime": "10:00"},
    )

    assert response.json() == {"success": True}
    assert calls[0]["opponent"] == "Alex"
    assert calls[0]["duration"] is None


def test_calendar_event_without_tokens(app):
    login_as(app, "user-a", tokens=False)
    response = TestClient(app).post(
        "/api/calendar/event",
        json={"opponent": "Alex", "surface": "Clay", "date": "2025-10-15", "startTime": "10:00"},
    )
    assert response.status_code == 401
    assert response.json()["detail"] == "Not connected to Google Calendar"


def test_calendar_event_google_failure(auth_client, monkeypatch):
    async def failing_create(**kwargs):
        raise google_service.GoogleAPIError("401 from Google")

    monkeypatch.setattr(google_service, "create_calendar_event", failing_create)

    response = auth_client.post(
        "/api/calendar/event",
        json={"opponent": "Alex", "surface": "Clay", "date": "2025-10-15", "startTime": "10:00"},
    )
    assert response.status_code == 500
    assert response.json()["detail"] == "Failed to create calendar event"


def test_calendar_event_rejects_bad_start_time(auth_client):
    response = auth_client.post(
        "/api/calendar/event",
        json={"opponent": "Alex", "surface": "Clay", "date": "2025-10-15", "startTime": "ten"},
    )
    assert response.status_code == 422
