"""
Tests for API layer.

Tests:
- API service methods
- HTTP routes and status codes
- Session lifecycle via API
- Error handling
"""

import pytest
from fastapi.testclient import TestClient

from ..api.app import create_app
from ..api.schemas import (
    CreateSessionRequest,
    ErrorResponse,
    Mode,
    MoveResponse,
    RestoreRequest,
    SessionStatus,
)
from ..api.service import APIService


class TestAPIService:
    """Tests for APIService."""

    @pytest.fixture
    def service(self):
        """Create a fresh API service."""
        return APIService()

    def test_create_session(self, service):
        """Can create a session via API."""
        response = service.create_session(CreateSessionRequest())

        assert response.session_id
        assert response.status == SessionStatus.IN_PROGRESS
        assert response.config.win_length == 3
        assert response.snapshot.move_count == 0

    def test_create_session_computer_first(self, service):
        """Computer's opening move is reported."""
        response = service.create_session(CreateSessionRequest(ai_controls="X", difficulty="medium"))
        assert [m.index for m in response.moves] == [4]
        assert response.snapshot.side_to_move == "O"

    def test_create_invalid_config(self, service):
        """Engine-level config errors become error responses."""
        response = service.create_session(CreateSessionRequest(board_size=3, win_length=5))
        assert isinstance(response, ErrorResponse)
        assert response.error_code == "INVALID_CONFIG"

    def test_get_nonexistent_session(self, service):
        """Getting nonexistent session returns error."""
        response = service.get_session("nonexistent-id")

        assert hasattr(response, "error")
        assert response.error_code == "SESSION_NOT_FOUND"

    def test_play_move(self, service):
        """A move returns both the human and computer moves."""
        created = service.create_session(CreateSessionRequest())
        response = service.play_move(created.session_id, 4)

        assert isinstance(response, MoveResponse)
        assert response.success
        assert len(response.moves) == 2
        assert response.moves[1].by_ai

    def test_play_invalid_move(self, service):
        """Rule violations are unsuccessful move responses."""
        created = service.create_session(CreateSessionRequest(mode=Mode.PVP))
        service.play_move(created.session_id, 0)
        response = service.play_move(created.session_id, 0)

        assert isinstance(response, MoveResponse)
        assert not response.success
        assert response.error_code == "INVALID_MOVE"
        assert response.snapshot.move_count == 1

    def test_play_missing_session(self, service):
        """Moves on unknown sessions are errors."""
        response = service.play_move("nonexistent-id", 0)
        assert isinstance(response, ErrorResponse)

    def test_reset_keeps_score(self, service):
        """Finished rounds stay on the scoreboard after reset."""
        created = service.create_session(CreateSessionRequest(mode=Mode.PVP))
        sid = created.session_id
        for index in [0, 3, 1, 4, 2]:
            response = service.play_move(sid, index)
        assert response.score.x_wins == 1

        reset = service.reset_session(sid)
        assert reset.success
        assert reset.snapshot.move_count == 0
        assert reset.score.x_wins == 1

    def test_wire_and_restore(self, service):
        """A session can be saved as a wire string and resumed."""
        created = service.create_session(CreateSessionRequest(mode=Mode.PVP))
        service.play_move(created.session_id, 4)
        wire = service.get_wire(created.session_id).wire
        assert wire == "3:3:O:....X....:4"

        restored = service.restore_session(RestoreRequest(wire=wire, mode=Mode.PVP))
        assert restored.session_id != created.session_id
        assert restored.snapshot.cells[4] == "X"
        assert restored.snapshot.last_move_index == 4

    def test_restore_bad_wire(self, service):
        """Bad wire strings are reported, not raised."""
        response = service.restore_session(RestoreRequest(wire="junk"))
        assert isinstance(response, ErrorResponse)
        assert response.error_code == "WIRE_FORMAT"

    def test_end_session(self, service):
        """Can end a session."""
        created = service.create_session(CreateSessionRequest())
        session_id = created.session_id

        assert service.end_session(session_id)

        response = service.get_session(session_id)
        assert hasattr(response, "error")

    def test_list_sessions(self, service):
        """Can list active sessions."""
        for _ in range(3):
            service.create_session(CreateSessionRequest())

        sessions = service.list_sessions()
        assert len(sessions) == 3


class TestRoutes:
    """Tests for the FastAPI routes."""

    @pytest.fixture
    def client(self):
        """Test client over a fresh app and service."""
        return TestClient(create_app(APIService()))

    def _create(self, client, **body):
        response = client.post("/api/v1/sessions", json=body)
        assert response.status_code == 201
        return response.json()["session_id"]

    def test_health(self, client):
        """Health reports version and environment."""
        response = client.get("/api/v1/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["active_sessions"] == 0
        assert "environment" in data

    def test_create_and_get(self, client):
        """Created sessions can be fetched."""
        sid = self._create(client, board_size=4)
        response = client.get(f"/api/v1/sessions/{sid}")
        assert response.status_code == 200
        data = response.json()
        assert data["config"]["board_size"] == 4
        assert len(data["snapshot"]["cells"]) == 16

    def test_create_invalid_config(self, client):
        """Engine config errors are 400 with an error code."""
        response = client.post("/api/v1/sessions", json={"board_size": 3, "win_length": 5})
        assert response.status_code == 400
        assert response.json()["error_code"] == "INVALID_CONFIG"

    def test_create_schema_error(self, client):
        """Schema violations are rejected by request validation."""
        response = client.post("/api/v1/sessions", json={"board_size": 12})
        assert response.status_code == 422

    def test_unknown_session(self, client):
        """Unknown sessions are 404."""
        response = client.get("/api/v1/sessions/nope")
        assert response.status_code == 404
        assert response.json()["error_code"] == "SESSION_NOT_FOUND"
        assert client.post("/api/v1/sessions/nope/moves", json={"index": 0}).status_code == 404
        assert client.post("/api/v1/sessions/nope/reset").status_code == 404
        assert client.get("/api/v1/sessions/nope/wire").status_code == 404

    def test_play(self, client):
        """Human move and computer reply in one call."""
        sid = self._create(client)
        response = client.post(f"/api/v1/sessions/{sid}/moves", json={"index": 4})
        assert response.status_code == 200
        data = response.json()
        assert data["success"]
        assert data["snapshot"]["move_count"] == 2

    def test_play_occupied(self, client):
        """Occupied cell is a 400 with the move body."""
        sid = self._create(client, mode="pvp")
        client.post(f"/api/v1/sessions/{sid}/moves", json={"index": 0})
        response = client.post(f"/api/v1/sessions/{sid}/moves", json={"index": 0})
        assert response.status_code == 400
        data = response.json()
        assert data["error_code"] == "INVALID_MOVE"
        assert data["snapshot"]["move_count"] == 1

    def test_play_after_game_over(self, client):
        """Moves after the end are a 409."""
        sid = self._create(client, mode="pvp")
        for index in [0, 3, 1, 4, 2]:
            client.post(f"/api/v1/sessions/{sid}/moves", json={"index": index})
        response = client.post(f"/api/v1/sessions/{sid}/moves", json={"index": 8})
        assert response.status_code == 409
        assert response.json()["error_code"] == "GAME_ALREADY_OVER"

    def test_reset(self, client):
        """Reset clears the board and keeps the score."""
        sid = self._create(client, mode="pvp")
        for index in [0, 3, 1, 4, 2]:
            client.post(f"/api/v1/sessions/{sid}/moves", json={"index": index})
        response = client.post(f"/api/v1/sessions/{sid}/reset")
        assert response.status_code == 200
        data = response.json()
        assert data["snapshot"]["move_count"] == 0
        assert data["score"]["x_wins"] == 1

    def test_wire_and_restore(self, client):
        """Wire output restores into a new session."""
        sid = self._create(client, mode="pvp")
        client.post(f"/api/v1/sessions/{sid}/moves", json={"index": 4})
        wire = client.get(f"/api/v1/sessions/{sid}/wire").json()["wire"]

        response = client.post("/api/v1/sessions/restore", json={"wire": wire, "mode": "pvp"})
        assert response.status_code == 201
        data = response.json()
        assert data["session_id"] != sid
        assert data["snapshot"]["last_move_index"] == 4

    def test_restore_bad_wire(self, client):
        """Malformed wire is a 400."""
        response = client.post("/api/v1/sessions/restore", json={"wire": "3:3:X"})
        assert response.status_code == 400
        assert response.json()["error_code"] == "WIRE_FORMAT"

    def test_list_and_delete(self, client):
        """Sessions can be listed and ended."""
        sid = self._create(client)
        listed = client.get("/api/v1/sessions").json()
        assert listed["count"] == 1
        assert listed["sessions"] == [sid]

        response = client.delete(f"/api/v1/sessions/{sid}")
        assert response.json() == {"success": True, "session_id": sid}
        assert client.get(f"/api/v1/sessions/{sid}").status_code == 404
