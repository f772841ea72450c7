"""
API Service - Business logic layer between API and engine.

The service:
1. Translates API requests to engine calls
2. Manages sessions and their scoreboards
3. Turns engine failures into typed error bodies

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
and never raises for expected failures: every method returns either a
response model or an ErrorResponse.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging

from ..engine_core.errors import EngineError
from ..engine_core.snapshot import to_wire
from ..session import SessionManager
from .schemas import (
    SESSION_NOT_FOUND,
    CreateSessionRequest,
    RestoreRequest,
    SessionResponse,
    MoveResponse,
    WireResponse,
    ErrorResponse,
)

logger = logging.getLogger(__name__)


def _not_found(session_id: str) -> ErrorResponse:
    return ErrorResponse(
        error="Session not found",
        error_code=SESSION_NOT_FOUND,
        details={"session_id": session_id},
    )


def _engine_error(e: EngineError) -> ErrorResponse:
    return ErrorResponse(error=e.message, error_code=e.code.value)


@dataclass
class APIService:
    """
    Main API service.

    Usage:
        service = APIService()

        session = service.create_session(CreateSessionRequest(board_size=3))
        response = service.play_move(session.session_id, 4)
        if not response.success:
            show(response.error_code)
    """
    session_manager: SessionManager = field(default_factory=SessionManager)

    def create_session(self, request: CreateSessionRequest) -> SessionResponse | ErrorResponse:
        """
        Create a session and start its first round.

        If the computer moves first its opening move is in `moves`.
        """
        try:
            config = request.to_config()
        except EngineError as e:
            return _engine_error(e)

        managed, result = self.session_manager.create_session(config)
        return SessionResponse.from_managed(managed, result.moves)

    def restore_session(self, request: RestoreRequest) -> SessionResponse | ErrorResponse:
        """Create a session that resumes from a wire snapshot."""
        try:
            config = request.to_config()
            managed = self.session_manager.restore_session(config, request.wire)
        except EngineError as e:
            logger.info("Restore rejected: %s", e.message)
            return _engine_error(e)
        return SessionResponse.from_managed(managed, managed.game.history)

    def get_session(self, session_id: str) -> SessionResponse | ErrorResponse:
        """Get session status."""
        managed = self.session_manager.get_session(session_id)
        if not managed:
            return _not_found(session_id)
        return SessionResponse.from_managed(managed)

    def play_move(self, session_id: str, index: int) -> MoveResponse | ErrorResponse:
        """
        Human move, plus the computer's reply when it is the computer's turn.

        Rule violations come back as MoveResponse(success=False); only a
        missing session is an ErrorResponse.
        """
        managed = self.session_manager.get_session(session_id)
        result = self.session_manager.play(session_id, index)
        if result is None:
            return _not_found(session_id)
        return MoveResponse.from_result(session_id, result, managed.scoreboard)

    def reset_session(self, session_id: str) -> MoveResponse | ErrorResponse:
        """Start the next round under the same settings."""
        managed = self.session_manager.get_session(session_id)
        result = self.session_manager.reset_session(session_id)
        if result is None:
            return _not_found(session_id)
        return MoveResponse.from_result(session_id, result, managed.scoreboard)

    def get_wire(self, session_id: str) -> WireResponse | ErrorResponse:
        """Compact text form of the current board."""
        managed = self.session_manager.get_session(session_id)
        if not managed:
            return _not_found(session_id)
        snapshot = managed.game.snapshot()
        return WireResponse(session_id=session_id, wire=to_wire(snapshot))

    def end_session(self, session_id: str, reason: str = "user_ended") -> bool:
        """End a session."""
        return self.session_manager.end_session(session_id, reason)

    def list_sessions(self) -> list[str]:
        """List active sessions."""
        return self.session_manager.list_active_sessions()

    def cleanup(self, max_age_seconds: int) -> list[str]:
        """Drop sessions idle for longer than max_age_seconds."""
        removed = self.session_manager.cleanup_stale_sessions(max_age_seconds)
        if removed:
            logger.info("Cleaned up %d stale session(s)", len(removed))
        return removed
