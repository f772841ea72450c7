"""
API Module - HTTP interface.

Exposes the engine via REST API for browser or mobile front-ends.
A front-end:
1. Creates a session with its settings
2. Posts moves and renders the returned snapshot
3. Resets for the next round, keeping the score
4. Saves and resumes games through the wire form

All state is session-scoped and in-memory.
"""

from .schemas import (
    # Requests
    CreateSessionRequest,
    MoveRequest,
    RestoreRequest,
    # Responses
    SessionResponse,
    MoveResponse,
    WireResponse,
    ErrorResponse,
    # Shared
    SnapshotInfo,
    OutcomeInfo,
    MoveInfo,
    ScoreInfo,
    ConfigInfo,
)
from .service import APIService
from .app import create_app

__all__ = [
    # Requests
    "CreateSessionRequest",
    "MoveRequest",
    "RestoreRequest",
    # Responses
    "SessionResponse",
    "MoveResponse",
    "WireResponse",
    "ErrorResponse",
    # Shared
    "SnapshotInfo",
    "OutcomeInfo",
    "MoveInfo",
    "ScoreInfo",
    "ConfigInfo",
    # Service
    "APIService",
    "create_app",
]
