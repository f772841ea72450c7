"""
Session Module - Runs rounds and keeps sessions apart.

A session represents one seat at the table:
- Created from a SessionConfig
- Holds the current board and outcome
- Plays the computer's turns
- Keeps a scoreboard across rounds

Sessions are EPHEMERAL: in-memory only, nothing is persisted.
"""

from .config import SessionConfig, GameMode
from .game_session import GameSession, SessionState, EvaluationTicket
from .manager import SessionManager, ManagedSession, Scoreboard

__all__ = [
    "SessionConfig",
    "GameMode",
    "GameSession",
    "SessionState",
    "EvaluationTicket",
    "SessionManager",
    "ManagedSession",
    "Scoreboard",
]
