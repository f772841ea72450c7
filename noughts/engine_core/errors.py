"""
Engine Errors - Typed failures raised by the core.

Engine internals raise these; GameSession catches them at its boundary
and reports them to the caller as a MoveResult with an ErrorCode.
None of them is fatal: the board and outcome are never left half-updated.
"""

from __future__ import annotations
from enum import Enum


class ErrorCode(str, Enum):
    """Structured error codes shared by the session and the API."""
    INVALID_MOVE = "INVALID_MOVE"
    NOT_PLAYERS_TURN = "NOT_PLAYERS_TURN"
    GAME_ALREADY_OVER = "GAME_ALREADY_OVER"
    NO_LEGAL_MOVES = "NO_LEGAL_MOVES"
    STALE_EVALUATION = "STALE_EVALUATION"
    NOT_STARTED = "NOT_STARTED"
    INVALID_STATE = "INVALID_STATE"
    INVALID_BOARD = "INVALID_BOARD"
    INVALID_CONFIG = "INVALID_CONFIG"
    WIRE_FORMAT = "WIRE_FORMAT"


class EngineError(Exception):
    """Base class for every recoverable engine failure."""
    code: ErrorCode = ErrorCode.INVALID_STATE

    def __init__(self, message: str, code: ErrorCode | None = None):
        super().__init__(message)
        if code is not None:
            self.code = code

    @property
    def message(self) -> str:
        return self.args[0] if self.args else ""


class InvalidMove(EngineError):
    """Index out of range or cell already occupied."""
    code = ErrorCode.INVALID_MOVE


class NotPlayersTurn(EngineError):
    """Move submitted by or for the mark that is not to move."""
    code = ErrorCode.NOT_PLAYERS_TURN


class GameAlreadyOver(EngineError):
    """Move submitted after a terminal outcome."""
    code = ErrorCode.GAME_ALREADY_OVER


class NoLegalMoves(EngineError):
    """Move selection requested on a full or decided board."""
    code = ErrorCode.NO_LEGAL_MOVES


class StaleEvaluation(EngineError):
    """An AI result computed against a board that has since been replaced."""
    code = ErrorCode.STALE_EVALUATION


class SessionError(EngineError):
    """Operation not valid in the session's current state."""
    code = ErrorCode.INVALID_STATE


class InvalidBoard(EngineError, ValueError):
    """Board dimensions or contents that cannot exist."""
    code = ErrorCode.INVALID_BOARD


class InvalidConfig(EngineError, ValueError):
    """Session configuration rejected at construction."""
    code = ErrorCode.INVALID_CONFIG


class WireFormatError(EngineError, ValueError):
    """Malformed wire snapshot."""
    code = ErrorCode.WIRE_FORMAT
