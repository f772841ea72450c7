"""
Engine Core - Deterministic board state and win detection.

The engine is the runtime that:
1. Builds boards for a geometry (size N, win length K)
2. Applies moves, returning successor boards
3. Detects wins and ties
4. Produces snapshots and their wire form
"""

from .state import Board, Cell, LegalMoves, MIN_BOARD_SIZE, MAX_BOARD_SIZE
from .lines import Line, candidate_lines, lines_through
from .outcome import Outcome, OutcomeStatus, evaluate, winner_through, completes_line
from .action import MoveRecord, MoveResult
from .snapshot import Snapshot, to_wire, from_wire
from .errors import (
    ErrorCode,
    EngineError,
    InvalidMove,
    NotPlayersTurn,
    GameAlreadyOver,
    NoLegalMoves,
    StaleEvaluation,
    SessionError,
    InvalidBoard,
    InvalidConfig,
    WireFormatError,
)

__all__ = [
    "Board",
    "Cell",
    "LegalMoves",
    "MIN_BOARD_SIZE",
    "MAX_BOARD_SIZE",
    "Line",
    "candidate_lines",
    "lines_through",
    "Outcome",
    "OutcomeStatus",
    "evaluate",
    "winner_through",
    "completes_line",
    "MoveRecord",
    "MoveResult",
    "Snapshot",
    "to_wire",
    "from_wire",
    "ErrorCode",
    "EngineError",
    "InvalidMove",
    "NotPlayersTurn",
    "GameAlreadyOver",
    "NoLegalMoves",
    "StaleEvaluation",
    "SessionError",
    "InvalidBoard",
    "InvalidConfig",
    "WireFormatError",
]
