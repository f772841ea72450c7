"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the exact contract between a front-end and the engine.
All responses include explicit types for OpenAPI schema generation.

Error Codes:
- SESSION_NOT_FOUND: Session does not exist or has expired
- INVALID_CONFIG: Session settings rejected
- INVALID_MOVE: Cell out of range or occupied
- NOT_PLAYERS_TURN: The side to move is played by the computer
- GAME_ALREADY_OVER: Round finished; reset to play again
- WIRE_FORMAT: Wire snapshot could not be decoded
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field

from ..engine_core.action import MoveRecord, MoveResult
from ..engine_core.snapshot import Snapshot
from ..session.config import SessionConfig
from ..session.manager import ManagedSession, Scoreboard


# =============================================================================
# Enums
# =============================================================================

class Mark(str, Enum):
    X = "X"
    O = "O"


class Mode(str, Enum):
    PVP = "pvp"
    PVAI = "pvai"


class DifficultyLevel(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class SessionStatus(str, Enum):
    """Session status values."""
    IDLE = "idle"
    IN_PROGRESS = "in_progress"
    OVER = "over"


class OutcomeKind(str, Enum):
    IN_PROGRESS = "in_progress"
    WIN = "win"
    TIE = "tie"


SESSION_NOT_FOUND = "SESSION_NOT_FOUND"


# =============================================================================
# Shared Models
# =============================================================================

class OutcomeInfo(BaseModel):
    """Terminal status of the board."""
    status: OutcomeKind
    winner: Optional[Mark] = None
    line: Optional[list[int]] = None


class SnapshotInfo(BaseModel):
    """Everything a renderer needs, with no further interpretation."""
    size: int
    win_length: int
    cells: list[str] = Field(description="N*N cells, row-major; X, O or '.'")
    side_to_move: Mark
    outcome: OutcomeInfo
    last_move_index: Optional[int] = None
    winning_line: Optional[list[int]] = None
    move_count: int = 0
    generation: int = 0
    state: SessionStatus = SessionStatus.IN_PROGRESS

    @classmethod
    def from_snapshot(cls, snapshot: Snapshot) -> "SnapshotInfo":
        outcome = snapshot.outcome
        line = list(outcome.line) if outcome.line else None
        return cls(
            size=snapshot.size,
            win_length=snapshot.win_length,
            cells=[c.value for c in snapshot.cells],
            side_to_move=Mark(snapshot.side_to_move.value),
            outcome=OutcomeInfo(
                status=OutcomeKind(outcome.status.value),
                winner=Mark(outcome.winner.value) if outcome.winner else None,
                line=line,
            ),
            last_move_index=snapshot.last_move_index,
            winning_line=line,
            move_count=snapshot.move_count,
            generation=snapshot.generation,
            state=SessionStatus(snapshot.state),
        )


class MoveInfo(BaseModel):
    """One placed mark."""
    index: int
    mark: Mark
    move_number: int
    by_ai: bool = False

    @classmethod
    def from_record(cls, record: MoveRecord) -> "MoveInfo":
        return cls(
            index=record.index,
            mark=Mark(record.mark.value),
            move_number=record.move_number,
            by_ai=record.by_ai,
        )


class ScoreInfo(BaseModel):
    """Finished rounds in this session."""
    x_wins: int = 0
    o_wins: int = 0
    ties: int = 0
    rounds: int = 0

    @classmethod
    def from_scoreboard(cls, board: Scoreboard) -> "ScoreInfo":
        return cls(x_wins=board.x_wins, o_wins=board.o_wins, ties=board.ties, rounds=board.rounds)


class ConfigInfo(BaseModel):
    """Session settings as applied."""
    board_size: int
    win_length: int
    starting_mark: Mark
    mode: Mode
    difficulty: DifficultyLevel
    ai_controls: Mark

    @classmethod
    def from_config(cls, config: SessionConfig) -> "ConfigInfo":
        return cls(
            board_size=config.board_size,
            win_length=config.resolved_win_length,
            starting_mark=Mark(config.starting_mark.value),
            mode=Mode(config.mode.value),
            difficulty=DifficultyLevel(config.difficulty.value),
            ai_controls=Mark(config.ai_controls.value),
        )


# =============================================================================
# Request Models
# =============================================================================

class CreateSessionRequest(BaseModel):
    """Settings for a new session."""
    board_size: int = Field(3, ge=3, le=9)
    win_length: Optional[int] = Field(None, ge=3, le=9, description="Defaults to board_size")
    starting_mark: Mark = Mark.X
    mode: Mode = Mode.PVAI
    difficulty: DifficultyLevel = DifficultyLevel.HARD
    ai_controls: Mark = Mark.O

    def to_config(self) -> SessionConfig:
        """Raises InvalidConfig for combinations the engine rejects."""
        return SessionConfig(
            board_size=self.board_size,
            win_length=self.win_length,
            starting_mark=self.starting_mark.value,
            mode=self.mode.value,
            difficulty=self.difficulty.value,
            ai_controls=self.ai_controls.value,
        )


class MoveRequest(BaseModel):
    """A human move. Range is checked by the engine, not here."""
    index: int


class RestoreRequest(CreateSessionRequest):
    """Settings plus a wire snapshot to resume from."""
    wire: str = Field(description="N:K:S:CELLS:L")


# =============================================================================
# Response Models
# =============================================================================

class SessionResponse(BaseModel):
    """Session status."""
    session_id: str
    status: SessionStatus
    config: ConfigInfo
    snapshot: Optional[SnapshotInfo] = None
    score: ScoreInfo = Field(default_factory=ScoreInfo)
    moves: list[MoveInfo] = Field(default_factory=list, description="Moves played by the last call")
    created_at: float

    @classmethod
    def from_managed(cls, managed: ManagedSession, moves: Optional[list[MoveRecord]] = None) -> "SessionResponse":
        game = managed.game
        snapshot = game.snapshot()
        return cls(
            session_id=managed.session_id,
            status=SessionStatus(game.state.value),
            config=ConfigInfo.from_config(game.config),
            snapshot=SnapshotInfo.from_snapshot(snapshot) if snapshot else None,
            score=ScoreInfo.from_scoreboard(managed.scoreboard),
            moves=[MoveInfo.from_record(m) for m in moves or []],
            created_at=managed.created_at,
        )


class MoveResponse(BaseModel):
    """Result of a move or reset."""
    session_id: str
    success: bool
    snapshot: Optional[SnapshotInfo] = None
    moves: list[MoveInfo] = Field(default_factory=list)
    score: Optional[ScoreInfo] = None
    error: Optional[str] = None
    error_code: Optional[str] = None

    @classmethod
    def from_result(cls, session_id: str, result: MoveResult, scoreboard: Optional[Scoreboard] = None) -> "MoveResponse":
        return cls(
            session_id=session_id,
            success=result.success,
            snapshot=SnapshotInfo.from_snapshot(result.snapshot) if result.snapshot else None,
            moves=[MoveInfo.from_record(m) for m in result.moves],
            score=ScoreInfo.from_scoreboard(scoreboard) if scoreboard else None,
            error=result.error,
            error_code=result.error_code.value if result.error_code else None,
        )


class WireResponse(BaseModel):
    session_id: str
    wire: str


class SessionListResponse(BaseModel):
    sessions: list[str]
    count: int


class EndSessionResponse(BaseModel):
    success: bool
    session_id: str


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str
    environment: str
    active_sessions: int = 0


class ErrorResponse(BaseModel):
    """Standardized error body."""
    error: str
    error_code: str
    details: Optional[dict] = None
