"""
Moves and results.

A MoveRecord is one entry of a round's history. A MoveResult is what every
state-changing session call hands back: success plus a fresh snapshot, or a
failure with a typed error code and the state untouched.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .errors import EngineError, ErrorCode
from .state import Cell

if TYPE_CHECKING:
    from .snapshot import Snapshot


@dataclass(frozen=True)
class MoveRecord:
    """One placed mark."""
    index: int
    mark: Cell
    move_number: int  # 1-based within the round
    by_ai: bool = False


@dataclass
class MoveResult:
    """
    Result of a session call.

    Contains:
    - Whether the call succeeded
    - The snapshot after the call (current snapshot on failure)
    - Error message and code (on failure)
    - The moves applied by this call, human first then any AI reply
    """
    success: bool
    snapshot: Snapshot | None = None
    error: str | None = None
    error_code: ErrorCode | None = None

    moves: list[MoveRecord] = field(default_factory=list)

    @classmethod
    def failure(
        cls,
        error: str,
        error_code: ErrorCode | None = None,
        snapshot: Snapshot | None = None,
    ) -> MoveResult:
        """Create a failure result."""
        return cls(success=False, snapshot=snapshot, error=error, error_code=error_code)

    @classmethod
    def from_error(cls, exc: EngineError, snapshot: Snapshot | None = None) -> MoveResult:
        return cls.failure(exc.message, exc.code, snapshot)

    @classmethod
    def success_with_snapshot(
        cls,
        snapshot: Snapshot,
        moves: list[MoveRecord] | None = None,
    ) -> MoveResult:
        """Create a success result."""
        return cls(success=True, snapshot=snapshot, moves=moves or [])

    @property
    def ai_moves(self) -> list[MoveRecord]:
        return [m for m in self.moves if m.by_ai]
