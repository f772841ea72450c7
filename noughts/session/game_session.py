"""
Game Session - The state machine that runs one round.

The session:
1. Builds a board from its configuration
2. Accepts human moves and validates them
3. Re-evaluates the outcome after every mutation
4. Plays the computer's replies when it is the computer's turn
5. Answers every call with a MoveResult carrying a fresh snapshot

States:
    IDLE --start()--> IN_PROGRESS --(win/tie)--> OVER
    any state --request_reset()--> IN_PROGRESS (IDLE if never configured)

AI turns can also be driven from outside (auto_ai=False, or the async
helper): begin_ai_turn() hands out a ticket tagged with the board
generation, and complete_ai_turn() rejects tickets from an older
generation, so results computed before a reset are discarded.
"""

from __future__ import annotations
from concurrent.futures import Executor
from dataclasses import dataclass
from enum import Enum
from functools import partial
import asyncio
import logging

from ..bots.difficulty import Difficulty
from ..bots.move_evaluator import MoveEvaluator
from ..engine_core.action import MoveRecord, MoveResult
from ..engine_core.errors import (
    EngineError,
    ErrorCode,
    GameAlreadyOver,
    InvalidConfig,
    NotPlayersTurn,
    SessionError,
    StaleEvaluation,
)
from ..engine_core.outcome import Outcome, evaluate
from ..engine_core.snapshot import Snapshot, from_wire
from ..engine_core.state import Board, Cell
from .config import SessionConfig

logger = logging.getLogger(__name__)


class SessionState(Enum):
    IDLE = "idle"
    IN_PROGRESS = "in_progress"
    OVER = "over"


@dataclass(frozen=True)
class EvaluationTicket:
    """An outstanding AI move request, tied to one board generation."""
    generation: int
    board: Board
    mark: Cell
    difficulty: Difficulty


class GameSession:
    """
    One round of play.

    Usage:
        session = GameSession()
        result = session.start(SessionConfig(board_size=3, ai_controls="O"))

        result = session.apply_human_move(4)
        if not result.success:
            show_error(result.error_code)

        render(result.snapshot)
    """

    def __init__(
        self,
        config: SessionConfig | None = None,
        evaluator: MoveEvaluator | None = None,
        auto_ai: bool = True,
    ):
        self.config = config
        self.evaluator = evaluator or MoveEvaluator()
        self.auto_ai = auto_ai

        self.state = SessionState.IDLE
        self.board: Board | None = None
        self.outcome: Outcome | None = None
        self.history: list[MoveRecord] = []
        self.last_move_index: int | None = None
        self.generation = 0

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def start(self, config: SessionConfig | None = None) -> MoveResult:
        """
        Start a round. Valid from IDLE or OVER.

        If the computer moves first it opens before this returns.
        """
        if self.state is SessionState.IN_PROGRESS:
            return MoveResult.failure(
                "Session already in progress; reset it instead",
                ErrorCode.INVALID_STATE,
                self.snapshot(),
            )
        config = config or self.config
        if config is None:
            return MoveResult.failure("No configuration supplied", ErrorCode.NOT_STARTED)

        self.config = config
        return self._begin_round()

    def request_reset(self) -> MoveResult:
        """Fresh board under the same configuration, from any state."""
        if self.config is None:
            self.state = SessionState.IDLE
            return MoveResult.success_with_snapshot(None)
        return self._begin_round()

    @classmethod
    def restore(
        cls,
        config: SessionConfig,
        wire: str,
        evaluator: MoveEvaluator | None = None,
        auto_ai: bool = True,
    ) -> GameSession:
        """
        Rebuild a session from a wire snapshot.

        The board geometry must match the configuration. History before the
        snapshot is not recoverable; only the last move index is.

        Raises:
            WireFormatError: malformed wire string
            InvalidConfig: geometry differs from config
        """
        snapshot = from_wire(wire)
        if snapshot.size != config.board_size or snapshot.win_length != config.resolved_win_length:
            raise InvalidConfig(
                f"wire board is {snapshot.size}x{snapshot.size} (k={snapshot.win_length}), "
                f"config expects {config.board_size}x{config.board_size} (k={config.resolved_win_length})"
            )

        session = cls(config=config, evaluator=evaluator, auto_ai=auto_ai)
        session.generation = 1
        session.board = snapshot.to_board()
        session.outcome = snapshot.outcome
        session.last_move_index = snapshot.last_move_index
        session.state = SessionState.OVER if snapshot.is_over else SessionState.IN_PROGRESS
        logger.info("Restored session at move %d: %s", session.board.move_count, session.outcome.describe())

        if session.auto_ai:
            session._run_ai_turns()
        return session

    # =========================================================================
    # Moves
    # =========================================================================

    def apply_human_move(self, index: int) -> MoveResult:
        """
        Place the side-to-move's mark at index.

        Fails without touching state if the session is not in progress, the
        side to move is computer-controlled, or the cell is not playable.
        On success the computer replies immediately when auto_ai is on.
        """
        try:
            self._require_in_progress()
            mark = self.board.side_to_move
            if self.config.is_ai_controlled(mark):
                raise NotPlayersTurn(f"{mark.value} is played by the computer")
            record = self._apply(index, mark, by_ai=False)
        except EngineError as e:
            logger.debug("Rejected move %r: %s", index, e.message)
            return MoveResult.from_error(e, self.snapshot())

        moves = [record]
        if self.auto_ai:
            moves.extend(self._run_ai_turns())
        return MoveResult.success_with_snapshot(self.snapshot(), moves)

    def begin_ai_turn(self) -> EvaluationTicket:
        """
        Ticket for computing the computer's move elsewhere.

        Raises:
            SessionError / GameAlreadyOver: session not in progress
            NotPlayersTurn: the side to move is human
        """
        self._require_in_progress()
        mark = self.board.side_to_move
        if not self.config.is_ai_controlled(mark):
            raise NotPlayersTurn(f"{mark.value} is played by a human")
        return EvaluationTicket(
            generation=self.generation,
            board=self.board,
            mark=mark,
            difficulty=self.config.difficulty,
        )

    def complete_ai_turn(self, ticket: EvaluationTicket, index: int) -> MoveResult:
        """Apply a computed AI move, unless the board has moved on since the ticket."""
        try:
            if ticket.generation != self.generation or ticket.board != self.board:
                raise StaleEvaluation(
                    f"evaluation for generation {ticket.generation} discarded "
                    f"(current generation {self.generation})"
                )
            self._require_in_progress()
            record = self._apply(index, ticket.mark, by_ai=True)
        except StaleEvaluation as e:
            logger.info(e.message)
            return MoveResult.from_error(e, self.snapshot())
        except EngineError as e:
            return MoveResult.from_error(e, self.snapshot())
        return MoveResult.success_with_snapshot(self.snapshot(), [record])

    def play_ai_turn(self) -> MoveResult:
        """Compute and apply the computer's move on the caller's thread."""
        try:
            ticket = self.begin_ai_turn()
            index = self.evaluator.select_move(ticket.board, ticket.mark, ticket.difficulty)
        except EngineError as e:
            return MoveResult.from_error(e, self.snapshot())
        return self.complete_ai_turn(ticket, index)

    async def play_ai_turn_async(self, executor: Executor | None = None) -> MoveResult:
        """
        Compute the computer's move in an executor, then apply it.

        A reset that lands while the move is being computed makes the result
        come back as STALE_EVALUATION and leaves the new board alone.
        """
        try:
            ticket = self.begin_ai_turn()
        except EngineError as e:
            return MoveResult.from_error(e, self.snapshot())

        loop = asyncio.get_running_loop()
        index = await loop.run_in_executor(
            executor,
            partial(self.evaluator.select_move, ticket.board, ticket.mark, ticket.difficulty),
        )
        return self.complete_ai_turn(ticket, index)

    # =========================================================================
    # Views
    # =========================================================================

    def snapshot(self) -> Snapshot | None:
        """Read-only view of the current round; None while IDLE."""
        if self.board is None:
            return None
        return Snapshot.from_board(
            self.board,
            last_move_index=self.last_move_index,
            generation=self.generation,
            state=self.state.value,
            outcome=self.outcome,
        )

    @property
    def is_ai_turn(self) -> bool:
        return (
            self.state is SessionState.IN_PROGRESS
            and self.config.is_ai_controlled(self.board.side_to_move)
        )

    # =========================================================================
    # Internals
    # =========================================================================

    def _begin_round(self) -> MoveResult:
        self.generation += 1
        self.board = self.config.new_board()
        self.outcome = evaluate(self.board)
        self.history = []
        self.last_move_index = None
        self.state = SessionState.IN_PROGRESS
        logger.info(
            "Round %d started: %dx%d, k=%d, %s, %s moves first",
            self.generation,
            self.config.board_size,
            self.config.board_size,
            self.config.resolved_win_length,
            self.config.mode.value,
            self.config.starting_mark.value,
        )

        moves = self._run_ai_turns() if self.auto_ai else []
        return MoveResult.success_with_snapshot(self.snapshot(), moves)

    def _require_in_progress(self) -> None:
        if self.state is SessionState.IDLE:
            raise SessionError("Session has not been started", ErrorCode.NOT_STARTED)
        if self.state is SessionState.OVER:
            raise GameAlreadyOver(f"Game is over: {self.outcome.describe()}")

    def _run_ai_turns(self) -> list[MoveRecord]:
        # Stops at the first stale or rejected result; the board is left as it is.
        records = []
        while self.is_ai_turn:
            result = self.play_ai_turn()
            if not result.success:
                break
            records.extend(result.moves)
        return records

    def _apply(self, index: int, mark: Cell, by_ai: bool) -> MoveRecord:
        board = self.board.apply_move(index, mark)
        outcome = evaluate(board)

        # Nothing is assigned until the move is known to be legal.
        self.board = board
        self.outcome = outcome
        self.last_move_index = index
        record = MoveRecord(index=index, mark=mark, move_number=len(self.history) + 1, by_ai=by_ai)
        self.history.append(record)

        if outcome.is_terminal:
            self.state = SessionState.OVER
            logger.info("Round %d over: %s", self.generation, outcome.describe())
        return record
