"""
Move Evaluator - The single entry point sessions use to ask for a move.

select_move() is the stateless form. MoveEvaluator wraps it with call
statistics and logging so a host can watch latency per difficulty.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging
import random
import threading
import time

from ..engine_core.state import Board, Cell
from .difficulty import Difficulty, PROFILES
from .policy import BotDecision, BotPolicy, policy_for

logger = logging.getLogger(__name__)


def select_move(
    board: Board,
    mark: Cell,
    difficulty: Difficulty,
    rng: random.Random | None = None,
    workers: int = 1,
) -> int:
    """
    Cell index for `mark` to play at `difficulty`.

    Hard and medium are pure functions of (board, mark); easy draws from
    rng (a fresh unseeded one when omitted).

    Raises:
        NoLegalMoves: board is full or decided
        NotPlayersTurn: mark is not to move
    """
    return decide(board, mark, difficulty, rng=rng, workers=workers).index


def decide(
    board: Board,
    mark: Cell,
    difficulty: Difficulty,
    rng: random.Random | None = None,
    workers: int = 1,
) -> BotDecision:
    policy = policy_for(PROFILES[difficulty], rng=rng, workers=workers)
    return policy.select_move(board, mark)


@dataclass
class EvaluatorStats:
    total_calls: int = 0
    total_seconds: float = 0.0
    calls_by_difficulty: dict[str, int] = field(default_factory=dict)

    @property
    def average_seconds(self) -> float:
        return self.total_seconds / self.total_calls if self.total_calls else 0.0


class MoveEvaluator:
    """
    Stateful wrapper around select_move.

    The only state is bookkeeping (call counts, latency), one policy per
    level, and the easy level's random generator; the chosen moves do not
    depend on it for medium and hard. Calls are serialized, so executor
    threads may share one evaluator.
    """

    def __init__(self, seed: int | None = None, workers: int = 1):
        self.rng = random.Random(seed)
        self.workers = workers
        self.stats = EvaluatorStats()
        self._policies: dict[Difficulty, BotPolicy] = {}
        self._lock = threading.Lock()

    def select_move(self, board: Board, mark: Cell, difficulty: Difficulty) -> int:
        return self.decide(board, mark, difficulty).index

    def decide(self, board: Board, mark: Cell, difficulty: Difficulty) -> BotDecision:
        with self._lock:
            started = time.perf_counter()
            decision = self.policy(difficulty).select_move(board, mark)
            elapsed = time.perf_counter() - started

            self.stats.total_calls += 1
            self.stats.total_seconds += elapsed
            key = difficulty.value
            self.stats.calls_by_difficulty[key] = self.stats.calls_by_difficulty.get(key, 0) + 1

        logger.debug(
            "AI %s (%s) on %dx%d plays %d: %s [%d evaluated, %.3fs]",
            mark.value,
            difficulty.value,
            board.size,
            board.size,
            decision.index,
            decision.explanation,
            decision.evaluated_moves,
            elapsed,
        )
        return decision

    def policy(self, difficulty: Difficulty) -> BotPolicy:
        """The policy used for a level, built on first use."""
        if difficulty not in self._policies:
            self._policies[difficulty] = policy_for(
                PROFILES[difficulty], rng=self.rng, workers=self.workers
            )
        return self._policies[difficulty]
