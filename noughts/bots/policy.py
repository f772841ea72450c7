"""
Bot Policy - Interface for computer move selection.

A BotPolicy takes a board and the mark it plays and returns a decision.
Decisions include:
- Which cell to play
- Explanation (for UI/debugging)
- How much work went into it
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any
import random

from ..engine_core.errors import NoLegalMoves, NotPlayersTurn
from ..engine_core.outcome import completes_line, evaluate
from ..engine_core.state import Board, Cell
from .difficulty import DifficultyProfile, HARD
from .evaluator import HeuristicEvaluator
from .search import search


@dataclass
class BotDecision:
    """
    A move chosen by a bot.

    Contains:
    - The cell index to play
    - Explanation (for UI/debugging)
    - Evaluation details (for debugging)
    """
    index: int
    explanation: str = ""

    evaluated_moves: int = 0
    best_score: float = 0.0
    evaluation_details: dict[str, Any] = field(default_factory=dict)


class BotPolicy(ABC):
    """
    Abstract base class for bot policies.

    Implementations range from a random pick to full game-tree search.
    select_move is only defined while `mark` is to move and a legal move
    exists; anything else is a caller error.
    """

    def select_move(self, board: Board, mark: Cell) -> BotDecision:
        """
        Select a cell for `mark` on `board`.

        Raises:
            NoLegalMoves: board is full or already decided
            NotPlayersTurn: mark is not the side to move
        """
        if not board.legal_moves() or evaluate(board).is_terminal:
            raise NoLegalMoves("no legal moves available")
        if mark is not board.side_to_move:
            raise NotPlayersTurn(f"{mark.value} is not to move")
        return self._decide(board, mark)

    @abstractmethod
    def _decide(self, board: Board, mark: Cell) -> BotDecision:
        pass

    def get_name(self) -> str:
        """Get the bot's name/identifier."""
        return self.__class__.__name__


class RandomPolicy(BotPolicy):
    """
    Random policy - any empty cell, uniformly.

    Used for:
    - The easy level
    - Baseline comparison in tests
    """

    def __init__(self, seed: int | None = None, rng: random.Random | None = None):
        self.rng = rng or random.Random(seed)

    def _decide(self, board: Board, mark: Cell) -> BotDecision:
        moves = list(board.legal_moves())
        return BotDecision(
            index=self.rng.choice(moves),
            explanation="Selected randomly",
            evaluated_moves=len(moves),
        )


class HeuristicPolicy(BotPolicy):
    """
    One-ply heuristic, in priority order:
    1. Complete a line for ourselves
    2. Block the lowest-indexed cell where the opponent would complete one
    3. Strongest cell by static preference, lowest index among equals
    """

    def __init__(self, evaluator: HeuristicEvaluator | None = None):
        self.evaluator = evaluator or HeuristicEvaluator()

    def _decide(self, board: Board, mark: Cell) -> BotDecision:
        moves = list(board.legal_moves())
        opponent = mark.opponent()

        for index in moves:
            if completes_line(board, index, mark):
                return BotDecision(index=index, explanation="Completes a line", evaluated_moves=len(moves))

        threats = [index for index in moves if completes_line(board, index, opponent)]
        if threats:
            return BotDecision(
                index=threats[0],
                explanation="Blocks an opponent line",
                evaluated_moves=len(moves),
                evaluation_details={"threats": threats},
            )

        ordered = self.evaluator.preferred_order(board)
        return BotDecision(
            index=ordered[0],
            explanation="Strongest open cell",
            evaluated_moves=len(moves),
            evaluation_details={"preference": self.evaluator.cell_preference(board, ordered[0])},
        )


class SearchPolicy(BotPolicy):
    """
    Alpha-beta search sized by a difficulty profile.

    Exact on 3x3; on larger boards the ply limit shrinks with the cell
    count and the heuristic evaluator scores the cutoff.
    """

    def __init__(
        self,
        profile: DifficultyProfile = HARD,
        evaluator: HeuristicEvaluator | None = None,
        workers: int = 1,
    ):
        self.profile = profile
        self.evaluator = evaluator or HeuristicEvaluator()
        self.workers = workers

    def _decide(self, board: Board, mark: Cell) -> BotDecision:
        result = search(
            board,
            self.profile.ply_limit_for(board.size),
            evaluator=self.evaluator,
            workers=self.workers,
        )
        if result.is_forced_win:
            explanation = "Forced win"
        elif result.is_forced_loss:
            explanation = "Delays a forced loss"
        else:
            explanation = "Best searched move"
        return BotDecision(
            index=result.move,
            explanation=explanation,
            evaluated_moves=result.nodes,
            best_score=result.score,
            evaluation_details={"depth": result.depth, "exact": result.exact},
        )


def policy_for(
    profile: DifficultyProfile,
    rng: random.Random | None = None,
    workers: int = 1,
) -> BotPolicy:
    """Build the policy a difficulty profile calls for."""
    if profile.random_only:
        return RandomPolicy(rng=rng)
    if profile.uses_search:
        return SearchPolicy(profile=profile, workers=workers)
    return HeuristicPolicy()
