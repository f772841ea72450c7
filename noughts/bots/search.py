"""
Game-tree search for the hard level.

Negamax with alpha-beta pruning over immutable boards. Every recursive call
gets its own successor board, so no branch ever sees another branch's
moves. The transposition table belongs to a single top-level call, which
keeps the result a pure function of (board, mark, ply_limit).

Scores are from the point of view of the side to move at each node:
- completed line for the player who just moved: -(WIN_SCORE - ply)
- full board: 0
- ply limit reached: static evaluation
Subtracting the ply makes faster wins and slower losses score better. At
the root, moves are tried in ascending index and only a strictly better
score replaces the incumbent, so equal scores keep the lowest index.
"""

from __future__ import annotations
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
import logging

from ..engine_core.errors import NoLegalMoves
from ..engine_core.outcome import evaluate, winner_through
from ..engine_core.state import Board
from .evaluator import HeuristicEvaluator, cell_preferences

logger = logging.getLogger(__name__)

WIN_SCORE = 1_000_000_000
INFINITY = float("inf")

# Root-parallel search only pays for itself on larger boards.
PARALLEL_MIN_SIZE = 5


class _Bound(Enum):
    EXACT = 0
    LOWER = 1
    UPPER = 2


@dataclass
class SearchResult:
    """Best move found and how it was found."""
    move: int
    score: float
    depth: int
    exact: bool
    nodes: int = 0
    scores: dict[int, float] = field(default_factory=dict)  # bounds, except for the best move

    @property
    def is_forced_win(self) -> bool:
        return self.score > WIN_SCORE - 100

    @property
    def is_forced_loss(self) -> bool:
        return self.score < -(WIN_SCORE - 100)


@dataclass
class _Context:
    evaluator: HeuristicEvaluator
    table: dict = field(default_factory=dict)
    nodes: int = 0


def search(
    board: Board,
    ply_limit: int,
    evaluator: HeuristicEvaluator | None = None,
    workers: int = 1,
) -> SearchResult:
    """
    Best move for the side to move on board.

    Args:
        board: Position to search; must be undecided with an empty cell
        ply_limit: Maximum half-moves to look ahead
        evaluator: Static evaluator used at the cutoff
        workers: Processes for root-parallel search on large boards

    Raises:
        NoLegalMoves: board is full or already decided
    """
    evaluator = evaluator or HeuristicEvaluator()
    moves = list(board.legal_moves())
    if not moves or evaluate(board).is_terminal:
        raise NoLegalMoves("no legal moves on a finished board")

    depth = max(1, min(ply_limit, len(moves)))
    exact = ply_limit >= len(moves)

    if workers > 1 and board.size >= PARALLEL_MIN_SIZE and len(moves) > 1:
        return _search_parallel(board, moves, depth, exact, evaluator, workers)

    ctx = _Context(evaluator=evaluator)
    side = board.side_to_move
    alpha = -INFINITY
    best_move = moves[0]
    best_score = -INFINITY
    scores: dict[int, float] = {}

    for move in moves:
        child = board.apply_move(move, side)
        score = -_negamax(child, move, depth - 1, 1, -INFINITY, -alpha, ctx)
        scores[move] = score
        if score > best_score:
            best_score = score
            best_move = move
            alpha = max(alpha, score)

    return SearchResult(
        move=best_move,
        score=best_score,
        depth=depth,
        exact=exact,
        nodes=ctx.nodes,
        scores=scores,
    )


def _negamax(
    board: Board,
    last_move: int,
    depth: int,
    ply: int,
    alpha: float,
    beta: float,
    ctx: _Context,
) -> float:
    ctx.nodes += 1

    if winner_through(board, last_move) is not None:
        return -(WIN_SCORE - ply)
    if board.is_full():
        return 0
    side = board.side_to_move
    if depth <= 0:
        return ctx.evaluator.evaluate(board, side)

    # Equal cells imply equal ply and remaining depth within one search.
    key = board.cells
    alpha_orig = alpha
    entry = ctx.table.get(key)
    if entry is not None:
        bound, value = entry
        if bound is _Bound.EXACT:
            return value
        if bound is _Bound.LOWER:
            alpha = max(alpha, value)
        else:
            beta = min(beta, value)
        if alpha >= beta:
            return value

    prefs = cell_preferences(board.size, board.win_length)
    ordered = sorted(board.legal_moves(), key=lambda i: (-prefs[i][0], -prefs[i][1], i))

    best = -INFINITY
    for move in ordered:
        child = board.apply_move(move, side)
        score = -_negamax(child, move, depth - 1, ply + 1, -beta, -alpha, ctx)
        if score > best:
            best = score
        if best > alpha:
            alpha = best
        if alpha >= beta:
            break

    if best <= alpha_orig:
        bound = _Bound.UPPER
    elif best >= beta:
        bound = _Bound.LOWER
    else:
        bound = _Bound.EXACT
    ctx.table[key] = (bound, best)
    return best


def _score_root_move(
    board: Board,
    move: int,
    depth: int,
    evaluator: HeuristicEvaluator,
) -> tuple[int, float, int]:
    """Full-window score of one root move; runs in a worker process."""
    ctx = _Context(evaluator=evaluator)
    child = board.apply_move(move, board.side_to_move)
    score = -_negamax(child, move, depth - 1, 1, -INFINITY, INFINITY, ctx)
    return move, score, ctx.nodes


def _search_parallel(
    board: Board,
    moves: list[int],
    depth: int,
    exact: bool,
    evaluator: HeuristicEvaluator,
    workers: int,
) -> SearchResult:
    # Full windows per root move give exact scores, so picking the
    # lowest-index maximum matches the sequential search.
    logger.debug("Parallel search: %d root moves on %d workers", len(moves), workers)
    with ProcessPoolExecutor(max_workers=workers) as pool:
        futures = [
            pool.submit(_score_root_move, board, move, depth, evaluator)
            for move in moves
        ]
        results = [f.result() for f in futures]

    scores = {move: score for move, score, _ in results}
    nodes = sum(n for _, _, n in results)
    best_move = moves[0]
    for move in moves:
        if scores[move] > scores[best_move]:
            best_move = move

    return SearchResult(
        move=best_move,
        score=scores[best_move],
        depth=depth,
        exact=exact,
        nodes=nodes,
        scores=scores,
    )
