"""
Heuristic Evaluator - Scores boards and cells for the computer opponent.

Two kinds of judgement live here:
- Static board evaluation: used at the search cutoff. Every candidate line
  still open to only one side counts for that side, weighted by how many
  of its cells are already filled.
- Static cell preference: used by the medium level and for move ordering.
  A cell is worth the number of lines through it, then its closeness to
  the centre. On 3x3 this is centre > corners > edges.
"""

from __future__ import annotations
from dataclasses import dataclass
from functools import lru_cache

from ..engine_core.lines import candidate_lines, lines_through
from ..engine_core.state import Board, Cell


@dataclass(frozen=True)
class EvaluationWeights:
    """
    Weights for the static evaluator.

    A line holding c of one side's marks and none of the other's is worth
    line_base ** c to that side.
    """
    line_base: float = 4.0
    opponent_factor: float = 1.0  # >1 plays more defensively


@dataclass(frozen=True)
class HeuristicEvaluator:
    """
    Evaluates boards from one mark's point of view.

    Positive scores favour `mark`, negative favour its opponent.
    """
    weights: EvaluationWeights = EvaluationWeights()

    def evaluate(self, board: Board, mark: Cell) -> float:
        cells = board.cells
        opponent = mark.opponent()
        base = self.weights.line_base
        own_total = 0.0
        opp_total = 0.0

        for line in candidate_lines(board.size, board.win_length):
            own = 0
            opp = 0
            for index in line:
                cell = cells[index]
                if cell is mark:
                    own += 1
                elif cell is opponent:
                    opp += 1
            if own and not opp:
                own_total += base ** own
            elif opp and not own:
                opp_total += base ** opp

        return own_total - self.weights.opponent_factor * opp_total

    def cell_preference(self, board: Board, index: int) -> tuple[int, int]:
        return cell_preferences(board.size, board.win_length)[index]

    def preferred_order(self, board: Board) -> list[int]:
        """Empty cells, strongest first, lowest index among equals."""
        prefs = cell_preferences(board.size, board.win_length)
        return sorted(board.legal_moves(), key=lambda i: (-prefs[i][0], -prefs[i][1], i))


@lru_cache(maxsize=None)
def cell_preferences(size: int, win_length: int) -> tuple[tuple[int, int], ...]:
    """
    Per-cell static preference as (lines through cell, centrality).

    Centrality is the negated squared distance to the grid centre, doubled
    so it stays integral on even sizes.
    """
    per_cell = lines_through(size, win_length)
    centre = size - 1  # doubled coordinate of the centre
    prefs = []
    for index in range(size * size):
        row, col = divmod(index, size)
        distance = (2 * row - centre) ** 2 + (2 * col - centre) ** 2
        prefs.append((len(per_cell[index]), -distance))
    return tuple(prefs)
