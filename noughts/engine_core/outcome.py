"""
Win detection - Pure functions from a Board to its Outcome.

The outcome is never tracked incrementally by callers: it is recomputed
from the board after every mutation.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum

from .lines import Line, candidate_lines, lines_through
from .state import Board, Cell


class OutcomeStatus(Enum):
    IN_PROGRESS = "in_progress"
    WIN = "win"
    TIE = "tie"


@dataclass(frozen=True)
class Outcome:
    """
    Terminal status of a board.

    winner and line are set only when status is WIN.
    """
    status: OutcomeStatus
    winner: Cell | None = None
    line: Line | None = None

    @classmethod
    def in_progress(cls) -> Outcome:
        return cls(OutcomeStatus.IN_PROGRESS)

    @classmethod
    def tie(cls) -> Outcome:
        return cls(OutcomeStatus.TIE)

    @classmethod
    def win(cls, winner: Cell, line: Line) -> Outcome:
        return cls(OutcomeStatus.WIN, winner=winner, line=tuple(line))

    @property
    def is_terminal(self) -> bool:
        return self.status is not OutcomeStatus.IN_PROGRESS

    def describe(self) -> str:
        if self.status is OutcomeStatus.WIN:
            return f"{self.winner.value} wins on {list(self.line)}"
        if self.status is OutcomeStatus.TIE:
            return "tie"
        return "in progress"


def _line_owner(cells: tuple[Cell, ...], line: Line) -> Cell | None:
    first = cells[line[0]]
    if first is Cell.EMPTY:
        return None
    for index in line[1:]:
        if cells[index] is not first:
            return None
    return first


def evaluate(board: Board) -> Outcome:
    """
    Scan every candidate line in order and report the outcome.

    The first completed line found wins; a full board with no completed
    line is a tie; anything else is still in progress.
    """
    cells = board.cells
    for line in candidate_lines(board.size, board.win_length):
        owner = _line_owner(cells, line)
        if owner is not None:
            return Outcome.win(owner, line)
    if board.is_full():
        return Outcome.tie()
    return Outcome.in_progress()


def winner_through(board: Board, index: int) -> Cell | None:
    """
    Mark that owns a completed line through index, if any.

    Only the lines touching one cell are scanned, so this is the cheap
    check after a single move in search.
    """
    cells = board.cells
    for line in lines_through(board.size, board.win_length)[index]:
        owner = _line_owner(cells, line)
        if owner is not None:
            return owner
    return None


def completes_line(board: Board, index: int, mark: Cell) -> bool:
    """Whether placing mark at the empty cell index would complete a line for it."""
    cells = board.cells
    for line in lines_through(board.size, board.win_length)[index]:
        if all(i == index or cells[i] is mark for i in line):
            return True
    return False
