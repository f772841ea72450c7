"""
Snapshots and the wire form.

A Snapshot is the read-only view handed to a presentation layer after
every state-changing call. It is fully derived from a board plus the last
move, so it can be rendered without further interpretation.

Wire form (compact, order-preserving, one line of ASCII):

    N:K:S:CELLS:L

    N      board size
    K      win length
    S      side to move, X or O
    CELLS  N*N chars from {X, O, .}, row-major
    L      last move index, or - when no move has been made

Example: "3:3:O:X........:0"
"""

from __future__ import annotations
from dataclasses import dataclass

from .errors import InvalidBoard, WireFormatError
from .lines import Line, candidate_lines
from .outcome import Outcome, evaluate
from .state import Board, Cell

WIRE_SEPARATOR = ":"
NO_LAST_MOVE = "-"


@dataclass(frozen=True)
class Snapshot:
    """Immutable view of one session at one point in time."""
    size: int
    win_length: int
    cells: tuple[Cell, ...]
    side_to_move: Cell
    outcome: Outcome
    last_move_index: int | None = None
    move_count: int = 0
    generation: int = 0
    state: str = "in_progress"

    @classmethod
    def from_board(
        cls,
        board: Board,
        last_move_index: int | None = None,
        generation: int = 0,
        state: str | None = None,
        outcome: Outcome | None = None,
    ) -> Snapshot:
        outcome = outcome or evaluate(board)
        if state is None:
            state = "over" if outcome.is_terminal else "in_progress"
        return cls(
            size=board.size,
            win_length=board.win_length,
            cells=board.cells,
            side_to_move=board.side_to_move,
            outcome=outcome,
            last_move_index=last_move_index,
            move_count=board.move_count,
            generation=generation,
            state=state,
        )

    @property
    def winning_line(self) -> Line | None:
        return self.outcome.line

    @property
    def is_over(self) -> bool:
        return self.outcome.is_terminal

    def to_board(self) -> Board:
        return Board.from_cells(self.size, self.cells, self.win_length, self.side_to_move)

    def rows(self) -> list[list[str]]:
        n = self.size
        return [[c.value for c in self.cells[r * n:(r + 1) * n]] for r in range(n)]


def to_wire(snapshot: Snapshot) -> str:
    """Encode the board-bearing part of a snapshot."""
    last = NO_LAST_MOVE if snapshot.last_move_index is None else str(snapshot.last_move_index)
    return WIRE_SEPARATOR.join([
        str(snapshot.size),
        str(snapshot.win_length),
        snapshot.side_to_move.value,
        "".join(cell.value for cell in snapshot.cells),
        last,
    ])


def from_wire(text: str, generation: int = 0) -> Snapshot:
    """
    Decode a wire string back into a snapshot.

    The outcome and winning line are recomputed from the cells.

    Raises:
        WireFormatError: wrong field count, bad characters, or a board
            that cannot occur in play
    """
    parts = text.strip().split(WIRE_SEPARATOR)
    if len(parts) != 5:
        raise WireFormatError(f"expected 5 fields, got {len(parts)}")
    size_text, k_text, side_text, cells_text, last_text = parts

    try:
        size = int(size_text)
        win_length = int(k_text)
    except ValueError:
        raise WireFormatError(f"size and win length must be integers: {size_text!r}, {k_text!r}")

    try:
        side = Cell.mark(side_text)
        cells = tuple(Cell(ch) for ch in cells_text.upper())
    except ValueError as e:
        raise WireFormatError(f"bad mark in wire string: {e}")

    last: int | None = None
    if last_text != NO_LAST_MOVE:
        try:
            last = int(last_text)
        except ValueError:
            raise WireFormatError(f"last move must be an index or '-': {last_text!r}")

    try:
        board = Board.from_cells(size, cells, win_length, side)
    except InvalidBoard as e:
        raise WireFormatError(e.message)

    if last is not None and not (0 <= last < len(cells) and cells[last] is not Cell.EMPTY):
        raise WireFormatError(f"last move {last} does not point at a mark")
    _check_reachable(board, last)

    return Snapshot.from_board(board, last_move_index=last, generation=generation)


def _check_reachable(board: Board, last: int | None) -> None:
    # The mark that moved last is the only one that may own a line, and
    # the last move must be one of its marks on that line.
    mover = board.side_to_move.opponent()
    if last is not None and board.cells[last] is not mover:
        raise WireFormatError(f"last move {last} is not a mark of {mover.value}, who moved last")

    owned: dict[Cell, list[Line]] = {}
    for line in candidate_lines(board.size, board.win_length):
        mark = board.cells[line[0]]
        if mark is not Cell.EMPTY and all(board.cells[i] is mark for i in line):
            owned.setdefault(mark, []).append(line)

    if len(owned) > 1:
        raise WireFormatError("both marks have a completed line")
    for winner, lines in owned.items():
        if winner is not mover:
            raise WireFormatError(f"play continued after {winner.value} completed a line")
        if last is not None and not any(last in line for line in lines):
            raise WireFormatError(f"last move {last} is not on {winner.value}'s winning line")
