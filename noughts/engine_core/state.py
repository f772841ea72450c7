"""
Board State - The grid value every other component reads.

Design principles:
- Immutable: apply_move returns a new Board, the receiver never changes
- Single writer: apply_move is the only way a mark gets onto a board
- Derived turn: side_to_move is computed from the mark counts
- Hashable: boards can key transposition tables and caches
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Sequence

from .errors import InvalidBoard, InvalidMove, NotPlayersTurn

MIN_BOARD_SIZE = 3
MAX_BOARD_SIZE = 9


class Cell(Enum):
    """Contents of one grid cell. X and O double as the two marks."""
    EMPTY = "."
    X = "X"
    O = "O"

    def opponent(self) -> Cell:
        """The other mark."""
        if self is Cell.X:
            return Cell.O
        if self is Cell.O:
            return Cell.X
        raise ValueError("EMPTY has no opponent")

    @property
    def is_mark(self) -> bool:
        return self is not Cell.EMPTY

    @classmethod
    def mark(cls, value: str | Cell) -> Cell:
        """Parse 'X'/'O' (any case) into a mark, rejecting EMPTY."""
        cell = value if isinstance(value, Cell) else cls(str(value).upper())
        if cell is Cell.EMPTY:
            raise ValueError("a mark must be X or O")
        return cell


class LegalMoves:
    """
    Empty indices of a board, ascending.

    Iterating starts a fresh scan every time, so the same object can be
    walked more than once. Nothing is materialized up front.
    """

    def __init__(self, cells: tuple[Cell, ...]):
        self._cells = cells

    def __iter__(self) -> Iterator[int]:
        return (i for i, cell in enumerate(self._cells) if cell is Cell.EMPTY)

    def __bool__(self) -> bool:
        return Cell.EMPTY in self._cells

    def __len__(self) -> int:
        return self._cells.count(Cell.EMPTY)

    def __contains__(self, index: object) -> bool:
        return (
            isinstance(index, int)
            and 0 <= index < len(self._cells)
            and self._cells[index] is Cell.EMPTY
        )


@dataclass(frozen=True)
class Board:
    """
    An N x N grid of cells, row-major.

    Attributes:
        size: Grid side N
        win_length: Run length K that wins (K <= N)
        cells: The N*N cells
        first: The mark that moved first in this round
    """
    size: int
    win_length: int
    cells: tuple[Cell, ...]
    first: Cell = Cell.X

    @classmethod
    def create(
        cls,
        size: int,
        win_length: int | None = None,
        first: Cell = Cell.X,
    ) -> Board:
        """Empty board. Fails if the geometry is not playable."""
        k = size if win_length is None else win_length
        _check_geometry(size, k)
        if not first.is_mark:
            raise InvalidBoard("first mover must be X or O")
        return cls(size=size, win_length=k, cells=(Cell.EMPTY,) * (size * size), first=first)

    @classmethod
    def from_cells(
        cls,
        size: int,
        cells: Sequence[Cell],
        win_length: int | None = None,
        side_to_move: Cell | None = None,
    ) -> Board:
        """
        Rebuild a board from its cells.

        The first mover is recovered from the counts: the mark with one more
        stone moved first; with equal counts the side to move did (X when
        not given).
        """
        k = size if win_length is None else win_length
        _check_geometry(size, k)
        cells = tuple(cells)
        if len(cells) != size * size:
            raise InvalidBoard(f"expected {size * size} cells, got {len(cells)}")

        x_count = cells.count(Cell.X)
        o_count = cells.count(Cell.O)
        if x_count == o_count:
            first = side_to_move or Cell.X
        elif x_count == o_count + 1:
            first = Cell.X
        elif o_count == x_count + 1:
            first = Cell.O
        else:
            raise InvalidBoard(f"impossible mark counts X={x_count} O={o_count}")

        board = cls(size=size, win_length=k, cells=cells, first=first)
        if side_to_move is not None and board.side_to_move is not side_to_move:
            raise InvalidBoard(f"{side_to_move.value} cannot be to move with these counts")
        return board

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def second(self) -> Cell:
        return self.first.opponent()

    @property
    def side_to_move(self) -> Cell:
        if self.cells.count(self.first) == self.cells.count(self.second):
            return self.first
        return self.second

    @property
    def move_count(self) -> int:
        return len(self.cells) - self.cells.count(Cell.EMPTY)

    def count(self, mark: Cell) -> int:
        return self.cells.count(mark)

    def legal_moves(self) -> LegalMoves:
        """Empty indices in ascending order (lazy, restartable)."""
        return LegalMoves(self.cells)

    def is_full(self) -> bool:
        return Cell.EMPTY not in self.cells

    def is_empty(self) -> bool:
        return self.move_count == 0

    def index_of(self, row: int, col: int) -> int:
        if not (0 <= row < self.size and 0 <= col < self.size):
            raise InvalidMove(f"position ({row}, {col}) is off a {self.size}x{self.size} board")
        return row * self.size + col

    def cell(self, row: int, col: int) -> Cell:
        return self.cells[self.index_of(row, col)]

    def rows(self) -> list[tuple[Cell, ...]]:
        n = self.size
        return [self.cells[r * n:(r + 1) * n] for r in range(n)]

    # ------------------------------------------------------------------
    # Mutation (returns a new board)
    # ------------------------------------------------------------------

    def apply_move(self, index: int, mark: Cell) -> Board:
        """
        Place mark at index and return the successor board.

        Raises:
            InvalidMove: index out of range or cell occupied
            NotPlayersTurn: mark is not the side to move
        """
        if not isinstance(index, int) or isinstance(index, bool) or not 0 <= index < len(self.cells):
            raise InvalidMove(f"index {index!r} is outside 0..{len(self.cells) - 1}")
        if self.cells[index] is not Cell.EMPTY:
            raise InvalidMove(f"cell {index} is already occupied by {self.cells[index].value}")
        if mark is not self.side_to_move:
            raise NotPlayersTurn(f"it is {self.side_to_move.value}'s turn, not {mark.value}'s")

        cells = list(self.cells)
        cells[index] = mark
        board = Board(size=self.size, win_length=self.win_length, cells=tuple(cells), first=self.first)
        board.check_invariant()
        return board

    def check_invariant(self) -> None:
        """Defect check: the first mover leads by zero or one mark."""
        lead = self.cells.count(self.first) - self.cells.count(self.second)
        assert lead in (0, 1), f"corrupt board: {self.first.value} leads by {lead}"

    def render(self) -> str:
        """Plain text grid, one row per line."""
        return "\n".join(" ".join(cell.value for cell in row) for row in self.rows())


def _check_geometry(size: int, win_length: int) -> None:
    if not MIN_BOARD_SIZE <= size <= MAX_BOARD_SIZE:
        raise InvalidBoard(f"board size must be {MIN_BOARD_SIZE}..{MAX_BOARD_SIZE}, got {size}")
    if not MIN_BOARD_SIZE <= win_length <= size:
        raise InvalidBoard(f"win length must be {MIN_BOARD_SIZE}..{size}, got {win_length}")
