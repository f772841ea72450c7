"""
Session configuration - supplied once when a session starts, immutable after.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum

from ..bots.difficulty import Difficulty
from ..engine_core.errors import InvalidBoard, InvalidConfig
from ..engine_core.state import Board, Cell


class GameMode(Enum):
    """Who sits at each side of the board."""
    PVP = "pvp"  # two humans
    PVAI = "pvai"  # human against the computer

    @classmethod
    def parse(cls, value: str | GameMode) -> GameMode:
        if isinstance(value, GameMode):
            return value
        return cls(str(value).lower())


@dataclass(frozen=True)
class SessionConfig:
    """
    Settings for one session.

    Strings are accepted for the enum fields ("x", "pvai", "hard") so the
    CLI and API can pass user input straight through.
    win_length defaults to board_size.
    """
    board_size: int = 3
    starting_mark: Cell = Cell.X
    mode: GameMode = GameMode.PVAI
    difficulty: Difficulty = Difficulty.HARD
    ai_controls: Cell = Cell.O
    win_length: int | None = None

    def __post_init__(self):
        try:
            object.__setattr__(self, "starting_mark", Cell.mark(self.starting_mark))
            object.__setattr__(self, "ai_controls", Cell.mark(self.ai_controls))
            object.__setattr__(self, "mode", GameMode.parse(self.mode))
            object.__setattr__(self, "difficulty", Difficulty.parse(self.difficulty))
        except ValueError as e:
            raise InvalidConfig(str(e))

        # Builds and discards a board so geometry errors surface here.
        try:
            self.new_board()
        except InvalidBoard as e:
            raise InvalidConfig(e.message)

    @property
    def resolved_win_length(self) -> int:
        return self.board_size if self.win_length is None else self.win_length

    @property
    def has_ai(self) -> bool:
        return self.mode is GameMode.PVAI

    def is_ai_controlled(self, mark: Cell) -> bool:
        return self.mode is GameMode.PVAI and mark is self.ai_controls

    def new_board(self) -> Board:
        return Board.create(self.board_size, self.resolved_win_length, self.starting_mark)
