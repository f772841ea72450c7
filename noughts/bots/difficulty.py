"""
Difficulty Profiles - Named strengths for the computer opponent.

A profile fixes:
- Which policy picks the move (random, one-ply heuristic, search)
- How much search the hard level may spend on a board size

The search budget is spread over the board: the ply limit shrinks with the
number of cells, so worst-case work stays roughly constant as N grows.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum

# 81 // 9 == 9 plies solves 3x3 exactly.
SEARCH_BUDGET = 81
MIN_SEARCH_PLIES = 2


class Difficulty(Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    @classmethod
    def parse(cls, value: str | Difficulty) -> Difficulty:
        if isinstance(value, Difficulty):
            return value
        return cls(str(value).lower())


@dataclass(frozen=True)
class DifficultyProfile:
    """How one difficulty level plays."""
    difficulty: Difficulty
    name: str
    description: str = ""

    # Behavioural switches
    random_only: bool = False
    uses_search: bool = False

    # Search sizing (hard only)
    search_budget: int = SEARCH_BUDGET
    min_plies: int = MIN_SEARCH_PLIES

    def ply_limit_for(self, size: int) -> int:
        """Search depth for an N x N board; never more than the cell count."""
        cells = size * size
        return max(self.min_plies, min(cells, self.search_budget // cells))


# ============================================================================
# Predefined Profiles
# ============================================================================

EASY = DifficultyProfile(
    difficulty=Difficulty.EASY,
    name="Easy",
    description="Plays any empty cell at random",
    random_only=True,
)


MEDIUM = DifficultyProfile(
    difficulty=Difficulty.MEDIUM,
    name="Medium",
    description="Takes wins, blocks threats, otherwise prefers strong cells",
)


HARD = DifficultyProfile(
    difficulty=Difficulty.HARD,
    name="Hard",
    description="Alpha-beta search; perfect on 3x3, depth-bounded on larger boards",
    uses_search=True,
)


PROFILES: dict[Difficulty, DifficultyProfile] = {
    Difficulty.EASY: EASY,
    Difficulty.MEDIUM: MEDIUM,
    Difficulty.HARD: HARD,
}


def ply_limit_for(size: int, difficulty: Difficulty = Difficulty.HARD) -> int:
    return PROFILES[difficulty].ply_limit_for(size)
