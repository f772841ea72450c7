"""
Candidate winning lines for a board geometry.

A line is a tuple of K cell indices (row-major). The set depends only on
(size, win_length), so it is built once per geometry and cached.

Scan order, which fixes the winner reported when several lines complete at
once:
1. Rows, top to bottom, each row's windows left to right
2. Columns, left to right, each column's windows top to bottom
3. Down-right diagonals, then down-left diagonals, by starting cell index
"""

from __future__ import annotations
from functools import lru_cache

Line = tuple[int, ...]


@lru_cache(maxsize=None)
def candidate_lines(size: int, win_length: int) -> tuple[Line, ...]:
    """All lines of length win_length on a size x size grid, in scan order."""
    k = win_length
    lines: list[Line] = []

    for row in range(size):
        for start in range(size - k + 1):
            lines.append(tuple(row * size + start + i for i in range(k)))

    for col in range(size):
        for start in range(size - k + 1):
            lines.append(tuple((start + i) * size + col for i in range(k)))

    for row in range(size - k + 1):
        for col in range(size - k + 1):
            lines.append(tuple((row + i) * size + col + i for i in range(k)))

    for row in range(size - k + 1):
        for col in range(k - 1, size):
            lines.append(tuple((row + i) * size + col - i for i in range(k)))

    return tuple(lines)


@lru_cache(maxsize=None)
def lines_through(size: int, win_length: int) -> tuple[tuple[Line, ...], ...]:
    """For each cell index, the candidate lines that contain it (scan order kept)."""
    per_cell: list[list[Line]] = [[] for _ in range(size * size)]
    for line in candidate_lines(size, win_length):
        for index in line:
            per_cell[index].append(line)
    return tuple(tuple(cell_lines) for cell_lines in per_cell)
