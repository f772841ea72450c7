"""
Pytest fixtures for Noughts tests.
"""

import pytest

from ..engine_core.state import Board, Cell
from ..session import GameSession, SessionConfig, SessionManager


@pytest.fixture
def make_board():
    """Build a board from a row-major string of X, O and '.'."""
    def _make(text: str, win_length=None, side_to_move=None) -> Board:
        text = text.replace(" ", "")
        size = int(round(len(text) ** 0.5))
        return Board.from_cells(size, [Cell(ch) for ch in text], win_length, side_to_move)
    return _make


@pytest.fixture
def empty_board() -> Board:
    """Empty 3x3 board, X to move."""
    return Board.create(3)


@pytest.fixture
def pvp_config() -> SessionConfig:
    """Two humans on 3x3, X first."""
    return SessionConfig(board_size=3, mode="pvp")


@pytest.fixture
def pvai_config() -> SessionConfig:
    """Human X against hard computer O on 3x3."""
    return SessionConfig(board_size=3, mode="pvai", difficulty="hard", ai_controls="O")


@pytest.fixture
def pvp_session(pvp_config) -> GameSession:
    """Started two-human session."""
    session = GameSession(config=pvp_config)
    session.start()
    return session


@pytest.fixture
def manual_ai_session(pvai_config) -> GameSession:
    """Started session whose computer turns are driven by the test."""
    session = GameSession(config=pvai_config, auto_ai=False)
    session.start()
    return session


@pytest.fixture
def manager() -> SessionManager:
    """Fresh session manager."""
    return SessionManager()
