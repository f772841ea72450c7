"""
Tests for candidate lines and win detection.

Tests:
- Line enumeration and scan order
- Win, tie and in-progress outcomes
- Sliding windows when the run length is shorter than the side
- Single-cell helpers used by the bots
"""

import pytest

from ..engine_core.lines import candidate_lines, lines_through
from ..engine_core.outcome import Outcome, OutcomeStatus, completes_line, evaluate, winner_through
from ..engine_core.state import Cell


class TestCandidateLines:
    """Tests for line enumeration."""

    def test_three_by_three_in_scan_order(self):
        """Rows, columns, then both diagonals."""
        assert candidate_lines(3, 3) == (
            (0, 1, 2), (3, 4, 5), (6, 7, 8),
            (0, 3, 6), (1, 4, 7), (2, 5, 8),
            (0, 4, 8),
            (2, 4, 6),
        )

    @pytest.mark.parametrize("size", [3, 4, 5, 9])
    def test_full_length_line_count(self, size):
        """With K = N there are 2N + 2 lines."""
        assert len(candidate_lines(size, size)) == 2 * size + 2

    def test_sliding_windows(self):
        """5x5 with K = 4: two windows per row and column, four per diagonal direction."""
        lines = candidate_lines(5, 4)
        assert len(lines) == 10 + 10 + 4 + 4
        assert lines[0] == (0, 1, 2, 3)
        assert lines[1] == (1, 2, 3, 4)
        assert (4, 8, 12, 16) in lines
        assert (9, 13, 17, 21) in lines

    def test_lines_through_cell(self):
        """Centre of 3x3 lies on four lines, an edge on two."""
        per_cell = lines_through(3, 3)
        assert len(per_cell[4]) == 4
        assert len(per_cell[0]) == 3
        assert len(per_cell[1]) == 2

    def test_cached(self):
        """Repeated calls return the same object."""
        assert candidate_lines(4, 3) is candidate_lines(4, 3)


class TestEvaluate:
    """Tests for the outcome of a board."""

    def test_empty_board_in_progress(self, empty_board):
        """Nothing placed, nothing decided."""
        assert evaluate(empty_board) == Outcome.in_progress()
        assert not evaluate(empty_board).is_terminal

    def test_win_example(self, empty_board):
        """X 0, O 3, X 1, O 4, X 2 wins on the top row."""
        board = empty_board
        for index in [0, 3, 1, 4, 2]:
            board = board.apply_move(index, board.side_to_move)
        outcome = evaluate(board)
        assert outcome.status is OutcomeStatus.WIN
        assert outcome.winner is Cell.X
        assert outcome.line == (0, 1, 2)

    def test_tie_example(self, make_board):
        """Full board with no uniform line is a tie."""
        outcome = evaluate(make_board("XOX XOO OXX"))
        assert outcome.status is OutcomeStatus.TIE
        assert outcome.winner is None
        assert outcome.line is None

    def test_win_on_last_cell_is_not_a_tie(self, make_board):
        """A full board with a line is a win."""
        outcome = evaluate(make_board("XOX OXO OXX"))
        assert outcome.status is OutcomeStatus.WIN
        assert outcome.line == (0, 4, 8)

    def test_column_and_diagonals(self, make_board):
        """Columns and both diagonals are detected."""
        assert evaluate(make_board("OX. OX. ...")).line is None
        assert evaluate(make_board("OX. OX. O.X")).line == (0, 3, 6)
        assert evaluate(make_board("X.O XO. O.X")).line == (2, 4, 6)

    def test_first_line_in_scan_order_reported(self, make_board):
        """Row beats column when both are complete."""
        outcome = evaluate(make_board("XXX XOO XOO"))
        assert outcome.winner is Cell.X
        assert outcome.line == (0, 1, 2)

    def test_idempotent(self, make_board):
        """Evaluating twice gives the same outcome."""
        board = make_board("XOX .X. O.O")
        assert evaluate(board) == evaluate(board)

    def test_sliding_window_win(self, make_board):
        """On 5x5 with K = 4, four in a row anywhere wins."""
        board = make_board(
            ".XXXX"
            "....."
            "OOO.."
            "....."
            ".....",
            win_length=4,
        )
        outcome = evaluate(board)
        assert outcome.winner is Cell.X
        assert outcome.line == (1, 2, 3, 4)

    def test_short_run_does_not_win_full_length(self, make_board):
        """Four in a row on 5x5 is not a win when K = 5."""
        board = make_board(
            ".XXXX"
            "....."
            "OOO.."
            "....."
            "....."
        )
        assert evaluate(board).status is OutcomeStatus.IN_PROGRESS

    def test_describe(self):
        """Readable outcome text."""
        assert Outcome.win(Cell.O, (2, 4, 6)).describe() == "O wins on [2, 4, 6]"
        assert Outcome.tie().describe() == "tie"
        assert Outcome.in_progress().describe() == "in progress"


class TestCellHelpers:
    """Tests for the per-cell helpers."""

    def test_completes_line(self, make_board):
        """Detects the cell that finishes a line for a mark."""
        board = make_board("XX. OO. ...")
        assert completes_line(board, 2, Cell.X)
        assert completes_line(board, 5, Cell.O)
        assert not completes_line(board, 2, Cell.O)
        assert not completes_line(board, 8, Cell.X)

    def test_winner_through(self, make_board):
        """Only lines through the given cell are checked."""
        board = make_board("XXX OO. ...")
        assert winner_through(board, 1) is Cell.X
        assert winner_through(board, 8) is None

    def test_winner_through_matches_evaluate_after_move(self, empty_board):
        """The cheap check agrees with the full scan on the move just played."""
        board = empty_board
        for index in [4, 0, 2, 6, 3, 5, 8, 1, 7]:
            board = board.apply_move(index, board.side_to_move)
            owner = winner_through(board, index)
            assert owner == evaluate(board).winner
            if owner is not None:
                break
