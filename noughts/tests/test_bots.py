"""
Tests for computer move selection.

Tests:
- Every level only plays legal cells
- Medium takes wins, blocks threats and prefers strong cells
- Hard blocks on small and large boards
- Caller errors (full board, wrong mark)
- Difficulty profiles and evaluator bookkeeping
"""

from concurrent.futures import ThreadPoolExecutor
import random

import pytest

from ..bots import (
    Difficulty,
    HeuristicEvaluator,
    HeuristicPolicy,
    MoveEvaluator,
    PROFILES,
    RandomPolicy,
    SearchPolicy,
    cell_preferences,
    decide,
    ply_limit_for,
    policy_for,
    select_move,
)
from ..engine_core.errors import NoLegalMoves, NotPlayersTurn
from ..engine_core.outcome import evaluate
from ..engine_core.state import Board, Cell

ALL_LEVELS = [Difficulty.EASY, Difficulty.MEDIUM, Difficulty.HARD]


class TestLegality:
    """Tests that bots only select legal cells."""

    @pytest.mark.parametrize("difficulty", ALL_LEVELS)
    def test_selects_empty_cell(self, make_board, difficulty):
        """Chosen index is always one of the legal moves."""
        board = make_board("X.O .X. ...")
        index = select_move(board, Cell.O, difficulty, rng=random.Random(1))
        assert index in board.legal_moves()

    def test_random_policy_over_many_boards(self):
        """Seeded random play stays legal through whole games."""
        bot = RandomPolicy(seed=42)
        for _ in range(25):
            board = Board.create(4)
            while not evaluate(board).is_terminal:
                decision = bot.select_move(board, board.side_to_move)
                assert decision.index in board.legal_moves()
                board = board.apply_move(decision.index, board.side_to_move)

    def test_seed_reproducible(self, empty_board):
        """Equal seeds give equal easy moves."""
        first = MoveEvaluator(seed=3)
        second = MoveEvaluator(seed=3)
        picks_a = [first.select_move(empty_board, Cell.X, Difficulty.EASY) for _ in range(10)]
        picks_b = [second.select_move(empty_board, Cell.X, Difficulty.EASY) for _ in range(10)]
        assert picks_a == picks_b

    @pytest.mark.parametrize("difficulty", ALL_LEVELS)
    def test_full_board_raises(self, make_board, difficulty):
        """No move can be chosen on a full board."""
        with pytest.raises(NoLegalMoves):
            select_move(make_board("XOX XOO OXX"), Cell.O, difficulty)

    @pytest.mark.parametrize("difficulty", ALL_LEVELS)
    def test_decided_board_raises(self, make_board, difficulty):
        """No move can be chosen once someone has won."""
        with pytest.raises(NoLegalMoves):
            select_move(make_board("XXX OO. ..."), Cell.O, difficulty)

    @pytest.mark.parametrize("difficulty", ALL_LEVELS)
    def test_wrong_mark_raises(self, empty_board, difficulty):
        """Asking for O's move when X is to move is a caller error."""
        with pytest.raises(NotPlayersTurn):
            select_move(empty_board, Cell.O, difficulty)


class TestMedium:
    """Tests for the one-ply heuristic."""

    def test_takes_win(self, make_board):
        """Completes its own line."""
        assert select_move(make_board("XX. OO. ..."), Cell.X, Difficulty.MEDIUM) == 2

    def test_win_before_block(self, make_board):
        """Winning beats blocking."""
        assert select_move(make_board("XX. OO. X.."), Cell.O, Difficulty.MEDIUM) == 5

    def test_blocks_threat(self, make_board):
        """Blocks the opponent's open two."""
        assert select_move(make_board("XX. O.. ..."), Cell.O, Difficulty.MEDIUM) == 2

    def test_blocks_lowest_threat(self, make_board):
        """With two threats the lower index is blocked."""
        decision = decide(make_board("XX. X.O .O."), Cell.O, Difficulty.MEDIUM)
        assert decision.index == 2
        assert decision.evaluation_details["threats"] == [2, 6]

    def test_opens_in_centre(self, empty_board):
        """Centre is the strongest cell on 3x3."""
        assert select_move(empty_board, Cell.X, Difficulty.MEDIUM) == 4

    def test_corner_over_edge(self, make_board):
        """With the centre taken, the first corner is preferred."""
        assert select_move(make_board("... .X. ..."), Cell.O, Difficulty.MEDIUM) == 0

    def test_even_board_prefers_central_block(self):
        """On 4x4 the first of the four centre cells is chosen."""
        assert select_move(Board.create(4), Cell.X, Difficulty.MEDIUM) == 5

    def test_blocks_on_large_board(self, make_board):
        """Blocks a four-of-five on 5x5."""
        board = make_board(
            "XXXX."
            "....."
            "O...."
            ".O..."
            "..O.."
        )
        assert select_move(board, Cell.O, Difficulty.MEDIUM) == 4


class TestHard:
    """Tests for the search level."""

    def test_takes_win(self, make_board):
        """Immediate win is played."""
        assert select_move(make_board("XX. OO. ..."), Cell.X, Difficulty.HARD) == 2

    def test_blocks_threat(self, make_board):
        """Blocks when every other move loses."""
        assert select_move(make_board("XX. O.. ..."), Cell.O, Difficulty.HARD) == 2

    def test_blocks_on_large_board(self, make_board):
        """Depth-bounded search still blocks on 5x5."""
        board = make_board(
            "XXXX."
            "....."
            "O...."
            ".O..."
            "..O.."
        )
        assert select_move(board, Cell.O, Difficulty.HARD) == 4

    def test_blocks_sliding_window(self, make_board):
        """Blocks a three on 5x5 with K = 4."""
        board = make_board(
            "....."
            "XXX.."
            "....."
            "OO..."
            ".....",
            win_length=4,
        )
        assert select_move(board, Cell.O, Difficulty.HARD) == 8

    def test_deterministic(self, make_board):
        """Same board, same move."""
        board = make_board("X.. ... ...")
        picks = {select_move(board, Cell.O, Difficulty.HARD) for _ in range(3)}
        assert len(picks) == 1

    def test_decision_details(self, make_board):
        """Search reports depth and whether it was exact."""
        decision = SearchPolicy().select_move(make_board("XX. O.. ..."), Cell.O)
        assert decision.evaluation_details == {"depth": 6, "exact": True}
        assert decision.evaluated_moves > 0


class TestDifficulty:
    """Tests for profiles and search sizing."""

    @pytest.mark.parametrize("size,plies", [(3, 9), (4, 5), (5, 3), (6, 2), (9, 2)])
    def test_ply_limits(self, size, plies):
        """Ply limit shrinks with the cell count but never below two."""
        assert ply_limit_for(size) == plies

    def test_parse(self):
        """Names parse case-insensitively."""
        assert Difficulty.parse("HARD") is Difficulty.HARD
        assert Difficulty.parse(Difficulty.EASY) is Difficulty.EASY
        with pytest.raises(ValueError):
            Difficulty.parse("impossible")

    def test_policy_for_profiles(self):
        """Each level maps to its policy."""
        assert isinstance(policy_for(PROFILES[Difficulty.EASY]), RandomPolicy)
        assert isinstance(policy_for(PROFILES[Difficulty.MEDIUM]), HeuristicPolicy)
        assert isinstance(policy_for(PROFILES[Difficulty.HARD]), SearchPolicy)


class TestHeuristicEvaluator:
    """Tests for static scoring."""

    def test_symmetric_on_empty_board(self, empty_board):
        """Nobody is ahead on an empty board."""
        assert HeuristicEvaluator().evaluate(empty_board, Cell.X) == 0

    def test_centre_favours_its_owner(self, make_board):
        """Centre mark counts for its owner."""
        board = make_board("... .X. ...")
        evaluator = HeuristicEvaluator()
        assert evaluator.evaluate(board, Cell.X) > 0
        assert evaluator.evaluate(board, Cell.O) < 0

    def test_cell_preferences_three_by_three(self):
        """Centre, then corners, then edges."""
        prefs = cell_preferences(3, 3)
        assert prefs[4] > prefs[0] > prefs[1]
        assert prefs[0] == prefs[2] == prefs[6] == prefs[8]

    def test_preferred_order(self, make_board):
        """Empty cells, strongest first."""
        order = HeuristicEvaluator().preferred_order(make_board("... .X. ..."))
        assert order == [0, 2, 6, 8, 1, 3, 5, 7]


class TestMoveEvaluator:
    """Tests for the stateful wrapper."""

    def test_stats(self, empty_board):
        """Calls are counted per difficulty."""
        evaluator = MoveEvaluator(seed=0)
        evaluator.select_move(empty_board, Cell.X, Difficulty.EASY)
        evaluator.select_move(empty_board, Cell.X, Difficulty.MEDIUM)
        evaluator.select_move(empty_board, Cell.X, Difficulty.MEDIUM)
        assert evaluator.stats.total_calls == 3
        assert evaluator.stats.calls_by_difficulty == {"easy": 1, "medium": 2}
        assert evaluator.stats.average_seconds >= 0

    def test_policy_built_once_per_level(self):
        """Each level's policy is reused across calls."""
        evaluator = MoveEvaluator(seed=0)
        assert evaluator.policy(Difficulty.HARD) is evaluator.policy(Difficulty.HARD)
        assert isinstance(evaluator.policy(Difficulty.EASY), RandomPolicy)
        assert evaluator.policy(Difficulty.EASY).rng is evaluator.rng

    def test_shared_across_threads(self, empty_board):
        """Concurrent calls on one evaluator are all counted."""
        evaluator = MoveEvaluator(seed=0)
        levels = [Difficulty.EASY, Difficulty.MEDIUM] * 20

        with ThreadPoolExecutor(max_workers=4) as pool:
            moves = list(pool.map(lambda level: evaluator.select_move(empty_board, Cell.X, level), levels))

        assert all(move in range(9) for move in moves)
        assert evaluator.stats.total_calls == 40
        assert evaluator.stats.calls_by_difficulty == {"easy": 20, "medium": 20}
