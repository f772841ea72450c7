"""
Bots module - Computer opponent implementations.

Provides:
- BotPolicy: Interface for move selection
- RandomPolicy / HeuristicPolicy / SearchPolicy: easy, medium, hard
- HeuristicEvaluator: Scores boards and cells
- DifficultyProfile: Named strengths and their search sizing
- select_move / MoveEvaluator: Entry points used by sessions
"""

from .policy import BotPolicy, BotDecision, RandomPolicy, HeuristicPolicy, SearchPolicy, policy_for
from .evaluator import HeuristicEvaluator, EvaluationWeights, cell_preferences
from .difficulty import Difficulty, DifficultyProfile, PROFILES, ply_limit_for
from .search import SearchResult, search, WIN_SCORE
from .move_evaluator import MoveEvaluator, EvaluatorStats, select_move, decide

__all__ = [
    "BotPolicy",
    "BotDecision",
    "RandomPolicy",
    "HeuristicPolicy",
    "SearchPolicy",
    "policy_for",
    "HeuristicEvaluator",
    "EvaluationWeights",
    "cell_preferences",
    "Difficulty",
    "DifficultyProfile",
    "PROFILES",
    "ply_limit_for",
    "SearchResult",
    "search",
    "WIN_SCORE",
    "MoveEvaluator",
    "EvaluatorStats",
    "select_move",
    "decide",
]
