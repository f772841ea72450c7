"""
Session Manager - Creates and tracks independent game sessions.

LIFECYCLE:
1. Caller creates a session from a SessionConfig (round 1 starts at once)
2. Moves and resets go through the manager so finished rounds are tallied
3. Session ends explicitly, or is swept after sitting idle too long

Sessions share nothing: each owns its board, configuration, evaluator and
scoreboard. Calls that change a session hold its lock, so each board has a
single writer even when requests arrive on several threads. State is
in-memory only.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging
import threading
import time
import uuid

from ..bots.move_evaluator import MoveEvaluator
from ..engine_core.action import MoveResult
from ..engine_core.outcome import Outcome, OutcomeStatus
from ..engine_core.state import Cell
from .config import SessionConfig
from .game_session import GameSession, SessionState

logger = logging.getLogger(__name__)


@dataclass
class Scoreboard:
    """Finished rounds of one session."""
    x_wins: int = 0
    o_wins: int = 0
    ties: int = 0

    @property
    def rounds(self) -> int:
        return self.x_wins + self.o_wins + self.ties

    def record(self, outcome: Outcome):
        if outcome.status is OutcomeStatus.TIE:
            self.ties += 1
        elif outcome.winner is Cell.X:
            self.x_wins += 1
        elif outcome.winner is Cell.O:
            self.o_wins += 1

    def wins_for(self, mark: Cell) -> int:
        return self.x_wins if mark is Cell.X else self.o_wins


@dataclass
class ManagedSession:
    """A GameSession plus the bookkeeping the manager keeps for it."""
    session_id: str
    game: GameSession
    created_at: float
    last_active: float
    scoreboard: Scoreboard = field(default_factory=Scoreboard)

    # Generation whose result is already on the scoreboard
    tallied_generation: int = 0

    lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def is_active(self) -> bool:
        return self.game.state is not SessionState.IDLE

    def touch(self):
        self.last_active = time.time()


class SessionManager:
    """
    Manages game sessions.

    Responsibilities:
    - Create sessions from configurations
    - Route moves and resets, tallying finished rounds
    - Clean up ended and stale sessions
    """

    def __init__(self, search_workers: int = 1):
        self._sessions: dict[str, ManagedSession] = {}
        self.search_workers = search_workers

    def create_session(self, config: SessionConfig, auto_ai: bool = True) -> tuple[ManagedSession, MoveResult]:
        """
        Create a session and start its first round.

        Returns the managed session and the start result (which includes
        the computer's opening move when it moves first).
        """
        game = GameSession(
            config=config,
            evaluator=MoveEvaluator(workers=self.search_workers),
            auto_ai=auto_ai,
        )
        result = game.start()
        return self._register(game), result

    def restore_session(self, config: SessionConfig, wire: str, auto_ai: bool = True) -> ManagedSession:
        """Create a session from a wire snapshot (see GameSession.restore)."""
        game = GameSession.restore(
            config,
            wire,
            evaluator=MoveEvaluator(workers=self.search_workers),
            auto_ai=auto_ai,
        )
        managed = self._register(game)
        self._tally(managed)
        return managed

    def get_session(self, session_id: str) -> ManagedSession | None:
        """Get a session by ID."""
        return self._sessions.get(session_id)

    def play(self, session_id: str, index: int) -> MoveResult | None:
        """Human move in a session; None if the session does not exist."""
        managed = self._sessions.get(session_id)
        if managed is None:
            return None
        with managed.lock:
            if self._sessions.get(session_id) is not managed:
                return None
            result = managed.game.apply_human_move(index)
            managed.touch()
            self._tally(managed)
        return result

    def reset_session(self, session_id: str) -> MoveResult | None:
        """Start the next round; None if the session does not exist."""
        managed = self._sessions.get(session_id)
        if managed is None:
            return None
        with managed.lock:
            if self._sessions.get(session_id) is not managed:
                return None
            result = managed.game.request_reset()
            managed.touch()
            self._tally(managed)
        return result

    def end_session(self, session_id: str, reason: str = "completed") -> bool:
        """
        End a session and drop it from memory.

        Returns False if there was no such session.
        """
        managed = self._sessions.get(session_id)
        if managed is None:
            return False
        with managed.lock:
            if self._sessions.pop(session_id, None) is not managed:
                return False
        logger.info(
            "Session %s ended (%s) after %d round(s)",
            session_id,
            reason,
            managed.scoreboard.rounds,
        )
        return True

    def list_active_sessions(self) -> list[str]:
        """List IDs of active sessions."""
        return [
            sid for sid, managed in self._sessions.items()
            if managed.is_active()
        ]

    def cleanup_stale_sessions(self, max_age_seconds: int = 3600) -> list[str]:
        """
        End sessions untouched for longer than max_age_seconds.

        Called periodically to free memory. Returns the IDs removed.
        """
        now = time.time()
        stale = [
            sid for sid, managed in self._sessions.items()
            if now - managed.last_active > max_age_seconds
        ]
        for session_id in stale:
            self.end_session(session_id, reason="stale")
        return stale

    def _register(self, game: GameSession) -> ManagedSession:
        now = time.time()
        managed = ManagedSession(
            session_id=str(uuid.uuid4()),
            game=game,
            created_at=now,
            last_active=now,
        )
        self._sessions[managed.session_id] = managed
        logger.info("Session %s created", managed.session_id)
        return managed

    def _tally(self, managed: ManagedSession):
        game = managed.game
        if game.state is SessionState.OVER and managed.tallied_generation != game.generation:
            managed.scoreboard.record(game.outcome)
            managed.tallied_generation = game.generation
