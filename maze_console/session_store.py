"""
Session registry for Maze Console.

Each game is an independent GameSession addressed by an opaque handle, so
any number of players (or tests) can have mazes open at the same time.
The registry holds at most ``max_sessions`` games; opening one more evicts
the session that was used least recently.
"""

import logging
import random
import threading
import uuid
from collections import OrderedDict
from typing import List, Optional

from maze_console.config import MazeConfig
from maze_console.generator import Grid, Position
from maze_console.session import Direction, GameSession, MoveResult

logger = logging.getLogger(__name__)

DEFAULT_MAX_SESSIONS = 256


class SessionNotFoundError(KeyError):
    """Raised when a handle does not refer to an open session."""


class SessionStore:
    def __init__(
        self,
        config: Optional[MazeConfig] = None,
        max_sessions: int = DEFAULT_MAX_SESSIONS,
    ):
        if max_sessions < 1:
            raise ValueError("max_sessions must be at least 1")
        self.config = config or MazeConfig()
        self.max_sessions = max_sessions
        # Ordered oldest-used first
        self._sessions: "OrderedDict[str, GameSession]" = OrderedDict()
        # API handlers may run in a threadpool
        self._lock = threading.RLock()

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, handle: str) -> bool:
        return handle in self._sessions

    def create_session(
        self,
        grid: Optional[Grid] = None,
        width: Optional[int] = None,
        height: Optional[int] = None,
        rng: Optional[random.Random] = None,
    ) -> str:
        """Open a new session on the given grid, or on a freshly generated one."""
        session = GameSession(
            grid=grid,
            width=width if width is not None else self.config.width,
            height=height if height is not None else self.config.height,
            rng=rng,
        )
        handle = str(uuid.uuid4())
        session.on_win(lambda s: self._log_win(handle, s))

        with self._lock:
            self._sessions[handle] = session
            while len(self._sessions) > self.max_sessions:
                evicted, _ = self._sessions.popitem(last=False)
                logger.info(f"Session {evicted} evicted (limit {self.max_sessions})")

        logger.info(
            f"Session {handle} created ({session.grid_width}x{session.grid_height} grid)"
        )
        return handle

    def get(self, handle: str) -> GameSession:
        with self._lock:
            session = self._sessions.get(handle)
            if session is None:
                raise SessionNotFoundError(handle)
            self._sessions.move_to_end(handle)
            return session

    def list_sessions(self) -> List[str]:
        with self._lock:
            return list(self._sessions.keys())

    def move_player(self, handle: str, direction) -> MoveResult:
        direction = Direction.parse(direction)
        with self._lock:
            return self.get(handle).move_direction(direction)

    def reset_session(self, handle: str):
        with self._lock:
            self.get(handle).new_maze()
        logger.info(f"Session {handle} reset with a new maze")

    def get_player_position(self, handle: str) -> Position:
        return self.get(handle).player_position

    def get_exit_position(self, handle: str) -> Position:
        return self.get(handle).exit_position

    def close_session(self, handle: str):
        with self._lock:
            if self._sessions.pop(handle, None) is None:
                raise SessionNotFoundError(handle)
        logger.info(f"Session {handle} closed")

    def _log_win(self, handle: str, session: GameSession):
        logger.info(
            f"Session {handle}: maze solved in {session.move_count} moves! Congratulations!"
        )
