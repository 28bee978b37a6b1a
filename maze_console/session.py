"""
Game Session for Maze Console.

A session owns one maze grid and the player's position on it. The player
enters through the opening in the top row and wins by reaching the opening
in the bottom row. Moves are single orthogonal steps; a move into a wall or
off the grid is simply ignored.
"""

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

from maze_console.config import DEFAULT_MAZE_HEIGHT, DEFAULT_MAZE_WIDTH
from maze_console.generator import Grid, MazeGenerator, Position, check_dimension

logger = logging.getLogger(__name__)


class Direction(Enum):
    UP = (0, -1)
    DOWN = (0, 1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)

    @property
    def delta(self) -> Position:
        return self.value

    @classmethod
    def parse(cls, value) -> "Direction":
        """Accept a Direction or its name in any case ("up", "Left", ...)."""
        if isinstance(value, cls):
            return value
        try:
            return cls[str(value).strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown direction: {value!r}") from None

    @classmethod
    def from_key(cls, key: str) -> Optional["Direction"]:
        """Map a keyboard key (arrows or WASD) to a direction, None if unbound."""
        return KEY_BINDINGS.get(key)


KEY_BINDINGS = {
    "ArrowUp": Direction.UP,
    "w": Direction.UP,
    "W": Direction.UP,
    "ArrowDown": Direction.DOWN,
    "s": Direction.DOWN,
    "S": Direction.DOWN,
    "ArrowLeft": Direction.LEFT,
    "a": Direction.LEFT,
    "A": Direction.LEFT,
    "ArrowRight": Direction.RIGHT,
    "d": Direction.RIGHT,
    "D": Direction.RIGHT,
}


class GameState(Enum):
    PLAYING = "playing"
    WON = "won"


@dataclass
class MoveResult:
    moved: bool
    won: bool
    position: Position


WinCallback = Callable[["GameSession"], None]


class GameSession:
    def __init__(
        self,
        grid: Optional[Grid] = None,
        width: int = DEFAULT_MAZE_WIDTH,
        height: int = DEFAULT_MAZE_HEIGHT,
        rng: Optional[random.Random] = None,
    ):
        # Validated even with a supplied grid, new_maze() relies on them
        self.width = check_dimension("width", width)
        self.height = check_dimension("height", height)
        self._rng = rng
        self._win_callbacks: List[WinCallback] = []
        self.warnings: List[str] = []

        if grid is None:
            grid = self._generate()
        self._install(grid)

    # --- Setup ---

    def _generate(self) -> Grid:
        return MazeGenerator(self.width, self.height, rng=self._rng).generate()

    def _install(self, grid: Grid):
        """Take ownership of a grid and put the player at the entrance."""
        if not grid or not grid[0]:
            raise ValueError("Maze grid must have at least one row and one column")
        row_width = len(grid[0])
        if any(len(row) != row_width for row in grid):
            raise ValueError("Maze grid rows must all be the same length")

        self._grid = grid
        self.warnings = []
        self._start = self._find_start()
        self._exit = self._find_exit()
        self._position = self._start
        self._state = GameState.PLAYING
        self._move_count = 0

    def _find_start(self) -> Position:
        """First open square in column 1, scanning down from the top."""
        x = min(1, self.grid_width - 1)
        for y in range(self.grid_height):
            if not self._grid[y][x]:
                return (x, y)
        self._warn(f"No open square in column {x} for the entrance, using row 0")
        return (x, 0)

    def _find_exit(self) -> Position:
        """First open square in column width-2, scanning up from the bottom."""
        x = max(self.grid_width - 2, 0)
        for y in range(self.grid_height - 1, -1, -1):
            if not self._grid[y][x]:
                return (x, y)
        self._warn(f"No open square in column {x} for the exit, using the last row")
        return (x, self.grid_height - 1)

    def _warn(self, message: str):
        logger.warning(message)
        self.warnings.append(message)

    # --- State ---

    @property
    def grid(self) -> Grid:
        return self._grid

    @property
    def grid_width(self) -> int:
        return len(self._grid[0])

    @property
    def grid_height(self) -> int:
        return len(self._grid)

    @property
    def player_position(self) -> Position:
        return self._position

    @property
    def start_position(self) -> Position:
        return self._start

    @property
    def exit_position(self) -> Position:
        return self._exit

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def has_won(self) -> bool:
        return self._state is GameState.WON

    @property
    def move_count(self) -> int:
        return self._move_count

    def is_open(self, x: int, y: int) -> bool:
        """True when (x, y) is inside the grid and not a wall."""
        return 0 <= x < self.grid_width and 0 <= y < self.grid_height and not self._grid[y][x]

    # --- Actions ---

    def on_win(self, callback: WinCallback):
        """Register a function to call each time a move lands on the exit."""
        self._win_callbacks.append(callback)

    def move(self, dx: int, dy: int) -> MoveResult:
        if (abs(dx), abs(dy)) not in ((0, 1), (1, 0)):
            raise ValueError(f"Moves must be a single orthogonal step, got ({dx}, {dy})")

        x, y = self._position
        new_x, new_y = x + dx, y + dy

        # Check bounds and wall collision
        if not self.is_open(new_x, new_y):
            return MoveResult(moved=False, won=False, position=self._position)

        self._position = (new_x, new_y)
        self._move_count += 1

        won = self._position == self._exit
        if won:
            self._state = GameState.WON
            self._notify_win()
        return MoveResult(moved=True, won=won, position=self._position)

    def move_direction(self, direction) -> MoveResult:
        dx, dy = Direction.parse(direction).delta
        return self.move(dx, dy)

    def new_maze(self):
        """Throw away the current maze and start over on a fresh one."""
        self._install(self._generate())
        logger.debug(f"New {self.width}x{self.height} maze installed")

    def _notify_win(self):
        for callback in list(self._win_callbacks):
            try:
                callback(self)
            except Exception as e:
                logger.error(f"Win callback error: {e}", exc_info=True)
