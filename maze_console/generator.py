"""
Maze generation for Maze Console.

Mazes are stored as a grid of booleans (True = wall, False = path). A maze
of W x H cells is laid out on a (2W+1) x (2H+1) grid: positions with both
coordinates odd are rooms, everything else is a wall that may be knocked
through while carving.
"""

import logging
import random
from dataclasses import dataclass
from typing import List, Optional, Set, Tuple

from maze_console.config import (
    DEFAULT_MAZE_HEIGHT,
    DEFAULT_MAZE_WIDTH,
    PATH_CHAR,
    WALL_CHAR,
)

logger = logging.getLogger(__name__)

Grid = List[List[bool]]
Position = Tuple[int, int]

# Up, Right, Down, Left (two squares away = the neighbouring room)
CARVE_DIRECTIONS: List[Position] = [(0, -2), (2, 0), (0, 2), (-2, 0)]


class InvalidDimensionError(ValueError):
    """Raised when a maze is requested with fewer than one cell on an axis."""


@dataclass
class MazeDimensions:
    width: int
    height: int
    grid_width: int
    grid_height: int


def check_dimension(name: str, value) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidDimensionError(f"{name} must be an integer, got {value!r}")
    if value < 1:
        raise InvalidDimensionError(f"{name} must be at least 1, got {value}")
    return value


class MazeGenerator:
    def __init__(
        self,
        width: int = DEFAULT_MAZE_WIDTH,
        height: int = DEFAULT_MAZE_HEIGHT,
        rng: Optional[random.Random] = None,
        seed: Optional[int] = None,
    ):
        self.width = check_dimension("width", width)
        self.height = check_dimension("height", height)
        if rng is not None and seed is not None:
            raise ValueError("Pass either rng or seed, not both")
        self._rng = rng if rng is not None else random.Random(seed)
        self.grid: Grid = self._walled_grid()

    def _walled_grid(self) -> Grid:
        return [[True for _ in range(self.grid_width)] for _ in range(self.grid_height)]

    @property
    def grid_width(self) -> int:
        return self.width * 2 + 1

    @property
    def grid_height(self) -> int:
        return self.height * 2 + 1

    @property
    def rng(self) -> random.Random:
        return self._rng

    def generate(self) -> Grid:
        """Generates a maze using recursive backtracking.

        Each call carves a fresh grid; earlier grids are left untouched.
        """
        # Start fully walled in, then open (1, 1)
        self.grid = self._walled_grid()
        start_x, start_y = 1, 1
        self.grid[start_y][start_x] = False

        stack: List[Position] = [(start_x, start_y)]
        visited: Set[Position] = {(start_x, start_y)}

        while stack:
            x, y = stack[-1]
            neighbors = self._get_unvisited_neighbors(x, y, visited)

            if neighbors:
                nx, ny, dx, dy = self._rng.choice(neighbors)
                # Remove wall between current and neighbor
                self.grid[y + dy // 2][x + dx // 2] = False
                self.grid[ny][nx] = False
                visited.add((nx, ny))
                stack.append((nx, ny))
            else:
                stack.pop()

        # Entrance (top) and exit (bottom)
        self.grid[0][1] = False
        self.grid[self.grid_height - 1][self.grid_width - 2] = False

        logger.debug(
            f"Generated {self.width}x{self.height} maze, visited {len(visited)} cells"
        )
        return self.grid

    def _get_unvisited_neighbors(
        self, x: int, y: int, visited: Set[Position]
    ) -> List[Tuple[int, int, int, int]]:
        neighbors = []
        for dx, dy in CARVE_DIRECTIONS:
            nx, ny = x + dx, y + dy
            if 0 < nx < self.grid_width and 0 < ny < self.grid_height:
                if (nx, ny) not in visited:
                    neighbors.append((nx, ny, dx, dy))
        return neighbors

    def to_string(self) -> str:
        return render_grid_as_text(self.grid)

    def __str__(self) -> str:
        return self.to_string()

    def get_grid(self) -> Grid:
        return self.grid

    def get_dimensions(self) -> MazeDimensions:
        return MazeDimensions(
            width=self.width,
            height=self.height,
            grid_width=self.grid_width,
            grid_height=self.grid_height,
        )


def generate_maze(
    width: int = DEFAULT_MAZE_WIDTH,
    height: int = DEFAULT_MAZE_HEIGHT,
    rng: Optional[random.Random] = None,
) -> Grid:
    """Build and carve a maze in one call."""
    return MazeGenerator(width, height, rng=rng).generate()


def render_grid_as_text(grid: Grid, wall: str = WALL_CHAR, path: str = PATH_CHAR) -> str:
    """One line per row: wall character for walls, path character for passages."""
    return "\n".join("".join(wall if cell else path for cell in row) for row in grid)
