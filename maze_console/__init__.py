"""Maze Console: random solvable mazes and a step-by-step game to play them."""

from maze_console.generator import (
    Grid,
    InvalidDimensionError,
    MazeDimensions,
    MazeGenerator,
    generate_maze,
    render_grid_as_text,
)
from maze_console.session import Direction, GameSession, GameState, MoveResult
from maze_console.session_store import SessionNotFoundError, SessionStore

__all__ = [
    "Direction",
    "GameSession",
    "GameState",
    "Grid",
    "InvalidDimensionError",
    "MazeDimensions",
    "MazeGenerator",
    "MoveResult",
    "SessionNotFoundError",
    "SessionStore",
    "generate_maze",
    "render_grid_as_text",
]
