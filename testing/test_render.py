"""Renderers: session view, generation report, PNG output."""

import random

from maze_console.generator import MazeGenerator, generate_maze
from maze_console.render import (
    draw_maze_image,
    format_generation_report,
    image_to_png_bytes,
    render_session_text,
)
from maze_console.session import GameSession


def test_session_view_marks_player_and_exit():
    session = GameSession(grid=generate_maze(1, 1))
    assert render_session_text(session) == "*o*\n* *\n*E*"

    session.move_direction("down")
    assert render_session_text(session) == "* *\n*o*\n*E*"


def test_session_view_player_on_exit_shows_player():
    session = GameSession(grid=generate_maze(1, 1))
    session.move_direction("down")
    session.move_direction("down")
    assert render_session_text(session) == "* *\n* *\n*o*"


def test_generation_report_layout():
    gen = MazeGenerator(9, 11, rng=random.Random(2))
    gen.generate()
    lines = format_generation_report(gen).split("\n")

    assert lines[:3] == ["Generated Maze:", "", "start"]
    assert lines[3:26] == gen.to_string().split("\n")
    assert lines[26:] == ["end", "", "Dimensions: 9x11 cells (19x23 grid)"]


def test_maze_image_size_and_pixels():
    grid = generate_maze(2, 2, rng=random.Random(0))
    image = draw_maze_image(grid, cell_size=4)
    assert image.size == (20, 20)
    assert image.mode == "1"
    # Corner is wall (black), the first room is open (white)
    assert image.getpixel((0, 0)) == 0
    assert image.getpixel((5, 5)) != 0


def test_maze_image_with_markers_and_tiny_cells():
    grid = generate_maze(3, 3, rng=random.Random(1))
    image = draw_maze_image(grid, cell_size=1, player=(1, 0), exit_cell=(5, 6))
    assert image.size == (7, 7)


def test_png_bytes():
    data = image_to_png_bytes(draw_maze_image(generate_maze(1, 1)))
    assert data.startswith(b"\x89PNG")
