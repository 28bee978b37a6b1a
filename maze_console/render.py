"""Text and image renderers for mazes and game sessions."""

import io
from typing import Optional

from PIL import Image, ImageDraw

from maze_console.config import PATH_CHAR, WALL_CHAR
from maze_console.generator import Grid, MazeGenerator, Position
from maze_console.session import GameSession

PLAYER_CHAR = "o"
EXIT_CHAR = "E"


def render_session_text(session: GameSession) -> str:
    """Draws the maze with the player and the exit marked."""
    player_x, player_y = session.player_position
    exit_x, exit_y = session.exit_position

    lines = []
    for y, row in enumerate(session.grid):
        line = ""
        for x, cell in enumerate(row):
            if x == player_x and y == player_y:
                line += PLAYER_CHAR
            elif x == exit_x and y == exit_y:
                line += EXIT_CHAR
            elif cell:
                line += WALL_CHAR
            else:
                line += PATH_CHAR
        lines.append(line)
    return "\n".join(lines)


def format_generation_report(generator: MazeGenerator) -> str:
    """The summary shown after generating a maze: labels, the grid, its size."""
    dims = generator.get_dimensions()
    return "\n".join(
        [
            "Generated Maze:",
            "",
            "start",
            generator.to_string(),
            "end",
            "",
            f"Dimensions: {dims.width}x{dims.height} cells "
            f"({dims.grid_width}x{dims.grid_height} grid)",
        ]
    )


def draw_maze_image(
    grid: Grid,
    cell_size: int = 8,
    player: Optional[Position] = None,
    exit_cell: Optional[Position] = None,
) -> Image.Image:
    """Renders the grid as a 1-bit image, walls black, with optional markers."""
    width = len(grid[0]) * cell_size
    height = len(grid) * cell_size

    # Create white image (1-bit monochrome)
    image = Image.new("1", (width, height), 1)
    draw = ImageDraw.Draw(image)

    for y, row in enumerate(grid):
        for x, cell in enumerate(row):
            if cell:
                draw.rectangle(
                    [x * cell_size, y * cell_size, (x + 1) * cell_size - 1, (y + 1) * cell_size - 1],
                    fill=0,
                )

    # Player is a filled dot, exit an outlined box
    inset = cell_size // 4
    if player is not None:
        px, py = player
        draw.ellipse(
            [
                px * cell_size + inset,
                py * cell_size + inset,
                (px + 1) * cell_size - 1 - inset,
                (py + 1) * cell_size - 1 - inset,
            ],
            fill=0,
        )
    if exit_cell is not None:
        ex, ey = exit_cell
        draw.rectangle(
            [
                ex * cell_size + inset,
                ey * cell_size + inset,
                (ex + 1) * cell_size - 1 - inset,
                (ey + 1) * cell_size - 1 - inset,
            ],
            outline=0,
        )

    return image


def image_to_png_bytes(image: Image.Image) -> bytes:
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()
