"""Maze generator behaviour: shape, openings, connectivity, rendering."""

import random

import pytest

from conftest import reachable_from
from maze_console.generator import (
    InvalidDimensionError,
    MazeGenerator,
    generate_maze,
    render_grid_as_text,
)


@pytest.mark.parametrize("width,height", [(1, 1), (1, 5), (6, 1), (9, 11), (20, 7)])
def test_grid_dimensions_are_two_n_plus_one(width, height):
    grid = generate_maze(width, height, rng=random.Random(width * 100 + height))
    assert len(grid) == 2 * height + 1
    assert all(len(row) == 2 * width + 1 for row in grid)


def test_new_generator_is_all_wall():
    gen = MazeGenerator(3, 2)
    assert all(all(cell for cell in row) for row in gen.get_grid())


@pytest.mark.parametrize("width,height", [(0, 5), (5, 0), (-1, 3), (2, -4)])
def test_invalid_dimensions_fail_at_construction(width, height):
    with pytest.raises(InvalidDimensionError):
        MazeGenerator(width, height)


def test_non_integer_dimensions_are_rejected():
    with pytest.raises(InvalidDimensionError):
        MazeGenerator(2.5, 3)
    with pytest.raises(InvalidDimensionError):
        MazeGenerator(True, 3)


def test_invalid_dimension_is_a_value_error():
    assert issubclass(InvalidDimensionError, ValueError)


@pytest.mark.parametrize("seed", range(10))
def test_every_cell_is_open_and_reachable(seed):
    width, height = 7, 5
    grid = generate_maze(width, height, rng=random.Random(seed))

    cells = {(x, y) for x in range(1, 2 * width, 2) for y in range(1, 2 * height, 2)}
    assert not grid[1][1]
    assert all(not grid[y][x] for x, y in cells)
    assert cells <= reachable_from(grid, (1, 1))


@pytest.mark.parametrize("seed", range(10))
def test_interior_forms_a_spanning_tree(seed):
    width, height = 6, 8
    grid = generate_maze(width, height, rng=random.Random(seed))

    # A tree over W*H rooms has exactly W*H - 1 knocked-through walls
    interior_open = sum(
        1
        for y in range(1, 2 * height)
        for x in range(1, 2 * width)
        if not grid[y][x]
    )
    assert interior_open == width * height + (width * height - 1)


@pytest.mark.parametrize("seed", range(10))
def test_boundary_has_exactly_entrance_and_exit(seed):
    grid = generate_maze(5, 4, rng=random.Random(seed))
    rows, cols = len(grid), len(grid[0])

    boundary_openings = {
        (x, y)
        for y in range(rows)
        for x in range(cols)
        if (x in (0, cols - 1) or y in (0, rows - 1)) and not grid[y][x]
    }
    assert boundary_openings == {(1, 0), (cols - 2, rows - 1)}


def test_exit_is_reachable_from_entrance():
    grid = generate_maze(9, 11, rng=random.Random(7))
    assert (17, 22) in reachable_from(grid, (1, 0))


def test_single_cell_maze():
    grid = generate_maze(1, 1)
    assert grid == [
        [True, False, True],
        [True, False, True],
        [True, False, True],
    ]


def test_same_seed_same_maze():
    first = MazeGenerator(8, 8, seed=42).generate()
    second = MazeGenerator(8, 8, rng=random.Random(42)).generate()
    assert first == second


def test_generate_returns_the_held_grid():
    gen = MazeGenerator(3, 3, seed=1)
    assert gen.generate() is gen.get_grid()


def test_generating_again_carves_a_fresh_maze():
    gen = MazeGenerator(6, 6, rng=random.Random(3))
    first = gen.generate()
    first_snapshot = [row[:] for row in first]
    second = gen.generate()

    interior_open = sum(
        1 for y in range(1, 12) for x in range(1, 12) if not second[y][x]
    )
    assert interior_open == 36 + 35
    assert second is not first
    assert first == first_snapshot


def test_rng_and_seed_are_mutually_exclusive():
    with pytest.raises(ValueError):
        MazeGenerator(3, 3, rng=random.Random(1), seed=1)


def test_dimensions_report_cells_and_grid():
    dims = MazeGenerator(9, 11).get_dimensions()
    assert (dims.width, dims.height) == (9, 11)
    assert (dims.grid_width, dims.grid_height) == (19, 23)


def test_default_dimensions():
    gen = MazeGenerator()
    assert (gen.width, gen.height) == (9, 11)


def test_to_string_uses_stars_and_spaces():
    gen = MazeGenerator(1, 1)
    gen.generate()
    assert gen.to_string() == "* *\n* *\n* *"
    assert str(gen) == gen.to_string()


def test_rendering_is_idempotent():
    grid = generate_maze(6, 4, rng=random.Random(3))
    snapshot = [row[:] for row in grid]
    assert render_grid_as_text(grid) == render_grid_as_text(grid)
    assert grid == snapshot


def test_render_custom_characters():
    assert render_grid_as_text([[True, False], [False, True]], wall="#", path=".") == "#.\n.#"


def test_large_maze_does_not_hit_recursion_limit():
    grid = generate_maze(120, 120, rng=random.Random(0))
    assert len(grid) == 241
