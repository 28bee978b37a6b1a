"""Shared fixtures for the Maze Console test suite."""

import random
from collections import deque

import pytest
from fastapi.testclient import TestClient

import maze_console.main as main_module
from maze_console.config import MazeConfig, settings as original_settings
from maze_console.routers.sessions import get_store
from maze_console.session import Direction
from maze_console.session_store import SessionStore


def open_neighbours(grid, x, y):
    for direction in Direction:
        dx, dy = direction.delta
        nx, ny = x + dx, y + dy
        if 0 <= ny < len(grid) and 0 <= nx < len(grid[0]) and not grid[ny][nx]:
            yield direction, (nx, ny)


def reachable_from(grid, start):
    seen = {start}
    queue = deque([start])
    while queue:
        x, y = queue.popleft()
        for _, nxt in open_neighbours(grid, x, y):
            if nxt not in seen:
                seen.add(nxt)
                queue.append(nxt)
    return seen


def shortest_route(grid, start, goal):
    """Directions leading from start to goal through open squares."""
    came_from = {start: None}
    queue = deque([start])
    while queue:
        current = queue.popleft()
        if current == goal:
            break
        for direction, nxt in open_neighbours(grid, *current):
            if nxt not in came_from:
                came_from[nxt] = (current, direction)
                queue.append(nxt)

    route = []
    step = goal
    while came_from[step] is not None:
        step, direction = came_from[step]
        route.append(direction)
    return list(reversed(route))


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def store():
    return SessionStore(MazeConfig(width=4, height=3))


@pytest.fixture
def client(store, tmp_path, monkeypatch):
    monkeypatch.setenv("MAZE_CONFIG_PATH", str(tmp_path / "config.json"))
    main_module.app.dependency_overrides[get_store] = lambda: store
    # apply_settings points the shared store at new settings; keep it on ours
    monkeypatch.setattr(main_module, "get_store", lambda: store)
    with TestClient(main_module.app) as test_client:
        yield test_client
    main_module.app.dependency_overrides.clear()
    main_module.apply_settings(original_settings)
