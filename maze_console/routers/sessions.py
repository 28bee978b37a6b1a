"""
Sessions API Router
Provides endpoints for playing mazes: open a session, move, start over.
"""

import random
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response
from pydantic import BaseModel, Field

import maze_console.config as config_module
from maze_console.config import MAX_MAZE_DIMENSION
from maze_console.render import draw_maze_image, image_to_png_bytes, render_session_text
from maze_console.session import Direction, GameSession
from maze_console.session_store import SessionNotFoundError, SessionStore

router = APIRouter(prefix="/api/sessions", tags=["sessions"])

MAX_GRID_SIDE = 2 * MAX_MAZE_DIMENSION + 1

# Shared registry for the running app
store = SessionStore(config_module.settings.maze)


def get_store() -> SessionStore:
    return store


class CreateSessionRequest(BaseModel):
    width: Optional[int] = Field(default=None, ge=1, le=MAX_MAZE_DIMENSION)
    height: Optional[int] = Field(default=None, ge=1, le=MAX_MAZE_DIMENSION)
    grid: Optional[List[List[bool]]] = None
    seed: Optional[int] = None


class MoveRequest(BaseModel):
    direction: Optional[str] = None  # "up", "down", "left", "right"
    key: Optional[str] = None  # Keyboard key, e.g. "ArrowUp" or "w"


def session_payload(handle: str, session: GameSession) -> Dict[str, Any]:
    return {
        "session_id": handle,
        "state": session.state.value,
        "player": list(session.player_position),
        "start": list(session.start_position),
        "exit": list(session.exit_position),
        "moves": session.move_count,
        "grid_width": session.grid_width,
        "grid_height": session.grid_height,
        "warnings": list(session.warnings),
        "grid": session.grid,
        "view": render_session_text(session),
    }


def _get_session(store: SessionStore, session_id: str) -> GameSession:
    try:
        return store.get(session_id)
    except SessionNotFoundError:
        raise HTTPException(status_code=404, detail="Session not found")


@router.post("")
def create_session(
    request: CreateSessionRequest, store: SessionStore = Depends(get_store)
):
    """Open a new game on a supplied grid or a freshly generated maze."""
    if request.grid is not None and (
        len(request.grid) > MAX_GRID_SIDE
        or any(len(row) > MAX_GRID_SIDE for row in request.grid)
    ):
        raise HTTPException(
            status_code=400,
            detail=f"Maze grid may be at most {MAX_GRID_SIDE} squares on each side",
        )

    rng = random.Random(request.seed) if request.seed is not None else None
    try:
        handle = store.create_session(
            grid=request.grid, width=request.width, height=request.height, rng=rng
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return session_payload(handle, store.get(handle))


@router.get("")
def list_sessions(store: SessionStore = Depends(get_store)):
    return {"sessions": store.list_sessions()}


@router.get("/{session_id}")
def get_session(session_id: str, store: SessionStore = Depends(get_store)):
    return session_payload(session_id, _get_session(store, session_id))


@router.post("/{session_id}/move")
def move_player(
    session_id: str, request: MoveRequest, store: SessionStore = Depends(get_store)
):
    """Move one step. Blocked moves are not errors, they just report moved=false."""
    session = _get_session(store, session_id)

    if request.key is not None:
        direction = Direction.from_key(request.key)
        if direction is None:
            raise HTTPException(status_code=400, detail=f"Unbound key: {request.key}")
    elif request.direction is not None:
        try:
            direction = Direction.parse(request.direction)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
    else:
        raise HTTPException(status_code=400, detail="Provide a direction or a key")

    result = store.move_player(session_id, direction)
    payload = session_payload(session_id, session)
    payload.update({"moved": result.moved, "won": result.won})
    return payload


@router.post("/{session_id}/new-maze")
def new_maze(session_id: str, store: SessionStore = Depends(get_store)):
    _get_session(store, session_id)
    store.reset_session(session_id)
    return session_payload(session_id, store.get(session_id))


@router.get("/{session_id}/image.png")
def session_image(session_id: str, store: SessionStore = Depends(get_store)):
    session = _get_session(store, session_id)
    image = draw_maze_image(
        session.grid,
        cell_size=config_module.settings.cell_size,
        player=session.player_position,
        exit_cell=session.exit_position,
    )
    return Response(content=image_to_png_bytes(image), media_type="image/png")


@router.delete("/{session_id}")
def close_session(session_id: str, store: SessionStore = Depends(get_store)):
    try:
        store.close_session(session_id)
    except SessionNotFoundError:
        raise HTTPException(status_code=404, detail="Session not found")
    return {"message": "Session closed"}
