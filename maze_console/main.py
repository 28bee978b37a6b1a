from fastapi import FastAPI, HTTPException, BackgroundTasks, Depends, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from contextlib import asynccontextmanager
import asyncio
import logging
import random
from typing import Any, Dict, Optional
import maze_console.config as config_module
from maze_console.config import (
    MAX_MAZE_DIMENSION,
    settings,
    Settings,
    save_config,
    load_config,
)
from maze_console.commands import execute_command, list_commands
from maze_console.generator import MazeGenerator
from maze_console.render import draw_maze_image, image_to_png_bytes
from maze_console.routers import sessions
from maze_console.routers.sessions import get_store
from maze_console.session_store import SessionStore

logger = logging.getLogger(__name__)

# --- BACKGROUND TASKS ---

config_lock = asyncio.Lock()


async def save_settings_background(settings_snapshot: Settings):
    """Save settings to disk in background with a lock to prevent race conditions."""
    async with config_lock:
        await asyncio.to_thread(save_config, settings_snapshot)


def apply_settings(new_settings: Settings):
    """Swap in new settings everywhere that holds a reference to them."""
    global settings

    settings = new_settings
    # Update module-level reference so code that reads maze_console.config.settings sees it
    config_module.settings = settings
    # New sessions pick up the new dimensions; open ones keep theirs
    get_store().config = settings.maze


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    logger.info(
        f"Maze Console starting with {settings.maze.width}x{settings.maze.height} mazes"
    )
    yield
    logger.info(f"Maze Console stopping, {len(get_store())} session(s) discarded")


app = FastAPI(
    title="Maze Console",
    description="Generate random solvable mazes and play them one step at a time.",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include sessions router
app.include_router(sessions.router)


# --- CORE API ---


@app.get("/api/health")
async def health_check():
    return {
        "status": "healthy",
        "sessions": len(get_store()),
        "maze": settings.maze.model_dump(),
    }


# --- SETTINGS API ---


@app.get("/api/settings", response_model=Settings)
async def get_settings():
    return settings


@app.post("/api/settings")
async def update_settings(new_settings: Settings, background_tasks: BackgroundTasks):
    """Updates the configuration and saves it to disk."""
    apply_settings(new_settings)
    background_tasks.add_task(save_settings_background, settings.model_copy(deep=True))
    return {"message": "Settings saved", "config": settings}


@app.post("/api/settings/reset")
async def reset_settings(background_tasks: BackgroundTasks):
    """Resets all settings to their default values."""
    apply_settings(Settings())
    background_tasks.add_task(save_settings_background, settings.model_copy(deep=True))
    return {"message": "Settings reset to defaults", "config": settings}


@app.post("/api/settings/reload")
async def reload_settings():
    """Reloads settings from config.json on disk."""
    apply_settings(load_config())
    return {"message": "Settings reloaded from disk", "config": settings}


# --- MAZE API ---


def _build_maze(width: Optional[int], height: Optional[int], seed: Optional[int]) -> MazeGenerator:
    generator = MazeGenerator(
        width if width is not None else settings.maze.width,
        height if height is not None else settings.maze.height,
        rng=random.Random(seed) if seed is not None else None,
    )
    generator.generate()
    return generator


@app.get("/api/maze")
def get_maze(
    width: Optional[int] = Query(default=None, ge=1, le=MAX_MAZE_DIMENSION),
    height: Optional[int] = Query(default=None, ge=1, le=MAX_MAZE_DIMENSION),
    seed: Optional[int] = None,
):
    """Generate a one-off maze without opening a session."""
    generator = _build_maze(width, height, seed)
    dims = generator.get_dimensions()
    return {
        "grid": generator.get_grid(),
        "text": generator.to_string(),
        "dimensions": {
            "width": dims.width,
            "height": dims.height,
            "gridWidth": dims.grid_width,
            "gridHeight": dims.grid_height,
        },
    }


@app.get("/api/maze.png")
def get_maze_image(
    width: Optional[int] = Query(default=None, ge=1, le=MAX_MAZE_DIMENSION),
    height: Optional[int] = Query(default=None, ge=1, le=MAX_MAZE_DIMENSION),
    seed: Optional[int] = None,
):
    generator = _build_maze(width, height, seed)
    image = draw_maze_image(generator.get_grid(), cell_size=settings.cell_size)
    return Response(content=image_to_png_bytes(image), media_type="image/png")


# --- COMMANDS API ---


@app.get("/api/commands")
async def get_commands():
    return {"commands": list_commands()}


@app.post("/api/commands/{command_id}")
def run_command(
    command_id: str,
    args: Optional[Dict[str, Any]] = None,
    store: SessionStore = Depends(get_store),
):
    try:
        return execute_command(command_id, store, args or {})
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


def run():
    """Console entry point: serve the API with uvicorn."""
    import uvicorn

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run("maze_console.main:app", host="0.0.0.0", port=8000)


if __name__ == "__main__":
    run()
