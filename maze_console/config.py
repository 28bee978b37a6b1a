from pydantic import BaseModel, Field, ValidationError
from typing import Optional
import json
import logging
import os
from dotenv import load_dotenv

# Load .env file
load_dotenv()

logger = logging.getLogger(__name__)

# Constants
DEFAULT_MAZE_WIDTH = 9  # Cells, not grid columns
DEFAULT_MAZE_HEIGHT = 11
MAX_MAZE_DIMENSION = 200  # Upper bound for mazes requested over the API
WALL_CHAR = "*"
PATH_CHAR = " "


def _env_int(name: str, default: int) -> int:
    """Read an integer override from the environment, ignoring junk values."""
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Ignoring non-integer {name}={raw!r}, using {default}")
        return default


class MazeConfig(BaseModel):
    """Maze dimensions in cells (the grid is 2n+1 on each axis)."""

    width: int = Field(
        default_factory=lambda: _env_int("MAZE_WIDTH", DEFAULT_MAZE_WIDTH),
        ge=1,
        le=MAX_MAZE_DIMENSION,
    )
    height: int = Field(
        default_factory=lambda: _env_int("MAZE_HEIGHT", DEFAULT_MAZE_HEIGHT),
        ge=1,
        le=MAX_MAZE_DIMENSION,
    )


class Settings(BaseModel):
    maze: MazeConfig = Field(default_factory=MazeConfig)
    cell_size: int = Field(default=8, ge=1, le=32)  # Pixels per grid square in PNG output


def get_config_path() -> str:
    """config.json lives one directory up from the package unless overridden."""
    override = os.getenv("MAZE_CONFIG_PATH")
    if override:
        return override
    base_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    return os.path.join(base_dir, "config.json")


def load_config(path: Optional[str] = None) -> Settings:
    """Load settings from config.json or return defaults."""
    config_path = path or get_config_path()

    if os.path.exists(config_path):
        try:
            with open(config_path, "r") as f:
                data = json.load(f)
            return Settings(**data)
        except (OSError, json.JSONDecodeError, ValidationError, TypeError) as e:
            logger.warning(f"Error loading config from {config_path}: {e}")

    return Settings()


def save_config(new_settings: Settings, path: Optional[str] = None):
    """Saves the settings object to config.json."""
    config_path = path or get_config_path()

    with open(config_path, "w") as f:
        json.dump(new_settings.model_dump(), f, indent=4)


# Global settings instance
settings = load_config()
