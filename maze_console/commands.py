"""
Command Registry for Maze Console.

Commands are the user-facing actions of the app ("generate a maze",
"play a maze"). Each one registers itself with the @register_command
decorator, declaring a JSON Schema for its arguments, so front ends can
list and invoke commands without knowing about them ahead of time.

Example usage:
    from maze_console.commands import register_command

    @register_command(
        command_id="maze.peek",
        title="Peek at a maze",
        args_schema={"type": "object", "properties": {}},
    )
    def peek(store, args):
        return {"sessions": store.list_sessions()}
"""

from dataclasses import dataclass
from typing import Dict, Any, Callable, Optional, List
import logging

from jsonschema import validate, ValidationError

from maze_console.config import MAX_MAZE_DIMENSION
from maze_console.generator import MazeGenerator
from maze_console.render import format_generation_report, render_session_text
from maze_console.session_store import SessionStore

logger = logging.getLogger(__name__)


@dataclass
class CommandDefinition:
    """
    Metadata for a registered command.

    Attributes:
        command_id: Unique identifier (e.g., "maze.generate")
        title: Human-readable name shown in menus
        execute_fn: Called as execute_fn(store, args) and returns a JSON-able dict
        args_schema: JSON Schema the arguments must satisfy (optional)
    """
    command_id: str
    title: str
    execute_fn: Callable
    args_schema: Optional[Dict[str, Any]] = None


# Global registry of all commands
_registry: Dict[str, CommandDefinition] = {}


def register_command(
    command_id: str,
    title: str,
    args_schema: Optional[Dict[str, Any]] = None,
):
    """Decorator to register a command with the system."""
    def decorator(fn: Callable) -> Callable:
        if command_id in _registry:
            logger.warning(f"Command '{command_id}' is already registered. Overwriting.")

        _registry[command_id] = CommandDefinition(
            command_id=command_id,
            title=title,
            execute_fn=fn,
            args_schema=args_schema,
        )
        logger.debug(f"Registered command: {command_id}")
        return fn

    return decorator


def get_command(command_id: str) -> Optional[CommandDefinition]:
    return _registry.get(command_id)


def list_commands() -> List[Dict[str, Any]]:
    """All commands in a form suitable for API responses."""
    return [
        {"id": defn.command_id, "title": defn.title, "argsSchema": defn.args_schema}
        for defn in _registry.values()
    ]


def validate_command_args(command_id: str, args: Dict[str, Any]) -> None:
    """
    Validate command arguments against the command's schema.

    Raises:
        ValueError: If the command is unknown or validation fails
    """
    defn = _registry.get(command_id)
    if defn is None:
        raise ValueError(f"Unknown command: {command_id}")

    if defn.args_schema:
        try:
            validate(instance=args, schema=defn.args_schema)
        except ValidationError as e:
            path = ".".join(str(p) for p in e.path) if e.path else "root"
            raise ValueError(f"Invalid arguments for {command_id} at '{path}': {e.message}")


def execute_command(
    command_id: str, store: SessionStore, args: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    """Validate and run a command. Errors from the command itself propagate."""
    args = args or {}
    validate_command_args(command_id, args)
    return _registry[command_id].execute_fn(store, args)


# --- Built-in commands ---

DIMENSION_PROPERTIES = {
    "width": {"type": "integer", "minimum": 1, "maximum": MAX_MAZE_DIMENSION,
              "title": "Maze Width (cells)"},
    "height": {"type": "integer", "minimum": 1, "maximum": MAX_MAZE_DIMENSION,
               "title": "Maze Height (cells)"},
}

MAX_GRID_SIDE = 2 * MAX_MAZE_DIMENSION + 1


@register_command(
    command_id="maze.generate",
    title="Generate Maze",
    args_schema={
        "type": "object",
        "properties": dict(DIMENSION_PROPERTIES),
        "additionalProperties": False,
    },
)
def generate_maze_command(store: SessionStore, args: Dict[str, Any]) -> Dict[str, Any]:
    width = args.get("width", store.config.width)
    height = args.get("height", store.config.height)

    generator = MazeGenerator(width, height)
    grid = generator.generate()
    dims = generator.get_dimensions()

    return {
        "report": format_generation_report(generator),
        "grid": grid,
        "dimensions": {
            "width": dims.width,
            "height": dims.height,
            "gridWidth": dims.grid_width,
            "gridHeight": dims.grid_height,
        },
    }


@register_command(
    command_id="maze.play",
    title="Play Maze",
    args_schema={
        "type": "object",
        "properties": {
            **DIMENSION_PROPERTIES,
            "grid": {
                "type": "array",
                "minItems": 1,
                "maxItems": MAX_GRID_SIDE,
                "items": {
                    "type": "array",
                    "minItems": 1,
                    "maxItems": MAX_GRID_SIDE,
                    "items": {"type": "boolean"},
                },
            },
        },
        "additionalProperties": False,
    },
)
def play_maze_command(store: SessionStore, args: Dict[str, Any]) -> Dict[str, Any]:
    handle = store.create_session(
        grid=args.get("grid"),
        width=args.get("width"),
        height=args.get("height"),
    )
    session = store.get(handle)
    return {
        "session_id": handle,
        "player": list(session.player_position),
        "exit": list(session.exit_position),
        "view": render_session_text(session),
    }
