import os
import random
import shutil
from dataclasses import dataclass

from dotenv import load_dotenv

from ascii_maze.errors import InvalidConfiguration
from ascii_maze.generator import MAX_SIZE, Difficulty
from ascii_maze.render import STYLES

# Smallest maze picked automatically from the terminal size.
MIN_AUTO_SIZE = 5

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass
class Settings:
    """Game defaults, read from the environment (and a local ``.env`` file)."""

    width: int
    height: int
    difficulty: Difficulty = Difficulty.NORMAL
    style: str = "ascii"
    show_path: bool = False


def terminal_dimensions() -> tuple[int, int]:
    """Maze size that fits the current terminal, as (width, height)."""
    columns, lines = shutil.get_terminal_size(fallback=(80, 24))
    width = min(max(columns // 4, MIN_AUTO_SIZE), MAX_SIZE)
    height = min(max(lines // 2 - 1, MIN_AUTO_SIZE), MAX_SIZE)
    return width, height


def _int_from_env(name: str) -> int | None:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        return int(raw)
    except ValueError:
        raise InvalidConfiguration(f"{name} must be an integer, got {raw!r}") from None


def _str_from_env(name: str, default: str) -> str:
    raw = (os.getenv(name) or "").strip()
    return raw or default


def load_settings() -> Settings:
    """
    Resolve game defaults.

    Reads MAZE_WIDTH, MAZE_HEIGHT, MAZE_DIFFICULTY, MAZE_STYLE and
    MAZE_SHOW_PATH. Missing dimensions are derived from the terminal size.
    """
    load_dotenv()  # does nothing if no file is present

    auto_width, auto_height = terminal_dimensions()
    width = _int_from_env("MAZE_WIDTH")
    height = _int_from_env("MAZE_HEIGHT")

    style = _str_from_env("MAZE_STYLE", "ascii").lower()
    if style not in STYLES:
        raise InvalidConfiguration(
            f"MAZE_STYLE must be one of {', '.join(STYLES)}, got {style!r}"
        )

    return Settings(
        width=auto_width if width is None else width,
        height=auto_height if height is None else height,
        difficulty=Difficulty.parse(_str_from_env("MAZE_DIFFICULTY", "normal")),
        style=style,
        show_path=os.getenv("MAZE_SHOW_PATH", "").strip().lower() in _TRUTHY,
    )


def random_seed() -> int:
    """Fresh seed for a maze nobody asked to reproduce."""
    return random.getrandbits(64)
