import sys

import click

from ascii_maze.config import Settings, load_settings, random_seed
from ascii_maze.errors import (
    CorruptReplayCode,
    InternalConsistencyError,
    InvalidConfiguration,
)
from ascii_maze.generate_maze_script import resolve_params
from ascii_maze.generator import MAX_SIZE, MIN_SIZE, Difficulty, GenerationParams
from ascii_maze.grid import Direction
from ascii_maze.player import MoveResult
from ascii_maze.render import STYLES, render
from ascii_maze.session import GameSession

# Keys understood by the game loop. Arrow keys arrive as escape sequences
# (ANSI on POSIX, 0xe0/0x00 prefixed scan codes on Windows).
MOVE_KEYS = {
    "k": Direction.UP,
    "w": Direction.UP,
    "\x1b[A": Direction.UP,
    "\xe0H": Direction.UP,
    "\x00H": Direction.UP,
    "j": Direction.DOWN,
    "s": Direction.DOWN,
    "\x1b[B": Direction.DOWN,
    "\xe0P": Direction.DOWN,
    "\x00P": Direction.DOWN,
    "h": Direction.LEFT,
    "a": Direction.LEFT,
    "\x1b[D": Direction.LEFT,
    "\xe0K": Direction.LEFT,
    "\x00K": Direction.LEFT,
    "l": Direction.RIGHT,
    "d": Direction.RIGHT,
    "\x1b[C": Direction.RIGHT,
    "\xe0M": Direction.RIGHT,
    "\x00M": Direction.RIGHT,
}
QUIT_KEYS = {"q", "Q", ""}

HELP_LINE = "arrows/hjkl/wasd: move, r: restart, n: new, p: path, ?: hint, q: quit"


def draw(session: GameSession, style: str, show_path: bool, message: str = "") -> None:
    """Clear the screen and draw the maze, the status line and a message."""
    state = session.state
    path = None
    if show_path or state.won:
        path = [cell for cell, _ in state.trail]

    click.clear()
    for row in render(session.grid, style, path=path, player=state.position):
        click.echo(row)

    click.echo(
        f"Moves: {click.style(str(state.move_count), fg='cyan')}  "
        f"Code: {click.style(session.replay_code, fg='cyan')}"
    )
    click.echo(click.style(HELP_LINE, fg="bright_black"))
    if message:
        click.echo(message)


def play(session: GameSession, style: str, show_path: bool) -> GameSession:
    """
    Run the game loop until the player quits.

    One keystroke is read with ``click.getchar`` and handled to completion
    before the maze is drawn again. End of input counts as quitting.

    Returns the session that was active when the player quit.
    """
    message = ""
    while True:
        draw(session, style, show_path, message)
        message = ""

        key = click.getchar()
        if key in QUIT_KEYS:
            return session

        if key in MOVE_KEYS:
            result = session.move(MOVE_KEYS[key])
            if result is MoveResult.BLOCKED:
                message = click.style("Bump!", fg="yellow")
            elif result is MoveResult.WON:
                message = click.style(
                    f"You escaped in {session.state.move_count} moves "
                    f"(shortest: {session.solution.length})! "
                    "Press n for a new maze or q to quit.",
                    fg="green",
                    bold=True,
                )
            elif result is MoveResult.FINISHED:
                message = "Maze solved. Press r to replay, n for a new maze or q to quit."
        elif key == "r":
            session.restart()
        elif key == "p":
            show_path = not show_path
        elif key == "n":
            session = session.next_game(random_seed())
        elif key == "?":
            direction = session.hint()
            if direction is not None:
                message = f"Hint: go {click.style(direction.value, fg='cyan')}"


def _fresh_params(settings: Settings) -> GenerationParams:
    """Ask for new maze parameters after a configuration problem."""
    size = click.IntRange(MIN_SIZE, MAX_SIZE)
    width = click.prompt(
        "Maze width", default=min(max(settings.width, MIN_SIZE), MAX_SIZE), type=size
    )
    height = click.prompt(
        "Maze height", default=min(max(settings.height, MIN_SIZE), MAX_SIZE), type=size
    )
    difficulty = click.prompt(
        "Difficulty",
        default=settings.difficulty.value,
        type=click.Choice([d.value for d in Difficulty], case_sensitive=False),
    )
    return GenerationParams(random_seed(), width, height, Difficulty.parse(difficulty))


@click.command(name="play")
@click.option("--width", "-w", type=int, help="Maze width in cells (default: fit terminal)")
@click.option("--height", "-h", type=int, help="Maze height in cells (default: fit terminal)")
@click.option("--seed", type=int, help="Random seed for reproducible maze generation")
@click.option(
    "--difficulty",
    type=click.Choice([d.value for d in Difficulty], case_sensitive=False),
    help="normal: exactly one route; hard: extra loops and false branches",
)
@click.option("--replay", "replay_code", type=str, help="Play the maze from a replay code")
@click.option("--style", type=click.Choice(STYLES), help="Wall drawing style")
@click.option("--show-path", is_flag=True, help="Draw the path walked so far")
def play_command(width, height, seed, difficulty, replay_code, style, show_path) -> None:
    """Play a maze in the terminal.

    Defaults come from MAZE_WIDTH, MAZE_HEIGHT, MAZE_DIFFICULTY, MAZE_STYLE and
    MAZE_SHOW_PATH (a local ``.env`` file is read too). Without a size the
    maze is fitted to the terminal.
    """
    try:
        settings = load_settings()
    except InvalidConfiguration as e:
        click.echo(click.style(f"Error in configuration: {e}", fg="red", bold=True))
        sys.exit(1)

    # ------------------------------------------------------------------
    # 1.  Maze parameters
    # ------------------------------------------------------------------
    if replay_code is None:
        width = settings.width if width is None else width
        height = settings.height if height is None else height
        difficulty = difficulty or settings.difficulty.value

    try:
        params = resolve_params(width, height, seed, difficulty, replay_code)
    except (CorruptReplayCode, InvalidConfiguration) as e:
        click.echo(click.style(f"Error: {e}", fg="red", bold=True))
        click.echo("Let's start a fresh maze instead.")
        params = _fresh_params(settings)

    # ------------------------------------------------------------------
    # 2.  Game loop
    # ------------------------------------------------------------------
    try:
        session = GameSession(params)
        session = play(
            session,
            style or settings.style,
            show_path or settings.show_path,
        )
    except InternalConsistencyError as e:
        click.echo(click.style(f"Internal error: {e}", fg="red", bold=True))
        sys.exit(1)

    click.echo(f"\nReplay code: {click.style(session.replay_code, fg='cyan')}")
