import sys

import click

from ascii_maze import replay
from ascii_maze.config import random_seed
from ascii_maze.errors import CorruptReplayCode, InvalidConfiguration, MazeError
from ascii_maze.generator import Difficulty, GenerationParams
from ascii_maze.render import STYLES, print_maze, render
from ascii_maze.session import GameSession


def resolve_params(
    width: int | None,
    height: int | None,
    seed: int | None,
    difficulty: str | None,
    replay_code: str | None,
) -> GenerationParams:
    """
    Build generation parameters from command line values.

    A replay code excludes every other value. Without one, width and height
    are required and a random seed is drawn when none is given.
    """
    if replay_code is not None:
        given = [
            name
            for name, value in (
                ("width", width),
                ("height", height),
                ("--seed", seed),
                ("--difficulty", difficulty),
            )
            if value is not None
        ]
        if given:
            raise click.UsageError(
                f"--replay cannot be combined with {', '.join(given)}"
            )
        return replay.decode(replay_code)

    if width is None or height is None:
        raise click.UsageError("WIDTH and HEIGHT are required unless --replay is given")

    if seed is None:
        seed = random_seed()
    return GenerationParams(
        seed, width, height, Difficulty.parse(difficulty or "normal")
    ).validate()


def describe(session: GameSession) -> list[str]:
    """Diagnostic lines about a generated maze."""
    grid = session.grid
    extra = grid.passage_count() - (grid.size - 1)
    return [
        f"seed: {session.params.seed}",
        f"difficulty: {session.params.difficulty.value}",
        f"start: {grid.start}  end: {grid.end}",
        f"dead ends: {len(grid.dead_ends())}",
        f"extra walls opened: {extra}",
        f"shortest path: {session.solution.length} moves",
    ]


@click.command(name="generate")
@click.argument("width", type=int, required=False)
@click.argument("height", type=int, required=False)
@click.option("--seed", type=int, help="Random seed for reproducible maze generation")
@click.option(
    "--difficulty",
    type=click.Choice([d.value for d in Difficulty], case_sensitive=False),
    help="normal: exactly one route; hard: extra loops and false branches",
)
@click.option("--replay", "replay_code", type=str, help="Rebuild the maze from a replay code")
@click.option("--style", type=click.Choice(STYLES), default="ascii", show_default=True)
@click.option("--solve", "show_solution", is_flag=True, help="Also print the solved maze")
@click.option("--verbose", is_flag=True, help="Print generation diagnostics")
def generate_maze_command(
    width, height, seed, difficulty, replay_code, style, show_solution, verbose
):
    """Generate a maze and print it with its replay code."""
    try:
        params = resolve_params(width, height, seed, difficulty, replay_code)
    except (CorruptReplayCode, InvalidConfiguration) as e:
        click.echo(click.style(f"Error: {e}", fg="red", bold=True))
        sys.exit(1)

    click.echo(f"\nGenerating a {params.width}x{params.height} maze...\n")

    try:
        session = GameSession(params)
    except MazeError as e:
        click.echo(click.style(f"Error generating maze: {e}", fg="red", bold=True))
        sys.exit(1)

    if verbose:
        for line in describe(session):
            click.echo(click.style(line, fg="bright_black"))
        click.echo()

    print_maze(render(session.grid, style, player=session.grid.start))
    click.echo(f"\nReplay code: {click.style(session.replay_code, fg='cyan')}")

    if show_solution:
        click.echo("\nSolving maze...\n")
        print_maze(
            render(
                session.grid,
                style,
                path=session.solution.path,
                player=session.grid.start,
            )
        )
        directions = ",".join(d.value for d in session.solution.directions)
        click.echo(f"\nShortest path ({session.solution.length} moves): {directions}")


@click.command(name="decode")
@click.argument("code", type=str)
def decode_command(code):
    """Show the maze parameters stored in a replay code."""
    try:
        params = replay.decode(code)
    except (CorruptReplayCode, InvalidConfiguration) as e:
        click.echo(click.style(f"Error: {e}", fg="red", bold=True))
        sys.exit(1)

    click.echo(f"Seed: {click.style(str(params.seed), fg='cyan')}")
    click.echo(f"Size: {click.style(f'{params.width}x{params.height}', fg='cyan')}")
    click.echo(f"Difficulty: {click.style(params.difficulty.value, fg='cyan')}")


# Allow running the module directly
if __name__ == "__main__":
    generate_maze_command()
