import click

from ascii_maze.generate_maze_script import decode_command, generate_maze_command
from ascii_maze.interactive_cli import play_command


@click.group()
def cli():
    """ASCII Maze - Find your way out of a maze drawn in the terminal."""
    pass


cli.add_command(generate_maze_command)
cli.add_command(decode_command)
cli.add_command(play_command)
