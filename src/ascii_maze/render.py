"""Text renderings of a maze.

Two styles are available:

* ``ascii`` – ``#`` blocks for walls, one character per cell::

      #####
      #@  #
      ### #
      #E  #
      #####

* ``box`` – box-drawing lines with three-character wide cells.

Both take an optional path (drawn with ``.``) and player position (``@``);
the exit is marked with ``E``.
"""

from typing import Sequence

import click

from ascii_maze.grid import Coord, Direction, Grid

STYLES = ("ascii", "box")

# (up, down, left, right) wall segments meeting at a post -> junction glyph
_JUNCTIONS = {
    (False, False, False, False): " ",
    (True, False, False, False): "╵",
    (False, True, False, False): "╷",
    (True, True, False, False): "│",
    (False, False, True, False): "╴",
    (False, False, False, True): "╶",
    (False, False, True, True): "─",
    (False, True, False, True): "┌",
    (True, False, False, True): "└",
    (False, True, True, False): "┐",
    (True, False, True, False): "┘",
    (True, True, True, False): "┤",
    (True, True, False, True): "├",
    (False, True, True, True): "┬",
    (True, False, True, True): "┴",
    (True, True, True, True): "┼",
}


def wall_mask(grid: Grid) -> list[list[bool]]:
    """
    Expand a grid into a ``(2*height+1) x (2*width+1)`` wall mask.

    Cell ``(r, c)`` sits at mask position ``(2r+1, 2c+1)``; the positions
    between cells are walls (True) unless the passage is open.
    """
    mask = [[True] * (2 * grid.width + 1) for _ in range(2 * grid.height + 1)]
    for row, col in grid.cells():
        mask[2 * row + 1][2 * col + 1] = False
        if grid.is_open((row, col), Direction.RIGHT):
            mask[2 * row + 1][2 * col + 2] = False
        if grid.is_open((row, col), Direction.DOWN):
            mask[2 * row + 2][2 * col + 1] = False
    return mask


def _marks(
    grid: Grid, path: Sequence[Coord] | None, player: Coord | None
) -> dict[tuple[int, int], str]:
    marks = {}
    if path:
        for (r1, c1), (r2, c2) in zip(path, path[1:]):
            marks[(r1 + r2 + 1, c1 + c2 + 1)] = "."
        for row, col in path:
            marks[(2 * row + 1, 2 * col + 1)] = "."
    end_row, end_col = grid.end
    marks[(2 * end_row + 1, 2 * end_col + 1)] = "E"
    if player is not None:
        marks[(2 * player[0] + 1, 2 * player[1] + 1)] = "@"
    return marks


def render_ascii(
    grid: Grid, path: Sequence[Coord] | None = None, player: Coord | None = None
) -> list[str]:
    """Render the maze with ``#`` walls. Returns one string per row."""
    mask = wall_mask(grid)
    rows = [["#" if wall else " " for wall in line] for line in mask]
    for (i, j), char in _marks(grid, path, player).items():
        rows[i][j] = char
    return ["".join(row) for row in rows]


def render_box(
    grid: Grid, path: Sequence[Coord] | None = None, player: Coord | None = None
) -> list[str]:
    """Render the maze with box-drawing characters."""
    mask = wall_mask(grid)
    marks = _marks(grid, path, player)
    last_row, last_col = len(mask) - 1, len(mask[0]) - 1

    lines = []
    for i, line in enumerate(mask):
        out = []
        for j, wall in enumerate(line):
            wide = j % 2 == 1
            if (i, j) in marks:
                out.append(f" {marks[(i, j)]} " if wide else marks[(i, j)])
            elif i % 2 == 0 and j % 2 == 0:
                key = (
                    i > 0 and mask[i - 1][j],
                    i < last_row and mask[i + 1][j],
                    j > 0 and mask[i][j - 1],
                    j < last_col and mask[i][j + 1],
                )
                out.append(_JUNCTIONS[key])
            elif i % 2 == 0:
                out.append("───" if wall else "   ")
            elif not wide:
                out.append("│" if wall else " ")
            else:
                out.append("   ")
        lines.append("".join(out))
    return lines


def render(
    grid: Grid,
    style: str = "ascii",
    path: Sequence[Coord] | None = None,
    player: Coord | None = None,
) -> list[str]:
    if style == "box":
        return render_box(grid, path, player)
    if style == "ascii":
        return render_ascii(grid, path, player)
    raise ValueError(f"unknown render style {style!r} (expected one of: {', '.join(STYLES)})")


def print_maze(maze_list: list[str]):
    """Prints the maze list to the console."""
    for row in maze_list:
        click.echo(row)
