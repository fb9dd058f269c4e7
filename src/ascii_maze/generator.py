"""Deterministic maze generation.

Mazes are carved with a randomized depth-first backtracker driven by a
``random.Random`` instance seeded from :class:`GenerationParams`. Nothing here
touches the module-level random state, so the same parameters produce the same
maze on every run and every machine.
"""

import random
from dataclasses import dataclass
from enum import Enum

from ascii_maze.errors import InvalidConfiguration
from ascii_maze.grid import DIRECTIONS, Coord, Direction, Grid, GridBuilder
from ascii_maze.solver import distances, relax_distances

MIN_SIZE = 2
MAX_SIZE = 255
MAX_SEED = 2**64 - 1


class Difficulty(Enum):
    NORMAL = "normal"
    HARD = "hard"

    @property
    def extra_wall_fraction(self) -> float:
        """Share of the grid area opened as extra walls after carving."""
        return _EXTRA_WALL_FRACTION[self]

    @classmethod
    def parse(cls, value: "str | Difficulty") -> "Difficulty":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            choices = ", ".join(d.value for d in cls)
            raise InvalidConfiguration(
                f"unknown difficulty {value!r} (expected one of: {choices})"
            ) from None


_EXTRA_WALL_FRACTION = {
    Difficulty.NORMAL: 0.0,
    Difficulty.HARD: 0.05,
}


@dataclass(frozen=True)
class GenerationParams:
    """Everything needed to rebuild a maze exactly."""

    seed: int
    width: int
    height: int
    difficulty: Difficulty = Difficulty.NORMAL

    def validate(self, error: type[InvalidConfiguration] = InvalidConfiguration) -> "GenerationParams":
        """Raise ``error`` if any field is out of range, else return self."""
        for name, value in (("width", self.width), ("height", self.height)):
            if not isinstance(value, int) or not MIN_SIZE <= value <= MAX_SIZE:
                raise error(
                    f"maze {name} must be between {MIN_SIZE} and {MAX_SIZE}, got {value!r}"
                )
        if not isinstance(self.seed, int) or not 0 <= self.seed <= MAX_SEED:
            raise error(f"seed must be an unsigned 64-bit integer, got {self.seed!r}")
        if not isinstance(self.difficulty, Difficulty):
            raise error(f"unknown difficulty {self.difficulty!r}")
        return self


def extra_wall_target(params: GenerationParams) -> int:
    fraction = params.difficulty.extra_wall_fraction
    if not fraction:
        return 0
    return max(1, round(params.width * params.height * fraction))


def generate_grid(params: GenerationParams) -> Grid:
    """
    Generate the maze described by ``params``.

    Args:
        params: Seed, dimensions and difficulty of the maze.

    Returns
    -------
        Grid: A fully connected maze starting in the top-left corner and
              ending at the cell farthest from it along the carved tree.

    Raises InvalidConfiguration before any carving if ``params`` is invalid.
    """
    params.validate()
    rng = random.Random(params.seed)

    builder = GridBuilder(params.width, params.height)
    start = (0, 0)
    end = _carve(builder, rng, start)

    target = extra_wall_target(params)
    if target:
        _open_extra_walls(builder, rng, start, end, target)

    return builder.build(start, end)


def generate_maze(
    width: int,
    height: int,
    seed: int,
    difficulty: "str | Difficulty" = Difficulty.NORMAL,
) -> Grid:
    """Shortcut for ``generate_grid`` taking loose arguments."""
    params = GenerationParams(seed, width, height, Difficulty.parse(difficulty))
    return generate_grid(params)


def _carve(builder: GridBuilder, rng: random.Random, start: Coord) -> Coord:
    """Carve a spanning tree from ``start`` and return the deepest cell found."""
    visited = {start}
    stack = [start]
    deepest, deepest_depth = start, 0

    while stack:
        current = stack[-1]

        neighbors = []
        for direction in DIRECTIONS:
            nxt = direction.apply(current)
            if builder.in_bounds(nxt) and nxt not in visited:
                neighbors.append(nxt)

        if neighbors:
            nxt = rng.choice(neighbors)
            builder.open_wall(current, nxt)
            visited.add(nxt)
            stack.append(nxt)

            # Stack depth equals tree distance from the start.
            if len(stack) - 1 > deepest_depth:
                deepest, deepest_depth = nxt, len(stack) - 1
        else:
            stack.pop()  # Backtrack

    return deepest


def _open_extra_walls(
    builder: GridBuilder,
    rng: random.Random,
    start: Coord,
    end: Coord,
    target: int,
) -> int:
    """
    Open up to ``target`` closed walls without creating a route to ``end``
    that is as short as the current shortest one.

    Candidates are every closed interior wall in row-major order (right wall
    first, then down wall), shuffled with ``rng``. A wall between ``a`` and
    ``b`` is opened only if every route through it is strictly longer than the
    shortest path, so that path keeps both its length and its uniqueness.
    """
    candidates = []
    for cell in builder.cells():
        for direction in (Direction.RIGHT, Direction.DOWN):
            nxt = direction.apply(cell)
            if builder.in_bounds(nxt) and not builder.is_open(cell, direction):
                candidates.append((cell, nxt))
    rng.shuffle(candidates)

    from_start = distances(builder, start)
    from_end = distances(builder, end)
    length = from_start[end]

    opened = 0
    for a, b in candidates:
        if opened >= target:
            break
        through = min(from_start[a] + 1 + from_end[b], from_start[b] + 1 + from_end[a])
        if through <= length:
            continue
        builder.open_wall(a, b)
        opened += 1
        relax_distances(builder, from_start, a, b)
        relax_distances(builder, from_end, a, b)

    return opened
