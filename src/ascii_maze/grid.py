"""
Grid model for rectangular mazes.

A maze is a ``width`` x ``height`` lattice of cells addressed as ``(row, col)``
with ``(0, 0)`` in the top-left corner. Every cell stores a small bitset of the
directions in which its wall is open. Mazes are carved on a mutable
:class:`GridBuilder` and then frozen into an immutable :class:`Grid` that is
shared by the solver, the player and the renderer.

Basic usage:

    builder = GridBuilder(3, 2)
    builder.open_wall((0, 0), (0, 1))
    grid = builder.build(start=(0, 0), end=(0, 1))
    grid.is_open((0, 0), Direction.RIGHT)  # True
"""

import struct
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, NamedTuple, Sequence

from ascii_maze.errors import InvalidConfiguration, WallError

Coord = tuple[int, int]  # (row, col)


class Direction(Enum):
    """One of the four lattice directions a player can move in."""

    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"

    @property
    def delta(self) -> Coord:
        return _DELTAS[self]

    @property
    def bit(self) -> int:
        return _BITS[self]

    @property
    def opposite(self) -> "Direction":
        return _OPPOSITE[self]

    def apply(self, cell: Coord) -> Coord:
        """Return the lattice point one step away from ``cell``, bounds unchecked."""
        dr, dc = self.delta
        return cell[0] + dr, cell[1] + dc


_DELTAS = {
    Direction.UP: (-1, 0),
    Direction.DOWN: (1, 0),
    Direction.LEFT: (0, -1),
    Direction.RIGHT: (0, 1),
}
_BITS = {
    Direction.UP: 1,
    Direction.DOWN: 2,
    Direction.LEFT: 4,
    Direction.RIGHT: 8,
}
_OPPOSITE = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}

# Fixed order used whenever neighbours are enumerated.
DIRECTIONS = (Direction.UP, Direction.DOWN, Direction.LEFT, Direction.RIGHT)


class Cell(NamedTuple):
    """Read-only view of a single cell and its open walls."""

    row: int
    col: int
    open: int

    def is_open(self, direction: Direction) -> bool:
        return bool(self.open & direction.bit)

    @property
    def open_directions(self) -> list[Direction]:
        return [d for d in DIRECTIONS if self.open & d.bit]


class _Lattice:
    """Lattice queries shared by the builder and the frozen grid."""

    width: int
    height: int
    bits: Sequence[int]

    def in_bounds(self, cell: Coord) -> bool:
        row, col = cell
        return 0 <= row < self.height and 0 <= col < self.width

    def index(self, cell: Coord) -> int:
        return cell[0] * self.width + cell[1]

    def is_open(self, cell: Coord, direction: Direction) -> bool:
        if not self.in_bounds(cell):
            return False
        return bool(self.bits[self.index(cell)] & direction.bit)

    def step(self, cell: Coord, direction: Direction) -> Coord | None:
        """Return the neighbour reached through an open wall, or None if blocked."""
        if not self.is_open(cell, direction):
            return None
        return direction.apply(cell)

    def open_directions(self, cell: Coord) -> list[Direction]:
        return [d for d in DIRECTIONS if self.is_open(cell, d)]

    def neighbours(self, cell: Coord) -> list[Coord]:
        return [d.apply(cell) for d in self.open_directions(cell)]

    def cells(self) -> Iterator[Coord]:
        for row in range(self.height):
            for col in range(self.width):
                yield row, col

    @property
    def size(self) -> int:
        return self.width * self.height

    def passage_count(self) -> int:
        """Number of open walls between cells."""
        return sum(bin(b).count("1") for b in self.bits) // 2

    def dead_ends(self) -> list[Coord]:
        return [c for c in self.cells() if bin(self.bits[self.index(c)]).count("1") == 1]


class GridBuilder(_Lattice):
    """Mutable lattice with every wall closed, used while carving a maze."""

    def __init__(self, width: int, height: int):
        if width < 1 or height < 1:
            raise InvalidConfiguration(
                f"grid must be at least 1x1, got {width}x{height}"
            )
        self.width = width
        self.height = height
        self.bits = [0] * (width * height)

    def open_wall(self, a: Coord, b: Coord) -> None:
        """Open the wall shared by two lattice-adjacent cells."""
        if not self.in_bounds(a) or not self.in_bounds(b):
            raise WallError(f"wall {a} -> {b} is outside the {self.width}x{self.height} grid")
        delta = (b[0] - a[0], b[1] - a[1])
        for direction in DIRECTIONS:
            if direction.delta == delta:
                self.bits[self.index(a)] |= direction.bit
                self.bits[self.index(b)] |= direction.opposite.bit
                return
        raise WallError(f"cells {a} and {b} are not adjacent")

    def build(self, start: Coord = (0, 0), end: Coord | None = None) -> "Grid":
        if end is None:
            end = (self.height - 1, self.width - 1)
        for name, cell in (("start", start), ("end", end)):
            if not self.in_bounds(cell):
                raise InvalidConfiguration(f"{name} cell {cell} is outside the grid")
        return Grid(self.width, self.height, tuple(self.bits), tuple(start), tuple(end))


@dataclass(frozen=True)
class Grid(_Lattice):
    """Immutable maze layout. Equal grids are bit-identical."""

    width: int
    height: int
    bits: tuple[int, ...]
    start: Coord
    end: Coord

    @classmethod
    def from_open_walls(
        cls,
        width: int,
        height: int,
        passages: Iterable[tuple[Coord, Coord]],
        start: Coord = (0, 0),
        end: Coord | None = None,
    ) -> "Grid":
        """Build a grid from an explicit list of open passages."""
        builder = GridBuilder(width, height)
        for a, b in passages:
            builder.open_wall(a, b)
        return builder.build(start, end)

    def cell(self, row: int, col: int) -> Cell:
        if not self.in_bounds((row, col)):
            raise IndexError(f"cell {(row, col)} is outside the grid")
        return Cell(row, col, self.bits[self.index((row, col))])

    def layout_bytes(self) -> bytes:
        """Canonical byte dump of dimensions, start/end and every wall."""
        header = struct.pack(">HHHHHH", self.width, self.height, *self.start, *self.end)
        return header + bytes(self.bits)
