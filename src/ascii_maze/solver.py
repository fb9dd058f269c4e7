from collections import deque
from dataclasses import dataclass

from ascii_maze.errors import InternalConsistencyError
from ascii_maze.grid import Coord, Direction, Grid, _Lattice

# Expansion order for breadth-first search. Keeps the canonical path stable.
SEARCH_ORDER = (Direction.UP, Direction.LEFT, Direction.DOWN, Direction.RIGHT)


@dataclass(frozen=True)
class Solution:
    """Shortest route from start to end plus the set of reachable cells."""

    path: tuple[Coord, ...]
    reachable: frozenset[Coord]

    @property
    def length(self) -> int:
        """Number of moves needed to walk the path."""
        return len(self.path) - 1

    @property
    def directions(self) -> list[Direction]:
        return path_to_directions(self.path)


def _search(lattice: _Lattice, source: Coord) -> tuple[dict[Coord, int], dict[Coord, Coord]]:
    dist = {source: 0}
    parents: dict[Coord, Coord] = {}
    queue = deque([source])

    while queue:
        cell = queue.popleft()
        for direction in SEARCH_ORDER:
            nxt = lattice.step(cell, direction)
            if nxt is not None and nxt not in dist:
                dist[nxt] = dist[cell] + 1
                parents[nxt] = cell
                queue.append(nxt)

    return dist, parents


def distances(lattice: _Lattice, source: Coord) -> dict[Coord, int]:
    """BFS distance (in moves) from ``source`` to every reachable cell."""
    return _search(lattice, source)[0]


def relax_distances(lattice: _Lattice, dist: dict[Coord, int], a: Coord, b: Coord) -> None:
    """
    Update ``dist`` in place after the wall between ``a`` and ``b`` opened.

    Opening a wall can only shorten distances, so only the cells whose
    distance drops are revisited. The result equals a fresh ``distances``
    call from the same source.
    """
    queue = deque()
    for cell, other in ((a, b), (b, a)):
        if dist[cell] + 1 < dist[other]:
            dist[other] = dist[cell] + 1
            queue.append(other)

    while queue:
        cell = queue.popleft()
        for nxt in lattice.neighbours(cell):
            if dist[cell] + 1 < dist[nxt]:
                dist[nxt] = dist[cell] + 1
                queue.append(nxt)


def shortest_path(lattice: _Lattice, source: Coord, target: Coord) -> list[Coord] | None:
    """
    Find the canonical shortest path between two cells.

    Args:
        lattice: A Grid or GridBuilder.
        source: Cell the path starts from.
        target: Cell the path ends at.

    Returns
    -------
        list: Cells from ``source`` to ``target`` inclusive, or None if
              ``target`` cannot be reached.
    """
    dist, parents = _search(lattice, source)
    if target not in dist:
        return None

    path = [target]
    while path[-1] != source:
        path.append(parents[path[-1]])
    path.reverse()
    return path


def solve(grid: Grid) -> Solution:
    """
    Solve a maze from its start cell to its end cell.

    Raises InternalConsistencyError if some cell cannot be reached from the
    start, since generated mazes are always fully connected.
    """
    dist, parents = _search(grid, grid.start)

    if len(dist) != grid.size:
        missing = grid.size - len(dist)
        raise InternalConsistencyError(
            f"{missing} cell(s) of the {grid.width}x{grid.height} maze are unreachable from {grid.start}"
        )

    path = [grid.end]
    while path[-1] != grid.start:
        path.append(parents[path[-1]])
    path.reverse()

    return Solution(path=tuple(path), reachable=frozenset(dist))


def hint(grid: Grid, position: Coord) -> Direction | None:
    """Direction of the next step toward the exit, or None when already there."""
    path = shortest_path(grid, position, grid.end)
    if path is None:
        raise InternalConsistencyError(f"exit is unreachable from {position}")
    if len(path) < 2:
        return None
    return path_to_directions(path[:2])[0]


def path_to_directions(path) -> list[Direction]:
    """Convert a sequence of adjacent cells into the moves that walk it."""
    directions = []
    for (r1, c1), (r2, c2) in zip(path, path[1:]):
        delta = (r2 - r1, c2 - c1)
        for direction in Direction:
            if direction.delta == delta:
                directions.append(direction)
                break
        else:
            raise ValueError(f"cells {(r1, c1)} and {(r2, c2)} are not adjacent")
    return directions
