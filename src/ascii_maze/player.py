from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable

from ascii_maze.errors import InternalConsistencyError
from ascii_maze.grid import Coord, Direction, Grid


class GameStatus(Enum):
    PLAYING = "playing"
    WON = "won"


class MoveResult(Enum):
    MOVED = "moved"
    BLOCKED = "blocked"  # wall in the way, nothing changed
    WON = "won"  # moved onto the exit
    FINISHED = "finished"  # game already won, nothing changed


@dataclass
class PlayerState:
    """Position and history of the player in one maze."""

    position: Coord
    visited: dict[Coord, None] = field(default_factory=dict)
    trail: list[tuple[Coord, Direction | None]] = field(default_factory=list)
    move_count: int = 0
    status: GameStatus = GameStatus.PLAYING

    @property
    def won(self) -> bool:
        return self.status is GameStatus.WON

    @property
    def visited_cells(self) -> tuple[Coord, ...]:
        """Visited cells in the order they were first entered."""
        return tuple(self.visited)


class Player:
    """
    State machine moving a player through a maze.

    The player starts on ``grid.start`` in the PLAYING state and only changes
    through :meth:`attempt_move`. Reaching ``grid.end`` switches to WON, after
    which moves are ignored until :meth:`reset`.
    """

    def __init__(self, grid: Grid):
        self.grid = grid
        self._state = self._fresh_state()

    def _fresh_state(self) -> PlayerState:
        start = self.grid.start
        return PlayerState(position=start, visited={start: None}, trail=[(start, None)])

    @property
    def state(self) -> PlayerState:
        return self._state

    @property
    def position(self) -> Coord:
        return self._state.position

    def attempt_move(self, direction: Direction) -> MoveResult:
        state = self._state
        if state.won:
            return MoveResult.FINISHED

        if not self.grid.in_bounds(state.position):
            raise InternalConsistencyError(
                f"player position {state.position} is outside the "
                f"{self.grid.width}x{self.grid.height} maze"
            )

        nxt = self.grid.step(state.position, direction)
        if nxt is None:
            return MoveResult.BLOCKED

        state.position = nxt
        state.move_count += 1
        state.visited.setdefault(nxt, None)
        state.trail.append((nxt, direction))

        if nxt == self.grid.end:
            state.status = GameStatus.WON
            return MoveResult.WON
        return MoveResult.MOVED

    def apply_moves(self, directions: Iterable[Direction]) -> list[Direction]:
        """Apply moves in order until one is refused. Returns the completed moves."""
        completed = []
        for direction in directions:
            result = self.attempt_move(direction)
            if result in (MoveResult.MOVED, MoveResult.WON):
                completed.append(direction)
            if result is not MoveResult.MOVED:
                break
        return completed

    def reset(self) -> PlayerState:
        """Put the player back on the start cell with an empty history."""
        self._state = self._fresh_state()
        return self._state
