"""Exceptions raised by the maze core."""


class MazeError(Exception):
    """Base class for every error raised by ``ascii_maze``."""


class InvalidConfiguration(MazeError, ValueError):
    """Maze parameters (size, seed, difficulty) are not acceptable."""


class InvalidReplayParameters(InvalidConfiguration):
    """A replay code passed its checksum but holds out-of-range values."""


class CorruptReplayCode(MazeError, ValueError):
    """A replay code is malformed or failed its checksum."""


class WallError(MazeError, ValueError):
    """A wall was requested between cells that do not share one."""


class InternalConsistencyError(MazeError, RuntimeError):
    """A core invariant was violated (unreachable cell, player off the grid)."""
