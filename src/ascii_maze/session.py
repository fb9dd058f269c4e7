from ascii_maze import replay
from ascii_maze.generator import GenerationParams, generate_grid
from ascii_maze.grid import Direction, Grid
from ascii_maze.player import MoveResult, Player, PlayerState
from ascii_maze.solver import Solution, hint, solve


class GameSession:
    """One maze being played: parameters, layout, solution and player."""

    def __init__(self, params: GenerationParams):
        self.params = params
        self.grid: Grid = generate_grid(params)
        self.solution: Solution = solve(self.grid)
        self.player = Player(self.grid)
        self.replay_code = replay.encode(params)

    @classmethod
    def from_replay(cls, code: str) -> "GameSession":
        return cls(replay.decode(code))

    @property
    def state(self) -> PlayerState:
        return self.player.state

    def move(self, direction: Direction) -> MoveResult:
        return self.player.attempt_move(direction)

    def restart(self) -> PlayerState:
        """Replay the same maze from the start."""
        return self.player.reset()

    def next_game(self, seed: int) -> "GameSession":
        """Start a new maze of the same size and difficulty."""
        params = GenerationParams(
            seed, self.params.width, self.params.height, self.params.difficulty
        )
        return GameSession(params)

    def hint(self) -> Direction | None:
        return hint(self.grid, self.player.position)
