import os

import pytest
from click.testing import CliRunner

from ascii_maze import cli, config, replay
from ascii_maze.generator import Difficulty, GenerationParams, generate_grid
from ascii_maze.grid import Direction
from ascii_maze.render import render_ascii, render_box
from ascii_maze.solver import solve

KEYS = {
    Direction.UP: "k",
    Direction.DOWN: "j",
    Direction.LEFT: "h",
    Direction.RIGHT: "l",
}


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep MAZE_* variables, .env files and the real terminal out of the tests."""
    for name in ["MAZE_WIDTH", "MAZE_HEIGHT", "MAZE_DIFFICULTY", "MAZE_STYLE", "MAZE_SHOW_PATH"]:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(config, "load_dotenv", lambda: False)
    monkeypatch.setattr(
        config.shutil, "get_terminal_size", lambda fallback=None: os.terminal_size((40, 20))
    )


@pytest.fixture
def runner():
    return CliRunner()


def test_generate(runner):
    """Test that generate prints the maze and its replay code."""
    params = GenerationParams(42, 5, 5)
    grid = generate_grid(params)

    result = runner.invoke(cli, ["generate", "5", "5", "--seed", "42"])

    assert result.exit_code == 0
    assert "\n".join(render_ascii(grid, player=grid.start)) in result.output
    assert replay.encode(params) in result.output


def test_generate_solve_verbose(runner):
    grid = generate_grid(GenerationParams(3, 6, 4, Difficulty.HARD))
    solution = solve(grid)

    result = runner.invoke(
        cli, ["generate", "6", "4", "--seed", "3", "--difficulty", "hard", "--solve", "--verbose"]
    )

    assert result.exit_code == 0
    assert "difficulty: hard" in result.output
    assert "dead ends:" in result.output
    assert f"Shortest path ({solution.length} moves)" in result.output
    assert "\n".join(render_ascii(grid, path=solution.path, player=grid.start)) in result.output


def test_generate_box_style(runner):
    grid = generate_grid(GenerationParams(8, 4, 3))

    result = runner.invoke(cli, ["generate", "4", "3", "--seed", "8", "--style", "box"])

    assert result.exit_code == 0
    assert "\n".join(render_box(grid, player=grid.start)) in result.output


def test_generate_from_replay(runner):
    params = GenerationParams(77, 7, 5, Difficulty.HARD)
    grid = generate_grid(params)

    result = runner.invoke(cli, ["generate", "--replay", replay.encode(params)])

    assert result.exit_code == 0
    assert "Generating a 7x5 maze" in result.output
    assert "\n".join(render_ascii(grid, player=grid.start)) in result.output


@pytest.mark.parametrize(
    "args",
    [
        ["generate", "1", "5", "--seed", "1"],
        ["generate", "5", "5", "--seed", "-3"],
        ["generate", "--replay", "NOTAREPLAYCODE"],
    ],
)
def test_generate_errors(runner, args):
    result = runner.invoke(cli, args)

    assert result.exit_code == 1
    assert "Error" in result.output


@pytest.mark.parametrize(
    "args",
    [
        ["generate", "5"],
        ["generate", "5", "5", "--replay", "A" * 24],
        ["generate", "--seed", "3", "--replay", "A" * 24],
    ],
)
def test_generate_usage_errors(runner, args):
    result = runner.invoke(cli, args)

    assert result.exit_code == 2


def test_decode(runner):
    code = replay.encode(GenerationParams(123, 7, 9, Difficulty.HARD))

    result = runner.invoke(cli, ["decode", code])

    assert result.exit_code == 0
    assert "Seed: 123" in result.output
    assert "Size: 7x9" in result.output
    assert "Difficulty: hard" in result.output


def test_decode_corrupt(runner):
    code = replay.encode(GenerationParams(123, 7, 9))
    tampered = ("B" if code[0] != "B" else "C") + code[1:]

    result = runner.invoke(cli, ["decode", tampered])

    assert result.exit_code == 1
    assert "checksum" in result.output


def test_play_to_the_exit(runner):
    """Typing the solution wins the game."""
    params = GenerationParams(42, 6, 5)
    solution = solve(generate_grid(params))
    keys = "".join(KEYS[d] for d in solution.directions) + "q"

    result = runner.invoke(cli, ["play", "-w", "6", "-h", "5", "--seed", "42"], input=keys)

    assert result.exit_code == 0
    assert f"You escaped in {solution.length} moves" in result.output
    assert f"Replay code: {replay.encode(params)}" in result.output


def test_play_bump_and_hint(runner):
    params = GenerationParams(9, 5, 5)
    first = solve(generate_grid(params)).directions[0]

    # Up from the top-left corner always hits the outer wall
    result = runner.invoke(
        cli, ["play", "-w", "5", "-h", "5", "--seed", "9"], input="k?rpq"
    )

    assert result.exit_code == 0
    assert "Bump!" in result.output
    assert f"Hint: go {first.value}" in result.output


def test_play_quits_at_end_of_input(runner):
    result = runner.invoke(cli, ["play", "-w", "4", "-h", "4", "--seed", "1"], input="")

    assert result.exit_code == 0
    assert "Replay code:" in result.output


def test_play_new_game(runner):
    old_code = replay.encode(GenerationParams(1, 4, 4))

    result = runner.invoke(cli, ["play", "-w", "4", "-h", "4", "--seed", "1"], input="nq")

    assert result.exit_code == 0
    final_code = result.output.strip().splitlines()[-1].split()[-1]
    assert replay.decode(final_code).width == 4
    assert old_code in result.output


def test_play_from_replay(runner):
    params = GenerationParams(55, 8, 3, Difficulty.HARD)
    code = replay.encode(params)

    result = runner.invoke(cli, ["play", "--replay", code], input="q")

    assert result.exit_code == 0
    assert f"Replay code: {code}" in result.output


def test_play_corrupt_replay_falls_back(runner):
    """A bad replay code asks for fresh parameters instead of crashing."""
    result = runner.invoke(
        cli, ["play", "--replay", "A" * 24], input="4\n3\nhard\nq"
    )

    assert result.exit_code == 0
    assert "Let's start a fresh maze instead." in result.output
    final_code = result.output.strip().splitlines()[-1].split()[-1]
    params = replay.decode(final_code)
    assert (params.width, params.height, params.difficulty) == (4, 3, Difficulty.HARD)


def test_play_invalid_size_falls_back(runner):
    result = runner.invoke(
        cli, ["play", "-w", "1", "-h", "5"], input="\n\n\nq"
    )

    assert result.exit_code == 0
    assert "Error:" in result.output
    final_code = result.output.strip().splitlines()[-1].split()[-1]
    # Defaults come from the 40x20 terminal
    assert (replay.decode(final_code).width, replay.decode(final_code).height) == (10, 9)


def test_play_uses_environment(runner, monkeypatch):
    monkeypatch.setenv("MAZE_WIDTH", "3")
    monkeypatch.setenv("MAZE_HEIGHT", "4")
    monkeypatch.setenv("MAZE_DIFFICULTY", "hard")
    monkeypatch.setenv("MAZE_STYLE", "box")

    result = runner.invoke(cli, ["play", "--seed", "5"], input="q")

    assert result.exit_code == 0
    assert replay.encode(GenerationParams(5, 3, 4, Difficulty.HARD)) in result.output
    assert "┌" in result.output


def test_play_bad_environment(runner, monkeypatch):
    monkeypatch.setenv("MAZE_STYLE", "hologram")

    result = runner.invoke(cli, ["play"], input="q")

    assert result.exit_code == 1
    assert "Error in configuration" in result.output


def test_play_replay_excludes_size(runner):
    code = replay.encode(GenerationParams(55, 8, 3))

    result = runner.invoke(cli, ["play", "--replay", code, "-w", "5"], input="q")

    assert result.exit_code == 2
