"""Integration-style tests for the top-level solve interface."""

import pytest

from solver import solve_puzzle
from src.sudoku.model import Grid
from src.utils.io import format_grid, grid_to_string

PUZZLE = (
    "530070000"
    "600195000"
    "098000060"
    "800060003"
    "400803001"
    "700020006"
    "060000280"
    "000419005"
    "000080079"
)
SOLUTION = (
    "534678912"
    "672195348"
    "198342567"
    "859761423"
    "426853791"
    "713924856"
    "961537284"
    "287419635"
    "345286179"
)


def test_solver_solves_puzzle_string():
    result = solve_puzzle(PUZZLE)

    assert result.solved, "Solver should find a solution"
    assert grid_to_string(result.grid) == SOLUTION


def test_solver_accepts_box_text_and_records():
    box = format_grid(Grid.from_cells([[int(ch) for ch in PUZZLE[r * 9:(r + 1) * 9]] for r in range(9)]))

    assert grid_to_string(solve_puzzle(box).grid) == SOLUTION
    assert grid_to_string(solve_puzzle({"id": "wiki", "puzzle": PUZZLE}).grid) == SOLUTION


def test_solver_propagates_grid_in_place():
    grid = Grid.from_cells([[int(ch) for ch in ("0" + SOLUTION[1:])[r * 9:(r + 1) * 9]] for r in range(9)])

    result = solve_puzzle(grid)

    assert result.method == "propagation"
    assert result.grid is grid
    assert grid.cells[0][0] == 5


def test_solver_rejects_unknown_input():
    with pytest.raises(TypeError):
        solve_puzzle(42)
