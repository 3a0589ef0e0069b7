"""Top-level Sudoku solve interface.

Expose `solve_puzzle(puzzle)` that accepts a pre-built Grid, a raw puzzle record
compatible with `src.sudoku.parser.parse_puzzle`, or puzzle text.
"""

from typing import Any

from src.sudoku import solver_core
from src.sudoku.model import Grid
from src.sudoku.parser import parse_puzzle, parse_text


def solve_puzzle(puzzle: Any) -> solver_core.SolveResult:
    """
    Solve a puzzle: propagation first, then search if cells remain empty.
    Accepts:
      - Grid instances (used directly and propagated in place)
      - Raw puzzle dictionaries (parsed via `parse_puzzle`)
      - Box-format text or an 81-character puzzle string
    """
    if isinstance(puzzle, Grid):
        grid = puzzle
    elif isinstance(puzzle, dict):
        grid = parse_puzzle(puzzle)
    elif isinstance(puzzle, str):
        grid = Grid.from_cells(parse_text(puzzle))
    else:
        raise TypeError("solve_puzzle expects a Grid, puzzle dictionary, or puzzle text")

    return solver_core.solve(grid)


__all__ = ["solve_puzzle"]
