"""I/O helpers for rendering grids."""

from typing import Any, List, Sequence

from src.sudoku.model import BOX, SIZE

BORDER = "+-------+-------+-------+"


def _cells_of(grid: Any) -> Sequence[Sequence[int]]:
    return grid.cells if hasattr(grid, "cells") else grid


def format_grid(grid: Any) -> str:
    """Render a grid (or a 9x9 list of values) in the box-drawing format."""
    cells = _cells_of(grid)
    lines: List[str] = []
    for row in range(SIZE):
        if row % BOX == 0:
            lines.append(BORDER)
        parts = ["|"]
        for col in range(SIZE):
            value = cells[row][col]
            parts.append(f" {value}" if value else "  ")
            if col % BOX == BOX - 1:
                parts.append(" |")
        lines.append("".join(parts))
    lines.append(BORDER)
    return "\n".join(lines) + "\n"


def grid_to_string(grid: Any) -> str:
    """81-character row-major form, `0` for empty cells."""
    return "".join(str(value) for row in _cells_of(grid) for value in row)
