"""Two-phase Sudoku solver: singleton propagation, then backtracking search."""

from dataclasses import dataclass
from typing import Optional

from .model import SIZE, Grid, only_value, values_in_mask
from src.utils.trace import Tracer, get_tracer

METHOD_PROPAGATION = "propagation"
METHOD_SEARCH = "search"


@dataclass
class SolveResult:
    grid: Grid
    solved: bool
    method: Optional[str] = None


def solve(grid: Grid, tracer: Optional[Tracer] = None) -> SolveResult:
    """
    Run propagation on `grid` (in place); if that leaves empty cells, run the
    search on the propagated grid. When both fail, the result carries the
    propagated grid with `solved=False`. Givens that already repeat a value are
    rejected before either phase runs.
    """
    tracer = tracer or get_tracer()
    if not grid.is_consistent():
        tracer.log_unsolved(phase=None, empty_cells=grid.empty_cell_count(), reason="Conflicting givens")
        return SolveResult(grid=grid, solved=False)

    if propagate(grid, tracer):
        return SolveResult(grid=grid, solved=True, method=METHOD_PROPAGATION)

    solution = search(grid, tracer)
    if solution is not None:
        return SolveResult(grid=solution, solved=True, method=METHOD_SEARCH)
    return SolveResult(grid=grid, solved=False)


def propagate(grid: Grid, tracer: Optional[Tracer] = None) -> bool:
    """
    Fill every empty cell that has exactly one available value, rescanning from
    the top-left cell after each placement. Returns True when no empty cells remain
    and no value is repeated in a row, column or square.
    """
    tracer = tracer or get_tracer()

    placed = True
    while placed:
        placed = _place_first_singleton(grid, tracer)

    empty = grid.empty_cell_count()
    if empty == 0 and grid.is_consistent():
        tracer.log_solution_found(phase="propagate", grid=grid)
        return True
    reason = "No single-value cells left" if empty else "Conflicting givens"
    tracer.log_unsolved(phase="propagate", empty_cells=empty, reason=reason)
    return False


def _place_first_singleton(grid: Grid, tracer: Tracer) -> bool:
    for row in range(SIZE):
        for col in range(SIZE):
            if grid.cells[row][col] != 0:
                continue
            value = only_value(grid.available_at(row, col))
            if value is not None:
                grid.place(row, col, value)
                tracer.log_place(row, col, value, grid=grid)
                return True
    return False


def search(grid: Grid, tracer: Optional[Tracer] = None) -> Optional[Grid]:
    """
    Depth-first search over the first empty cell's available values in ascending
    order, each trial on its own copy of the grid. Returns the first complete grid
    found, or None when there is none. `grid` itself is never modified.
    """
    tracer = tracer or get_tracer()

    # Givens that already repeat a value leave no valid completion.
    if not grid.is_consistent():
        tracer.log_unsolved(phase="search", empty_cells=grid.empty_cell_count(), reason="Conflicting givens")
        return None

    solution = _search(grid, tracer, depth=0)
    if solution is None:
        tracer.log_unsolved(phase="search", empty_cells=grid.empty_cell_count(), reason="Search space exhausted")
    return solution


def _search(grid: Grid, tracer: Tracer, depth: int) -> Optional[Grid]:
    cell = grid.find_empty_cell()
    if cell is None:
        tracer.log_solution_found(phase="search", grid=grid)
        return grid

    row, col = cell
    available = grid.available_at(row, col)
    if available == 0:
        tracer.log_dead_end(row, col, depth, grid=grid)
        return None

    candidates = values_in_mask(available)
    for value in candidates:
        trial = grid.copy()
        trial.place(row, col, value)
        tracer.log_guess(row, col, value, candidates=len(candidates), depth=depth, grid=trial)

        result = _search(trial, tracer, depth + 1)
        if result is not None:
            return result

    tracer.log_backtrack(row, col, depth)
    return None
