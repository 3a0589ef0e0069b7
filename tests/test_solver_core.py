"""Unit tests for the propagation and search phases."""

from src.sudoku import solver_core
from src.sudoku.model import Grid
from src.utils.trace import Tracer

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


def _cells(text: str):
    return [[int(ch) for ch in text[r * 9:(r + 1) * 9]] for r in range(9)]


def _grid(text: str) -> Grid:
    return Grid.from_cells(_cells(text))


def _flat(grid: Grid) -> str:
    return "".join(str(v) for row in grid.cells for v in row)


def _assert_valid_solution(grid: Grid):
    expected = set(range(1, 10))
    for i in range(9):
        assert set(grid.cells[i]) == expected
        assert {grid.cells[r][i] for r in range(9)} == expected
    for sq_row in range(3):
        for sq_col in range(3):
            block = {
                grid.cells[sq_row * 3 + r][sq_col * 3 + c]
                for r in range(3)
                for c in range(3)
            }
            assert block == expected


def test_propagate_fills_single_missing_cell():
    text = "0" + SOLUTION[1:]
    grid = _grid(text)

    assert solver_core.propagate(grid, Tracer())
    assert grid.cells[0][0] == 5
    assert _flat(grid) == SOLUTION


def test_propagate_solves_row_of_missing_cells():
    text = "000000000" + SOLUTION[9:]
    grid = _grid(text)

    assert solver_core.propagate(grid, Tracer())
    assert _flat(grid) == SOLUTION


def test_propagate_leaves_empty_grid_untouched():
    grid = Grid()
    tracer = Tracer()

    assert not solver_core.propagate(grid, tracer)
    assert grid.empty_cell_count() == 81
    assert tracer.summary()["num_placements"] == 0


def test_propagate_is_idempotent():
    grid = _grid(PUZZLE)
    solver_core.propagate(grid, Tracer())
    snapshot = _flat(grid)
    masks = (list(grid.rows), list(grid.cols), [list(s) for s in grid.squares])

    tracer = Tracer()
    solver_core.propagate(grid, tracer)

    assert _flat(grid) == snapshot
    assert (grid.rows, grid.cols, grid.squares) == masks
    assert tracer.summary()["num_placements"] == 0


def test_propagate_stops_at_fixed_point():
    grid = _grid(PUZZLE)
    solved = solver_core.propagate(grid, Tracer())

    if not solved:
        for row in range(9):
            for col in range(9):
                if grid.cells[row][col] == 0:
                    assert bin(grid.available_at(row, col)).count("1") != 1


def test_propagate_only_places_values_matching_unique_solution():
    grid = _grid(PUZZLE)
    solver_core.propagate(grid, Tracer())

    for row in range(9):
        for col in range(9):
            value = grid.cells[row][col]
            if value:
                assert value == int(SOLUTION[row * 9 + col])
    assert grid.is_consistent()


def test_propagate_restarts_scan_after_each_placement():
    # (0, 0) starts with candidates {3, 5}; it becomes a singleton once (0, 1)
    # is filled, and must be placed before (8, 0) further down the scan.
    cells = _cells(SOLUTION)
    cells[0][0] = 0
    cells[0][1] = 0
    cells[8][0] = 0
    grid = Grid.from_cells(cells)
    tracer = Tracer()

    assert solver_core.propagate(grid, tracer)
    placed = [(s.row, s.col, s.value) for s in tracer.steps if s.action_type == "place"]
    assert placed == [(0, 1, 3), (0, 0, 5), (8, 0, 3)]
    assert _flat(grid) == SOLUTION


def test_search_solves_puzzle():
    grid = _grid(PUZZLE)
    result = solver_core.search(grid, Tracer())

    assert result is not None
    assert _flat(result) == SOLUTION
    # The caller's grid is left untouched.
    assert grid.empty_cell_count() == 51


def test_search_on_complete_grid_returns_it():
    grid = _grid(SOLUTION)
    assert solver_core.search(grid, Tracer()) is grid


def test_search_solves_empty_grid():
    result = solver_core.search(Grid(), Tracer())

    assert result is not None
    assert result.is_complete()
    _assert_valid_solution(result)


def test_search_keeps_givens():
    cells = [[0] * 9 for _ in range(9)]
    cells[0][0] = 1
    cells[4][4] = 9
    cells[8][8] = 2
    result = solver_core.search(Grid.from_cells(cells), Tracer())

    assert result is not None
    _assert_valid_solution(result)
    assert result.cells[0][0] == 1
    assert result.cells[4][4] == 9
    assert result.cells[8][8] == 2


def test_search_is_deterministic():
    first = solver_core.search(Grid(), Tracer())
    second = solver_core.search(Grid(), Tracer())
    assert _flat(first) == _flat(second)
    # Ascending candidates make the first row 1..9.
    assert first.cells[0] == list(range(1, 10))


def test_search_dead_end_returns_none():
    # (0, 8) sees 1-8 in its row and 9 in its column: nothing fits.
    cells = [[0] * 9 for _ in range(9)]
    cells[0][:8] = [1, 2, 3, 4, 5, 6, 7, 8]
    cells[5][8] = 9
    tracer = Tracer()

    assert solver_core.search(Grid.from_cells(cells), tracer) is None
    assert any(s.action_type == "dead_end" for s in tracer.steps)


def test_duplicate_in_row_fails_both_phases():
    cells = [[0] * 9 for _ in range(9)]
    cells[0][0] = 5
    cells[0][1] = 5
    grid = Grid.from_cells(cells)

    assert not solver_core.propagate(grid, Tracer())
    assert solver_core.search(grid, Tracer()) is None
    result = solver_core.solve(grid, Tracer())
    assert not result.solved
    assert result.method is None


def test_composition_matches_search_alone():
    propagated = _grid(PUZZLE)
    tracer = Tracer()
    if not solver_core.propagate(propagated, tracer):
        propagated = solver_core.search(propagated, tracer)

    direct = solver_core.search(_grid(PUZZLE), Tracer())

    assert _flat(propagated) == _flat(direct) == SOLUTION


def test_solve_reports_propagation_method():
    result = solver_core.solve(_grid("0" + SOLUTION[1:]), Tracer())

    assert result.solved
    assert result.method == solver_core.METHOD_PROPAGATION


def test_solve_reports_search_method():
    result = solver_core.solve(Grid(), Tracer())

    assert result.solved
    assert result.method == solver_core.METHOD_SEARCH
    _assert_valid_solution(result.grid)


def test_solve_unsolvable_keeps_propagated_grid():
    cells = [[0] * 9 for _ in range(9)]
    cells[0][:8] = [1, 2, 3, 4, 5, 6, 7, 8]
    cells[5][8] = 9
    grid = Grid.from_cells(cells)
    result = solver_core.solve(grid, Tracer())

    assert not result.solved
    assert result.grid is grid


def test_search_logs_guesses_and_solution():
    tracer = Tracer()
    solver_core.search(_grid(PUZZLE), tracer)
    summary = tracer.summary()

    assert summary["num_guesses"] >= 51
    assert summary["action_counts"]["solution_found"] == 1


def test_complete_grid_with_repeated_value_fails_both_phases():
    # Every cell filled, but row 0 holds two 3s.
    grid = _grid("3" + SOLUTION[1:])

    propagated = solver_core.propagate(grid.copy(), Tracer())
    searched = solver_core.search(grid.copy(), Tracer())
    result = solver_core.solve(grid, Tracer())

    assert propagated is False
    assert searched is None
    assert propagated == (searched is not None)
    assert not result.solved
    assert result.method is None


def test_search_exhausts_candidates_before_failing():
    # Row 0 lacks 1, 2 and 3, but the 3 in the top-left square leaves only
    # {1, 2} for its three empty cells; every other cell is free.
    cells = [[0] * 9 for _ in range(9)]
    cells[0][3:] = [4, 5, 6, 7, 8, 9]
    cells[1][0] = 3
    grid = Grid.from_cells(cells)
    assert grid.is_consistent()
    assert grid.available_at(0, 0) == grid.available_at(0, 1) == grid.available_at(0, 2) == 0b11

    tracer = Tracer()
    assert solver_core.search(grid, tracer) is None

    counts = tracer.summary()["action_counts"]
    assert counts["guess"] == 4
    assert counts["dead_end"] == 2
    assert counts["backtrack"] == 3
    backtracks = [(s.row, s.col, s.depth) for s in tracer.steps if s.action_type == "backtrack"]
    assert backtracks == [(0, 1, 1), (0, 1, 1), (0, 0, 0)]


def test_solve_unsolvable_consistent_grid():
    cells = [[0] * 9 for _ in range(9)]
    cells[0][3:] = [4, 5, 6, 7, 8, 9]
    cells[1][0] = 3
    grid = Grid.from_cells(cells)

    result = solver_core.solve(grid, Tracer())

    assert not result.solved
    assert result.grid is grid
    assert grid.empty_cell_count() == 74
