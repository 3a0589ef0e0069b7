"""CLI entrypoint: load puzzle(s), run solver, and report which phase solved them."""

import argparse
import csv
import os
import sys
import time
from pathlib import Path

from solver import solve_puzzle
from src.sudoku.loader import SUPPORTED_SUFFIXES, load_puzzles
from src.sudoku.parser import parse_puzzle
from src.sudoku.solver_core import METHOD_PROPAGATION, METHOD_SEARCH
from src.utils.io import format_grid, grid_to_string
from src.utils.trace import get_tracer, reset_tracer

SEARCH_DELAY_DIVISOR = 10

METHOD_MESSAGES = {
    METHOD_PROPAGATION: "Found a solution using method 1.",
    METHOD_SEARCH: "Found a solution using method 2.",
    None: "Could not find a solution.",
}


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Solve 9x9 Sudoku puzzles")
    parser.add_argument(
        "input",
        type=Path,
        nargs="?",
        default=None,
        help="Puzzle file or directory of puzzle files (default: $SUDOKU_DATA_PATH)",
    )
    parser.add_argument("--output", type=Path, default=None, help="Optional path to write a results CSV")
    parser.add_argument("--trace", type=Path, default=None, help="Optional path to write the solver trace CSV")
    parser.add_argument(
        "--watch",
        action="store_true",
        help="Redraw the grid on stderr after every solver step.",
    )
    parser.add_argument(
        "--delay",
        type=float,
        default=0.1,
        help="Seconds to pause between propagation redraws in --watch mode (search redraws pause a tenth of it).",
    )
    return parser


def parse_args(argv=None):
    args = build_arg_parser().parse_args(argv)
    if args.input is None:
        env_path = os.environ.get("SUDOKU_DATA_PATH")
        if env_path:
            args.input = Path(env_path)
    return args


def make_watch_observer(delay: float, stream=None):
    """
    Observer that redraws the grid in place, like a terminal animation. Search
    steps pause a tenth as long as propagation placements.
    """
    stream = stream or sys.stderr

    def _observer(step, grid):
        stream.write("\033[H")
        stream.write(format_grid(grid))
        stream.flush()
        pause = delay if step.phase == "propagate" else delay / SEARCH_DELAY_DIVISOR
        if pause > 0:
            time.sleep(pause)

    return _observer


def trace_path_for(base: Path, puzzle_id: str, multiple: bool) -> Path:
    if not multiple:
        return base
    return base.with_name(f"{base.stem}-{puzzle_id}{base.suffix}")


def write_results_csv(results, output_path: Path):
    with open(output_path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(["id", "solution", "method", "steps"])

        for r in results:
            writer.writerow([
                r["id"],
                r["solution"],
                r["method"],
                r["steps"]
            ])


def collect_puzzles(input_path: Path):
    if not input_path.exists():
        raise FileNotFoundError(f"File not found: {input_path}")
    if input_path.is_file():
        return load_puzzles(str(input_path))
    if input_path.is_dir():
        puzzles = []
        for file_path in sorted(input_path.iterdir()):
            if file_path.suffix in SUPPORTED_SUFFIXES:
                puzzles.extend(load_puzzles(str(file_path)))
        return puzzles
    raise ValueError(f"Input path {input_path} is neither file nor directory")


def solve_one(puzzle: dict, args, multiple: bool) -> dict:
    puzzle_id = puzzle.get("id", "unknown")
    observer = make_watch_observer(args.delay) if args.watch else None
    reset_tracer(enabled=bool(args.trace or args.watch or args.output), observer=observer)
    tracer = get_tracer()

    try:
        grid = parse_puzzle(puzzle)
    except ValueError as e:
        print(f"ERROR: Failed to load puzzle {puzzle_id}: {e}", file=sys.stderr)
        return {"id": puzzle_id, "solution": "", "method": "error", "steps": -1}

    print("Input:")
    print(format_grid(grid), end="")

    for row, col, value in grid.conflicts():
        print(
            f"WARNING: {puzzle_id}: value {value} at row {row + 1}, column {col + 1} "
            f"repeats in its row, column or square",
            file=sys.stderr,
        )

    if args.watch:
        sys.stderr.write("\033[H\033[2J")

    result = solve_puzzle(grid)
    print(METHOD_MESSAGES[result.method], file=sys.stderr)
    if result.solved:
        print("Solution:")
        print(format_grid(result.grid), end="")

    if args.trace:
        tracer.to_csv(trace_path_for(args.trace, puzzle_id, multiple))

    summary = tracer.summary()
    return {
        "id": puzzle_id,
        "solution": grid_to_string(result.grid) if result.solved else "",
        "method": result.method or "unsolved",
        # Placements plus guesses as a proxy for search effort.
        "steps": summary["num_placements"] + summary["num_guesses"],
    }


def main(argv=None) -> int:
    args = parse_args(argv)
    if args.input is None:
        build_arg_parser().print_usage()
        return 0

    try:
        puzzles = collect_puzzles(args.input)
    except (FileNotFoundError, ValueError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    multiple = len(puzzles) > 1

    results = [solve_one(puzzle, args, multiple) for puzzle in puzzles]

    if args.output:
        write_results_csv(results, args.output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
