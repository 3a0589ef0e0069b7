"""Tracing module: logs Sudoku solver steps and writes them to CSV."""

import csv
from dataclasses import dataclass, asdict
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional


@dataclass
class TraceStep:
    """A single step in the solving process."""

    timestamp: float
    step_number: int
    action_type: str  # 'place', 'guess', 'dead_end', 'backtrack', 'solution_found', 'unsolved'
    phase: Optional[str] = None  # 'propagate' or 'search'
    row: Optional[int] = None
    col: Optional[int] = None
    value: Optional[int] = None
    candidates: Optional[int] = None  # Number of available values at the cell
    depth: Optional[int] = None  # Search recursion depth
    empty_cells: Optional[int] = None
    reason: Optional[str] = None


# Called with the recorded step and the grid it happened on (watch mode).
Observer = Callable[[TraceStep, Any], None]


class Tracer:
    """Records solver steps for logging and analysis."""

    def __init__(self, enabled: bool = True, observer: Optional[Observer] = None):
        self.enabled = enabled
        self.observer = observer
        self.steps: List[TraceStep] = []
        self.start_time = datetime.now().timestamp()
        self.step_counter = 0

    def _get_timestamp(self) -> float:
        """Get elapsed time in seconds since tracer creation."""
        return datetime.now().timestamp() - self.start_time

    def _record(self, grid: Any = None, **fields: Any) -> None:
        self.step_counter += 1
        step = TraceStep(
            timestamp=self._get_timestamp(),
            step_number=self.step_counter,
            **fields,
        )
        self.steps.append(step)
        if self.observer is not None and grid is not None:
            self.observer(step, grid)

    def log_place(self, row: int, col: int, value: int, grid: Any = None):
        """Log a forced placement made by propagation."""
        if not self.enabled:
            return
        self._record(
            grid,
            action_type='place',
            phase='propagate',
            row=row,
            col=col,
            value=value,
            candidates=1,
        )

    def log_guess(self, row: int, col: int, value: int, candidates: int, depth: int, grid: Any = None):
        """Log a trial value tried by the search."""
        if not self.enabled:
            return
        self._record(
            grid,
            action_type='guess',
            phase='search',
            row=row,
            col=col,
            value=value,
            candidates=candidates,
            depth=depth,
        )

    def log_dead_end(self, row: int, col: int, depth: int, grid: Any = None):
        """Log an empty cell with no available values."""
        if not self.enabled:
            return
        self._record(
            grid,
            action_type='dead_end',
            phase='search',
            row=row,
            col=col,
            candidates=0,
            depth=depth,
            reason="No available values",
        )

    def log_backtrack(self, row: Optional[int], col: Optional[int], depth: int, reason: str = "All candidates failed"):
        """Log a backtrack event."""
        if not self.enabled:
            return
        self._record(
            action_type='backtrack',
            phase='search',
            row=row,
            col=col,
            depth=depth,
            reason=reason,
        )

    def log_solution_found(self, phase: str, grid: Any = None):
        """Log when a solution is found."""
        if not self.enabled:
            return
        self._record(
            grid,
            action_type='solution_found',
            phase=phase,
            empty_cells=0,
        )

    def log_unsolved(self, phase: Optional[str], empty_cells: int, reason: str = ""):
        """Log a phase giving up with cells still empty."""
        if not self.enabled:
            return
        self._record(
            action_type='unsolved',
            phase=phase,
            empty_cells=empty_cells,
            reason=reason,
        )

    def to_csv(self, filepath: Path) -> None:
        """Write trace to CSV file."""
        if not self.steps:
            print("No trace steps to write")
            return

        filepath = Path(filepath)
        filepath.parent.mkdir(parents=True, exist_ok=True)

        fieldnames = [
            'timestamp', 'step_number', 'action_type', 'phase', 'row', 'col',
            'value', 'candidates', 'depth', 'empty_cells', 'reason'
        ]

        with open(filepath, 'w', newline='', encoding='utf-8') as f:
            writer = csv.DictWriter(f, fieldnames=fieldnames)
            writer.writeheader()

            for step in self.steps:
                writer.writerow(asdict(step))

        print(f"Trace written to {filepath} ({len(self.steps)} steps)")

    def summary(self) -> Dict[str, Any]:
        """Get a summary of the trace."""
        action_counts = {}
        for step in self.steps:
            action_counts[step.action_type] = action_counts.get(step.action_type, 0) + 1

        return {
            'total_steps': len(self.steps),
            'elapsed_time_seconds': self._get_timestamp(),
            'action_counts': action_counts,
            'num_placements': action_counts.get('place', 0),
            'num_guesses': action_counts.get('guess', 0),
            'num_backtracks': action_counts.get('backtrack', 0),
        }


# Global tracer instance
_global_tracer: Optional[Tracer] = None


def get_tracer() -> Tracer:
    """Get or create the global tracer."""
    global _global_tracer
    if _global_tracer is None:
        _global_tracer = Tracer(enabled=False)
    return _global_tracer


def reset_tracer(enabled: bool = False, observer: Optional[Observer] = None) -> None:
    """
    Reset the global tracer. It records nothing unless `enabled`; library calls
    that pass no tracer of their own then keep no step history.
    """
    global _global_tracer
    _global_tracer = Tracer(enabled=enabled, observer=observer)


def enable_tracing(enabled: bool = True) -> None:
    """Enable or disable tracing."""
    get_tracer().enabled = enabled
