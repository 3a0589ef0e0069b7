"""Sudoku grid model, parsing, and the two-phase solver core."""

from .model import Grid
from .solver_core import SolveResult, propagate, search, solve
from .parser import parse_puzzle

__all__ = [
    "Grid",
    "SolveResult",
    "propagate",
    "search",
    "solve",
    "parse_puzzle",
]
