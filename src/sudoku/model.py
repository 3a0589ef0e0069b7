"""Sudoku grid state and the bitmask constraint model."""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

SIZE = 9
BOX = 3

# Bits 0-8: bit (v - 1) set means value v is still available.
ALL_VALUES = 0x1FF

Cells = List[List[int]]


def bit_for_value(value: int) -> int:
    return 1 << (value - 1)


def values_in_mask(mask: int) -> List[int]:
    """Values present in `mask`, ascending."""
    return [value for value in range(1, SIZE + 1) if mask & bit_for_value(value)]


def only_value(mask: int) -> Optional[int]:
    """Return the value if `mask` has exactly one bit set, otherwise None."""
    if mask == 0 or mask & (mask - 1):
        return None
    return mask.bit_length()


def _full_rows() -> List[int]:
    return [ALL_VALUES] * SIZE


def _full_squares() -> List[List[int]]:
    return [[ALL_VALUES] * BOX for _ in range(BOX)]


def _empty_cells() -> Cells:
    return [[0] * SIZE for _ in range(SIZE)]


@dataclass
class Grid:
    """
    A 9x9 grid plus the values still available in every row, column and 3x3 square.

    `cells` holds 0 for an empty cell. The masks are only meaningful after
    `initialize()` has been called on freshly loaded cells; `from_cells` does that.
    """

    cells: Cells = field(default_factory=_empty_cells)
    rows: List[int] = field(default_factory=_full_rows)
    cols: List[int] = field(default_factory=_full_rows)
    squares: List[List[int]] = field(default_factory=_full_squares)

    @classmethod
    def from_cells(cls, cells: Sequence[Sequence[int]]) -> "Grid":
        if len(cells) != SIZE or any(len(row) != SIZE for row in cells):
            raise ValueError(f"Grid must be {SIZE}x{SIZE}")
        grid = cls(cells=[[int(v) for v in row] for row in cells])
        grid.initialize()
        return grid

    def initialize(self) -> None:
        """Recompute every availability mask from the filled cells."""
        self.rows = _full_rows()
        self.cols = _full_rows()
        self.squares = _full_squares()

        for row in range(SIZE):
            for col in range(SIZE):
                value = self.cells[row][col]
                if value == 0:
                    continue
                self._remove_available(row, col, value)

    def available_at(self, row: int, col: int) -> int:
        return self.rows[row] & self.cols[col] & self.squares[row // BOX][col // BOX]

    def place(self, row: int, col: int, value: int) -> None:
        """Fill an empty cell and mark `value` as used in its row, column and square."""
        self.cells[row][col] = value
        self._remove_available(row, col, value)

    def _remove_available(self, row: int, col: int, value: int) -> None:
        bit = bit_for_value(value)
        self.rows[row] &= ~bit
        self.cols[col] &= ~bit
        self.squares[row // BOX][col // BOX] &= ~bit

    def copy(self) -> "Grid":
        return Grid(
            cells=[list(row) for row in self.cells],
            rows=list(self.rows),
            cols=list(self.cols),
            squares=[list(sq) for sq in self.squares],
        )

    def find_empty_cell(self) -> Optional[Tuple[int, int]]:
        """First empty cell in row-major order."""
        for row in range(SIZE):
            for col in range(SIZE):
                if self.cells[row][col] == 0:
                    return row, col
        return None

    def empty_cell_count(self) -> int:
        return sum(1 for row in self.cells for value in row if value == 0)

    def is_complete(self) -> bool:
        return self.find_empty_cell() is None

    def conflicts(self) -> List[Tuple[int, int, int]]:
        """
        Filled cells that repeat a value already seen earlier (row-major) in
        their row, column or square, as (row, col, value) triples.
        """
        seen_rows = [0] * SIZE
        seen_cols = [0] * SIZE
        seen_squares = [[0] * BOX for _ in range(BOX)]
        found: List[Tuple[int, int, int]] = []

        for row in range(SIZE):
            for col in range(SIZE):
                value = self.cells[row][col]
                if value == 0:
                    continue
                bit = bit_for_value(value)
                sq_row, sq_col = row // BOX, col // BOX
                if (seen_rows[row] | seen_cols[col] | seen_squares[sq_row][sq_col]) & bit:
                    found.append((row, col, value))
                seen_rows[row] |= bit
                seen_cols[col] |= bit
                seen_squares[sq_row][sq_col] |= bit
        return found

    def is_consistent(self) -> bool:
        return not self.conflicts()
