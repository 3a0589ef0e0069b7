"""Puzzle parser: convert puzzle text into initialized grids.

Supports:
- the box-drawing format (13 lines, `+-------+-------+-------+` separators)
- 81-character puzzle strings (`0` or `.` for empty cells)
"""

from __future__ import annotations

from typing import Any, Dict, List

from .model import BOX, SIZE, Cells, Grid

BORDER = "+-------+-------+-------+"
BOX_LINES = 13
EMPTY_CHARS = {"0", "."}


def parse_puzzle(puzzle_json: Dict[str, Any]) -> Grid:
    """Build an initialized grid from a loader record (its `puzzle` field)."""
    text = puzzle_json.get("puzzle")
    if not isinstance(text, str) or not text.strip():
        raise ValueError(f"Puzzle {puzzle_json.get('id', '<unknown>')} has no puzzle text")
    source = str(puzzle_json.get("id", "<puzzle>"))
    return Grid.from_cells(parse_text(text, source=source))


def parse_text(text: str, source: str = "<string>") -> Cells:
    """Dispatch on the text's shape: box format if it starts with a border."""
    if text.lstrip().startswith("+"):
        return parse_box_text(text.lstrip("\n"), source=source)
    return parse_puzzle_string(text, source=source)


def parse_puzzle_string(text: str, source: str = "<string>") -> Cells:
    chars = [ch for ch in text if not ch.isspace()]
    if len(chars) != SIZE * SIZE:
        raise ValueError(f"{source}: expected {SIZE * SIZE} cells, got {len(chars)}.")

    values: List[int] = []
    for index, ch in enumerate(chars):
        if ch in EMPTY_CHARS:
            values.append(0)
        elif ch.isdigit():
            values.append(int(ch))
        else:
            raise ValueError(f"{source}: unexpected character {ch!r} at position {index + 1}.")
    return [values[r * SIZE:(r + 1) * SIZE] for r in range(SIZE)]


def parse_box_text(text: str, source: str = "<string>") -> Cells:
    """
    Parse the box-drawing format. Every cell position is preceded by a space;
    a digit there is the cell value, anything else means empty.
    Errors are reported as `<source>:<line>: ...` with 1-based numbers.
    """
    lines = text.split("\n")
    if len(lines) < BOX_LINES or (len(lines) == BOX_LINES and lines[-1] == ""):
        raise ValueError(f"{source}: premature end of file.")

    cells: Cells = [[0] * SIZE for _ in range(SIZE)]

    for line_no in range(BOX_LINES):
        line = lines[line_no].rstrip("\r")
        if line_no % 4 == 0:
            if line != BORDER:
                raise ValueError(f"{source}:{line_no + 1}: format error.")
            continue

        row = line_no * 3 // 4
        pos = 0
        for square in range(BOX):
            _expect(line, pos, "|", source, line_no)
            pos += 1
            for square_col in range(BOX):
                _expect(line, pos, " ", source, line_no)
                pos += 1
                ch = line[pos] if pos < len(line) else " "
                cells[row][square * BOX + square_col] = int(ch) if ch.isdigit() else 0
                pos += 1
            _expect(line, pos, " ", source, line_no)
            pos += 1
        _expect(line, pos, "|", source, line_no)

    return cells


def _expect(line: str, pos: int, expected: str, source: str, line_no: int) -> None:
    if pos >= len(line) or line[pos] != expected:
        what = "a space" if expected == " " else f"'{expected}'"
        raise ValueError(f"{source}:{line_no + 1}: expected {what} in column {pos + 1}.")
