"""Cell type alias, board limits and coordinate helpers.

Cells are ``(col, row)`` tuples. Column 0 is the left edge and row 0 the
top edge; "down" means increasing row numbers.
"""

from __future__ import annotations

from typing import TypeAlias

Cell: TypeAlias = tuple[int, int]

MAX_COLS = 127
MAX_ROWS = 127
MIN_SIDE_LENGTH = 2

MAX_COMMENT_LENGTH = 22

OFF_BOARD: Cell = (-1, -1)


def clamp_dimension(value: int, maximum: int) -> int:
    """Clamp a board dimension into ``[MIN_SIDE_LENGTH, maximum]``."""
    return max(MIN_SIDE_LENGTH, min(int(value), maximum))


def centre_cells(width: int, height: int) -> tuple[Cell, Cell]:
    """The two cells emptied at the start of a game."""
    col = (width - 1) // 2
    row = (height - 1) // 2
    return (col, row), (col + 1, row)


def cell_name(cell: Cell) -> str:
    """Human-readable ``(col,row)`` form used in status lines."""
    return f"({cell[0]},{cell[1]})"
