"""Plain-text board notation: one row per line, ``W``/``B``/``_`` tokens."""

from __future__ import annotations

from konane.core.board import Board
from konane.core.enums import Side
from konane.core.types import MAX_COLS, MAX_ROWS, MIN_SIDE_LENGTH

_TOKEN_BY_CHAR: dict[str, Side] = {
    "W": Side.WHITE,
    "B": Side.BLACK,
    "_": Side.EMPTY,
    ".": Side.EMPTY,
}


def board_to_text(board: Board) -> str:
    """Render *board* as space-separated symbols, top row first."""
    return "\n".join(" ".join(token.symbol for token in row) for row in board.rows())


def board_from_text(text: str) -> Board:
    """Parse the output of :func:`board_to_text`.

    Whitespace between tokens is optional, so ``"W_B"`` and ``"W _ B"`` are
    equivalent. Blank lines are ignored.
    """
    rows: list[list[Side]] = []
    for line_no, line in enumerate(text.strip().splitlines(), start=1):
        chars = "".join(line.split())
        if not chars:
            continue
        row: list[Side] = []
        for ch in chars:
            token = _TOKEN_BY_CHAR.get(ch.upper())
            if token is None:
                raise ValueError(f"Invalid board symbol {ch!r} on line {line_no}")
            row.append(token)
        rows.append(row)

    if not rows:
        raise ValueError("Board text is empty")
    width = len(rows[0])
    if any(len(row) != width for row in rows):
        raise ValueError("Board rows have different lengths")
    height = len(rows)
    if not (MIN_SIDE_LENGTH <= width <= MAX_COLS and MIN_SIDE_LENGTH <= height <= MAX_ROWS):
        raise ValueError(f"Unsupported board size {width}x{height}")

    return Board.from_tokens(width, height, (token for row in rows for token in row))
