"""Core domain layer — Konane board rules with zero external dependencies.

Quick start::

    from konane.core import Board, MoveGenerator, Side

    board = Board.initial(8, 8)
    gen = MoveGenerator(board)
    for move in gen.all_moves(Side.BLACK):
        print(move)
"""

from konane.core.board import Board
from konane.core.enums import PLAYING_SIDES, Direction, Side
from konane.core.move import (
    ERROR_COMMENT,
    FORFEIT_COMMENT,
    SENTINEL_COMMENTS,
    TIME_COMMENT,
    Move,
)
from konane.core.move_generator import MoveGenerator
from konane.core.notation import board_from_text, board_to_text
from konane.core.types import (
    MAX_COLS,
    MAX_COMMENT_LENGTH,
    MAX_ROWS,
    OFF_BOARD,
    Cell,
    cell_name,
    centre_cells,
)

__all__ = [
    # Enums
    "Direction",
    "PLAYING_SIDES",
    "Side",
    # Types / helpers
    "Cell",
    "MAX_COLS",
    "MAX_COMMENT_LENGTH",
    "MAX_ROWS",
    "OFF_BOARD",
    "cell_name",
    "centre_cells",
    # Domain objects
    "Board",
    "Move",
    "MoveGenerator",
    # Sentinel comments
    "ERROR_COMMENT",
    "FORFEIT_COMMENT",
    "SENTINEL_COMMENTS",
    "TIME_COMMENT",
    # Notation
    "board_from_text",
    "board_to_text",
]
