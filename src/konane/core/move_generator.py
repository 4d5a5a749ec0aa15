"""Move legality checks and move enumeration."""

from __future__ import annotations

from typing import TYPE_CHECKING

from konane.core.enums import Direction, Side
from konane.core.move import Move
from konane.core.types import Cell

if TYPE_CHECKING:
    from konane.core.board import Board

_SCAN_ORDER: tuple[Direction, ...] = (
    Direction.DOWN,
    Direction.UP,
    Direction.RIGHT,
    Direction.LEFT,
)


class MoveGenerator:
    """Validates and enumerates jumps on a :class:`Board`.

    The generator never mutates the board it wraps.
    """

    __slots__ = ("_board",)

    def __init__(self, board: Board) -> None:
        self._board = board

    # -- Legality -----------------------------------------------------------

    def is_legal(self, initial: Cell, final: Cell, side: Side) -> bool:
        return self.explain_illegal(initial, final, side) is None

    def is_legal_move(self, move: Move) -> bool:
        return self.is_legal(move.initial, move.final, move.side)

    def explain_illegal(self, initial: Cell, final: Cell, side: Side) -> str | None:
        """Why the jump from *initial* to *final* is illegal, or ``None`` if legal."""
        board = self._board
        if side not in (Side.WHITE, Side.BLACK):
            return f"{side!s} is not a playing side"

        init_col, init_row = initial
        final_col, final_row = final
        if not board.is_on_board(init_col, init_row):
            return f"initial position {initial} is off the board"
        if not board.is_on_board(final_col, final_row):
            return f"final position {final} is off the board"
        if initial == final:
            return "initial and final positions are the same"
        if init_col != final_col and init_row != final_row:
            return "not a straight-line move"

        distance = abs(final_col - init_col) + abs(final_row - init_row)
        if distance % 2 != 0:
            return f"jump covers an odd number of cells ({distance})"

        initial_token = board.token_at(init_col, init_row)
        if initial_token != side:
            return f"initial token at {initial} is {initial_token!s}, expected {side!s}"
        if board.token_at(final_col, final_row) != Side.EMPTY:
            return f"final position {final} is not empty"

        step_col = (final_col > init_col) - (final_col < init_col)
        step_row = (final_row > init_row) - (final_row < init_row)
        opponent = side.opponent
        for hop in range(1, distance, 2):
            jumped = (init_col + step_col * hop, init_row + step_row * hop)
            landed = (jumped[0] + step_col, jumped[1] + step_row)
            jumped_token = board.token_at(*jumped)
            if jumped_token != opponent:
                return (
                    f"jumped position {jumped} is {jumped_token!s}, "
                    f"expected {opponent!s}"
                )
            if board.token_at(*landed) != Side.EMPTY:
                return f"landing position {landed} is not empty"
        return None

    # -- Enumeration --------------------------------------------------------

    def moves_from(self, col: int, row: int, side: Side) -> list[Move]:
        """Jumps available to the *side* token at ``(col, row)``.

        Each direction is scanned outward two cells at a time; every further
        hop in a straight line is its own move, and the scan of a direction
        stops at the first cell pair that does not continue the capture.
        """
        board = self._board
        if side not in (Side.WHITE, Side.BLACK):
            return []
        if board.token_at(col, row) != side:
            return []

        opponent = side.opponent
        moves: list[Move] = []
        append = moves.append
        for direction in _SCAN_ORDER:
            d_col, d_row = direction.delta
            jumped_col, jumped_row = col + d_col, row + d_row
            while True:
                land_col, land_row = jumped_col + d_col, jumped_row + d_row
                if board.token_at(jumped_col, jumped_row) != opponent:
                    break
                if board.token_at(land_col, land_row) != Side.EMPTY:
                    break
                append(Move(col, row, land_col, land_row, side))
                jumped_col, jumped_row = land_col + d_col, land_row + d_row
        return moves

    def all_moves(self, side: Side) -> list[Move]:
        """Every legal move for *side*, row-major by owning cell."""
        moves: list[Move] = []
        for col, row in self._board.cells_of(side):
            moves.extend(self.moves_from(col, row, side))
        return moves

    def has_moves(self, side: Side) -> bool:
        """Whether *side* has at least one legal move."""
        return any(
            self.moves_from(col, row, side) for col, row in self._board.cells_of(side)
        )
