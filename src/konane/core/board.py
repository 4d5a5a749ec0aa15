"""Board - token placement on a rectangular Konane grid."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from konane.core.enums import Side
from konane.core.move import Move
from konane.core.move_generator import MoveGenerator
from konane.core.types import MAX_COLS, MAX_ROWS, Cell, centre_cells, clamp_dimension
from konane.errors import RuleViolation


class Board:
    """Mutable width×height grid of :class:`Side` values stored row-major.

    A new board is laid out as a checkerboard with WHITE on ``(0, 0)`` and
    the two centre cells of the middle row emptied. Dimensions are clamped
    to ``MAX_COLS`` × ``MAX_ROWS``.
    """

    __slots__ = ("_width", "_height", "_cells")

    def __init__(self, width: int, height: int) -> None:
        self._width = clamp_dimension(width, MAX_COLS)
        self._height = clamp_dimension(height, MAX_ROWS)
        self._cells: list[Side] = []
        self._fill_checkerboard()
        for col, row in centre_cells(self._width, self._height):
            self._cells[self._index(col, row)] = Side.EMPTY

    # -- Factory ------------------------------------------------------------

    @classmethod
    def initial(cls, width: int, height: int) -> Board:
        """Starting position for a *width* × *height* game."""
        return cls(width, height)

    @classmethod
    def from_tokens(cls, width: int, height: int, tokens: Iterable[Side]) -> Board:
        """Build a board from row-major *tokens* (e.g. a Board-sync payload)."""
        board = cls(width, height)
        cells = [Side(token) for token in tokens]
        if len(cells) != board._width * board._height:
            raise ValueError(
                f"Expected {board._width * board._height} tokens, got {len(cells)}"
            )
        board._cells = cells
        return board

    # -- Dimensions ---------------------------------------------------------

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def dimensions(self) -> tuple[int, int]:
        return (self._width, self._height)

    # -- Element access -----------------------------------------------------

    def _index(self, col: int, row: int) -> int:
        return row * self._width + col

    def is_on_board(self, col: int, row: int) -> bool:
        return 0 <= col < self._width and 0 <= row < self._height

    def token_at(self, col: int, row: int) -> Side | None:
        """Token at ``(col, row)``, or ``None`` when the cell is off the board."""
        if not self.is_on_board(col, row):
            return None
        return self._cells[self._index(col, row)]

    def __getitem__(self, cell: Cell) -> Side | None:
        return self.token_at(cell[0], cell[1])

    def __setitem__(self, cell: Cell, side: Side) -> None:
        col, row = cell
        if not self.is_on_board(col, row):
            raise IndexError(f"Cell {cell} is off a {self._width}x{self._height} board")
        self._cells[self._index(col, row)] = Side(side)

    def tokens(self) -> tuple[Side, ...]:
        """All tokens, row by row."""
        return tuple(self._cells)

    def rows(self) -> Iterator[tuple[Side, ...]]:
        for row in range(self._height):
            start = row * self._width
            yield tuple(self._cells[start : start + self._width])

    def cells_of(self, side: Side) -> list[Cell]:
        """Cells holding *side*, row-major."""
        width = self._width
        return [
            (index % width, index // width)
            for index, token in enumerate(self._cells)
            if token == side
        ]

    def count(self, side: Side) -> int:
        return self._cells.count(side)

    # -- Mutation / copying -------------------------------------------------

    def make_move(self, move: Move) -> None:
        """Apply *move* after re-validating it.

        Raises:
            RuleViolation: the move is illegal; the board is left unchanged.
        """
        reason = MoveGenerator(self).explain_illegal(
            move.initial, move.final, move.side
        )
        if reason is not None:
            raise RuleViolation(f"Illegal move {move}: {reason}")

        init_col, init_row = move.initial
        final_col, final_row = move.final
        step_col = _sign(final_col - init_col)
        step_row = _sign(final_row - init_row)

        self._cells[self._index(final_col, final_row)] = move.side
        col, row = init_col, init_row
        while (col, row) != (final_col, final_row):
            self._cells[self._index(col, row)] = Side.EMPTY
            col += step_col
            row += step_row

    def copy(self) -> Board:
        b = Board.__new__(Board)
        b._width = self._width
        b._height = self._height
        b._cells = self._cells.copy()
        return b

    def _fill_checkerboard(self) -> None:
        self._cells = [
            Side.WHITE if (col + row) % 2 == 0 else Side.BLACK
            for row in range(self._height)
            for col in range(self._width)
        ]

    # -- Dunder helpers -----------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self.dimensions == other.dimensions and self._cells == other._cells

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return "\n".join(
            " ".join(token.symbol for token in row) for row in self.rows()
        )


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)
