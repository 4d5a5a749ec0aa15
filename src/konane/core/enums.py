"""Core enumerations for the Konane domain."""

from __future__ import annotations

from enum import IntEnum


class Side(IntEnum):
    """Owner of a board cell.

    The integer values are the bytes used on the wire. ``BLACK`` happens to
    be the one-byte complement of ``WHITE``; use :attr:`opponent` rather
    than relying on that.
    """

    WHITE = 0x0F
    BLACK = 0xF0
    EMPTY = 0x03

    @property
    def opponent(self) -> Side:
        if self is Side.WHITE:
            return Side.BLACK
        if self is Side.BLACK:
            return Side.WHITE
        raise ValueError("EMPTY has no opponent")

    @property
    def is_player(self) -> bool:
        return self is not Side.EMPTY

    @property
    def symbol(self) -> str:
        """Single-character board symbol: ``W``, ``B`` or ``_``."""
        return _SYMBOLS[self]

    def __str__(self) -> str:
        return self.name


_SYMBOLS: dict[Side, str] = {Side.WHITE: "W", Side.BLACK: "B", Side.EMPTY: "_"}

PLAYING_SIDES: tuple[Side, Side] = (Side.WHITE, Side.BLACK)


class Direction(IntEnum):
    """Axis directions in the order moves are enumerated."""

    DOWN = 0
    UP = 1
    RIGHT = 2
    LEFT = 3

    @property
    def delta(self) -> tuple[int, int]:
        """``(d_col, d_row)`` for a single step."""
        return _DELTAS[self]


_DELTAS: dict[Direction, tuple[int, int]] = {
    Direction.DOWN: (0, 1),
    Direction.UP: (0, -1),
    Direction.RIGHT: (1, 0),
    Direction.LEFT: (-1, 0),
}
