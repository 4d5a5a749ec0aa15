"""Move value object, including the sentinel moves used as out-of-band signals."""

from __future__ import annotations

from dataclasses import dataclass

from konane.core.enums import Side
from konane.core.types import MAX_COMMENT_LENGTH, OFF_BOARD, Cell, cell_name

FORFEIT_COMMENT = "**FORFEIT**"
TIME_COMMENT = "**TIME**"
ERROR_COMMENT = "**ERROR**"

SENTINEL_COMMENTS: frozenset[str] = frozenset(
    (FORFEIT_COMMENT, TIME_COMMENT, ERROR_COMMENT)
)


@dataclass(frozen=True, slots=True)
class Move:
    """Immutable jump from ``(initial_col, initial_row)`` to the final cell.

    The comment is cut to 22 characters when the move is built, never later.
    """

    initial_col: int
    initial_row: int
    final_col: int
    final_row: int
    side: Side
    comment: str = ""

    def __post_init__(self) -> None:
        comment = self.comment or ""
        if len(comment) > MAX_COMMENT_LENGTH:
            comment = comment[:MAX_COMMENT_LENGTH]
        object.__setattr__(self, "comment", comment)

    # ── Construction helpers ─────────────────────────────────────────────

    @classmethod
    def between(
        cls, initial: Cell, final: Cell, side: Side, comment: str = ""
    ) -> Move:
        return cls(initial[0], initial[1], final[0], final[1], side, comment)

    @classmethod
    def forfeit(cls, side: Side) -> Move:
        """Voluntary resignation."""
        return cls.between(OFF_BOARD, OFF_BOARD, side, FORFEIT_COMMENT)

    @classmethod
    def time_exceeded(cls, side: Side) -> Move:
        return cls.between(OFF_BOARD, OFF_BOARD, side, TIME_COMMENT)

    @classmethod
    def error(cls, side: Side) -> Move:
        """Stand-in for a faulty, missing or invalid player response."""
        return cls.between(OFF_BOARD, OFF_BOARD, side, ERROR_COMMENT)

    # ── Queries ──────────────────────────────────────────────────────────

    @property
    def initial(self) -> Cell:
        return (self.initial_col, self.initial_row)

    @property
    def final(self) -> Cell:
        return (self.final_col, self.final_row)

    @property
    def is_forfeit(self) -> bool:
        return self.comment == FORFEIT_COMMENT

    @property
    def is_time_exceeded(self) -> bool:
        return self.comment == TIME_COMMENT

    @property
    def is_error(self) -> bool:
        return self.comment == ERROR_COMMENT

    @property
    def is_sentinel(self) -> bool:
        return self.comment in SENTINEL_COMMENTS

    def with_side(self, side: Side) -> Move:
        """Same move attributed to *side*."""
        return Move(
            self.initial_col,
            self.initial_row,
            self.final_col,
            self.final_row,
            side,
            self.comment,
        )

    # ── Display ──────────────────────────────────────────────────────────

    def __str__(self) -> str:
        text = f"{cell_name(self.initial)} to {cell_name(self.final)} for {self.side}"
        if self.comment:
            text += f" with {self.comment}"
        return text
