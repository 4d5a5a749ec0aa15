"""Immutable record of a finished (or aborted) match."""

from __future__ import annotations

from dataclasses import dataclass

from konane.core.enums import Side
from konane.game.interfaces import EndReason


@dataclass(frozen=True, slots=True)
class MatchResult:
    """Created once when a match ends; read-only afterwards.

    ``winner`` is ``None`` only for an aborted match.
    """

    total_time_ms: int
    width: int
    height: int
    white_name: str
    white_time_left_ms: int
    black_name: str
    black_time_left_ms: int
    winner: Side | None
    move_pairs: int
    reason: EndReason

    @property
    def aborted(self) -> bool:
        return self.winner is None

    @property
    def loser(self) -> Side | None:
        return None if self.winner is None else self.winner.opponent

    def name_of(self, side: Side) -> str:
        return self.white_name if side is Side.WHITE else self.black_name

    def time_left_of(self, side: Side) -> int:
        if side is Side.WHITE:
            return self.white_time_left_ms
        return self.black_time_left_ms

    @property
    def winner_name(self) -> str | None:
        return None if self.winner is None else self.name_of(self.winner)

    @property
    def loser_name(self) -> str | None:
        loser = self.loser
        return None if loser is None else self.name_of(loser)

    def summary(self) -> str:
        """One-line description suitable for a status line."""
        board = f"{self.width}x{self.height}"
        if self.winner is None:
            return (
                f"{self.white_name} (WHITE) vs {self.black_name} (BLACK) on {board}: "
                f"{self.reason.description}"
            )
        return (
            f"{self.winner_name} ({self.winner!s}) beat {self.loser_name} on {board} "
            f"after {self.move_pairs} move pairs: {self.reason.description} "
            f"[WHITE {self.white_time_left_ms} ms, BLACK {self.black_time_left_ms} ms left]"
        )
