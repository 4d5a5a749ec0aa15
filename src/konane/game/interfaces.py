"""Abstract interfaces for the match layer.

The coordinator and simulator depend on these ABCs, never on concrete
player or display implementations.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from enum import IntEnum, auto
from typing import TYPE_CHECKING, TypeAlias

from konane.core.enums import Side

if TYPE_CHECKING:
    from konane.core.board import Board
    from konane.core.move import Move


# ── Match FSM states ─────────────────────────────────────────────────────────


class MatchPhase(IntEnum):
    """Finite-state-machine states of one match."""

    CONNECTING = auto()
    HANDSHAKE = auto()
    AWAITING_MOVE = auto()
    APPLYING = auto()
    TERMINAL = auto()
    ABORTED = auto()

    @property
    def is_final(self) -> bool:
        return self in (MatchPhase.TERMINAL, MatchPhase.ABORTED)


class EndReason(IntEnum):
    """Why a match ended."""

    NO_MOVES = auto()  # opponent left without a legal reply
    FORFEIT = auto()
    ERROR_MOVE = auto()
    ILLEGAL_MOVE = auto()
    TIME_EXCEEDED = auto()
    PROTOCOL_TIMEOUT = auto()
    DISCONNECTED = auto()
    ABORTED = auto()

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]


_DESCRIPTIONS: dict[EndReason, str] = {
    EndReason.NO_MOVES: "opponent has no legal moves",
    EndReason.FORFEIT: "forfeit",
    EndReason.ERROR_MOVE: "invalid or missing move",
    EndReason.ILLEGAL_MOVE: "illegal move",
    EndReason.TIME_EXCEEDED: "time exceeded",
    EndReason.PROTOCOL_TIMEOUT: "peer stopped responding",
    EndReason.DISCONNECTED: "peer disconnected",
    EndReason.ABORTED: "match aborted",
}


# ── Abstract interfaces ─────────────────────────────────────────────────────


class IPlayer(ABC):
    """A move-deciding participant bound to one side."""

    @property
    @abstractmethod
    def side(self) -> Side: ...

    @abstractmethod
    def decide(self, board: Board, allowance_ms: int) -> Move | None:
        """Choose a move for :attr:`side` on *board*.

        *board* is a private copy. *allowance_ms* is the time the player has
        left for the whole match. Returning ``None`` or raising counts as an
        error move; :meth:`Move.forfeit` resigns.
        """

    def cancel(self) -> None:
        """Abandon an ongoing computation. No-op unless overridden."""


PlayerFactory: TypeAlias = Callable[[Side], IPlayer]


class DisplaySink(ABC):
    """Receives human-readable match status lines."""

    @abstractmethod
    def show(self, message: str) -> None: ...
