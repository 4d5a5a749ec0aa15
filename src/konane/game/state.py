"""MatchState — the referee shared by networked and local matches.

Owns the authoritative board and both time budgets, judges each move for
the side to move, and records the outcome. It never talks to peers or
players itself; :class:`~konane.game.coordinator.TurnCoordinator` and
:class:`~konane.game.simulator.LocalMatch` feed it moves.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from konane.core.board import Board
from konane.core.enums import Side
from konane.core.move import Move
from konane.core.move_generator import MoveGenerator
from konane.core.notation import board_to_text
from konane.errors import RuleViolation
from konane.game.clock import TimeBudget
from konane.game.display import NullDisplay
from konane.game.interfaces import DisplaySink, EndReason, MatchPhase
from konane.game.result import MatchResult

_LOGGER = logging.getLogger(__name__)

# ── Event definitions ────────────────────────────────────────────────────────

MoveCallback = Callable[[Move, Board], None]  # applied move, board after it
GameOverCallback = Callable[[MatchResult], None]
PhaseCallback = Callable[[MatchPhase], None]


@dataclass
class MatchEvents:
    """Observable callbacks. Multiple handlers per event."""

    on_move: list[MoveCallback] = field(default_factory=list)
    on_game_over: list[GameOverCallback] = field(default_factory=list)
    on_phase_changed: list[PhaseCallback] = field(default_factory=list)


# ── State ────────────────────────────────────────────────────────────────────


class MatchState:
    """Board, budgets and outcome of one match.

    Args:
        width, height: Board dimensions (clamped by :class:`Board`).
        total_ms: Time budget granted to each side.
        white_name, black_name: Player identifiers.
        display: Sink for human-readable status lines.
        verbose: Include rule-violation reasons and board renderings.
    """

    __slots__ = (
        "_board",
        "_budgets",
        "_names",
        "_total_ms",
        "_phase",
        "_to_move",
        "_move_pairs",
        "_result",
        "_display",
        "_verbose",
        "events",
    )

    def __init__(
        self,
        width: int,
        height: int,
        total_ms: int,
        white_name: str,
        black_name: str,
        *,
        display: DisplaySink | None = None,
        verbose: bool = False,
    ) -> None:
        self._board = Board.initial(width, height)
        self._total_ms = int(total_ms)
        self._budgets: dict[Side, TimeBudget] = {
            Side.WHITE: TimeBudget(Side.WHITE, total_ms),
            Side.BLACK: TimeBudget(Side.BLACK, total_ms),
        }
        self._names: dict[Side, str] = {Side.WHITE: white_name, Side.BLACK: black_name}
        self._phase = MatchPhase.CONNECTING
        self._to_move = Side.WHITE
        self._move_pairs = 0
        self._result: MatchResult | None = None
        self._display: DisplaySink = display or NullDisplay()
        self._verbose = verbose
        self.events = MatchEvents()

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def board(self) -> Board:
        return self._board

    @property
    def total_ms(self) -> int:
        return self._total_ms

    @property
    def phase(self) -> MatchPhase:
        return self._phase

    @property
    def side_to_move(self) -> Side:
        return self._to_move

    @property
    def move_pairs(self) -> int:
        return self._move_pairs

    @property
    def result(self) -> MatchResult | None:
        return self._result

    @property
    def is_over(self) -> bool:
        return self._result is not None

    @property
    def verbose(self) -> bool:
        return self._verbose

    def budget(self, side: Side) -> TimeBudget:
        return self._budgets[side]

    def name(self, side: Side) -> str:
        return self._names[side]

    # ── Transitions ──────────────────────────────────────────────────────

    def set_phase(self, phase: MatchPhase) -> None:
        if phase == self._phase:
            return
        self._phase = phase
        for cb in self.events.on_phase_changed:
            cb(phase)

    def show(self, message: str) -> None:
        self._display.show(message)

    def begin_turn(self) -> Side:
        """Enter AWAITING_MOVE for the side to move and announce it."""
        self.set_phase(MatchPhase.AWAITING_MOVE)
        side = self._to_move
        self.show(f"Beginning {side}'s turn. Time left: {self._budgets[side].remaining_ms} ms")
        return side

    def spend(self, elapsed_ms: int, grace_ms: int = 0) -> bool:
        """Charge *elapsed_ms* to the side to move.

        Returns:
            ``False`` if the side is now out of time; the match is then over.
        """
        side = self._to_move
        budget = self._budgets[side]
        remaining = budget.charge(elapsed_ms)
        if budget.exceeds_grace(grace_ms):
            self.show(f"{side} exceeded its time limit ({remaining} ms left).")
            self.finish(side.opponent, EndReason.TIME_EXCEEDED)
            return False
        return True

    def resolve(self, move: Move) -> bool:
        """Judge *move* for the side to move.

        Sentinels end the match in the opponent's favour. A real move is
        applied; an illegal one loses. If the opponent is then left without
        a legal reply the mover wins.

        Returns:
            ``True`` if play continues with the other side.
        """
        side = self._to_move
        opponent = side.opponent
        self.show(f"Received: {move}")

        if move.is_forfeit:
            self.show(f"{side} forfeited.")
            self.finish(opponent, EndReason.FORFEIT)
            return False
        if move.is_time_exceeded:
            self.show(f"{side} exceeded its time limit.")
            self.finish(opponent, EndReason.TIME_EXCEEDED)
            return False
        if move.is_error:
            self.show(f"{side} returned an invalid move.")
            self.finish(opponent, EndReason.ERROR_MOVE)
            return False

        self.set_phase(MatchPhase.APPLYING)
        try:
            self._board.make_move(move)
        except RuleViolation as exc:
            if self._verbose:
                self.show(str(exc))
            self.show(f"{side} made an illegal move.")
            self.finish(opponent, EndReason.ILLEGAL_MOVE)
            return False

        if side is Side.BLACK:
            self._move_pairs += 1
        if self._verbose:
            self.show(board_to_text(self._board))
        for cb in self.events.on_move:
            cb(move, self._board)

        if not MoveGenerator(self._board).has_moves(opponent):
            self.show(f"{opponent} has no legal moves.")
            self.finish(side, EndReason.NO_MOVES)
            return False

        self._to_move = opponent
        return True

    def finish(self, winner: Side, reason: EndReason) -> MatchResult:
        """Record *winner* and enter TERMINAL. Later calls are ignored."""
        if self._result is not None:
            return self._result
        self._result = self._build_result(winner, reason)
        self.show(f"{winner} won.")
        self.show(self._result.summary())
        _LOGGER.info("Match over: %s", self._result.summary())
        self._conclude(MatchPhase.TERMINAL)
        return self._result

    def abort(self) -> MatchResult:
        """Void the match: no winner is recorded."""
        if self._result is not None:
            return self._result
        self._result = self._build_result(None, EndReason.ABORTED)
        self.show("Match aborted.")
        _LOGGER.warning("Match aborted: %s", self._result.summary())
        self._conclude(MatchPhase.ABORTED)
        return self._result

    # ── Internal helpers ─────────────────────────────────────────────────

    def _build_result(self, winner: Side | None, reason: EndReason) -> MatchResult:
        return MatchResult(
            total_time_ms=self._total_ms,
            width=self._board.width,
            height=self._board.height,
            white_name=self._names[Side.WHITE],
            white_time_left_ms=self._budgets[Side.WHITE].remaining_ms,
            black_name=self._names[Side.BLACK],
            black_time_left_ms=self._budgets[Side.BLACK].remaining_ms,
            winner=winner,
            move_pairs=self._move_pairs,
            reason=reason,
        )

    def _conclude(self, phase: MatchPhase) -> None:
        self.set_phase(phase)
        assert self._result is not None
        for cb in self.events.on_game_over:
            cb(self._result)
