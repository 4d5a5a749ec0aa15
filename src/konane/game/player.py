"""Bounded-time invocation of an external player."""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from dataclasses import dataclass

from konane.core.board import Board
from konane.core.enums import Side
from konane.core.move import Move
from konane.errors import PlayerFault
from konane.game.clock import Deadline, Stopwatch
from konane.game.interfaces import IPlayer

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class MoveDecision:
    """Outcome of one :meth:`PlayerAdapter.request_move` call.

    Attributes:
        move: The player's move, or a sentinel standing in for it.
        elapsed_ms: Wall-clock time from invocation to completion or deadline.
        timed_out: The deadline passed before the player answered.
        fault: Why the player's answer was replaced by an error move.
    """

    move: Move
    elapsed_ms: int
    timed_out: bool = False
    fault: str | None = None


class PlayerAdapter:
    """Runs an :class:`IPlayer` on a worker thread under a hard deadline.

    The player always receives a private copy of the board. Faults and
    ``None`` results become ``**ERROR**`` moves; answers that arrive after
    the deadline become ``**TIME**`` moves and are discarded.

    A computation that overruns its deadline cannot be killed. The adapter
    signals :meth:`IPlayer.cancel`, moves on to a fresh worker and keeps the
    stray future so :meth:`close` can join it.

    Args:
        player: The decision capability to call.
        side: The side the player moves for.
        name: Identifier used in logs and results.
    """

    __slots__ = ("_player", "_side", "_name", "_executor", "_stray")

    def __init__(self, player: IPlayer, side: Side, name: str = "") -> None:
        self._player = player
        self._side = side
        self._name = name or str(side)
        self._executor = self._new_executor()
        self._stray: list[Future[Move | None]] = []

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def player(self) -> IPlayer:
        return self._player

    @property
    def side(self) -> Side:
        return self._side

    @property
    def name(self) -> str:
        return self._name

    @property
    def pending(self) -> int:
        """Overrunning computations that have not finished yet."""
        self._stray = [future for future in self._stray if not future.done()]
        return len(self._stray)

    # ── Invocation ───────────────────────────────────────────────────────

    def request_move(self, board: Board, allowance_ms: int) -> MoveDecision:
        """Ask the player for a move, waiting at most *allowance_ms*."""
        snapshot = board.copy()
        allowance_ms = max(0, int(allowance_ms))
        stopwatch = Stopwatch()
        deadline = Deadline.after(allowance_ms)
        future = self._executor.submit(self._player.decide, snapshot, allowance_ms)

        try:
            result = future.result(timeout=deadline.remaining_seconds())
        except FutureTimeout:
            self._abandon(future)
            _LOGGER.info("%s exceeded its %d ms allowance", self._name, allowance_ms)
            return MoveDecision(
                Move.time_exceeded(self._side),
                max(stopwatch.elapsed_ms, allowance_ms),
                timed_out=True,
            )
        except Exception as exc:
            fault = PlayerFault(f"{self._name} raised {type(exc).__name__}: {exc}")
            _LOGGER.warning("%s", fault, exc_info=exc)
            return MoveDecision(
                Move.error(self._side), stopwatch.elapsed_ms, fault=str(fault)
            )

        elapsed_ms = stopwatch.elapsed_ms
        if elapsed_ms > allowance_ms:
            # finished, but only after the deadline had already passed
            return MoveDecision(
                Move.time_exceeded(self._side), elapsed_ms, timed_out=True
            )

        fault = self._check_result(result)
        if fault is not None:
            _LOGGER.warning("%s: %s", self._name, fault)
            return MoveDecision(Move.error(self._side), elapsed_ms, fault=fault)
        assert isinstance(result, Move)
        return MoveDecision(result, elapsed_ms)

    def _check_result(self, result: object) -> str | None:
        if result is None:
            return "player returned no move"
        if not isinstance(result, Move):
            return f"player returned {type(result).__name__}, not a Move"
        if result.side != self._side:
            return f"player returned a move for {result.side!s}"
        return None

    def _abandon(self, future: Future[Move | None]) -> None:
        try:
            self._player.cancel()
        except Exception:
            _LOGGER.exception("%s failed to cancel", self._name)
        future.cancel()
        self._stray.append(future)
        self._executor.shutdown(wait=False)
        self._executor = self._new_executor()

    def _new_executor(self) -> ThreadPoolExecutor:
        return ThreadPoolExecutor(
            max_workers=1, thread_name_prefix=f"konane-{self._side.name.lower()}"
        )

    # ── Lifecycle ────────────────────────────────────────────────────────

    def close(self, timeout_ms: int | None = 1000) -> bool:
        """Join leftover computations.

        Returns:
            ``True`` if nothing is still running afterwards.
        """
        deadline = Deadline.after(timeout_ms)
        for future in self._stray:
            try:
                future.result(timeout=deadline.remaining_seconds())
            except FutureTimeout:
                break
            except Exception:
                _LOGGER.debug("%s: abandoned computation failed", self._name, exc_info=True)
        self._executor.shutdown(wait=False)
        still_running = self.pending
        if still_running:
            _LOGGER.warning(
                "%s: %d computation(s) still running after close", self._name, still_running
            )
        return still_running == 0

    def __enter__(self) -> PlayerAdapter:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
