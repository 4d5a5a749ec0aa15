"""LocalMatch — a standalone match between two in-process players.

Both sides run through :class:`PlayerAdapter`, so a player that overruns
its budget, raises or returns nothing is judged exactly as it would be
by the networked coordinator.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

from konane.core.enums import PLAYING_SIDES, Side
from konane.errors import PlayerLoadError
from konane.game.interfaces import DisplaySink, IPlayer, PlayerFactory
from konane.game.player import PlayerAdapter
from konane.game.result import MatchResult
from konane.game.state import MatchEvents, MatchState

if TYPE_CHECKING:
    from konane.game.registry import PlayerRegistry

_LOGGER = logging.getLogger(__name__)


class LocalMatch:
    """Plays one match to completion on the calling thread.

    Args:
        width, height: Board dimensions.
        total_ms: Time budget granted to each side.
        white_name, black_name: Player identifiers, used in results.
        white, black: Factories building each side's player.
        display: Sink for status lines.
        verbose: Show rule-violation reasons, player faults and boards.

    Raises:
        PlayerLoadError: a factory failed to build its player.
    """

    __slots__ = ("_state", "_adapters", "_stop")

    def __init__(
        self,
        width: int,
        height: int,
        total_ms: int,
        white_name: str,
        black_name: str,
        *,
        white: PlayerFactory,
        black: PlayerFactory,
        display: DisplaySink | None = None,
        verbose: bool = False,
    ) -> None:
        self._state = MatchState(
            width,
            height,
            total_ms,
            white_name,
            black_name,
            display=display,
            verbose=verbose,
        )
        factories = {Side.WHITE: white, Side.BLACK: black}
        self._adapters: dict[Side, PlayerAdapter] = {}
        for side in PLAYING_SIDES:
            name = self._state.name(side)
            try:
                player = factories[side](side)
            except PlayerLoadError:
                raise
            except Exception as exc:
                raise PlayerLoadError(f"Cannot create {side} player {name!r}: {exc}") from exc
            if not isinstance(player, IPlayer):
                raise PlayerLoadError(f"{name!r} is not a player: {type(player).__name__}")
            self._adapters[side] = PlayerAdapter(player, side, name)
            self._state.show(f"{side} player loaded: {name}")
        self._stop = threading.Event()

    @classmethod
    def from_names(
        cls,
        width: int,
        height: int,
        total_ms: int,
        white_name: str,
        black_name: str,
        *,
        registry: PlayerRegistry | None = None,
        display: DisplaySink | None = None,
        verbose: bool = False,
    ) -> LocalMatch:
        """Resolve both players through *registry* (the default one if omitted)."""
        from konane.game.registry import default_registry

        registry = registry or default_registry()
        return cls(
            width,
            height,
            total_ms,
            white_name,
            black_name,
            white=registry.resolve(white_name),
            black=registry.resolve(black_name),
            display=display,
            verbose=verbose,
        )

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def state(self) -> MatchState:
        return self._state

    @property
    def events(self) -> MatchEvents:
        return self._state.events

    def adapter(self, side: Side) -> PlayerAdapter:
        return self._adapters[side]

    # ── Play ─────────────────────────────────────────────────────────────

    def play(self) -> MatchResult:
        """Alternate turns until someone wins (or :meth:`stop` is called)."""
        state = self._state
        board = state.board
        state.show(f"Initializing {board.width} by {board.height} board.")
        state.show(f"Time for each player is {state.total_ms} milliseconds.")
        try:
            while not state.is_over:
                if self._stop.is_set():
                    state.abort()
                    break
                self._play_turn()
        finally:
            for adapter in self._adapters.values():
                adapter.close()
        result = state.result
        assert result is not None
        state.show(f"Game lasted {result.move_pairs} move pairs.")
        return result

    def stop(self) -> None:
        """Abort the match before the next turn starts. Thread-safe."""
        self._stop.set()

    def _play_turn(self) -> None:
        state = self._state
        side = state.begin_turn()
        adapter = self._adapters[side]
        decision = adapter.request_move(state.board, state.budget(side).allowance_ms)
        if decision.fault is not None and state.verbose:
            state.show(f"{side}: {decision.fault}")
        if not state.spend(decision.elapsed_ms):
            return
        if state.resolve(decision.move):
            state.show(f"  in {decision.elapsed_ms} milliseconds.")
