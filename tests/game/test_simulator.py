"""Tests for LocalMatch."""

from __future__ import annotations

import time

import pytest

from konane.core.board import Board
from konane.core.enums import Side
from konane.core.move import Move
from konane.errors import PlayerLoadError
from konane.game.display import RecordingDisplay
from konane.game.interfaces import EndReason, IPlayer, MatchPhase
from konane.game.registry import PlayerRegistry
from konane.game.simulator import LocalMatch
from konane.players import FirstMovePlayer, RandomPlayer


class _Sleeper(IPlayer):
    def __init__(self, side: Side) -> None:
        self._side = side

    @property
    def side(self) -> Side:
        return self._side

    def decide(self, board: Board, allowance_ms: int) -> Move | None:
        time.sleep(allowance_ms / 1000.0 + 0.2)
        return None


class TestLocalMatch:
    def test_first_vs_first_finishes(self) -> None:
        display = RecordingDisplay()
        match = LocalMatch(
            8, 8, 10_000, "first", "first",
            white=FirstMovePlayer, black=FirstMovePlayer, display=display,
        )
        result = match.play()
        assert result.winner in (Side.WHITE, Side.BLACK)
        assert result.reason == EndReason.NO_MOVES
        assert match.state.phase == MatchPhase.TERMINAL
        assert display.messages[0] == "WHITE player loaded: first"
        assert display.contains("Initializing 8 by 8 board.")
        assert display.messages[-1] == f"Game lasted {result.move_pairs} move pairs."

    def test_deterministic(self) -> None:
        def _play() -> tuple[Side | None, int]:
            result = LocalMatch(
                6, 6, 10_000, "a", "b",
                white=FirstMovePlayer, black=FirstMovePlayer,
            ).play()
            return result.winner, result.move_pairs

        assert _play() == _play()

    def test_random_players_with_seed(self) -> None:
        match = LocalMatch(
            7, 9, 10_000, "r1", "r2",
            white=lambda side: RandomPlayer(side, seed=1),
            black=lambda side: RandomPlayer(side, seed=2),
        )
        result = match.play()
        assert not result.aborted
        assert (result.width, result.height) == (7, 9)

    def test_moves_are_recorded_by_events(self, scripted: type) -> None:
        moves: list[Move] = []
        match = LocalMatch(
            8, 8, 10_000, "w", "b",
            white=lambda side: scripted(side, [Move(3, 5, 3, 3, Side.WHITE)]),
            black=lambda side: scripted(side, []),
        )
        match.events.on_move.append(lambda move, board: moves.append(move))
        result = match.play()
        assert moves == [Move(3, 5, 3, 3, Side.WHITE)]
        assert result.winner == Side.WHITE
        assert result.reason == EndReason.FORFEIT

    def test_null_move_loses(self, scripted: type) -> None:
        match = LocalMatch(
            8, 8, 10_000, "w", "b",
            white=lambda side: scripted(side, [None]),
            black=FirstMovePlayer,
        )
        result = match.play()
        assert result.winner == Side.BLACK
        assert result.reason == EndReason.ERROR_MOVE

    def test_illegal_move_loses(self, scripted: type) -> None:
        match = LocalMatch(
            8, 8, 10_000, "w", "b",
            white=lambda side: scripted(side, [Move(0, 0, 2, 0, Side.WHITE)]),
            black=FirstMovePlayer,
        )
        result = match.play()
        assert result.winner == Side.BLACK
        assert result.reason == EndReason.ILLEGAL_MOVE

    def test_players_receive_snapshots(self, scripted: type) -> None:
        white = scripted(Side.WHITE, [])
        match = LocalMatch(
            8, 8, 10_000, "w", "b",
            white=lambda side: white, black=FirstMovePlayer,
        )
        match.play()
        assert white.boards[0] is not match.state.board

    @pytest.mark.slow
    def test_slow_player_loses_on_time(self) -> None:
        match = LocalMatch(
            8, 8, 100, "sleepy", "first",
            white=_Sleeper, black=FirstMovePlayer,
        )
        result = match.play()
        assert result.winner == Side.BLACK
        assert result.reason == EndReason.TIME_EXCEEDED

    def test_stop_aborts(self) -> None:
        match = LocalMatch(
            8, 8, 10_000, "a", "b",
            white=FirstMovePlayer, black=FirstMovePlayer,
        )
        match.stop()
        result = match.play()
        assert result.aborted
        assert match.state.phase == MatchPhase.ABORTED


class TestLocalMatchLoading:
    def test_factory_error(self) -> None:
        def _broken(side: Side) -> IPlayer:
            raise RuntimeError("no such engine")

        with pytest.raises(PlayerLoadError, match="no such engine"):
            LocalMatch(8, 8, 1000, "x", "y", white=_broken, black=FirstMovePlayer)

    def test_factory_returns_non_player(self) -> None:
        with pytest.raises(PlayerLoadError, match="not a player"):
            LocalMatch(
                8, 8, 1000, "x", "y",
                white=lambda side: object(),  # type: ignore[arg-type,return-value]
                black=FirstMovePlayer,
            )

    def test_from_names(self) -> None:
        registry = PlayerRegistry()
        match = LocalMatch.from_names(6, 6, 5000, "first", "mobility", registry=registry)
        assert isinstance(match.adapter(Side.WHITE).player, FirstMovePlayer)
        assert match.adapter(Side.BLACK).name == "mobility"

    def test_from_names_unknown(self) -> None:
        with pytest.raises(PlayerLoadError, match="Unknown player"):
            LocalMatch.from_names(6, 6, 5000, "first", "nobody", registry=PlayerRegistry())
