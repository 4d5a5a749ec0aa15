"""Tests for PlayerClient packet handling."""

from __future__ import annotations

import pytest

from konane.config import KonaneConfig
from konane.core.board import Board
from konane.core.enums import Side
from konane.core.move import Move
from konane.game.client import PlayerClient
from konane.game.display import RecordingDisplay
from konane.game.interfaces import IPlayer
from konane.game.registry import PlayerRegistry
from konane.protocol.codec import (
    BoardPacket,
    BoardSyncPacket,
    ControlPacket,
    MovePacket,
    NamePacket,
    TimePacket,
    TurnReplyPacket,
)
from konane.protocol.opcodes import Opcode


def _client(
    side: Side = Side.WHITE, display: RecordingDisplay | None = None
) -> PlayerClient:
    return PlayerClient(
        side, registry=PlayerRegistry(), config=KonaneConfig(), display=display
    )


def _ready(client: PlayerClient, name: str = "first", width: int = 4, height: int = 4) -> None:
    client.handle(NamePacket(name))
    client.handle(TimePacket(10_000))
    client.handle(BoardPacket(width, height))


class TestClientSetup:
    def test_empty_side_rejected(self) -> None:
        with pytest.raises(ValueError):
            PlayerClient(Side.EMPTY, registry=PlayerRegistry())

    def test_ports_from_config(self) -> None:
        config = KonaneConfig(white_port=4000, black_port=4001)
        assert PlayerClient(Side.WHITE, config=config).port == 4000
        assert PlayerClient(Side.BLACK, config=config).port == 4001

    def test_handshake_acks(self) -> None:
        client = _client()
        assert client.handle(NamePacket("first")) == ControlPacket(Opcode.NAME_ACK)
        assert client.handle(TimePacket(5000)) == ControlPacket(Opcode.TIME_ACK)
        assert client.handle(BoardPacket(6, 4)) == ControlPacket(Opcode.BOARD_ACK)
        assert client.player_name == "first"
        assert client.budget is not None and client.budget.remaining_ms == 5000
        assert client.board == Board.initial(6, 4)

    def test_unknown_player_still_acked(self) -> None:
        display = RecordingDisplay()
        client = _client(display=display)
        assert client.handle(NamePacket("nobody")) == ControlPacket(Opcode.NAME_ACK)
        assert client.player_name is None
        assert display.contains("Could not load player 'nobody'.")

    def test_board_sync_replaces_board(self) -> None:
        client = _client()
        _ready(client)
        board = Board.initial(4, 4)
        board.make_move(Move(1, 3, 1, 1, Side.WHITE))
        reply = client.handle(BoardSyncPacket.from_board(board))
        assert reply == ControlPacket(Opcode.BOARD_SYNC_ACK)
        assert client.board == board

    def test_messages_prefixed_with_side(self) -> None:
        display = RecordingDisplay()
        client = _client(Side.BLACK, display=display)
        client.handle(TimePacket(5000))
        assert display.messages == ["[BLACK] Received time: 5000"]


class TestClientTurns:
    def test_begin_turn_returns_move_and_applies_it(self) -> None:
        client = _client()
        _ready(client)
        reply = client.handle(ControlPacket(Opcode.BEGIN_TURN))
        assert reply == TurnReplyPacket(1, 3, 1, 1)
        assert client.board is not None
        assert client.board.token_at(1, 1) == Side.WHITE
        assert client.budget is not None and client.budget.remaining_ms <= 10_000

    def test_begin_turn_without_setup_is_error(self) -> None:
        reply = _client().handle(ControlPacket(Opcode.BEGIN_TURN))
        assert reply == TurnReplyPacket.from_move(Move.error(Side.WHITE))

    def test_no_moves_forfeits(self) -> None:
        client = _client()
        _ready(client, width=2, height=2)
        reply = client.handle(ControlPacket(Opcode.BEGIN_TURN))
        assert reply == TurnReplyPacket.from_move(Move.forfeit(Side.WHITE))

    def test_exhausted_budget_reports_time(self) -> None:
        client = _client()
        _ready(client)
        assert client.budget is not None
        client.budget.charge(10_001)
        reply = client.handle(ControlPacket(Opcode.BEGIN_TURN))
        assert reply == TurnReplyPacket.from_move(Move.time_exceeded(Side.WHITE))

    def test_invalid_player_move_is_error(self) -> None:
        registry = PlayerRegistry()
        registry.register("bad", lambda side: _FixedPlayer(side, Move(0, 0, 2, 0, side)))
        client = PlayerClient(Side.WHITE, registry=registry, config=KonaneConfig())
        _ready(client, name="bad")
        before = client.board.copy() if client.board else None
        reply = client.handle(ControlPacket(Opcode.BEGIN_TURN))
        assert reply == TurnReplyPacket.from_move(Move.error(Side.WHITE))
        assert client.board == before


class TestClientRelay:
    def test_opponent_move_applied_and_acked(self) -> None:
        client = _client(Side.BLACK)
        _ready(client)
        reply = client.handle(MovePacket(1, 3, 1, 1, Side.WHITE))
        assert reply == ControlPacket(Opcode.MOVE_ACK)
        assert client.board is not None
        assert client.board.token_at(1, 1) == Side.WHITE

    def test_illegal_relay_not_acked(self) -> None:
        client = _client(Side.BLACK)
        _ready(client)
        assert client.handle(MovePacket(0, 0, 2, 0, Side.WHITE)) is None

    def test_relay_without_board_not_acked(self) -> None:
        assert _client(Side.BLACK).handle(MovePacket(1, 3, 1, 1, Side.WHITE)) is None


class TestClientControl:
    def test_end_turn_acked(self) -> None:
        reply = _client().handle(ControlPacket(Opcode.END_TURN))
        assert reply == ControlPacket(Opcode.END_TURN_ACK)

    def test_reset_clears_state(self) -> None:
        client = _client()
        _ready(client)
        assert client.handle(ControlPacket(Opcode.RESET)) is None
        assert client.board is None
        assert client.budget is None
        assert client.player_name is None

    def test_disconnect_not_acked(self) -> None:
        assert _client().handle(ControlPacket(Opcode.DISCONNECT)) is None

    def test_stray_ack_ignored(self) -> None:
        assert _client().handle(ControlPacket(Opcode.MOVE_ACK)) is None


class _FixedPlayer(IPlayer):
    """Always plays the same move."""

    def __init__(self, side: Side, move: Move) -> None:
        self._side = side
        self._move = move

    @property
    def side(self) -> Side:
        return self._side

    def decide(self, board: Board, allowance_ms: int) -> Move | None:
        return self._move
