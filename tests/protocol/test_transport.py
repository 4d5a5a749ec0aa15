"""Tests for PacketChannel and PeerConnection over local socket pairs."""

from __future__ import annotations

import socket
import threading
from collections.abc import Iterator

import pytest

from konane.core.board import Board
from konane.core.enums import Side
from konane.errors import FormatError, ProtocolTimeout, TransportFailure
from konane.protocol.codec import (
    BoardPacket,
    BoardSyncPacket,
    ControlPacket,
    MovePacket,
    NamePacket,
    TimePacket,
    TurnReplyPacket,
    encode_packet,
)
from konane.protocol.opcodes import Opcode
from konane.protocol.peer import PeerConnection
from konane.protocol.transport import PacketChannel, accept_peer, connect_peer, listen


@pytest.fixture
def channels() -> Iterator[tuple[PacketChannel, socket.socket]]:
    near, far = socket.socketpair()
    channel = PacketChannel(near, label="test", timeout_ms=1000)
    yield channel, far
    channel.close()
    far.close()


class TestPacketChannel:
    def test_send(self, channels: tuple[PacketChannel, socket.socket]) -> None:
        channel, far = channels
        channel.send(BoardPacket(8, 8))
        assert far.recv(16) == b"\x08\x08\x08"

    def test_receive(self, channels: tuple[PacketChannel, socket.socket]) -> None:
        channel, far = channels
        far.sendall(encode_packet(TimePacket(5000)))
        assert channel.receive() == TimePacket(5000)

    def test_coalesced_packets_are_split(
        self, channels: tuple[PacketChannel, socket.socket]
    ) -> None:
        channel, far = channels
        far.sendall(b"\x0f\x0e")
        assert channel.receive() == ControlPacket(Opcode.RESET)
        assert channel.receive() == ControlPacket(Opcode.DISCONNECT)

    def test_fragmented_packet_is_joined(
        self, channels: tuple[PacketChannel, socket.socket]
    ) -> None:
        channel, far = channels
        data = encode_packet(TimePacket(123_456))

        def _send_in_halves() -> None:
            far.sendall(data[:3])
            far.sendall(data[3:])

        sender = threading.Thread(target=_send_in_halves)
        sender.start()
        assert channel.receive() == TimePacket(123_456)
        sender.join()

    def test_timeout(self, channels: tuple[PacketChannel, socket.socket]) -> None:
        channel, _far = channels
        with pytest.raises(ProtocolTimeout):
            channel.receive(timeout_ms=50)

    def test_protocol_timeout_is_a_timeout_error(
        self, channels: tuple[PacketChannel, socket.socket]
    ) -> None:
        channel, _far = channels
        with pytest.raises(TimeoutError):
            channel.receive(timeout_ms=10)

    def test_peer_closed(self, channels: tuple[PacketChannel, socket.socket]) -> None:
        channel, far = channels
        far.close()
        with pytest.raises(TransportFailure):
            channel.receive()

    def test_malformed_bytes_are_dropped(
        self, channels: tuple[PacketChannel, socket.socket]
    ) -> None:
        channel, far = channels
        far.sendall(b"\xee")
        with pytest.raises(FormatError):
            channel.receive()
        far.sendall(b"\x0d")
        assert channel.receive() == ControlPacket(Opcode.MOVE_ACK)

    def test_send_after_close(self, channels: tuple[PacketChannel, socket.socket]) -> None:
        channel, _far = channels
        channel.close()
        assert channel.closed
        with pytest.raises(TransportFailure):
            channel.send(ControlPacket(Opcode.RESET))


class TestTcpHelpers:
    def test_listen_connect_accept(self) -> None:
        server = listen(0, "127.0.0.1")
        port = server.getsockname()[1]
        accepted: list[PacketChannel] = []

        def _accept() -> None:
            accepted.append(accept_peer(server, label="coordinator", timeout_ms=2000))

        thread = threading.Thread(target=_accept)
        thread.start()
        client = connect_peer("127.0.0.1", port, label="WHITE", timeout_ms=2000)
        thread.join()
        server.close()
        try:
            client.send(NamePacket("first"))
            assert accepted[0].receive(2000) == NamePacket("first")
        finally:
            client.close()
            accepted[0].close()

    def test_connect_refused(self) -> None:
        server = listen(0, "127.0.0.1")
        port = server.getsockname()[1]
        server.close()
        with pytest.raises(TransportFailure):
            connect_peer("127.0.0.1", port, label="BLACK", timeout_ms=500)

    def test_accept_timeout(self) -> None:
        server = listen(0, "127.0.0.1")
        try:
            with pytest.raises(ProtocolTimeout):
                accept_peer(server, label="coordinator", timeout_ms=50)
        finally:
            server.close()


class TestPeerConnection:
    def test_request_acknowledged(
        self, channels: tuple[PacketChannel, socket.socket]
    ) -> None:
        channel, far = channels
        far.sendall(bytes([Opcode.NAME_ACK]))
        assert PeerConnection(channel, Side.WHITE).request(NamePacket("random"))
        assert far.recv(32) == b"\x00random"

    def test_request_wrong_ack(self, channels: tuple[PacketChannel, socket.socket]) -> None:
        channel, far = channels
        far.sendall(bytes([Opcode.BOARD_ACK]))
        assert not PeerConnection(channel, Side.WHITE).request(TimePacket(10))

    def test_request_garbage_reply(
        self, channels: tuple[PacketChannel, socket.socket]
    ) -> None:
        channel, far = channels
        far.sendall(b"\xee")
        assert not PeerConnection(channel, Side.BLACK).request(TimePacket(10))

    def test_request_timeout(self, channels: tuple[PacketChannel, socket.socket]) -> None:
        channel, _far = channels
        with pytest.raises(ProtocolTimeout):
            PeerConnection(channel, Side.BLACK).request(
                MovePacket(0, 0, 2, 0, Side.WHITE), timeout_ms=50
            )

    def test_late_ack_skipped_by_next_request(
        self, channels: tuple[PacketChannel, socket.socket]
    ) -> None:
        channel, far = channels
        peer = PeerConnection(channel, Side.BLACK)
        with pytest.raises(ProtocolTimeout):
            peer.request(MovePacket(1, 3, 1, 1, Side.WHITE), timeout_ms=50)
        assert peer.late_acks == {Opcode.MOVE_ACK}

        far.sendall(bytes([Opcode.MOVE_ACK, Opcode.BOARD_SYNC_ACK]))
        board = Board.initial(4, 4)
        assert peer.request(BoardSyncPacket.from_board(board), timeout_ms=500)
        assert peer.late_acks == frozenset()

    def test_late_ack_skipped_by_begin_turn(
        self, channels: tuple[PacketChannel, socket.socket]
    ) -> None:
        channel, far = channels
        peer = PeerConnection(channel, Side.WHITE)
        with pytest.raises(ProtocolTimeout):
            peer.request(BoardSyncPacket.from_board(Board.initial(4, 4)), timeout_ms=50)

        far.sendall(bytes([Opcode.BOARD_SYNC_ACK]) + encode_packet(TurnReplyPacket(1, 3, 1, 1)))
        assert peer.begin_turn(timeout_ms=500) == TurnReplyPacket(1, 3, 1, 1)

    def test_expected_ack_not_skipped(
        self, channels: tuple[PacketChannel, socket.socket]
    ) -> None:
        channel, far = channels
        peer = PeerConnection(channel, Side.BLACK)
        with pytest.raises(ProtocolTimeout):
            peer.request(MovePacket(1, 3, 1, 1, Side.WHITE), timeout_ms=50)
        far.sendall(bytes([Opcode.MOVE_ACK]))
        assert peer.request(MovePacket(2, 3, 2, 1, Side.BLACK), timeout_ms=500)

    def test_begin_turn(self, channels: tuple[PacketChannel, socket.socket]) -> None:
        channel, far = channels
        far.sendall(encode_packet(TurnReplyPacket(1, 3, 1, 1, "ok")))
        reply = PeerConnection(channel, Side.WHITE).begin_turn()
        assert reply == TurnReplyPacket(1, 3, 1, 1, "ok")
        assert far.recv(4) == b"\x04"

    def test_begin_turn_wrong_reply(
        self, channels: tuple[PacketChannel, socket.socket]
    ) -> None:
        channel, far = channels
        far.sendall(bytes([Opcode.MOVE_ACK]))
        with pytest.raises(FormatError):
            PeerConnection(channel, Side.WHITE).begin_turn()

    def test_notify(self, channels: tuple[PacketChannel, socket.socket]) -> None:
        channel, far = channels
        peer = PeerConnection(channel, Side.BLACK)
        peer.notify(Opcode.RESET)
        peer.notify(Opcode.DISCONNECT)
        received = b""
        while len(received) < 2:
            received += far.recv(4)
        assert received == b"\x0f\x0e"
