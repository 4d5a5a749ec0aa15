"""Request/acknowledge exchanges with one remote peer."""

from __future__ import annotations

import logging
import time
from types import EllipsisType

from konane.core.enums import Side
from konane.errors import FormatError, ProtocolTimeout
from konane.protocol.codec import ControlPacket, Packet, TurnReplyPacket
from konane.protocol.opcodes import Opcode
from konane.protocol.transport import PacketChannel

_LOGGER = logging.getLogger(__name__)


class PeerConnection:
    """The coordinator's view of the peer hosting *side*.

    Every request waits for its acknowledgment before returning. A wrong or
    malformed acknowledgment is logged and reported as ``False``; it does
    not stop the match.

    Acknowledgments of requests that timed out are remembered. If one of
    them shows up later while a different reply is awaited it is skipped,
    so it is never taken as the answer to a newer request.
    """

    __slots__ = ("_channel", "_side", "_late")

    def __init__(self, channel: PacketChannel, side: Side) -> None:
        self._channel = channel
        self._side = side
        self._late: set[Opcode] = set()

    @property
    def side(self) -> Side:
        return self._side

    @property
    def channel(self) -> PacketChannel:
        return self._channel

    @property
    def late_acks(self) -> frozenset[Opcode]:
        """Acknowledgments still owed for requests that timed out."""
        return frozenset(self._late)

    # -- Exchanges ----------------------------------------------------------

    def request(
        self, packet: Packet, timeout_ms: int | None | EllipsisType = ...
    ) -> bool:
        """Send *packet* and wait for the matching acknowledgment.

        Returns:
            ``True`` if the expected ack arrived, ``False`` if something else
            (or garbage) came back.

        Raises:
            ProtocolTimeout: no reply before the deadline.
            TransportFailure: the connection is gone.
        """
        expected = packet.opcode.ack
        self._channel.send(packet)
        try:
            reply = self._await(expected, timeout_ms)
        except FormatError as exc:
            _LOGGER.warning("%s sent a malformed %s: %s", self._side, expected.name, exc)
            return False
        if reply.opcode is not expected:
            _LOGGER.warning(
                "%s answered %s with %s, expected %s",
                self._side,
                packet.opcode.name,
                reply.opcode.name,
                expected.name,
            )
            return False
        return True

    def begin_turn(self, timeout_ms: int | None | EllipsisType = ...) -> TurnReplyPacket:
        """Ask the peer to move and return its reply.

        Raises:
            FormatError: the reply is malformed or is not a Begin-turn ack.
            ProtocolTimeout: no reply before the deadline.
            TransportFailure: the connection is gone.
        """
        self._channel.send(ControlPacket(Opcode.BEGIN_TURN))
        reply = self._await(Opcode.BEGIN_TURN_ACK, timeout_ms)
        if not isinstance(reply, TurnReplyPacket):
            raise FormatError(
                f"{self._side} answered BEGIN_TURN with {reply.opcode.name}"
            )
        return reply

    def notify(self, opcode: Opcode) -> None:
        """Send an unacknowledged control packet (Reset, Disconnect)."""
        self._channel.send(ControlPacket(opcode))

    def close(self) -> None:
        self._channel.close()

    # -- Internal helpers ---------------------------------------------------

    def _await(self, expected: Opcode, timeout_ms: int | None | EllipsisType) -> Packet:
        """Next reply that is not an overdue ack of an earlier request."""
        if timeout_ms is ...:
            timeout_ms = self._channel.timeout_ms
        deadline = None if timeout_ms is None else time.monotonic() + timeout_ms / 1000.0

        while True:
            remaining_ms = (
                None if deadline is None else max(0, int((deadline - time.monotonic()) * 1000))
            )
            try:
                reply = self._channel.receive(remaining_ms)
            except ProtocolTimeout:
                self._late.add(expected)
                raise
            opcode = reply.opcode
            if opcode is not expected and opcode in self._late:
                self._late.discard(opcode)
                _LOGGER.info("Skipping late %s from %s", opcode.name, self._side)
                continue
            return reply

    def __repr__(self) -> str:
        return f"PeerConnection({self._side!s}, {self._channel!r})"
