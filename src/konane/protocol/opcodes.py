"""Wire opcodes and fixed protocol limits."""

from __future__ import annotations

from enum import IntEnum

from konane.core.types import MAX_COMMENT_LENGTH

# opcode + four coordinates + side byte + comment
MAX_PACKET_LENGTH = 1 + 5 + MAX_COMMENT_LENGTH
MAX_NAME_LENGTH = MAX_PACKET_LENGTH - 1


class Opcode(IntEnum):
    """Leading byte of every packet.

    Even values are requests; each request ``n`` is acknowledged with ``n + 1``.
    ``DISCONNECT`` and ``RESET`` are never acknowledged.
    """

    NAME = 0
    NAME_ACK = 1
    TIME = 2
    TIME_ACK = 3
    BEGIN_TURN = 4
    BEGIN_TURN_ACK = 5
    END_TURN = 6
    END_TURN_ACK = 7
    BOARD = 8
    BOARD_ACK = 9
    BOARD_SYNC = 10
    BOARD_SYNC_ACK = 11
    MOVE = 12
    MOVE_ACK = 13
    DISCONNECT = 14
    RESET = 15

    @property
    def is_request(self) -> bool:
        return self.value % 2 == 0 and self < Opcode.DISCONNECT

    @property
    def is_ack(self) -> bool:
        return self.value % 2 == 1 and self < Opcode.DISCONNECT

    @property
    def ack(self) -> Opcode:
        """The acknowledgment opcode expected for this request."""
        if not self.is_request:
            raise ValueError(f"{self.name} is not acknowledged")
        return Opcode(self.value + 1)
