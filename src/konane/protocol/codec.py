"""Fixed-layout packet encoding and decoding.

Structural fields are fixed width; the trailing name or comment of a packet
has no length prefix and runs to the end of the packet.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import TypeAlias

from konane.core.board import Board
from konane.core.enums import Side
from konane.core.move import Move
from konane.errors import FormatError
from konane.protocol.opcodes import MAX_NAME_LENGTH, MAX_PACKET_LENGTH, Opcode

_OPCODE = struct.Struct(">B")
_TIME = struct.Struct(">q")
_DIMENSIONS = struct.Struct(">BB")
_COORDS = struct.Struct(">4b")
_MOVE = struct.Struct(">4bB")

_TEXT_ENCODING = "ascii"

_CONTROL_OPCODES: frozenset[Opcode] = frozenset(
    (
        Opcode.NAME_ACK,
        Opcode.TIME_ACK,
        Opcode.BEGIN_TURN,
        Opcode.END_TURN,
        Opcode.END_TURN_ACK,
        Opcode.BOARD_ACK,
        Opcode.BOARD_SYNC_ACK,
        Opcode.MOVE_ACK,
        Opcode.DISCONNECT,
        Opcode.RESET,
    )
)


# ── Packet shapes ────────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class ControlPacket:
    """A packet made of its opcode alone (acks, Begin-turn, Reset, ...)."""

    opcode: Opcode

    def __post_init__(self) -> None:
        if self.opcode not in _CONTROL_OPCODES:
            raise ValueError(f"{self.opcode!r} carries a payload")


@dataclass(frozen=True, slots=True)
class NamePacket:
    name: str

    @property
    def opcode(self) -> Opcode:
        return Opcode.NAME


@dataclass(frozen=True, slots=True)
class TimePacket:
    milliseconds: int

    @property
    def opcode(self) -> Opcode:
        return Opcode.TIME


@dataclass(frozen=True, slots=True)
class BoardPacket:
    width: int
    height: int

    @property
    def opcode(self) -> Opcode:
        return Opcode.BOARD


@dataclass(frozen=True, slots=True)
class BoardSyncPacket:
    """Full board contents, row-major."""

    width: int
    height: int
    tokens: tuple[Side, ...]

    @property
    def opcode(self) -> Opcode:
        return Opcode.BOARD_SYNC

    @classmethod
    def from_board(cls, board: Board) -> BoardSyncPacket:
        return cls(board.width, board.height, board.tokens())

    def to_board(self) -> Board:
        return Board.from_tokens(self.width, self.height, self.tokens)


@dataclass(frozen=True, slots=True)
class MovePacket:
    """A move relayed to the opponent's peer, side included."""

    initial_col: int
    initial_row: int
    final_col: int
    final_row: int
    side: Side
    comment: str = ""

    @property
    def opcode(self) -> Opcode:
        return Opcode.MOVE

    @classmethod
    def from_move(cls, move: Move) -> MovePacket:
        return cls(
            move.initial_col,
            move.initial_row,
            move.final_col,
            move.final_row,
            move.side,
            move.comment,
        )

    def to_move(self) -> Move:
        return Move(
            self.initial_col,
            self.initial_row,
            self.final_col,
            self.final_row,
            self.side,
            self.comment,
        )


@dataclass(frozen=True, slots=True)
class TurnReplyPacket:
    """Begin-turn acknowledgment: the mover's answer, side implied by context."""

    initial_col: int
    initial_row: int
    final_col: int
    final_row: int
    comment: str = ""

    @property
    def opcode(self) -> Opcode:
        return Opcode.BEGIN_TURN_ACK

    @classmethod
    def from_move(cls, move: Move) -> TurnReplyPacket:
        return cls(
            move.initial_col,
            move.initial_row,
            move.final_col,
            move.final_row,
            move.comment,
        )

    def to_move(self, side: Side) -> Move:
        return Move(
            self.initial_col,
            self.initial_row,
            self.final_col,
            self.final_row,
            side,
            self.comment,
        )


Packet: TypeAlias = (
    ControlPacket
    | NamePacket
    | TimePacket
    | BoardPacket
    | BoardSyncPacket
    | MovePacket
    | TurnReplyPacket
)


# ── Encoding ─────────────────────────────────────────────────────────────────


def _encode_text(text: str) -> bytes:
    return text.encode(_TEXT_ENCODING, errors="replace")


def _decode_text(data: bytes) -> str:
    return data.decode(_TEXT_ENCODING, errors="replace")


def encode_packet(packet: Packet) -> bytes:
    """Serialise *packet* to its wire form.

    Raises:
        FormatError: a field is out of range for its wire width, or the
            packet would exceed ``MAX_PACKET_LENGTH`` (Board-sync excepted).
    """
    opcode = _OPCODE.pack(packet.opcode)
    try:
        if isinstance(packet, ControlPacket):
            data = opcode
        elif isinstance(packet, NamePacket):
            data = opcode + _encode_text(packet.name)[:MAX_NAME_LENGTH]
        elif isinstance(packet, TimePacket):
            data = opcode + _TIME.pack(packet.milliseconds)
        elif isinstance(packet, BoardPacket):
            data = opcode + _DIMENSIONS.pack(packet.width, packet.height)
        elif isinstance(packet, BoardSyncPacket):
            if len(packet.tokens) != packet.width * packet.height:
                raise FormatError(
                    f"Board-sync carries {len(packet.tokens)} tokens for a "
                    f"{packet.width}x{packet.height} board"
                )
            return (
                opcode
                + _DIMENSIONS.pack(packet.width, packet.height)
                + bytes(int(token) for token in packet.tokens)
            )
        elif isinstance(packet, MovePacket):
            data = (
                opcode
                + _MOVE.pack(
                    packet.initial_col,
                    packet.initial_row,
                    packet.final_col,
                    packet.final_row,
                    packet.side,
                )
                + _encode_text(packet.comment)
            )
        elif isinstance(packet, TurnReplyPacket):
            data = (
                opcode
                + _COORDS.pack(
                    packet.initial_col,
                    packet.initial_row,
                    packet.final_col,
                    packet.final_row,
                )
                + _encode_text(packet.comment)
            )
        else:
            raise FormatError(f"Cannot encode {type(packet).__name__}")
    except struct.error as exc:
        raise FormatError(f"Cannot encode {packet!r}: {exc}") from exc

    if len(data) > MAX_PACKET_LENGTH:
        raise FormatError(
            f"{packet.opcode.name} packet is {len(data)} bytes "
            f"(max {MAX_PACKET_LENGTH})"
        )
    return data


# ── Decoding ─────────────────────────────────────────────────────────────────


def _read_opcode(data: bytes) -> Opcode:
    if not data:
        raise FormatError("Empty packet")
    try:
        return Opcode(data[0])
    except ValueError:
        raise FormatError(f"Unknown opcode {data[0]}") from None


def _require(data: bytes, size: int, opcode: Opcode) -> None:
    if len(data) < size:
        raise FormatError(
            f"{opcode.name} packet too short: {len(data)} bytes, need {size}"
        )


def _read_side(value: int) -> Side:
    try:
        side = Side(value)
    except ValueError:
        raise FormatError(f"Invalid side byte 0x{value:02X}") from None
    if not side.is_player:
        raise FormatError(f"Side byte 0x{value:02X} is not a playing side")
    return side


def decode_packet(data: bytes) -> Packet:
    """Parse one whole packet.

    Raises:
        FormatError: empty input, unknown opcode, a missing fixed field or an
            invalid side or token byte.
    """
    opcode = _read_opcode(data)
    body = data[1:]

    if opcode in _CONTROL_OPCODES:
        return ControlPacket(opcode)

    if opcode is Opcode.NAME:
        return NamePacket(_decode_text(body))

    if opcode is Opcode.TIME:
        _require(data, 1 + _TIME.size, opcode)
        (milliseconds,) = _TIME.unpack_from(body)
        return TimePacket(milliseconds)

    if opcode is Opcode.BOARD:
        _require(data, 1 + _DIMENSIONS.size, opcode)
        width, height = _DIMENSIONS.unpack_from(body)
        return BoardPacket(width, height)

    if opcode is Opcode.BOARD_SYNC:
        _require(data, 1 + _DIMENSIONS.size, opcode)
        width, height = _DIMENSIONS.unpack_from(body)
        raw = body[_DIMENSIONS.size :]
        if len(raw) != width * height:
            raise FormatError(
                f"Board-sync for {width}x{height} carries {len(raw)} tokens"
            )
        try:
            tokens = tuple(Side(value) for value in raw)
        except ValueError as exc:
            raise FormatError(f"Invalid board token: {exc}") from exc
        return BoardSyncPacket(width, height, tokens)

    if opcode is Opcode.MOVE:
        _require(data, 1 + _MOVE.size, opcode)
        i_col, i_row, f_col, f_row, side = _MOVE.unpack_from(body)
        comment = _decode_text(body[_MOVE.size :])
        return MovePacket(i_col, i_row, f_col, f_row, _read_side(side), comment)

    # Opcode.BEGIN_TURN_ACK
    _require(data, 1 + _COORDS.size, opcode)
    i_col, i_row, f_col, f_row = _COORDS.unpack_from(body)
    return TurnReplyPacket(i_col, i_row, f_col, f_row, _decode_text(body[_COORDS.size :]))


def frame_length(data: bytes) -> int | None:
    """Length of the first packet buffered in *data*.

    Returns ``None`` when more bytes are needed. Packets with a trailing
    text field have no length prefix and take everything buffered.
    """
    if not data:
        return None
    opcode = _read_opcode(data)
    if opcode in _CONTROL_OPCODES:
        return 1
    if opcode is Opcode.TIME:
        needed = 1 + _TIME.size
    elif opcode is Opcode.BOARD:
        needed = 1 + _DIMENSIONS.size
    elif opcode is Opcode.BOARD_SYNC:
        if len(data) < 1 + _DIMENSIONS.size:
            return None
        width, height = _DIMENSIONS.unpack_from(data, 1)
        needed = 1 + _DIMENSIONS.size + width * height
    else:
        return len(data)
    return needed if len(data) >= needed else None
