"""Wire protocol: opcodes, packet codec and deadline-bounded transport."""

from konane.protocol.codec import (
    BoardPacket,
    BoardSyncPacket,
    ControlPacket,
    MovePacket,
    NamePacket,
    Packet,
    TimePacket,
    TurnReplyPacket,
    decode_packet,
    encode_packet,
    frame_length,
)
from konane.protocol.opcodes import MAX_NAME_LENGTH, MAX_PACKET_LENGTH, Opcode
from konane.protocol.peer import PeerConnection
from konane.protocol.transport import PacketChannel, accept_peer, connect_peer, listen

__all__ = [
    "MAX_NAME_LENGTH",
    "MAX_PACKET_LENGTH",
    "Opcode",
    # Packets
    "BoardPacket",
    "BoardSyncPacket",
    "ControlPacket",
    "MovePacket",
    "NamePacket",
    "Packet",
    "TimePacket",
    "TurnReplyPacket",
    "decode_packet",
    "encode_packet",
    "frame_length",
    # Transport
    "PacketChannel",
    "PeerConnection",
    "accept_peer",
    "connect_peer",
    "listen",
]
