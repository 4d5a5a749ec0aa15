"""Blocking TCP packet channel with per-read deadlines."""

from __future__ import annotations

import logging
import socket
import time
from types import EllipsisType

from konane.errors import FormatError, ProtocolTimeout, TransportFailure
from konane.protocol.codec import Packet, decode_packet, encode_packet, frame_length

_LOGGER = logging.getLogger(__name__)

_RECV_SIZE = 4096


class PacketChannel:
    """One peer connection exchanging whole packets.

    Reads block on the socket with an explicit timeout instead of polling.
    Bytes past the end of a packet are kept for the next :meth:`receive`.

    Args:
        sock: A connected stream socket. The channel takes ownership.
        label: Name used in log and error messages (e.g. ``"WHITE"``).
        timeout_ms: Default read deadline; ``None`` blocks indefinitely.
    """

    __slots__ = ("_sock", "_buffer", "_label", "_closed", "timeout_ms")

    def __init__(
        self,
        sock: socket.socket,
        *,
        label: str = "peer",
        timeout_ms: int | None = None,
    ) -> None:
        self._sock = sock
        self._buffer = bytearray()
        self._label = label
        self._closed = False
        self.timeout_ms = timeout_ms

    @property
    def label(self) -> str:
        return self._label

    @property
    def closed(self) -> bool:
        return self._closed

    # -- I/O ----------------------------------------------------------------

    def send(self, packet: Packet) -> None:
        """Encode and write *packet*.

        Raises:
            FormatError: the packet cannot be encoded.
            TransportFailure: the socket is closed or the write failed.
        """
        data = encode_packet(packet)
        if self._closed:
            raise TransportFailure(f"Connection to {self._label} is closed")
        try:
            self._sock.sendall(data)
        except OSError as exc:
            raise TransportFailure(f"Send to {self._label} failed: {exc}") from exc
        _LOGGER.debug("-> %s %s", self._label, packet)

    def receive(self, timeout_ms: int | None | EllipsisType = ...) -> Packet:
        """Block until one whole packet arrives.

        Args:
            timeout_ms: Deadline for this read; defaults to :attr:`timeout_ms`.
                ``None`` waits forever.

        Raises:
            ProtocolTimeout: nothing complete arrived before the deadline.
            TransportFailure: the peer closed the connection or the read failed.
            FormatError: the bytes do not form a valid packet.
        """
        if timeout_ms is ...:
            timeout_ms = self.timeout_ms
        deadline = None if timeout_ms is None else time.monotonic() + timeout_ms / 1000.0

        while True:
            try:
                length = frame_length(bytes(self._buffer))
            except FormatError:
                self._buffer.clear()
                raise
            if length is not None:
                data = bytes(self._buffer[:length])
                del self._buffer[:length]
                packet = decode_packet(data)
                _LOGGER.debug("<- %s %s", self._label, packet)
                return packet
            self._fill(deadline)

    def _fill(self, deadline: float | None) -> None:
        if self._closed:
            raise TransportFailure(f"Connection to {self._label} is closed")
        if deadline is None:
            self._sock.settimeout(None)
        else:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                raise ProtocolTimeout(f"No reply from {self._label}")
            self._sock.settimeout(remaining)
        try:
            chunk = self._sock.recv(_RECV_SIZE)
        except socket.timeout as exc:
            raise ProtocolTimeout(f"No reply from {self._label}") from exc
        except OSError as exc:
            raise TransportFailure(f"Read from {self._label} failed: {exc}") from exc
        if not chunk:
            raise TransportFailure(f"{self._label} closed the connection")
        self._buffer.extend(chunk)

    # -- Lifecycle ----------------------------------------------------------

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            self._sock.shutdown(socket.SHUT_RDWR)
        except OSError:
            pass  # already disconnected
        self._sock.close()

    def __enter__(self) -> PacketChannel:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"PacketChannel({self._label!r}, closed={self._closed})"


def connect_peer(
    host: str, port: int, *, label: str, timeout_ms: int | None
) -> PacketChannel:
    """Open a channel to a listening peer.

    Raises:
        TransportFailure: the connection could not be established.
    """
    connect_timeout = None if timeout_ms is None else timeout_ms / 1000.0
    try:
        sock = socket.create_connection((host, port), timeout=connect_timeout)
    except OSError as exc:
        raise TransportFailure(f"Cannot connect to {label} at {host}:{port}: {exc}") from exc
    sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
    _LOGGER.info("Connected to %s at %s:%d", label, host, port)
    return PacketChannel(sock, label=label, timeout_ms=timeout_ms)


def listen(port: int, host: str = "") -> socket.socket:
    """Bound, listening server socket for a peer client."""
    server = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    server.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    try:
        server.bind((host, port))
        server.listen(1)
    except OSError as exc:
        server.close()
        raise TransportFailure(f"Cannot listen on port {port}: {exc}") from exc
    return server


def accept_peer(
    server: socket.socket, *, label: str, timeout_ms: int | None = None
) -> PacketChannel:
    """Wait for the coordinator to connect to *server*.

    Raises:
        ProtocolTimeout: no connection before *timeout_ms*.
        TransportFailure: ``accept`` failed.
    """
    server.settimeout(None if timeout_ms is None else timeout_ms / 1000.0)
    try:
        sock, address = server.accept()
    except socket.timeout as exc:
        raise ProtocolTimeout("No coordinator connected") from exc
    except OSError as exc:
        raise TransportFailure(f"Accept failed: {exc}") from exc
    sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
    _LOGGER.info("Coordinator connected from %s:%d", address[0], address[1])
    return PacketChannel(sock, label=label)
