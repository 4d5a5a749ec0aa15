"""TurnCoordinator — drives a networked match between two peer clients.

Connects to both peers, runs the handshake, then alternates Begin-turn
requests, referees every reply through :class:`MatchState` and relays
accepted moves to the other peer. Every failure path ends in a
:class:`MatchResult`; nothing propagates out of :meth:`TurnCoordinator.run`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from konane.config import KonaneConfig, get_config
from konane.core.enums import PLAYING_SIDES, Side
from konane.core.move import Move
from konane.errors import FormatError, ProtocolTimeout, TransportFailure
from konane.game.clock import Stopwatch
from konane.game.interfaces import DisplaySink, EndReason, MatchPhase
from konane.game.result import MatchResult
from konane.game.state import MatchEvents, MatchState
from konane.protocol.codec import (
    BoardPacket,
    BoardSyncPacket,
    MovePacket,
    NamePacket,
    Packet,
    TimePacket,
)
from konane.protocol.opcodes import Opcode
from konane.protocol.peer import PeerConnection
from konane.protocol.transport import connect_peer

_LOGGER = logging.getLogger(__name__)

Connector = Callable[[Side], PeerConnection]


class TurnCoordinator:
    """Authoritative referee for one match played over the network.

    Args:
        width, height: Board dimensions.
        total_ms: Time budget granted to each side.
        white_name, black_name: Player identifiers sent to each peer in the
            Name packet; the peer binds its player from it.
        white_host, black_host: Where the peers listen.
        config: Ports, protocol timeout, time grace and verbosity.
        display: Sink for status lines.
        connector: ``(side) -> PeerConnection``; replaces the TCP connect,
            e.g. to hand in already-connected channels.
    """

    __slots__ = ("_state", "_config", "_hosts", "_peers", "_connector")

    def __init__(
        self,
        width: int,
        height: int,
        total_ms: int,
        white_name: str,
        black_name: str,
        *,
        white_host: str = "localhost",
        black_host: str = "localhost",
        config: KonaneConfig | None = None,
        display: DisplaySink | None = None,
        connector: Connector | None = None,
    ) -> None:
        self._config = config or get_config()
        self._state = MatchState(
            width,
            height,
            total_ms,
            white_name,
            black_name,
            display=display,
            verbose=self._config.verbose,
        )
        self._hosts: dict[Side, str] = {Side.WHITE: white_host, Side.BLACK: black_host}
        self._peers: dict[Side, PeerConnection] = {}
        self._connector = connector or self._connect_tcp

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def state(self) -> MatchState:
        return self._state

    @property
    def events(self) -> MatchEvents:
        return self._state.events

    @property
    def phase(self) -> MatchPhase:
        return self._state.phase

    # ── Match ────────────────────────────────────────────────────────────

    def run(self) -> MatchResult:
        """Play the match to completion and return its result."""
        state = self._state
        try:
            if self._connect_all() and self._handshake():
                while not state.is_over:
                    self._play_turn()
        except Exception as exc:
            _LOGGER.exception("Match failed")
            state.show(f"Match failed: {exc}")
            state.abort()
        finally:
            self._shutdown()
        result = state.result
        assert result is not None
        return result

    def _connect_all(self) -> bool:
        state = self._state
        state.show("Connecting to clients...")
        for side in PLAYING_SIDES:
            try:
                self._peers[side] = self._connector(side)
            except (TransportFailure, ProtocolTimeout) as exc:
                _LOGGER.error("Cannot connect to %s: %s", side, exc)
                state.show(f"Could not connect to {side} client.")
                state.abort()
                return False
            state.show(f"Connected to {side} client.")
        return True

    def _handshake(self) -> bool:
        """Name, Time, Board, Board-sync; each to WHITE then BLACK."""
        state = self._state
        state.set_phase(MatchPhase.HANDSHAKE)
        board = state.board
        steps: list[tuple[str, Callable[[Side], Packet]]] = [
            ("name", lambda side: NamePacket(state.name(side))),
            ("total time", lambda side: TimePacket(state.total_ms)),
            ("board dimensions", lambda side: BoardPacket(board.width, board.height)),
            ("board", lambda side: BoardSyncPacket.from_board(board)),
        ]
        for label, build in steps:
            for side in PLAYING_SIDES:
                state.show(f"Sending {side} {label}.")
                try:
                    self._peers[side].request(
                        build(side), self._config.protocol_timeout_ms
                    )
                except ProtocolTimeout:
                    state.show(f"{side} did not acknowledge its {label}.")
                    state.finish(side.opponent, EndReason.PROTOCOL_TIMEOUT)
                    return False
                except TransportFailure as exc:
                    _LOGGER.error("Handshake with %s failed: %s", side, exc)
                    state.show(f"Lost connection to {side} during handshake.")
                    state.abort()
                    return False
        return True

    def _play_turn(self) -> None:
        state = self._state
        side = state.begin_turn()
        opponent = side.opponent
        stopwatch = Stopwatch()
        try:
            reply = self._peers[side].begin_turn(self._config.protocol_timeout_ms)
        except ProtocolTimeout:
            state.show(f"{side} did not reply in time.")
            state.finish(opponent, EndReason.PROTOCOL_TIMEOUT)
            return
        except TransportFailure as exc:
            _LOGGER.warning("%s disconnected: %s", side, exc)
            state.show(f"{side} disconnected.")
            state.finish(opponent, EndReason.DISCONNECTED)
            return
        except FormatError as exc:
            _LOGGER.warning("Malformed reply from %s: %s", side, exc)
            state.show(f"{side} sent an invalid reply.")
            move = Move.error(side)
        else:
            move = reply.to_move(side)

        if not state.spend(stopwatch.elapsed_ms, self._config.time_grace_ms):
            return
        if state.resolve(move):
            self._relay(move, opponent)

    def _relay(self, move: Move, receiver: Side) -> None:
        """Forward an accepted move to *receiver*, resyncing it if unacknowledged."""
        state = self._state
        peer = self._peers[receiver]
        state.show(f"Sending move to {receiver}.")
        try:
            acked = peer.request(MovePacket.from_move(move), self._config.protocol_timeout_ms)
        except ProtocolTimeout:
            acked = False
        except TransportFailure as exc:
            _LOGGER.warning("%s disconnected: %s", receiver, exc)
            state.show(f"{receiver} disconnected.")
            state.finish(receiver.opponent, EndReason.DISCONNECTED)
            return
        if acked:
            return

        state.show(f"{receiver} did not accept the move; resynchronising its board.")
        try:
            synced = peer.request(
                BoardSyncPacket.from_board(state.board), self._config.protocol_timeout_ms
            )
        except ProtocolTimeout:
            state.show(f"{receiver} stopped responding.")
            state.finish(receiver.opponent, EndReason.PROTOCOL_TIMEOUT)
            return
        except TransportFailure as exc:
            _LOGGER.warning("%s disconnected: %s", receiver, exc)
            state.show(f"{receiver} disconnected.")
            state.finish(receiver.opponent, EndReason.DISCONNECTED)
            return
        if not synced:
            _LOGGER.warning("%s did not acknowledge the board resync", receiver)

    def _shutdown(self) -> None:
        """Reset and disconnect every connected peer, then close the sockets."""
        for side, peer in self._peers.items():
            try:
                peer.notify(Opcode.RESET)
                peer.notify(Opcode.DISCONNECT)
            except TransportFailure as exc:
                _LOGGER.debug("Could not reset %s: %s", side, exc)
            finally:
                peer.close()
        self._peers.clear()

    def _connect_tcp(self, side: Side) -> PeerConnection:
        port = self._config.white_port if side is Side.WHITE else self._config.black_port
        channel = connect_peer(
            self._hosts[side],
            port,
            label=str(side),
            timeout_ms=self._config.protocol_timeout_ms,
        )
        return PeerConnection(channel, side)
