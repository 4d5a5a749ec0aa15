"""PlayerClient — the peer that hosts one side's player.

It listens on its side's port, accepts the coordinator and answers every
packet. The client keeps its own copy of the board, validates its player's
moves against it before replying, and applies the opponent's moves relayed
by the coordinator.
"""

from __future__ import annotations

import logging
import threading

from konane.config import KonaneConfig, get_config
from konane.core.board import Board
from konane.core.enums import Side
from konane.core.move import Move
from konane.core.notation import board_to_text
from konane.errors import FormatError, PlayerLoadError, RuleViolation, TransportFailure
from konane.game.clock import TimeBudget
from konane.game.display import NullDisplay
from konane.game.interfaces import DisplaySink
from konane.game.player import PlayerAdapter
from konane.game.registry import PlayerRegistry, default_registry
from konane.protocol.codec import (
    BoardPacket,
    BoardSyncPacket,
    ControlPacket,
    MovePacket,
    NamePacket,
    Packet,
    TimePacket,
    TurnReplyPacket,
)
from konane.protocol.opcodes import Opcode
from konane.protocol.transport import PacketChannel, accept_peer, listen

_LOGGER = logging.getLogger(__name__)


class PlayerClient:
    """Answers the coordinator on behalf of the player for *side*.

    Args:
        side: The side this client plays.
        registry: Resolves the player identifier received in the Name packet.
        config: Ports and verbosity.
        display: Sink for status lines.
    """

    __slots__ = (
        "_side",
        "_registry",
        "_config",
        "_display",
        "_adapter",
        "_budget",
        "_board",
        "_connected",
        "_stop",
    )

    def __init__(
        self,
        side: Side,
        *,
        registry: PlayerRegistry | None = None,
        config: KonaneConfig | None = None,
        display: DisplaySink | None = None,
    ) -> None:
        if not side.is_player:
            raise ValueError(f"A client must play WHITE or BLACK, not {side!s}")
        self._side = side
        self._registry = registry or default_registry()
        self._config = config or get_config()
        self._display: DisplaySink = display or NullDisplay()
        self._adapter: PlayerAdapter | None = None
        self._budget: TimeBudget | None = None
        self._board: Board | None = None
        self._connected = False
        self._stop = threading.Event()

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def side(self) -> Side:
        return self._side

    @property
    def board(self) -> Board | None:
        return self._board

    @property
    def budget(self) -> TimeBudget | None:
        return self._budget

    @property
    def player_name(self) -> str | None:
        return None if self._adapter is None else self._adapter.name

    @property
    def port(self) -> int:
        if self._side is Side.WHITE:
            return self._config.white_port
        return self._config.black_port

    # ── Serving ──────────────────────────────────────────────────────────

    def serve(self, *, host: str = "", port: int | None = None, once: bool = False) -> None:
        """Accept coordinator connections until :meth:`stop` (or after one with *once*)."""
        port = self.port if port is None else port
        server = listen(port, host)
        try:
            while not self._stop.is_set():
                self._show(f"Waiting for connection on port {port}...")
                channel = accept_peer(server, label="coordinator")
                self.handle_connection(channel)
                if once:
                    break
        finally:
            server.close()

    def stop(self) -> None:
        self._stop.set()

    def handle_connection(self, channel: PacketChannel) -> None:
        """Answer packets on *channel* until Disconnect or connection loss."""
        self._connected = True
        with channel:
            while self._connected:
                try:
                    packet = channel.receive(None)
                except FormatError as exc:
                    _LOGGER.warning("Ignoring malformed packet: %s", exc)
                    continue
                except TransportFailure as exc:
                    _LOGGER.info("Coordinator connection ended: %s", exc)
                    break
                reply = self.handle(packet)
                if reply is None:
                    continue
                try:
                    channel.send(reply)
                except TransportFailure as exc:
                    _LOGGER.warning("Cannot reply to coordinator: %s", exc)
                    break
        self._connected = False
        self._reset()

    # ── Packet handling ──────────────────────────────────────────────────

    def handle(self, packet: Packet) -> Packet | None:
        """Process one packet from the coordinator and return the reply, if any."""
        if isinstance(packet, NamePacket):
            self._bind_player(packet.name)
            return ControlPacket(Opcode.NAME_ACK)

        if isinstance(packet, TimePacket):
            self._budget = TimeBudget(self._side, packet.milliseconds)
            self._show(f"Received time: {packet.milliseconds}")
            return ControlPacket(Opcode.TIME_ACK)

        if isinstance(packet, BoardPacket):
            self._board = Board.initial(packet.width, packet.height)
            self._show(
                f"Received board dimensions: {packet.width} cols, {packet.height} rows."
            )
            return ControlPacket(Opcode.BOARD_ACK)

        if isinstance(packet, BoardSyncPacket):
            try:
                self._board = packet.to_board()
            except ValueError as exc:
                _LOGGER.error("Unusable board sync: %s", exc)
                return None
            self._show(f"Received board sync:\n{board_to_text(self._board)}")
            return ControlPacket(Opcode.BOARD_SYNC_ACK)

        if isinstance(packet, MovePacket):
            return self._apply_opponent_move(packet)

        if isinstance(packet, TurnReplyPacket):
            _LOGGER.warning("Unexpected %s from coordinator", packet.opcode.name)
            return None

        opcode = packet.opcode
        if opcode is Opcode.BEGIN_TURN:
            return TurnReplyPacket.from_move(self._take_turn())
        if opcode is Opcode.END_TURN:
            self._show("Forced to end turn.")
            return ControlPacket(Opcode.END_TURN_ACK)
        if opcode is Opcode.RESET:
            self._show("Resetting client.")
            self._reset()
            return None
        if opcode is Opcode.DISCONNECT:
            self._show("Connection closed by coordinator.")
            self._connected = False
            return None
        _LOGGER.warning("Unexpected %s from coordinator", opcode.name)
        return None

    def _bind_player(self, name: str) -> None:
        self._show(f"Received name: {name}")
        if self._adapter is not None:
            self._adapter.close()
            self._adapter = None
        try:
            player = self._registry.create(name, self._side)
        except PlayerLoadError as exc:
            _LOGGER.error("%s", exc)
            self._show(f"Could not load player {name!r}.")
            return
        self._adapter = PlayerAdapter(player, self._side, name)
        self._show("Player loaded.")

    def _take_turn(self) -> Move:
        """Compute, time and locally validate this side's move."""
        side = self._side
        adapter, budget, board = self._adapter, self._budget, self._board
        if adapter is None or budget is None or board is None:
            self._show("Cannot move: no player, time or board.")
            return Move.error(side)

        self._show(f"Beginning turn. Time left: {budget.remaining_ms}")
        decision = adapter.request_move(board, budget.allowance_ms)
        budget.charge(decision.elapsed_ms)
        move = decision.move

        if decision.timed_out or budget.is_exhausted:
            self._show("Player exceeded time limit.")
            return Move.time_exceeded(side)
        if move.is_error:
            self._show("Player returned a null move.")
            return move
        if move.is_forfeit:
            self._show("Player has forfeited.")
            return move
        try:
            board.make_move(move)
        except RuleViolation as exc:
            if self._config.verbose:
                self._show(str(exc))
            self._show("Player returned an invalid move.")
            return Move.error(side)

        self._show(f"Player's move: {move}")
        self._show(f"  in {decision.elapsed_ms} milliseconds. Time left: {budget.remaining_ms}")
        return move

    def _apply_opponent_move(self, packet: MovePacket) -> Packet | None:
        move = packet.to_move()
        self._show(f"Received move: {move}")
        if self._board is None:
            self._show("No board to apply the move to.")
            return None
        try:
            self._board.make_move(move)
        except RuleViolation as exc:
            if self._config.verbose:
                self._show(str(exc))
            self._show("Move failed. Waiting for a board sync.")
            return None
        if self._config.verbose:
            self._show(board_to_text(self._board))
        return ControlPacket(Opcode.MOVE_ACK)

    def _reset(self) -> None:
        if self._adapter is not None:
            self._adapter.close()
        self._adapter = None
        self._budget = None
        self._board = None

    def _show(self, message: str) -> None:
        self._display.show(f"[{self._side}] {message}")
