"""Qt bridge to run a local match in a worker thread."""

from __future__ import annotations

import threading

from PyQt6.QtCore import QObject, pyqtBoundSignal, pyqtSignal, pyqtSlot

from konane.core.board import Board
from konane.core.move import Move
from konane.errors import PlayerLoadError
from konane.game.interfaces import DisplaySink
from konane.game.registry import PlayerRegistry
from konane.game.simulator import LocalMatch


class _StatusBus(QObject):
    message = pyqtSignal(str)


class QtDisplaySink(DisplaySink):
    """Display sink that re-emits every status line as a Qt signal.

    Safe to call from any thread; connected slots run on their own thread.
    """

    __slots__ = ("_bus",)

    def __init__(self) -> None:
        self._bus = _StatusBus()

    @property
    def message(self) -> pyqtBoundSignal:
        return self._bus.message

    def show(self, message: str) -> None:
        self._bus.message.emit(message)


class MatchWorker(QObject):
    """Thread-affine worker that plays one :class:`LocalMatch` on demand."""

    status = pyqtSignal(str)
    board_changed = pyqtSignal(int, int, object)  # width, height, row-major tokens
    move_applied = pyqtSignal(object)
    match_finished = pyqtSignal(object)
    match_failed = pyqtSignal(str)

    __slots__ = ("_registry", "_verbose", "_sink", "_match", "_lock")

    def __init__(
        self, *, registry: PlayerRegistry | None = None, verbose: bool = False
    ) -> None:
        super().__init__()
        self._registry = registry
        self._verbose = verbose
        self._sink = QtDisplaySink()
        self._sink.message.connect(self.status)
        self._match: LocalMatch | None = None
        self._lock = threading.Lock()

    @pyqtSlot(int, int, int, str, str)
    def play(self, width: int, height: int, total_ms: int, white: str, black: str) -> None:
        """Play a full match and emit its result."""
        try:
            match = LocalMatch.from_names(
                width,
                height,
                total_ms,
                white,
                black,
                registry=self._registry,
                display=self._sink,
                verbose=self._verbose,
            )
        except PlayerLoadError as exc:
            self.match_failed.emit(str(exc))
            return

        match.events.on_move.append(self._on_move)
        with self._lock:
            self._match = match
        board = match.state.board
        self.board_changed.emit(board.width, board.height, board.tokens())
        try:
            result = match.play()
        finally:
            with self._lock:
                self._match = None
        self.match_finished.emit(result)

    def request_stop(self) -> None:
        """Abort the running match before its next turn. Callable from any thread."""
        with self._lock:
            if self._match is not None:
                self._match.stop()

    def _on_move(self, move: Move, board: Board) -> None:
        self.move_applied.emit(move)
        self.board_changed.emit(board.width, board.height, board.tokens())

