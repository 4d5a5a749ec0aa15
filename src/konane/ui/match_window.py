"""MatchWindow — watch a local match play out."""

from __future__ import annotations

from collections.abc import Sequence

from PyQt6.QtCore import QThread, pyqtSignal
from PyQt6.QtGui import QCloseEvent, QFont
from PyQt6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QPlainTextEdit,
    QVBoxLayout,
    QWidget,
)

from konane.core.enums import Side
from konane.game.registry import PlayerRegistry
from konane.game.result import MatchResult
from konane.ui.board_widget import BoardWidget
from konane.ui.qt_bridge import MatchWorker

_STOP_WAIT_MS = 3000


class MatchWindow(QMainWindow):
    """Board view, status log and result line for one match at a time."""

    _play_requested = pyqtSignal(int, int, int, str, str)

    def __init__(
        self,
        *,
        registry: PlayerRegistry | None = None,
        verbose: bool = False,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self.setWindowTitle("Konane")
        self._result: MatchResult | None = None
        self._running = False
        self._setup_ui()

        self._thread = QThread(self)
        self._worker = MatchWorker(registry=registry, verbose=verbose)
        self._worker.moveToThread(self._thread)
        self._play_requested.connect(self._worker.play)
        self._worker.status.connect(self.append_status)
        self._worker.board_changed.connect(self.update_board)
        self._worker.match_finished.connect(self.show_result)
        self._worker.match_failed.connect(self.show_failure)
        self._thread.finished.connect(self._worker.deleteLater)
        self._thread.start()

    def _setup_ui(self) -> None:
        central = QWidget(self)
        layout = QHBoxLayout(central)

        self._board = BoardWidget(central)
        layout.addWidget(self._board, stretch=3)

        side_panel = QVBoxLayout()
        self._players = QLabel()
        self._players.setFont(QFont("Adwaita Sans", 12, QFont.Weight.Bold))
        side_panel.addWidget(self._players)

        self._log = QPlainTextEdit()
        self._log.setReadOnly(True)
        self._log.setFont(QFont("AdwaitaMono Nerd Font", 10))
        side_panel.addWidget(self._log, stretch=1)

        self._result_label = QLabel()
        self._result_label.setWordWrap(True)
        side_panel.addWidget(self._result_label)

        layout.addLayout(side_panel, stretch=2)
        self.setCentralWidget(central)

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def board_widget(self) -> BoardWidget:
        return self._board

    @property
    def result(self) -> MatchResult | None:
        return self._result

    @property
    def is_running(self) -> bool:
        return self._running

    def status_lines(self) -> list[str]:
        text = self._log.toPlainText()
        return text.splitlines() if text else []

    # ── Match control ────────────────────────────────────────────────────

    def start_match(
        self, width: int, height: int, total_ms: int, white: str, black: str
    ) -> None:
        """Queue a match on the worker thread."""
        if self._running:
            return
        self._running = True
        self._result = None
        self._log.clear()
        self._board.clear()
        self._result_label.clear()
        self._players.setText(f"{white} (WHITE) vs {black} (BLACK)")
        self._play_requested.emit(width, height, total_ms, white, black)

    def stop_match(self) -> None:
        self._worker.request_stop()

    # ── Slots ────────────────────────────────────────────────────────────

    def append_status(self, message: str) -> None:
        self._log.appendPlainText(message)

    def update_board(self, width: int, height: int, tokens: Sequence[Side]) -> None:
        self._board.set_tokens(width, height, tokens)

    def show_result(self, result: MatchResult) -> None:
        self._running = False
        self._result = result
        self._result_label.setText(result.summary())
        self.statusBar().showMessage(
            "Match aborted" if result.aborted else f"{result.winner_name} wins"
        )

    def show_failure(self, message: str) -> None:
        self._running = False
        self._result_label.setText(message)
        self.statusBar().showMessage("Could not start match")

    def closeEvent(self, event: QCloseEvent | None) -> None:
        self._worker.request_stop()
        self._thread.quit()
        self._thread.wait(_STOP_WAIT_MS)
        super().closeEvent(event)
