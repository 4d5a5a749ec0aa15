"""Qt application bootstrap helpers."""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from PyQt6.QtWidgets import QApplication

_LOGGER = logging.getLogger(__name__)


def _configure_application(app: QApplication) -> None:
    """Apply app-wide settings."""
    app.setApplicationName("Konane")
    app.setStyle("Fusion")


def run_application(
    width: int,
    height: int,
    total_ms: int,
    white: str,
    black: str,
    *,
    verbose: bool = False,
    argv: list[str] | None = None,
) -> int:
    """Open the match viewer, start the match and run the Qt event loop."""
    from PyQt6.QtWidgets import QApplication

    from konane.ui.match_window import MatchWindow

    app = QApplication.instance() or QApplication(sys.argv if argv is None else argv)
    _configure_application(app)  # type: ignore[arg-type]

    window = MatchWindow(verbose=verbose)
    window.resize(1000, 640)
    window.show()
    _LOGGER.info("Starting %s vs %s on %dx%d", white, black, width, height)
    window.start_match(width, height, total_ms, white, black)

    return app.exec()
