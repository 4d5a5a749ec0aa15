"""Shared pytest fixtures used across the test suite."""

from __future__ import annotations

import os
import sys
from collections.abc import Iterator
from pathlib import Path

import pytest

# Linux CI runners are often headless. Force an offscreen backend only there.
if (
    sys.platform.startswith("linux")
    and "QT_QPA_PLATFORM" not in os.environ
    and "DISPLAY" not in os.environ
    and "WAYLAND_DISPLAY" not in os.environ
):
    os.environ["QT_QPA_PLATFORM"] = "offscreen"

from konane.core.board import Board  # noqa: E402
from konane.core.enums import Side  # noqa: E402
from konane.core.move import Move  # noqa: E402
from konane.game.interfaces import IPlayer  # noqa: E402


def _is_ui_test(request: pytest.FixtureRequest) -> bool:
    return "ui" in Path(str(request.node.fspath)).parts


@pytest.fixture(scope="session")
def qapp() -> Iterator[object]:
    """Provide a singleton QApplication for UI tests."""
    from PyQt6.QtWidgets import QApplication

    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    yield app


@pytest.fixture(autouse=True)
def _cleanup_qt_widgets(
    request: pytest.FixtureRequest,
) -> Iterator[None]:
    """Ensure UI tests do not leak top-level widgets into the next test."""
    if not _is_ui_test(request):
        yield
        return

    app = request.getfixturevalue("qapp")
    yield

    for widget in list(app.topLevelWidgets()):
        widget.close()
    app.processEvents()


class ScriptedPlayer(IPlayer):
    """Plays a fixed list of moves, then forfeits."""

    def __init__(self, side: Side, moves: list[Move | None] | None = None) -> None:
        self._side = side
        self._moves = list(moves or [])
        self.boards: list[Board] = []

    @property
    def side(self) -> Side:
        return self._side

    def decide(self, board: Board, allowance_ms: int) -> Move | None:
        self.boards.append(board)
        if not self._moves:
            return Move.forfeit(self._side)
        return self._moves.pop(0)


@pytest.fixture
def scripted() -> type[ScriptedPlayer]:
    return ScriptedPlayer
