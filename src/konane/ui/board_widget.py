"""BoardWidget — paints a Konane board from row-major tokens."""

from __future__ import annotations

from collections.abc import Sequence

from PyQt6.QtCore import QRectF, QSize, Qt
from PyQt6.QtGui import QColor, QPainter, QPaintEvent, QPen
from PyQt6.QtWidgets import QSizePolicy, QWidget

from konane.core.enums import Side

_LIGHT_SQUARE = QColor("#d9b98c")
_DARK_SQUARE = QColor("#b08a5a")
_GRID = QColor("#5a4630")
_TOKEN_FILL: dict[Side, QColor] = {
    Side.WHITE: QColor("#f4f1ea"),
    Side.BLACK: QColor("#222222"),
}
_TOKEN_OUTLINE: dict[Side, QColor] = {
    Side.WHITE: QColor("#777777"),
    Side.BLACK: QColor("#000000"),
}


class BoardWidget(QWidget):
    """Read-only board view; call :meth:`set_tokens` after every move."""

    _MIN_CELL = 24

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._width = 0
        self._height = 0
        self._tokens: tuple[Side, ...] = ()
        self.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Expanding)

    @property
    def dimensions(self) -> tuple[int, int]:
        return (self._width, self._height)

    def token_at(self, col: int, row: int) -> Side | None:
        if not (0 <= col < self._width and 0 <= row < self._height):
            return None
        return self._tokens[row * self._width + col]

    def set_tokens(self, width: int, height: int, tokens: Sequence[Side]) -> None:
        if len(tokens) != width * height:
            raise ValueError(f"Expected {width * height} tokens, got {len(tokens)}")
        self._width = width
        self._height = height
        self._tokens = tuple(Side(token) for token in tokens)
        self.updateGeometry()
        self.update()

    def clear(self) -> None:
        self._width = self._height = 0
        self._tokens = ()
        self.update()

    def sizeHint(self) -> QSize:
        cols = max(self._width, 8)
        rows = max(self._height, 8)
        return QSize(cols * self._MIN_CELL * 2, rows * self._MIN_CELL * 2)

    def minimumSizeHint(self) -> QSize:
        cols = max(self._width, 2)
        rows = max(self._height, 2)
        return QSize(cols * self._MIN_CELL, rows * self._MIN_CELL)

    # ── Painting ─────────────────────────────────────────────────────────

    def paintEvent(self, event: QPaintEvent | None) -> None:
        del event
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        painter.fillRect(self.rect(), _GRID)
        if not self._tokens:
            painter.end()
            return

        cell = min(self.width() / self._width, self.height() / self._height)
        left = (self.width() - cell * self._width) / 2
        top = (self.height() - cell * self._height) / 2
        margin = cell * 0.14

        for row in range(self._height):
            for col in range(self._width):
                rect = QRectF(left + col * cell, top + row * cell, cell, cell)
                colour = _LIGHT_SQUARE if (col + row) % 2 == 0 else _DARK_SQUARE
                painter.fillRect(rect, colour)
                token = self._tokens[row * self._width + col]
                if token is Side.EMPTY:
                    continue
                painter.setPen(QPen(_TOKEN_OUTLINE[token], 1.5))
                painter.setBrush(_TOKEN_FILL[token])
                painter.drawEllipse(rect.adjusted(margin, margin, -margin, -margin))

        painter.setPen(QPen(_GRID, 1))
        painter.setBrush(Qt.BrushStyle.NoBrush)
        painter.drawRect(QRectF(left, top, cell * self._width, cell * self._height))
        painter.end()
