"""Stock display sinks."""

from __future__ import annotations

import logging
import sys
import threading
from typing import TextIO

from konane.game.interfaces import DisplaySink

_LOGGER = logging.getLogger(__name__)


class LoggingDisplay(DisplaySink):
    """Forwards status lines to a logger at INFO level."""

    __slots__ = ("_logger",)

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or _LOGGER

    def show(self, message: str) -> None:
        self._logger.info("%s", message)


class ConsoleDisplay(DisplaySink):
    """Prints status lines to a text stream (stdout by default)."""

    __slots__ = ("_stream", "_lock")

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream
        self._lock = threading.Lock()

    def show(self, message: str) -> None:
        stream = self._stream or sys.stdout
        with self._lock:
            print(message, file=stream, flush=True)


class RecordingDisplay(DisplaySink):
    """Keeps every status line in memory."""

    __slots__ = ("messages",)

    def __init__(self) -> None:
        self.messages: list[str] = []

    def show(self, message: str) -> None:
        self.messages.append(message)

    def contains(self, fragment: str) -> bool:
        return any(fragment in message for message in self.messages)

    def clear(self) -> None:
        self.messages.clear()


class NullDisplay(DisplaySink):
    """Discards everything."""

    __slots__ = ()

    def show(self, message: str) -> None:
        pass
