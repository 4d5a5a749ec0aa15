"""Tests for the Qt match worker."""

from __future__ import annotations

from PyQt6.QtTest import QSignalSpy

from konane.game.interfaces import EndReason
from konane.game.registry import PlayerRegistry
from konane.game.result import MatchResult
from konane.ui.qt_bridge import MatchWorker, QtDisplaySink


class TestQtDisplaySink:
    def test_show_emits(self, qapp: object) -> None:
        sink = QtDisplaySink()
        spy = QSignalSpy(sink.message)
        sink.show("hello")
        assert len(spy) == 1
        assert spy[0][0] == "hello"


class TestMatchWorker:
    def test_play_emits_progress_and_result(self, qapp: object) -> None:
        worker = MatchWorker(registry=PlayerRegistry())
        status = QSignalSpy(worker.status)
        boards = QSignalSpy(worker.board_changed)
        moves = QSignalSpy(worker.move_applied)
        finished = QSignalSpy(worker.match_finished)
        failed = QSignalSpy(worker.match_failed)

        worker.play(6, 6, 5000, "first", "first")

        assert len(finished) == 1
        result = finished[0][0]
        assert isinstance(result, MatchResult)
        assert result.reason == EndReason.NO_MOVES
        assert len(failed) == 0
        assert len(moves) >= 1
        assert len(boards) == len(moves) + 1
        width, height, tokens = boards[0]
        assert (width, height) == (6, 6)
        assert len(tokens) == 36
        assert any("Game lasted" in status[i][0] for i in range(len(status)))

    def test_unknown_player_fails(self, qapp: object) -> None:
        worker = MatchWorker(registry=PlayerRegistry())
        finished = QSignalSpy(worker.match_finished)
        failed = QSignalSpy(worker.match_failed)

        worker.play(6, 6, 5000, "first", "nobody")

        assert len(finished) == 0
        assert len(failed) == 1
        assert "nobody" in failed[0][0]

    def test_request_stop_without_match_is_noop(self, qapp: object) -> None:
        MatchWorker().request_stop()
