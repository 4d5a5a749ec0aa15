"""Reference players shipped with the package."""

from __future__ import annotations

import random
import threading

from konane.core.board import Board
from konane.core.enums import Side
from konane.core.move import Move
from konane.core.move_generator import MoveGenerator
from konane.game.interfaces import IPlayer


class _BuiltinPlayer(IPlayer):
    __slots__ = ("_side", "_cancel_event")

    def __init__(self, side: Side) -> None:
        if not side.is_player:
            raise ValueError(f"Players need a playing side, got {side!s}")
        self._side = side
        self._cancel_event = threading.Event()

    @property
    def side(self) -> Side:
        return self._side

    def cancel(self) -> None:
        self._cancel_event.set()


class RandomPlayer(_BuiltinPlayer):
    """Picks a uniformly random legal move; forfeits when it has none."""

    __slots__ = ("_rng",)

    def __init__(self, side: Side, seed: int | None = None) -> None:
        super().__init__(side)
        self._rng = random.Random(seed)

    def decide(self, board: Board, allowance_ms: int) -> Move | None:
        moves = MoveGenerator(board).all_moves(self._side)
        if not moves:
            return Move.forfeit(self._side)
        return self._rng.choice(moves)


class FirstMovePlayer(_BuiltinPlayer):
    """Always plays the first move in enumeration order. Deterministic."""

    __slots__ = ()

    def decide(self, board: Board, allowance_ms: int) -> Move | None:
        moves = MoveGenerator(board).all_moves(self._side)
        if not moves:
            return Move.forfeit(self._side)
        return moves[0]


class MobilityPlayer(_BuiltinPlayer):
    """One-ply search: minimise the opponent's replies, then maximise our own.

    Ties keep enumeration order. Stops early and returns its best move so
    far once :meth:`cancel` is called.
    """

    __slots__ = ()

    def decide(self, board: Board, allowance_ms: int) -> Move | None:
        self._cancel_event.clear()
        side = self._side
        moves = MoveGenerator(board).all_moves(side)
        if not moves:
            return Move.forfeit(side)

        best = moves[0]
        best_key: tuple[int, int] | None = None
        for move in moves:
            if self._cancel_event.is_set():
                break
            after = board.copy()
            after.make_move(move)
            gen = MoveGenerator(after)
            replies = len(gen.all_moves(side.opponent))
            if replies == 0:
                return move
            key = (replies, -len(gen.all_moves(side)))
            if best_key is None or key < best_key:
                best, best_key = move, key
        return best
