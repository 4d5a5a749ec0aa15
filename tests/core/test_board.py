"""Tests for Board."""

import pytest

from konane.core.board import Board
from konane.core.enums import Side
from konane.core.move import Move
from konane.core.notation import board_from_text
from konane.core.types import MAX_COLS, MAX_ROWS
from konane.errors import RuleViolation


class TestBoardInitial:
    def test_dimensions(self) -> None:
        board = Board.initial(8, 6)
        assert board.width == 8
        assert board.height == 6
        assert board.dimensions == (8, 6)

    def test_white_on_origin(self) -> None:
        board = Board.initial(8, 8)
        assert board.token_at(0, 0) == Side.WHITE
        assert board.token_at(1, 0) == Side.BLACK
        assert board.token_at(0, 1) == Side.BLACK

    def test_exactly_two_empty_cells(self) -> None:
        board = Board.initial(8, 8)
        assert board.count(Side.EMPTY) == 2
        assert board.token_at(3, 3) == Side.EMPTY
        assert board.token_at(4, 3) == Side.EMPTY

    def test_odd_dimensions_centre(self) -> None:
        board = Board.initial(7, 5)
        assert board.cells_of(Side.EMPTY) == [(3, 2), (4, 2)]

    def test_checkerboard_elsewhere(self) -> None:
        board = Board.initial(6, 6)
        empty = set(board.cells_of(Side.EMPTY))
        for row in range(6):
            for col in range(6):
                if (col, row) in empty:
                    continue
                expected = Side.WHITE if (col + row) % 2 == 0 else Side.BLACK
                assert board.token_at(col, row) == expected, f"Mismatch at {(col, row)}"

    def test_dimensions_clamped_to_maximum(self) -> None:
        board = Board.initial(500, 200)
        assert board.dimensions == (MAX_COLS, MAX_ROWS)

    def test_dimensions_clamped_to_minimum(self) -> None:
        board = Board.initial(0, -3)
        assert board.dimensions == (2, 2)


class TestBoardAccess:
    def test_token_at_off_board_is_none(self) -> None:
        board = Board.initial(4, 4)
        assert board.token_at(-1, 0) is None
        assert board.token_at(4, 0) is None
        assert board.token_at(0, 4) is None

    def test_getitem_and_setitem(self) -> None:
        board = Board.initial(4, 4)
        board[(0, 0)] = Side.EMPTY
        assert board[(0, 0)] == Side.EMPTY

    def test_setitem_off_board_raises(self) -> None:
        board = Board.initial(4, 4)
        with pytest.raises(IndexError):
            board[(9, 9)] = Side.WHITE

    def test_tokens_row_major(self) -> None:
        board = Board.initial(4, 4)
        tokens = board.tokens()
        assert len(tokens) == 16
        assert tokens[1] == board.token_at(1, 0)
        assert tokens[4] == board.token_at(0, 1)

    def test_from_tokens_count_mismatch(self) -> None:
        with pytest.raises(ValueError):
            Board.from_tokens(4, 4, [Side.WHITE] * 15)

    def test_copy_is_independent(self) -> None:
        board = Board.initial(4, 4)
        clone = board.copy()
        assert clone == board
        clone[(0, 0)] = Side.EMPTY
        assert board.token_at(0, 0) == Side.WHITE
        assert clone != board


class TestBoardMakeMove:
    def test_single_jump(self) -> None:
        board = Board.initial(4, 4)
        board.make_move(Move(1, 3, 1, 1, Side.WHITE))
        assert board.token_at(1, 1) == Side.WHITE
        assert board.token_at(1, 2) == Side.EMPTY
        assert board.token_at(1, 3) == Side.EMPTY

    def test_multi_jump_clears_path(self) -> None:
        board = board_from_text(
            """
            W B _ B _
            _ _ _ _ _
            """
        )
        board.make_move(Move(0, 0, 4, 0, Side.WHITE))
        assert list(board.rows())[0] == (Side.EMPTY,) * 4 + (Side.WHITE,)

    def test_illegal_move_leaves_board_unchanged(self) -> None:
        board = Board.initial(4, 4)
        before = board.copy()
        with pytest.raises(RuleViolation):
            board.make_move(Move(0, 0, 2, 0, Side.WHITE))
        assert board == before

    def test_wrong_side_rejected(self) -> None:
        board = Board.initial(4, 4)
        with pytest.raises(RuleViolation, match="expected BLACK"):
            board.make_move(Move(1, 3, 1, 1, Side.BLACK))

    def test_sentinel_is_illegal(self) -> None:
        board = Board.initial(4, 4)
        with pytest.raises(RuleViolation, match="off the board"):
            board.make_move(Move.forfeit(Side.WHITE))
