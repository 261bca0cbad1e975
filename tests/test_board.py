"""Unit tests for Othello board rules."""

import pytest

from othello.board import (
    Board,
    Cell,
    Seat,
    Zobrist,
    apply_move,
    flips,
    initial,
    is_terminal,
    legal_moves,
    score,
)
from othello.errors import IllegalMoveError


def test_initial_position():
    board = initial()
    assert board.at(3, 3) == Cell.WHITE
    assert board.at(3, 4) == Cell.BLACK
    assert board.at(4, 3) == Cell.BLACK
    assert board.at(4, 4) == Cell.WHITE
    assert score(board) == (2, 2)
    assert board.count(Cell.EMPTY) == 60


def test_opening_moves_for_black():
    assert legal_moves(initial(), Seat.BLACK) == {(2, 3), (3, 2), (4, 5), (5, 4)}


def test_black_opening_flips_one_disc():
    board = apply_move(initial(), Seat.BLACK, 2, 3)
    assert board.at(2, 3) == Cell.BLACK
    assert board.at(3, 3) == Cell.BLACK
    assert score(board) == (4, 1)


def test_apply_move_leaves_input_untouched():
    start = initial()
    after = apply_move(start, Seat.BLACK, 2, 3)
    assert after is not start
    assert start == initial()


def test_move_without_adjacent_run_is_rejected():
    with pytest.raises(IllegalMoveError) as excinfo:
        apply_move(initial(), Seat.BLACK, 0, 0)
    assert (excinfo.value.row, excinfo.value.col) == (0, 0)


def test_occupied_and_off_board_cells_are_rejected():
    with pytest.raises(IllegalMoveError):
        apply_move(initial(), Seat.BLACK, 3, 3)
    with pytest.raises(IllegalMoveError):
        apply_move(initial(), Seat.BLACK, 8, 0)


def test_flips_every_bracketed_direction_only():
    board = Board.from_text(
        """
        B.B.....
        .WW.....
        BW.WW...
        ........
        ........
        ........
        ........
        ........
        """
    )
    # Left, up and up-left are closed by Black; the run to the right is open
    assert set(flips(board, Seat.BLACK, 2, 2)) == {(2, 1), (1, 2), (1, 1)}

    after = apply_move(board, Seat.BLACK, 2, 2)
    assert after.at(2, 3) == Cell.WHITE
    assert after.at(2, 4) == Cell.WHITE
    assert score(after) == (7, 2)


def test_long_run_flips_in_full():
    board = Board.from_text(
        "BWWW...." + "." * 56
    )
    after = apply_move(board, Seat.BLACK, 0, 4)
    assert after.to_text().splitlines()[0] == "BBBBB..."


def test_open_ended_run_is_not_a_move():
    board = Board.from_text(".WWW...." + "." * 56)
    assert flips(board, Seat.BLACK, 0, 4) == ()
    assert legal_moves(board, Seat.BLACK) == frozenset()


def test_filled_cell_never_reappears_in_legal_moves():
    board = initial()
    seat = Seat.BLACK
    discs = 4
    while not is_terminal(board):
        moves = legal_moves(board, seat)
        if not moves:
            seat = seat.opponent
            continue
        row, col = min(moves)
        board = apply_move(board, seat, row, col)
        discs += 1

        assert (row, col) not in legal_moves(board, Seat.BLACK)
        assert (row, col) not in legal_moves(board, Seat.WHITE)
        assert sum(score(board)) == discs
        seat = seat.opponent

    assert not legal_moves(board, Seat.BLACK)
    assert not legal_moves(board, Seat.WHITE)


def test_board_with_no_moves_for_either_side_is_terminal():
    board = Board.from_text("." + "B" * 63)
    assert is_terminal(board)
    assert score(board) == (63, 0)


def test_full_board_is_terminal():
    board = Board.from_text("B" * 32 + "W" * 32)
    assert board.is_full()
    assert is_terminal(board)
    assert score(board) == (32, 32)


def test_initial_board_is_not_terminal():
    assert not is_terminal(initial())


def test_rows_use_wire_encoding():
    rows = initial().rows()
    assert len(rows) == 8
    assert rows[3][3:5] == [2, 1]
    assert rows[4][3:5] == [1, 2]
    assert rows[0] == [0] * 8


def test_from_text_rejects_bad_input():
    with pytest.raises(ValueError):
        Board.from_text("X" * 64)
    with pytest.raises(ValueError):
        Board.from_text("." * 10)


def test_zobrist_separates_side_to_move():
    zobrist = Zobrist()
    board = initial()
    assert zobrist.hash(board, Seat.BLACK) != zobrist.hash(board, Seat.WHITE)
    assert zobrist.hash(board, Seat.BLACK) == zobrist.hash(initial(), Seat.BLACK)
