"""Tests for the Othello minimax AI."""

import pytest

from othello.ai import MinimaxAI
from othello.board import Board, Cell, Seat, apply_move, initial, is_terminal, legal_moves


def test_ai_returns_legal_reply():
    board = apply_move(initial(), Seat.BLACK, 2, 3)
    ai = MinimaxAI(seat=Seat.WHITE, depth=3)
    move = ai.choose_move(board)
    assert move in legal_moves(board, Seat.WHITE)


def test_ai_takes_available_corner():
    board = Board.from_text(
        """
        .BW.....
        ........
        ........
        ...WB...
        ...BW...
        ........
        ........
        ........
        """
    )
    ai = MinimaxAI(seat=Seat.WHITE, depth=1)
    assert ai.choose_move(board) == (0, 0)


def test_ai_without_moves_raises():
    board = Board.from_text("." + "B" * 63)
    ai = MinimaxAI(seat=Seat.WHITE, depth=1)
    with pytest.raises(RuntimeError):
        ai.choose_move(board)


def test_ai_refuses_other_seat():
    ai = MinimaxAI(seat=Seat.WHITE, depth=1)
    with pytest.raises(ValueError):
        ai.choose_move(initial(), Seat.BLACK)


def test_ai_self_play_only_makes_legal_moves():
    players = {
        Seat.BLACK: MinimaxAI(seat=Seat.BLACK, depth=1),
        Seat.WHITE: MinimaxAI(seat=Seat.WHITE, depth=1),
    }
    board = initial()
    seat = Seat.BLACK
    while not is_terminal(board):
        moves = legal_moves(board, seat)
        if moves:
            move = players[seat].choose_move(board)
            assert move in moves
            board = apply_move(board, seat, *move)
        seat = seat.opponent
    assert board.count(Cell.EMPTY) < 60
