"""Depth-limited Minimax AI with move ordering + transposition table for Othello."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple
import logging
import math

from .board import (
    Board,
    Position,
    Seat,
    Zobrist,
    apply_move,
    flips,
    legal_moves,
    score,
)

logger = logging.getLogger(__name__)

# TT entry flags
EXACT, LOWER, UPPER = 0, 1, 2

TT_MAX_ENTRIES = 200_000
MOBILITY_WEIGHT = 2.0
WIN_SCORE = 10_000.0

# Classic square weights: corners good, squares next to corners bad
SQUARE_WEIGHTS: Tuple[Tuple[int, ...], ...] = (
    (100, -20, 10, 5, 5, 10, -20, 100),
    (-20, -50, -2, -2, -2, -2, -50, -20),
    (10, -2, -1, -1, -1, -1, -2, 10),
    (5, -2, -1, -1, -1, -1, -2, 5),
    (5, -2, -1, -1, -1, -1, -2, 5),
    (10, -2, -1, -1, -1, -1, -2, 10),
    (-20, -50, -2, -2, -2, -2, -50, -20),
    (100, -20, 10, 5, 5, 10, -20, 100),
)
_FLAT_WEIGHTS: Tuple[int, ...] = tuple(w for row in SQUARE_WEIGHTS for w in row)


@dataclass
class TTEntry:
    depth: int
    score: float
    flag: int
    best_move: Optional[Position]


@dataclass
class MinimaxAI:
    """AI player that uses alpha–beta with move ordering + a transposition table.

      - MinimaxAI(seat=Seat.WHITE, depth=3)
      - choose_move(board) -> (row, col)
    """

    seat: Seat = Seat.WHITE
    depth: int = 3
    _zobrist: Zobrist = field(default_factory=Zobrist, repr=False)
    _tt: Dict[int, TTEntry] = field(default_factory=dict, repr=False)

    # ---- public API ----

    def choose_move(self, board: Board, seat: Optional[Seat] = None) -> Position:
        seat = seat or self.seat
        if seat != self.seat:
            raise ValueError(f"This AI plays {self.seat.label}, not {seat.label}")

        moves = legal_moves(board, seat)
        if not moves:
            raise RuntimeError(f"No valid moves available for {seat.label}")
        if len(moves) == 1:
            return next(iter(moves))

        if len(self._tt) > TT_MAX_ENTRIES:
            self._tt.clear()

        # Iterative deepening for stable move ordering (up to self.depth)
        best_move: Optional[Position] = None
        for d in range(1, max(1, self.depth) + 1):
            _, move = self._minimax(board, seat, d, -math.inf, math.inf)
            if move is not None:
                best_move = move

        if best_move is None or best_move not in moves:
            best_move = min(moves)
        logger.debug("AI %s chose %s at depth %d", seat.label, best_move, self.depth)
        return best_move

    # ---- core search ----

    def _minimax(
        self,
        board: Board,
        to_move: Seat,
        depth: int,
        alpha: float,
        beta: float,
    ) -> Tuple[float, Optional[Position]]:
        moves = list(legal_moves(board, to_move))
        if not moves:
            if not legal_moves(board, to_move.opponent):
                return self._evaluate_final(board), None
            if depth == 0:
                return self._evaluate(board), None
            # Pass: same board, other side to move
            value, _ = self._minimax(board, to_move.opponent, depth - 1, alpha, beta)
            return value, None

        if depth == 0:
            return self._evaluate(board), None

        key = self._zobrist.hash(board, to_move)
        alpha_orig, beta_orig = alpha, beta

        # TT probe
        tt_hit = self._tt.get(key)
        if tt_hit and tt_hit.depth >= depth:
            if tt_hit.flag == EXACT:
                return tt_hit.score, tt_hit.best_move
            if tt_hit.flag == LOWER:
                alpha = max(alpha, tt_hit.score)
            elif tt_hit.flag == UPPER:
                beta = min(beta, tt_hit.score)
            if alpha >= beta:
                return tt_hit.score, tt_hit.best_move

        # Move ordering: sort by heuristic, then try the TT best move first
        moves.sort(key=lambda m: self._move_heuristic(board, to_move, m), reverse=True)
        if tt_hit and tt_hit.best_move in moves:
            pv = tt_hit.best_move
            moves.remove(pv)
            moves.insert(0, pv)

        maximizing = to_move == self.seat
        best_move: Optional[Position] = None

        if maximizing:
            value = -math.inf
            for move in moves:
                child = apply_move(board, to_move, *move)
                child_score, _ = self._minimax(child, to_move.opponent, depth - 1, alpha, beta)
                if child_score > value:
                    value, best_move = child_score, move
                alpha = max(alpha, value)
                if alpha >= beta:
                    break
        else:
            value = math.inf
            for move in moves:
                child = apply_move(board, to_move, *move)
                child_score, _ = self._minimax(child, to_move.opponent, depth - 1, alpha, beta)
                if child_score < value:
                    value, best_move = child_score, move
                beta = min(beta, value)
                if alpha >= beta:
                    break

        if value <= alpha_orig:
            flag = UPPER
        elif value >= beta_orig:
            flag = LOWER
        else:
            flag = EXACT

        # Store in TT
        self._tt[key] = TTEntry(depth=depth, score=value, flag=flag, best_move=best_move)
        return value, best_move

    # ---- heuristics & eval ----

    def _move_heuristic(self, board: Board, to_move: Seat, move: Position) -> float:
        """Lightweight ordering score: square weight, then number of flips."""
        row, col = move
        return SQUARE_WEIGHTS[row][col] + 0.1 * len(flips(board, to_move, row, col))

    def _evaluate_final(self, board: Board) -> float:
        black, white = score(board)
        mine, theirs = (black, white) if self.seat == Seat.BLACK else (white, black)
        if mine > theirs:
            return WIN_SCORE + mine - theirs
        if mine < theirs:
            return -WIN_SCORE + mine - theirs
        return 0.0

    def _evaluate(self, board: Board) -> float:
        me = self.seat.cell
        opp = self.seat.opponent.cell

        positional = 0
        for weight, cell in zip(_FLAT_WEIGHTS, board.cells):
            if cell == me:
                positional += weight
            elif cell == opp:
                positional -= weight

        my_moves = len(legal_moves(board, self.seat))
        their_moves = len(legal_moves(board, self.seat.opponent))
        return positional + MOBILITY_WEIGHT * (my_moves - their_moves)

