"""Board representation, move legality and disc flipping for Othello."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import FrozenSet, List, NamedTuple, Optional, Tuple
import random

from .errors import IllegalMoveError

BOARD_SIZE = 8
CELL_COUNT = BOARD_SIZE * BOARD_SIZE

Position = Tuple[int, int]

DIRECTIONS: Tuple[Tuple[int, int], ...] = (
    (-1, -1),
    (-1, 0),
    (-1, 1),
    (0, -1),
    (0, 1),
    (1, -1),
    (1, 0),
    (1, 1),
)


class Cell(IntEnum):
    # Values double as the wire encoding of /state
    EMPTY = 0
    BLACK = 1
    WHITE = 2


class Seat(IntEnum):
    BLACK = 1
    WHITE = 2

    @property
    def opponent(self) -> "Seat":
        return Seat.WHITE if self is Seat.BLACK else Seat.BLACK

    @property
    def cell(self) -> Cell:
        return Cell(self.value)

    @property
    def label(self) -> str:
        return self.name.capitalize()


class Score(NamedTuple):
    black: int
    white: int


_TEXT_TO_CELL = {".": Cell.EMPTY, "B": Cell.BLACK, "W": Cell.WHITE}
_CELL_TO_TEXT = {cell: char for char, cell in _TEXT_TO_CELL.items()}


def _in_bounds(row: int, col: int) -> bool:
    return 0 <= row < BOARD_SIZE and 0 <= col < BOARD_SIZE


# ---------- Board ----------


@dataclass(frozen=True)
class Board:
    # Row-major, index = row * BOARD_SIZE + col
    cells: Tuple[Cell, ...] = field(default_factory=lambda: (Cell.EMPTY,) * CELL_COUNT)

    def __post_init__(self) -> None:
        if len(self.cells) != CELL_COUNT:
            raise ValueError(f"Board needs {CELL_COUNT} cells, got {len(self.cells)}")

    @classmethod
    def from_text(cls, text: str) -> "Board":
        """Parse an 8-line diagram using '.', 'B' and 'W'; whitespace is ignored."""
        chars = [ch for ch in text if not ch.isspace()]
        try:
            return cls(cells=tuple(_TEXT_TO_CELL[ch] for ch in chars))
        except KeyError as exc:
            raise ValueError(f"Unknown board character {exc.args[0]!r}") from exc

    def at(self, row: int, col: int) -> Cell:
        return self.cells[row * BOARD_SIZE + col]

    def count(self, cell: Cell) -> int:
        return self.cells.count(cell)

    def is_full(self) -> bool:
        return Cell.EMPTY not in self.cells

    def rows(self) -> List[List[int]]:
        return [
            [int(c) for c in self.cells[r * BOARD_SIZE : (r + 1) * BOARD_SIZE]]
            for r in range(BOARD_SIZE)
        ]

    def to_text(self) -> str:
        return "\n".join(
            "".join(_CELL_TO_TEXT[c] for c in self.cells[r * BOARD_SIZE : (r + 1) * BOARD_SIZE])
            for r in range(BOARD_SIZE)
        )


# ---------- Rules ----------


def initial() -> Board:
    cells = [Cell.EMPTY] * CELL_COUNT
    cells[3 * BOARD_SIZE + 3] = Cell.WHITE
    cells[3 * BOARD_SIZE + 4] = Cell.BLACK
    cells[4 * BOARD_SIZE + 3] = Cell.BLACK
    cells[4 * BOARD_SIZE + 4] = Cell.WHITE
    return Board(cells=tuple(cells))


def flips(board: Board, seat: Seat, row: int, col: int) -> Tuple[Position, ...]:
    """Discs that placing ``seat`` at (row, col) would turn over.

    Each direction contributes its whole run of opposing discs, but only when
    the run is closed by one of the mover's own discs. Returns an empty tuple
    for occupied or off-board positions.
    """
    if not _in_bounds(row, col) or board.at(row, col) != Cell.EMPTY:
        return ()

    own = seat.cell
    theirs = seat.opponent.cell
    flipped: List[Position] = []
    for dr, dc in DIRECTIONS:
        run: List[Position] = []
        r, c = row + dr, col + dc
        while _in_bounds(r, c) and board.at(r, c) == theirs:
            run.append((r, c))
            r += dr
            c += dc
        if run and _in_bounds(r, c) and board.at(r, c) == own:
            flipped.extend(run)
    return tuple(flipped)


def legal_moves(board: Board, seat: Seat) -> FrozenSet[Position]:
    moves = set()
    for index, cell in enumerate(board.cells):
        if cell != Cell.EMPTY:
            continue
        row, col = divmod(index, BOARD_SIZE)
        if flips(board, seat, row, col):
            moves.add((row, col))
    return frozenset(moves)


def has_legal_move(board: Board, seat: Seat) -> bool:
    for index, cell in enumerate(board.cells):
        if cell == Cell.EMPTY and flips(board, seat, *divmod(index, BOARD_SIZE)):
            return True
    return False


def apply_move(board: Board, seat: Seat, row: int, col: int) -> Board:
    """Place ``seat``'s disc and flip every bracketed run; returns a new board."""
    flipped = flips(board, seat, row, col)
    if not flipped:
        raise IllegalMoveError(row, col, f"{seat.label} cannot play there")

    cells = list(board.cells)
    own = seat.cell
    cells[row * BOARD_SIZE + col] = own
    for r, c in flipped:
        cells[r * BOARD_SIZE + c] = own
    return Board(cells=tuple(cells))


def is_terminal(board: Board) -> bool:
    return not has_legal_move(board, Seat.BLACK) and not has_legal_move(board, Seat.WHITE)


def score(board: Board) -> Score:
    return Score(black=board.count(Cell.BLACK), white=board.count(Cell.WHITE))


# ---------- Zobrist hashing ----------


class Zobrist:
    """
    64-bit Zobrist keys:
    - piece_table[index][pieceIndex] for pieceIndex: 0->Black, 1->White
    - side_to_move toggler (set when White is to move)
    """

    def __init__(self, seed: int = 7777):
        rng = random.Random(seed)
        self.piece_table = [
            [rng.getrandbits(64) for _ in range(2)] for _ in range(CELL_COUNT)
        ]
        self.side_to_move = rng.getrandbits(64)

    def hash(self, board: Board, to_move: Optional[Seat]) -> int:
        key = 0
        for index, cell in enumerate(board.cells):
            if cell == Cell.BLACK:
                key ^= self.piece_table[index][0]
            elif cell == Cell.WHITE:
                key ^= self.piece_table[index][1]
        if to_move is Seat.WHITE:
            key ^= self.side_to_move
        return key
