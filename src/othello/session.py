"""Per-room game state machine: seats, turn order, passes and game end."""

from __future__ import annotations

from dataclasses import InitVar, dataclass, field, replace
from enum import Enum
from typing import Dict, FrozenSet, List, NewType, Optional, Tuple
import logging
import threading
import uuid

from .ai import MinimaxAI
from .board import (
    Board,
    Position,
    Score,
    Seat,
    apply_move,
    has_legal_move,
    initial,
    legal_moves,
    score,
)
from .errors import (
    GameNotStartedError,
    GameOverError,
    NotYourTurnError,
    RoomFullError,
)

logger = logging.getLogger(__name__)

DEFAULT_AI_DEPTH = 3

PlayerId = NewType("PlayerId", str)


def new_player_id() -> PlayerId:
    return PlayerId(uuid.uuid4().hex)


class Mode(str, Enum):
    HUMAN_VS_HUMAN = "pvp"
    HUMAN_VS_AI = "ai"


class Status(str, Enum):
    WAITING_FOR_PLAYERS = "waiting"
    IN_PROGRESS = "active"
    BLACK_WINS = "black_wins"
    WHITE_WINS = "white_wins"
    DRAW = "draw"

    @property
    def is_terminal(self) -> bool:
        return self in (Status.BLACK_WINS, Status.WHITE_WINS, Status.DRAW)


@dataclass(frozen=True)
class MoveRecord:
    seat: Seat
    row: int
    col: int
    flipped: int


@dataclass(frozen=True)
class Snapshot:
    """Immutable view of a room, replaced wholesale after every change."""

    room_id: int
    mode: Mode
    board: Board
    status: Status = Status.WAITING_FOR_PLAYERS
    # Only meaningful while status is IN_PROGRESS
    turn: Optional[Seat] = None
    seats_taken: Tuple[Seat, ...] = ()
    note: Optional[str] = None
    move_count: int = 0
    last_move: Optional[MoveRecord] = None

    @property
    def scores(self) -> Score:
        return score(self.board)

    @property
    def legal_moves(self) -> FrozenSet[Position]:
        if self.status is not Status.IN_PROGRESS or self.turn is None:
            return frozenset()
        return legal_moves(self.board, self.turn)


def final_status(board: Board) -> Status:
    black, white = score(board)
    if black > white:
        return Status.BLACK_WINS
    if white > black:
        return Status.WHITE_WINS
    return Status.DRAW


@dataclass
class GameSession:
    """Authoritative state for one room, plus its AI opponent when there is one."""

    room_id: int
    mode: Mode = Mode.HUMAN_VS_HUMAN
    start_board: InitVar[Optional[Board]] = None
    ai_depth: InitVar[int] = DEFAULT_AI_DEPTH
    ai: Optional[MinimaxAI] = field(default=None, init=False)
    seats: Dict[Seat, PlayerId] = field(default_factory=dict, init=False)
    moves: List[MoveRecord] = field(default_factory=list, init=False, repr=False)
    lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)
    _snapshot: Snapshot = field(init=False, repr=False)

    def __post_init__(self, start_board: Optional[Board], ai_depth: int) -> None:
        self.mode = Mode(self.mode)
        if self.mode is Mode.HUMAN_VS_AI:
            self.ai = MinimaxAI(seat=Seat.WHITE, depth=ai_depth)
        self._snapshot = Snapshot(
            room_id=self.room_id,
            mode=self.mode,
            board=start_board if start_board is not None else initial(),
            seats_taken=self._seats_taken(),
        )

    # ---- API used by the registry & server ----

    def snapshot(self) -> Snapshot:
        return self._snapshot

    def seat_of(self, player_id: str) -> Optional[Seat]:
        # Copy first: join may add a seat while an outside caller iterates
        for seat, owner in list(self.seats.items()):
            if owner == player_id:
                return seat
        return None

    def join(self, player_id: PlayerId) -> Seat:
        """Give ``player_id`` the next open seat, Black first."""
        with self.lock:
            taken = self._seats_taken()
            open_seats = [s for s in (Seat.BLACK, Seat.WHITE) if s not in taken]
            if not open_seats:
                raise RoomFullError(self.room_id)

            seat = open_seats[0]
            self.seats[seat] = player_id
            self._snapshot = replace(self._snapshot, seats_taken=self._seats_taken())
            logger.info("Room %s: player took the %s seat", self.room_id, seat.label)

            if len(open_seats) == 1:
                self._start()
            return seat

    def move(self, player_id: str, row: int, col: int) -> Snapshot:
        """Apply a human move, then any AI replies it triggers."""
        with self.lock:
            state = self._snapshot
            if state.status.is_terminal:
                raise GameOverError()
            if state.status is Status.WAITING_FOR_PLAYERS:
                raise GameNotStartedError()

            seat = self.seat_of(player_id)
            if seat is None:
                raise NotYourTurnError(f"Player is not seated in room {self.room_id}")
            if seat != state.turn:
                raise NotYourTurnError(f"It is {state.turn.label}'s turn")

            self._apply(seat, row, col)
            self._play_ai_turns()
            return self._snapshot

    # ---- helpers (caller holds self.lock) ----

    def _seats_taken(self) -> Tuple[Seat, ...]:
        taken = set(self.seats)
        if self.ai is not None:
            taken.add(self.ai.seat)
        return tuple(sorted(taken))

    def _start(self) -> None:
        logger.info("Room %s: game started (%s)", self.room_id, self.mode.value)
        self._snapshot = replace(self._snapshot, **self._settle(self._snapshot.board, Seat.BLACK))
        self._play_ai_turns()

    def _apply(self, seat: Seat, row: int, col: int) -> None:
        state = self._snapshot
        board = apply_move(state.board, seat, row, col)
        flipped = board.count(seat.cell) - state.board.count(seat.cell) - 1
        record = MoveRecord(seat=seat, row=row, col=col, flipped=flipped)
        self.moves.append(record)
        logger.debug(
            "Room %s: %s played (%d, %d) flipping %d", self.room_id, seat.label, row, col, flipped
        )

        self._snapshot = replace(
            state,
            board=board,
            move_count=len(self.moves),
            last_move=record,
            **self._settle(board, seat.opponent),
        )
        if self._snapshot.status.is_terminal:
            black, white = self._snapshot.scores
            logger.info(
                "Room %s: game over, %s (%d-%d)",
                self.room_id,
                self._snapshot.status.value,
                black,
                white,
            )

    def _settle(self, board: Board, to_move: Seat) -> dict:
        """Work out status, turn and note once ``to_move`` is due to play."""
        if has_legal_move(board, to_move):
            return {"status": Status.IN_PROGRESS, "turn": to_move, "note": None}
        if has_legal_move(board, to_move.opponent):
            note = f"{to_move.label} has no legal move and passes"
            return {"status": Status.IN_PROGRESS, "turn": to_move.opponent, "note": note}
        return {"status": final_status(board), "turn": None, "note": None}

    def _play_ai_turns(self) -> None:
        # Loops when the human has to pass after an AI move
        while (
            self.ai is not None
            and self._snapshot.status is Status.IN_PROGRESS
            and self._snapshot.turn == self.ai.seat
        ):
            row, col = self.ai.choose_move(self._snapshot.board)
            self._apply(self.ai.seat, row, col)
