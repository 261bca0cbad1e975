"""Typed errors raised by the board, sessions and registry."""

from __future__ import annotations

from typing import Any


class OthelloError(Exception):
    """Base class for errors that reject a single request."""

    status_code = 400

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable error payload."""
        return {"type": self.__class__.__name__, "message": str(self)}


class RoomFullError(OthelloError):
    """Raised when joining a room whose seats are all taken."""

    status_code = 403

    def __init__(self, room_id: int):
        self.room_id = room_id
        super().__init__(f"Room {room_id} is full")


class NotYourTurnError(OthelloError):
    """Raised when a player moves while the other seat holds the turn."""

    status_code = 403


class GameOverError(OthelloError):
    status_code = 409

    def __init__(self, message: str = "Game already finished"):
        super().__init__(message)


class GameNotStartedError(OthelloError):
    status_code = 409

    def __init__(self, message: str = "Waiting for another player to join"):
        super().__init__(message)


class IllegalMoveError(OthelloError):
    """Raised when a placement would not flip any opposing disc."""

    def __init__(self, row: int, col: int, reason: str | None = None):
        self.row = row
        self.col = col
        self.reason = reason
        message = f"Illegal move at ({row}, {col})"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        payload = super().to_dict()
        payload.update({"r": self.row, "c": self.col})
        return payload


class UnknownRoomError(OthelloError):
    """Raised for moves or state reads on a room nobody has joined."""

    status_code = 404

    def __init__(self, room_id: int):
        self.room_id = room_id
        super().__init__(f"Room {room_id} not found")
