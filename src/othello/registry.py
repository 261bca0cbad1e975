"""Room id -> session map with exactly-once room creation."""

from __future__ import annotations

from typing import Dict, Optional, Tuple
import logging
import threading

from .board import Seat
from .errors import UnknownRoomError
from .session import DEFAULT_AI_DEPTH, GameSession, Mode, PlayerId, new_player_id

logger = logging.getLogger(__name__)


class SessionRegistry:
    """In-memory registry of every room joined since the process started.

    The registry lock only covers lookup and insertion; game state is guarded
    by each session's own lock so busy rooms never block each other.
    """

    def __init__(self, ai_depth: int = DEFAULT_AI_DEPTH):
        self.ai_depth = ai_depth
        self._sessions: Dict[int, GameSession] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, room_id: object) -> bool:
        return room_id in self._sessions

    def get(self, room_id: int) -> GameSession:
        try:
            return self._sessions[room_id]
        except KeyError as exc:
            raise UnknownRoomError(room_id) from exc

    def get_or_create(
        self,
        room_id: int,
        mode: Optional[Mode] = None,
        ai_depth: Optional[int] = None,
    ) -> GameSession:
        """Return the room's session, creating it with ``mode`` if absent."""
        session = self._sessions.get(room_id)
        if session is not None:
            return session

        with self._lock:
            session = self._sessions.get(room_id)
            if session is None:
                session = GameSession(
                    room_id=room_id,
                    mode=mode or Mode.HUMAN_VS_HUMAN,
                    ai_depth=ai_depth or self.ai_depth,
                )
                self._sessions[room_id] = session
                logger.info("Created room %s (%s)", room_id, session.mode.value)
            return session

    def join_room(
        self,
        room_id: int,
        mode: Optional[Mode] = None,
        ai_depth: Optional[int] = None,
    ) -> Tuple[GameSession, PlayerId, Seat]:
        """Seat a new player in ``room_id``; the mode only applies to new rooms."""
        session = self.get_or_create(room_id, mode, ai_depth)
        player_id = new_player_id()
        seat = session.join(player_id)
        return session, player_id, seat
