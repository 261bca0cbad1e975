"""FastAPI server exposing Othello rooms to polling browser clients."""

from __future__ import annotations

import logging
import os
from typing import Dict, List, Optional, Tuple

from fastapi import FastAPI, HTTPException, Query
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, ConfigDict, Field

from .board import BOARD_SIZE
from .errors import OthelloError
from .registry import SessionRegistry
from .session import Mode, Snapshot, Status

logger = logging.getLogger(__name__)

ALLOWED_DEPTHS: Tuple[int, ...] = (1, 2, 3, 4)
AI_DEPTH = int(os.environ.get("OTHELLO_AI_DEPTH", "3"))
DEFAULT_ROOM = 1

if AI_DEPTH not in ALLOWED_DEPTHS:
    raise RuntimeError(
        f"OTHELLO_AI_DEPTH={AI_DEPTH} is not one of {', '.join(map(str, ALLOWED_DEPTHS))}"
    )

REGISTRY = SessionRegistry(ai_depth=AI_DEPTH)
app = FastAPI(title="Othello", description="Room-based Othello played in the browser")


class MoveRequest(BaseModel):
    """Request payload for placing a disc in a room."""

    model_config = ConfigDict(populate_by_name=True)

    row: int = Field(alias="r", ge=0, le=BOARD_SIZE - 1)
    col: int = Field(alias="c", ge=0, le=BOARD_SIZE - 1)
    player: str = Field(min_length=1)


def _http_error(room_id: int, exc: OthelloError) -> HTTPException:
    logger.warning("Room %s: rejected request: %s", room_id, exc)
    return HTTPException(status_code=exc.status_code, detail=exc.to_dict())


def _serialize_snapshot(snapshot: Snapshot) -> Dict[str, object]:
    black, white = snapshot.scores
    in_progress = snapshot.status is Status.IN_PROGRESS
    last_move: Optional[Dict[str, object]] = None
    if snapshot.last_move is not None:
        last_move = {
            "player": int(snapshot.last_move.seat),
            "r": snapshot.last_move.row,
            "c": snapshot.last_move.col,
            "flipped": snapshot.last_move.flipped,
        }
    legal: List[List[int]] = [[r, c] for r, c in sorted(snapshot.legal_moves)]

    return {
        "room_id": snapshot.room_id,
        "mode": snapshot.mode.value,
        "board": snapshot.board.rows(),
        "status": snapshot.status.value,
        "turn": int(snapshot.turn) if in_progress and snapshot.turn else 0,
        "note": snapshot.note,
        "scores": {"black": black, "white": white},
        "seats": [seat.label.lower() for seat in snapshot.seats_taken],
        "legal_moves": legal,
        "move_count": snapshot.move_count,
        "last_move": last_move,
    }


@app.post("/join")
def join(
    room: int = Query(default=DEFAULT_ROOM, ge=0),
    mode: Mode = Query(default=Mode.HUMAN_VS_HUMAN),
    depth: Optional[int] = Query(default=None),
) -> Dict[str, object]:
    if depth is not None and depth not in ALLOWED_DEPTHS:
        raise HTTPException(
            status_code=422,
            detail=(
                f"Unsupported difficulty depth {depth}. "
                f"Choose one of {', '.join(map(str, ALLOWED_DEPTHS))}."
            ),
        )

    try:
        session, player_id, seat = REGISTRY.join_room(room, mode, depth)
    except OthelloError as exc:
        raise _http_error(room, exc) from exc

    return {
        "player_id": player_id,
        "room_id": room,
        "mode": session.mode.value,
        "seat": seat.label.lower(),
    }


@app.post("/move")
def move(request: MoveRequest, room: int = Query(default=DEFAULT_ROOM, ge=0)) -> Dict[str, object]:
    try:
        session = REGISTRY.get(room)
        snapshot = session.move(request.player, request.row, request.col)
    except OthelloError as exc:
        raise _http_error(room, exc) from exc
    return {"status": "ok", "state": _serialize_snapshot(snapshot)}


@app.get("/state")
def state(room: int = Query(default=DEFAULT_ROOM, ge=0)) -> Dict[str, object]:
    try:
        session = REGISTRY.get(room)
    except OthelloError as exc:
        raise _http_error(room, exc) from exc
    return _serialize_snapshot(session.snapshot())


@app.get("/health")
def health() -> Dict[str, object]:
    return {"status": "ok", "rooms": len(REGISTRY)}


@app.get("/", response_class=HTMLResponse)
def index() -> str:
    return HTML_PAGE


HTML_PAGE = """<!DOCTYPE html>
<html lang=\"en\">
  <head>
    <meta charset=\"utf-8\" />
    <meta name=\"viewport\" content=\"width=device-width, initial-scale=1\" />
    <title>Othello</title>
    <style>
      body { font-family: sans-serif; background: #1f2933; color: #f5f7fa; text-align: center; }
      #board { display: inline-block; margin-top: 1rem; background: #2f7d32; padding: 4px; }
      .row { display: flex; }
      .cell { width: 48px; height: 48px; border: 1px solid #1b5e20; display: flex;
              align-items: center; justify-content: center; cursor: pointer; }
      .cell.legal { background: #388e3c; }
      .piece { width: 38px; height: 38px; border-radius: 50%; }
      .piece.black { background: #111; }
      .piece.white { background: #fafafa; }
      #error { color: #ff8a80; min-height: 1.2em; }
    </style>
  </head>
  <body>
    <h1>Othello</h1>
    <p>Room <span id=\"room-id\"></span> &middot; <span id=\"game-mode\"></span>
       &middot; you are <span id=\"seat\"></span></p>
    <p>Status: <span id=\"status-message\">joining...</span> &middot; Turn: <span id=\"turn\">None</span>
       &middot; <span id=\"score\"></span></p>
    <p id=\"note\"></p>
    <p id=\"error\"></p>
    <div id=\"board\"></div>
    <script>
      const params = new URLSearchParams(window.location.search);
      const roomId = parseInt(params.get('room') || '1', 10);
      const mode = params.get('mode') || 'pvp';
      let playerId = null;

      function errorText(data, fallback) {
        const detail = data && data.detail;
        if (typeof detail === 'string') {
          return detail;
        }
        return (detail && detail.message) || fallback;
      }

      async function joinGame() {
        const response = await fetch(`/join?room=${roomId}&mode=${mode}`, { method: 'POST' });
        const data = await response.json();
        if (!response.ok) {
          document.getElementById('status-message').textContent = errorText(data, 'Join failed');
          return;
        }
        playerId = data.player_id;
        document.getElementById('room-id').textContent = data.room_id;
        document.getElementById('game-mode').textContent = data.mode;
        document.getElementById('seat').textContent = data.seat;
        pollState();
      }

      async function makeMove(r, c) {
        const response = await fetch(`/move?room=${roomId}`, {
          method: 'POST',
          headers: { 'Content-Type': 'application/json' },
          body: JSON.stringify({ r, c, player: playerId })
        });
        const data = await response.json();
        const error = document.getElementById('error');
        if (response.ok) {
          error.textContent = '';
          render(data.state);
        } else {
          error.textContent = errorText(data, 'Move rejected');
        }
      }

      async function pollState() {
        try {
          const response = await fetch(`/state?room=${roomId}`);
          if (response.ok) {
            render(await response.json());
          }
        } catch (err) {
          console.error('Failed to get state:', err);
        }
        setTimeout(pollState, 1000);
      }

      function render(state) {
        const legal = new Set(state.legal_moves.map(([r, c]) => `${r},${c}`));
        const boardElement = document.getElementById('board');
        boardElement.innerHTML = '';
        state.board.forEach((row, r) => {
          const rowElement = document.createElement('div');
          rowElement.className = 'row';
          row.forEach((cell, c) => {
            const cellElement = document.createElement('div');
            cellElement.className = legal.has(`${r},${c}`) ? 'cell legal' : 'cell';
            cellElement.addEventListener('click', () => makeMove(r, c));
            if (cell !== 0) {
              const piece = document.createElement('div');
              piece.className = cell === 1 ? 'piece black' : 'piece white';
              cellElement.appendChild(piece);
            }
            rowElement.appendChild(cellElement);
          });
          boardElement.appendChild(rowElement);
        });
        document.getElementById('status-message').textContent = state.status;
        document.getElementById('turn').textContent = ['None', 'Black', 'White'][state.turn];
        document.getElementById('score').textContent =
          `Black ${state.scores.black} : ${state.scores.white} White`;
        document.getElementById('note').textContent = state.note || '';
      }

      joinGame();
    </script>
  </body>
</html>
"""
