"""FastAPI-powered web UI for playing tic-tac-toe with time travel."""

from __future__ import annotations

import logging
import threading
import time
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from fastapi import FastAPI, HTTPException
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, Field

from .game import GameState, board_rows

logger = logging.getLogger(__name__)

SESSION_TTL_SECONDS = 60 * 60 * 6  # 6 hours since last request


@dataclass
class GameSession:
    """Container for one browser's game and the lock guarding it."""

    game: GameState = field(default_factory=GameState)
    last_seen: float = field(default_factory=lambda: time.time())
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)


SESSIONS: Dict[str, GameSession] = {}
app = FastAPI(
    title="Tic-tac-toe",
    description="Tic-tac-toe with move history and time travel",
)


class MoveRequest(BaseModel):
    """Request payload for clicking a square on the displayed board."""

    square: int = Field(ge=0, le=8, description="Row-major square index")


class JumpRequest(BaseModel):
    """Request payload for jumping to a recorded step."""

    step: int = Field(ge=0, description="History index to display")


def _cleanup_sessions() -> None:
    """Remove sessions whose page went away without saying goodbye."""

    now = time.time()
    expired = [
        session_id
        for session_id, session in list(SESSIONS.items())
        if now - session.last_seen >= SESSION_TTL_SECONDS
    ]
    for session_id in expired:
        SESSIONS.pop(session_id, None)
        logger.info("Expired game %s", session_id)


def _create_session() -> Tuple[str, GameSession]:
    """Create a new game session and register it for later access."""

    _cleanup_sessions()
    session = GameSession()
    session_id = uuid.uuid4().hex
    SESSIONS[session_id] = session
    logger.info("Created game %s", session_id)
    return session_id, session


def _get_session(game_id: str) -> GameSession:
    _cleanup_sessions()
    try:
        session = SESSIONS[game_id]
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Game not found") from exc
    session.last_seen = time.time()
    return session


def _game_payload(
    game_id: str, game: GameState, accepted: bool = True
) -> Dict[str, object]:
    # Caller holds the session lock
    board = game.current_board()
    moves: List[Dict[str, object]] = [
        {"step": step, "label": label, "current": step == game.step_number}
        for label, step in game.move_list()
    ]
    return {
        "id": game_id,
        "squares": [c or "" for c in board],
        "rows": [[c or "" for c in row] for row in board_rows(board)],
        "stepNumber": game.step_number,
        "xIsNext": game.x_is_next,
        "winner": game.winner(),
        "status": game.status_text(),
        "moves": moves,
        "historyLength": len(game.history),
        "accepted": accepted,
    }


def _serialize_session(game_id: str, session: GameSession) -> Dict[str, object]:
    with session.lock:
        return _game_payload(game_id, session.game)


@app.post("/api/game")
def create_game() -> Dict[str, object]:
    game_id, session = _create_session()
    return _serialize_session(game_id, session)


@app.get("/api/game/{game_id}")
def get_game(game_id: str) -> Dict[str, object]:
    session = _get_session(game_id)
    return _serialize_session(game_id, session)


@app.delete("/api/game/{game_id}", status_code=204)
def delete_game(game_id: str) -> None:
    _get_session(game_id)
    SESSIONS.pop(game_id, None)
    logger.info("Discarded game %s", game_id)


@app.post("/api/game/{game_id}/move")
def make_move(game_id: str, request: MoveRequest) -> Dict[str, object]:
    session = _get_session(game_id)
    with session.lock:
        accepted = session.game.apply_move(request.square)
        payload = _game_payload(game_id, session.game, accepted)
    if not accepted:
        logger.debug("Ignored move on square %d in game %s", request.square, game_id)
    return payload


@app.post("/api/game/{game_id}/jump")
def jump(game_id: str, request: JumpRequest) -> Dict[str, object]:
    session = _get_session(game_id)
    with session.lock:
        accepted = session.game.jump_to(request.step)
        history_length = len(session.game.history)
        payload = _game_payload(game_id, session.game, accepted)
    if not accepted:
        logger.debug("Rejected jump to step %d in game %s", request.step, game_id)
        raise HTTPException(
            status_code=400,
            detail=f"Step {request.step} is outside the recorded history "
            f"(0-{history_length - 1})",
        )
    return payload


@app.get("/", response_class=HTMLResponse)
def index() -> str:
    return HTML_PAGE


HTML_PAGE = """<!DOCTYPE html>
<html lang=\"en\">
  <head>
    <meta charset=\"utf-8\" />
    <meta name=\"viewport\" content=\"width=device-width, initial-scale=1\" />
    <title>Tic-tac-toe</title>
    <style>
      body {
        font: 14px 'Century Gothic', Futura, sans-serif;
        margin: 20px;
      }
      ol,
      ul {
        padding-left: 30px;
      }
      .board-row:after {
        clear: both;
        content: '';
        display: table;
      }
      .status {
        margin-bottom: 10px;
      }
      .square {
        background: #fff;
        border: 1px solid #999;
        float: left;
        font-size: 24px;
        font-weight: bold;
        line-height: 34px;
        height: 34px;
        margin-right: -1px;
        margin-top: -1px;
        padding: 0;
        text-align: center;
        width: 34px;
      }
      .square:focus {
        outline: none;
      }
      .game {
        display: flex;
        flex-direction: row;
      }
      .game-info {
        margin-left: 20px;
      }
      .current {
        font-weight: bold;
      }
      .message {
        color: #a33;
        min-height: 1.2em;
      }
    </style>
  </head>
  <body>
    <div class=\"game\">
      <div class=\"game-board\" id=\"board\"></div>
      <div class=\"game-info\">
        <div class=\"status\" id=\"status\">Loading…</div>
        <ol id=\"moves\"></ol>
        <div class=\"message\" id=\"message\"></div>
      </div>
    </div>
    <script>
      const boardEl = document.getElementById('board');
      const statusEl = document.getElementById('status');
      const movesEl = document.getElementById('moves');
      const messageEl = document.getElementById('message');

      let gameId = null;
      let gameState = null;
      let isRequestPending = false;

      async function request(path, payload) {
        const response = await fetch(path, {
          method: 'POST',
          headers: { 'Content-Type': 'application/json' },
          body: payload === undefined ? undefined : JSON.stringify(payload),
        });
        if (!response.ok) {
          const body = await response.json().catch(() => ({}));
          throw new Error(typeof body?.detail === 'string' ? body.detail : 'Request failed');
        }
        return response.json();
      }

      async function send(path, payload) {
        if (isRequestPending || !gameId) return;
        isRequestPending = true;
        messageEl.textContent = '';
        try {
          setState(await request(path, payload));
        } catch (error) {
          messageEl.textContent = error.message || 'Network error. Please try again.';
        } finally {
          isRequestPending = false;
        }
      }

      function handleClick(square) {
        send(`/api/game/${gameId}/move`, { square });
      }

      function jumpTo(step) {
        send(`/api/game/${gameId}/jump`, { step });
      }

      function renderBoard() {
        boardEl.innerHTML = '';
        gameState.rows.forEach((row, rowIndex) => {
          const rowEl = document.createElement('div');
          rowEl.classList.add('board-row');
          row.forEach((value, column) => {
            const square = rowIndex * 3 + column;
            const button = document.createElement('button');
            button.classList.add('square');
            button.textContent = value;
            button.addEventListener('click', () => handleClick(square));
            rowEl.appendChild(button);
          });
          boardEl.appendChild(rowEl);
        });
      }

      function renderMoves() {
        movesEl.innerHTML = '';
        gameState.moves.forEach((move) => {
          const item = document.createElement('li');
          item.dataset.step = String(move.step);
          const button = document.createElement('button');
          button.textContent = move.label;
          if (move.current) {
            button.classList.add('current');
          }
          button.addEventListener('click', () => jumpTo(move.step));
          item.appendChild(button);
          movesEl.appendChild(item);
        });
      }

      function setState(data) {
        gameId = data.id;
        gameState = data;
        statusEl.textContent = data.status;
        renderBoard();
        renderMoves();
      }

      async function startGame() {
        try {
          setState(await request('/api/game'));
        } catch (error) {
          statusEl.textContent = 'Unable to start game';
          messageEl.textContent = error.message;
        }
      }

      window.addEventListener('pagehide', () => {
        if (gameId) {
          fetch(`/api/game/${gameId}`, { method: 'DELETE', keepalive: true });
        }
      });

      startGame();
    </script>
  </body>
</html>
"""
