"""FastAPI-powered web UI for playing Tic-Tac-Toe in the browser."""

from __future__ import annotations

import logging
import threading
import time
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from fastapi import FastAPI, HTTPException
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, ConfigDict, Field

from .game import (
    Board,
    GameState,
    apply_move,
    history_labels,
    initial_state,
    is_draw,
    jump_to,
    status_text,
    winning_line,
)

logger = logging.getLogger(__name__)


@dataclass
class GameSession:
    """Holds the one current snapshot of a game shown in a browser tab."""

    state: GameState = field(default_factory=initial_state)
    last_seen: float = field(default_factory=lambda: time.time())
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)


SESSIONS: Dict[str, GameSession] = {}
app = FastAPI(title="Tic-Tac-Toe", description="Tic-tac-toe with time travel")

SESSION_TTL_SECONDS = 60 * 60  # 1 hour


class MoveRequest(BaseModel):
    """Request payload for clicking a square."""

    model_config = ConfigDict(populate_by_name=True)

    cell_index: int = Field(alias="cellIndex", ge=0, le=8)


class JumpRequest(BaseModel):
    """Request payload for selecting an entry of the move history."""

    step: int = Field(ge=0)


def _cleanup_sessions() -> None:
    """Forget games nobody has touched within the TTL."""

    now = time.time()
    expired = [
        game_id
        for game_id, session in list(SESSIONS.items())
        if now - session.last_seen >= SESSION_TTL_SECONDS
    ]
    for game_id in expired:
        SESSIONS.pop(game_id, None)
    if expired:
        logger.info("Expired %d idle game(s)", len(expired))


def _create_session() -> Tuple[str, GameSession]:
    _cleanup_sessions()
    session = GameSession()
    session_id = uuid.uuid4().hex
    SESSIONS[session_id] = session
    logger.info("Created game %s", session_id)
    return session_id, session


def _get_session(game_id: str) -> GameSession:
    try:
        session = SESSIONS[game_id]
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Game not found") from exc
    session.last_seen = time.time()
    return session


def _serialize_board(board: Board) -> List[str]:
    return [c.value if c is not None else "" for c in board]


def _serialize_session(game_id: str, session: GameSession) -> Dict[str, object]:
    with session.lock:
        state = session.state
        winner = state.winner
        line = winning_line(state.current)
        return {
            "id": game_id,
            "squares": _serialize_board(state.current),
            "history": [_serialize_board(board) for board in state.history],
            "currentStep": state.current_step,
            "xIsNext": state.x_is_next,
            "nextPlayer": state.next_mark.value,
            "winner": winner.value if winner is not None else None,
            "winningLine": list(line) if line is not None else None,
            "drawn": is_draw(state.current),
            "status": status_text(state),
            "moves": [
                {"step": step, "label": label}
                for step, label in enumerate(history_labels(state))
            ],
        }


def _apply_player_move(game_id: str, session: GameSession, cell_index: int) -> None:
    with session.lock:
        before = session.state
        session.state = apply_move(before, cell_index)
        if session.state is before:
            logger.debug("Ignored move on cell %d in game %s", cell_index, game_id)
        else:
            logger.debug(
                "Game %s: %s played cell %d",
                game_id,
                before.next_mark.value,
                cell_index,
            )


def _apply_jump(game_id: str, session: GameSession, step: int) -> None:
    with session.lock:
        try:
            session.state = jump_to(session.state, step)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        logger.debug("Game %s: jumped to step %d", game_id, step)


@app.post("/api/game")
def create_game() -> Dict[str, object]:
    game_id, session = _create_session()
    return _serialize_session(game_id, session)


@app.get("/api/game/{game_id}")
def get_game(game_id: str) -> Dict[str, object]:
    session = _get_session(game_id)
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/move")
def make_move(game_id: str, request: MoveRequest) -> Dict[str, object]:
    session = _get_session(game_id)
    _apply_player_move(game_id, session, request.cell_index)
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/jump")
def jump(game_id: str, request: JumpRequest) -> Dict[str, object]:
    session = _get_session(game_id)
    _apply_jump(game_id, session, request.step)
    return _serialize_session(game_id, session)


@app.get("/", response_class=HTMLResponse)
def index() -> str:
    return HTML_PAGE


HTML_PAGE = """<!DOCTYPE html>
<html lang=\"en\">
  <head>
    <meta charset=\"utf-8\" />
    <meta name=\"viewport\" content=\"width=device-width, initial-scale=1\" />
    <title>Tic-Tac-Toe</title>
    <style>
      body {
        font: 14px \"Century Gothic\", Futura, sans-serif;
        margin: 20px;
      }
      ol, ul {
        padding-left: 30px;
      }
      .game {
        display: flex;
        flex-direction: row;
      }
      .game-info {
        margin-left: 20px;
      }
      .board-row:after {
        clear: both;
        content: \"\";
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
      .square.win {
        background: #ffe58a;
      }
      .square:focus {
        outline: none;
        background: #ddd;
      }
      li.current button {
        font-weight: bold;
      }
    </style>
  </head>
  <body>
    <div class=\"game\">
      <div class=\"game-board\" id=\"board\"></div>
      <div class=\"game-info\">
        <div class=\"status\" id=\"status\"></div>
        <button id=\"new-game\">New game</button>
        <ol id=\"moves\"></ol>
      </div>
    </div>
    <script>
      let gameId = null;

      async function call(method, path, body) {
        const response = await fetch(path, {
          method,
          headers: { \"Content-Type\": \"application/json\" },
          body: body === undefined ? undefined : JSON.stringify(body),
        });
        if (!response.ok) {
          const payload = await response.json().catch(() => ({}));
          throw new Error(payload.detail || response.statusText);
        }
        return response.json();
      }

      function render(state) {
        gameId = state.id;
        const board = document.getElementById(\"board\");
        board.innerHTML = \"\";
        const line = state.winningLine || [];
        for (let row = 0; row < 3; row++) {
          const rowEl = document.createElement(\"div\");
          rowEl.className = \"board-row\";
          for (let col = 0; col < 3; col++) {
            const index = row * 3 + col;
            const square = document.createElement(\"button\");
            square.className = line.includes(index) ? \"square win\" : \"square\";
            square.textContent = state.squares[index];
            square.addEventListener(\"click\", () => play(index));
            rowEl.appendChild(square);
          }
          board.appendChild(rowEl);
        }

        document.getElementById(\"status\").textContent = state.drawn ? \"Draw\" : state.status;

        const moves = document.getElementById(\"moves\");
        moves.innerHTML = \"\";
        for (const move of state.moves) {
          const item = document.createElement(\"li\");
          if (move.step === state.currentStep) {
            item.className = \"current\";
          }
          const button = document.createElement(\"button\");
          button.textContent = move.label;
          button.addEventListener(\"click\", () => jump(move.step));
          item.appendChild(button);
          moves.appendChild(item);
        }
      }

      async function newGame() {
        render(await call(\"POST\", \"/api/game\"));
      }

      async function play(index) {
        render(await call(\"POST\", `/api/game/${gameId}/move`, { cellIndex: index }));
      }

      async function jump(step) {
        render(await call(\"POST\", `/api/game/${gameId}/jump`, { step }));
      }

      document.getElementById(\"new-game\").addEventListener(\"click\", newGame);
      newGame();
    </script>
  </body>
</html>
"""
