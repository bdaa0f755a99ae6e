"""FastAPI-powered web UI for playing tic-tac-toe against the computer."""

from __future__ import annotations

import logging
import random
import threading
import time
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from fastapi import BackgroundTasks, FastAPI, HTTPException
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .ai import Difficulty
from .errors import InvalidMove
from .game import SYMBOLS, Mark, Outcome, winner
from .session import MatchObserver, MatchSession

logger = logging.getLogger(__name__)


class EventLog(MatchObserver):
    """Collects observer notifications so the browser can show them."""

    def __init__(self) -> None:
        self.events: List[Dict[str, object]] = []

    def on_win(self, player: Mark) -> None:
        self.events.append({"type": "win", "player": player.name.lower()})

    def on_draw(self) -> None:
        self.events.append({"type": "draw"})

    def on_score(self, human_wins: int, computer_wins: int) -> None:
        self.events.append(
            {"type": "score", "human": human_wins, "computer": computer_wins}
        )


@dataclass
class GameSession:
    """Container for an active match series and the events it has produced."""

    match: MatchSession
    log: EventLog
    ai_pending: bool = False
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)


SESSIONS: Dict[str, GameSession] = {}
app = FastAPI(title="XOEngine", description="Tic-tac-toe against a minimax opponent")


ALLOWED_DIFFICULTIES: Tuple[int, ...] = tuple(int(d) for d in Difficulty)
AI_THINK_DELAY: Tuple[float, float] = (0.3, 0.6)


def _validate_difficulty(value: int) -> int:
    if value not in ALLOWED_DIFFICULTIES:
        raise ValueError(
            f"Unsupported difficulty {value}. "
            f"Choose one of {', '.join(map(str, ALLOWED_DIFFICULTIES))}."
        )
    return value


class NewGameRequest(BaseModel):
    """Request payload for starting a new game."""

    difficulty: int = Field(
        default=int(Difficulty.IMPOSSIBLE),
        description="0 = easy, 1 = fair, 2 = impossible",
    )

    @field_validator("difficulty")
    @classmethod
    def ensure_supported_difficulty(cls, value: int) -> int:
        return _validate_difficulty(value)


class DifficultyRequest(NewGameRequest):
    """Request payload for switching difficulty on an existing game."""


class MoveRequest(BaseModel):
    """Request payload for submitting a move on an existing game."""

    model_config = ConfigDict(populate_by_name=True)

    cell_index: int = Field(alias="cellIndex", ge=0, le=8)


def _create_session(difficulty: int) -> Tuple[str, GameSession]:
    """Create a new game session and register it for later access."""

    log = EventLog()
    match = MatchSession(difficulty=Difficulty(difficulty), observer=log)
    session = GameSession(match=match, log=log)
    session_id = uuid.uuid4().hex
    SESSIONS[session_id] = session
    logger.info("Created game %s at difficulty %s", session_id, match.difficulty.name)
    return session_id, session


def _get_session(game_id: str) -> GameSession:
    try:
        return SESSIONS[game_id]
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Game not found") from exc


def _run_ai_turn(game_id: str) -> None:
    session = SESSIONS.get(game_id)
    if not session:
        return

    time.sleep(max(0.0, random.uniform(*AI_THINK_DELAY)))

    with session.lock:
        try:
            if session.match.computer_to_move:
                session.match.play_computer()
        finally:
            session.ai_pending = False


def _schedule_ai(
    game_id: str, session: GameSession, background_tasks: Optional[BackgroundTasks]
) -> None:
    """Queue the computer's reply. Caller must hold ``session.lock``."""

    if session.match.computer_to_move and not session.ai_pending:
        session.ai_pending = True
        if background_tasks is not None:
            background_tasks.add_task(_run_ai_turn, game_id)


def _serialize_session(game_id: str, session: GameSession) -> Dict[str, object]:
    with session.lock:
        match = session.match
        w = winner(match.board)
        move_log = [
            {"player": Mark(m["player"]).name.lower(), "cellIndex": m["cell"]}
            for m in match.move_log
        ]
        state: Dict[str, object] = {
            "id": game_id,
            "cells": [SYMBOLS[Mark(c)] for c in match.board],
            "currentPlayer": match.current_player.name.lower(),
            "outcome": match.outcome.value,
            "winner": w.name.lower() if w is not None else None,
            "difficulty": int(match.difficulty),
            "score": {"human": match.human_wins, "computer": match.computer_wins},
            "moveLog": move_log,
            "aiPending": session.ai_pending,
            "events": list(session.log.events),
        }
        if move_log:
            state["lastMove"] = move_log[-1]
        return state


def _apply_player_move(
    game_id: str,
    session: GameSession,
    cell_index: int,
    background_tasks: Optional[BackgroundTasks] = None,
) -> None:
    with session.lock:
        match = session.match
        if match.outcome != Outcome.IN_PROGRESS:
            raise HTTPException(status_code=400, detail="Game already finished")

        if session.ai_pending:
            raise HTTPException(status_code=400, detail="AI is completing its move")

        try:
            match.play_human(cell_index)
        except InvalidMove as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc

        _schedule_ai(game_id, session, background_tasks)


@app.post("/api/game")
def create_game(
    request: NewGameRequest, background_tasks: BackgroundTasks
) -> Dict[str, object]:
    game_id, session = _create_session(request.difficulty)
    with session.lock:
        _schedule_ai(game_id, session, background_tasks)
    return _serialize_session(game_id, session)


@app.get("/api/game/{game_id}")
def get_game(game_id: str) -> Dict[str, object]:
    session = _get_session(game_id)
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/move")
def make_move(
    game_id: str, request: MoveRequest, background_tasks: BackgroundTasks
) -> Dict[str, object]:
    session = _get_session(game_id)
    _apply_player_move(game_id, session, request.cell_index, background_tasks)
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/reset")
def reset_game(game_id: str, background_tasks: BackgroundTasks) -> Dict[str, object]:
    session = _get_session(game_id)
    with session.lock:
        if session.match.outcome == Outcome.IN_PROGRESS:
            raise HTTPException(status_code=400, detail="Game is still in progress")
        session.match.new_match()
        session.log.events.clear()
        _schedule_ai(game_id, session, background_tasks)
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/difficulty")
def change_difficulty(game_id: str, request: DifficultyRequest) -> Dict[str, object]:
    session = _get_session(game_id)
    with session.lock:
        if session.ai_pending:
            raise HTTPException(status_code=400, detail="AI is completing its move")
        session.log.events.clear()
        session.match.set_difficulty(request.difficulty)
    return _serialize_session(game_id, session)


@app.get("/", response_class=HTMLResponse)
def index() -> str:
    return HTML_PAGE


HTML_PAGE = """<!DOCTYPE html>
<html lang=\"en\">
  <head>
    <meta charset=\"utf-8\" />
    <meta name=\"viewport\" content=\"width=device-width, initial-scale=1\" />
    <title>XOEngine</title>
    <style>
      :root {
        color-scheme: light;
        font-family: system-ui, -apple-system, BlinkMacSystemFont, \"Segoe UI\", sans-serif;
      }
      * {
        box-sizing: border-box;
      }
      body {
        margin: 0;
        background: radial-gradient(circle at top, #f2f5ff, #dbe0ff 40%, #cfd8ff 70%);
        min-height: 100vh;
        display: flex;
        justify-content: center;
        padding: 2rem 1rem 3rem;
        color: #13203a;
      }
      main {
        background: rgba(255, 255, 255, 0.92);
        border-radius: 18px;
        box-shadow: 0 20px 40px rgba(34, 47, 79, 0.16);
        padding: 2rem;
        width: min(420px, 100%);
        text-align: center;
      }
      h1 {
        margin: 0 0 1rem;
        letter-spacing: 0.06em;
      }
      select,
      button {
        font-size: 1rem;
        padding: 0.45rem 0.9rem;
        border-radius: 999px;
        border: 1px solid rgba(60, 70, 120, 0.25);
        background: white;
        cursor: pointer;
        font-family: inherit;
      }
      .score {
        display: flex;
        justify-content: space-around;
        margin: 1rem 0;
        font-weight: 600;
      }
      .board {
        display: grid;
        grid-template-columns: repeat(3, 1fr);
        gap: 0.5rem;
        margin: 1rem auto;
        width: 270px;
      }
      .ttt-box {
        height: 84px;
        border-radius: 12px;
        background: #eef1ff;
        font-size: 2.4rem;
        font-weight: 700;
        display: flex;
        align-items: center;
        justify-content: center;
        cursor: pointer;
      }
      .ttt-box.human {
        color: #3a66ff;
      }
      .ttt-box.computer {
        color: #e4572e;
      }
      .status {
        min-height: 1.5rem;
        font-weight: 500;
      }
    </style>
  </head>
  <body>
    <main>
      <h1>Tic-Tac-Toe</h1>
      <label>
        Difficulty
        <select id=\"difficulty\">
          <option value=\"0\">Easy</option>
          <option value=\"1\">Fair</option>
          <option value=\"2\" selected>Impossible</option>
        </select>
      </label>
      <div class=\"score\">
        <span>You: <span id=\"human-score\">0</span></span>
        <span>Computer: <span id=\"computer-score\">0</span></span>
      </div>
      <div class=\"board\" id=\"board\"></div>
      <p class=\"status\" id=\"status\"></p>
      <button id=\"reset\" hidden>Play again</button>
    </main>
    <script>
      const boardEl = document.getElementById('board');
      const statusEl = document.getElementById('status');
      const resetButton = document.getElementById('reset');
      const difficultySelect = document.getElementById('difficulty');
      let gameId = null;
      let state = null;
      let pollTimer = null;

      for (let i = 0; i < 9; i++) {
        const box = document.createElement('div');
        box.className = 'ttt-box';
        box.addEventListener('click', () => sendMove(i));
        boardEl.appendChild(box);
      }

      async function post(url, body) {
        const response = await fetch(url, {
          method: 'POST',
          headers: { 'Content-Type': 'application/json' },
          body: body ? JSON.stringify(body) : undefined,
        });
        if (!response.ok) {
          const detail = await response.json().catch(() => ({}));
          throw new Error(detail.detail || 'Request failed');
        }
        return response.json();
      }

      async function startGame() {
        const data = await post('/api/game', { difficulty: Number(difficultySelect.value) });
        gameId = data.id;
        setState(data);
      }

      async function sendMove(cellIndex) {
        if (!state || state.aiPending || state.outcome !== 'in_progress') return;
        try {
          setState(await post(`/api/game/${gameId}/move`, { cellIndex }));
        } catch (err) {
          statusEl.textContent = err.message;
        }
      }

      async function pollAiState() {
        const response = await fetch(`/api/game/${gameId}`);
        if (response.ok) setState(await response.json());
      }

      function setState(data) {
        state = data;
        clearTimeout(pollTimer);
        if (state.aiPending) pollTimer = setTimeout(pollAiState, 250);
        render();
      }

      function render() {
        state.cells.forEach((mark, i) => {
          const box = boardEl.children[i];
          box.textContent = mark;
          box.classList.toggle('human', mark === 'X');
          box.classList.toggle('computer', mark === 'O');
        });
        document.getElementById('human-score').textContent = state.score.human;
        document.getElementById('computer-score').textContent = state.score.computer;
        const finished = state.outcome !== 'in_progress';
        resetButton.hidden = !finished;
        if (state.outcome === 'draw') statusEl.textContent = 'Draw!';
        else if (state.winner === 'human') statusEl.textContent = 'You win!';
        else if (state.winner === 'computer') statusEl.textContent = 'The computer wins!';
        else if (state.aiPending) statusEl.textContent = 'Computer is thinking...';
        else statusEl.textContent = 'Your move';
      }

      resetButton.addEventListener('click', async () => {
        setState(await post(`/api/game/${gameId}/reset`));
      });

      difficultySelect.addEventListener('change', async () => {
        try {
          setState(
            await post(`/api/game/${gameId}/difficulty`, {
              difficulty: Number(difficultySelect.value),
            })
          );
        } catch (err) {
          statusEl.textContent = err.message;
        }
      });

      startGame();
    </script>
  </body>
</html>
"""
