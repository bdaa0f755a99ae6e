"""Tests for the FastAPI tic-tac-toe interface."""

from __future__ import annotations

from fastapi.testclient import TestClient

from xoengine import ui
from xoengine.ui import app


client = TestClient(app)
ui.AI_THINK_DELAY = (0.0, 0.0)


def _new_game(difficulty: int = 2) -> dict:
    response = client.post("/api/game", json={"difficulty": difficulty})
    assert response.status_code == 200
    return response.json()


def test_create_game_and_first_move():
    payload = _new_game()
    assert payload["currentPlayer"] == "human"
    assert payload["cells"] == [""] * 9
    assert payload["outcome"] == "in_progress"
    assert payload["moveLog"] == []
    assert payload["score"] == {"human": 0, "computer": 0}

    game_id = payload["id"]
    move_response = client.post(f"/api/game/{game_id}/move", json={"cellIndex": 4})
    assert move_response.status_code == 200
    state = move_response.json()
    assert state["cells"][4] == "X"
    assert state["moveLog"][0] == {"player": "human", "cellIndex": 4}
    assert state["currentPlayer"] == "computer"
    assert state["aiPending"] is True

    follow_up = client.get(f"/api/game/{game_id}")
    assert follow_up.status_code == 200
    final_state = follow_up.json()
    assert final_state["aiPending"] is False
    assert final_state["currentPlayer"] == "human"
    assert final_state["lastMove"]["player"] == "computer"
    assert final_state["cells"].count("O") == 1


def test_invalid_move_rejected():
    game_id = _new_game()["id"]
    first_move = client.post(f"/api/game/{game_id}/move", json={"cellIndex": 0})
    assert first_move.status_code == 200

    duplicate_move = client.post(f"/api/game/{game_id}/move", json={"cellIndex": 0})
    assert duplicate_move.status_code == 400
    assert duplicate_move.json()["detail"]


def test_out_of_range_cell_is_rejected():
    game_id = _new_game()["id"]
    response = client.post(f"/api/game/{game_id}/move", json={"cellIndex": 9})
    assert response.status_code == 422


def test_rejects_unsupported_difficulty():
    response = client.post("/api/game", json={"difficulty": 5})
    assert response.status_code == 422


def test_unknown_game_returns_404():
    assert client.get("/api/game/missing").status_code == 404


def test_full_match_and_reset():
    state = _new_game()
    game_id = state["id"]

    reset_early = client.post(f"/api/game/{game_id}/reset")
    assert reset_early.status_code == 400

    while state["outcome"] == "in_progress":
        cell = state["cells"].index("")
        client.post(f"/api/game/{game_id}/move", json={"cellIndex": cell})
        state = client.get(f"/api/game/{game_id}").json()

    assert state["outcome"] in ("draw", "computer_win")
    assert state["events"]
    if state["outcome"] == "computer_win":
        assert state["score"] == {"human": 0, "computer": 1}
        assert {"type": "win", "player": "computer"} in state["events"]
    else:
        assert state["events"] == [{"type": "draw"}]

    blocked = client.post(f"/api/game/{game_id}/move", json={"cellIndex": 0})
    assert blocked.status_code == 400

    reset = client.post(f"/api/game/{game_id}/reset")
    assert reset.status_code == 200
    after = client.get(f"/api/game/{game_id}").json()
    assert after["outcome"] == "in_progress"
    assert after["events"] == []
    assert after["currentPlayer"] == "human"


def test_change_difficulty_resets_score():
    game_id = _new_game()["id"]
    client.post(f"/api/game/{game_id}/move", json={"cellIndex": 0})

    response = client.post(f"/api/game/{game_id}/difficulty", json={"difficulty": 0})
    assert response.status_code == 200
    state = response.json()
    assert state["difficulty"] == 0
    assert state["cells"] == [""] * 9
    assert state["events"] == [{"type": "score", "human": 0, "computer": 0}]

    bad = client.post(f"/api/game/{game_id}/difficulty", json={"difficulty": 4})
    assert bad.status_code == 422


def test_index_serves_page():
    response = client.get("/")
    assert response.status_code == 200
    assert "ttt-box" in response.text
