import random

import pytest

from imposter.store import SessionStore
from imposter.words import WordList
from web import create_app


@pytest.fixture
def client():
    app = create_app(SessionStore(), WordList(["VOLCANO"]), random.Random(0))
    app.config["TESTING"] = True
    return app.test_client()


def _setup(client, players=3, names="Ann, Bo, Cy", imposters=1):
    assert client.post("/api/game/players", json={"value": players}).status_code == 200
    assert client.post("/api/game/names", json={"text": names}).status_code == 200
    return client.post("/api/game/imposters", json={"value": imposters})


def test_health_routes(client):
    assert client.get("/").data == b"OK"
    assert client.get("/health").data == b"healthy"


def test_word_count(client):
    assert client.get("/api/words").get_json() == {"count": 1}


def test_new_browser_session_starts_at_player_count(client):
    data = client.get("/api/game").get_json()
    assert data["stage"] == "awaiting_player_count"
    assert data["prompt"]["kind"] == "player_count"


def test_out_of_range_keeps_state(client):
    res = client.post("/api/game/players", json={"value": 2})
    assert res.status_code == 400
    data = res.get_json()
    assert data["error"] == "out_of_range"
    assert data["stage"] == "awaiting_player_count"


def test_full_game(client):
    data = _setup(client).get_json()
    assert data["stage"] == "revealing"

    for _ in range(3):
        client.post("/api/game/action", json={"action": "reveal:show"})
        client.post("/api/game/action", json={"action": "reveal:next"})

    for target in (1, 1, 2):
        client.post("/api/game/action", json={"action": f"vote:select:{target}"})
        data = client.post("/api/game/action", json={"action": "vote:confirm"}).get_json()

    assert data["stage"] == "finished"
    assert data["prompt"]["data"]["word"] == "VOLCANO"
    assert data["prompt"]["data"]["most_accused"] == ["Bo"]


def test_text_input_route(client):
    client.post("/api/game/input", json={"text": "4"})
    data = client.post("/api/game/input", json={"text": "a\nb"}).get_json()
    assert data["stage"] == "awaiting_imposter_count"
    assert data["prompt"]["data"]["max"] == 3


def test_names_as_list(client):
    client.post("/api/game/players", json={"value": 3})
    data = client.post("/api/game/names", json={"names": ["X", "", "Z"]}).get_json()
    assert data["stage"] == "awaiting_imposter_count"
    client.post("/api/game/imposters", json={"value": 1})

    names = []
    for _ in range(3):
        names.append(client.get("/api/game").get_json()["prompt"]["data"]["player"])
        client.post("/api/game/action", json={"action": "reveal:show"})
        client.post("/api/game/action", json={"action": "reveal:next"})
    assert names == ["X", "Z", "Player 3"]


def test_next_before_show(client):
    _setup(client)
    res = client.post("/api/game/action", json={"action": "reveal:next"})
    assert res.status_code == 400
    assert res.get_json()["error"] == "not_yet_revealed"


def test_stale_action_is_a_conflict(client):
    res = client.post("/api/game/action", json={"action": "vote:confirm"})
    assert res.status_code == 409
    assert res.get_json()["error"] == "stage_mismatch"


def test_reset(client):
    _setup(client)
    data = client.post("/api/game/reset").get_json()
    assert data["stage"] == "awaiting_player_count"


def test_browsers_do_not_share_games():
    app = create_app(SessionStore(), WordList(["VOLCANO"]))
    first, second = app.test_client(), app.test_client()
    first.post("/api/game/players", json={"value": 5})
    assert first.get("/api/game").get_json()["stage"] == "awaiting_names"
    assert second.get("/api/game").get_json()["stage"] == "awaiting_player_count"


@pytest.mark.parametrize("payload", [[4], "4", 4, None])
def test_non_object_json_is_treated_as_empty_input(client, payload):
    res = client.post("/api/game/input", json=payload)
    assert res.status_code == 400
    data = res.get_json()
    assert data["error"] == "out_of_range"
    assert data["stage"] == "awaiting_player_count"


def test_null_text_keeps_default_names(client):
    client.post("/api/game/players", json={"value": 3})
    data = client.post("/api/game/input", json={"text": None}).get_json()
    assert data["stage"] == "awaiting_imposter_count"
    client.post("/api/game/imposters", json={"value": 1})
    assert client.get("/api/game").get_json()["prompt"]["data"]["player"] == "Player 1"


def test_null_names_text_keeps_default_names(client):
    client.post("/api/game/players", json={"value": 3})
    client.post("/api/game/names", json={"text": None})
    client.post("/api/game/imposters", json={"value": 1})
    assert client.get("/api/game").get_json()["prompt"]["data"]["player"] == "Player 1"
