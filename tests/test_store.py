import pytest

from imposter import game
from imposter.errors import OutOfRange
from imposter.store import SessionStore


def test_get_creates_on_first_access():
    store = SessionStore()
    assert "chat" not in store
    s = store.get("chat")
    assert s.stage is game.Stage.AWAITING_PLAYER_COUNT
    assert store.get("chat") is s
    assert len(store) == 1


def test_update_keeps_the_reducer_result():
    store = SessionStore()
    s = store.update("chat", game.set_player_count, 4)
    assert store.get("chat") is s
    assert s.player_count == 4


def test_failed_update_leaves_session_untouched():
    store = SessionStore()
    before = store.get("chat")
    with pytest.raises(OutOfRange):
        store.update("chat", game.set_player_count, 99)
    assert store.get("chat") is before


def test_keys_are_independent():
    store = SessionStore()
    store.update((1, 1), game.set_player_count, 5)
    assert store.get((1, 2)).stage is game.Stage.AWAITING_PLAYER_COUNT
    assert sorted(store.keys()) == [(1, 1), (1, 2)]


def test_reset_replaces_and_discard_removes():
    store = SessionStore()
    store.update("chat", game.set_player_count, 5)
    assert store.reset("chat").stage is game.Stage.AWAITING_PLAYER_COUNT
    store.discard("chat")
    store.discard("missing")
    assert "chat" not in store
