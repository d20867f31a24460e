"""Flask front-end: the same game as a small JSON API, one game per browser session."""
import logging
import uuid
from typing import Optional

from flask import Flask, jsonify, request, session as cookie

from imposter import game
from imposter.config import PORT, SECRET_KEY
from imposter.errors import GameError, StageMismatch
from imposter.prompts import apply_action, build_prompt
from imposter.store import SessionStore
from imposter.words import WordList

log = logging.getLogger(__name__)


def create_app(store: Optional[SessionStore] = None, words: Optional[WordList] = None, rng=None) -> Flask:
    app = Flask(__name__)
    app.config["SECRET_KEY"] = SECRET_KEY

    store = store or SessionStore()
    words = words or WordList()
    app.extensions["imposter"] = {"store": store, "words": words}

    def game_key() -> str:
        if "game_id" not in cookie:
            cookie["game_id"] = uuid.uuid4().hex
        return cookie["game_id"]

    def state(s: game.Session, status: int = 200):
        return jsonify(stage=s.stage.value, prompt=build_prompt(s).to_dict()), status

    def body() -> dict:
        data = request.get_json(silent=True)
        return data if isinstance(data, dict) else {}

    @app.errorhandler(GameError)
    def rejected(err: GameError):
        key = game_key()
        log.debug("game %s rejected input: %s", key, err.code)
        s = store.get(key)
        status = 409 if isinstance(err, StageMismatch) else 400
        return jsonify(
            error=err.code,
            message=str(err),
            stage=s.stage.value,
            prompt=build_prompt(s).to_dict(),
        ), status

    @app.get("/")
    def home():
        return "OK", 200

    @app.get("/health")
    def health():
        return "healthy", 200

    @app.get("/api/words")
    def word_count():
        return jsonify(count=len(words))

    @app.get("/api/game")
    def current():
        return state(store.get(game_key()))

    @app.post("/api/game/reset")
    def reset():
        key = game_key()
        log.info("game %s: new game", key)
        return state(store.reset(key))

    @app.post("/api/game/input")
    def text_input():
        s = store.update(game_key(), game.handle_text, str(body().get("text") or ""), words.pick, rng)
        return state(s)

    @app.post("/api/game/players")
    def players():
        return state(store.update(game_key(), game.set_player_count, body().get("value", "")))

    @app.post("/api/game/names")
    def names():
        data = body()
        value = data["names"] if isinstance(data.get("names"), list) else str(data.get("text") or "")
        return state(store.update(game_key(), game.set_names, value))

    @app.post("/api/game/imposters")
    def imposters():
        key = game_key()
        s = store.update(key, game.set_imposter_count, body().get("value", ""), words.pick, rng)
        log.info("game %s: %d players, %d imposter(s)", key, s.player_count, s.imposter_count)
        return state(s)

    @app.post("/api/game/action")
    def action():
        key = game_key()
        s = store.update(key, apply_action, str(body().get("action") or ""))
        if s.stage is game.Stage.FINISHED:
            log.info("game %s: finished", key)
        return state(s)

    return app


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    create_app().run(host="0.0.0.0", port=PORT)
