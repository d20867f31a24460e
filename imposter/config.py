import os

from dotenv import load_dotenv

# =========================
# ENV
# =========================
load_dotenv()

DISCORD_TOKEN = os.getenv("DISCORD_TOKEN")
PREFIX = os.getenv("PREFIX", "!")
WORDS_FILE = os.getenv("WORDS_FILE", "words.txt")
PORT = int(os.getenv("PORT", "3000"))
SECRET_KEY = os.getenv("SECRET_KEY", "dev-imposter-secret")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


# =========================
# GAME
# =========================
MIN_PLAYERS = 3
MAX_PLAYERS = 12
MIN_IMPOSTERS = 1

DEFAULT_NAME = "Player {}"
