import logging
import os
import random
from typing import Dict, List, Optional

from .config import WORDS_FILE

log = logging.getLogger(__name__)

FALLBACK_WORDS = ["PIZZA", "AIRPLANE", "VOLCANO", "BICYCLE", "CHOCOLATE", "PYRAMID", "ROBOT", "CASTLE"]


# =========================
# WORDS
# =========================
def load_words(path: str = WORDS_FILE) -> List[str]:
    """Read one word per line, skipping comments and phrases; upper-cased, first occurrence kept."""
    words: Dict[str, None] = {}
    if os.path.exists(path):
        with open(path, "r", encoding="utf-8") as f:
            for raw in f:
                line = raw.strip()
                if line and not line.startswith("#") and " " not in line:
                    words.setdefault(line.upper())

    if not words:
        log.warning("no words loaded from %s, using the built-in list", path)
        return list(FALLBACK_WORDS)
    return list(words)


class WordList:
    """Flat list of secret words with a uniform random pick."""

    def __init__(self, words: Optional[List[str]] = None, rng: Optional[random.Random] = None):
        self.words = list(words) if words is not None else load_words()
        self.rng = rng or random.Random()

    @classmethod
    def from_file(cls, path: str, rng: Optional[random.Random] = None) -> "WordList":
        return cls(load_words(path), rng)

    def pick(self) -> str:
        return self.rng.choice(self.words)

    def __len__(self) -> int:
        return len(self.words)
