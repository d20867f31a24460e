"""Shared core of the imposter party game, used by the Discord bot and the web app."""
from .errors import (
    AlreadyRevealed,
    GameError,
    InvalidTarget,
    NoSelection,
    NotYetRevealed,
    OutOfRange,
    StageMismatch,
)
from .game import PlayerAssignment, Result, Session, Stage, new_session, tally
from .prompts import Prompt, apply_action, build_prompt, parse_action
from .store import SessionStore
from .words import WordList

__all__ = [
    "AlreadyRevealed",
    "GameError",
    "InvalidTarget",
    "NoSelection",
    "NotYetRevealed",
    "OutOfRange",
    "PlayerAssignment",
    "Prompt",
    "Result",
    "Session",
    "SessionStore",
    "Stage",
    "StageMismatch",
    "WordList",
    "apply_action",
    "build_prompt",
    "new_session",
    "parse_action",
    "tally",
]
