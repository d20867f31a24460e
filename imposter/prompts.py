"""
Structured prompts for the current stage of a session, and the action ids
the adapters send back.

Adapters never look inside the session directly: they render a `Prompt`
(Discord embeds, JSON for the web client) and turn button presses into
action ids like ``reveal:show`` or ``vote:select:2``.
"""
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .config import MAX_PLAYERS, MIN_IMPOSTERS, MIN_PLAYERS
from .errors import StageMismatch
from .game import (
    NO_VOTE,
    Session,
    Stage,
    confirm_vote,
    max_imposters,
    request_next,
    request_show,
    select_target,
    tally,
)

SHOW = "reveal:show"
NEXT = "reveal:next"
SELECT = "vote:select:{}"
CONFIRM = "vote:confirm"


@dataclass
class Prompt:
    kind: str
    data: Dict[str, Any] = field(default_factory=dict)
    actions: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def progress(index: int, total: int) -> str:
    return f"{index + 1} / {total}"


def _reveal(session: Session) -> Prompt:
    player = session.current_player
    data = {
        "player": player.name,
        "index": player.index,
        "progress": progress(session.reveal_index, len(session.assignments)),
        "revealed": session.word_revealed,
    }
    if not session.word_revealed:
        return Prompt("reveal", data, [SHOW])

    data["is_imposter"] = player.is_imposter
    data["word"] = player.word
    return Prompt("reveal", data, [NEXT])


def _ballot(session: Session) -> Prompt:
    selected = session.current_vote
    targets = [
        {"index": p.index, "name": p.name, "selected": p.index == selected}
        for p in session.assignments
    ]
    data = {
        "voter": session.current_voter.name,
        "index": session.voter_index,
        "progress": progress(session.voter_index, len(session.assignments)),
        "targets": targets,
        "selected": selected,
        "selected_name": session.assignments[selected].name if selected != NO_VOTE else None,
    }
    actions = [SELECT.format(p.index) for p in session.assignments] + [CONFIRM]
    return Prompt("ballot", data, actions)


def _result(session: Session) -> Prompt:
    result = tally(session)
    data = {
        "imposters": list(result.imposters),
        "word": result.word,
        "counts": list(result.counts),
        "max_votes": result.max_votes,
        "most_accused": list(result.most_accused),
        "players": [
            {"name": p.name, "is_imposter": p.is_imposter, "votes": votes}
            for p, votes in result.rows(session.assignments)
        ],
    }
    return Prompt("result", data)


def build_prompt(session: Session) -> Prompt:
    stage = session.stage
    if stage is Stage.AWAITING_PLAYER_COUNT:
        return Prompt("player_count", {"min": MIN_PLAYERS, "max": MAX_PLAYERS})
    if stage is Stage.AWAITING_NAMES:
        return Prompt(
            "names",
            {"player_count": session.player_count, "names": list(session.player_names)},
        )
    if stage is Stage.AWAITING_IMPOSTER_COUNT:
        return Prompt(
            "imposter_count",
            {"min": MIN_IMPOSTERS, "max": max_imposters(session.player_count)},
        )
    if stage is Stage.REVEALING:
        return _reveal(session)
    if stage is Stage.VOTING:
        return _ballot(session)
    return _result(session)


# =========================
# ACTIONS
# =========================
def parse_action(text: str) -> Tuple[str, Optional[str]]:
    """Split an action id into its name and optional target: ``vote:select:2`` -> ("vote:select", "2")."""
    text = (text or "").strip()
    if text in (SHOW, NEXT, CONFIRM):
        return text, None

    prefix, _, target = text.rpartition(":")
    if prefix == "vote:select":
        return prefix, target
    return text, None


def apply_action(session: Session, action: str) -> Session:
    """Apply one button action id to the session."""
    name, target = parse_action(action)
    if name == SHOW:
        return request_show(session)
    if name == NEXT:
        return request_next(session)
    if name == CONFIRM:
        return confirm_vote(session)
    if name == "vote:select":
        return select_target(session, target)

    # stale or foreign button
    raise StageMismatch((), session.stage)
