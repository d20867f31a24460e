"""Game session model and the operations that drive it.

Every operation takes a `Session` and returns a new one. A rejected input
raises a `GameError` and the session passed in stays as it was, so callers
can simply keep their old value.
"""
import enum
import random
import re
from dataclasses import dataclass, field, replace
from typing import Callable, Iterable, List, Optional, Sequence, Set, Tuple, Union

from .config import DEFAULT_NAME, MAX_PLAYERS, MIN_IMPOSTERS, MIN_PLAYERS
from .errors import (
    AlreadyRevealed,
    InvalidTarget,
    NoSelection,
    NotYetRevealed,
    OutOfRange,
    StageMismatch,
)

NO_VOTE = -1

NumberInput = Union[int, str]


# =========================
# STATE
# =========================
class Stage(enum.Enum):
    AWAITING_PLAYER_COUNT = "awaiting_player_count"
    AWAITING_NAMES = "awaiting_names"
    AWAITING_IMPOSTER_COUNT = "awaiting_imposter_count"
    REVEALING = "revealing"
    VOTING = "voting"
    FINISHED = "finished"


SETUP_STAGES = (Stage.AWAITING_PLAYER_COUNT, Stage.AWAITING_NAMES, Stage.AWAITING_IMPOSTER_COUNT)


@dataclass(frozen=True)
class PlayerAssignment:
    index: int
    name: str
    is_imposter: bool
    word: Optional[str]  # None for imposters


def default_name(index: int) -> str:
    return DEFAULT_NAME.format(index + 1)


def ensure_names(count: int, current: Iterable[str]) -> Tuple[str, ...]:
    """Pad or truncate `current` to `count` names, filling blanks with defaults."""
    names = list(current)[:count]
    out = []
    for i in range(count):
        n = names[i].strip() if i < len(names) and names[i] else ""
        out.append(n or default_name(i))
    return tuple(out)


@dataclass(frozen=True)
class Session:
    stage: Stage = Stage.AWAITING_PLAYER_COUNT

    player_count: int = MIN_PLAYERS
    player_names: Tuple[str, ...] = field(default_factory=lambda: ensure_names(MIN_PLAYERS, ()))
    imposter_count: int = MIN_IMPOSTERS

    # filled by assign(), fixed until reset
    assignments: Tuple[PlayerAssignment, ...] = ()
    selected_word: str = ""

    # reveal
    reveal_index: int = 0
    word_revealed: bool = False

    # voting (one entry per voter, NO_VOTE until selected)
    voter_index: int = 0
    votes: Tuple[int, ...] = ()

    @property
    def current_player(self) -> PlayerAssignment:
        return self.assignments[self.reveal_index]

    @property
    def current_voter(self) -> PlayerAssignment:
        return self.assignments[self.voter_index]

    @property
    def current_vote(self) -> int:
        return self.votes[self.voter_index]

    def imposters(self) -> List[PlayerAssignment]:
        return [p for p in self.assignments if p.is_imposter]


def new_session() -> Session:
    return Session()


# =========================
# HELPERS
# =========================
def max_imposters(player_count: int) -> int:
    return max(MIN_IMPOSTERS, player_count - 1)


def _expect(session: Session, *stages: Stage) -> None:
    if session.stage not in stages:
        raise StageMismatch(stages, session.stage)


def _to_int(value: NumberInput) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        return None


def _bounded(value: NumberInput, low: int, high: int) -> int:
    n = _to_int(value)
    if n is None or n < low or n > high:
        raise OutOfRange(low, high)
    return n


def split_names(text: str) -> List[str]:
    return [t.strip() for t in re.split(r"[\n,]", text or "") if t.strip()]


# =========================
# SETUP
# =========================
def set_player_count(session: Session, value: NumberInput) -> Session:
    _expect(session, Stage.AWAITING_PLAYER_COUNT)
    count = _bounded(value, MIN_PLAYERS, MAX_PLAYERS)
    return replace(
        session,
        player_count=count,
        player_names=ensure_names(count, session.player_names),
        stage=Stage.AWAITING_NAMES,
    )


def set_names(session: Session, text: Union[str, Sequence[str]]) -> Session:
    """Accept names separated by comma or newline; empty input keeps the current ones."""
    _expect(session, Stage.AWAITING_NAMES)
    if isinstance(text, str):
        names = split_names(text)
    else:
        names = [str(n).strip() for n in text if n is not None and str(n).strip()]
    return replace(
        session,
        player_names=ensure_names(session.player_count, names or session.player_names),
        stage=Stage.AWAITING_IMPOSTER_COUNT,
    )


def set_imposter_count(
    session: Session,
    value: NumberInput,
    pick_word: Callable[[], str],
    rng: Optional[random.Random] = None,
) -> Session:
    _expect(session, Stage.AWAITING_IMPOSTER_COUNT)
    count = _bounded(value, MIN_IMPOSTERS, max_imposters(session.player_count))
    return assign(replace(session, imposter_count=count), pick_word(), rng)


def handle_text(
    session: Session,
    text: str,
    pick_word: Callable[[], str],
    rng: Optional[random.Random] = None,
) -> Session:
    """Route one free-text message to whatever the setup stage is waiting for."""
    if session.stage is Stage.AWAITING_PLAYER_COUNT:
        return set_player_count(session, text)
    if session.stage is Stage.AWAITING_NAMES:
        return set_names(session, text)
    if session.stage is Stage.AWAITING_IMPOSTER_COUNT:
        return set_imposter_count(session, text, pick_word, rng)
    raise StageMismatch(SETUP_STAGES, session.stage)


# =========================
# ASSIGNMENT
# =========================
def pick_imposters(player_count: int, imposter_count: int, rng=None) -> Set[int]:
    rng = rng or random
    chosen: Set[int] = set()
    while len(chosen) < imposter_count:
        chosen.add(rng.randrange(player_count))
    return chosen


def assign(session: Session, word: str, rng=None) -> Session:
    imposters = pick_imposters(session.player_count, session.imposter_count, rng)
    names = ensure_names(session.player_count, session.player_names)
    assignments = tuple(
        PlayerAssignment(
            index=i,
            name=name,
            is_imposter=i in imposters,
            word=None if i in imposters else word,
        )
        for i, name in enumerate(names)
    )
    return replace(
        session,
        player_names=names,
        assignments=assignments,
        selected_word=word,
        votes=(NO_VOTE,) * session.player_count,
        reveal_index=0,
        word_revealed=False,
        voter_index=0,
        stage=Stage.REVEALING,
    )


# =========================
# REVEAL
# =========================
def request_show(session: Session) -> Session:
    _expect(session, Stage.REVEALING)
    if session.word_revealed:
        raise AlreadyRevealed()
    return replace(session, word_revealed=True)


def request_next(session: Session) -> Session:
    _expect(session, Stage.REVEALING)
    if not session.word_revealed:
        raise NotYetRevealed()

    if session.reveal_index == len(session.assignments) - 1:
        return replace(session, stage=Stage.VOTING, voter_index=0)
    return replace(session, reveal_index=session.reveal_index + 1, word_revealed=False)


# =========================
# VOTING
# =========================
def select_target(session: Session, target: NumberInput) -> Session:
    _expect(session, Stage.VOTING)
    index = _to_int(target)
    if index is None or not 0 <= index < len(session.assignments):
        raise InvalidTarget(target)

    votes = list(session.votes)
    votes[session.voter_index] = index
    return replace(session, votes=tuple(votes))


def confirm_vote(session: Session) -> Session:
    _expect(session, Stage.VOTING)
    if session.current_vote == NO_VOTE:
        raise NoSelection()

    if session.voter_index == len(session.assignments) - 1:
        return replace(session, stage=Stage.FINISHED)
    return replace(session, voter_index=session.voter_index + 1)


# =========================
# RESULT
# =========================
@dataclass(frozen=True)
class Result:
    imposters: Tuple[str, ...]
    word: str
    counts: Tuple[int, ...]
    max_votes: int
    most_accused: Tuple[str, ...]

    def rows(self, assignments: Sequence[PlayerAssignment]):
        return [(p, self.counts[p.index]) for p in assignments]


def tally(session: Session) -> Result:
    """Count the votes. Reports the tally only; who won is up to the caller."""
    if not session.assignments:
        raise StageMismatch((Stage.VOTING, Stage.FINISHED), session.stage)

    counts = tuple(
        sum(1 for v in session.votes if v == p.index) for p in session.assignments
    )
    max_votes = max(counts, default=0)
    most_accused = tuple(
        p.name for p in session.assignments if max_votes > 0 and counts[p.index] == max_votes
    )
    return Result(
        imposters=tuple(p.name for p in session.imposters()),
        word=session.selected_word,
        counts=counts,
        max_votes=max_votes,
        most_accused=most_accused,
    )
