"""
In-memory session store.

One `Session` per key (a Discord channel, a browser session...). Sessions are
created on first access and replaced on reset; nothing is persisted.
"""
import logging
from threading import RLock
from typing import Callable, Dict, Hashable, List

from .game import Session, new_session

log = logging.getLogger(__name__)


class SessionStore:
    def __init__(self, factory: Callable[[], Session] = new_session):
        self._factory = factory
        self._sessions: Dict[Hashable, Session] = {}
        self._lock = RLock()

    def get(self, key: Hashable) -> Session:
        with self._lock:
            session = self._sessions.get(key)
            if session is None:
                session = self._factory()
                self._sessions[key] = session
            return session

    def reset(self, key: Hashable) -> Session:
        with self._lock:
            session = self._factory()
            self._sessions[key] = session
        log.debug("session %s reset", key)
        return session

    def update(self, key: Hashable, reducer: Callable[..., Session], *args, **kwargs) -> Session:
        """
        Apply `reducer(session, *args, **kwargs)` to the stored session and keep the result.
        If the reducer raises, the stored session is left as it was.
        """
        with self._lock:
            session = reducer(self.get(key), *args, **kwargs)
            self._sessions[key] = session
            return session

    def discard(self, key: Hashable) -> None:
        with self._lock:
            self._sessions.pop(key, None)

    def keys(self) -> List[Hashable]:
        with self._lock:
            return list(self._sessions.keys())

    def __contains__(self, key: Hashable) -> bool:
        with self._lock:
            return key in self._sessions

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
