from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional, Protocol

from app.core.logging import get_logger
from certify.models import Quiz, User

log = get_logger(__name__)

# Cached sessions are re-checked against the identity provider this often
REVALIDATE_AFTER_SEC = 300.0
# Sessions not revalidated for this long are dropped, quiz included
SESSION_TTL_SEC = 24 * 60 * 60.0


class SessionLookup(Protocol):
    def get_user(self, access_token: str) -> Optional[User]: ...


@dataclass
class AppSession:
    access_token: str
    current_user: User
    current_quiz: Optional[Quiz] = None
    validated_at: float = field(default_factory=time.monotonic)

    def start_quiz(self, quiz: Quiz) -> None:
        self.current_quiz = quiz

    def finish_quiz(self) -> None:
        self.current_quiz = None


class SessionRegistry:
    """
    Per-token application state.

    Populated on login / session restore, cleared on sign-out or when the
    identity provider stops recognising the token.
    """

    def __init__(
        self,
        revalidate_after_sec: float = REVALIDATE_AFTER_SEC,
        session_ttl_sec: float = SESSION_TTL_SEC,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._sessions: Dict[str, AppSession] = {}
        self._revalidate_after = revalidate_after_sec
        self._ttl = session_ttl_sec
        self._clock = clock

    def __len__(self) -> int:
        return len(self._sessions)

    def open(self, access_token: str, user: User) -> AppSession:
        now = self._clock()
        self._evict_idle(now)
        session = AppSession(access_token=access_token, current_user=user, validated_at=now)
        self._sessions[access_token] = session
        return session

    def get(self, access_token: str) -> Optional[AppSession]:
        return self._sessions.get(access_token)

    def restore(self, access_token: str, identity: SessionLookup) -> Optional[AppSession]:
        now = self._clock()
        self._evict_idle(now)
        session = self._sessions.get(access_token)
        if session is not None and now - session.validated_at < self._revalidate_after:
            return session

        user = identity.get_user(access_token)
        if user is None:
            if session is not None:
                log.info("Session for user %s is no longer valid", session.current_user.id)
            self.close(access_token)
            return None

        if session is not None:
            session.current_user = user
            session.validated_at = now
            return session

        log.info("Restored session for user %s", user.id)
        return self.open(access_token, user)

    def close(self, access_token: str) -> None:
        self._sessions.pop(access_token, None)

    def _evict_idle(self, now: float) -> None:
        stale = [t for t, s in self._sessions.items() if now - s.validated_at >= self._ttl]
        for token in stale:
            del self._sessions[token]
        if stale:
            log.info("Evicted %d idle sessions", len(stale))
