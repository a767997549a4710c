"""
In-memory user directory and session store.

Stands in for a real identity provider: a fixed set of demo accounts and
opaque bearer tokens kept in process memory.  Each session owns one
``LayerStack``, so a stack is never written to by more than one session.

Sessions expire ``SESSION_TTL_SECONDS`` after login, and each user holds at
most ``MAX_SESSIONS_PER_USER`` at once; a new login past the cap evicts
that user's oldest session.
"""
from __future__ import annotations

import hmac
import logging
import os
import secrets
import time
from dataclasses import dataclass, field
from typing import Callable

from index_studio.catalog.bands import BAND_REGISTRY, BandRegistry
from index_studio.catalog.ramps import COLOR_RAMPS, RampCatalog
from index_studio.core.access import User
from index_studio.core.layers import LayerStack

logger = logging.getLogger(__name__)

DEMO_PASSWORD = os.getenv("DEMO_PASSWORD", "demo123")
SESSION_TTL_SECONDS = float(os.getenv("SESSION_TTL_SECONDS", str(8 * 60 * 60)))
MAX_SESSIONS_PER_USER = int(os.getenv("MAX_SESSIONS_PER_USER", "5"))

DEMO_USERS: dict[str, User] = {
    u.email: u
    for u in (
        User(1, "admin@semillero.cl", "Administrator", "ADMIN"),
        User(2, "analista@semillero.cl", "Ana Lista", "ANALYST"),
        User(3, "ricardo@torres.cl", "Ricardo Torres", "CLIENT",
             attributes={"client_id": "ricardo_torres"}),
    )
}


@dataclass
class Session:
    token: str
    user: User
    stack: LayerStack = field(repr=False)
    issued_at: float = 0.0


class SessionStore:
    def __init__(
        self,
        users: dict[str, User],
        password: str,
        bands: BandRegistry = BAND_REGISTRY,
        ramps: RampCatalog = COLOR_RAMPS,
        ttl_seconds: float = SESSION_TTL_SECONDS,
        max_per_user: int = MAX_SESSIONS_PER_USER,
        clock: Callable[[], float] = time.monotonic,
    ):
        if max_per_user < 1:
            raise ValueError("max_per_user must be at least 1")
        self._users = users
        self._password = password
        self._bands = bands
        self._ramps = ramps
        self._ttl = ttl_seconds
        self._max_per_user = max_per_user
        self._clock = clock
        # Insertion order is login order, so the first match is the oldest.
        self._sessions: dict[str, Session] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def _expired(self, session: Session, now: float) -> bool:
        return now - session.issued_at >= self._ttl

    def _purge_expired(self, now: float) -> None:
        stale = [t for t, s in self._sessions.items() if self._expired(s, now)]
        for token in stale:
            del self._sessions[token]
        if stale:
            logger.debug("Dropped %d expired sessions", len(stale))

    def _evict_oldest(self, user: User) -> None:
        tokens = [t for t, s in self._sessions.items() if s.user.id == user.id]
        excess = len(tokens) - self._max_per_user + 1
        for token in tokens[:max(excess, 0)]:
            del self._sessions[token]
            logger.info("Evicted oldest session for %s", user.email)

    def login(self, email: str, password: str) -> Session | None:
        """Open a session, or return None for bad credentials."""
        user = self._users.get((email or "").strip().lower())
        if user is None or not hmac.compare_digest(password.encode(), self._password.encode()):
            logger.warning("Failed login for %s", email)
            return None
        now = self._clock()
        self._purge_expired(now)
        self._evict_oldest(user)
        session = Session(
            token=secrets.token_urlsafe(32),
            user=user,
            stack=LayerStack(self._bands, self._ramps),
            issued_at=now,
        )
        self._sessions[session.token] = session
        logger.info("User %s logged in", user.email)
        return session

    def logout(self, token: str) -> bool:
        session = self._sessions.pop(token, None)
        if session is None:
            return False
        logger.info("User %s logged out", session.user.email)
        return True

    def get(self, token: str) -> Session | None:
        session = self._sessions.get(token)
        if session is None:
            return None
        if self._expired(session, self._clock()):
            del self._sessions[token]
            logger.info("Session for %s expired", session.user.email)
            return None
        return session


session_store = SessionStore(DEMO_USERS, DEMO_PASSWORD)
