"""
Session Store for FitCoach

Server-side login sessions keyed by an opaque id carried in an
HttpOnly cookie. The store is injectable so a shared backend can replace
the in-memory default without touching the routes.
"""

import asyncio
import logging
import secrets
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Dict, Optional


logger = logging.getLogger(__name__)


@dataclass
class SessionRecord:
    user_id: int
    expires_at: float


class SessionStore(ABC):
    """Interface for login session persistence."""

    @abstractmethod
    async def create(self, user_id: int) -> str:
        """Start a session for a user and return its id."""

    @abstractmethod
    async def get_user_id(self, session_id: str) -> Optional[int]:
        """Resolve a session id to its user, or None if unknown/expired."""

    @abstractmethod
    async def delete(self, session_id: str) -> None:
        """End a session. Unknown ids are ignored."""

    async def start(self) -> None:
        """Start background maintenance (called on app startup)."""

    async def close(self) -> None:
        """Stop background maintenance (called on app shutdown)."""


class InMemorySessionStore(SessionStore):
    """
    Process-local session store with TTL.

    Expired sessions are dropped lazily on lookup and in bulk by a
    periodic sweep task.
    """

    def __init__(
        self,
        ttl_seconds: int,
        sweep_interval_seconds: int = 3600,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._ttl = ttl_seconds
        self._sweep_interval = sweep_interval_seconds
        self._clock = clock
        self._sessions: Dict[str, SessionRecord] = {}
        self._sweeper: Optional[asyncio.Task] = None

    def __len__(self) -> int:
        return len(self._sessions)

    async def create(self, user_id: int) -> str:
        session_id = secrets.token_urlsafe(32)
        self._sessions[session_id] = SessionRecord(
            user_id=user_id,
            expires_at=self._clock() + self._ttl,
        )
        return session_id

    async def get_user_id(self, session_id: str) -> Optional[int]:
        record = self._sessions.get(session_id)
        if record is None:
            return None
        if record.expires_at <= self._clock():
            self._sessions.pop(session_id, None)
            return None
        return record.user_id

    async def delete(self, session_id: str) -> None:
        self._sessions.pop(session_id, None)

    def purge_expired(self) -> int:
        """Drop every expired session. Returns how many were removed."""
        now = self._clock()
        expired = [sid for sid, record in self._sessions.items() if record.expires_at <= now]
        for sid in expired:
            del self._sessions[sid]
        return len(expired)

    async def _sweep_loop(self) -> None:
        while True:
            await asyncio.sleep(self._sweep_interval)
            removed = self.purge_expired()
            if removed:
                logger.info(f"Purged {removed} expired sessions")

    async def start(self) -> None:
        if self._sweeper is None:
            self._sweeper = asyncio.create_task(self._sweep_loop())

    async def close(self) -> None:
        if self._sweeper is not None:
            self._sweeper.cancel()
            try:
                await self._sweeper
            except asyncio.CancelledError:
                pass
            self._sweeper = None
