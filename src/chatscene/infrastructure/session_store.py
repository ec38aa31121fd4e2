"""Session store: Protocol + in-memory implementation."""

from __future__ import annotations

import asyncio
from typing import Protocol, runtime_checkable

from chatscene.domain.session import ErasedSession, session_key


@runtime_checkable
class SessionStore(Protocol):
    """Protocol for persisting and loading erased sessions per (chat, user)."""

    async def get(self, chat_id: int, user_id: int) -> ErasedSession:
        """Load the session. Raise SessionNotFoundError if there is none."""
        ...

    async def set(self, session: ErasedSession) -> None:
        """Upsert the session keyed by its (chat_id, user_id)."""
        ...


class InMemorySessionStore:
    """
    In-memory dict store behind a single lock. Suitable for a single process.

    Unknown keys are created lazily on get, so this store never raises
    SessionNotFoundError and repeated reads of a key are stable.
    """

    def __init__(self) -> None:
        self._store: dict[str, ErasedSession] = {}
        self._lock = asyncio.Lock()

    async def get(self, chat_id: int, user_id: int) -> ErasedSession:
        async with self._lock:
            key = session_key(chat_id, user_id)
            session = self._store.get(key)
            if session is None:
                session = ErasedSession(chat_id=chat_id, user_id=user_id)
                self._store[key] = session
            return session.model_copy()

    async def set(self, session: ErasedSession) -> None:
        async with self._lock:
            self._store[session_key(session.chat_id, session.user_id)] = session.model_copy()

    async def delete(self, chat_id: int, user_id: int) -> None:
        async with self._lock:
            self._store.pop(session_key(chat_id, user_id), None)

    def __len__(self) -> int:
        return len(self._store)
