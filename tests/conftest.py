"""Pytest fixtures: fake update, recording store, scenario factories."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import BaseModel

from chatscene.domain.errors import SessionNotFoundError
from chatscene.domain.session import ErasedSession, session_key
from chatscene.infrastructure.session_store import InMemorySessionStore
from chatscene.orchestration.scenario import Scenario


class FakeUpdate:
    """Implements Update with fixed identity/text; records replies. No network."""

    def __init__(self, text: str | None = "hello", sender_id: int = 1, chat_id: int | None = 2) -> None:
        self._text = text
        self._sender_id = sender_id
        self._chat_id = chat_id
        self.replies: list[str] = []

    @property
    def sender_id(self) -> int:
        return self._sender_id

    @property
    def chat_id(self) -> int | None:
        return self._chat_id

    @property
    def text(self) -> str | None:
        return self._text

    async def reply(self, text: str) -> None:
        self.replies.append(text)


class RecordingStore:
    """Store double: dict-backed, raises SessionNotFoundError, counts writes."""

    def __init__(self) -> None:
        self.records: dict[str, ErasedSession] = {}
        self.writes: list[ErasedSession] = []
        self.reads = 0

    async def get(self, chat_id: int, user_id: int) -> ErasedSession:
        self.reads += 1
        record = self.records.get(session_key(chat_id, user_id))
        if record is None:
            raise SessionNotFoundError(session_key(chat_id, user_id))
        return record.model_copy()

    async def set(self, session: ErasedSession) -> None:
        self.writes.append(session)
        self.records[session_key(session.chat_id, session.user_id)] = session.model_copy()

    def seed(self, **fields: object) -> ErasedSession:
        record = ErasedSession(**fields)
        self.records[session_key(record.chat_id, record.user_id)] = record
        return record


class Profile(BaseModel):
    """Typed session data used across tests."""

    name: str = ""
    age: int = 0
    tags: list[str] = []


@pytest.fixture
def update() -> FakeUpdate:
    return FakeUpdate()


@pytest.fixture
def recording_store() -> RecordingStore:
    return RecordingStore()


@pytest.fixture
def memory_store() -> InMemorySessionStore:
    return InMemorySessionStore()


@pytest.fixture
def scenario(recording_store: RecordingStore) -> Scenario:
    return Scenario(recording_store)


@pytest.fixture
def configs_dir() -> Path:
    return Path(__file__).resolve().parent.parent / "configs"
