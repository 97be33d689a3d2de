"""Shared test fixtures for the DevBot engine."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Sequence
from typing import Any

import pytest
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage

from devbot.agent.multiplexer import SessionMultiplexer
from devbot.agent.profiles import InvocationProfile
from devbot.engine import ChatEngine
from devbot.memory.kv_store import InMemoryKeyValueStore
from devbot.memory.session_store import SessionStore


class FakeChat:
    """In-process chat handle.

    Replies with ``backend.fragments``; raises ``backend.stream_error`` after
    emitting them when set.
    """

    def __init__(
        self,
        backend: FakeBackend,
        profile: InvocationProfile,
        history: Sequence[BaseMessage],
    ) -> None:
        self.backend = backend
        self.profile = profile
        self.history: list[BaseMessage] = list(history)
        self.sent: list[list[dict[str, Any]]] = []
        self.fail_history = False

    async def get_history(self) -> list[BaseMessage]:
        if self.fail_history:
            raise ConnectionError("history unavailable")
        return list(self.history)

    async def send_stream(self, parts: list[dict[str, Any]]) -> AsyncIterator[str]:
        self.sent.append(parts)
        reply = ""
        for fragment in self.backend.fragments:
            reply += fragment
            yield fragment
        if self.backend.stream_error is not None:
            raise self.backend.stream_error
        self.history.extend([HumanMessage(content=parts), AIMessage(content=reply)])


class FakeBackend:
    """``ModelBackend`` double that counts session creations.

    Each creation first waits on the next event in ``create_gates``, if any,
    and raises ``create_error`` once when set.
    """

    def __init__(self) -> None:
        self.created: list[FakeChat] = []
        self.fragments: list[str] = ["Hel", "lo, ", "world"]
        self.stream_error: Exception | None = None
        self.title: str = "  Rust Echo Server  "
        self.title_error: Exception | None = None
        self.prompts: list[tuple[str, str]] = []
        self.create_gates: list[asyncio.Event] = []
        self.create_error: Exception | None = None

    async def create_session(
        self,
        profile: InvocationProfile,
        history: Sequence[BaseMessage] = (),
    ) -> FakeChat:
        if self.create_gates:
            await self.create_gates.pop(0).wait()
        if self.create_error is not None:
            error, self.create_error = self.create_error, None
            raise error
        chat = FakeChat(self, profile, history)
        self.created.append(chat)
        return chat

    async def generate(self, model: str, prompt: str) -> str:
        self.prompts.append((model, prompt))
        if self.title_error is not None:
            raise self.title_error
        return self.title

    @property
    def live(self) -> FakeChat:
        return self.created[-1]


class FailingKeyValueStore:
    """Key-value store whose every call raises."""

    def get(self, key: str) -> str | None:
        raise OSError("storage unavailable")

    def set(self, key: str, value: str) -> None:
        raise OSError("quota exceeded")

    def remove(self, key: str) -> None:
        raise OSError("storage unavailable")

    def close(self) -> None:
        pass


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def kv() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def store(kv: InMemoryKeyValueStore) -> SessionStore:
    return SessionStore(kv)


@pytest.fixture
def multiplexer(backend: FakeBackend) -> SessionMultiplexer:
    return SessionMultiplexer(backend)


@pytest.fixture
def engine(backend: FakeBackend, store: SessionStore) -> ChatEngine:
    return ChatEngine(backend, store, title_model="title-model")


@pytest.fixture
def failing_kv() -> FailingKeyValueStore:
    return FailingKeyValueStore()
