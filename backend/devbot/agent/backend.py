"""Gemini model backend built on LangChain.

Exposes the two capabilities the engine needs from a model provider:

- ``create_session`` returns a stateful chat handle that replays its own
  history on every turn and streams the reply text;
- ``generate`` performs a one-shot, history-free completion.
"""

from __future__ import annotations

import logging
from typing import Any, AsyncIterator, Protocol, Sequence

from langchain_core.messages import (
    AIMessage,
    BaseMessage,
    HumanMessage,
    SystemMessage,
)
from langchain_core.runnables import Runnable
from langchain_google_genai import ChatGoogleGenerativeAI

from devbot.agent.profiles import InvocationProfile

logger = logging.getLogger(__name__)


class ChatHandle(Protocol):
    """A live, stateful conversation with the backend."""

    async def get_history(self) -> list[BaseMessage]: ...

    def send_stream(self, parts: list[dict[str, Any]]) -> AsyncIterator[str]: ...


class ModelBackend(Protocol):
    async def create_session(
        self,
        profile: InvocationProfile,
        history: Sequence[BaseMessage] = (),
    ) -> ChatHandle: ...

    async def generate(self, model: str, prompt: str) -> str: ...


def extract_text(content: str | list[Any]) -> str:
    """Return only the user-visible text of a message or chunk content.

    Thinking models interleave ``thinking`` parts with ``text`` parts; the
    former are dropped.
    """
    if isinstance(content, str):
        return content
    pieces: list[str] = []
    for part in content:
        if isinstance(part, str):
            pieces.append(part)
        elif isinstance(part, dict) and part.get("type") == "text":
            pieces.append(part.get("text", ""))
    return "".join(pieces)


class GeminiChat:
    """Chat handle over a LangChain chat model.

    The confirmed history only grows when a turn completes: the user parts
    and the full reply text are appended after the stream is exhausted, so a
    failed turn leaves the history untouched.
    """

    def __init__(
        self,
        llm: Runnable,
        system_instruction: str,
        history: Sequence[BaseMessage] = (),
    ) -> None:
        self._llm = llm
        self._system_instruction = system_instruction
        self._history: list[BaseMessage] = list(history)

    async def get_history(self) -> list[BaseMessage]:
        return list(self._history)

    async def send_stream(self, parts: list[dict[str, Any]]) -> AsyncIterator[str]:
        user_turn = HumanMessage(content=parts)
        messages: list[BaseMessage] = [
            SystemMessage(content=self._system_instruction),
            *self._history,
            user_turn,
        ]

        reply = ""
        async for chunk in self._llm.astream(messages):
            text = extract_text(chunk.content)
            if text:
                reply += text
                yield text

        self._history.extend([user_turn, AIMessage(content=reply)])


class GeminiBackend:
    """``ModelBackend`` implementation for Google Gemini."""

    def __init__(self, api_key: str, temperature: float | None = None) -> None:
        if not api_key or not api_key.strip():
            raise RuntimeError(
                "Google API key required. Set GOOGLE_API_KEY in the environment or .env"
            )
        self._api_key = api_key.strip()
        # Overrides the profile temperature when set.
        self._temperature = temperature

    def _build_llm(self, profile: InvocationProfile) -> Runnable:
        llm = ChatGoogleGenerativeAI(
            model=profile.model,
            google_api_key=self._api_key,
            temperature=(
                profile.temperature if self._temperature is None else self._temperature
            ),
            thinking_budget=profile.thinking_budget,
        )
        if profile.tools:
            return llm.bind_tools([{tool: {}} for tool in profile.tools])
        return llm

    async def create_session(
        self,
        profile: InvocationProfile,
        history: Sequence[BaseMessage] = (),
    ) -> GeminiChat:
        logger.info(
            "Creating Gemini chat session model=%s tools=%s thinking_budget=%s history=%d",
            profile.model,
            ",".join(profile.tools) or "-",
            profile.thinking_budget,
            len(history),
        )
        return GeminiChat(
            llm=self._build_llm(profile),
            system_instruction=profile.system_instruction,
            history=history,
        )

    async def generate(self, model: str, prompt: str) -> str:
        llm = ChatGoogleGenerativeAI(
            model=model,
            google_api_key=self._api_key,
        )
        response = await llm.ainvoke([HumanMessage(content=prompt)])
        return extract_text(response.content)
