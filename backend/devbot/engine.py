"""Conversational session engine.

``ChatEngine`` is the object a front-end holds on to. It owns the message
list of the open conversation, the backend chat session behind it and the
persisted session records::

    engine = ChatEngine(GeminiBackend(settings.google_api_key), store)
    reply = await engine.send_message("Write a Rust TCP echo server")
    await engine.switch_session(engine.list_sessions()[0].id)

One engine serves one user; all calls are made from a single event loop.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Callable, Sequence

from devbot.agent.backend import ModelBackend
from devbot.agent.multiplexer import SessionMultiplexer
from devbot.agent.profiles import default_mode_for, normalize_mode
from devbot.agent.prompts import DEVBOT_GREETING, NOIRE_GREETING
from devbot.agent.streaming import ChunkSink, EmptyTurnError, StreamAggregator
from devbot.agent.titles import TitleSummarizer
from devbot.config import settings
from devbot.memory.session_store import SessionStore
from devbot.models.messages import (
    DEVBOT_GREETING_ID,
    NOIRE_GREETING_ID,
    Attachment,
    Message,
    Role,
    is_greeting,
)
from devbot.models.sessions import ChatMode, ChatSession, Variant
from devbot.utils.attachments import load_attachments
from devbot.utils.clock import new_id, now_ms

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "New Sequence"
ERROR_MARKER = "\n\n*[System Error: Failed to complete response]*"
INTERRUPTED_MARKER = "\n\n*[System Error: Response was interrupted]*"

MessageListener = Callable[[Message], None]


class TurnInProgressError(RuntimeError):
    """A turn was submitted while the previous one is still streaming."""


def greeting_for(variant: Variant) -> Message:
    if variant == Variant.NOIRE:
        return Message(id=NOIRE_GREETING_ID, role=Role.MODEL, content=NOIRE_GREETING)
    return Message(id=DEVBOT_GREETING_ID, role=Role.MODEL, content=DEVBOT_GREETING)


class ChatEngine:
    """Open conversation, backend session and session history for one user."""

    def __init__(
        self,
        backend: ModelBackend,
        store: SessionStore,
        *,
        title_model: str | None = None,
        variant: Variant = Variant.DEVBOT,
    ) -> None:
        self._store = store
        self._multiplexer = SessionMultiplexer(backend)
        self._aggregator = StreamAggregator(self._multiplexer)
        self._titles = TitleSummarizer(backend, title_model or settings.title_model)
        self._background: set[asyncio.Task] = set()
        self._in_flight_session: str | None = None

        self._variant = variant
        self._mode = default_mode_for(variant)
        self._start_fresh()

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------

    @property
    def session_id(self) -> str:
        return self._session_id

    @property
    def title(self) -> str:
        return self._title

    @property
    def messages(self) -> list[Message]:
        return list(self._messages)

    @property
    def mode(self) -> ChatMode:
        return self._mode

    @property
    def variant(self) -> Variant:
        return self._variant

    @property
    def is_busy(self) -> bool:
        return self._in_flight_session is not None

    @property
    def multiplexer(self) -> SessionMultiplexer:
        return self._multiplexer

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    def set_mode(self, mode: ChatMode) -> None:
        self._mode = normalize_mode(self._variant, mode)
        self._persist()

    def set_variant(self, variant: Variant) -> None:
        """Switch assistant persona; the mode follows the persona's default."""
        if variant == self._variant:
            return
        self._variant = variant
        self._mode = default_mode_for(variant)
        if self._is_pristine():
            self._messages = [greeting_for(variant)]
        self._persist()

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    def list_sessions(self) -> list[ChatSession]:
        return self._store.list_all()

    def new_session(self) -> None:
        """Close the open conversation and start an empty one."""
        self._multiplexer.reset()
        self._start_fresh()
        logger.info("Started new session %s", self._session_id)

    async def switch_session(self, session_id: str) -> bool:
        """Open a stored session and prime the backend with its history.

        Returns False, leaving the open conversation untouched, if no session
        with that id is stored. If the backend session cannot be created the
        error propagates and the open conversation also stays as it was.
        """
        session = self._store.get(session_id)
        if session is None:
            logger.warning("Session %s not found", session_id)
            return False

        messages = [_settle(m) for m in session.messages]
        mode = normalize_mode(session.variant, session.mode)
        # Nothing changes until the backend session exists.
        await self._multiplexer.resume(messages, session.variant, mode)

        self._session_id = session.id
        self._title = session.title
        self._created_at = session.created_at
        self._messages = messages
        self._variant = session.variant
        self._mode = mode
        logger.info(
            "Switched to session %s (%d messages)", session.id, len(self._messages)
        )
        return True

    def delete_session(self, session_id: str) -> None:
        self._store.delete(session_id)
        if session_id == self._session_id:
            self.new_session()

    # ------------------------------------------------------------------
    # Turns
    # ------------------------------------------------------------------

    async def send_turn(
        self,
        text: str,
        attachments: Sequence[Attachment],
        on_chunk: ChunkSink,
    ) -> str:
        """Stream one turn with the current variant and mode.

        Lower-level than ``send_message``: no message bookkeeping, errors
        propagate.
        """
        return await self._aggregator.send_turn(
            text, attachments, self._variant, self._mode, on_chunk
        )

    async def send_message(
        self,
        text: str,
        files: Sequence[Path | str] = (),
        attachments: Sequence[Attachment] = (),
        on_update: MessageListener | None = None,
    ) -> Message:
        """Append a user turn, stream the reply into a new model message.

        A failed stream does not raise: the model message keeps the partial
        text, gets ``error`` set and a visible error notice appended.

        Args:
            text: The user's message; surrounding whitespace is dropped.
            files: Local files to attach.
            attachments: Already-encoded attachments, sent before ``files``.
            on_update: Called with the model message after every fragment.

        Returns:
            The model message once streaming has finished.

        Raises:
            EmptyTurnError: If there is no text and nothing attached.
            TurnInProgressError: If an earlier turn has not finished, even one
                started before the conversation was switched or reset.
        """
        text = text.strip()
        if not text and not files and not attachments:
            raise EmptyTurnError("Cannot send an empty message")
        if self.is_busy:
            raise TurnInProgressError("A response is still streaming")

        session_id = self._session_id
        self._in_flight_session = session_id
        try:
            encoded = list(attachments) + await load_attachments(files)
            if self._is_pristine():
                self._start_title(session_id, _opening_prompt(text, encoded))

            user_message = Message(
                id=new_id(), role=Role.USER, content=text, attachments=encoded
            )
            reply = Message(id=new_id(), role=Role.MODEL, is_streaming=True)
            self._messages.extend([user_message, reply])
            self._persist()

            def on_chunk(accumulated: str) -> None:
                reply.content = accumulated
                if on_update is not None:
                    on_update(reply)

            try:
                await self._aggregator.send_turn(
                    text, encoded, self._variant, self._mode, on_chunk
                )
            except Exception as exc:
                logger.warning("Turn failed in session %s: %s", session_id, exc)
                reply.error = True
                reply.content += ERROR_MARKER
            finally:
                reply.is_streaming = False

            if on_update is not None:
                on_update(reply)

            if session_id == self._session_id:
                self._persist()
            else:
                logger.info(
                    "Reply for closed session %s finished; not applied", session_id
                )
            return reply
        finally:
            self._in_flight_session = None

    async def wait_background(self) -> None:
        """Wait for background work such as title generation to finish."""
        if self._background:
            await asyncio.gather(*self._background)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _start_fresh(self) -> None:
        self._session_id = new_id()
        self._created_at = now_ms()
        self._title = DEFAULT_TITLE
        self._messages: list[Message] = [greeting_for(self._variant)]

    def _is_pristine(self) -> bool:
        return all(is_greeting(m) for m in self._messages)

    def _start_title(self, session_id: str, opening: str) -> None:
        task = asyncio.create_task(self._apply_title(session_id, opening))
        self._background.add(task)
        task.add_done_callback(self._background.discard)

    async def _apply_title(self, session_id: str, opening: str) -> None:
        title = await self._titles.summarize(opening)
        if session_id != self._session_id:
            logger.debug("Dropping title for closed session %s", session_id)
            return
        self._title = title
        self._persist()

    def _persist(self) -> None:
        # A conversation holding only the greeting is never stored.
        if self._is_pristine():
            return
        self._store.upsert(
            ChatSession(
                id=self._session_id,
                title=self._title,
                messages=self._messages,
                created_at=self._created_at,
                updated_at=now_ms(),
                mode=self._mode,
                variant=self._variant,
            )
        )


def _opening_prompt(text: str, attachments: Sequence[Attachment]) -> str:
    if text:
        return text
    if attachments:
        return f"Analyze {attachments[0].name}"
    return "New Chat"


def _settle(message: Message) -> Message:
    """Close out a message stored while it was still streaming."""
    if not message.is_streaming:
        return message
    return message.model_copy(
        update={
            "is_streaming": False,
            "error": True,
            "content": message.content + INTERRUPTED_MARKER,
        }
    )
