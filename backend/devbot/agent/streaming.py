"""Single-turn streaming against the live chat session."""

from __future__ import annotations

import logging
from typing import Callable, Sequence

from devbot.agent.history import build_turn_parts
from devbot.agent.multiplexer import SessionMultiplexer
from devbot.models.messages import Attachment
from devbot.models.sessions import ChatMode, Variant

logger = logging.getLogger(__name__)

ChunkSink = Callable[[str], None]


class EmptyTurnError(ValueError):
    """A turn with neither text nor attachments was submitted."""


class StreamAggregator:
    """Sends one turn and republishes the growing reply text.

    The sink always receives the full text received so far, never a delta.
    Message state belongs to the caller; failures are relayed unchanged.
    """

    def __init__(self, multiplexer: SessionMultiplexer) -> None:
        self._multiplexer = multiplexer

    async def send_turn(
        self,
        text: str,
        attachments: Sequence[Attachment],
        variant: Variant,
        mode: ChatMode,
        on_chunk: ChunkSink,
    ) -> str:
        """Stream the reply to one turn and return its full text.

        Raises:
            EmptyTurnError: If ``text`` is empty and there are no attachments.
            Exception: Whatever the backend raised while creating the session
                or streaming.
        """
        parts = build_turn_parts(text, attachments)
        if not parts:
            raise EmptyTurnError("Cannot send an empty turn")

        accumulated = ""
        try:
            handle = await self._multiplexer.acquire(variant, mode)
            async for fragment in handle.send_stream(parts):
                if not fragment:
                    continue
                accumulated += fragment
                on_chunk(accumulated)
        except Exception:
            logger.exception(
                "Error streaming reply (variant=%s, mode=%s, received=%d chars)",
                variant.value,
                mode.value,
                len(accumulated),
            )
            raise

        return accumulated
