"""Ownership of the single live backend chat session.

States::

    EMPTY ──acquire / resume──▶ LIVE(profile)
    LIVE(P) ──acquire, resolves to P──▶ LIVE(P)       (handle reused)
    LIVE(P) ──acquire, resolves to Q──▶ LIVE(Q)       (history carried over)
    LIVE(_) ──reset──▶ EMPTY

Every ``reset`` or ``resume`` starts a new generation. A handle whose
creation began in an earlier generation is handed back to its caller but
never becomes the live handle.
"""

from __future__ import annotations

import logging
from typing import Sequence

from langchain_core.messages import BaseMessage

from devbot.agent.backend import ChatHandle, ModelBackend
from devbot.agent.history import encode_history
from devbot.agent.profiles import InvocationProfile, resolve_profile
from devbot.models.messages import Message
from devbot.models.sessions import ChatMode, Variant

logger = logging.getLogger(__name__)


class SessionMultiplexer:
    """Keeps at most one backend chat handle, matched to the requested profile.

    Not reentrant: a reconfiguration must finish before the next ``acquire``.
    """

    def __init__(self, backend: ModelBackend) -> None:
        self._backend = backend
        self._handle: ChatHandle | None = None
        self._profile: InvocationProfile | None = None
        self._generation = 0

    @property
    def is_live(self) -> bool:
        return self._handle is not None

    @property
    def profile(self) -> InvocationProfile | None:
        return self._profile

    async def acquire(self, variant: Variant, mode: ChatMode) -> ChatHandle:
        """Return a handle configured for (variant, mode), creating one if needed."""
        profile = resolve_profile(variant, mode)
        if self._handle is not None and self._profile == profile:
            return self._handle

        generation = self._generation
        history: list[BaseMessage] = []
        if self._handle is not None:
            try:
                history = await self._handle.get_history()
            except Exception as exc:
                logger.warning(
                    "Could not fetch history while reconfiguring to %s; "
                    "continuing without prior context: %s",
                    profile.model,
                    exc,
                )
            logger.info(
                "Reconfiguring chat session (%s -> %s), carrying %d turns",
                self._profile.model if self._profile else "-",
                profile.model,
                len(history),
            )

        return await self._open(profile, history, generation)

    async def resume(
        self,
        messages: Sequence[Message],
        variant: Variant,
        mode: ChatMode,
    ) -> ChatHandle:
        """Replace any live handle with one seeded from a stored conversation.

        If session creation fails the previous handle stays live.
        """
        self._generation += 1
        return await self._open(
            resolve_profile(variant, mode),
            encode_history(messages),
            self._generation,
        )

    def reset(self) -> None:
        """Drop the live handle (new chat, switched or deleted session)."""
        if self._profile is not None:
            logger.debug("Discarding chat session (%s)", self._profile.model)
        self._generation += 1
        self._handle = None
        self._profile = None

    async def _open(
        self,
        profile: InvocationProfile,
        history: Sequence[BaseMessage],
        generation: int,
    ) -> ChatHandle:
        handle = await self._backend.create_session(profile, history)
        if generation != self._generation:
            logger.debug("Chat session (%s) outlived a reset; not installing it", profile.model)
            return handle
        self._handle = handle
        self._profile = profile
        return handle
