"""Title Summarizer - derives a short label for a new chat.

Best-effort: the backend is asked once, and any failure or empty answer
falls back to a fixed label.
"""

import logging

from devbot.agent.backend import ModelBackend
from devbot.agent.prompts import build_title_prompt

logger = logging.getLogger(__name__)

FALLBACK_TITLE = "New Operation"


class TitleSummarizer:
    """Generates chat titles with a single one-shot backend call."""

    def __init__(self, backend: ModelBackend, model: str) -> None:
        self._backend = backend
        self._model = model

    async def summarize(self, opening_text: str) -> str:
        try:
            raw = await self._backend.generate(self._model, build_title_prompt(opening_text))
        except Exception as exc:
            logger.warning("Title generation failed: %s", exc)
            return FALLBACK_TITLE

        title = (raw or "").strip()
        return title or FALLBACK_TITLE
