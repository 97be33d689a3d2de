"""Backend invocation profiles.

``resolve_profile`` maps an (assistant variant, chat mode) pair to the exact
parameters a backend chat session is created with:

=========  ========  ======================  =============  ===============
variant    mode      model                   tools          thinking budget
=========  ========  ======================  =============  ===============
devbot     standard  gemini-3-pro-preview    -              -
devbot     search    gemini-2.5-flash        google_search  -
devbot     thinking  gemini-3-pro-preview    -              32768
noire      any       gemini-3-pro-preview    google_search  16384
=========  ========  ======================  =============  ===============

The resolver is pure. The NOIRE "always thinking" mode is applied
separately by ``normalize_mode`` before resolution.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from devbot.agent.prompts import DEVBOT_SYSTEM_INSTRUCTION, NOIRE_SYSTEM_INSTRUCTION
from devbot.models.sessions import ChatMode, Variant

FLAGSHIP_MODEL = "gemini-3-pro-preview"
FAST_MODEL = "gemini-2.5-flash"

GOOGLE_SEARCH_TOOL = "google_search"

THINKING_BUDGET = 32768
NOIRE_THINKING_BUDGET = 16384

DEFAULT_TEMPERATURE = 0.2


class InvocationProfile(BaseModel):
    """Parameters a backend chat session is created with."""

    model_config = ConfigDict(frozen=True)

    model: str
    system_instruction: str
    tools: tuple[str, ...] = ()
    thinking_budget: int | None = None
    temperature: float = DEFAULT_TEMPERATURE


def resolve_profile(variant: Variant, mode: ChatMode) -> InvocationProfile:
    """Return the invocation profile for ``variant`` running in ``mode``."""
    if variant == Variant.NOIRE:
        return InvocationProfile(
            model=FLAGSHIP_MODEL,
            system_instruction=NOIRE_SYSTEM_INSTRUCTION,
            tools=(GOOGLE_SEARCH_TOOL,),
            thinking_budget=NOIRE_THINKING_BUDGET,
        )

    if mode == ChatMode.SEARCH:
        return InvocationProfile(
            model=FAST_MODEL,
            system_instruction=DEVBOT_SYSTEM_INSTRUCTION,
            tools=(GOOGLE_SEARCH_TOOL,),
        )
    if mode == ChatMode.THINKING:
        return InvocationProfile(
            model=FLAGSHIP_MODEL,
            system_instruction=DEVBOT_SYSTEM_INSTRUCTION,
            thinking_budget=THINKING_BUDGET,
        )
    return InvocationProfile(
        model=FLAGSHIP_MODEL,
        system_instruction=DEVBOT_SYSTEM_INSTRUCTION,
    )


def default_mode_for(variant: Variant) -> ChatMode:
    """Mode selected when the user switches to ``variant``."""
    if variant == Variant.NOIRE:
        return ChatMode.THINKING
    return ChatMode.STANDARD


def normalize_mode(variant: Variant, mode: ChatMode) -> ChatMode:
    """Coerce a requested mode to one ``variant`` supports.

    NOIRE has a single fixed configuration and always reports the thinking
    mode; DevBot honours whatever was requested.
    """
    if variant == Variant.NOIRE:
        return ChatMode.THINKING
    return mode
