"""Session models for conversation management."""

from enum import Enum

from pydantic import BaseModel, Field

from devbot.models.messages import Message
from devbot.utils.clock import now_ms


class ChatMode(str, Enum):
    """Requested capability profile for a turn."""

    STANDARD = "standard"
    SEARCH = "search"
    THINKING = "thinking"


class Variant(str, Enum):
    """Assistant persona.

    ``DEVBOT`` is the primary coding assistant whose backend configuration
    follows the selected mode. ``NOIRE`` is the unified assistant with search
    and reasoning always enabled.
    """

    DEVBOT = "devbot"
    NOIRE = "noire"


class ChatSession(BaseModel):
    """Persisted conversation record."""

    id: str
    title: str
    messages: list[Message] = Field(default_factory=list)
    created_at: int = Field(default_factory=now_ms)
    updated_at: int = Field(default_factory=now_ms)
    mode: ChatMode = ChatMode.STANDARD
    variant: Variant = Variant.DEVBOT
