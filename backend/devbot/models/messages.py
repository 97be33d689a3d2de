"""Message models for a single conversation."""

from enum import Enum

from pydantic import BaseModel, Field

from devbot.utils.clock import now_ms


class Role(str, Enum):
    """Message sender role."""

    USER = "user"
    MODEL = "model"


class Attachment(BaseModel):
    """A file attached to a user turn, payload kept as base64 text."""

    name: str
    type: str
    data: str


class Message(BaseModel):
    """One turn in a conversation.

    ``is_streaming`` is only ever true for the MODEL message currently being
    filled by a stream. ``error`` marks a stream that terminated abnormally
    and is independent of ``is_streaming``.
    """

    id: str
    role: Role
    content: str = ""
    timestamp: int = Field(default_factory=now_ms)
    attachments: list[Attachment] = Field(default_factory=list)
    is_streaming: bool = False
    error: bool = False


# Synthetic opening messages, one per assistant variant. Never sent upstream.
DEVBOT_GREETING_ID = "init-1"
NOIRE_GREETING_ID = "init-noire"
GREETING_IDS = frozenset({DEVBOT_GREETING_ID, NOIRE_GREETING_ID})


def is_greeting(message: Message) -> bool:
    return message.id in GREETING_IDS
