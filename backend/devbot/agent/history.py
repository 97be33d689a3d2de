"""Conversion between engine messages and backend chat turns.

The backend consumes LangChain messages whose content is a list of parts::

    HumanMessage(content=[
        {"type": "media", "mime_type": "image/png", "data": "<base64>"},
        {"type": "text", "text": "What does this diagram show?"},
    ])

Attachments always come first, in attachment order, followed by a single
text part when there is any text.
"""

from __future__ import annotations

from typing import Any, Sequence

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage

from devbot.models.messages import Attachment, Message, Role, is_greeting


def _attachment_to_part(attachment: Attachment) -> dict[str, Any]:
    return {
        "type": "media",
        "mime_type": attachment.type,
        "data": attachment.data,
    }


def build_turn_parts(
    text: str,
    attachments: Sequence[Attachment] = (),
) -> list[dict[str, Any]]:
    """Assemble the content parts of a single turn."""
    parts = [_attachment_to_part(a) for a in attachments]
    if text:
        parts.append({"type": "text", "text": text})
    return parts


def _is_replayable(message: Message) -> bool:
    return not (message.is_streaming or message.error or is_greeting(message))


def encode_history(messages: Sequence[Message]) -> list[BaseMessage]:
    """Map a conversation onto the turn history a backend session is seeded with.

    Messages still streaming, messages whose stream failed and the synthetic
    greeting are never replayed.
    """
    history: list[BaseMessage] = []
    for message in messages:
        if not _is_replayable(message):
            continue
        parts = build_turn_parts(message.content, message.attachments)
        if message.role == Role.USER:
            history.append(HumanMessage(content=parts))
        else:
            history.append(AIMessage(content=parts))
    return history
