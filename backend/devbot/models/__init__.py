from devbot.models.messages import Attachment, Message, Role
from devbot.models.sessions import ChatMode, ChatSession, Variant

__all__ = [
    "Attachment",
    "ChatMode",
    "ChatSession",
    "Message",
    "Role",
    "Variant",
]
