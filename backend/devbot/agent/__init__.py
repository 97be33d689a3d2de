"""Backend session management: profiles, history, streaming, titles."""

from .backend import GeminiBackend, ModelBackend
from .multiplexer import SessionMultiplexer
from .profiles import InvocationProfile, resolve_profile
from .streaming import EmptyTurnError, StreamAggregator
from .titles import TitleSummarizer

__all__ = [
    "EmptyTurnError",
    "GeminiBackend",
    "InvocationProfile",
    "ModelBackend",
    "SessionMultiplexer",
    "StreamAggregator",
    "TitleSummarizer",
    "resolve_profile",
]
