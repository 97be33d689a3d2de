"""Local persistence for chat sessions."""

from .kv_store import InMemoryKeyValueStore, KeyValueStore, MongoKeyValueStore
from .session_store import SessionStore, build_session_store

__all__ = [
    "InMemoryKeyValueStore",
    "KeyValueStore",
    "MongoKeyValueStore",
    "SessionStore",
    "build_session_store",
]
