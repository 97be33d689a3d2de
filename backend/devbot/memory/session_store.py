"""Chat session store: every session kept in a single JSON array.

All records live under one key of a ``KeyValueStore``::

    devbot_chat_history -> [
        {
            "id": "1760870400000",
            "title": "Rust Tokio Refactor",
            "messages": [
                {"id": "1760870400001", "role": "user", "content": "...", ...},
                {"id": "1760870400002", "role": "model", "content": "...", ...}
            ],
            "created_at": 1760870400000,
            "updated_at": 1760870412345,
            "mode": "standard",
            "variant": "devbot"
        }
    ]

Every operation is total. An unreadable collection reads as empty and a
failed write is logged and dropped, so the conversation stays usable
in-memory even when durability is lost.
"""

from __future__ import annotations

import logging

from pydantic import TypeAdapter, ValidationError

from devbot.config import Settings
from devbot.memory.kv_store import (
    InMemoryKeyValueStore,
    KeyValueStore,
    MongoKeyValueStore,
)
from devbot.models.sessions import ChatSession

logger = logging.getLogger(__name__)

STORAGE_KEY = "devbot_chat_history"

_sessions_adapter = TypeAdapter(list[ChatSession])


class SessionStore:
    """Upsert/list/delete ``ChatSession`` records in a key-value store."""

    def __init__(self, kv: KeyValueStore, key: str = STORAGE_KEY) -> None:
        self._kv = kv
        self._key = key

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def list_all(self) -> list[ChatSession]:
        """Return every stored session, most recently updated first."""
        try:
            raw = self._kv.get(self._key)
        except Exception:
            logger.exception("Failed to load chat history")
            return []
        if not raw:
            return []

        try:
            sessions = _sessions_adapter.validate_json(raw)
        except ValidationError as exc:
            logger.error("Stored chat history is corrupt, ignoring it: %s", exc)
            return []

        return sorted(sessions, key=lambda s: s.updated_at, reverse=True)

    def get(self, session_id: str) -> ChatSession | None:
        for session in self.list_all():
            if session.id == session_id:
                return session
        return None

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def upsert(self, session: ChatSession) -> None:
        """Replace the record with the same id, or append a new one."""
        sessions = self.list_all()
        for index, existing in enumerate(sessions):
            if existing.id == session.id:
                sessions[index] = session
                break
        else:
            sessions.append(session)

        self._write(sessions, action=f"save session {session.id}")

    def delete(self, session_id: str) -> None:
        sessions = [s for s in self.list_all() if s.id != session_id]
        self._write(sessions, action=f"delete session {session_id}")

    def clear_all(self) -> None:
        try:
            self._kv.remove(self._key)
        except Exception:
            logger.exception("Failed to clear chat history")

    def close(self) -> None:
        """Release the underlying key-value store."""
        self._kv.close()

    def _write(self, sessions: list[ChatSession], *, action: str) -> None:
        try:
            payload = _sessions_adapter.dump_json(sessions).decode("utf-8")
            self._kv.set(self._key, payload)
        except Exception:
            logger.exception("Failed to %s", action)


def build_session_store(settings: Settings) -> SessionStore:
    """Create the ``SessionStore`` selected by ``settings.storage_backend``."""
    if settings.storage_backend == "mongodb":
        logger.info("Persisting sessions to MongoDB at %s", settings.mongodb_uri)
        kv: KeyValueStore = MongoKeyValueStore(
            connection_string=settings.mongodb_uri,
            database_name=settings.mongodb_database,
        )
    else:
        logger.info("Persisting sessions in process memory")
        kv = InMemoryKeyValueStore()
    return SessionStore(kv, key=settings.storage_key)
