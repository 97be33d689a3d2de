"""Key-value storage backends for local session persistence.

Every backend exposes the same synchronous surface::

    get(key) -> str | None
    set(key, value)
    remove(key)
    close()

Any of them may raise (connection loss, quota, corruption); callers are
expected to catch and degrade.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Protocol

from pymongo import MongoClient
from pymongo.collection import Collection

logger = logging.getLogger(__name__)

COLLECTION_NAME = "kv_store"


class KeyValueStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...

    def close(self) -> None: ...


class InMemoryKeyValueStore:
    """Process-local store. Contents are lost when the process exits."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def close(self) -> None:
        pass


class MongoKeyValueStore:
    """MongoDB-backed store, one document per key.

    Document schema::

        {"key": "devbot_chat_history", "value": "[...]", "updated_at": "..."}

    Uses **pymongo** (synchronous) because the persistence surface is
    synchronous from the engine's point of view.
    """

    def __init__(
        self,
        connection_string: str,
        database_name: str,
        collection_name: str = COLLECTION_NAME,
    ) -> None:
        self._client = MongoClient(connection_string)
        self._collection: Collection = self._client[database_name][collection_name]

        # Ensure index on key for fast lookups
        self._collection.create_index("key", unique=True)

    def get(self, key: str) -> str | None:
        doc = self._collection.find_one({"key": key}, {"_id": 0, "value": 1})
        if not doc:
            return None
        return doc.get("value")

    def set(self, key: str, value: str) -> None:
        self._collection.update_one(
            {"key": key},
            {
                "$set": {
                    "value": value,
                    "updated_at": datetime.now(timezone.utc).isoformat(),
                }
            },
            upsert=True,
        )

    def remove(self, key: str) -> None:
        self._collection.delete_one({"key": key})

    def close(self) -> None:
        self._client.close()
        logger.info("MongoDB connection closed")
