"""Key-value blob stores holding JSON documents.

The rest of the application only sees the BlobStore protocol: load a JSON
value by key, or save one. SqliteBlobStore is the on-disk adapter;
MemoryBlobStore keeps everything in a dict and is used by tests.
"""

import json
import sqlite3
from pathlib import Path
from typing import Any, Protocol

from ledgerdesk.logging_setup import get_logger
from ledgerdesk.store.schema import get_db_path, init_database

logger = get_logger("ledgerdesk.store.blobs")


class BlobStore(Protocol):
    """Persistence port: JSON values addressed by logical key."""

    def load(self, key: str) -> Any | None: ...

    def save(self, key: str, value: Any) -> None: ...


class MemoryBlobStore:
    """In-memory store. Values are round-tripped through JSON on save."""

    def __init__(self) -> None:
        self._blobs: dict[str, str] = {}

    def load(self, key: str) -> Any | None:
        raw = self._blobs.get(key)
        return None if raw is None else json.loads(raw)

    def save(self, key: str, value: Any) -> None:
        self._blobs[key] = json.dumps(value, ensure_ascii=False)

    def keys(self) -> list[str]:
        return sorted(self._blobs)


class SqliteBlobStore:
    """Store backed by a single sqlite table of JSON text."""

    def __init__(self, db_path: Path | None = None) -> None:
        self.db_path = db_path if db_path is not None else get_db_path()

    def _connect(self) -> sqlite3.Connection:
        """Create a database connection with row factory.

        Returns:
            Database connection with row_factory configured.
        """
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def ensure_schema(self) -> None:
        init_database(self.db_path)

    def load(self, key: str) -> Any | None:
        """Load a JSON value.

        Args:
            key: Logical key (e.g. "schedules").

        Returns:
            Decoded value, or None if the key was never saved.

        Raises:
            sqlite3.Error: If database operation fails.
        """
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT value FROM blobs WHERE key = ?", (key,))
            row = cursor.fetchone()

        if row is None:
            logger.debug("load %s: absent", key)
            return None
        return json.loads(row["value"])

    def save(self, key: str, value: Any) -> None:
        """Save a JSON value, replacing any previous one.

        Args:
            key: Logical key.
            value: JSON-serializable value.

        Raises:
            sqlite3.Error: If database operation fails.
        """
        payload = json.dumps(value, ensure_ascii=False)
        with self._connect() as conn:
            cursor = conn.cursor()
            try:
                cursor.execute(
                    """
                    INSERT INTO blobs (key, value, updated_at) VALUES (?, ?, datetime('now'))
                    ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at
                    """,
                    (key, payload),
                )
                conn.commit()
            except sqlite3.Error:
                conn.rollback()
                raise
        logger.debug("save %s: %d bytes", key, len(payload))

    def keys(self) -> list[str]:
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT key FROM blobs ORDER BY key")
            return [row["key"] for row in cursor.fetchall()]


def open_store(db_path: Path | None = None) -> SqliteBlobStore:
    """Open the on-disk store, creating or migrating its schema as needed.

    Raises:
        sqlite3.Error: If the database cannot be initialized.
    """
    store = SqliteBlobStore(db_path)
    store.ensure_schema()
    return store
