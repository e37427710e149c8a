"""
Persistence stores - key-value blob storage for learner state.

Stores hold serialized blobs keyed by name. The progress ledger keeps two
of them (progress and preferences). Writes are synchronous, so a read right
after a write sees the new value.
"""

import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Optional, Protocol

from linguasync.config import DEFAULT_HOME


DEFAULT_PROGRESS_DB = DEFAULT_HOME / "progress.db"


class BlobStore(Protocol):
    def load(self, key: str) -> Optional[str]: ...

    def save(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class MemoryBlobStore:
    """In-process store, used by tests and throwaway sessions."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._blobs: dict[str, str] = dict(initial or {})

    def load(self, key: str) -> Optional[str]:
        return self._blobs.get(key)

    def save(self, key: str, value: str):
        self._blobs[key] = value

    def delete(self, key: str):
        self._blobs.pop(key, None)

    def keys(self) -> list[str]:
        return sorted(self._blobs)


class SQLiteBlobStore:
    """
    Blob store backed by a single SQLite table.

    Each call opens its own connection, so the store can be shared freely
    within a process.
    """

    def __init__(self, db_path: Optional[Path] = None):
        """
        Initialize store.

        Args:
            db_path: Path to progress.db (default: ~/.linguasync/progress.db)
        """
        self.db_path = Path(db_path) if db_path else DEFAULT_PROGRESS_DB
        self._ensure_database()

    def _ensure_database(self):
        """Create database and table if they don't exist."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        conn = sqlite3.connect(str(self.db_path))
        try:
            conn.executescript("""
                CREATE TABLE IF NOT EXISTS blobs (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                );
            """)
            conn.commit()
        finally:
            conn.close()

    def _get_connection(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self.db_path))
        conn.row_factory = sqlite3.Row
        return conn

    def load(self, key: str) -> Optional[str]:
        conn = self._get_connection()
        try:
            row = conn.execute(
                "SELECT value FROM blobs WHERE key = ?", (key,)
            ).fetchone()
            return row["value"] if row else None
        finally:
            conn.close()

    def save(self, key: str, value: str):
        conn = self._get_connection()
        try:
            now = datetime.now().isoformat()
            conn.execute(
                """INSERT INTO blobs (key, value, updated_at)
                   VALUES (?, ?, ?)
                   ON CONFLICT(key) DO UPDATE SET
                     value = excluded.value,
                     updated_at = excluded.updated_at""",
                (key, value, now)
            )
            conn.commit()
        finally:
            conn.close()

    def delete(self, key: str):
        conn = self._get_connection()
        try:
            conn.execute("DELETE FROM blobs WHERE key = ?", (key,))
            conn.commit()
        finally:
            conn.close()
