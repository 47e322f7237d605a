"""
SQLite storage adapter.

Snapshots are stored as camelCase JSON, one row per storage key, so a
single database can hold several diagrams. The schema is versioned and
migrated on open.
"""

import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from ...config import DEFAULT_STORAGE_KEY
from ..types import FlatC4Model
from .base import StorageAdapter

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class SQLiteStorage(StorageAdapter):
    """
    Persistent storage using a local SQLite file.

    Every save replaces the row for ``key`` and bumps its revision.
    """

    def __init__(self, db_path: Path, key: str = DEFAULT_STORAGE_KEY):
        self.db_path = Path(db_path)
        self.key = key
        self._init_db()

    @contextmanager
    def _connection(self):
        """Context manager for database connections."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA journal_mode=WAL")
        conn.execute("PRAGMA synchronous=NORMAL")
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _init_db(self) -> None:
        """Initialize database schema with versioning."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        with self._connection() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS schema_version (
                    version INTEGER PRIMARY KEY,
                    applied_at TEXT NOT NULL,
                    description TEXT
                )
            """)

            current_version = self._get_schema_version_internal(conn)
            if current_version < SCHEMA_VERSION:
                self._migrate(conn, current_version)

    def _get_schema_version_internal(self, conn: sqlite3.Connection) -> int:
        row = conn.execute("SELECT MAX(version) as v FROM schema_version").fetchone()
        return row["v"] if row and row["v"] else 0

    def _migrate(self, conn: sqlite3.Connection, from_version: int) -> None:
        if from_version < 1:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS snapshots (
                    key TEXT PRIMARY KEY,
                    payload TEXT NOT NULL,
                    revision INTEGER NOT NULL DEFAULT 1,
                    saved_at TEXT NOT NULL
                )
            """)
            conn.execute("""
                INSERT INTO schema_version (version, applied_at, description)
                VALUES (1, ?, 'Initial schema')
            """, (_now(),))
            logger.info(f"Initialised snapshot schema in {self.db_path}")

    def get_schema_version(self) -> int:
        with self._connection() as conn:
            return self._get_schema_version_internal(conn)

    def save_model(self, model: FlatC4Model) -> None:
        with self._connection() as conn:
            conn.execute("""
                INSERT INTO snapshots (key, payload, revision, saved_at)
                VALUES (?, ?, 1, ?)
                ON CONFLICT(key) DO UPDATE SET
                    payload = excluded.payload,
                    revision = snapshots.revision + 1,
                    saved_at = excluded.saved_at
            """, (self.key, self.encode(model), _now()))

    def load_model(self) -> Optional[FlatC4Model]:
        with self._connection() as conn:
            row = conn.execute(
                "SELECT payload FROM snapshots WHERE key = ?", (self.key,)
            ).fetchone()
        return self.decode(row["payload"]) if row else None

    def list_keys(self) -> List[str]:
        with self._connection() as conn:
            rows = conn.execute("SELECT key FROM snapshots ORDER BY key").fetchall()
        return [row["key"] for row in rows]

    def get_stats(self) -> Dict[str, Any]:
        with self._connection() as conn:
            row = conn.execute(
                "SELECT revision, saved_at FROM snapshots WHERE key = ?", (self.key,)
            ).fetchone()
            return {
                "schema_version": self._get_schema_version_internal(conn),
                "key": self.key,
                "revision": row["revision"] if row else 0,
                "saved_at": row["saved_at"] if row else None,
                "db_size_bytes": self.db_path.stat().st_size if self.db_path.exists() else 0,
            }

    def clear(self) -> None:
        """Delete the snapshot stored under this adapter's key."""
        with self._connection() as conn:
            conn.execute("DELETE FROM snapshots WHERE key = ?", (self.key,))
        logger.info(f"Cleared snapshot {self.key!r}")
