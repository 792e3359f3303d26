"""SQLite journal store for Chronos."""

import json
import logging
import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Any, Iterable, Optional

from chronos.errors import PersistenceError
from chronos.models import Trade

logger = logging.getLogger(__name__)


class JournalStore:
    """SQLite-backed snapshot store for the trade journal.

    Each trade is one row holding its camelCase JSON payload, images
    included. ``save`` replaces the whole snapshot in a single transaction.
    """

    REQUIRED_TABLES = [
        "trades",
        "meta",
    ]

    def __init__(self, db_path: Path, max_snapshot_bytes: Optional[int] = None):
        """Initialize the journal store.

        Args:
            db_path: Path to the SQLite database file.
            max_snapshot_bytes: Log a warning when a saved snapshot
                exceeds this size. None disables the check.
        """
        self.db_path = db_path
        self.max_snapshot_bytes = max_snapshot_bytes
        self._ensure_db_dir()
        self._init_schema()

    def _ensure_db_dir(self) -> None:
        """Ensure the database directory exists."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def _get_connection(self) -> sqlite3.Connection:
        """Get a database connection."""
        try:
            conn = sqlite3.connect(self.db_path)
        except sqlite3.Error as e:
            raise PersistenceError(f"Cannot open journal database {self.db_path}: {e}") from e
        conn.row_factory = sqlite3.Row
        return conn

    def _init_schema(self) -> None:
        """Initialize database schema on first run."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS trades (
                    id TEXT PRIMARY KEY,
                    created_at INTEGER,
                    payload TEXT NOT NULL
                )
            """)

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS meta (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                )
            """)

            conn.commit()
        except sqlite3.Error as e:
            raise PersistenceError(f"Cannot initialize journal schema: {e}") from e
        finally:
            conn.close()

    def get_tables(self) -> list[str]:
        """Get list of all tables in the database."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT name FROM sqlite_master WHERE type='table' AND name NOT LIKE 'sqlite_%'"
            )
            return [row["name"] for row in cursor.fetchall()]
        finally:
            conn.close()

    # ==================== Snapshot ====================

    def save(self, trades: Iterable[Trade]) -> None:
        """Replace the stored journal with ``trades``.

        Args:
            trades: The complete collection to persist.

        Raises:
            PersistenceError: If the write fails. The previous snapshot
                is left intact.
        """
        rows = [
            (trade.id, trade.created_at, json.dumps(trade.to_record()))
            for trade in trades
        ]
        size = sum(len(payload) for _, _, payload in rows)
        if self.max_snapshot_bytes is not None and size > self.max_snapshot_bytes:
            logger.warning(
                "Journal snapshot is %d bytes (limit %d); embedded images dominate its size",
                size,
                self.max_snapshot_bytes,
            )

        conn = self._get_connection()
        try:
            with conn:
                conn.execute("DELETE FROM trades")
                conn.executemany(
                    "INSERT INTO trades (id, created_at, payload) VALUES (?, ?, ?)",
                    rows,
                )
                conn.execute(
                    "INSERT OR REPLACE INTO meta (key, value) VALUES ('last_saved_at', ?)",
                    (datetime.now().isoformat(),),
                )
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to save journal: {e}") from e
        finally:
            conn.close()
        logger.debug("Saved %d trade(s), %d bytes", len(rows), size)

    def load(self) -> Optional[list[Any]]:
        """Load the stored records.

        Returns:
            Decoded camelCase records ordered by commit time, or None if
            the journal was never saved. A row that is not valid JSON is
            returned as its raw text so record admission can report it.

        Raises:
            PersistenceError: If the database cannot be read.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute("SELECT value FROM meta WHERE key = 'last_saved_at'")
            if cursor.fetchone() is None:
                return None
            cursor.execute("SELECT id, payload FROM trades ORDER BY created_at, rowid")
            rows = cursor.fetchall()
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to load journal: {e}") from e
        finally:
            conn.close()

        records = []
        for row in rows:
            try:
                records.append(json.loads(row["payload"]))
            except json.JSONDecodeError:
                logger.warning("Journal row %s is not valid JSON", row["id"])
                records.append(row["payload"])
        return records

    def last_saved_at(self) -> Optional[datetime]:
        """When the journal was last saved, if ever."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute("SELECT value FROM meta WHERE key = 'last_saved_at'")
            row = cursor.fetchone()
            return datetime.fromisoformat(row["value"]) if row else None
        finally:
            conn.close()
