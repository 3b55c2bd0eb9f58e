"""Deduplication store using SQLite to track notified listings."""

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Optional

from ..exceptions import StoreError
from ..models.listing import Listing

logger = logging.getLogger(__name__)


class SeenStore:
    """
    Durable set of listing ids that have already been notified.

    Features:
    - Persist listing ids across restarts
    - Keep a snapshot of street/unit/area/price at notify time
    - Record when a listing was first seen

    Rows are only ever inserted. ``is_new`` and ``mark_seen`` are separate
    calls, so a crash between a delivered notification and ``mark_seen``
    means that listing is sent again on the next poll.
    """

    DEFAULT_DB_PATH = "./apartments.db"

    def __init__(self, db_path: Optional[str] = None):
        self.db_path = db_path or self.DEFAULT_DB_PATH
        self._conn: Optional[sqlite3.Connection] = None
        try:
            self._ensure_db_directory()
            self._conn = sqlite3.connect(self.db_path)
            self._conn.row_factory = sqlite3.Row
            self._init_db()
        except (OSError, sqlite3.Error) as e:
            self.close()
            raise StoreError(f"failed to open database {self.db_path}: {e}") from e

    def _ensure_db_directory(self) -> None:
        """Create the database directory if it doesn't exist."""
        db_dir = Path(self.db_path).parent
        if not db_dir.exists():
            db_dir.mkdir(parents=True, exist_ok=True)
            logger.info(f"Created database directory: {db_dir}")

    @contextmanager
    def _transaction(self):
        """Yield the open connection, committing on success."""
        if self._conn is None:
            raise StoreError("store is closed")
        try:
            yield self._conn
            self._conn.commit()
        except Exception:
            self._conn.rollback()
            raise

    def _init_db(self) -> None:
        """Create the schema if absent."""
        with self._transaction() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS seen_listings (
                    id TEXT PRIMARY KEY,
                    street TEXT,
                    unit TEXT,
                    area_name TEXT,
                    price INTEGER,
                    first_seen_at DATETIME DEFAULT CURRENT_TIMESTAMP
                )
            """)

        logger.debug(f"Database initialized at {self.db_path}")

    def is_new(self, listing_id: str) -> bool:
        """Return True if no record exists for ``listing_id``."""
        try:
            with self._transaction() as conn:
                row = conn.execute(
                    "SELECT 1 FROM seen_listings WHERE id = ? LIMIT 1",
                    (listing_id,),
                ).fetchone()
        except sqlite3.Error as e:
            raise StoreError(f"failed to check listing {listing_id}: {e}") from e

        return row is None

    def mark_seen(self, listing: Listing) -> bool:
        """
        Record ``listing`` as notified.

        Inserting an id that is already present is a no-op.

        Returns:
            True if a new row was written
        """
        try:
            with self._transaction() as conn:
                cursor = conn.execute(
                    """
                    INSERT OR IGNORE INTO seen_listings (id, street, unit, area_name, price)
                    VALUES (?, ?, ?, ?, ?)
                    """,
                    (
                        listing.id,
                        listing.street,
                        listing.unit,
                        listing.area_name,
                        listing.price,
                    ),
                )
                inserted = cursor.rowcount > 0
        except sqlite3.Error as e:
            raise StoreError(f"failed to insert listing {listing.id}: {e}") from e

        if not inserted:
            logger.debug(f"Listing {listing.id} was already recorded")
        return inserted

    def get_stats(self) -> dict:
        """Get statistics about recorded listings."""
        try:
            with self._transaction() as conn:
                row = conn.execute(
                    "SELECT COUNT(*) AS total, MAX(first_seen_at) AS last_seen FROM seen_listings"
                ).fetchone()
        except sqlite3.Error as e:
            raise StoreError(f"failed to read stats: {e}") from e

        return {
            "total_seen": row["total"],
            "last_seen_at": row["last_seen"],
        }

    def close(self) -> None:
        """Close the connection. Safe to call more than once."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None
            logger.debug(f"Database closed at {self.db_path}")

    def __enter__(self) -> "SeenStore":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
