"""Single-slot cache of the last good observation snapshot."""

import logging
import sqlite3
from typing import Protocol

from pydantic import ValidationError

from nimbus.models.observation import ObservationSnapshot

logger = logging.getLogger(__name__)

CACHE_KEY = "latest_observation_snapshot"


class SnapshotStore(Protocol):
    def save(self, snapshot: ObservationSnapshot) -> None: ...

    def load(self) -> ObservationSnapshot | None: ...


class SnapshotCache:
    """Stores one JSON-encoded snapshot under a fixed key; each save overwrites it."""

    def __init__(self, conn: sqlite3.Connection, key: str = CACHE_KEY):
        self.conn = conn
        self.key = key

    def save(self, snapshot: ObservationSnapshot) -> None:
        self.conn.execute(
            "INSERT INTO snapshot_cache (cache_key, payload, updated_at) "
            "VALUES (?, ?, CURRENT_TIMESTAMP) "
            "ON CONFLICT(cache_key) DO UPDATE SET payload = excluded.payload, "
            "updated_at = CURRENT_TIMESTAMP",
            (self.key, snapshot.model_dump_json()),
        )
        self.conn.commit()

    def load(self) -> ObservationSnapshot | None:
        """Return the cached snapshot, or None if absent or unreadable."""
        try:
            row = self.conn.execute(
                "SELECT payload FROM snapshot_cache WHERE cache_key = ?", (self.key,)
            ).fetchone()
        except sqlite3.DatabaseError as e:
            logger.warning("Snapshot cache unreadable: %s", e)
            return None
        if row is None:
            return None
        try:
            return ObservationSnapshot.model_validate_json(row[0])
        except (ValidationError, ValueError, TypeError) as e:
            logger.warning("Discarding incompatible cached snapshot: %s", e)
            return None

    def clear(self) -> None:
        self.conn.execute("DELETE FROM snapshot_cache WHERE cache_key = ?", (self.key,))
        self.conn.commit()
