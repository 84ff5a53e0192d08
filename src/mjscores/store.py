"""Local tournament store backed by SQLite."""

import json
import logging
import sqlite3
import time
from abc import ABC, abstractmethod

from mjscores.domain import Tournament
from mjscores.errors import StoreError

logger = logging.getLogger("mjscores.store")


class BaseTournamentStore(ABC):
    """
    What the sync orchestrator needs from the local store.

    Writes are staged until commit(); rollback() discards staged writes.
    """

    @abstractmethod
    def insert(self, tournament: Tournament) -> None:
        pass

    @abstractmethod
    def delete(self, tournament: Tournament) -> None:
        pass

    @abstractmethod
    def query_all(self) -> list[Tournament]:
        """Return all tournaments in insertion order."""
        pass

    @abstractmethod
    def commit(self) -> None:
        """
        Make staged writes durable.

        Raises:
            StoreError: If the write fails
        """
        pass

    @abstractmethod
    def rollback(self) -> None:
        pass


class SQLiteTournamentStore(BaseTournamentStore):
    """
    Tournament store in a single SQLite table.

    Each tournament is kept as a JSON document keyed by its local id. Staged
    writes are visible to query_all() on the same store before commit().
    The connection may be used from any thread; callers serialize access
    (SyncOrchestrator holds its batch lock around every write).
    """

    def __init__(self, db_path: str):
        """
        Open (and create if needed) the store.

        Args:
            db_path: Path to SQLite database
        """
        self.db_path = db_path
        try:
            self._conn = sqlite3.connect(db_path, timeout=10.0, check_same_thread=False)
            self._conn.row_factory = sqlite3.Row
        except sqlite3.Error as e:
            logger.error(f"Database connection failed: {e}")
            raise StoreError(f"Cannot open {db_path}: {e}") from e
        self._init_schema()

    def _init_schema(self):
        try:
            self._conn.execute("""
                CREATE TABLE IF NOT EXISTS tournaments (
                    seq INTEGER PRIMARY KEY AUTOINCREMENT,
                    local_id TEXT NOT NULL UNIQUE,
                    rule_set TEXT,
                    start_date TEXT,
                    data TEXT NOT NULL,
                    created_at INTEGER NOT NULL
                )
            """)
            self._conn.commit()
        except sqlite3.Error as e:
            raise StoreError(f"Cannot initialize {self.db_path}: {e}") from e

        count = self._conn.execute("SELECT COUNT(*) FROM tournaments").fetchone()[0]
        logger.debug(f"Tournament store {self.db_path} opened with {count} tournament(s)")

    def insert(self, tournament: Tournament) -> None:
        try:
            self._conn.execute(
                "INSERT INTO tournaments (local_id, rule_set, start_date, data, created_at) "
                "VALUES (?, ?, ?, ?, ?)",
                (
                    tournament.local_id,
                    tournament.rule_set,
                    tournament.start_date,
                    json.dumps(tournament.to_dict()),
                    int(time.time()),
                ),
            )
        except sqlite3.Error as e:
            raise StoreError(f"Failed to insert tournament {tournament.local_id}: {e}") from e

    def delete(self, tournament: Tournament) -> None:
        try:
            self._conn.execute("DELETE FROM tournaments WHERE local_id = ?", (tournament.local_id,))
        except sqlite3.Error as e:
            raise StoreError(f"Failed to delete tournament {tournament.local_id}: {e}") from e

    def query_all(self) -> list[Tournament]:
        try:
            rows = self._conn.execute("SELECT data FROM tournaments ORDER BY seq ASC").fetchall()
        except sqlite3.Error as e:
            raise StoreError(f"Failed to read tournaments: {e}") from e
        return [Tournament.from_dict(json.loads(row["data"])) for row in rows]

    def get(self, local_id: str):
        """Return the tournament with this local id, or None."""
        try:
            row = self._conn.execute(
                "SELECT data FROM tournaments WHERE local_id = ?", (local_id,)
            ).fetchone()
        except sqlite3.Error as e:
            raise StoreError(f"Failed to read tournament {local_id}: {e}") from e
        return Tournament.from_dict(json.loads(row["data"])) if row else None

    def commit(self) -> None:
        try:
            self._conn.commit()
        except sqlite3.Error as e:
            logger.error(f"Commit to {self.db_path} failed: {e}")
            raise StoreError(f"Failed to save tournaments: {e}") from e

    def rollback(self) -> None:
        try:
            self._conn.rollback()
        except sqlite3.Error as e:
            raise StoreError(f"Failed to roll back: {e}") from e

    def close(self) -> None:
        self._conn.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()
