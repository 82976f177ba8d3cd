"""Query history persistence service.

Every executed query can be recorded with the profile it ran against, its
timing and its row count.  Stored in its own SQLite file inside the current
project directory.
"""

from __future__ import annotations

import sqlite3
import threading
from datetime import UTC, datetime
from pathlib import Path

from loguru import logger

from query_backend.domain.models import QueryHistoryEntry, QueryResult

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

_SCHEMA_SQL = """\
CREATE TABLE IF NOT EXISTS query_history (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    query TEXT NOT NULL,
    connection_name TEXT NOT NULL,
    execution_time_ms INTEGER NOT NULL,
    row_count INTEGER NOT NULL,
    executed_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_query_history_executed_at ON query_history(executed_at);
"""


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


def _utcnow() -> str:
    return datetime.now(UTC).isoformat()


class QueryHistoryService:
    """Append-only log of executed queries stored in a dedicated SQLite file."""

    def __init__(self, db_path: Path) -> None:
        self.db_path = db_path
        self.conn: sqlite3.Connection | None = None
        # Serialises statement and commit pairs on the shared connection
        self._lock = threading.Lock()

    def connect(self) -> None:
        """Open (or create) the database and ensure the schema exists."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.conn = sqlite3.connect(str(self.db_path), check_same_thread=False)
        self.conn.row_factory = sqlite3.Row
        self.conn.execute("PRAGMA journal_mode=WAL")
        self.conn.executescript(_SCHEMA_SQL)
        self.conn.commit()
        logger.info("Query history DB ready at {}", self.db_path)

    def close(self) -> None:
        with self._lock:
            if self.conn:
                self.conn.close()
                self.conn = None

    def add_entry(
        self, query: str, connection_name: str, execution_time_ms: int, row_count: int
    ) -> QueryHistoryEntry:
        """Record one executed query and return the stored entry."""
        now = _utcnow()
        with self._lock:
            assert self.conn
            cursor = self.conn.execute(
                "INSERT INTO query_history "
                "(query, connection_name, execution_time_ms, row_count, executed_at) "
                "VALUES (?, ?, ?, ?, ?)",
                (query, connection_name, execution_time_ms, row_count, now),
            )
            self.conn.commit()
        return QueryHistoryEntry(
            id=int(cursor.lastrowid or 0),
            query=query,
            connection_name=connection_name,
            execution_time_ms=execution_time_ms,
            row_count=row_count,
            executed_at=now,
        )

    def record_result(
        self, query: str, connection_name: str, result: QueryResult
    ) -> QueryHistoryEntry:
        """Record a finished query using the timing and row count of its result."""
        return self.add_entry(
            query=query,
            connection_name=connection_name,
            execution_time_ms=result.execution_time_ms,
            row_count=result.row_count,
        )

    def recent(self, limit: int = 50) -> list[QueryHistoryEntry]:
        """Return the most recent entries, newest first."""
        with self._lock:
            assert self.conn
            rows = self.conn.execute(
                "SELECT id, query, connection_name, execution_time_ms, row_count, executed_at "
                "FROM query_history ORDER BY executed_at DESC, id DESC LIMIT ?",
                (limit,),
            ).fetchall()
        return [self._row_to_entry(row) for row in rows]

    def clear(self) -> None:
        with self._lock:
            assert self.conn
            self.conn.execute("DELETE FROM query_history")
            self.conn.commit()
        logger.info("Cleared query history")

    @staticmethod
    def _row_to_entry(row: sqlite3.Row) -> QueryHistoryEntry:
        return QueryHistoryEntry(
            id=row["id"],
            query=row["query"],
            connection_name=row["connection_name"],
            execution_time_ms=row["execution_time_ms"],
            row_count=row["row_count"],
            executed_at=row["executed_at"],
        )
